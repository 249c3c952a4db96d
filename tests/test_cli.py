import json

from taksim.cli import format_board, main, piece_char
from taksim.core import BLACK, CAPSTONE, FLAT, STANDING, WHITE, Stone, TakState


class TestFormatBoard:
    def test_piece_chars(self):
        assert piece_char(Stone(WHITE, FLAT)) == "w"
        assert piece_char(Stone(WHITE, STANDING)) == "W"
        assert piece_char(Stone(BLACK, CAPSTONE)) == "K"

    def test_empty_board(self):
        text = format_board(TakState(3))
        lines = text.splitlines()
        assert lines[0].split() == ["a", "b", "c"]
        assert lines[1].split() == ["3", ".", ".", "."]
        assert "White: stones=10, caps=0" in text
        assert text.endswith("To move: White")

    def test_stacks_print_bottom_first(self, play):
        state = play("a1 e5 Cc3 d3 c3>")
        lines = format_board(state).splitlines()
        assert lines[3].split() == ["3", ".", ".", ".", "bC", "."]
        assert lines[5].split() == ["1", "b", ".", ".", ".", "."]
        assert "White: stones=20, caps=0" in lines


class TestReplay:
    def test_road_game(self, capsys):
        assert main(["replay", "--size", "3", "a1 c3 a3 b1 b3"]) == 0
        out = capsys.readouterr().out
        assert "TPS: 1,1,1/x3/2,2,x 2 3" in out
        assert "Result: R-0 (white wins by road)" in out

    def test_from_file_with_stats(self, tmp_path, capsys):
        path = tmp_path / "game.ptn"
        path.write_text("1. a1 e5\n2. Cc3 d3\n")
        assert main(["replay", "--file", str(path), "--stats"]) == 0
        out = capsys.readouterr().out
        assert "Result: 0-0 (ongoing)" in out
        assert '"road_dominance"' in out

    def test_from_tps(self, capsys):
        assert main(["replay", "--tps", "x3/x3/1,1,x 1 3", "c1"]) == 0
        assert "R-0" in capsys.readouterr().out

    def test_illegal_move(self, capsys):
        assert main(["replay", "a1 a1"]) == 1
        assert "Illegal move #2 (CellOccupied)" in capsys.readouterr().out

    def test_bad_input(self, capsys):
        assert main(["replay", "a1 zz"]) == 2
        assert "Input error" in capsys.readouterr().out


class TestSelfplay:
    def test_writes_json_lines(self, tmp_path, capsys):
        out = tmp_path / "games.jsonl"
        code = main(
            ["selfplay", "--games", "3", "--size", "3", "--quiet", "--out", str(out)]
        )
        assert code == 0
        lines = out.read_text().splitlines()
        assert len(lines) == 3
        game = json.loads(lines[0])
        assert game["size"] == 3
        assert game["plies"] == len(game["moves"])
        printed = capsys.readouterr().out
        summary = json.loads(printed[printed.index("{"):])
        assert sum(summary.values()) == 3
