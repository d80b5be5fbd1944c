import pytest

import cli
import solver.driver
from config import CFG
from pieces import PieceCatalog


@pytest.fixture
def strip_board(monkeypatch):
    # A 1x4 strip filled by a single straight four-cell piece.
    monkeypatch.setattr(CFG, "RECT_ROWS", 1)
    monkeypatch.setattr(CFG, "RECT_COLS", 4)
    monkeypatch.setattr(
        solver.driver, "standard_catalog",
        lambda three_d=False: PieceCatalog.from_outlines({"J": "JJJJ"}, three_d=three_d),
    )


def test_cli_prints_solutions_and_summary(strip_board, capsys):
    assert cli.main(["--board", "rectangle"]) == 0
    out = capsys.readouterr().out
    assert "Finding solutions for rectangle board" in out
    assert "Ending at NO-LIMIT" in out
    assert "J[00]\nJ J J J\n" in out
    assert out.rstrip().endswith("found 1 solutions")


def test_cli_quiet_only_prints_summary_lines(strip_board, capsys):
    assert cli.main(["--board", "rectangle", "-q"]) == 0
    out = capsys.readouterr().out
    assert "J J J J" not in out
    assert "found 1 solutions" in out


def test_cli_reads_initial_state_and_writes_output(strip_board, tmp_path, capsys):
    state = tmp_path / "state.txt"
    state.write_text("JJJJ\n", encoding="utf-8")
    out_file = tmp_path / "out" / "solutions.txt"

    code = cli.main([
        "--board", "rectangle", "--initial-state", str(state), "--out", str(out_file), "-q",
    ])

    assert code == 0
    assert out_file.read_text(encoding="utf-8") == "J[00]\nJ J J J\n\nfound 1 solutions\n"


def test_cli_stop_at_bounds_the_run(strip_board, capsys):
    assert cli.main(["--board", "rectangle", "--stop-at", "J[00]"]) == 0
    out = capsys.readouterr().out
    assert "Ending at J[00]" in out
    assert "found 0 solutions" in out


def test_cli_reports_bad_tokens(capsys):
    assert cli.main(["--stop-at", "bogus!!"]) == 2
    assert "error: Bad piece token" in capsys.readouterr().err


def test_cli_reports_bad_initial_state(strip_board, tmp_path, capsys):
    state = tmp_path / "state.txt"
    state.write_text("Z...\n", encoding="utf-8")
    assert cli.main(["--initial-state", str(state)]) == 2
    assert "Unexpected character" in capsys.readouterr().err


def test_parser_rejects_unknown_board():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--board", "hexagon"])
