import pytest

import progress
from board import PyramidBoard, RectangleBoard
from pieces import PieceCatalog, standard_catalog
from solver.driver import (
    REASON_EXHAUSTED, REASON_MAX_SOLUTIONS, REASON_STOP_PATH,
    SolverDriver, find_solutions,
)
from solver.initial_state import InitialStateError


def dominoes():
    return PieceCatalog.from_outlines({"A": "AA", "B": "BB"})


def domino_and_square():
    return PieceCatalog.from_outlines({"A": "AA", "B": "BB\nBB"})


def _run(board, catalog, **kwargs):
    initial_state = kwargs.pop("initial_state", None)
    start_at = kwargs.pop("start_at", None)
    kwargs.setdefault("stop_path", "")
    kwargs.setdefault("allow_backtracking", False)
    kwargs.setdefault("max_solutions", 0)
    driver = SolverDriver(board, catalog, **kwargs)
    driver.initialize(initial_state, start_at)
    return driver.run()


def test_domino_and_square_have_two_solutions():
    result = _run(RectangleBoard(2, 3), domino_and_square())
    assert result.paths == ["A[01]; B[00]", "B[00]; A[01]"]
    assert result.summary == "found 2 solutions"
    assert result.reason == REASON_EXHAUSTED
    assert result.attempts == 7
    assert result.solutions[0].layers == ("ABB\nABB",)
    assert result.solutions[1].text == "B B A\nB B A\n"


def test_every_labelled_domino_tiling_is_reported_once_in_order():
    result = _run(RectangleBoard(2, 2), dominoes())
    assert result.paths == [
        "A[00]; B[00]",
        "A[01]; B[01]",
        "B[00]; A[00]",
        "B[01]; A[01]",
    ]
    assert result.paths == sorted(set(result.paths))


def test_stop_path_equal_to_first_solution_reports_nothing():
    result = _run(RectangleBoard(2, 3), domino_and_square(), stop_path="A[01]; B[00]")
    assert result.count == 0
    assert result.summary == "found 0 solutions"
    assert result.reason == REASON_STOP_PATH
    assert not result.ok


def test_stop_path_is_strictly_exclusive():
    result = _run(RectangleBoard(2, 3), domino_and_square(), stop_path=["B[00]", "A[01]"])
    assert result.paths == ["A[01]; B[00]"]
    assert result.reason == REASON_STOP_PATH


def test_max_solutions_ends_early():
    result = _run(RectangleBoard(2, 2), dominoes(), max_solutions=1)
    assert result.paths == ["A[00]; B[00]"]
    assert result.reason == REASON_MAX_SOLUTIONS


def test_on_solution_sees_the_solved_board():
    seen = []

    def collect(solution, board):
        assert board.solved()
        seen.append((solution.index, solution.path))

    _run(RectangleBoard(2, 3), domino_and_square(), on_solution=collect)
    assert seen == [(1, "A[01]; B[00]"), (2, "B[00]; A[01]")]


def test_start_at_places_all_but_last_and_keeps_them():
    result = _run(RectangleBoard(2, 3), domino_and_square(), start_at="A[01]; B[00]")
    assert result.paths == ["A[01]; B[00]"]
    assert result.initial_path == "A[01]"


def test_start_at_with_backtracking_continues_past_the_start():
    result = _run(
        RectangleBoard(2, 3), domino_and_square(),
        start_at=["A[01]", "B[00]"], allow_backtracking=True,
    )
    assert result.paths == ["A[01]; B[00]", "B[00]; A[01]"]


def test_start_at_rejects_unknown_orientation():
    driver = SolverDriver(RectangleBoard(2, 3), domino_and_square())
    with pytest.raises(InitialStateError):
        driver.initialize(None, "A[07]")


def test_full_initial_state_is_reported_once():
    result = _run(RectangleBoard(2, 2), dominoes(), initial_state="AB\nAB")
    assert result.paths == ["A[01]; B[01]"]
    assert result.attempts == 0


def test_initial_state_without_backtracking_limits_the_search():
    result = _run(RectangleBoard(2, 2), dominoes(), initial_state="AA\n..")
    assert result.paths == ["A[00]; B[00]"]


def test_real_catalog_initializes_after_preset_piece():
    board = RectangleBoard()
    text = "\n".join(["KK.........", "KK........."] + ["..........."] * 3)
    driver = SolverDriver(board, standard_catalog(False), allow_backtracking=False)
    first = driver.initialize(text)
    assert first.token == "A[00]"
    assert driver.cursor.path() == "K[00]"
    assert driver.cursor.floor == 1
    assert board.grid.at(0, 1, 1) == "K"


def test_find_solutions_marks_progress_done():
    result = find_solutions(
        board=RectangleBoard(2, 3), catalog=domino_and_square(), stop_at="", max_solutions=0,
    )
    assert result.count == 2
    snap = progress.snapshot()
    assert snap["done"] is True
    assert snap["status"] == "Solved"
    assert snap["solutions"] == 2


def test_find_solutions_reports_bad_initial_state():
    with pytest.raises(InitialStateError):
        find_solutions(
            initial_state="AA\nA.", board=RectangleBoard(2, 2), catalog=dominoes(), stop_at="",
        )
    snap = progress.snapshot()
    assert snap["status"] == "Error"
    assert snap["ok"] is False


def test_result_as_dict_is_json_ready():
    data = _run(RectangleBoard(2, 3), domino_and_square()).as_dict()
    assert data["count"] == 2
    assert data["summary"] == "found 2 solutions"
    assert data["solutions"][0] == {"index": 1, "path": "A[01]; B[00]", "layers": ["ABB\nABB"]}


def test_pyramid_search_places_pieces_across_layers():
    catalog = PieceCatalog.from_outlines({"A": "AA", "B": "B\nBB"}, three_d=True)
    result = _run(PyramidBoard(2), catalog)
    assert result.paths == [
        "A[02]; B[03]",
        "B[00]; A[05]",
        "B[01]; A[04]",
        "B[02]; A[03]",
    ]
    for solution in result.solutions:
        assert len(solution.layers) == 2
        assert solution.layers[1] != "."


def test_leftover_pieces_keep_a_filled_board_from_counting():
    # Solutions must use every piece: filling the strip with J alone is not one.
    result = _run(RectangleBoard(1, 4), standard_catalog(False))
    assert result.count == 0
    assert result.reason == REASON_EXHAUSTED
