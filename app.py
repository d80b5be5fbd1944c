# app.py: web front end; progress endpoint is no-cache
from __future__ import annotations
import os
import time
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, request, render_template, send_from_directory, jsonify, url_for

from board import create_board
from config import CFG
from io_files import write_solutions, write_layout_view_html
from render import render_result
from shapes import GeometryError
from solver.driver import SolverDriver
from solver.initial_state import InitialStateError

from progress import (
    reset as progress_reset,
    as_json as progress_json,
    start_timer as progress_start,
    set_status, set_board, set_elapsed, set_done, set_result_url,
    _fmt_elapsed,
)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Only this many solutions get an SVG on the result page.
MAX_RENDERED_SOLUTIONS = 50


def _resolve_output_paths(configured: str, fallback: str) -> Tuple[str, str, str]:
    name = (configured or "").strip() or fallback
    if os.path.isabs(name):
        full_path = name
    else:
        full_path = os.path.abspath(os.path.join(BASE_DIR, name))
    directory = os.path.dirname(full_path) or BASE_DIR
    filename = os.path.basename(full_path) or fallback
    return full_path, directory, filename


_SOLUTIONS_FULL_PATH, SOLUTIONS_DIR, SOLUTIONS_FILENAME = _resolve_output_paths(
    CFG.SOLUTIONS_OUT, "solutions.txt"
)
_LAYOUT_FULL_PATH, LAYOUT_DIR, LAYOUT_FILENAME = _resolve_output_paths(
    CFG.LAYOUT_HTML, "layout_view.html"
)

LAST_RESULT: Dict[str, Any] = {
    "ok": False,
    "board": "",
    "summary": "found 0 solutions",
    "reason": "",
    "count": 0,
    "attempts": 0,
    "elapsed_str": "0s",
    "solutions": [],
    "legend": "",
    "solutions_filename": SOLUTIONS_FILENAME,
    "layout_filename": LAYOUT_FILENAME,
}

app = Flask(__name__, static_folder=None, template_folder="templates")


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress3":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.route("/")
def index():
    return jsonify({
        "service": "kanoodle solver",
        "solve": {
            "method": "POST",
            "path": "/solve",
            "fields": ["board", "initial_state", "start_at", "stop_at",
                       "allow_backtracking", "max_solutions"],
        },
        "progress": "/progress3",
        "latest": "/result/latest",
    })


@app.route("/result/latest")
def result_latest():
    return render_template("result.html", **LAST_RESULT)


def _merge_like_mapping() -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        merged.update(payload)

    form_dict = request.form.to_dict(flat=False)
    for k, v in form_dict.items():
        merged.setdefault(k, v if len(v) != 1 else v[0])

    args_dict = request.args.to_dict(flat=False)
    for k, v in args_dict.items():
        merged.setdefault(k, v if len(v) != 1 else v[0])

    return merged


def _parse_flag(value: Any) -> Optional[bool]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _parse_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(float(value))


def _finalize_solver_progress(ok_flag: bool, summary_text: str) -> None:
    """Write the terminal solver status without clobbering failure states."""

    set_status("Solved" if ok_flag else "error")
    set_done(ok_flag, reason=summary_text)


def _store_result(result, t0: float) -> List[Dict[str, Any]]:
    rendered: List[Dict[str, Any]] = []
    legend = ""
    for solution in result.solutions[:MAX_RENDERED_SOLUTIONS]:
        layer_rows = [block.split("\n") for block in solution.layers]
        svg, legend = render_result(layer_rows)
        rendered.append({"index": solution.index, "path": solution.path, "svg": svg})

    solutions_name = SOLUTIONS_FILENAME
    layout_name = LAYOUT_FILENAME
    try:
        solutions_path = write_solutions(result, BASE_DIR)
        solutions_name = os.path.basename(solutions_path) or SOLUTIONS_FILENAME
        if rendered:
            layout_path = write_layout_view_html(
                rendered[0]["svg"], legend, BASE_DIR, title=rendered[0]["path"]
            )
            layout_name = os.path.basename(layout_path) or LAYOUT_FILENAME
    except OSError as exc:
        app.logger.warning("Could not write solver outputs: %s", exc)

    LAST_RESULT.update({
        "ok": result.ok,
        "board": result.board_kind,
        "summary": result.summary,
        "reason": result.reason,
        "count": result.count,
        "attempts": result.attempts,
        "elapsed_str": _fmt_elapsed(time.time() - t0),
        "solutions": rendered,
        "legend": legend,
        "solutions_filename": solutions_name,
        "layout_filename": layout_name,
    })
    return rendered


@app.route("/solve", methods=["POST"])
def solve():
    progress_reset()
    progress_start()
    set_status("Solving")

    t0 = time.time()
    like = _merge_like_mapping()
    board_kind = like.get("board") or CFG.BOARD
    set_board(board_kind)

    try:
        board = create_board(board_kind)
        driver = SolverDriver(
            board,
            stop_path=like.get("stop_at"),
            allow_backtracking=_parse_flag(like.get("allow_backtracking")),
            max_solutions=_parse_int(like.get("max_solutions")),
        )
        driver.initialize(like.get("initial_state"), like.get("start_at"))
        result = driver.run()
    except (InitialStateError, GeometryError, ValueError) as exc:
        reason = f"{type(exc).__name__}: {exc}"
        _finalize_solver_progress(False, reason)
        LAST_RESULT.update({
            "ok": False,
            "board": board_kind,
            "summary": "found 0 solutions",
            "reason": reason,
            "count": 0,
            "attempts": 0,
            "elapsed_str": _fmt_elapsed(time.time() - t0),
            "solutions": [],
            "legend": "",
        })
        set_result_url(url_for("result_latest"))
        return jsonify({"ok": False, "reason": reason}), 400

    _store_result(result, t0)
    _finalize_solver_progress(True, result.summary)
    set_elapsed(time.time() - t0)
    set_result_url(url_for("result_latest"))

    payload = result.as_dict()
    payload["result_url"] = url_for("result_latest")
    return jsonify(payload)


@app.route("/download/solutions")
def download_solutions():
    return send_from_directory(SOLUTIONS_DIR, SOLUTIONS_FILENAME, as_attachment=True)


@app.route("/download/html")
def download_html():
    return send_from_directory(LAYOUT_DIR, LAYOUT_FILENAME, as_attachment=True)


@app.route("/progress3")
def progress3():
    return jsonify(progress_json())


if __name__ == "__main__":
    app.run(debug=False)
