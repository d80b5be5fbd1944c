# config.py
import os

# ======= Board geometry =======
BOARD         = os.getenv("KN_BOARD", "rectangle").strip().lower()
RECT_ROWS     = int(os.getenv("KN_RECT_ROWS", "5"))
RECT_COLS     = int(os.getenv("KN_RECT_COLS", "11"))
PYRAMID_BASE  = int(os.getenv("KN_PYRAMID_BASE", "5"))

# Character used for an unoccupied board cell, both in the initial-state
# text and in rendered boards.  Rows are whitespace-trimmed, so a blank
# marker falls back to ".".
EMPTY_CELL    = (os.getenv("KN_EMPTY_CELL", ".").strip() or ".")[0]

# ======= Search bounds =======
# By default the caller-supplied initial placements are never undone.
ALLOW_BACKTRACKING = int(os.getenv("KN_ALLOW_BACKTRACKING", "0")) != 0

# Placement path (e.g. "A[00]; B[03]") that bounds enumeration; empty means
# every solution is reported.
STOP_AT       = os.getenv("KN_STOP_AT", "").strip()

# 0 disables the cap.
MAX_SOLUTIONS = int(os.getenv("KN_MAX_SOLUTIONS", "0"))

# ======= Progress publishing =======
PROGRESS_EVERY = int(os.getenv("KN_PROGRESS_EVERY", "5000"))

# ======= Output names =======
SOLUTIONS_OUT = os.getenv("KN_SOLUTIONS_OUT", "solutions.txt")
LAYOUT_HTML   = os.getenv("KN_LAYOUT_HTML", "layout_view.html")


class CFG:
    BOARD        = BOARD
    RECT_ROWS    = RECT_ROWS
    RECT_COLS    = RECT_COLS
    PYRAMID_BASE = PYRAMID_BASE
    EMPTY_CELL   = EMPTY_CELL

    ALLOW_BACKTRACKING = ALLOW_BACKTRACKING
    STOP_AT            = STOP_AT
    MAX_SOLUTIONS      = MAX_SOLUTIONS

    PROGRESS_EVERY = PROGRESS_EVERY

    SOLUTIONS_OUT = SOLUTIONS_OUT
    LAYOUT_HTML   = LAYOUT_HTML


__all__ = ["CFG"]
