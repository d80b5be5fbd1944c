"""Helpers for writing solver outputs to disk."""

from __future__ import annotations

import os
from typing import Optional

from config import CFG


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def write_solutions(result, base_dir: str, path: Optional[str] = None) -> str:
    """Write every solution's path and board, followed by the summary line.

    An empty result is written as the single line ``No solution``.
    """

    if path is None:
        path = _resolve_output_path(base_dir, CFG.SOLUTIONS_OUT, "solutions.txt")
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        if not result.solutions:
            f.write("No solution\n")
            return path
        for solution in result.solutions:
            f.write(f"{solution.path}\n")
            f.write(solution.text)
            f.write("\n")
        f.write(f"{result.summary}\n")
    return path


def write_layout_view_html(svg: str, legend_html: str, base_dir: str, *, title: Optional[str] = None) -> str:
    """Write the rendered SVG/legend preview to the configured HTML file."""

    path = _resolve_output_path(base_dir, CFG.LAYOUT_HTML, "layout_view.html")
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    heading = title or "Layout View"
    with open(path, "w", encoding="utf-8") as vf:
        vf.write(
            f"""<!doctype html>
<html><head><meta charset='utf-8'><title>{heading}</title></head>
<body class='container'>
<h1>{heading}</h1>
<section class='card'><div class='gridwrap'>{svg}</div></section>
<section class='card'><h3>Legend</h3><ul>{legend_html}</ul></section>
</body></html>"""
        )
    return path


__all__ = ["write_solutions", "write_layout_view_html"]
