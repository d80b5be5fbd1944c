import random
from typing import Dict, List, Sequence, Tuple

from config import CFG


def _color(name: str) -> str:
    rng = random.Random(name)
    r = rng.randint(40, 200)
    g = rng.randint(40, 200)
    b = rng.randint(40, 200)
    return f"rgb({r},{g},{b})"


def render_text(layer_rows: Sequence[Sequence[str]]) -> str:
    """Layers from highest to lowest, each printed one space further right."""
    lines: List[str] = []
    for depth, layer in enumerate(reversed(list(layer_rows))):
        indent = " " * depth
        for row in layer:
            lines.append(indent + " ".join(row))
        lines.append("")
    return "\n".join(lines).rstrip("\n") + "\n"


def render_result(layer_rows: Sequence[Sequence[str]], empty: str = None) -> Tuple[str, str]:
    """Return (svg, legend_html) with the layers drawn side by side."""
    if empty is None:
        empty = CFG.EMPTY_CELL

    palette: Dict[str, str] = {}
    for layer in layer_rows:
        for row in layer:
            for ch in row:
                if ch != empty:
                    palette.setdefault(ch, _color(ch))

    scale = 32
    gap = scale
    widths = [max((len(row) for row in layer), default=0) for layer in layer_rows]
    heights = [len(layer) for layer in layer_rows]
    svg_w = sum(w * scale for w in widths) + gap * max(0, len(widths) - 1) + 2
    svg_h = max(heights, default=0) * scale + 2

    rects = []
    x0 = 1
    for layer, width in zip(layer_rows, widths):
        rects.append(
            f'<rect x="{x0}" y="1" width="{width * scale}" height="{len(layer) * scale}" '
            f'fill="none" stroke="black" stroke-width="2"/>'
        )
        for r, row in enumerate(layer):
            for c, ch in enumerate(row):
                if ch == empty:
                    continue
                x = x0 + c * scale
                y = 1 + r * scale
                rects.append(
                    f'<rect x="{x}" y="{y}" width="{scale}" height="{scale}" fill="{palette[ch]}" stroke="black" stroke-width="1"/>'
                    f'<text x="{x + scale // 3}" y="{y + (2 * scale) // 3}" font-size="12" fill="black">{ch}</text>'
                )
        x0 += width * scale + gap

    svg = (
        f'<svg class="layout-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{"".join(rects)}</svg>'
    )

    legend = "".join(
        f"<li><span class='swatch' style='background:{c}'></span>{n}</li>"
        for n, c in sorted(palette.items())
    )
    return svg, legend
