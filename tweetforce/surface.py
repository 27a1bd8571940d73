from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence
from xml.sax.saxutils import escape

__all__ = [
    "RenderSurface",
    "PointBatch",
    "TextItem",
    "GradientRect",
    "RecordingSurface",
]

GradientStops = Sequence[tuple[float, str]]


class RenderSurface(Protocol):
    """Drawing boundary used by the engine.

    Items are drawn into named groups in layout coordinates (origin at the
    top-left of the inner canvas, y growing downwards). ``remove_group``
    discards every item of a group.
    """

    def remove_group(self, group: str) -> None: ...

    def draw_points(self, group: str, xs: Sequence[float], ys: Sequence[float],
                    radius: float, fills: Sequence[str], strokes: Sequence[str | None],
                    stroke_widths: Sequence[float], keys: Sequence[int]) -> None: ...

    def draw_text(self, group: str, x: float, y: float, text: str,
                  anchor: str = "start", size: float = 12, bold: bool = False) -> None: ...

    def draw_gradient_rect(self, group: str, x: float, y: float, width: float,
                           height: float, stops: GradientStops) -> None: ...


# ─── recorded primitives ──────────────────────────────────────────────────
@dataclass(frozen=True)
class PointBatch:
    xs: tuple[float, ...]
    ys: tuple[float, ...]
    radius: float
    fills: tuple[str, ...]
    strokes: tuple[str | None, ...]
    stroke_widths: tuple[float, ...]
    keys: tuple[int, ...]


@dataclass(frozen=True)
class TextItem:
    x: float
    y: float
    text: str
    anchor: str = "start"
    size: float = 12
    bold: bool = False


@dataclass(frozen=True)
class GradientRect:
    x: float
    y: float
    width: float
    height: float
    stops: tuple[tuple[float, str], ...]


@dataclass
class RecordingSurface:
    """In-memory surface. Keeps primitives per group; can be written out as SVG."""

    width: float = 800.0
    height: float = 600.0
    offset: tuple[float, float] = (0.0, 0.0)
    groups: dict[str, list] = field(default_factory=dict)
    removals: int = 0

    def remove_group(self, group):
        if self.groups.pop(group, None) is not None:
            self.removals += 1

    def draw_points(self, group, xs, ys, radius, fills, strokes, stroke_widths, keys):
        self.groups.setdefault(group, []).append(PointBatch(
            tuple(float(x) for x in xs), tuple(float(y) for y in ys), float(radius),
            tuple(fills), tuple(strokes), tuple(float(w) for w in stroke_widths),
            tuple(int(k) for k in keys),
        ))

    def draw_text(self, group, x, y, text, anchor="start", size=12, bold=False):
        self.groups.setdefault(group, []).append(TextItem(float(x), float(y), text, anchor, size, bold))

    def draw_gradient_rect(self, group, x, y, width, height, stops):
        self.groups.setdefault(group, []).append(
            GradientRect(float(x), float(y), float(width), float(height),
                         tuple((float(o), c) for o, c in stops)))

    def items(self, group: str) -> list:
        return list(self.groups.get(group, []))

    # ------------------------------------------------------------------
    def to_svg(self) -> str:
        ox, oy = self.offset
        out = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{self.width:g}" height="{self.height:g}">',
            "<defs>",
        ]
        body = [f'<g transform="translate({ox:g},{oy:g})">']
        grad_id = 0
        for name, items in self.groups.items():
            body.append(f'<g class="{escape(name)}">')
            for item in items:
                if isinstance(item, PointBatch):
                    for x, y, fill, stroke, sw, key in zip(item.xs, item.ys, item.fills,
                                                           item.strokes, item.stroke_widths, item.keys):
                        stroke_attr = f' stroke="{stroke}" stroke-width="{sw:g}"' if stroke else ""
                        body.append(f'<circle data-idx="{key}" cx="{x:.2f}" cy="{y:.2f}" '
                                    f'r="{item.radius:g}" fill="{fill}"{stroke_attr}/>')
                elif isinstance(item, TextItem):
                    weight = ' font-weight="bold"' if item.bold else ""
                    body.append(f'<text x="{item.x:g}" y="{item.y:g}" text-anchor="{item.anchor}" '
                                f'font-size="{item.size:g}"{weight}>{escape(item.text)}</text>')
                elif isinstance(item, GradientRect):
                    grad_id += 1
                    out.append(f'<linearGradient id="grad-{grad_id}" x1="0" y1="0" x2="0" y2="1">')
                    out.extend(f'<stop offset="{o:.0%}" stop-color="{c}"/>' for o, c in item.stops)
                    out.append("</linearGradient>")
                    body.append(f'<rect x="{item.x:g}" y="{item.y:g}" width="{item.width:g}" '
                                f'height="{item.height:g}" fill="url(#grad-{grad_id})"/>')
            body.append("</g>")
        body.append("</g>")
        out.append("</defs>")
        return "\n".join(out + body + ["</svg>"])
