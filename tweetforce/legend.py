from __future__ import annotations

from dataclasses import dataclass

from .color_scales import ColorScale, scale_for
from .config import LEGEND_HEIGHT, LEGEND_LABEL_GAP, LEGEND_WIDTH, LEGEND_X, LayoutConfig
from .records import SENTIMENT, SUBJECTIVITY, check_attribute
from .surface import RenderSurface

LEGEND_GROUP = "legend"

# (top, bottom) label per attribute; top is the high end of the scale
LEGEND_LABELS: dict[str, tuple[str, str]] = {
    SENTIMENT: ("Positive", "Negative"),
    SUBJECTIVITY: ("Subjective", "Objective"),
}


@dataclass(frozen=True)
class LegendSpec:
    attribute: str
    stops: tuple[tuple[float, str], ...]   # offset in [0, 1] from the top
    labels: tuple[str, str]


def gradient_stops(scale: ColorScale) -> tuple[tuple[float, str], ...]:
    """Vertical gradient stops for ``scale``, highest domain value at offset 0."""
    lo, hi = scale.extent
    stops = [((hi - d) / (hi - lo), c) for d, c in zip(scale.domain, scale.colors)]
    return tuple(sorted(stops))


class LegendRenderer:
    """Draws the gradient bar and its two extreme labels for the active attribute."""

    def __init__(self, config: LayoutConfig | None = None):
        self.config = config or LayoutConfig()

    @staticmethod
    def spec_for(attribute: str) -> LegendSpec:
        attribute = check_attribute(attribute)
        return LegendSpec(attribute, gradient_stops(scale_for(attribute)), LEGEND_LABELS[attribute])

    @property
    def origin(self) -> tuple[float, float]:
        return LEGEND_X, self.config.height / 2 - LEGEND_HEIGHT / 2

    def render(self, surface: RenderSurface, attribute: str) -> LegendSpec:
        spec = self.spec_for(attribute)
        surface.remove_group(LEGEND_GROUP)

        x, y = self.origin
        surface.draw_gradient_rect(LEGEND_GROUP, x, y, LEGEND_WIDTH, LEGEND_HEIGHT, spec.stops)
        top, bottom = spec.labels
        label_x = x + LEGEND_WIDTH + LEGEND_LABEL_GAP
        surface.draw_text(LEGEND_GROUP, label_x, y + 12, top)
        surface.draw_text(LEGEND_GROUP, label_x, y + LEGEND_HEIGHT - 6, bottom)
        return spec
