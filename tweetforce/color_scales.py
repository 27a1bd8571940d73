from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
import matplotlib.colors as mcolors

from .config import NEUTRAL_GRAY, SENTIMENT_COLORS, SUBJECTIVITY_COLORS
from .records import SENTIMENT, SUBJECTIVITY, Record, check_attribute


@dataclass(frozen=True)
class ColorScale:
    """Piecewise-linear map from a numeric domain to colors, clamped at both ends.

    Interpolation runs per RGB channel between consecutive stops.
    ``None``/NaN values map to ``missing``.
    """

    domain: tuple[float, ...]
    colors: tuple[str, ...]
    missing: str = NEUTRAL_GRAY

    def __post_init__(self):
        if len(self.domain) != len(self.colors) or len(self.domain) < 2:
            raise ValueError("ColorScale needs matching domain/colors with at least two stops")
        if any(b <= a for a, b in zip(self.domain, self.domain[1:])):
            raise ValueError(f"ColorScale domain must be strictly increasing: {self.domain}")

    @property
    def rgb_stops(self) -> np.ndarray:
        return np.array([mcolors.to_rgb(c) for c in self.colors], dtype=float)

    def rgb(self, value: float | None) -> tuple[float, float, float]:
        if value is None or math.isnan(float(value)):
            return mcolors.to_rgb(self.missing)
        v = min(max(float(value), self.domain[0]), self.domain[-1])
        stops = self.rgb_stops
        return tuple(float(np.interp(v, self.domain, stops[:, ch])) for ch in range(3))

    def __call__(self, value: float | None) -> str:
        return mcolors.to_hex(self.rgb(value))

    def map(self, values: Sequence[float]) -> list[str]:
        return [self(v) for v in values]

    @property
    def extent(self) -> tuple[float, float]:
        return self.domain[0], self.domain[-1]


SCALES: dict[str, ColorScale] = {
    SENTIMENT: ColorScale((-1.0, 0.0, 1.0), SENTIMENT_COLORS),
    SUBJECTIVITY: ColorScale((0.0, 1.0), SUBJECTIVITY_COLORS),
}


def scale_for(attribute: str) -> ColorScale:
    return SCALES[check_attribute(attribute)]


def color_of(attribute: str, record: Record) -> str:
    """Fill color of ``record`` when points are colored by ``attribute``."""
    return scale_for(attribute)(record.value(attribute))
