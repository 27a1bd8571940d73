from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from .config import DEFAULT_MONTHS, LayoutConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusterAnchor:
    label: str
    x: float
    y: float


class ClusterAssignment:
    """Maps a categorical value to the anchor its points are pulled toward.

    Anchors are stacked vertically, centred horizontally, at equal fractions
    of the inner canvas height. Values without an anchor fall back to the
    canvas centre.
    """

    def __init__(self, labels: Iterable[str] = DEFAULT_MONTHS, config: LayoutConfig | None = None):
        self.config = config or LayoutConfig()
        labels = list(dict.fromkeys(labels))
        step = self.config.inner_height / (len(labels) + 1)
        self.anchors: dict[str, ClusterAnchor] = {
            label: ClusterAnchor(label, self.config.inner_width / 2, step * (i + 1))
            for i, label in enumerate(labels)
        }
        cx, cy = self.config.center
        self.fallback = ClusterAnchor("", cx, cy)
        self._warned: set[str] = set()

    def __contains__(self, label: str) -> bool:
        return label in self.anchors

    def anchor_for(self, label: str) -> ClusterAnchor:
        anchor = self.anchors.get(label)
        if anchor is None:
            if label not in self._warned:
                self._warned.add(label)
                logger.warning("No cluster anchor for %r, using canvas centre", label)
            return self.fallback
        return anchor

    def __call__(self, label: str) -> tuple[float, float]:
        anchor = self.anchor_for(label)
        return anchor.x, anchor.y

    def targets(self, labels: Iterable[str]) -> np.ndarray:
        """(n, 2) array of anchor coordinates for ``labels``."""
        return np.array([self(label) for label in labels], dtype=np.float64).reshape(-1, 2)
