from __future__ import annotations

from dataclasses import dataclass

# ─── color constants ──────────────────────────────────────────────────────
NEUTRAL_GRAY = "#ECECEC"
SENTIMENT_COLORS = ("red", NEUTRAL_GRAY, "green")
SUBJECTIVITY_COLORS = (NEUTRAL_GRAY, "#4467C4")
HIGHLIGHT_STROKE = "black"
HIGHLIGHT_STROKE_WIDTH = 2.0

# ─── legend geometry (layout coordinates) ─────────────────────────────────
LEGEND_X = 620.0
LEGEND_WIDTH = 20.0
LEGEND_HEIGHT = 300.0
LEGEND_LABEL_GAP = 5.0

DEFAULT_MONTHS = ("March", "April", "May")


@dataclass(frozen=True)
class LayoutConfig:
    """Canvas geometry and simulation tuning."""

    width: float = 800.0
    height: float = 600.0
    margin_top: float = 125.0
    margin_right: float = 40.0
    margin_bottom: float = 125.0
    margin_left: float = 40.0

    point_radius: float = 4.0
    charge_strength: float = -2.0
    anchor_strength: float = 0.1
    alpha_min: float = 0.001
    velocity_decay: float = 0.4
    decay_ticks: int = 300

    exact_repulsion_limit: int = 1000
    repulsion_samples: int = 100
    settle_iterations: int = 500
    max_ticks: int | None = None

    tick_interval_ms: int = 16
    seed: int = 0

    @property
    def inner_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def inner_height(self) -> float:
        return self.height - self.margin_top - self.margin_bottom

    @property
    def alpha_decay(self) -> float:
        # alpha reaches alpha_min after ``decay_ticks`` ticks
        return 1.0 - self.alpha_min ** (1.0 / self.decay_ticks)

    @property
    def center(self) -> tuple[float, float]:
        """Canvas centre expressed in layout (margin-translated) coordinates."""
        return (
            self.width / 2 - self.margin_left,
            self.height / 2 - self.margin_top,
        )

    def validate(self) -> "LayoutConfig":
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")
        if self.inner_width <= 0 or self.inner_height <= 0:
            raise ValueError("Margins leave no room for the layout")
        if self.point_radius <= 0:
            raise ValueError(f"point_radius must be positive, got {self.point_radius}")
        if not 0.0 < self.alpha_min < 1.0:
            raise ValueError(f"alpha_min must lie in (0, 1), got {self.alpha_min}")
        if not 0.0 <= self.velocity_decay < 1.0:
            raise ValueError(f"velocity_decay must lie in [0, 1), got {self.velocity_decay}")
        if self.decay_ticks < 1:
            raise ValueError("decay_ticks must be at least 1")
        if self.repulsion_samples < 1:
            raise ValueError("repulsion_samples must be at least 1")
        if self.max_ticks is not None and self.max_ticks < 1:
            raise ValueError("max_ticks must be at least 1 when set")
        return self
