from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from .clusters import ClusterAssignment
from .color_scales import scale_for
from .config import HIGHLIGHT_STROKE, HIGHLIGHT_STROKE_WIDTH, LayoutConfig
from .legend import LEGEND_GROUP, LegendRenderer
from .records import SENTIMENT, Record, check_attribute
from .selection_bus import SelectionBus, SelectionStore
from .sim_engine import ForceSimulation
from .surface import RenderSurface

logger = logging.getLogger(__name__)

POINTS_GROUP = "points"
CLUSTERS_GROUP = "clusters"


class EngineState(Enum):
    EMPTY = "empty"
    INITIALIZING = "initializing"
    ACTIVE = "active"


class VisualEngine:
    """Owns the layout run, the color encoding and the selection for one dataset.

    ``EMPTY`` until the first non-empty dataset arrives, then passes through
    ``INITIALIZING`` exactly once while the simulation is built, and stays
    ``ACTIVE`` afterwards. Attribute switches and clicks never change the state.
    Every repaint is derived from current state; nothing drawn earlier is patched.
    """

    def __init__(self, bus: SelectionBus | None = None, config: LayoutConfig | None = None,
                 clusters: ClusterAssignment | None = None, attribute: str = SENTIMENT):
        self.config = (config or LayoutConfig()).validate()
        self.bus = bus if bus is not None else SelectionBus()
        self.clusters = clusters or ClusterAssignment(config=self.config)
        self.legend = LegendRenderer(self.config)
        self.selection_store = SelectionStore()

        self.state = EngineState.EMPTY
        self.attribute = check_attribute(attribute)
        self.simulation: ForceSimulation | None = None
        self.surface: RenderSurface | None = None

        self._records: tuple[Record, ...] = ()
        self._by_idx: dict[int, Record] = {}
        self._fills: list[str] = []

    # ─── read-only views ────────────────────────────────────────────────
    @property
    def records(self) -> tuple[Record, ...]:
        return self._records

    @property
    def selection(self) -> list[Record]:
        return self.selection_store.entries

    def colors(self) -> dict[int, str]:
        return {r.idx: fill for r, fill in zip(self._records, self._fills)}

    # ─── lifecycle ──────────────────────────────────────────────────────
    def set_records(self, records: Sequence[Record]) -> None:
        records = tuple(records)
        if self.state is EngineState.EMPTY:
            if not records:
                return
        elif records == self._records:
            # same dataset handed over again (e.g. host re-render)
            return
        else:
            self._teardown()
            if not records:
                self.render()
                return
        self._initialize(records)

    def _initialize(self, records: tuple[Record, ...]) -> None:
        by_idx = {r.idx: r for r in records}
        if len(by_idx) != len(records):
            raise ValueError("Record identifiers (idx) must be unique")
        self.state = EngineState.INITIALIZING
        self._records = records
        self._by_idx = by_idx
        self._recolor()

        self.simulation = ForceSimulation(records, self.clusters, self.config)
        self.simulation.on_tick(self._on_tick)
        logger.info("Simulation started for %d record(s)", len(records))

        self.state = EngineState.ACTIVE
        self.render()

    def _teardown(self) -> None:
        logger.info("Dataset replaced, discarding current simulation")
        self.simulation = None
        self._records = ()
        self._by_idx = {}
        self._fills = []
        self.selection_store.clear()
        self.bus.set_selection([])
        self.state = EngineState.EMPTY

    def advance(self) -> bool:
        """Run one simulation tick. Returns ``True`` while the layout is still moving."""
        if self.simulation is None:
            return False
        return self.simulation.step()

    def _on_tick(self, sim: ForceSimulation) -> None:
        self._draw_points()

    # ─── interaction ────────────────────────────────────────────────────
    def set_attribute(self, name: str) -> None:
        name = check_attribute(name)
        if name == self.attribute:
            return
        logger.debug("Color attribute %s -> %s", self.attribute, name)
        self.attribute = name
        self._recolor()
        if self.state is EngineState.ACTIVE:
            self._draw_points()
            self._draw_legend()
        self.bus.set_attribute(name)

    def click(self, target: Record | int) -> list[Record]:
        idx = target.idx if isinstance(target, Record) else target
        record = self._by_idx.get(idx)
        if record is None:
            logger.debug("Click on unknown point %r ignored", idx)
            return self.selection
        entries = self.selection_store.toggle(record)
        logger.debug("Point %r %s", idx, "selected" if idx in self.selection_store else "deselected")
        self._draw_points()
        self.bus.set_selection(entries)
        return entries

    # ─── drawing ────────────────────────────────────────────────────────
    def attach(self, surface: RenderSurface) -> None:
        self.surface = surface
        self.render()

    def render(self) -> None:
        if self.surface is None:
            return
        if self.state is not EngineState.ACTIVE:
            for group in (CLUSTERS_GROUP, POINTS_GROUP, LEGEND_GROUP):
                self.surface.remove_group(group)
            return
        self._draw_clusters()
        self._draw_points()
        self._draw_legend()

    def _recolor(self) -> None:
        scale = scale_for(self.attribute)
        self._fills = [scale(r.value(self.attribute)) for r in self._records]

    def _draw_clusters(self) -> None:
        surface = self.surface
        surface.remove_group(CLUSTERS_GROUP)
        x = -self.config.margin_left + 10
        for anchor in self.clusters.anchors.values():
            surface.draw_text(CLUSTERS_GROUP, x, anchor.y, anchor.label, size=18, bold=True)

    def _draw_points(self) -> None:
        if self.surface is None or self.simulation is None:
            return
        pos = self.simulation.positions
        selected = self.selection_store.ids
        strokes = [HIGHLIGHT_STROKE if r.idx in selected else None for r in self._records]
        widths = [HIGHLIGHT_STROKE_WIDTH if r.idx in selected else 0.0 for r in self._records]
        self.surface.remove_group(POINTS_GROUP)
        self.surface.draw_points(
            POINTS_GROUP, pos[:, 0], pos[:, 1], self.config.point_radius,
            self._fills, strokes, widths, [r.idx for r in self._records],
        )

    def _draw_legend(self) -> None:
        if self.surface is not None:
            self.legend.render(self.surface, self.attribute)
