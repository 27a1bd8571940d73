from __future__ import annotations

import os
os.environ["PYQTGRAPH_QT_LIB"] = "PyQt5"   # force pyqtgraph to PyQt5
os.environ.pop("QT_API", None)             # avoid other libs nudging Qt differently

import logging
from typing import Callable, Sequence

import pyqtgraph as pg
from PyQt5.QtCore import QTimer
from PyQt5.QtGui import QBrush, QFont, QLinearGradient
from PyQt5.QtWidgets import (
    QComboBox,
    QDockWidget,
    QGraphicsRectItem,
    QHBoxLayout,
    QLabel,
    QVBoxLayout,
    QWidget,
)

from .engine import VisualEngine
from .records import ATTRIBUTES, Record
from .selection_bus import SelectionBus

logger = logging.getLogger(__name__)

__all__ = ["PlotSurface", "ForceViewDock"]

BACKGROUND = "#FFFFFF"
TEXT_COLOR = "#000000"

# pyqtgraph TextItem anchors, keyed by SVG text-anchor
_TEXT_ANCHORS = {"start": (0.0, 0.5), "middle": (0.5, 0.5), "end": (1.0, 0.5)}


class PlotSurface:
    """Render surface on a pyqtgraph ViewBox; every group is a list of scene items."""

    def __init__(self, view: pg.ViewBox, on_point_clicked: Callable[[int], None] | None = None):
        self.view = view
        self.on_point_clicked = on_point_clicked
        self.groups: dict[str, list] = {}

    def remove_group(self, group):
        for item in self.groups.pop(group, []):
            self.view.removeItem(item)

    def _add(self, group, item):
        self.view.addItem(item)
        self.groups.setdefault(group, []).append(item)

    def draw_points(self, group, xs, ys, radius, fills, strokes, stroke_widths, keys):
        pens = [pg.mkPen(s, width=w) if s else pg.mkPen(None)
                for s, w in zip(strokes, stroke_widths)]
        scatter = pg.ScatterPlotItem(
            x=list(xs), y=list(ys), size=2 * radius, pxMode=False,
            brush=[pg.mkBrush(c) for c in fills], pen=pens, data=list(keys),
        )
        scatter.sigClicked.connect(self._on_scatter_clicked)
        self._add(group, scatter)

    def draw_text(self, group, x, y, text, anchor="start", size=12, bold=False):
        item = pg.TextItem(text, color=TEXT_COLOR, anchor=_TEXT_ANCHORS.get(anchor, (0.0, 0.5)))
        font = QFont()
        font.setPointSizeF(size * 0.75)   # px -> pt
        font.setBold(bold)
        item.setFont(font)
        item.setPos(x, y)
        self._add(group, item)

    def draw_gradient_rect(self, group, x, y, width, height, stops: Sequence[tuple[float, str]]):
        grad = QLinearGradient(x, y, x, y + height)
        for offset, color in stops:
            grad.setColorAt(offset, pg.mkColor(color))
        rect = QGraphicsRectItem(x, y, width, height)
        rect.setBrush(QBrush(grad))
        rect.setPen(pg.mkPen(None))
        self._add(group, rect)

    def _on_scatter_clicked(self, scatter, points, *args):
        if self.on_point_clicked is None or not len(points):
            return
        # the top-most point under the cursor is reported last
        idx = int(points[-1].data())
        # the click redraws the scatter that is emitting; run it after the event
        QTimer.singleShot(0, lambda: self.on_point_clicked(idx))


# ---------------------------------------------------------------------------- #
class ForceViewDock(QDockWidget):
    """Canvas with the force layout, the legend and the "Color By" selector."""

    def __init__(self, engine: VisualEngine, bus: SelectionBus, parent=None):
        super().__init__("Tweet Clusters", parent)
        self.engine = engine
        self.bus = bus
        cfg = engine.config

        self._timer = QTimer(self)
        self._timer.setInterval(cfg.tick_interval_ms)
        self._timer.timeout.connect(self._on_tick)

        # GUI Setup
        self.view = pg.ViewBox(enableMenu=False)
        self.view.invertY(True)
        self.view.setAspectLocked(True)
        self.view.setBackgroundColor(BACKGROUND)
        self.plot = pg.PlotWidget(viewBox=self.view)
        self.plot.setBackground(BACKGROUND)
        self.plot.hideAxis("bottom"); self.plot.hideAxis("left")
        self.view.setRange(
            xRange=(-cfg.margin_left, cfg.width - cfg.margin_left),
            yRange=(-cfg.margin_top, cfg.height - cfg.margin_top),
            padding=0,
        )

        self.combo = QComboBox()
        self.combo.addItems(ATTRIBUTES)
        self.combo.setCurrentText(engine.attribute)
        self.combo.currentTextChanged.connect(self.engine.set_attribute)
        self.selector = QWidget()
        bar = QHBoxLayout(self.selector)
        bar.setContentsMargins(4, 4, 4, 4)
        bar.addWidget(QLabel("Color By :"))
        bar.addWidget(self.combo)
        bar.addStretch(1)
        self.selector.hide()

        w = QWidget(); l = QVBoxLayout(w)
        l.addWidget(self.selector); l.addWidget(self.plot)
        self.setWidget(w)

        self.surface = PlotSurface(self.view, on_point_clicked=self.engine.click)
        self.engine.attach(self.surface)

        self.bus.attributeChanged.connect(self._on_attribute_changed)

    # ------------------------------------------------------------------
    def set_records(self, records: Sequence[Record]):
        self.engine.set_records(records)
        has_data = bool(self.engine.records)
        self.selector.setVisible(has_data)
        sim = self.engine.simulation
        if sim is not None and sim.running and not self._timer.isActive():
            logger.debug("Starting layout timer (%d ms)", self._timer.interval())
            self._timer.start()

    def _on_tick(self):
        if not self.engine.advance():
            self._timer.stop()

    def _on_attribute_changed(self, name: str):
        if self.combo.currentText() != name:
            self.combo.blockSignals(True)
            self.combo.setCurrentText(name)
            self.combo.blockSignals(False)

    def closeEvent(self, e):
        self._timer.stop()
        super().closeEvent(e)
