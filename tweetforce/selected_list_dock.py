from __future__ import annotations

from typing import List

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import QDockWidget, QListWidget, QListWidgetItem

from .records import Record
from .selection_bus import SelectionBus

IDX_ROLE = Qt.UserRole


class SelectedTweetsDock(QDockWidget):
    """Lists the selected tweets, most recently selected first."""

    def __init__(self, bus: SelectionBus, parent=None):
        super().__init__("Selected Tweets", parent)
        self.bus = bus

        self.list_widget = QListWidget()
        self.list_widget.setWordWrap(True)
        self.list_widget.setAlternatingRowColors(True)
        self.setWidget(self.list_widget)

        self.bus.selectionChanged.connect(self._on_selection_changed)

    def _on_selection_changed(self, records: List[Record]):
        self.list_widget.clear()
        for rec in records:
            item = QListWidgetItem(rec.raw_tweet)
            item.setData(IDX_ROLE, rec.idx)
            item.setToolTip(f"{rec.month} · sentiment {rec.sentiment:.2f} · subjectivity {rec.subjectivity:.2f}")
            self.list_widget.addItem(item)
