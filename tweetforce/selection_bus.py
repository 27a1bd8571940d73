from __future__ import annotations

from typing import Iterator

from PyQt5.QtCore import QObject, pyqtSignal as Signal

from .records import Record


class SelectionBus(QObject):
    """Broadcasts the selected tweets and the active color attribute across views."""

    selectionChanged = Signal(object)   # list[Record], most recent first
    attributeChanged = Signal(str)    # "Sentiment" | "Subjectivity"

    def set_selection(self, records: list[Record]):
        self.selectionChanged.emit(list(records))

    def set_attribute(self, name: str):
        self.attributeChanged.emit(name)


class SelectionStore:
    """Ordered set of selected records keyed by ``idx``, most recently selected first."""

    def __init__(self):
        self._entries: list[Record] = []

    def toggle(self, record: Record) -> list[Record]:
        for pos, entry in enumerate(self._entries):
            if entry.idx == record.idx:
                del self._entries[pos]
                break
        else:
            self._entries.insert(0, record)
        return self.entries

    @property
    def entries(self) -> list[Record]:
        return list(self._entries)

    @property
    def ids(self) -> set[int]:
        return {e.idx for e in self._entries}

    def __contains__(self, idx: int) -> bool:
        return any(e.idx == idx for e in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.entries)

    def clear(self) -> None:
        self._entries.clear()
