"""Force-directed tweet clustering with color encoding and point selection."""

from .records import Record, ATTRIBUTES
from .config import LayoutConfig
from .engine import VisualEngine, EngineState

__all__ = ["Record", "ATTRIBUTES", "LayoutConfig", "VisualEngine", "EngineState"]
