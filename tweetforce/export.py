from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .config import LayoutConfig
from .engine import VisualEngine
from .records import SENTIMENT, Record
from .surface import RecordingSurface

logger = logging.getLogger(__name__)


def render_settled(records: Sequence[Record], attribute: str = SENTIMENT,
                   config: LayoutConfig | None = None) -> tuple[VisualEngine, RecordingSurface]:
    """Run the layout to convergence without a display and return the drawn scene."""
    config = config or LayoutConfig()
    surface = RecordingSurface(config.width, config.height,
                               offset=(config.margin_left, config.margin_top))
    engine = VisualEngine(config=config, attribute=attribute)
    engine.attach(surface)
    engine.set_records(records)
    if engine.simulation is not None:
        engine.simulation.run()
    return engine, surface


def export_svg(records: Sequence[Record], path, attribute: str = SENTIMENT,
               config: LayoutConfig | None = None) -> Path:
    path = Path(path)
    if not path.suffix:
        path = path.with_suffix(".svg")
    _, surface = render_settled(records, attribute, config)
    path.write_text(surface.to_svg(), encoding="utf-8")
    logger.info("Wrote %s", path)
    return path
