# TweetForceQ.py -----------------------------------------------------------
import os
os.environ["PYQTGRAPH_QT_LIB"] = "PyQt5"   # force pyqtgraph to PyQt5
os.environ.pop("QT_API", None)             # avoid other libs nudging Qt differently

import argparse
import logging
import sys
from pathlib import Path

from PyQt5.QtWidgets import QAction, QApplication, QDockWidget, QFileDialog, QMainWindow, QMessageBox
from PyQt5.QtCore import Qt

from tweetforce.config import LayoutConfig
from tweetforce.data_loader import load_records
from tweetforce.engine import VisualEngine
from tweetforce.export import export_svg
from tweetforce.records import ATTRIBUTES, SENTIMENT
from tweetforce.selection_bus import SelectionBus
from tweetforce.selected_list_dock import SelectedTweetsDock
from tweetforce.spatial_view import ForceViewDock

logger = logging.getLogger("tweetforce")


class MainWin(QMainWindow):
    def __init__(self, config: LayoutConfig | None = None, attribute: str = SENTIMENT):
        super().__init__()
        self.setWindowTitle("TweetForce")
        self.bus = SelectionBus()
        self.engine = VisualEngine(self.bus, config, attribute=attribute)

        self.canvas_dock = ForceViewDock(self.engine, self.bus, self)
        self.canvas_dock.setFeatures(QDockWidget.NoDockWidgetFeatures)
        self.setCentralWidget(self.canvas_dock)

        self.tweets_dock = SelectedTweetsDock(self.bus, self)
        self.addDockWidget(Qt.RightDockWidgetArea, self.tweets_dock)

        open_act = QAction("Open CSV…", self)
        open_act.setShortcut("Ctrl+O")
        open_act.triggered.connect(self.open_csv)
        self.menuBar().addMenu("&File").addAction(open_act)

        self.resize(1200, 700)

    def open_csv(self):
        file, _ = QFileDialog.getOpenFileName(self, "Select tweets CSV", "", "CSV files (*.csv);;All Files (*)")
        if file:
            self.load_csv(Path(file))

    def load_csv(self, path: Path):
        try:
            records = load_records(path)
        except (OSError, ValueError) as e:
            logger.error("Could not load %s: %s", path, e)
            QMessageBox.warning(self, "Load failed", f"Could not load “{path.name}”:\n{e}")
            return
        self.canvas_dock.set_records(records)
        self.statusBar().showMessage(f"{len(records)} tweets from {path.name}")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Force-directed tweet clusters colored by sentiment or subjectivity.")
    p.add_argument("csv", nargs="?", help="tweets CSV (Month, Sentiment, Subjectivity, RawTweet[, idx])")
    p.add_argument("--color-by", choices=ATTRIBUTES, default=SENTIMENT)
    p.add_argument("--export-svg", metavar="PATH", help="run headless and write the settled layout as SVG")
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    config = LayoutConfig(seed=args.seed)

    if args.export_svg:
        if not args.csv:
            logger.error("--export-svg needs a CSV file")
            return 2
        export_svg(load_records(args.csv), args.export_svg, args.color_by, config)
        return 0

    app = QApplication(sys.argv[:1])
    win = MainWin(config, args.color_by)
    win.show()
    if args.csv:
        win.load_csv(Path(args.csv))
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
