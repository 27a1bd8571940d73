# data_loader.py ------------------------------------------------------------
import logging
from pathlib import Path

import numpy as np
import pandas as pd

from .records import Record

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("Month", "Sentiment", "Subjectivity", "RawTweet")


# --------------------------------------------------------------------------
def _coerce_numeric(df, column):
    """Float column; unparsable cells become NaN and are reported."""
    values = pd.to_numeric(df[column], errors="coerce")
    bad = int(values.isna().sum() - df[column].isna().sum())
    if bad:
        logger.warning("%d non-numeric value(s) in column %r treated as missing", bad, column)
    return values.astype(float)


def records_from_frame(df):
    """Return a tuple of :class:`Record` built from ``df`` rows, in order."""
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"CSV is missing required column(s): {', '.join(missing)}")

    if "idx" in df.columns:
        idx = pd.to_numeric(df["idx"], errors="raise").astype(int).to_numpy()
    else:
        idx = np.arange(len(df))
    if len(set(idx.tolist())) != len(idx):
        raise ValueError("Column 'idx' must hold unique identifiers")

    sentiment = _coerce_numeric(df, "Sentiment").to_numpy()
    subjectivity = _coerce_numeric(df, "Subjectivity").to_numpy()
    months = df["Month"].fillna("").astype(str).str.strip().to_numpy()
    texts = df["RawTweet"].fillna("").astype(str).to_numpy()

    return tuple(
        Record(int(i), m, float(se), float(su), t)
        for i, m, se, su, t in zip(idx, months, sentiment, subjectivity, texts)
    )


def load_records(path):
    """Read a tweets CSV and return its records."""
    path = Path(path)
    df = pd.read_csv(path)
    records = records_from_frame(df)
    logger.info("Loaded %d record(s) from %s", len(records), path.name)
    return records
