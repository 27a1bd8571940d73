from __future__ import annotations

from dataclasses import dataclass

SENTIMENT = "Sentiment"
SUBJECTIVITY = "Subjectivity"
ATTRIBUTES = (SENTIMENT, SUBJECTIVITY)


def check_attribute(name: str) -> str:
    if name not in ATTRIBUTES:
        raise ValueError(f"Unknown attribute {name!r}; expected one of {ATTRIBUTES}")
    return name


@dataclass(frozen=True)
class Record:
    """One tweet as handed over by the loader. Never mutated."""

    idx: int
    month: str
    sentiment: float
    subjectivity: float
    raw_tweet: str = ""

    def value(self, attribute: str) -> float:
        if check_attribute(attribute) == SENTIMENT:
            return self.sentiment
        return self.subjectivity
