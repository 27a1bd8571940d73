import pytest

from tweetforce.config import LayoutConfig
from tweetforce.records import Record
from tweetforce.surface import RecordingSurface


def make_records(n, months=("March", "April", "May")):
    return tuple(
        Record(
            idx=i,
            month=months[i % len(months)],
            sentiment=((i * 37) % 21 - 10) / 10.0,
            subjectivity=((i * 13) % 11) / 10.0,
            raw_tweet=f"tweet number {i}",
        )
        for i in range(n)
    )


@pytest.fixture
def config():
    return LayoutConfig()


@pytest.fixture
def record_factory():
    return make_records


@pytest.fixture
def records():
    return make_records(30)


@pytest.fixture
def pair():
    return (
        Record(1, "March", 1.0, 0.5, "great day"),
        Record(2, "March", -1.0, 0.5, "awful day"),
    )


@pytest.fixture
def surface(config):
    return RecordingSurface(config.width, config.height,
                            offset=(config.margin_left, config.margin_top))
