import numpy as np
import pytest

from tweetforce.engine import CLUSTERS_GROUP, POINTS_GROUP, EngineState, VisualEngine
from tweetforce.legend import LEGEND_GROUP
from tweetforce.records import Record
from tweetforce.selection_bus import SelectionBus
from tweetforce.surface import GradientRect, PointBatch, TextItem


@pytest.fixture
def bus():
    return SelectionBus()


@pytest.fixture
def engine(bus, surface):
    eng = VisualEngine(bus)
    eng.attach(surface)
    return eng


def _batch(surface):
    (batch,) = surface.items(POINTS_GROUP)
    assert isinstance(batch, PointBatch)
    return batch


class TestLifecycle:

    def test_starts_empty_and_draws_nothing(self, engine, surface):
        assert engine.state is EngineState.EMPTY
        engine.set_records([])
        assert engine.state is EngineState.EMPTY
        assert engine.simulation is None
        assert surface.groups == {}

    def test_first_data_activates_once(self, engine, records, surface):
        engine.set_records(records)
        assert engine.state is EngineState.ACTIVE
        assert len(_batch(surface).keys) == len(records)
        assert [t.text for t in surface.items(CLUSTERS_GROUP)] == ["March", "April", "May"]

    def test_reinitializing_same_dataset_keeps_simulation(self, engine, records):
        engine.set_records(records)
        sim = engine.simulation
        for _ in range(10):
            engine.advance()
        pos = sim.positions
        engine.set_records(list(records))
        assert engine.simulation is sim
        assert sim.tick_count == 10
        assert np.array_equal(sim.positions, pos)

    def test_new_dataset_replaces_run(self, engine, records, record_factory):
        engine.set_records(records)
        engine.click(records[0])
        old = engine.simulation
        engine.set_records(record_factory(5))
        assert engine.simulation is not old
        assert engine.state is EngineState.ACTIVE
        assert engine.selection == []

    def test_duplicate_idx_rejected(self, engine):
        dup = [Record(1, "March", 0, 0, ""), Record(1, "April", 0, 0, "")]
        with pytest.raises(ValueError):
            engine.set_records(dup)
        assert engine.state is EngineState.EMPTY

    def test_ticks_redraw_points(self, engine, records, surface):
        engine.set_records(records)
        first = _batch(surface).xs
        assert engine.advance() is True
        assert _batch(surface).xs != first
        assert len(surface.items(POINTS_GROUP)) == 1


class TestAttribute:

    def test_switch_recolors_without_moving(self, engine, records, surface, bus):
        seen = []
        bus.attributeChanged.connect(seen.append)
        engine.set_records(records)
        for _ in range(25):
            engine.advance()
        pos = engine.simulation.positions
        before = _batch(surface).fills

        engine.set_attribute("Subjectivity")

        assert np.array_equal(engine.simulation.positions, pos)
        assert engine.simulation.tick_count == 25
        assert _batch(surface).fills != before
        labels = [i.text for i in surface.items(LEGEND_GROUP) if isinstance(i, TextItem)]
        assert labels == ["Subjective", "Objective"]
        assert sum(isinstance(i, GradientRect) for i in surface.items(LEGEND_GROUP)) == 1
        assert seen == ["Subjectivity"]
        assert engine.state is EngineState.ACTIVE

    def test_switch_before_data(self, engine, records, surface):
        engine.set_attribute("Subjectivity")
        assert surface.groups == {}
        engine.set_records(records)
        labels = [i.text for i in surface.items(LEGEND_GROUP) if isinstance(i, TextItem)]
        assert labels == ["Subjective", "Objective"]

    def test_rejects_unknown_attribute(self, engine):
        with pytest.raises(ValueError):
            engine.set_attribute("Followers")
        assert engine.attribute == "Sentiment"


class TestSelection:

    def test_click_order_and_highlight(self, engine, records, surface, bus):
        got = []
        bus.selectionChanged.connect(got.append)
        engine.set_records(records)
        a, b = records[3], records[8]

        engine.click(a)
        assert engine.click(b) == [b, a]
        batch = _batch(surface)
        strokes = dict(zip(batch.keys, batch.strokes))
        assert strokes[a.idx] == "black" and strokes[b.idx] == "black"
        assert sum(s is not None for s in batch.strokes) == 2

        assert engine.click(b.idx) == [a]
        batch = _batch(surface)
        widths = dict(zip(batch.keys, batch.stroke_widths))
        assert widths[b.idx] == 0.0 and widths[a.idx] == 2.0
        assert got[-1] == [a]

    def test_unknown_click_is_noop(self, engine, records):
        engine.set_records(records)
        engine.click(records[0])
        assert engine.click(10_000) == [records[0]]
        assert engine.click(Record(-5, "March", 0, 0, "")) == [records[0]]

    def test_highlight_survives_ticks(self, engine, records, surface):
        engine.set_records(records)
        engine.click(records[2])
        engine.advance()
        batch = _batch(surface)
        assert dict(zip(batch.keys, batch.strokes))[records[2].idx] == "black"


def test_example_pair_settles_green_and_red(engine, pair):
    engine.set_records(pair)
    engine.simulation.run()
    pos = engine.simulation.positions
    anchor = np.array(engine.clusters("March"))
    assert np.all(np.linalg.norm(pos - anchor, axis=1) < 15.0)
    assert np.linalg.norm(pos[0] - pos[1]) >= 2 * engine.config.point_radius - 0.05
    assert engine.colors() == {1: "#008000", 2: "#ff0000"}
