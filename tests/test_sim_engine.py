import numpy as np
import pytest

from tweetforce.clusters import ClusterAssignment
from tweetforce.collision import max_overlap
from tweetforce.config import LayoutConfig
from tweetforce.records import Record
from tweetforce.sim_engine import ForceSimulation


@pytest.fixture
def clusters(config):
    return ClusterAssignment(config=config)


class TestSettling:

    def test_settled_layout_has_no_overlap(self, record_factory, clusters, config):
        sim = ForceSimulation(record_factory(60), clusters, config)
        sim.run()
        assert not sim.running
        assert max_overlap(sim.positions, config.point_radius) < 0.05

    def test_points_gather_at_their_anchor(self, record_factory, clusters, config):
        records = record_factory(45)
        sim = ForceSimulation(records, clusters, config)
        sim.run()
        pos = sim.positions
        for month in ("March", "April", "May"):
            mask = np.array([r.month == month for r in records])
            centroid = pos[mask].mean(axis=0)
            assert np.allclose(centroid, clusters(month), atol=10.0)

    def test_two_march_points(self, pair, clusters, config):
        sim = ForceSimulation(pair, clusters, config)
        sim.run()
        pos = sim.positions
        anchor = np.array(clusters("March"))
        assert np.all(np.linalg.norm(pos - anchor, axis=1) < 15.0)
        assert np.linalg.norm(pos[0] - pos[1]) >= 2 * config.point_radius - 0.05

    def test_single_point_sits_on_its_anchor(self, clusters, config):
        sim = ForceSimulation([Record(7, "May", 0.2, 0.3, "solo")], clusters, config)
        sim.run()
        assert np.allclose(sim.positions[0], clusters("May"), atol=1.0)

    def test_stops_when_alpha_decays(self, pair, clusters, config):
        sim = ForceSimulation(pair, clusters, config)
        ticks = sim.run()
        assert sim.alpha < config.alpha_min
        assert ticks == sim.tick_count
        assert 250 < ticks <= config.decay_ticks + 5
        before = sim.positions
        assert sim.step() is False
        assert np.array_equal(before, sim.positions)


class TestTicking:

    def test_callback_runs_every_tick(self, pair, clusters, config):
        sim = ForceSimulation(pair, clusters, config)
        seen = []
        sim.on_tick(lambda s: seen.append(s.tick_count))
        for _ in range(5):
            sim.step()
        assert seen == [1, 2, 3, 4, 5]

    def test_max_ticks_caps_the_run(self, record_factory, clusters):
        config = LayoutConfig(max_ticks=20)
        sim = ForceSimulation(record_factory(10), clusters, config)
        assert sim.run() == 20
        assert not sim.running

    def test_positions_are_copies(self, pair, clusters, config):
        sim = ForceSimulation(pair, clusters, config)
        pos = sim.positions
        pos += 1000.0
        assert not np.allclose(sim.positions, pos)

    def test_points_pair_with_records(self, records, clusters, config):
        sim = ForceSimulation(records, clusters, config)
        sim.step()
        points = sim.points()
        assert [p.record for p in points] == list(records)
        assert points[0].x == pytest.approx(sim.positions[0, 0])


class TestEdgeCases:

    def test_empty_simulation_is_idle(self, clusters, config):
        sim = ForceSimulation([], clusters, config)
        assert sim.positions.shape == (0, 2)
        assert sim.step() is False

    def test_unmapped_month_pulls_to_centre(self, clusters, config):
        sim = ForceSimulation([Record(1, "December", 0.0, 0.0, "")], clusters, config)
        sim.run()
        assert np.allclose(sim.positions[0], config.center, atol=1.0)

    def test_coincident_points_separate(self, clusters, config):
        records = [Record(i, "April", 0.0, 0.0, "") for i in range(4)]
        sim = ForceSimulation(records, clusters, config)
        sim.positions_[:] = clusters("April")
        sim.run()
        assert max_overlap(sim.positions, config.point_radius) < 0.05

    def test_sampled_repulsion_for_large_sets(self, record_factory, clusters):
        config = LayoutConfig(exact_repulsion_limit=10, repulsion_samples=8)
        sim = ForceSimulation(record_factory(40), clusters, config)
        sim.run()
        pos = sim.positions
        assert np.isfinite(pos).all()
        assert max_overlap(pos, config.point_radius) < 0.05
