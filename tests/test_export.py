from tweetforce.collision import max_overlap
from tweetforce.engine import POINTS_GROUP
from tweetforce.export import export_svg, render_settled


def test_render_settled_runs_to_convergence(records):
    engine, surface = render_settled(records, "Subjectivity")
    assert not engine.simulation.running
    assert max_overlap(engine.simulation.positions, engine.config.point_radius) < 0.05
    (batch,) = surface.items(POINTS_GROUP)
    assert len(batch.xs) == len(records)


def test_export_svg_writes_scene(tmp_path, records):
    out = export_svg(records, tmp_path / "layout")
    assert out.suffix == ".svg"
    svg = out.read_text(encoding="utf-8")
    assert svg.count("<circle") == len(records)
    assert "Positive" in svg and "Negative" in svg
    assert "<linearGradient" in svg
    assert ">March</text>" in svg
