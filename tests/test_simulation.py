import pytest

from lorenzviz.core.chaos.base import Position
from lorenzviz.core.chaos.lorenz import lorenz_step
from lorenzviz.core.color import segment_color
from lorenzviz.core import constants
from lorenzviz.sim.simulation import RecordingSink, Simulation


def test_tick_spawns_one_segment_per_step():
    sim = Simulation()
    sink = RecordingSink()

    segments = sim.tick(sink)

    assert len(segments) == constants.STEPS_PER_TICK == 50
    assert sink.segments == segments
    assert sim.ticks == 1


def test_ticks_chain_state():
    sim = Simulation()
    sink = RecordingSink()
    sim.run(3, sink)

    segments = sink.segments
    assert len(segments) == 150
    assert segments[0].start == constants.INITIAL_POSITION
    for prev, nxt in zip(segments, segments[1:]):
        assert prev.end == nxt.start
    assert sim.position.as_tuple() == segments[-1].end


def test_tick_matches_manual_integration():
    sim = Simulation()
    sink = RecordingSink()
    sim.tick(sink)

    position = Position.from_tuple(constants.INITIAL_POSITION)
    expected = [lorenz_step(position) for _ in range(50)]
    assert sink.segments == expected


def test_color_comes_from_new_position():
    sim = Simulation(initial=(1.0, 2.0, 3.0), steps_per_tick=5)
    sink = RecordingSink()
    sim.tick(sink)

    for segment, color in sink.records:
        assert color == segment_color(Position.from_tuple(segment.end))


def test_independent_runs_are_identical():
    a, b = RecordingSink(), RecordingSink()
    Simulation().run(2, a)
    Simulation().run(2, b)
    assert a.positions() == b.positions()


def test_invalid_steps_per_tick():
    with pytest.raises(ValueError):
        Simulation(steps_per_tick=0)
