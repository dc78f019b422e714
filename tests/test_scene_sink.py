import pygfx as gfx
import pytest

from lorenzviz.core.chaos.base import Segment
from lorenzviz.core.color import Hsla, hsla_to_rgba
from lorenzviz.render.viewer import SceneSink


def _segment(i: int) -> Segment:
    return Segment((float(i), 0.0, 0.0), (float(i + 1), 1.0, 2.0))


def test_sink_rotates_chunks_when_full():
    scene = gfx.Scene()
    sink = SceneSink(scene, chunk_capacity=2)
    colors = [Hsla(25.0 + i, 0.8, 0.3 + 0.1 * i, 0.5) for i in range(5)]

    for i, color in enumerate(colors):
        sink.spawn_segment(_segment(i), color)

    assert [chunk.buffer.count for chunk in sink.chunks] == [2, 2, 1]
    for chunk in sink.chunks:
        assert chunk.line in scene.children

    for i, color in enumerate(colors):
        chunk, slot = sink.chunks[i // 2], i % 2
        expected = hsla_to_rgba(color)
        assert tuple(chunk.buffer.colors[slot * 2]) == pytest.approx(expected)
        assert tuple(chunk.buffer.colors[slot * 2 + 1]) == pytest.approx(expected)
        assert tuple(chunk.buffer.positions[slot * 2 + 1]) == pytest.approx(_segment(i).end)


def test_flush_clears_pending_upload():
    sink = SceneSink(gfx.Scene(), chunk_capacity=4)
    sink.spawn_segment(_segment(0), Hsla(30.0, 0.8, 0.5, 0.5))
    assert sink.chunks[-1].buffer.dirty_range() == (0, 2)

    sink.flush()
    assert sink.chunks[-1].buffer.dirty_range() is None
