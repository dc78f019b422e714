from __future__ import annotations

from typing import List, Protocol, Tuple

from lorenzviz.core.chaos.base import Position, Segment, Vec3
from lorenzviz.core.chaos.lorenz import DEFAULT_PARAMS, LorenzParams, LorenzSystem
from lorenzviz.core.color import Hsla, segment_color
from lorenzviz.core.constants import DT, INITIAL_POSITION, STEPS_PER_TICK
from lorenzviz.utils.logging import get_logger

logger = get_logger(__name__)


class SegmentSink(Protocol):
    """Receiver for the geometry produced by each integration step."""

    def spawn_segment(self, segment: Segment, color: Hsla) -> None:
        ...


class RecordingSink:
    """Keeps every spawned segment in memory."""

    def __init__(self) -> None:
        self.records: List[Tuple[Segment, Hsla]] = []

    def spawn_segment(self, segment: Segment, color: Hsla) -> None:
        self.records.append((segment, color))

    @property
    def segments(self) -> List[Segment]:
        return [segment for segment, _ in self.records]

    def positions(self) -> List[Vec3]:
        return [segment.end for segment, _ in self.records]


class Simulation:
    """Owns the attractor state and advances it once per frame."""

    def __init__(
        self,
        initial: Vec3 = INITIAL_POSITION,
        dt: float = DT,
        steps_per_tick: int = STEPS_PER_TICK,
        params: LorenzParams = DEFAULT_PARAMS,
    ):
        if steps_per_tick < 1:
            raise ValueError("steps_per_tick must be >= 1")
        self.system = LorenzSystem(Position.from_tuple(initial), dt=dt, params=params)
        self.steps_per_tick = int(steps_per_tick)
        self.ticks = 0

    @property
    def position(self) -> Position:
        return self.system.position

    def tick(self, sink: SegmentSink) -> List[Segment]:
        """Run one frame worth of chained steps, spawning one segment per step."""
        segments = []
        for _ in range(self.steps_per_tick):
            segment = self.system.step()
            sink.spawn_segment(segment, segment_color(self.system.position))
            segments.append(segment)
        self.ticks += 1
        pos = self.system.position
        logger.debug("tick=%d position=(%.6f, %.6f, %.6f)", self.ticks, pos.x, pos.y, pos.z)
        return segments

    def run(self, ticks: int, sink: SegmentSink) -> None:
        logger.debug(
            "Running %d ticks steps_per_tick=%d dt=%s", ticks, self.steps_per_tick, self.system.dt
        )
        for _ in range(ticks):
            self.tick(sink)
