from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

Vec3 = tuple[float, float, float]


@dataclass
class Position:
    """Current point on a trajectory. Mutated in place by a single system."""

    x: float
    y: float
    z: float

    @classmethod
    def from_tuple(cls, values: Vec3) -> "Position":
        x, y, z = values
        return cls(float(x), float(y), float(z))

    def as_tuple(self) -> Vec3:
        return self.x, self.y, self.z


@dataclass(frozen=True)
class Segment:
    """Line between two consecutive positions."""

    start: Vec3
    end: Vec3


class ChaoticSystem(ABC):
    """Base class for chaotic systems integrated with explicit Euler steps."""

    def __init__(self, position: Position, dt: float):
        self.position = position
        self.dt = float(dt)

    @abstractmethod
    def derivative(self, x: float, y: float, z: float) -> Vec3:
        """Return (dx, dy, dz) at the given state."""
        ...

    def step(self) -> Segment:
        """Advance one step and return the segment it traced."""
        pos = self.position
        previous = pos.as_tuple()
        dx, dy, dz = self.derivative(*previous)

        pos.x += dx * self.dt
        pos.y += dy * self.dt
        pos.z += dz * self.dt
        return Segment(previous, pos.as_tuple())

    def advance(self, steps: int) -> list[Segment]:
        return [self.step() for _ in range(steps)]
