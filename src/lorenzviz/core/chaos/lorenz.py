from __future__ import annotations

from dataclasses import dataclass

from lorenzviz.core.constants import BETA, DT, RHO, SIGMA

from .base import ChaoticSystem, Position, Segment, Vec3


@dataclass(frozen=True)
class LorenzParams:
    sigma: float = SIGMA
    rho: float = RHO
    beta: float = BETA


DEFAULT_PARAMS = LorenzParams()


def derivatives(x: float, y: float, z: float, params: LorenzParams = DEFAULT_PARAMS) -> Vec3:
    dx = params.sigma * (y - x)
    dy = x * (params.rho - z) - y
    dz = x * y - params.beta * z
    return dx, dy, dz


class LorenzSystem(ChaoticSystem):
    """Explicit Euler integration of the Lorenz system."""

    def __init__(
        self,
        position: Position,
        dt: float = DT,
        params: LorenzParams = DEFAULT_PARAMS,
    ):
        super().__init__(position, dt)
        self.params = params

    def derivative(self, x: float, y: float, z: float) -> Vec3:
        return derivatives(x, y, z, self.params)


def lorenz_step(
    position: Position,
    params: LorenzParams = DEFAULT_PARAMS,
    dt: float = DT,
) -> Segment:
    """
    Apply one explicit Euler step to ``position`` in place.

    All three derivatives are taken from the pre-step state; the returned
    segment runs from that state to the updated one.
    """
    return LorenzSystem(position, dt=dt, params=params).step()
