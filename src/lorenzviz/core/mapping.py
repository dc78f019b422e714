from __future__ import annotations

import math
from typing import Protocol, Tuple, TypeVar


class SupportsArithmetic(Protocol):
    def __add__(self, other, /): ...

    def __sub__(self, other, /): ...

    def __mul__(self, other, /): ...

    def __truediv__(self, other, /): ...


T = TypeVar("T", bound=SupportsArithmetic)


def map_range(from_range: Tuple[T, T], to_range: Tuple[T, T], value: T) -> T:
    """
    Map ``value`` linearly from ``from_range`` onto ``to_range``.

    Values outside the source range extrapolate. An empty source range
    (low == high) is not rejected: the result is a float +-inf, or NaN when
    ``value`` sits on the bound or is NaN, as with IEEE float division.
    """
    from_lo, from_hi = from_range
    to_lo, to_hi = to_range
    scaled = (value - from_lo) * (to_hi - to_lo)
    try:
        return to_lo + scaled / (from_hi - from_lo)
    except ArithmeticError:
        # ZeroDivisionError for floats, InvalidOperation/DivisionByZero for Decimal.
        # IEEE: 0 / 0 and nan / 0 are nan, anything else is a signed inf.
        base = float(to_lo)
        numerator = float(scaled)
        if numerator == 0 or math.isnan(numerator):
            return base + math.nan
        return base + math.copysign(math.inf, numerator)
