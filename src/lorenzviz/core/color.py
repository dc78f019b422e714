from __future__ import annotations

import colorsys
from dataclasses import dataclass

from lorenzviz.core import constants
from lorenzviz.core.chaos.base import Position
from lorenzviz.core.mapping import map_range

Rgba = tuple[float, float, float, float]


@dataclass(frozen=True)
class Hsla:
    """Hue in degrees, saturation/lightness/alpha in [0, 1]."""

    hue: float
    saturation: float
    lightness: float
    alpha: float


def segment_color(position: Position) -> Hsla:
    """Colour for the segment ending at ``position``."""
    hue = map_range(constants.HUE_SOURCE_RANGE, constants.HUE_TARGET_RANGE, position.x)
    lightness = map_range(
        constants.LIGHTNESS_SOURCE_RANGE, constants.LIGHTNESS_TARGET_RANGE, position.y
    )
    return Hsla(hue, constants.SATURATION, lightness, constants.ALPHA)


def hsla_to_rgba(color: Hsla) -> Rgba:
    # colorsys takes hue as a turn fraction and orders lightness before saturation
    r, g, b = colorsys.hls_to_rgb((color.hue / 360.0) % 1.0, color.lightness, color.saturation)
    return r, g, b, color.alpha
