from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Iterable

import numpy as np

from lorenzviz.core.chaos.base import Vec3


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def trajectory_fingerprint(positions: Iterable[Vec3]) -> str:
    """SHA-256 over the positions as little-endian float64 (row-major)."""
    arr = np.asarray(list(positions), dtype="<f8").reshape(-1, 3)
    return hashlib.sha256(arr.tobytes(order="C")).hexdigest()


TRACE_FIELDS = [
    "tick",
    "step",
    "x0",
    "y0",
    "z0",
    "x1",
    "y1",
    "z1",
    "hue",
    "saturation",
    "lightness",
    "alpha",
]
