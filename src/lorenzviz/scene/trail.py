from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from lorenzviz.core.chaos.base import Segment
from lorenzviz.core.color import Rgba


class BufferFullError(Exception):
    """Raised when appending to a trail buffer with no free slot."""


class TrailBuffer:
    """
    Fixed-capacity vertex storage for line segments.

    Each segment occupies two consecutive rows. Rows not yet written hold NaN
    positions so the renderer skips them. Writes since the last upload are
    tracked as a single dirty vertex range.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = int(capacity)
        self.positions = np.full((self.capacity * 2, 3), np.nan, dtype=np.float32)
        self.colors = np.zeros((self.capacity * 2, 4), dtype=np.float32)
        self.count = 0
        self._dirty: Optional[Tuple[int, int]] = None

    @property
    def is_full(self) -> bool:
        return self.count >= self.capacity

    def append(self, segment: Segment, rgba: Rgba) -> int:
        """Store one segment and return its index."""
        if self.is_full:
            raise BufferFullError(f"trail buffer full ({self.capacity} segments)")
        index = self.count
        row = index * 2
        self.positions[row] = segment.start
        self.positions[row + 1] = segment.end
        self.colors[row : row + 2] = rgba
        self.count += 1

        if self._dirty is None:
            self._dirty = (row, row + 2)
        else:
            self._dirty = (min(self._dirty[0], row), max(self._dirty[1], row + 2))
        return index

    def dirty_range(self) -> Optional[Tuple[int, int]]:
        """Return ``(offset, size)`` in vertices, or None if nothing changed."""
        if self._dirty is None:
            return None
        start, stop = self._dirty
        return start, stop - start

    def clear_dirty(self) -> None:
        self._dirty = None
