"""
Interactive pygfx front end.

The renderer, canvas, event loop and fly camera all come from pygfx and
rendercanvas. This module only wires the simulation's segments into the scene.
"""
from __future__ import annotations

from typing import List, Tuple

import pygfx as gfx
from rendercanvas.auto import RenderCanvas, loop

from lorenzviz.core import constants
from lorenzviz.core.chaos.base import Segment
from lorenzviz.core.color import Hsla, hsla_to_rgba
from lorenzviz.scene.trail import TrailBuffer
from lorenzviz.sim.simulation import Simulation
from lorenzviz.utils.logging import get_logger

logger = get_logger(__name__)


class TrailMaterial(gfx.LineSegmentMaterial):
    """Unlit segment pairs coloured per vertex and alpha blended."""

    def __init__(self, thickness: float = 1.0, **kwargs):
        kwargs.setdefault("color_mode", "vertex")
        kwargs.setdefault("alpha_mode", "blend")
        super().__init__(thickness=thickness, **kwargs)


class TrailChunk:
    """One scene object backed by a ``TrailBuffer``."""

    def __init__(self, capacity: int, material: TrailMaterial):
        self.buffer = TrailBuffer(capacity)
        self.geometry = gfx.Geometry(positions=self.buffer.positions, colors=self.buffer.colors)
        self.line = gfx.Line(self.geometry, material)

    def flush(self) -> None:
        dirty = self.buffer.dirty_range()
        if dirty is None:
            return
        offset, size = dirty
        self.geometry.positions.update_range(offset, size)
        self.geometry.colors.update_range(offset, size)
        self.buffer.clear_dirty()


class SceneSink:
    """Turns spawned segments into line geometry inside ``scene``."""

    def __init__(self, scene: gfx.Scene, chunk_capacity: int = constants.TRAIL_CHUNK_CAPACITY):
        self.scene = scene
        self.chunk_capacity = chunk_capacity
        self.material = TrailMaterial()
        self.chunks: List[TrailChunk] = []

    def _current_chunk(self) -> TrailChunk:
        if not self.chunks or self.chunks[-1].buffer.is_full:
            if self.chunks:
                self.chunks[-1].flush()
            chunk = TrailChunk(self.chunk_capacity, self.material)
            self.scene.add(chunk.line)
            self.chunks.append(chunk)
            logger.debug("Spawned trail chunk #%d capacity=%d", len(self.chunks), self.chunk_capacity)
        return self.chunks[-1]

    def spawn_segment(self, segment: Segment, color: Hsla) -> None:
        self._current_chunk().buffer.append(segment, hsla_to_rgba(color))

    def flush(self) -> None:
        if self.chunks:
            self.chunks[-1].flush()


class Viewer:
    """Window, camera and per-frame driver for a ``Simulation``."""

    def __init__(
        self,
        simulation: Simulation,
        size: Tuple[int, int] = constants.WINDOW_SIZE,
        title: str = constants.WINDOW_TITLE,
    ):
        self.simulation = simulation
        self.canvas = RenderCanvas(size=size, title=title)
        self.renderer = gfx.WgpuRenderer(self.canvas)
        self.scene = gfx.Scene()
        self.scene.add(gfx.Background.from_color(constants.CLEAR_COLOR))

        width, height = size
        self.camera = gfx.PerspectiveCamera(constants.CAMERA_FOV, width / height, depth_range=(0.1, 5000))
        self.camera.local.position = constants.CAMERA_POSITION
        self.camera.look_at(constants.CAMERA_TARGET)
        self.controller = gfx.FlyController(self.camera, register_events=self.renderer)

        self.sink = SceneSink(self.scene)
        logger.info(
            "Viewer ready size=%dx%d camera=%s steps_per_tick=%d",
            width,
            height,
            constants.CAMERA_POSITION,
            simulation.steps_per_tick,
        )

    def animate(self) -> None:
        self.simulation.tick(self.sink)
        self.sink.flush()
        self.renderer.render(self.scene, self.camera)
        self.canvas.request_draw()

    def run(self) -> None:
        self.canvas.request_draw(self.animate)
        loop.run()
