"""Single render cycle: acquire, record, submit, present."""

from __future__ import annotations

import logging
from typing import Any

from framepace.api.render import RenderableProgram
from framepace.rendering.surface import SurfaceManager
from framepace.runtime.errors import RECOVERABLE_RUNTIME_ERRORS, log_recoverable
from framepace.runtime.metrics import FrameCounter

_LOG = logging.getLogger("framepace.presenter")

TRIANGLE_VERTEX_COUNT = 3
TRIANGLE_INSTANCE_COUNT = 1


class Presenter:
    """Records one clear-and-draw pass per cycle against the acquired target."""

    def __init__(
        self,
        *,
        clear_color: tuple[float, float, float, float] = (0.0, 1.0, 0.0, 1.0),
        label: str = "framepace.frame",
    ) -> None:
        self._clear_color = tuple(float(channel) for channel in clear_color)
        self._label = label

    @property
    def clear_color(self) -> tuple[float, ...]:
        return self._clear_color

    def render_cycle(
        self,
        surface_manager: SurfaceManager,
        device: Any,
        queue: Any,
        renderable_program: RenderableProgram,
        frame_counter: FrameCounter,
    ) -> None:
        target = surface_manager.acquire()
        try:
            view = target.create_view()
            encoder = device.create_command_encoder(label=self._label)
            self._record_pass(encoder, view, renderable_program)
            queue.submit([encoder.finish()])
            target.present()
        except BaseException:
            if target.is_valid:
                try:
                    target.discard()
                except RECOVERABLE_RUNTIME_ERRORS:
                    log_recoverable(_LOG, "target_discard_failed", level=logging.WARNING)
            raise
        frame_counter.update()

    def _record_pass(self, encoder: Any, view: object, program: RenderableProgram) -> None:
        render_pass = encoder.begin_render_pass(
            color_attachments=[
                {
                    "view": view,
                    "resolve_target": None,
                    "clear_value": self._clear_color,
                    "load_op": "clear",
                    "store_op": "store",
                }
            ]
        )
        try:
            render_pass.set_pipeline(program.pipeline)
            render_pass.draw(TRIANGLE_VERTEX_COUNT, TRIANGLE_INSTANCE_COUNT, 0, 0)
        finally:
            render_pass.end()


__all__ = ["Presenter", "TRIANGLE_INSTANCE_COUNT", "TRIANGLE_VERTEX_COUNT"]
