"""Composition root: window, device, surface, scheduler."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Sequence
from typing import Any

from framepace.api.render import RenderableProgram
from framepace.api.window import SurfaceHandle, WindowPort
from framepace.rendering.device import GpuContext, request_gpu_context
from framepace.rendering.presenter import Presenter
from framepace.rendering.program import create_triangle_program
from framepace.rendering.surface import SurfaceManager
from framepace.runtime.config import RuntimeConfig, initialize_runtime_config, set_runtime_config
from framepace.runtime.errors import FatalInitError
from framepace.runtime.frontend import HostedWindowFrontend
from framepace.runtime.logging import configure_logging, shutdown_logging
from framepace.runtime.metrics import FrameCounter
from framepace.runtime.scheduler import FrameScheduler
from framepace.runtime.time import TimingGate
from framepace.window.factory import create_window_layer

_LOG = logging.getLogger("framepace.bootstrap")

WindowFactory = Callable[..., WindowPort]
GpuFactory = Callable[..., GpuContext]
ProgramFactory = Callable[[Any, str], RenderableProgram]

EXIT_OK = 0
EXIT_FATAL = 1


def run_app(
    config: RuntimeConfig,
    *,
    window_factory: WindowFactory = create_window_layer,
    gpu_factory: GpuFactory = request_gpu_context,
    program_factory: ProgramFactory = create_triangle_program,
) -> int:
    """Build the presentation loop from ``config``, run it and return an exit code."""
    try:
        window = window_factory(
            backend=config.window.backend,
            width=config.window.width,
            height=config.window.height,
            title=config.window.title,
            vsync=config.render.vsync,
        )
    except RuntimeError as exc:
        _LOG.error("window_unavailable error=%s", exc)
        return EXIT_FATAL
    surface = window.create_surface()
    try:
        scheduler = _build_scheduler(config, window, surface, gpu_factory, program_factory)
    except FatalInitError as exc:
        _LOG.error("startup_failed error=%s details=%s", exc, exc.details)
        window.close()
        return EXIT_FATAL
    HostedWindowFrontend(window, scheduler).run()
    if scheduler.fatal_error is not None:
        _LOG.error("render_loop_terminated error=%s", scheduler.fatal_error)
        return EXIT_FATAL
    return EXIT_OK


def _build_scheduler(
    config: RuntimeConfig,
    window: WindowPort,
    surface: SurfaceHandle,
    gpu_factory: GpuFactory,
    program_factory: ProgramFactory,
) -> FrameScheduler:
    gpu = gpu_factory(
        surface,
        power_preference=config.renderer.power_preference,
        backends=config.renderer.wgpu_backends,
        present_modes=config.renderer.present_modes,
    )
    surface_manager = SurfaceManager(
        gpu.surface_context,
        gpu.device,
        vsync=config.render.vsync,
        usage=gpu.texture_usage,
        presents_after_draw=surface.presents_after_draw,
    )
    try:
        surface_config = surface_manager.initialize(gpu.capabilities, window.physical_size())
        try:
            program = program_factory(gpu.device, surface_config.format)
        except Exception as exc:
            raise FatalInitError(
                "render program construction failed",
                details={
                    "format": surface_config.format,
                    "exception_type": exc.__class__.__name__,
                    "exception_message": str(exc),
                },
            ) from exc
    except FatalInitError:
        surface_manager.release()
        gpu.release()
        raise
    _LOG.info(
        "presentation_loop_ready fps_cap=%.1f size=%dx%d",
        config.render.fps_cap,
        surface_config.width,
        surface_config.height,
    )
    return FrameScheduler(
        surface_manager=surface_manager,
        presenter=Presenter(clear_color=config.render.clear_color),
        frame_counter=FrameCounter(),
        gate=TimingGate.from_fps(config.render.fps_cap),
        device=gpu.device,
        queue=gpu.queue,
        program=program,
        window=window,
        owned_resources=(gpu, surface_manager),
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="framepace",
        description="Render a triangle at a capped frame rate and show FPS in the title.",
    )
    parser.add_argument("--fps", type=float, default=None, help="target frame rate (default: 30)")
    parser.add_argument("--width", type=int, default=None, help="initial window width")
    parser.add_argument("--height", type=int, default=None, help="initial window height")
    parser.add_argument("--title", default=None, help="initial window title")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--log-file", default=None, help="append JSON logs to this file")
    parser.add_argument(
        "--no-vsync",
        dest="vsync",
        action="store_false",
        default=None,
        help="prefer non-blocking present modes",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    config = initialize_runtime_config().with_overrides(
        fps_cap=args.fps,
        width=args.width,
        height=args.height,
        title=args.title,
        vsync=args.vsync,
        log_level=args.log_level,
        log_file=args.log_file,
    )
    set_runtime_config(config)
    configure_logging(config.logging)
    try:
        return run_app(config)
    finally:
        shutdown_logging()


__all__ = ["EXIT_FATAL", "EXIT_OK", "build_arg_parser", "main", "run_app"]
