"""Public framepace API contracts."""

from framepace.api.logging import LoggingConfig
from framepace.api.render import (
    RenderableProgram,
    SurfaceCapabilities,
    SurfaceConfig,
    SurfaceContextPort,
    clamp_surface_size,
)
from framepace.api.window import (
    RedrawPort,
    SurfaceHandle,
    WindowCloseEvent,
    WindowEvent,
    WindowPort,
    WindowRedrawEvent,
    WindowResizeEvent,
)

__all__ = [
    "LoggingConfig",
    "RedrawPort",
    "RenderableProgram",
    "SurfaceCapabilities",
    "SurfaceConfig",
    "SurfaceContextPort",
    "SurfaceHandle",
    "WindowCloseEvent",
    "WindowEvent",
    "WindowPort",
    "WindowRedrawEvent",
    "WindowResizeEvent",
    "clamp_surface_size",
]
