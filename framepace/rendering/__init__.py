"""Rendering modules."""

from framepace.rendering.device import GpuContext, request_gpu_context
from framepace.rendering.presenter import Presenter
from framepace.rendering.program import create_triangle_program
from framepace.rendering.surface import PresentableTarget, SurfaceManager

__all__ = [
    "GpuContext",
    "PresentableTarget",
    "Presenter",
    "SurfaceManager",
    "create_triangle_program",
    "request_gpu_context",
]
