"""Window subsystem runtime adapters."""

from framepace.window.factory import create_window_layer
from framepace.window.rendercanvas_glfw import RenderCanvasWindow, create_rendercanvas_window

__all__ = ["RenderCanvasWindow", "create_rendercanvas_window", "create_window_layer"]
