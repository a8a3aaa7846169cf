"""Window backend selection and factory helpers."""

from __future__ import annotations

from framepace.api.window import WindowPort
from framepace.window.rendercanvas_glfw import create_rendercanvas_window

_BACKEND_MODULES: dict[str, str] = {
    "rendercanvas_glfw": "rendercanvas.glfw",
    "rendercanvas_auto": "rendercanvas.auto",
}


def create_window_layer(
    *,
    backend: str,
    width: int,
    height: int,
    title: str,
    vsync: bool,
) -> WindowPort:
    module_name = _BACKEND_MODULES.get(_normalize_backend(backend))
    if module_name is None:
        raise RuntimeError(f"Unsupported FRAMEPACE_WINDOW_BACKEND: {backend!r}")
    return create_rendercanvas_window(
        width=int(width),
        height=int(height),
        title=title,
        vsync=bool(vsync),
        module_name=module_name,
    )


def _normalize_backend(raw: str) -> str:
    value = str(raw).strip().lower()
    if value in {"rendercanvas", "rendercanvas_glfw", "glfw"}:
        return "rendercanvas_glfw"
    if value in {"auto", "rendercanvas_auto"}:
        return "rendercanvas_auto"
    return value


__all__ = ["create_window_layer"]
