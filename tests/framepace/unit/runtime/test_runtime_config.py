from __future__ import annotations

from framepace.runtime.config import (
    DEFAULT_CLEAR_COLOR,
    DEFAULT_PRESENT_MODES,
    get_runtime_config,
    initialize_runtime_config,
    load_runtime_config,
    resolve_log_level_name,
)


def test_load_runtime_config_defaults() -> None:
    config = load_runtime_config(env={})

    assert config.window.backend == "rendercanvas_glfw"
    assert (config.window.width, config.window.height) == (640, 480)
    assert config.window.title == "framepace"
    assert config.render.fps_cap == 30.0
    assert config.render.vsync is True
    assert config.render.clear_color == DEFAULT_CLEAR_COLOR
    assert config.renderer.present_modes == DEFAULT_PRESENT_MODES
    assert config.renderer.wgpu_backends == ()
    assert config.renderer.power_preference == "high-performance"
    assert config.logging.level_name == "INFO"
    assert config.logging.file_path is None


def test_load_runtime_config_reads_env_overrides() -> None:
    config = load_runtime_config(
        env={
            "FRAMEPACE_FPS_CAP": "60",
            "FRAMEPACE_RENDER_VSYNC": "off",
            "FRAMEPACE_CLEAR_COLOR": "0.2, 0.3, 0.4",
            "FRAMEPACE_WINDOW_WIDTH": "1280",
            "FRAMEPACE_WINDOW_HEIGHT": "720",
            "FRAMEPACE_WINDOW_BACKEND": "GLFW",
            "FRAMEPACE_WGPU_PRESENT_MODES": "Mailbox,fifo",
            "FRAMEPACE_WGPU_BACKENDS": "vulkan, gl",
            "FRAMEPACE_LOG_FORMAT": "JSON",
            "FRAMEPACE_LOG_FILE": "logs/run.jsonl",
        }
    )

    assert config.render.fps_cap == 60.0
    assert config.render.target_period_seconds == 1.0 / 60.0
    assert config.render.vsync is False
    assert config.render.clear_color == (0.2, 0.3, 0.4, 1.0)
    assert (config.window.width, config.window.height) == (1280, 720)
    assert config.window.backend == "glfw"
    assert config.renderer.present_modes == ("mailbox", "fifo")
    assert config.renderer.wgpu_backends == ("vulkan", "gl")
    assert config.logging.console_format == "json"
    assert config.logging.file_path == "logs/run.jsonl"


def test_load_runtime_config_falls_back_on_invalid_values() -> None:
    config = load_runtime_config(
        env={
            "FRAMEPACE_FPS_CAP": "fast",
            "FRAMEPACE_WINDOW_WIDTH": "-5",
            "FRAMEPACE_RENDER_VSYNC": "maybe",
            "FRAMEPACE_CLEAR_COLOR": "1,0",
        }
    )

    assert config.render.fps_cap == 30.0
    assert config.window.width == 1
    assert config.render.vsync is True
    assert config.render.clear_color == DEFAULT_CLEAR_COLOR


def test_resolve_log_level_prefers_project_variable() -> None:
    assert resolve_log_level_name(env={"LOG_LEVEL": "warning"}) == "WARNING"
    assert resolve_log_level_name(env={"LOG_LEVEL": "warning", "FRAMEPACE_LOG_LEVEL": "debug"}) == "DEBUG"
    assert resolve_log_level_name(env={}) == "INFO"


def test_with_overrides_applies_only_given_values() -> None:
    base = load_runtime_config(env={})

    config = base.with_overrides(fps_cap=0.5, width=0, title="demo", vsync=False, log_level="debug")

    assert config.render.fps_cap == 1.0
    assert config.window.width == 1
    assert config.window.height == base.window.height
    assert config.window.title == "demo"
    assert config.render.vsync is False
    assert config.logging.level_name == "DEBUG"
    assert base.window.title == "framepace"


def test_initialize_runtime_config_sets_current_config() -> None:
    config = initialize_runtime_config(env={"FRAMEPACE_WINDOW_TITLE": "ctx"})
    assert get_runtime_config() is config
