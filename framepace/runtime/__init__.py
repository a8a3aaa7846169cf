"""Runtime modules."""

from framepace.runtime.config import RuntimeConfig, get_runtime_config, load_runtime_config
from framepace.runtime.errors import DeviceLostError, FatalInitError, SurfaceLostError
from framepace.runtime.logging import configure_logging, setup_logging
from framepace.runtime.metrics import FrameCounter, FrameStats
from framepace.runtime.time import TimingGate

__all__ = [
    "DeviceLostError",
    "FatalInitError",
    "FrameCounter",
    "FrameStats",
    "RuntimeConfig",
    "SurfaceLostError",
    "TimingGate",
    "configure_logging",
    "get_runtime_config",
    "load_runtime_config",
    "setup_logging",
]
