from utils.ids import generate_ksuid, now_micros, format_timestamp
from core.errors import (
    BaseSimError,
    ConfigError,
    GridError,
    InvalidMotionError,
    SimulationStateError,
)

__all__ = [
    "generate_ksuid",
    "now_micros",
    "format_timestamp",
    "BaseSimError",
    "ConfigError",
    "GridError",
    "InvalidMotionError",
    "SimulationStateError",
]
