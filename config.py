import json
from pathlib import Path

from core.errors import ConfigError

_DEFAULT_CONFIG = Path(__file__).parent / "config.json"

DIM_MIN = 2
DIM_MAX = 50
MAX_UPDATES = 1_000_000
MOVEMENTS = ("free", "axis")


class SimulationConfig:
    __slots__ = ("width", "height", "seed", "movement", "max_updates",
                 "update_rate", "yield_interval", "cell_size")

    def __init__(self, width=10, height=10, seed=None, movement="free", max_updates=MAX_UPDATES,
                 update_rate=60, yield_interval=0.001, cell_size=8):
        self.width = width
        self.height = height
        self.seed = seed
        self.movement = movement
        self.max_updates = max_updates
        self.update_rate = update_rate
        self.yield_interval = yield_interval
        self.cell_size = cell_size

    def validate(self):
        """Raise ConfigError for values the simulation cannot run with."""
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer", field=name, value=value)
            if not DIM_MIN <= value <= DIM_MAX:
                raise ConfigError(f"{name} must be in [{DIM_MIN}, {DIM_MAX}]", field=name, value=value)
        if self.movement not in MOVEMENTS:
            raise ConfigError(f"movement must be one of {', '.join(MOVEMENTS)}", field="movement", value=self.movement)
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ConfigError("seed must be an integer", field="seed", value=self.seed)
        if self.max_updates < 0:
            raise ConfigError("max_updates must be >= 0", field="max_updates", value=self.max_updates)
        if self.update_rate <= 0:
            raise ConfigError("update_rate must be positive", field="update_rate", value=self.update_rate)
        if self.yield_interval < 0:
            raise ConfigError("yield_interval must be >= 0", field="yield_interval", value=self.yield_interval)
        if self.cell_size < 1:
            raise ConfigError("cell_size must be >= 1", field="cell_size", value=self.cell_size)
        return self


class LoggingConfig:
    __slots__ = ("level", "file", "crash_file")

    def __init__(self, level="INFO", file="", crash_file="logs/crash.log"):
        self.level = level
        self.file = file
        self.crash_file = crash_file


class Config:
    __slots__ = ("simulation", "logging")

    def __init__(self, simulation=None, logging=None):
        self.simulation = simulation or SimulationConfig()
        self.logging = logging or LoggingConfig()

    @classmethod
    def from_dict(cls, d):
        try:
            return cls(
                SimulationConfig(**d.get("simulation", {})),
                LoggingConfig(**d.get("logging", {})),
            )
        except TypeError as exc:
            raise ConfigError(f"unknown config key: {exc}", cause=exc) from exc


def load_config(path=None):
    config_path = Path(path) if path else _DEFAULT_CONFIG

    if not config_path.exists():
        return Config()

    with open(config_path) as file:
        return Config.from_dict(json.load(file))
