"""
Configuration

All tunables live in small dataclasses. NavigationConfig is frozen: the
map resolution, chassis radius and reach tolerance are fixed once a map
is built.

Usage:
    config = load_config("config/navigation.yaml")
    nav_map = NavigationMap(config.navigation)
"""

import math
from dataclasses import dataclass, field, fields
from typing import Optional

import yaml

from .errors import ConfigError


@dataclass(frozen=True)
class NavigationConfig:
    """Map and planner geometry."""
    resolution: float = 0.5             # meters per grid cell
    chassis_radius: float = 0.2         # half the robot width (meters)
    tolerance: Optional[float] = None   # reach distance, defaults to resolution

    def __post_init__(self):
        if not _positive(self.resolution):
            raise ConfigError(f"resolution must be positive, got {self.resolution}")
        if not (self.chassis_radius == 0 or _positive(self.chassis_radius)):
            raise ConfigError(f"chassis_radius must be >= 0, got {self.chassis_radius}")
        if self.tolerance is None:
            object.__setattr__(self, 'tolerance', self.resolution)
        elif not _positive(self.tolerance):
            raise ConfigError(f"tolerance must be positive, got {self.tolerance}")

    @property
    def buffer(self) -> float:
        """Minimum approach distance used when placing frontier nodes."""
        return self.chassis_radius + self.resolution


@dataclass
class SensorConfig:
    """Simulated range sensor."""
    num_rays: int = 120                 # readings per scan, evenly spaced
    max_range: float = 12.0             # meters, beyond this reads as inf
    noise_std: float = 0.0              # gaussian range noise (meters)
    seed: Optional[int] = None          # RNG seed for reproducible noise


@dataclass
class MoverConfig:
    """Simulated mover."""
    speed: float = 1.0                  # max distance per move (meters)


@dataclass
class ProcessorConfig:
    """Driving loop."""
    max_steps: int = 1000               # step budget for one move_to()


@dataclass
class GridNavConfig:
    """Complete configuration, one section per component."""
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    sensor: SensorConfig = field(default_factory=SensorConfig)
    mover: MoverConfig = field(default_factory=MoverConfig)
    processor: ProcessorConfig = field(default_factory=ProcessorConfig)


def _positive(value) -> bool:
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and math.isfinite(value) and value > 0)


def _positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _build(cls, section: str, values):
    if values is None:
        return cls()
    if not isinstance(values, dict):
        raise ConfigError(f"section '{section}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = set(values) - known
    if unknown:
        raise ConfigError(f"unknown keys in '{section}': {', '.join(sorted(unknown))}")
    try:
        return cls(**values)
    except TypeError as e:
        raise ConfigError(f"invalid section '{section}': {e}") from e


def config_from_dict(data: dict) -> GridNavConfig:
    """Build a GridNavConfig from a plain mapping (as read from YAML)."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("configuration root must be a mapping")

    sections = {f.name: f.type for f in fields(GridNavConfig)}
    unknown = set(data) - set(sections)
    if unknown:
        raise ConfigError(f"unknown sections: {', '.join(sorted(unknown))}")

    config = GridNavConfig(
        navigation=_build(NavigationConfig, 'navigation', data.get('navigation')),
        sensor=_build(SensorConfig, 'sensor', data.get('sensor')),
        mover=_build(MoverConfig, 'mover', data.get('mover')),
        processor=_build(ProcessorConfig, 'processor', data.get('processor')),
    )

    if not _positive_int(config.sensor.num_rays):
        raise ConfigError(f"sensor.num_rays must be a positive integer, got {config.sensor.num_rays!r}")
    if not _positive(config.sensor.max_range):
        raise ConfigError(f"sensor.max_range must be positive, got {config.sensor.max_range!r}")
    noise = config.sensor.noise_std
    if not (noise == 0 or _positive(noise)):
        raise ConfigError(f"sensor.noise_std must be >= 0, got {noise!r}")
    if not _positive(config.mover.speed):
        raise ConfigError(f"mover.speed must be positive, got {config.mover.speed!r}")
    if not _positive_int(config.processor.max_steps):
        raise ConfigError(f"processor.max_steps must be a positive integer, "
                          f"got {config.processor.max_steps!r}")
    return config


def load_config(path: str) -> GridNavConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: YAML file with optional navigation/sensor/mover/processor sections

    Returns:
        GridNavConfig with defaults for missing sections
    """
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    return config_from_dict(data)
