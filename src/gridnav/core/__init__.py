"""
Core infrastructure module.
- Configuration management
- Errors
- Logging
- Planner state machine
"""

from .config import (
    NavigationConfig,
    SensorConfig,
    MoverConfig,
    ProcessorConfig,
    GridNavConfig,
    config_from_dict,
    load_config,
)
from .errors import (
    NavigationError,
    InvariantViolation,
    InvalidCoordinateError,
    ConfigError,
    MapFormatError,
)
from .log import setup_logging
from .state_machine import StateMachine, PlannerState, PlannerEvent

__all__ = [
    'NavigationConfig',
    'SensorConfig',
    'MoverConfig',
    'ProcessorConfig',
    'GridNavConfig',
    'config_from_dict',
    'load_config',
    'NavigationError',
    'InvariantViolation',
    'InvalidCoordinateError',
    'ConfigError',
    'MapFormatError',
    'setup_logging',
    'StateMachine',
    'PlannerState',
    'PlannerEvent',
]
