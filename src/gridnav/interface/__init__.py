"""
Abstract interfaces for sensors and movers.

The same planning loop runs against real drivers or the simulator as
long as they implement these contracts.
"""

from .sensor_interface import (
    IDistanceSensor,
    IMover,
)

from .simulation_adapters import (
    SimulatedRangeSensor,
    SimulatedMover,
)

__all__ = [
    # Interfaces
    'IDistanceSensor',
    'IMover',
    # Simulation adapters
    'SimulatedRangeSensor',
    'SimulatedMover',
]
