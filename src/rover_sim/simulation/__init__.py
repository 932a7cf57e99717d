"""
Simulation components for rover simulation.

This module contains the simulation coordinator and the pieces it runs each
tick: actuator command validation, the repeating task scheduler, the trace
history and the values exchanged with the control function.

Components:
    - SimulationCoordinator: Owns vehicle state and the control/render tasks
    - ActuationValidator: Validates control output and drives the wheels
    - RepeatingTask: Cancellable periodic callback on an asyncio loop
    - TraceHistory: Decimated record of the driven path
"""

from .actuation import ActuationResult, ActuationValidator, steering_to_steer_value
from .coordinator import SimulationCoordinator
from .frames import ActuatorCommand, SensorFrame
from .scheduler import RepeatingTask
from .trace import TraceHistory

__all__ = [
    # Core classes
    "SimulationCoordinator",
    "ActuationValidator",
    "RepeatingTask",
    "TraceHistory",

    # Exchanged values
    "ActuatorCommand",
    "SensorFrame",
    "ActuationResult",

    # Utility functions
    "steering_to_steer_value"
]
