"""
Rover Sim: top-down simulation for programmatically controlled rovers

A Python package for testing navigation and control logic against a
physics-approximate wheeled vehicle before deploying it to real hardware.

This package implements:
- Geodetic <-> local planar coordinate conversion
- Error injection for sensors and actuators (authenticity levels)
- 360° ray-casting proximity sensor and beacon target finder
- Validation of control output for tank and rover wheel layouts
- Fixed-rate control loop and display-rate physics/render loop

A control function receives a SensorFrame every 20 ms and returns the next
ActuatorCommand; the simulation takes care of everything else.
"""

from .geo import Location, CoordinateFrame
from .options import (
    LandmineSpec,
    LocationOfInterest,
    ObstacleSpec,
    RenderingOptions,
    SimulationOptions,
    TargetSpec,
    VehicleOptions,
    VehicleType,
)
from .sensors import AuthenticityLevel, PhysicalOptions
from .simulation import ActuatorCommand, SensorFrame, SimulationCoordinator

__version__ = "1.0.0"
__author__ = "Rover Sim Team"

__all__ = [
    "SimulationCoordinator",
    "SimulationOptions",
    "RenderingOptions",
    "VehicleOptions",
    "VehicleType",
    "Location",
    "LocationOfInterest",
    "ObstacleSpec",
    "TargetSpec",
    "LandmineSpec",
    "CoordinateFrame",
    "AuthenticityLevel",
    "PhysicalOptions",
    "ActuatorCommand",
    "SensorFrame"
]
