"""
Physics components for rover simulation.

Thin adapters over Box2D: the zero-gravity world with ray casting and
fixed-timestep stepping, and the top-down wheeled vehicle model.
"""

from .world import PhysicsWorld
from .vehicle import TopDownVehicle, WheelActuator, wheel_layout, heading_from_angle

__all__ = [
    "PhysicsWorld",
    "TopDownVehicle",
    "WheelActuator",
    "wheel_layout",
    "heading_from_angle"
]
