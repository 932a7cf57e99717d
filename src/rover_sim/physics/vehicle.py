"""
Top-down wheeled vehicle model on top of a Box2D body.

Each wheel is a force element fixed to the chassis at a body-local offset.
The wheel's rolling direction is the body's forward axis (+y) turned by the
wheel's steer angle, clockwise for positive values:

    forward_local = (sin δ, cos δ)
    right_local   = (cos δ, -sin δ)

Per physics step every wheel applies at its world point:
    - engine force along the rolling direction
    - rolling resistance opposing rolling speed, capped at the brake force
    - lateral friction opposing sideways slip, capped at the side friction

Resistances are computed as the force that would cancel the wheel's share of
the chassis velocity within one step, then clamped:

    F = clamp(-(m / n) · v / Δt, ±F_max)

Wheel Layouts (body-local, meters, x right / y forward):
    TANK:  0 left (-w/2, 0)        1 right (w/2, 0)
    ROVER: 0 front-left            1 front-right
           2 middle-left           3 middle-right
           4 rear-left             5 rear-right
"""

import math
from dataclasses import dataclass
from typing import List, Tuple

from ..config import (
    ROVER_HEIGHT,
    ROVER_WIDTH,
    WHEEL_BRAKE_FORCE,
    WHEEL_SIDE_FRICTION,
)
from ..options import VehicleType

AXLE_OFFSET = ROVER_HEIGHT * 0.4  # front/rear axle distance from the centre [m]


@dataclass
class WheelActuator:
    """
    Wheel constraint state.

    Only engine_force and steer_value change after construction.

    Attributes:
        local_position: Offset from the chassis centre [m]
        brake_force: Maximum rolling resistance [N]
        side_friction: Maximum lateral friction [N]
        engine_force: Current driving force [N]
        steer_value: Current steer angle [rad], clockwise positive
    """

    local_position: Tuple[float, float]
    brake_force: float = WHEEL_BRAKE_FORCE
    side_friction: float = WHEEL_SIDE_FRICTION
    engine_force: float = 0.0
    steer_value: float = 0.0


def wheel_layout(vehicle_type: VehicleType) -> List[WheelActuator]:
    """
    Create the wheel actuators for a vehicle type.

    The middle wheels of the rover carry no side friction: they drive but
    never fight the steered axles while turning.
    """
    half_width = ROVER_WIDTH / 2

    if vehicle_type is VehicleType.TANK:
        return [
            WheelActuator(local_position=(-half_width, 0.0)),
            WheelActuator(local_position=(half_width, 0.0)),
        ]

    return [
        WheelActuator(local_position=(-half_width, AXLE_OFFSET)),
        WheelActuator(local_position=(half_width, AXLE_OFFSET)),
        WheelActuator(local_position=(-half_width, 0.0), side_friction=0.0),
        WheelActuator(local_position=(half_width, 0.0), side_friction=0.0),
        WheelActuator(local_position=(-half_width, -AXLE_OFFSET)),
        WheelActuator(local_position=(half_width, -AXLE_OFFSET)),
    ]


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


class TopDownVehicle:
    """
    Applies wheel forces to a chassis body every physics step.

    Attributes:
        chassis: Box2D body the wheels are mounted on
        wheels: Wheel actuators, index order as in wheel_layout()
    """

    def __init__(self, chassis, wheels: List[WheelActuator]):
        self.chassis = chassis
        self.wheels = wheels

    def add_to_world(self, physics_world) -> None:
        physics_world.add_pre_step(self.update)

    def update(self, dt: float) -> None:
        """Apply engine, rolling and lateral forces of every wheel."""
        if not self.wheels:
            return

        share = self.chassis.mass / len(self.wheels)

        for wheel in self.wheels:
            sin_d = math.sin(wheel.steer_value)
            cos_d = math.cos(wheel.steer_value)

            point = self.chassis.GetWorldPoint(wheel.local_position)
            forward = self.chassis.GetWorldVector((sin_d, cos_d))
            right = self.chassis.GetWorldVector((cos_d, -sin_d))
            velocity = self.chassis.GetLinearVelocityFromWorldPoint(point)

            forward_speed = velocity[0] * forward[0] + velocity[1] * forward[1]
            side_speed = velocity[0] * right[0] + velocity[1] * right[1]

            rolling = _clamp(-share * forward_speed / dt, wheel.brake_force)
            lateral = _clamp(-share * side_speed / dt, wheel.side_friction)

            longitudinal = wheel.engine_force + rolling
            force = (forward[0] * longitudinal + right[0] * lateral,
                     forward[1] * longitudinal + right[1] * lateral)

            self.chassis.ApplyForce(force, point, True)

    def wheel_geometry(self) -> List[Tuple[Tuple[float, float], float]]:
        """World position and rolling-direction compass heading [rad] of each wheel."""
        heading = -self.chassis.angle
        geometry = []
        for wheel in self.wheels:
            point = self.chassis.GetWorldPoint(wheel.local_position)
            geometry.append(((float(point[0]), float(point[1])), heading + wheel.steer_value))
        return geometry


def heading_from_angle(angle: float) -> float:
    """Compass heading [deg] of a body whose forward axis is local +y."""
    return (-math.degrees(angle)) % 360.0
