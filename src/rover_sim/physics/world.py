"""
Box2D world adapter for the top-down rover simulation.

Wraps a zero-gravity b2World with the handful of operations the simulation
needs: one dynamic rover body, static circular feature bodies (collidable
obstacles and sensor-only discs), closest-hit ray casts and a fixed-timestep
accumulator so physics advances independently of the render frame rate.

Coordinate Frame:
    World coordinates equal the local planar frame of the simulation:
    x east, y north, meters. Body angles are counter-clockwise radians as
    Box2D defines them; a body angle of 0 faces north.
"""

import logging
from typing import Callable, List, Optional, Tuple

import Box2D

from ..geo import LocalPosition

logger = logging.getLogger(__name__)

VELOCITY_ITERATIONS = 8
POSITION_ITERATIONS = 3


class _ClosestHitCallback(Box2D.b2RayCastCallback):
    """Ray cast callback keeping the closest hit on a collidable fixture."""

    def __init__(self, ignore_kind: Optional[str] = None):
        super().__init__()
        self.ignore_kind = ignore_kind
        self.fraction: Optional[float] = None

    def ReportFixture(self, fixture, point, normal, fraction):
        data = fixture.body.userData
        if fixture.sensor or (isinstance(data, dict) and data.get("type") == self.ignore_kind):
            return -1.0  # filter out, keep searching
        if self.fraction is None or fraction < self.fraction:
            self.fraction = fraction
        return fraction  # clip the ray to this hit


class PhysicsWorld:
    """
    Zero-gravity physics world with fixed-timestep stepping.

    Attributes:
        world: Underlying Box2D world
        rover: Dynamic rover body once create_rover() was called
    """

    def __init__(self):
        self.world = Box2D.b2World(gravity=(0, 0), doSleep=False)
        self.rover = None
        self._accumulator = 0.0
        self._pre_step_hooks: List[Callable[[float], None]] = []

    def create_rover(self, width: float, height: float, mass: float,
                     position: LocalPosition = (0.0, 0.0), angle: float = 0.0):
        """
        Create the rover's dynamic box body.

        Args:
            width: Body width across the wheel axles [m]
            height: Body length along the forward axis [m]
            mass: Total mass [kg]
            position: Initial centre position [m]
            angle: Initial body angle [rad]

        Returns:
            The Box2D body
        """
        if width <= 0 or height <= 0 or mass <= 0:
            raise ValueError("Rover dimensions and mass must be positive")

        body = self.world.CreateDynamicBody(position=position, angle=angle)
        body.CreatePolygonFixture(box=(width / 2, height / 2),
                                  density=mass / (width * height),
                                  friction=0.3)
        body.userData = {"type": "rover"}
        self.rover = body
        return body

    def add_obstacle(self, position: LocalPosition, radius: float):
        """Add a static collidable disc."""
        body = self.world.CreateStaticBody(position=position)
        body.CreateCircleFixture(radius=radius, friction=0.3)
        body.userData = {"type": "obstacle"}
        return body

    def add_sensor_disc(self, position: LocalPosition, radius: float, kind: str = "sensor"):
        """Add a static disc that detects overlap but never collides or occludes rays."""
        body = self.world.CreateStaticBody(position=position)
        body.CreateCircleFixture(radius=radius, isSensor=True)
        body.userData = {"type": kind}
        return body

    def add_pre_step(self, hook: Callable[[float], None]) -> None:
        """Register a callback invoked with the timestep before every internal step."""
        self._pre_step_hooks.append(hook)

    def raycast(self, start: LocalPosition, end: LocalPosition) -> Optional[float]:
        """
        Distance from start to the closest collidable surface on the segment.

        Sensor fixtures and the rover body are ignored.

        Args:
            start: Ray origin [m]
            end: Ray end point [m]

        Returns:
            Hit distance in meters, or None if nothing is hit
        """
        dx = end[0] - start[0]
        dy = end[1] - start[1]
        length = (dx * dx + dy * dy) ** 0.5
        if length <= 0.0:
            return None

        callback = _ClosestHitCallback(ignore_kind="rover")
        self.world.RayCast(callback, start, end)

        if callback.fraction is None:
            return None
        return callback.fraction * length

    def step(self, fixed_delta: float, elapsed: float, max_sub_steps: int) -> int:
        """
        Advance the world by whole fixed timesteps covering the elapsed time.

        Leftover time smaller than one timestep carries over to the next call.
        When max_sub_steps is reached the remaining backlog is dropped.

        Args:
            fixed_delta: Internal timestep [s]
            elapsed: Wall time since the previous call [s]
            max_sub_steps: Upper bound of internal steps for this call

        Returns:
            Number of internal steps taken
        """
        if fixed_delta <= 0:
            raise ValueError(f"Time step must be positive, got {fixed_delta}")

        self._accumulator += max(0.0, elapsed)

        sub_steps = 0
        while self._accumulator >= fixed_delta and sub_steps < max_sub_steps:
            for hook in self._pre_step_hooks:
                hook(fixed_delta)
            self.world.Step(fixed_delta, VELOCITY_ITERATIONS, POSITION_ITERATIONS)
            self._accumulator -= fixed_delta
            sub_steps += 1

        if sub_steps >= max_sub_steps and self._accumulator >= fixed_delta:
            logger.debug(f"Dropping {self._accumulator:.3f}s of physics backlog")
            self._accumulator %= fixed_delta

        return sub_steps

    def rover_pose(self) -> Tuple[LocalPosition, float]:
        """Current rover centre and body angle [rad]."""
        if self.rover is None:
            raise RuntimeError("Rover body has not been created")
        position = self.rover.position
        return (float(position[0]), float(position[1])), float(self.rover.angle)
