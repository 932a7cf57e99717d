"""
Simulation coordinator: wires physics, sensors, control and rendering.

The coordinator owns the rover's physics body and wheel actuators, the static
world features, the trace history and two periodic tasks that share this
state:

    control task (every 20 ms)
        1. proximity sweep
        2. sensor frame from ground truth passed through the error model
        3. control function (SensorFrame, ActuatorCommand) -> ActuatorCommand
        4. actuation validation and application
        5. rejected values are logged; previous actuator values stay active

    render task (display rate)
        1. wall time since the previous frame, clamped to 0.1 s
        2. physics advance in fixed 1/60 s steps, at most 5 per frame
        3. trace update (points more than 1 m apart)
        4. snapshot to the scene renderer

Both tasks run on one asyncio event loop and never preempt each other, so
the shared state needs no locking. A slow control function delays later
ticks but cannot corrupt state; it is not timed out.

State Machine:
    Idle --start()--> Running --stop()--> Idle
    start() while Running raises RuntimeError; stop() while Idle is a no-op.
"""

import asyncio
import logging
import time
from typing import List, Optional

import numpy as np

from ..config import (
    CONTROL_INTERVAL,
    FIXED_DELTA_TIME,
    MAX_FRAME_DELTA,
    MAX_SUB_STEPS,
    RENDER_INTERVAL,
    ROVER_HEIGHT,
    ROVER_MASS,
    ROVER_WIDTH,
    STEERING_NEUTRAL,
)
from ..features import Landmine, Marker, Obstacle, Target
from ..geo import CoordinateFrame, LocalPosition, Location
from ..options import SimulationOptions, VehicleOptions
from ..physics import PhysicsWorld, TopDownVehicle, heading_from_angle, wheel_layout
from ..sensors import ProximitySensor, TargetSignalEstimator, create_physical_options
from ..visualization import RenderSnapshot, SceneRenderer, create_axes
from .actuation import ActuationResult, ActuationValidator
from .frames import ActuatorCommand, SensorFrame
from .scheduler import RepeatingTask
from .trace import TraceHistory

logger = logging.getLogger(__name__)


class SimulationCoordinator:
    """
    A simple, open world top down simulation for a program controlled vehicle.

    Example:
        def loop(sensors, actuators):
            return ActuatorCommand(engines=[0.7, 0.8])

        simulation = SimulationCoordinator(SimulationOptions(
            loop=loop,
            origin=Location(52.477050353132384, 13.395281227289209),
            element=matplotlib.pyplot.figure(),
            locations_of_interest=[
                LocationOfInterest(52.47880703639255, 13.395281227289209, "A")
            ],
        ))
        await simulation.run_for(30.0)

    Attributes:
        frame: Local coordinate frame anchored at the origin
        physics: Box2D world adapter
        wheels: Wheel actuators of the rover
        physical_options: Error model selected at construction
        trace: Driven path, newest first
        actuators: Last accepted actuator values
        proximity: Most recent proximity sweep
    """

    def __init__(self, options: SimulationOptions):
        """
        Build the world, the rover and the error model.

        Args:
            options: Simulation configuration

        Raises:
            RuntimeError: If no drawing context can be obtained from options.element
            ValueError: If the physical constraints cannot be resolved
        """
        self.options = options
        self.control_loop = options.loop
        self.vehicle_type = options.vehicle_type
        self.rendering_options = options.rendering_options

        # Drawing context first: nothing else is worth building without it
        self.renderer = SceneRenderer(create_axes(options.element, self.rendering_options))

        self.frame = CoordinateFrame(options.origin)

        # Physics
        self.physics = PhysicsWorld()
        self.rover = self.physics.create_rover(ROVER_WIDTH, ROVER_HEIGHT, ROVER_MASS)
        self.wheels = wheel_layout(self.vehicle_type)
        self.vehicle = TopDownVehicle(self.rover, self.wheels)
        self.vehicle.add_to_world(self.physics)

        # Error model
        self.vehicle_options = VehicleOptions.for_vehicle(self.vehicle_type)
        rng = options.rng if options.rng is not None else np.random.default_rng()
        self.physical_options = create_physical_options(
            options.physical_constraints, self.vehicle_options, rng)

        # Static features
        self.markers = self._init_markers()
        self.obstacles = self._init_obstacles()
        self.targets = self._init_targets()
        self.landmines = self._init_landmines()

        # Sensors and actuation
        self.proximity_sensor = ProximitySensor(self.physical_options.error_proximity,
                                                max_range=self.vehicle_options.proximity_range)
        self.target_estimator = TargetSignalEstimator(self.frame)
        self.validator = ActuationValidator()

        steered = len(self.vehicle_type.steered_wheels)
        self.actuators = ActuatorCommand(
            engines=[0.0] * self.vehicle_type.engine_count,
            steering=[STEERING_NEUTRAL] * steered if steered else None,
        )

        self.trace = TraceHistory()

        # Scheduling
        self._clock = options.clock or time.perf_counter
        self._event_loop = options.event_loop
        self._control_task: Optional[RepeatingTask] = None
        self._render_task: Optional[RepeatingTask] = None
        self._start_time = self._clock()
        self._last_render_time: Optional[float] = None

        self.proximity: List[float] = self.update_proximity()
        self.renderer.render(self.snapshot())

        logger.info(f"Simulation initialized: vehicle={self.vehicle_type.value}, "
                    f"markers={len(self.markers)}, obstacles={len(self.obstacles)}, "
                    f"targets={len(self.targets)}, landmines={len(self.landmines)}")

    # ── Construction helpers ────────────────────────────────────────────────

    def _init_markers(self) -> List[Marker]:
        return [Marker(label=poi.label, position=self.frame.to_local(poi.location))
                for poi in self.options.locations_of_interest]

    def _init_obstacles(self) -> List[Obstacle]:
        obstacles = []
        for spec in self.options.obstacles:
            position = self.frame.to_local(spec.location)
            self.physics.add_obstacle(position, spec.radius)
            obstacles.append(Obstacle(position=position, radius=spec.radius))
        return obstacles

    def _init_targets(self) -> List[Target]:
        targets = []
        for spec in self.options.targets:
            position = self.frame.to_local(spec.location)
            self.physics.add_sensor_disc(position, spec.radius, kind="target")
            targets.append(Target(position=position, radius=spec.radius))
        return targets

    def _init_landmines(self) -> List[Landmine]:
        landmines = []
        for spec in self.options.landmines:
            position = self.frame.to_local(spec.location)
            self.physics.add_sensor_disc(position, spec.radius, kind="landmine")
            landmines.append(Landmine(position=position, radius=spec.radius))
        return landmines

    # ── Ground truth and sensor synthesis ───────────────────────────────────

    @property
    def running(self) -> bool:
        return self._control_task is not None

    @property
    def clock(self) -> float:
        """Milliseconds since the last start()."""
        return (self._clock() - self._start_time) * 1000.0

    def rover_position(self) -> LocalPosition:
        """True rover centre in the local frame [m]."""
        position, _ = self.physics.rover_pose()
        return position

    def true_heading(self) -> float:
        """True compass heading [deg]."""
        return heading_from_angle(self.rover.angle)

    def rover_heading(self) -> float:
        """Heading as reported to the control function [deg]."""
        return self.physical_options.error_heading(self.true_heading())

    def rover_location(self) -> Location:
        """Location as reported to the control function."""
        true_location = self.frame.to_geo(self.rover_position())
        return self.physical_options.error_location(true_location)

    def update_proximity(self) -> List[float]:
        """Run a proximity sweep around the rover's true pose."""
        self.proximity = self.proximity_sensor.sweep(
            self.physics, self.rover_position(), self.true_heading())
        return self.proximity

    def target_signal(self) -> Optional[float]:
        """Target finder signal, or None when the world has no targets."""
        if not self.targets:
            return None
        return self.target_estimator.signal(self.rover_position(),
                                            [target.position for target in self.targets])

    def sensor_frame(self) -> SensorFrame:
        return SensorFrame(
            heading=self.rover_heading(),
            location=self.rover_location(),
            proximity=tuple(self.proximity),
            target_finder_signal=self.target_signal(),
            clock=self.clock,
        )

    # ── Ticks ───────────────────────────────────────────────────────────────

    def control_tick(self) -> ActuationResult:
        """
        Run one control cycle.

        Returns:
            Outcome of applying the control function's command
        """
        self.update_proximity()
        sensors = self.sensor_frame()

        returned = self.control_loop(sensors, self.actuators.copy())

        try:
            command = ActuatorCommand.coerce(returned)
        except TypeError as exc:
            logger.error(f"Control loop returned an invalid actuator command: {exc}")
            return ActuationResult(messages=[str(exc)])

        result = self.validator.apply(command, self.vehicle_type, self.wheels,
                                      self.physical_options)

        if result.engines_applied:
            self.actuators.engines = [float(value) for value in command.engines]
        for index, value in result.accepted_steering.items():
            self.actuators.steering[index] = value

        if not result.accepted:
            logger.debug(f"Control tick at {sensors.clock:.0f}ms kept previous actuator "
                         f"values for {len(result.messages)} rejected input(s)")

        return result

    def render_frame(self) -> int:
        """
        Advance physics to the current wall time and draw a frame.

        Returns:
            Number of physics steps taken
        """
        now = self._clock()
        delta = 0.0 if self._last_render_time is None else now - self._last_render_time
        self._last_render_time = now

        # Avoid a large catch-up step after a stall
        delta = min(MAX_FRAME_DELTA, max(0.0, delta))

        sub_steps = self.physics.step(FIXED_DELTA_TIME, delta, MAX_SUB_STEPS)
        self.trace.record(self.rover_position())
        self.renderer.render(self.snapshot())

        return sub_steps

    def snapshot(self) -> RenderSnapshot:
        return RenderSnapshot(
            position=self.rover_position(),
            heading=self.true_heading(),
            width=ROVER_WIDTH,
            height=ROVER_HEIGHT,
            wheels=self.vehicle.wheel_geometry(),
            trace=self.trace.points,
            markers=self.markers,
            obstacles=self.obstacles,
            targets=self.targets,
            landmines=self.landmines,
            proximity=list(self.proximity),
            max_range=self.proximity_sensor.max_range,
            options=self.rendering_options,
        )

    # ── Lifecycle ───────────────────────────────────────────────────────────

    def start(self) -> None:
        """
        Start the control and render tasks.

        Raises:
            RuntimeError: If the simulation is already running, or no event
                loop was configured and none is running
        """
        if self.running:
            raise RuntimeError("Simulation is already running.")

        loop = self._event_loop or asyncio.get_running_loop()

        self._start_time = self._clock()
        self._last_render_time = None

        self._control_task = RepeatingTask(loop, CONTROL_INTERVAL,
                                           lambda _now: self.control_tick(), name="control")
        self._render_task = RepeatingTask(loop, RENDER_INTERVAL,
                                          lambda _now: self.render_frame(), name="render")
        self._control_task.start()
        self._render_task.start(delay=0.0)

        logger.info("Simulation started")

    def stop(self) -> None:
        """Cancel the control and render tasks. Safe to call repeatedly."""
        if self._control_task is not None:
            self._control_task.cancel()
            self._control_task = None

        if self._render_task is not None:
            self._render_task.cancel()
            self._render_task = None
            logger.info(f"Simulation stopped after {self.clock / 1000.0:.2f}s")

    async def run_for(self, duration: float) -> None:
        """Run the simulation on the current event loop for `duration` seconds."""
        self.start()
        try:
            await asyncio.sleep(duration)
        finally:
            self.stop()

    def __repr__(self) -> str:
        x, y = self.rover_position()
        return (f"SimulationCoordinator(vehicle={self.vehicle_type.value}, "
                f"running={self.running}, position=({x:.2f}, {y:.2f}), "
                f"heading={self.true_heading():.1f}°)")
