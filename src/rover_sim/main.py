#!/usr/bin/env python3
"""
Rover simulation demo

Drives a tank or rover towards a location of interest while steering around
obstacles, using only the values a real control program would see: reported
location, heading and proximity readings.

Run with: rover-sim --vehicle rover --authenticity uniform --duration 60
"""

import argparse
import asyncio
import logging
import math

import numpy as np

from .config import RENDER_INTERVAL, STEERING_NEUTRAL
from .geo import CoordinateFrame, Location
from .logging_setup import setup_logging
from .options import (
    LocationOfInterest,
    ObstacleSpec,
    SimulationOptions,
    TargetSpec,
    VehicleType,
)
from .sensors import AuthenticityLevel
from .simulation import ActuatorCommand, SimulationCoordinator

logger = logging.getLogger(__name__)

DEMO_ORIGIN = Location(52.477050353132384, 13.395281227289209)
DEMO_DESTINATION = LocationOfInterest(52.47730, 13.395281227289209, "A")
DEMO_OBSTACLES = [
    ObstacleSpec(52.47712, 13.39528, 1.0),
    ObstacleSpec(52.47720, 13.39535, 0.8),
]

ARRIVAL_DISTANCE = 2.0     # [m]
AVOIDANCE_DISTANCE = 2.5   # [m]
CRUISE_POWER = 0.8
MAX_STEERING_DEFLECTION = 30.0  # [deg]


def _clamp(value: float, limit: float = 1.0) -> float:
    return max(-limit, min(limit, value))


def make_demo_loop(origin: Location, destination: Location, vehicle_type: VehicleType):
    """
    Build a simple go-to-goal control function with obstacle avoidance.

    Args:
        origin: Origin used to flatten reported locations
        destination: Location to drive to
        vehicle_type: Vehicle the commands are produced for

    Returns:
        Control function (SensorFrame, ActuatorCommand) -> ActuatorCommand
    """
    frame = CoordinateFrame(origin)
    goal_x, goal_y = frame.to_local(destination)

    def loop(sensors, actuators):
        x, y = frame.to_local(sensors.location)
        distance = math.hypot(goal_x - x, goal_y - y)
        bearing = math.degrees(math.atan2(goal_x - x, goal_y - y)) % 360
        # Positive error: goal lies clockwise of the current heading
        error = (bearing - sensors.heading + 540) % 360 - 180

        front = min(sensors.proximity[:10] + sensors.proximity[-10:])
        if front < AVOIDANCE_DISTANCE:
            error = 90.0

        power = 0.0 if distance < ARRIVAL_DISTANCE else CRUISE_POWER

        if vehicle_type is VehicleType.TANK:
            turn = _clamp(error / 90.0) * 0.5
            return ActuatorCommand(engines=[_clamp(power + turn), _clamp(power - turn)])

        deflection = _clamp(error, MAX_STEERING_DEFLECTION)
        front_steering = STEERING_NEUTRAL + deflection
        rear_steering = STEERING_NEUTRAL - deflection
        return ActuatorCommand(
            engines=[power] * vehicle_type.engine_count,
            steering=[front_steering, front_steering, rear_steering, rear_steering],
        )

    return loop


async def _pump_gui_events(figure) -> None:
    while True:
        figure.canvas.flush_events()
        await asyncio.sleep(RENDER_INTERVAL)


async def run_demo(simulation: SimulationCoordinator, duration: float, figure,
                   interactive: bool) -> None:
    """Run the simulation for `duration` seconds, keeping a GUI window responsive."""
    pump = asyncio.ensure_future(_pump_gui_events(figure)) if interactive else None
    try:
        await simulation.run_for(duration)
    finally:
        if pump is not None:
            pump.cancel()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Top-down rover simulation demo")
    parser.add_argument("--duration", type=float, default=60.0,
                        help="Simulated wall time in seconds")
    parser.add_argument("--vehicle", choices=[v.value for v in VehicleType],
                        default=VehicleType.ROVER.value)
    parser.add_argument("--authenticity", choices=[a.value for a in AuthenticityLevel],
                        default=AuthenticityLevel.IDEAL.value)
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the error models")
    parser.add_argument("--headless", action="store_true",
                        help="Render off-screen and save the final frame")
    parser.add_argument("--output", default="rover_sim.png",
                        help="Image file for the final frame in headless mode")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    args = parser.parse_args(argv)

    setup_logging(getattr(logging, args.log_level), args.log_file)

    import matplotlib
    if args.headless:
        matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    figure = plt.figure()
    vehicle_type = VehicleType(args.vehicle)

    simulation = SimulationCoordinator(SimulationOptions(
        loop=make_demo_loop(DEMO_ORIGIN, DEMO_DESTINATION.location, vehicle_type),
        origin=DEMO_ORIGIN,
        element=figure,
        locations_of_interest=[DEMO_DESTINATION],
        obstacles=list(DEMO_OBSTACLES),
        targets=[TargetSpec(DEMO_DESTINATION.latitude, DEMO_DESTINATION.longitude)],
        physical_constraints=AuthenticityLevel(args.authenticity),
        vehicle_type=vehicle_type,
        rng=np.random.default_rng(args.seed),
    ))

    if not args.headless:
        plt.ion()
        plt.show(block=False)

    logger.info(f"Running {vehicle_type.value} demo for {args.duration:.1f}s "
                f"with {args.authenticity} authenticity")

    try:
        asyncio.run(run_demo(simulation, args.duration, figure, not args.headless))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        simulation.stop()

    if args.headless:
        figure.savefig(args.output, facecolor=figure.get_facecolor())
        logger.info(f"Final frame saved to {args.output}")

    logger.info(f"Final state: {simulation!r}, trace points: {len(simulation.trace)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
