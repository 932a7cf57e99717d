"""
Option containers for configuring a rover simulation.

All containers are dataclasses that validate their values on construction,
so an invalid configuration fails before any physics body or timer exists.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

import numpy as np

from .config import (
    DEFAULT_CANVAS_SIZE,
    LANDMINE_RADIUS,
    MAX_PROXIMITY_DISTANCE,
    TARGET_RADIUS,
)
from .geo import Location


class VehicleType(Enum):
    """
    Supported vehicle layouts.

    TANK:  two wheels (left, right), two engines, skid steering only
    ROVER: six wheels in three axle pairs, six engines, front and rear
           pairs steerable
    """
    TANK = "tank"
    ROVER = "rover"

    @property
    def engine_count(self) -> int:
        return 2 if self is VehicleType.TANK else 6

    @property
    def steered_wheels(self) -> Tuple[int, ...]:
        """Wheel actuator index for each steering command index."""
        return () if self is VehicleType.TANK else (0, 1, 4, 5)

    @property
    def can_steer(self) -> bool:
        return len(self.steered_wheels) > 0


@dataclass(frozen=True)
class VehicleOptions:
    """Vehicle properties the error models are prepared for."""

    engine_count: int = 2
    proximity_range: float = MAX_PROXIMITY_DISTANCE  # [m]

    def __post_init__(self):
        if self.engine_count <= 0:
            raise ValueError(f"Engine count must be positive, got {self.engine_count}")
        if self.proximity_range <= 0:
            raise ValueError(f"Proximity range must be positive, got {self.proximity_range}")

    @classmethod
    def for_vehicle(cls, vehicle_type: VehicleType,
                    proximity_range: float = MAX_PROXIMITY_DISTANCE) -> "VehicleOptions":
        return cls(engine_count=vehicle_type.engine_count, proximity_range=proximity_range)


@dataclass
class RenderingOptions:
    """Scene rendering configuration. Sizes are in pixels."""

    width: int = DEFAULT_CANVAS_SIZE
    height: int = DEFAULT_CANVAS_SIZE
    show_grid: bool = True
    show_trace: bool = True
    show_compass: bool = True
    show_proximity: bool = True
    color_grid: str = "lightgreen"
    color_trace: str = "blue"
    color_rover: str = "red"
    color_marker: str = "purple"
    color_obstacle: str = "orange"
    color_target: str = "gold"
    color_landmine: str = "gray"
    color_proximity: str = "cyan"
    color_compass: str = "white"

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")


@dataclass(frozen=True)
class LocationOfInterest:
    """Labelled point shown on the map; has no physical presence."""

    latitude: float
    longitude: float
    label: str = "X"

    @property
    def location(self) -> Location:
        return Location(self.latitude, self.longitude)


@dataclass(frozen=True)
class ObstacleSpec:
    """Circular collidable obstacle."""

    latitude: float
    longitude: float
    radius: float

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"Obstacle radius must be positive, got {self.radius}")

    @property
    def location(self) -> Location:
        return Location(self.latitude, self.longitude)


@dataclass(frozen=True)
class TargetSpec:
    """Beacon detected by the target finder; never collides."""

    latitude: float
    longitude: float
    radius: float = TARGET_RADIUS

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"Target radius must be positive, got {self.radius}")

    @property
    def location(self) -> Location:
        return Location(self.latitude, self.longitude)


@dataclass(frozen=True)
class LandmineSpec:
    """Buried landmine; a sensor body with a fixed radius."""

    latitude: float
    longitude: float

    @property
    def radius(self) -> float:
        return LANDMINE_RADIUS

    @property
    def location(self) -> Location:
        return Location(self.latitude, self.longitude)


@dataclass
class SimulationOptions:
    """
    Everything needed to construct a simulation.

    Attributes:
        loop: Control function (SensorFrame, ActuatorCommand) -> ActuatorCommand
        origin: Geodetic origin of the local frame
        element: Host matplotlib Figure the scene is drawn into
        locations_of_interest: Labelled map markers
        obstacles: Collidable obstacles
        targets: Beacons feeding the target finder signal
        landmines: Sensor-only landmines
        rendering_options: Scene rendering configuration
        physical_constraints: AuthenticityLevel or factory
            (VehicleOptions) -> PhysicalOptions; None selects the ideal level
        vehicle_type: Wheel/engine layout
        rng: Random source for the error models
        event_loop: asyncio loop the control and render tasks run on;
            defaults to the running loop at start()
        clock: Monotonic time source in seconds; SensorFrame.clock
            reports milliseconds derived from it
    """

    loop: Callable[..., Any]
    origin: Location
    element: Any
    locations_of_interest: List[LocationOfInterest] = field(default_factory=list)
    obstacles: List[ObstacleSpec] = field(default_factory=list)
    targets: List[TargetSpec] = field(default_factory=list)
    landmines: List[LandmineSpec] = field(default_factory=list)
    rendering_options: RenderingOptions = field(default_factory=RenderingOptions)
    physical_constraints: Any = None
    vehicle_type: VehicleType = VehicleType.TANK
    rng: Optional[np.random.Generator] = None
    event_loop: Optional[asyncio.AbstractEventLoop] = None
    clock: Optional[Callable[[], float]] = None

    def __post_init__(self):
        if not callable(self.loop):
            raise ValueError("Control loop must be callable")
        if not isinstance(self.origin, Location):
            raise ValueError(f"Origin must be a Location, got {type(self.origin).__name__}")
        if not isinstance(self.vehicle_type, VehicleType):
            self.vehicle_type = VehicleType(self.vehicle_type)
