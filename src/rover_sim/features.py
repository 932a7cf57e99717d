"""
Static world features in the local frame.

Features are created once at construction from geodetic input. Obstacles,
targets and landmines are additionally backed by static physics bodies;
markers only exist for rendering.
"""

from dataclasses import dataclass

from .config import LANDMINE_RADIUS
from .geo import LocalPosition


@dataclass(frozen=True)
class Marker:
    """Labelled point of interest."""
    label: str
    position: LocalPosition


@dataclass(frozen=True)
class Obstacle:
    """Collidable disc; blocks the rover and the proximity sensor."""
    position: LocalPosition
    radius: float


@dataclass(frozen=True)
class Target:
    """Beacon feeding the target finder signal; never collides."""
    position: LocalPosition
    radius: float


@dataclass(frozen=True)
class Landmine:
    """Sensor-only disc the rover can drive over."""
    position: LocalPosition
    radius: float = LANDMINE_RADIUS
