"""
Geodetic helpers for rover simulation.

This module contains the spherical-earth geodesy functions and the local
planar coordinate frame the physics simulation runs in.
"""

from .geodesy import Location, great_circle_distance, destination_point
from .frame import CoordinateFrame, LocalPosition, to_local, to_geo

__all__ = [
    "Location",
    "LocalPosition",
    "CoordinateFrame",
    "great_circle_distance",
    "destination_point",
    "to_local",
    "to_geo"
]
