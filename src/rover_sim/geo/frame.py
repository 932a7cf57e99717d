"""
Local planar coordinate frame anchored at a fixed geodetic origin.

The simulation runs its physics in a flat frame measured in meters:

    x: east  (positive east of the origin's meridian)
    y: north (positive north of the origin's parallel)

The mapping is not a map projection in the cartographic sense. Each axis is
the great-circle distance between a location and its projection onto the
origin's meridian (x) or parallel (y), signed by the side of the origin the
location lies on. The inverse solves both axes in closed form, so a round
trip reproduces the input to floating-point precision.
"""

import math
from typing import Tuple

from .geodesy import Location, great_circle_distance, destination_point, normalize_longitude
from ..config import EARTH_RADIUS

LocalPosition = Tuple[float, float]


def to_local(origin: Location, location: Location) -> LocalPosition:
    """
    Convert a geodetic location into a planar offset from the origin.

    Args:
        origin: Frame origin
        location: Location to convert

    Returns:
        (x, y) offset in meters, x east and y north
    """
    unsigned_x = great_circle_distance(location, Location(location.latitude, origin.longitude))
    unsigned_y = great_circle_distance(location, Location(origin.latitude, location.longitude))

    # East/west from the wrapped separation so the antimeridian is not a seam
    west = normalize_longitude(location.longitude - origin.longitude) < 0
    signed_x = -unsigned_x if west else unsigned_x
    signed_y = -unsigned_y if origin.latitude > location.latitude else unsigned_y

    return signed_x, signed_y


def to_geo(origin: Location, position: LocalPosition) -> Location:
    """
    Convert a planar offset from the origin back into a geodetic location.

    Latitude comes from travelling |y| meters due north or south of the
    origin. Longitude is the same-latitude separation whose great-circle
    length equals |x| at that latitude:

        Δλ = 2 · asin(sin(|x| / 2R) / cos φ)

    Args:
        origin: Frame origin
        position: (x, y) offset in meters

    Returns:
        Location corresponding to the offset
    """
    x, y = position

    latitude = destination_point(origin, abs(y), 0.0 if y >= 0 else 180.0).latitude

    cos_phi = math.cos(math.radians(latitude))
    if cos_phi <= 0.0:
        # At a pole every longitude is the same point
        return Location(latitude, origin.longitude)

    ratio = math.sin(abs(x) / (2 * EARTH_RADIUS)) / cos_phi
    delta_lambda = math.degrees(2 * math.asin(min(1.0, ratio)))

    longitude = origin.longitude + (delta_lambda if x >= 0 else -delta_lambda)

    return Location(latitude, normalize_longitude(longitude))


class CoordinateFrame:
    """
    Bidirectional mapping between geodetic and local planar coordinates.

    Attributes:
        origin: Fixed location the frame is anchored at
    """

    def __init__(self, origin: Location):
        self._origin = origin

    @property
    def origin(self) -> Location:
        return self._origin

    def to_local(self, location: Location) -> LocalPosition:
        return to_local(self._origin, location)

    def to_geo(self, position: LocalPosition) -> Location:
        return to_geo(self._origin, position)

    def __repr__(self) -> str:
        return (f"CoordinateFrame(origin=({self._origin.latitude:.6f}, "
                f"{self._origin.longitude:.6f}))")
