"""
Spherical-earth geodesy for short-range rover navigation.

All calculations treat the earth as a sphere with mean radius
R = 6 371 000 m. Over the sub-kilometer distances the simulation works with,
the difference to an ellipsoidal model is far below sensor noise.

Formulas:
    Great-circle distance (haversine):
        a = sin²(Δφ/2) + cos φ1 · cos φ2 · sin²(Δλ/2)
        d = 2R · atan2(√a, √(1−a))

    Destination point given distance δ = d/R and initial bearing θ:
        φ2 = asin(sin φ1 · cos δ + cos φ1 · sin δ · cos θ)
        λ2 = λ1 + atan2(sin θ · sin δ · cos φ1, cos δ − sin φ1 · sin φ2)

References:
    - Veness, C. Calculate distance, bearing and more between
      Latitude/Longitude points. https://www.movable-type.co.uk/scripts/latlong.html
"""

import math
from dataclasses import dataclass

from ..config import EARTH_RADIUS


@dataclass(frozen=True)
class Location:
    """Geodetic position in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self):
        """Validate coordinate ranges."""
        if not math.isfinite(self.latitude) or not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude must be within [-90, 90], got {self.latitude}")
        if not math.isfinite(self.longitude) or not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude must be within [-180, 180], got {self.longitude}")


def normalize_longitude(longitude: float) -> float:
    """Wrap a longitude in degrees into [-180, 180)."""
    return (longitude + 540.0) % 360.0 - 180.0


def great_circle_distance(location1: Location, location2: Location,
                          radius: float = EARTH_RADIUS) -> float:
    """
    Great-circle distance between two locations using the haversine formula.

    Args:
        location1: First location
        location2: Second location
        radius: Sphere radius [m]

    Returns:
        Distance in meters
    """
    phi1 = math.radians(location1.latitude)
    phi2 = math.radians(location2.latitude)
    delta_phi = math.radians(location2.latitude - location1.latitude)
    delta_lambda = math.radians(location2.longitude - location1.longitude)

    a = (math.sin(delta_phi / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(max(0.0, 1 - a)))

    return radius * c


def destination_point(location: Location, distance: float, bearing: float,
                      radius: float = EARTH_RADIUS) -> Location:
    """
    Location reached by travelling along a great circle.

    Args:
        location: Start location
        distance: Distance travelled [m]
        bearing: Initial bearing in compass degrees (0 = north, clockwise)
        radius: Sphere radius [m]

    Returns:
        Destination location
    """
    delta = distance / radius
    theta = math.radians(bearing)

    phi1 = math.radians(location.latitude)
    lambda1 = math.radians(location.longitude)

    sin_phi2 = (math.sin(phi1) * math.cos(delta) +
                math.cos(phi1) * math.sin(delta) * math.cos(theta))
    phi2 = math.asin(max(-1.0, min(1.0, sin_phi2)))

    y = math.sin(theta) * math.sin(delta) * math.cos(phi1)
    x = math.cos(delta) - math.sin(phi1) * sin_phi2
    lambda2 = lambda1 + math.atan2(y, x)

    return Location(latitude=math.degrees(phi2),
                    longitude=normalize_longitude(math.degrees(lambda2)))
