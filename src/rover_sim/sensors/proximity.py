"""
360° proximity sensor based on ray casting.

The sensor casts a fixed number of rays from the rover centre, evenly spaced
over a full turn and aligned with the rover's current heading:

    bearing_i = heading + i · (360° / N),   i = 0 … N-1

so sample 0 always looks straight ahead and indices increase clockwise.
Each ray reports the distance to the closest collidable surface within the
sensing range, or the range itself when nothing is hit. Sensor-only bodies
(targets, landmines) are transparent to the rays.

A sweep costs N ray casts, which is why the simulation refreshes it once per
control tick rather than once per rendered frame.
"""

import math
from typing import List, Optional

from ..config import MAX_PROXIMITY_DISTANCE, PROXIMITY_RESOLUTION
from ..geo import LocalPosition
from .authenticity import ProximityError, _identity


class ProximitySensor:
    """
    Rover-relative angular distance sensor.

    The world passed to sweep() only needs a raycast(start, end) method
    returning the distance to the closest collidable hit, or None.

    Attributes:
        resolution: Number of samples per sweep
        max_range: Sensing range [m]
        error_proximity: Error function applied to each raw distance
        values: Result of the most recent sweep
    """

    def __init__(self, error_proximity: Optional[ProximityError] = None,
                 max_range: float = MAX_PROXIMITY_DISTANCE,
                 resolution: int = PROXIMITY_RESOLUTION):
        if max_range <= 0:
            raise ValueError(f"Proximity range must be positive, got {max_range}")
        if resolution <= 0:
            raise ValueError(f"Resolution must be positive, got {resolution}")

        self.resolution = resolution
        self.max_range = max_range
        self.error_proximity = error_proximity or _identity
        self.values: List[float] = [max_range] * resolution

    def sample_bearing(self, index: int, heading: float) -> float:
        """Compass bearing [deg] sample `index` looks along."""
        return (heading + index * 360.0 / self.resolution) % 360.0

    def sweep(self, world, rover_position: LocalPosition, rover_heading: float,
              max_range: Optional[float] = None) -> List[float]:
        """
        Measure obstacle distances around the rover.

        Args:
            world: Object providing raycast(start, end) -> Optional[float]
            rover_position: Rover centre (x east, y north) [m]
            rover_heading: True rover heading in compass degrees
            max_range: Override of the sensing range [m]

        Returns:
            List of `resolution` distances with the error model applied
        """
        max_range = self.max_range if max_range is None else max_range
        base_x, base_y = rover_position

        values = []
        for index in range(self.resolution):
            bearing = math.radians(self.sample_bearing(index, rover_heading))
            end = (base_x + max_range * math.sin(bearing),
                   base_y + max_range * math.cos(bearing))

            hit_distance = world.raycast((base_x, base_y), end)
            raw = max_range if hit_distance is None else abs(hit_distance)

            values.append(self.error_proximity(raw))

        self.values = values
        return values
