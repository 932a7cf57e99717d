"""
Target finder: aggregate beacon signal strength.

Every target contributes a signal inversely proportional to its distance
from the rover:

    s = min(1, Σ_t  k / d_t),   k = 0.02

Distances are great-circle distances between the geodetic projections of the
rover and target positions, so the signal matches what a receiver at the
reported location would see. A rover sitting on a target saturates the
signal at 1.
"""

from typing import Iterable

from ..config import TARGET_SIGNAL_GAIN
from ..geo import CoordinateFrame, LocalPosition, great_circle_distance


class TargetSignalEstimator:
    """
    Inverse-distance signal strength over a set of beacon targets.

    Attributes:
        frame: Coordinate frame used to project local positions to geodetic ones
        gain: Signal contributed by a target at 1 m distance
    """

    def __init__(self, frame: CoordinateFrame, gain: float = TARGET_SIGNAL_GAIN):
        self.frame = frame
        self.gain = gain

    def signal(self, rover_position: LocalPosition,
               targets: Iterable[LocalPosition]) -> float:
        """
        Signal strength in [0, 1] at the rover position.

        Args:
            rover_position: Rover centre in the local frame [m]
            targets: Target positions in the local frame [m]

        Returns:
            Clamped sum of inverse-distance contributions; 0 without targets
        """
        rover_location = self.frame.to_geo(rover_position)

        total = 0.0
        for target in targets:
            distance = great_circle_distance(rover_location, self.frame.to_geo(target))
            if distance <= 0.0:
                return 1.0
            total += self.gain / distance

        return min(1.0, total)
