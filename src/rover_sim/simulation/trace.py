"""
Decimated history of the rover's driven path.
"""

import math
from typing import Iterator, List

from ..config import MIN_TRACKING_POINT_DISTANCE
from ..geo import LocalPosition


class TraceHistory:
    """
    Positions the rover passed through, newest first.

    A position is only recorded when it lies more than `min_distance` from
    the most recently recorded one, which bounds growth to the distance
    actually driven.
    """

    def __init__(self, min_distance: float = MIN_TRACKING_POINT_DISTANCE):
        if min_distance < 0:
            raise ValueError(f"Minimum distance must be non-negative, got {min_distance}")
        self.min_distance = min_distance
        self._points: List[LocalPosition] = []

    def record(self, position: LocalPosition) -> bool:
        """
        Record a position if it is far enough from the last recorded one.

        Returns:
            True if the position was recorded
        """
        if self._points:
            last_x, last_y = self._points[0]
            if math.hypot(position[0] - last_x, position[1] - last_y) <= self.min_distance:
                return False

        self._points.insert(0, (float(position[0]), float(position[1])))
        return True

    @property
    def points(self) -> List[LocalPosition]:
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[LocalPosition]:
        return iter(self._points)
