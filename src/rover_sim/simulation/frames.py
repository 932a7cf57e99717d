"""
Values exchanged with the user-supplied control function.

Every control tick the simulation builds a fresh SensorFrame, hands it to the
control function together with the currently applied ActuatorCommand, and
receives the next ActuatorCommand in return.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from ..geo import Location


@dataclass(frozen=True)
class SensorFrame:
    """
    Sensor snapshot for one control tick.

    Attributes:
        heading: Reported compass heading [deg], 0 = north, clockwise
        location: Reported geodetic location
        proximity: Obstacle distances [m], index 0 straight ahead, clockwise
        target_finder_signal: Beacon signal in [0, 1]; None without targets
        clock: Milliseconds since the simulation was started
    """

    heading: float
    location: Location
    proximity: Tuple[float, ...]
    target_finder_signal: Optional[float]
    clock: float


@dataclass
class ActuatorCommand:
    """
    Actuator values requested by the control function.

    Attributes:
        engines: Engine power per engine in [-1, 1]
        steering: Steering angle per steered wheel in [0, 360); 180 is straight
            ahead, larger values turn clockwise. None leaves steering unchanged.
    """

    engines: List[float]
    steering: Optional[List[float]] = None

    @classmethod
    def coerce(cls, value: Any) -> "ActuatorCommand":
        """
        Accept an ActuatorCommand or a mapping with 'engines'/'steering' keys.

        Raises:
            TypeError: If the value has neither form
        """
        if isinstance(value, ActuatorCommand):
            return value
        if isinstance(value, Mapping):
            if "engines" not in value:
                raise TypeError("Actuator command mapping requires an 'engines' entry")
            steering = value.get("steering")
            return cls(engines=_as_list(value["engines"]),
                       steering=None if steering is None else _as_list(steering))
        raise TypeError(f"Expected ActuatorCommand or mapping, got {type(value).__name__}")

    def copy(self) -> "ActuatorCommand":
        return ActuatorCommand(engines=list(self.engines),
                               steering=None if self.steering is None else list(self.steering))


def _as_list(values: Sequence[float]) -> List[float]:
    if isinstance(values, (str, bytes)):
        raise TypeError("Expected a sequence of numbers, got a string")
    return list(values)
