"""
Validation and application of actuator commands.

Engine values are validated as one batch: a command with the wrong number of
engines or any value outside [-1, 1] is rejected entirely and every wheel
keeps its previous engine force. Steering values are validated one by one;
a bad value only drops that single wheel's update.

Mapping:
    engine_force_i = BASE_ENGINE_FORCE · error_engine[e](engines[e]),  e = i mod n
    steer_value    = (steering − 180) · π / 180

Rover steering indices address the front and rear axles only:

    steering index   0   1   2   3
    wheel index      0   1   4   5
"""

import logging
import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Dict, List, Sequence

from ..config import BASE_ENGINE_FORCE, DEG_TO_RAD, STEERING_NEUTRAL
from ..options import VehicleType
from ..physics import WheelActuator
from ..sensors import PhysicalOptions
from .frames import ActuatorCommand

logger = logging.getLogger(__name__)


@dataclass
class ActuationResult:
    """
    Outcome of applying one actuator command.

    Attributes:
        engines_applied: True if the engine batch was accepted
        accepted_steering: Steering index -> accepted value [deg]
        rejected_steering: Steering indices that were rejected
        messages: Diagnostics for every rejection
    """

    engines_applied: bool = False
    accepted_steering: Dict[int, float] = field(default_factory=dict)
    rejected_steering: List[int] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return not self.messages


def _is_valid_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def steering_to_steer_value(steering: float) -> float:
    """Convert a steering command [deg] into the wheel steer angle [rad]."""
    return (steering - STEERING_NEUTRAL) * DEG_TO_RAD


class ActuationValidator:
    """
    Validates control output and writes it to the wheel actuators.

    Attributes:
        base_engine_force: Force produced by an engine at full power [N]
    """

    def __init__(self, base_engine_force: float = BASE_ENGINE_FORCE):
        self.base_engine_force = base_engine_force

    def validate_engines(self, engines: Sequence[float], engine_count: int) -> List[str]:
        """Diagnostics for an engine batch; empty if the batch is valid."""
        if len(engines) != engine_count:
            return [f"Engine command length {len(engines)} does not match "
                    f"engine count {engine_count}"]

        out_of_range = [i for i, value in enumerate(engines)
                        if not _is_valid_number(value) or not -1.0 <= value <= 1.0]
        if out_of_range:
            return [f"Wheel power out of range [-1.0 : 1.0] for engines {out_of_range}"]
        return []

    def apply(self, command: ActuatorCommand, vehicle_type: VehicleType,
              wheels: Sequence[WheelActuator],
              physical_options: PhysicalOptions) -> ActuationResult:
        """
        Apply an actuator command to the wheels.

        Args:
            command: Command returned by the control function
            vehicle_type: Layout the wheels belong to
            wheels: Wheel actuators to update in place
            physical_options: Error model supplying the engine errors

        Returns:
            ActuationResult describing what was applied and what was rejected
        """
        result = ActuationResult()
        engine_count = vehicle_type.engine_count

        engine_messages = self.validate_engines(command.engines, engine_count)
        if engine_messages:
            result.messages.extend(engine_messages)
            for message in engine_messages:
                logger.error(message)
        else:
            for i, wheel in enumerate(wheels):
                engine = i % engine_count
                error_function = physical_options.engine_error(engine)
                wheel.engine_force = self.base_engine_force * error_function(command.engines[engine])
            result.engines_applied = True

        if command.steering is not None:
            self._apply_steering(command.steering, vehicle_type, wheels, result)

        return result

    def _apply_steering(self, steering: Sequence[float], vehicle_type: VehicleType,
                        wheels: Sequence[WheelActuator], result: ActuationResult) -> None:
        steered_wheels = vehicle_type.steered_wheels

        if not vehicle_type.can_steer:
            if len(steering) > 0:
                message = f"Vehicle type '{vehicle_type.value}' has no steerable wheels"
                result.messages.append(message)
                result.rejected_steering.extend(range(len(steering)))
                logger.warning(message)
            return

        if len(steering) != len(steered_wheels):
            message = (f"Steering command length {len(steering)} does not match "
                       f"steerable wheel count {len(steered_wheels)}")
            result.messages.append(message)
            result.rejected_steering.extend(range(len(steering)))
            logger.error(message)
            return

        for index, value in enumerate(steering):
            if not _is_valid_number(value) or not 0.0 <= value < 360.0:
                message = f"Steering value {value!r} at index {index} out of range [0 : 360)"
                result.messages.append(message)
                result.rejected_steering.append(index)
                logger.error(message)
                continue

            wheels[steered_wheels[index]].steer_value = steering_to_steer_value(value)
            result.accepted_steering[index] = float(value)
