"""
Authenticity levels: error injection for synthesized sensor and actuator values.

An authenticity level decides how far the values handed to the control
function (heading, location, proximity) and the forces produced by the
engines deviate from ground truth. Each level is a factory that builds a
PhysicalOptions bundle once per simulation; the bundle's error functions are
then applied on every control tick.

Error Models:
    IDEAL:
        Every error function is the identity.

    UNIFORM_NOISE:
        heading'  = (h + U(-5°, 5°)) mod 360            resampled every call
        engine'_i = v + b_i,  b_i ~ U(-0.01, 0.01)       drawn once per engine
        location' = destination(loc, U(0, 5 m), U(0°, 360°))
        proximity'= d + (B(0.5) - 0.5) · 0.2             within range
                    d + (B(0.25) - 0.25) · 0.1 · r_max   at/beyond range
                    10 · r_max                           with p = 0.001

        where B(bias) is the biased random mix
            B = u · (1 - m) + bias · m,   u ~ U(0, 1),  m ~ U(0, influence)

    GAUSSIAN_NOISE:
        Heading, engine and location magnitudes follow a normal distribution
        N(centre, (range/10)²) truncated to the same ranges as UNIFORM_NOISE,
        sampled with Box–Muller and rejection. Proximity is ideal.

Reproducibility:
    All draws come from the numpy Generator passed to the factory, so two
    factories seeded identically produce identical error sequences.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

import numpy as np

from ..geo import Location, destination_point
from ..options import VehicleOptions

logger = logging.getLogger(__name__)

EngineError = Callable[[float], float]
HeadingError = Callable[[float], float]
LocationError = Callable[[Location], Location]
ProximityError = Callable[[float], float]

MAX_HEADING_ERROR = 5.0      # [deg]
MAX_ENGINE_ERROR = 0.01      # [power]
MAX_LOCATION_ERROR = 5.0     # [m]
PROXIMITY_FAULT_PROBABILITY = 0.001
PROXIMITY_FAULT_FACTOR = 10.0
BOX_MULLER_MAX_ATTEMPTS = 100


def _identity(value):
    return value


@dataclass(frozen=True)
class PhysicalOptions:
    """
    Per-channel error functions applied to simulated values.

    Attributes:
        error_engine: One function per engine mapping commanded to effective power
        error_heading: Maps true heading [deg] to reported heading
        error_location: Maps true location to reported location
        error_proximity: Maps true obstacle distance [m] to reported distance
    """

    error_engine: Tuple[EngineError, ...] = ()
    error_heading: HeadingError = _identity
    error_location: LocationError = _identity
    error_proximity: ProximityError = _identity

    def engine_error(self, index: int) -> EngineError:
        """Error function for an engine; identity when none is configured."""
        if 0 <= index < len(self.error_engine):
            return self.error_engine[index]
        return _identity


def biased_random(rng: np.random.Generator, bias: float, influence: float = 1.0,
                  minimum: float = 0.0, maximum: float = 1.0) -> float:
    """
    Uniform draw pulled towards a bias value by a random amount.

    Args:
        rng: Random source
        bias: Value the result is pulled towards
        influence: Upper bound of the mixing weight [0, 1]
        minimum: Lower bound of the uniform draw
        maximum: Upper bound of the uniform draw

    Returns:
        u · (1 - mix) + bias · mix
    """
    rnd = rng.random() * (maximum - minimum) + minimum
    mix = rng.random() * influence
    return rnd * (1 - mix) + bias * mix


def box_muller(rng: np.random.Generator, minimum: float, maximum: float,
               skew: float = 1.0, max_attempts: int = BOX_MULLER_MAX_ATTEMPTS) -> float:
    """
    Approximately normal sample truncated to [minimum, maximum].

    A standard normal sample z is mapped to z/10 + 0.5 and re-drawn while it
    falls outside [0, 1]. After max_attempts rejections the centre of the
    range is returned.

    Args:
        rng: Random source
        minimum: Lower bound of the result
        maximum: Upper bound of the result
        skew: Exponent applied to the normalized sample (1 = symmetric)
        max_attempts: Rejection sampling bound

    Returns:
        Sample within [minimum, maximum]
    """
    num = 0.5
    for _ in range(max_attempts):
        # 1 - random() lies in (0, 1], keeping log(u) finite
        u = 1.0 - rng.random()
        v = 1.0 - rng.random()
        candidate = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
        candidate = candidate / 10.0 + 0.5
        if 0.0 <= candidate <= 1.0:
            num = candidate
            break
    else:
        logger.debug(f"Box-Muller rejected {max_attempts} draws, using range centre")

    num = num ** skew
    return num * (maximum - minimum) + minimum


def _wrap_heading(heading: float) -> float:
    return (360.0 + heading) % 360.0


def ideal(vehicle_options: Optional[VehicleOptions] = None,
          rng: Optional[np.random.Generator] = None) -> PhysicalOptions:
    """
    Physical options without any error.

    Args:
        vehicle_options: Vehicle the options are prepared for
        rng: Unused, accepted for a uniform factory signature
    """
    vehicle_options = vehicle_options or VehicleOptions()

    return PhysicalOptions(
        error_engine=tuple(_identity for _ in range(vehicle_options.engine_count)),
        error_heading=_identity,
        error_location=_identity,
        error_proximity=_identity,
    )


def uniform_noise(vehicle_options: Optional[VehicleOptions] = None,
                  rng: Optional[np.random.Generator] = None) -> PhysicalOptions:
    """
    Physical options with uniformly distributed errors.

    - heading has a dynamic error of -5° <= e <= 5°
    - engines have a static error of -0.01 <= e <= 0.01
    - location is displaced by up to 5 m in a random direction
    - proximity values are noisy and occasionally report a sensor fault

    Args:
        vehicle_options: Vehicle the options are prepared for
        rng: Random source; a fresh unseeded generator if omitted
    """
    vehicle_options = vehicle_options or VehicleOptions()
    rng = rng if rng is not None else np.random.default_rng()
    max_range = vehicle_options.proximity_range

    def error_heading(heading: float) -> float:
        return _wrap_heading(heading + MAX_HEADING_ERROR * (rng.random() * 2 - 1))

    def make_engine_error(static_error: float) -> EngineError:
        return lambda value: value + static_error

    error_engine = tuple(
        make_engine_error(MAX_ENGINE_ERROR * (rng.random() * 2 - 1))
        for _ in range(vehicle_options.engine_count)
    )

    def error_location(location: Location) -> Location:
        distance = rng.random() * MAX_LOCATION_ERROR
        bearing = rng.random() * 360.0
        return destination_point(location, distance, bearing)

    def error_proximity(distance: float) -> float:
        error = (biased_random(rng, 0.5) - 0.5) * 0.2

        # Nothing in range: keep the noise small so it never looks like a hit
        if distance + 0.001 >= max_range:
            error = (biased_random(rng, 0.25) - 0.25) * 0.1 * max_range

        if rng.random() < PROXIMITY_FAULT_PROBABILITY:
            return max_range * PROXIMITY_FAULT_FACTOR

        return max(0.0, distance + error)

    return PhysicalOptions(
        error_engine=error_engine,
        error_heading=error_heading,
        error_location=error_location,
        error_proximity=error_proximity,
    )


def gaussian_noise(vehicle_options: Optional[VehicleOptions] = None,
                   rng: Optional[np.random.Generator] = None) -> PhysicalOptions:
    """
    Physical options with normally distributed errors.

    Same error ranges as uniform_noise(), but heading, engine and location
    errors concentrate around the centre of their range. Proximity is not
    modelled at this level.

    Args:
        vehicle_options: Vehicle the options are prepared for
        rng: Random source; a fresh unseeded generator if omitted
    """
    vehicle_options = vehicle_options or VehicleOptions()
    rng = rng if rng is not None else np.random.default_rng()

    def error_heading(heading: float) -> float:
        return _wrap_heading(heading + box_muller(rng, -MAX_HEADING_ERROR, MAX_HEADING_ERROR))

    def make_engine_error(static_error: float) -> EngineError:
        return lambda value: value + static_error

    error_engine = tuple(
        make_engine_error(box_muller(rng, -MAX_ENGINE_ERROR, MAX_ENGINE_ERROR))
        for _ in range(vehicle_options.engine_count)
    )

    def error_location(location: Location) -> Location:
        distance = box_muller(rng, 0.0, MAX_LOCATION_ERROR)
        bearing = rng.random() * 360.0
        return destination_point(location, distance, bearing)

    return PhysicalOptions(
        error_engine=error_engine,
        error_heading=error_heading,
        error_location=error_location,
        error_proximity=_identity,
    )


class AuthenticityLevel(Enum):
    """Built-in error injection policies."""
    IDEAL = "ideal"
    UNIFORM_NOISE = "uniform"
    GAUSSIAN_NOISE = "gaussian"

    def create(self, vehicle_options: Optional[VehicleOptions] = None,
               rng: Optional[np.random.Generator] = None) -> PhysicalOptions:
        """Build the physical options for this level."""
        factory = {
            AuthenticityLevel.IDEAL: ideal,
            AuthenticityLevel.UNIFORM_NOISE: uniform_noise,
            AuthenticityLevel.GAUSSIAN_NOISE: gaussian_noise,
        }[self]
        return factory(vehicle_options, rng)


def create_physical_options(constraints, vehicle_options: VehicleOptions,
                            rng: Optional[np.random.Generator] = None) -> PhysicalOptions:
    """
    Resolve a physical-constraints setting into PhysicalOptions.

    Args:
        constraints: None (ideal), an AuthenticityLevel, a level name, or a
            factory (VehicleOptions) -> PhysicalOptions
        vehicle_options: Vehicle the options are prepared for
        rng: Random source for the built-in levels

    Returns:
        Physical options for the simulation's lifetime

    Raises:
        ValueError: If the setting cannot be resolved
    """
    if constraints is None:
        constraints = AuthenticityLevel.IDEAL
    if isinstance(constraints, str):
        constraints = AuthenticityLevel(constraints)

    if isinstance(constraints, AuthenticityLevel):
        options = constraints.create(vehicle_options, rng)
        logger.debug(f"Physical options created for level {constraints.value}")
        return options

    if not callable(constraints):
        raise ValueError(f"Unsupported physical constraints: {constraints!r}")

    options = constraints(vehicle_options)
    if not isinstance(options, PhysicalOptions):
        raise ValueError(
            f"Physical constraints factory must return PhysicalOptions, "
            f"got {type(options).__name__}"
        )
    return options

