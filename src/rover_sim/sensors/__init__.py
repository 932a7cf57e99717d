"""
Sensor modules for rover simulation.

This module contains the error injection models (authenticity levels), the
ray-casting proximity sensor and the beacon target finder.
"""

from .authenticity import (
    AuthenticityLevel,
    PhysicalOptions,
    biased_random,
    box_muller,
    create_physical_options,
    gaussian_noise,
    ideal,
    uniform_noise,
)
from .proximity import ProximitySensor
from .target import TargetSignalEstimator

__all__ = [
    "AuthenticityLevel",
    "PhysicalOptions",
    "biased_random",
    "box_muller",
    "create_physical_options",
    "ideal",
    "uniform_noise",
    "gaussian_noise",
    "ProximitySensor",
    "TargetSignalEstimator"
]
