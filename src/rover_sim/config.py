"""
Simulation-wide configuration constants.

This module is a thin, import-safe leaf: it never imports from other
project packages. Physical quantities use SI units (meters, seconds,
kilograms, newtons) unless noted otherwise.
"""

import math

# ── Rover body ───────────────────────────────────────────────────────────────
ROVER_WIDTH: float = 0.5       # [m]
ROVER_HEIGHT: float = 1.0      # [m] (length along the forward axis)
ROVER_MASS: float = 10.0       # [kg]

# ── Wheel actuators ──────────────────────────────────────────────────────────
BASE_ENGINE_FORCE: float = 7.0
WHEEL_BRAKE_FORCE: float = BASE_ENGINE_FORCE * 0.5
WHEEL_SIDE_FRICTION: float = BASE_ENGINE_FORCE * 2
STEERING_NEUTRAL: float = 180.0  # [deg] wheels aligned with the body

# ── Static features ──────────────────────────────────────────────────────────
LANDMINE_RADIUS: float = 0.15  # [m]
TARGET_RADIUS: float = 0.15    # [m]

# ── Sensors ──────────────────────────────────────────────────────────────────
MAX_PROXIMITY_DISTANCE: float = 8.0  # [m]
PROXIMITY_RESOLUTION: int = 180      # samples per full turn
TARGET_SIGNAL_GAIN: float = 0.02

# ── Timing ───────────────────────────────────────────────────────────────────
CONTROL_INTERVAL: float = 0.020      # [s]
RENDER_INTERVAL: float = 1 / 60      # [s]
FIXED_DELTA_TIME: float = 1 / 60     # [s] physics tick
MAX_SUB_STEPS: int = 5               # max physics ticks per render frame
MAX_FRAME_DELTA: float = 1 / 10      # [s] clamp after a stall

# ── Trace ────────────────────────────────────────────────────────────────────
MIN_TRACKING_POINT_DISTANCE: float = 1.0  # [m]

# ── Geodesy ──────────────────────────────────────────────────────────────────
EARTH_RADIUS: float = 6371e3  # [m] mean radius, spherical model

# ── Rendering ────────────────────────────────────────────────────────────────
RENDER_SCALE: float = 15.0  # [px/m]
GRID_GUTTER: float = 3.0    # [m]
DEFAULT_CANVAS_SIZE: int = 500  # [px]

DEG_TO_RAD: float = math.pi / 180.0
