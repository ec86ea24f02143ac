"""
Configuration & Constants
=========================
This module serves as the central registry for the physical constants and
numeric policy values shared by the viewport and auto-range code.

Why is this file needed?
------------------------
1. Consistency: The units table must be identical everywhere a measure is
   converted to or from the rendering unit (thousandths of an inch, "mils").
2. Tuning: The "nice number" multipliers and precision limits decide how
   every generated figure looks; keeping them in one place keeps them auditable.

Exports:
    MILS_PER_INCH, MILS_PER_CM, MILS_PER_MM, MILS_PER_POINT (float): Units table.
    MAX_SIG_DIGITS, MAX_FRAC_DIGITS (int): Precision limits for converted measures.
    NICE_MULTIPLIERS (tuple[float, ...]): Preferred tick interval mantissas.
"""
from typing import Final

# Units table (rendering unit is the mil, 1/1000 inch)
MILS_PER_INCH: Final[float] = 1000.0
MILS_PER_CM: Final[float] = MILS_PER_INCH / 2.54
MILS_PER_MM: Final[float] = MILS_PER_INCH / 25.4
MILS_PER_POINT: Final[float] = MILS_PER_INCH / 72.0

# Precision of measures recovered from physical coordinates
MAX_SIG_DIGITS: Final[int] = 7
MAX_FRAC_DIGITS: Final[int] = 3

# Polar viewports
DEFAULT_MIN_LOG_RADIUS: Final[float] = 0.01

# Axis range validation
DEFAULT_LOG_AXIS_START: Final[float] = 0.01
DEFAULT_RADIAL_SPAN: Final[float] = 10.0

# Auto-range "nice number" search
NICE_MULTIPLIERS: Final[tuple[float, ...]] = (1.0, 1.25, 1.5, 2.0, 2.5, 5.0, 7.5)
MAX_DIVISIONS: Final[int] = 5
MAX_SYMMETRIC_DIVISIONS: Final[int] = 2
MAX_LOG_DECADES_PER_DIVISION: Final[int] = 5
DEGENERATE_RANGE_THRESHOLD: Final[float] = 1000.0
THETA_INTERVAL: Final[float] = 30.0
THETA_INTERVAL_ALL_QUAD: Final[float] = 45.0
