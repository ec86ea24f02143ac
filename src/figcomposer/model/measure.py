"""
Measurements with Units
=======================
Defines the immutable `Measure` value type: a finite floating-point magnitude
tagged with a unit of measure.

Four physical units are supported (inches, centimeters, millimeters and
typographical points) plus two relative units. A percentage is interpreted
against the extent of a viewport, and "user" units are the native units of a
graph's data coordinate system. Relative measures only make sense once a
viewport is known, see `figcomposer.model.viewport`.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional
import math

from figcomposer.config import (
    MILS_PER_INCH, MILS_PER_CM, MILS_PER_MM, MILS_PER_POINT, MAX_SIG_DIGITS, MAX_FRAC_DIGITS
)
from figcomposer.utils import limit_sig_and_frac_digits


class Unit(StrEnum):
    IN = "in"
    CM = "cm"
    MM = "mm"
    PT = "pt"
    PCT = "%"
    USER = "u"

    @property
    def is_relative(self) -> bool:
        return self in (Unit.PCT, Unit.USER)

    @property
    def mils_per_unit(self) -> float:
        """Length of one unit in mils. Only defined for the physical units."""
        match self:
            case Unit.IN:
                return MILS_PER_INCH
            case Unit.CM:
                return MILS_PER_CM
            case Unit.MM:
                return MILS_PER_MM
            case Unit.PT:
                return MILS_PER_POINT
            case _:
                raise ValueError(f"Relative unit '{self}' has no physical length.")


REAL_UNITS: tuple[Unit, ...] = (Unit.IN, Unit.CM, Unit.MM, Unit.PT)


def real_units_to_mils(value: float, unit: Unit) -> float:
    """Convert a length in a physical unit to mils."""
    return value * unit.mils_per_unit


def mils_to_real_units(mils: float, unit: Unit) -> float:
    """Convert a length in mils to a physical unit."""
    return mils / unit.mils_per_unit


@dataclass(frozen=True)
class Measure:
    """A linear measure or coordinate: finite value + unit."""
    value: float
    unit: Unit = Unit.USER

    def __post_init__(self) -> None:
        if not math.isfinite(self.value):
            raise ValueError(f"Measure value must be finite, got {self.value!r}.")

    @property
    def is_relative(self) -> bool:
        return self.unit.is_relative

    def to_mils(self) -> float:
        """
        Length of this measure in mils.

        Raises:
            ValueError: If the measure is in percentage or user units.
        """
        return real_units_to_mils(self.value, self.unit)

    @staticmethod
    def from_mils(
        mils: float,
        unit: Unit,
        n_sig: int = MAX_SIG_DIGITS,
        n_frac: int = MAX_FRAC_DIGITS
    ) -> Measure:
        """
        Build a measure in a physical unit that matches a length in mils.

        The numerical value keeps at most `n_sig` significant digits (1..7) and `n_frac`
        fractional digits (0..3). Percentage and user units fall back to inches.
        """
        if unit.is_relative:
            unit = Unit.IN
        n_sig = min(MAX_SIG_DIGITS, max(1, n_sig))
        n_frac = min(MAX_FRAC_DIGITS, max(0, n_frac))
        value = limit_sig_and_frac_digits(mils_to_real_units(mils, unit), n_sig, n_frac)
        return Measure(value, unit)

    @staticmethod
    def from_string(text: str) -> Optional[Measure]:
        """
        Parse a measure written as "<number><unit>", e.g. "1.5in", "50%" or "-3u".

        Returns:
            The parsed measure, or None if the text is not a valid measure.
        """
        text = text.strip()
        for unit in Unit:
            if text.endswith(unit.value) and len(text) > len(unit.value):
                try:
                    value = float(text[:-len(unit.value)])
                except ValueError:
                    return None
                if not math.isfinite(value):
                    return None
                return Measure(value, unit)
        return None

    def __str__(self) -> str:
        value = limit_sig_and_frac_digits(self.value, MAX_SIG_DIGITS, MAX_FRAC_DIGITS)
        return f"{value:.7g}{self.unit.value}"
