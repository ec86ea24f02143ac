"""
Graph Axes
==========
Range state and major tick set of one graph axis, as read and written by the
auto-range selector (`figcomposer.model.autorange`).

The owning `GraphAxis` is the only writer of its `AxisRange`. Callers that
share an axis between threads must serialize writes themselves.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional

logger = logging.getLogger(__name__)

SUPPORTED_LOG_BASES: tuple[int, ...] = (2, 10)


# ------------------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------------------
class LabelFormat(StrEnum):
    """How tick mark labels are printed."""
    NONE = "none"
    INT = "1"
    F1 = "1.1"
    F2 = "1.12"
    F3 = "1.123"


class Layout(StrEnum):
    """Quadrant layout of a polar graph."""
    QUAD1 = "quad1"
    QUAD2 = "quad2"
    QUAD3 = "quad3"
    QUAD4 = "quad4"
    ALL_QUAD = "all"


# ------------------------------------------------------------------------------
# Tick sets
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class LogTickPattern:
    """
    Which of the per-decade tick marks 0.1N (N = 1..9) are drawn on a log axis.

    Bit N of `mask` enables the tick at N. Other bits are ignored.
    """
    mask: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "mask", self.mask & 0x3FE)

    @classmethod
    def of(cls, *ticks: int) -> LogTickPattern:
        mask = 0
        for n in ticks:
            if 1 <= n <= 9:
                mask |= 1 << n
        return cls(mask)

    @classmethod
    def from_string(cls, text: str) -> Optional[LogTickPattern]:
        """
        Parse a whitespace-separated list of distinct tick locations, e.g. "1 2 5".

        Returns:
            The pattern, or None if a token is not an integer in 1..9 or is repeated.
        """
        mask = 0
        tokens = text.split()
        if len(tokens) > 9:
            return None
        for token in tokens:
            try:
                n = int(token)
            except ValueError:
                return None
            if n < 1 or n > 9 or mask & (1 << n):
                return None
            mask |= 1 << n
        return cls(mask)

    @property
    def enabled_ticks(self) -> list[int]:
        return [n for n in range(1, 10) if self.mask & (1 << n)]

    @property
    def enabled_mask(self) -> int:
        return self.mask

    def is_tick_enabled_at(self, n: int) -> bool:
        return 1 <= n <= 9 and bool(self.mask & (1 << n))

    def __str__(self) -> str:
        return " ".join(str(n) for n in self.enabled_ticks)


@dataclass
class TickSet:
    """The major division markers of an axis."""
    interval: float = 10.0
    label_format: LabelFormat = LabelFormat.INT
    decade_ticks: LogTickPattern = field(default_factory=LogTickPattern)
    auto_adjust: bool = True

    def fix_interval_and_format(self, interval: float, label_format: LabelFormat) -> None:
        """Take the interval and label format chosen by auto-ranging, unless auto-adjust is off."""
        if not self.auto_adjust:
            return
        self.interval = interval
        self.label_format = label_format


# ------------------------------------------------------------------------------
# Axis
# ------------------------------------------------------------------------------
@dataclass
class AxisRange:
    """Endpoints of an axis in user units. A descending range (start > end) is legal."""
    start: float = 0.0
    end: float = 100.0

    @property
    def is_descending(self) -> bool:
        return self.start > self.end

    @property
    def span(self) -> float:
        return abs(self.end - self.start)

    def set(self, start: float, end: float) -> None:
        self.start = start
        self.end = end


@dataclass
class GraphAxis:
    """
    One axis of a graph: its range, its kind and its optional major tick set.

    Attributes:
        range: Current endpoints, in user units.
        is_theta: Angular axis of a polar graph.
        is_logarithmic: Logarithmic axis with base `log_base`.
        log_base: 2 or 10.
        is_radial: Radial axis of a polar graph.
        major: Major tick set, if the axis has one.
    """
    range: AxisRange = field(default_factory=AxisRange)
    is_theta: bool = False
    is_logarithmic: bool = False
    log_base: int = 10
    is_radial: bool = False
    major: Optional[TickSet] = None

    def __post_init__(self) -> None:
        if self.log_base not in SUPPORTED_LOG_BASES:
            msg = f"Unsupported log base {self.log_base}, expected one of {SUPPORTED_LOG_BASES}."
            logger.error(msg)
            raise ValueError(msg)

    @property
    def has_major_ticks(self) -> bool:
        return self.major is not None

    @property
    def start(self) -> float:
        return self.range.start

    @property
    def end(self) -> float:
        return self.range.end
