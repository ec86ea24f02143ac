"""
Axis Auto-Range
===============
Chooses a "nice" range, major tick interval and label format for an axis
from the extrema of the data plotted against it.

Nice numbers have the form K * 10^p with K taken from `NICE_MULTIPLIERS`.
The selection depends on the kind of axis, checked in this order:

1. Theta axis: fixed by the polar layout, whatever the data.
2. Logarithmic axis: whole powers of the log base around the data.
3. Linear axis without major ticks: the data extrema.
4. Linear axis with major ticks: one of five cases, picked by the signs
   and the ratio of the extrema.

A descending axis stays descending.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from figcomposer.config import (
    NICE_MULTIPLIERS, MAX_DIVISIONS, MAX_SYMMETRIC_DIVISIONS, MAX_LOG_DECADES_PER_DIVISION,
    DEGENERATE_RANGE_THRESHOLD, THETA_INTERVAL, THETA_INTERVAL_ALL_QUAD
)
from figcomposer.model.axis import GraphAxis, LabelFormat, Layout, LogTickPattern
from figcomposer.utils import is_well_defined, round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RangeProposal:
    """Result of auto-ranging one axis. `interval` is 0 when the axis gets no tick interval."""
    start: float
    end: float
    interval: float
    label_format: LabelFormat


# ------------------------------------------------------------------------------
# Nice number search
# ------------------------------------------------------------------------------
def _best_multiple(k_exact: float, max_divisions: int) -> tuple[float, int, float]:
    """
    Smallest N * K >= k_exact over the nice multipliers K, with 1 <= N <= max_divisions.

    Equal overshoot goes to the larger N.

    Returns:
        (K, N, overshoot). N is 0 if no multiplier fits.
    """
    min_diff = 10.0
    n_best = 0
    k_best = 0.0
    for k in NICE_MULTIPLIERS:
        n = math.ceil(k_exact / k)
        diff = k * n - k_exact
        if 1 <= n <= max_divisions and (diff < min_diff or (diff == min_diff and n > n_best)):
            k_best, n_best, min_diff = k, n, diff
    return k_best, n_best, min_diff


def nice_interval(m: float, max_divisions: int) -> tuple[float, int]:
    """
    Nice interval D and division count N such that N * D is the nice value closest above `m`.

    Both the decade of `m` and the decade below are tried. The lower one wins if it gives more
    divisions, or as many divisions with a tighter fit.

    Args:
        m: A positive magnitude.
        max_divisions: Upper bound on N.

    Returns:
        (D, N)
    """
    p = math.floor(math.log10(m))
    k, n, diff = _best_multiple(m / 10.0 ** p, max_divisions)
    k1, n1, diff1 = _best_multiple(m / 10.0 ** (p - 1), max_divisions)
    if n1 > n or (n1 == n and diff1 < diff):
        k, n, p = k1, n1, p - 1
    return k * 10.0 ** p, n


# ------------------------------------------------------------------------------
# Cases
# ------------------------------------------------------------------------------
def theta_range(layout: Optional[Layout]) -> RangeProposal:
    """Fixed range of a theta axis for a polar quadrant layout. None is the full circle."""
    match layout:
        case Layout.QUAD1:
            s, e = 0.0, 90.0
        case Layout.QUAD2:
            s, e = 90.0, 180.0
        case Layout.QUAD3:
            s, e = 180.0, 270.0
        case Layout.QUAD4:
            s, e = 270.0, 360.0
        case _:
            s, e = 0.0, 360.0
    interval = THETA_INTERVAL_ALL_QUAD if layout is Layout.ALL_QUAD else THETA_INTERVAL
    return RangeProposal(s, e, interval, LabelFormat.INT)


def _log_range(base: int, min_val: float, max_val: float) -> RangeProposal:
    log = math.log2 if base == 2 else math.log10

    n1, n2 = 0, 1
    if min_val > 0:
        n1 = math.floor(log(min_val))
        n2 = math.ceil(log(max_val))
        if n2 <= n1:
            n2 = n1 + 1
    elif max_val > 0:
        n2 = math.ceil(log(max_val))
        n1 = min(0, n2 - 1)

    interval = float(base)
    if n2 - n1 > MAX_LOG_DECADES_PER_DIVISION:
        x = 5
        while x >= 2:
            span = n2 - n1
            if span % x == 0:
                y = span // x
                if y <= MAX_LOG_DECADES_PER_DIVISION:
                    y = min(x, y)
                interval = float(base) ** y
                break
            if x == 2:
                # no divisor found, widen the range toward the closer extremum and retry from 4
                if min_val <= 0:
                    n1 -= 1
                elif float(base) ** n1 / min_val < max_val / float(base) ** n2:
                    n2 += 1
                else:
                    n1 -= 1
                x = 5
            x -= 1

    s = float(base) ** n1
    e = float(base) ** n2
    return RangeProposal(s, e, interval, LabelFormat.F3 if s < 1 else LabelFormat.INT)


def _linear_range(min_val: float, max_val: float) -> tuple[float, float, float]:
    """Range (S, E, D) of a linear axis with major ticks."""
    if min_val == max_val:
        a = abs(min_val)
        p = 0 if a < DEGENERATE_RANGE_THRESHOLD else math.floor(math.log10(a)) - 2
        interval = 10.0 ** p
        s = round_half_up(min_val) - interval
        return s, s + 2 * interval, interval

    if (min_val == 0 or (min_val > 0 and max_val / min_val >= 10)
            or max_val == 0 or (max_val < 0 and min_val / max_val >= 10)):
        # same sign and far from zero, or touching zero: pin the near end at 0
        m = max_val if min_val >= 0 else -min_val
        interval, n = nice_interval(m, MAX_DIVISIONS)
        if min_val >= 0:
            return 0.0, n * interval, interval
        return -n * interval, 0.0, interval

    ratio = max_val / -min_val if min_val < 0 < max_val else None
    if ratio is not None and 0.8 <= ratio <= 1.25:
        interval, n = nice_interval(max(-min_val, max_val), MAX_SYMMETRIC_DIVISIONS)
        return -n * interval, n * interval, interval

    if ratio is not None and (ratio >= 10 or ratio <= 0.1):
        positive_dominant = max_val > -min_val
        interval, n = nice_interval(max_val if positive_dominant else -min_val, MAX_DIVISIONS)
        if positive_dominant:
            return -interval, n * interval, interval
        return -n * interval, interval, interval

    # general case: nice start at or below min_val, then a nice span up to max_val
    m = abs(min_val)
    pwr = 10.0 ** math.floor(math.log10(m))
    k = round(m / pwr)
    if min_val > 0 and k * pwr > m:
        k -= 1
    elif min_val < 0 and k * pwr < m:
        k += 1
    s = (k if min_val > 0 else -k) * pwr
    interval, n = nice_interval(max_val - s, MAX_DIVISIONS)
    return s, s + n * interval, interval


def propose_range(
    axis: GraphAxis,
    min_val: float,
    max_val: float,
    layout: Optional[Layout] = None
) -> Optional[RangeProposal]:
    """
    Compute the auto-range of an axis for data spanning [min_val, max_val], without changing the axis.

    Args:
        axis: The axis to range. Only its kind, tick set and current direction are read.
        min_val, max_val: Data extrema, in either order.
        layout: Quadrant layout of the parent polar graph. None means an unrestricted full circle.

    Returns:
        The proposal, or None if an extremum is not finite.
    """
    if not is_well_defined(min_val, max_val):
        return None
    if min_val > max_val:
        min_val, max_val = max_val, min_val

    try:
        if axis.is_theta:
            proposal = theta_range(layout)
        elif axis.is_logarithmic:
            proposal = _log_range(axis.log_base, min_val, max_val)
        elif axis.major is None:
            s = 0.0 if axis.is_radial and min_val < 0 else min_val
            e = s + 1 if max_val <= s else max_val
            proposal = RangeProposal(s, e, 0.0, LabelFormat.INT)
        else:
            s, e, interval = _linear_range(min_val, max_val)
            integral = all(v == math.floor(v) for v in (s, e, interval))
            proposal = RangeProposal(s, e, interval, LabelFormat.INT if integral else LabelFormat.F3)
    except OverflowError:
        logger.debug(f"Auto-range overflow for data in [{min_val}, {max_val}].")
        return None

    if not is_well_defined(proposal.start, proposal.end, proposal.interval):
        return None

    if axis.range.is_descending:
        proposal = RangeProposal(proposal.end, proposal.start, proposal.interval, proposal.label_format)
    return proposal


def auto_range(
    axis: GraphAxis,
    min_val: float,
    max_val: float,
    layout: Optional[Layout] = None,
    enabled: bool = True
) -> bool:
    """
    Auto-range an axis in place for data spanning [min_val, max_val].

    The range is written, together with the interval and label format of the major tick set,
    only if the start, the end or the major interval change. The interval only counts when the
    tick set auto-adjusts. A log axis whose tick set shows no per-decade ticks also gets one tick
    per decade.

    Args:
        axis: The axis to update.
        min_val, max_val: Data extrema, in either order.
        layout: Quadrant layout of the parent polar graph, see `propose_range`.
        enabled: Whether auto-ranging is turned on for this axis.

    Returns:
        True if anything changed. Disabled auto-ranging and non-finite extrema return False.
    """
    if not enabled:
        return False
    proposal = propose_range(axis, min_val, max_val, layout)
    if proposal is None:
        return False

    old_start, old_end = axis.range.start, axis.range.end
    major = axis.major
    interval_changed = major is not None and major.auto_adjust and major.interval != proposal.interval
    if old_start == proposal.start and old_end == proposal.end and not interval_changed:
        return False

    axis.range.set(proposal.start, proposal.end)
    if major is not None:
        major.fix_interval_and_format(proposal.interval, proposal.label_format)
        if axis.is_logarithmic and major.decade_ticks.enabled_mask == 0:
            major.decade_ticks = LogTickPattern.of(1)

    logger.debug(
        f"Auto-ranged axis from [{old_start}, {old_end}] to [{proposal.start}, {proposal.end}], "
        f"interval {proposal.interval}, format {proposal.label_format}."
    )
    return True
