import math


def is_well_defined(*values: float) -> bool:
    """True if every value is a finite number."""
    return all(math.isfinite(v) for v in values)


def round_half_up(x: float) -> int:
    """Round to the nearest integer, with halves going toward +infinity."""
    return math.floor(x + 0.5)


def limit_sig_and_frac_digits(d: float, n_sig: int, n_frac: int) -> float:
    """
    Round a number so it keeps at most `n_frac` fractional digits and at most `n_sig` significant digits.

    Args:
        d: The value to round. Zero, NaN and infinities are returned unchanged.
        n_sig: Maximum number of significant digits, restricted to [1, 16].
        n_frac: Maximum number of fractional digits (at most 10). A negative value disables this limit.

    Returns:
        The rounded value.
    """
    if not math.isfinite(d) or d == 0:
        return d

    n_sig = min(16, max(1, n_sig))
    n_frac = min(10, n_frac)

    max_frac = n_sig - int(math.log10(abs(d))) - 1
    if n_frac >= 0 and max_frac > n_frac:
        scale = 10.0 ** n_frac
        d = round(d * scale) / scale
        if d == 0:
            return 0.0

    power = n_sig - math.ceil(math.log10(abs(d)))
    try:
        magnitude = 10.0 ** power
    except OverflowError:
        # subnormal input
        return d
    return round_half_up(d * magnitude) / magnitude
