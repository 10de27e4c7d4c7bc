"""Small numeric helpers shared by the scoring components."""

import math


def clamp(x: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, x))


def sigmoid(z: float) -> float:
    # Split on sign so math.exp never overflows
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    e = math.exp(z)
    return e / (1.0 + e)


def round_half_up(x: float, ndigits: int = 2) -> float:
    """Round halves toward +infinity, unlike the builtin banker's rounding."""
    factor = 10**ndigits
    scaled = x * factor
    # Values this large carry no fractional digits to round
    if not math.isfinite(scaled):
        return x
    return math.floor(scaled + 0.5) / factor
