"""Angle-unit constants and range-reduction helpers shared by the astronomy core."""

import math

R2D: float = 180.0 / math.pi  # radians → degrees
D2R: float = math.pi / 180.0  # degrees → radians
S2R: float = 4.8481368110953599359e-6  # arcseconds → radians
R2H: float = 12.0 / math.pi  # radians → hours
H2R: float = math.pi / 12.0  # hours → radians
J2000: float = 2451545.0  # Julian Day of the J2000.0 epoch
PI: float = math.pi
TPI: float = 2.0 * math.pi
HPI: float = 0.5 * math.pi


def mod(dividend: float, divisor: float) -> float:
    """Floor-division remainder: the result has the sign of ``divisor``.

    ``mod(-1, 24) == 23``, unlike a truncating remainder.
    """
    return dividend - math.floor(dividend / divisor) * divisor


def normalize(x: float, lower: float, upper: float) -> float:
    """Wrap ``x`` into the half-open interval ``[lower, upper)``.

    Raises:
        ValueError: If the interval is empty or reversed.
    """
    width = upper - lower
    if not width > 0:
        raise ValueError(f"empty interval [{lower}, {upper})")
    value = x - math.floor((x - lower) / width) * width
    # rounding can land exactly on the open end for tiny negative offsets
    return lower if value >= upper else value
