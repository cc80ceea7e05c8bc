"""Gamma correction for perceptually linear LED brightness."""

import math
from numbers import Integral, Real

from piglow.exceptions import GammaInputError

MAX_POWER = 255


def gamma_correct(value: int | float) -> int:
    """Map a brightness value to a power byte on an exponential curve.

    Integers are read as 0-255 and floats as a fraction 0.0-1.0. The result
    is ``round(255 ** fraction)``, except that zero maps to exactly 0.

    Args:
        value: Brightness as an int (0-255) or a float (0.0-1.0)

    Returns:
        Power value (0-255)

    Raises:
        GammaInputError: If value is outside both ranges

    Example:
        >>> [gamma_correct(v) for v in (0, 1, 128, 255)]
        [0, 1, 16, 255]
        >>> gamma_correct(0.5)
        16
    """
    if isinstance(value, bool):
        raise GammaInputError(value)

    if isinstance(value, Integral):
        if not 0 <= value <= MAX_POWER:
            raise GammaInputError(value)
        fraction = value / MAX_POWER
    elif isinstance(value, Real):
        if math.isnan(value) or not 0.0 <= value <= 1.0:
            raise GammaInputError(value)
        fraction = float(value)
    else:
        raise GammaInputError(value)

    if fraction == 0.0:
        return 0
    return round(MAX_POWER ** fraction)


def gamma_table() -> list[int]:
    """Get the corrected power for every integer brightness 0-255."""
    return [gamma_correct(v) for v in range(MAX_POWER + 1)]
