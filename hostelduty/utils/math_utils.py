# File: utils/math_utils.py
"""Math and calculation utilities for hostelduty.

Pure Python math functions with no dependency on the rest of the package, so
they can be unit tested in isolation.

Functions:
    - round_points: Consistent rounding to configured precision
    - clamp: Bound a value to a range
    - safe_average: Mean of a sequence with empty-input protection
    - coerce_number: Lenient numeric conversion for loosely typed rows
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
from typing import Any

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default float precision for point rounding
DATA_FLOAT_PRECISION = 2


# ==============================================================================
# Point Arithmetic Functions
# ==============================================================================


def round_points(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a point or score value to the configured precision.

    Args:
        value: The float value to round
        precision: Number of decimal places (default: DATA_FLOAT_PRECISION)

    Returns:
        Rounded float value

    Examples:
        round_points(10.456) → 10.46
        round_points(10.454) → 10.45
        round_points(10.0) → 10.0
    """
    return round(value, precision)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
        clamp(50, 0, 100) → 50
    """
    return max(min_val, min(value, max_val))


def safe_average(values: Iterable[float]) -> float:
    """Return the arithmetic mean of values, or 0.0 when there are none.

    Examples:
        safe_average([100, 50, 0]) → 50.0
        safe_average([]) → 0.0
    """
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


# ==============================================================================
# Lenient Conversion
# ==============================================================================


def coerce_number(value: Any, default: float | None = 0.0) -> float | None:
    """Convert a loosely typed value to float, falling back to default.

    Rows arrive from a JSON data layer, so numbers may be strings, None or
    garbage. Booleans are rejected since they are never valid point values.

    Examples:
        coerce_number("12.5") → 12.5
        coerce_number(None) → 0.0
        coerce_number("abc", default=None) → None
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        _LOGGER.debug("Cannot coerce %r to a number, using %s", value, default)
        return default
    if result != result:  # NaN
        return default
    return result
