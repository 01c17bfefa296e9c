# File: utils/__init__.py
"""Pure Python utilities for hostelduty.

Nothing in this package imports from the engines or helpers, so these
functions can be unit tested on their own.

Submodules:
    - dt_utils: ISO datetime parsing and day arithmetic
    - math_utils: Rounding, clamping, averaging, lenient number coercion

Usage:
    from . import dt_utils
    from .math_utils import round_points
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
