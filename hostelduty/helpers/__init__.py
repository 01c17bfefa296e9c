# File: helpers/__init__.py
"""Glue between raw data-layer rows and the engines.

Submodules:
    - preference_helpers: Stored preference payload parsing and editing
    - recommendation_helpers: Fairness context assembly and ranking facade

Usage:
    from . import preference_helpers
    from .recommendation_helpers import recommend_for_user
"""

from . import preference_helpers, recommendation_helpers

__all__ = ["preference_helpers", "recommendation_helpers"]
