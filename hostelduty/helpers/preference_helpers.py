# File: helpers/preference_helpers.py
"""Helpers for per-user category preferences.

Preferences are kept client-side under a per-space, per-user key as a small
JSON payload:

    {"preferred": ["kitchen", "dishes"], "avoided": ["washroom"]}

These helpers convert between that stored shape and the Preferences structure
the fairness engine reads. A preference is a nudge, never a requirement, so a
damaged payload is logged and treated as "no preferences" instead of raising.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import json
from typing import TYPE_CHECKING, Any

import voluptuous as vol

from .. import const

if TYPE_CHECKING:
    from ..type_defs import Preferences

PREFERENCE_CHOICE_PREFERRED = "preferred"
PREFERENCE_CHOICE_AVOIDED = "avoided"

# Extra keys (availability, weekly limits) belong to other consumers
STORED_PREFERENCES_SCHEMA = vol.Schema(
    {
        vol.Optional(const.PREF_STORED_PREFERRED, default=list): vol.Any(
            None, [vol.Coerce(str)]
        ),
        vol.Optional(const.PREF_STORED_AVOIDED, default=list): vol.Any(
            None, [vol.Coerce(str)]
        ),
    },
    extra=vol.ALLOW_EXTRA,
)


def preference_storage_key(space_id: str, user_id: str) -> str:
    """Return the client storage key holding a user's preferences in a space."""
    return const.PREF_STORAGE_KEY_TEMPLATE.format(space_id=space_id, user_id=user_id)


def _known_categories(values: Iterable[str] | None) -> list[str]:
    """Normalize category names, dropping unknown ones and duplicates."""
    categories: list[str] = []
    for value in values or []:
        category = value.strip().lower()
        if category not in const.TASK_CATEGORIES:
            const.LOGGER.warning("Ignoring unknown preference category '%s'", value)
            continue
        if category not in categories:
            categories.append(category)
    return categories


def parse_stored_preferences(raw: str | Mapping[str, Any] | None) -> Preferences | None:
    """Parse a stored preference payload.

    Args:
        raw: JSON string or already-decoded mapping, or None if nothing is
            stored

    Returns:
        Preferences with known categories only, or None when nothing usable
        is stored.
    """
    if raw is None or raw == "":
        return None

    payload: Any = raw
    if isinstance(raw, str):
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as err:
            const.LOGGER.warning("Failed to parse stored preferences: %s", err)
            return None

    if not isinstance(payload, Mapping):
        const.LOGGER.warning(
            "Stored preferences must be an object, got %s", type(payload).__name__
        )
        return None

    try:
        data = STORED_PREFERENCES_SCHEMA(dict(payload))
    except vol.Invalid as err:
        const.LOGGER.warning("Invalid stored preferences: %s", err)
        return None

    return {
        "preferred_categories": _known_categories(data[const.PREF_STORED_PREFERRED]),
        "avoided_categories": _known_categories(data[const.PREF_STORED_AVOIDED]),
    }


def set_category_preference(
    preferences: Preferences | None, category: str, choice: str | None
) -> Preferences:
    """Return new preferences with category marked preferred, avoided or neither.

    A category is never both preferred and avoided: marking it one way
    removes it from the other list.

    Raises:
        ValueError: If category or choice is not recognized.
    """
    category = category.strip().lower()
    if category not in const.TASK_CATEGORIES:
        raise ValueError(f"Unknown task category: {category}")
    if choice not in (PREFERENCE_CHOICE_PREFERRED, PREFERENCE_CHOICE_AVOIDED, None):
        raise ValueError(f"Unknown preference choice: {choice}")

    current = preferences or {"preferred_categories": [], "avoided_categories": []}
    preferred = [c for c in current["preferred_categories"] if c != category]
    avoided = [c for c in current["avoided_categories"] if c != category]

    if choice == PREFERENCE_CHOICE_PREFERRED:
        preferred.append(category)
    elif choice == PREFERENCE_CHOICE_AVOIDED:
        avoided.append(category)

    return {"preferred_categories": preferred, "avoided_categories": avoided}


def dump_preferences(preferences: Preferences) -> str:
    """Serialize preferences to the stored JSON shape."""
    return json.dumps(
        {
            const.PREF_STORED_PREFERRED: list(preferences["preferred_categories"]),
            const.PREF_STORED_AVOIDED: list(preferences["avoided_categories"]),
        }
    )
