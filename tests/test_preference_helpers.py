"""Tests for preference_helpers - stored preference parsing and editing."""

from __future__ import annotations

import json

import pytest

from hostelduty import const
from hostelduty.helpers.preference_helpers import (
    PREFERENCE_CHOICE_AVOIDED,
    PREFERENCE_CHOICE_PREFERRED,
    dump_preferences,
    parse_stored_preferences,
    preference_storage_key,
    set_category_preference,
)

# =============================================================================
# TEST: PARSING
# =============================================================================


class TestParseStoredPreferences:
    """Stored payload to Preferences."""

    def test_json_payload(self) -> None:
        """The stored JSON shape maps onto Preferences."""
        prefs = parse_stored_preferences(
            '{"preferred": ["kitchen", "dishes"], "avoided": ["washroom"]}'
        )

        assert prefs == {
            "preferred_categories": ["kitchen", "dishes"],
            "avoided_categories": ["washroom"],
        }

    def test_mapping_payload(self) -> None:
        """Already-decoded payloads are accepted."""
        prefs = parse_stored_preferences({"preferred": ["trash"]})

        assert prefs == {"preferred_categories": ["trash"], "avoided_categories": []}

    def test_extra_keys_ignored(self) -> None:
        """Fields owned by other settings pages are left alone."""
        prefs = parse_stored_preferences(
            {"preferred": [], "avoided": ["laundry"], "max_tasks_per_week": 5}
        )

        assert prefs == {"preferred_categories": [], "avoided_categories": ["laundry"]}

    def test_null_lists_become_empty(self) -> None:
        """Explicit nulls mean no preference."""
        prefs = parse_stored_preferences('{"preferred": null, "avoided": null}')

        assert prefs == {"preferred_categories": [], "avoided_categories": []}

    def test_categories_normalized_and_deduplicated(self) -> None:
        """Case and whitespace are normalized; repeats collapse."""
        prefs = parse_stored_preferences({"preferred": ["Kitchen", " kitchen ", "DISHES"]})

        assert prefs["preferred_categories"] == ["kitchen", "dishes"]

    def test_unknown_categories_dropped(self, package_logs) -> None:
        """Unknown names are logged and dropped rather than mapped to 'other'."""
        prefs = parse_stored_preferences({"preferred": ["spaceship", "trash"]})

        assert prefs["preferred_categories"] == ["trash"]
        assert "Ignoring unknown preference category 'spaceship'" in package_logs.text

    @pytest.mark.parametrize("raw", [None, ""])
    def test_nothing_stored(self, raw) -> None:
        """No payload means no preferences."""
        assert parse_stored_preferences(raw) is None

    @pytest.mark.parametrize(
        "raw",
        [
            "{broken",
            "[]",
            '"kitchen"',
            '{"preferred": "kitchen"}',
            {"avoided": {"kitchen": True}},
        ],
    )
    def test_malformed_payload(self, raw, package_logs) -> None:
        """Damaged payloads are logged and treated as no preferences."""
        assert parse_stored_preferences(raw) is None
        assert any(r.levelname == "WARNING" for r in package_logs.records)


# =============================================================================
# TEST: EDITING
# =============================================================================


class TestSetCategoryPreference:
    """Marking categories preferred or avoided."""

    def test_from_nothing(self) -> None:
        """Starting without preferences creates both lists."""
        prefs = set_category_preference(None, "kitchen", PREFERENCE_CHOICE_PREFERRED)

        assert prefs == {"preferred_categories": ["kitchen"], "avoided_categories": []}

    def test_switching_sides_is_exclusive(self) -> None:
        """A category moves between lists; it is never in both."""
        prefs = set_category_preference(None, "kitchen", PREFERENCE_CHOICE_PREFERRED)
        prefs = set_category_preference(prefs, "kitchen", PREFERENCE_CHOICE_AVOIDED)

        assert prefs == {"preferred_categories": [], "avoided_categories": ["kitchen"]}

    def test_clearing(self) -> None:
        """None removes the category from both lists."""
        prefs = {"preferred_categories": ["kitchen", "trash"], "avoided_categories": []}

        cleared = set_category_preference(prefs, "Kitchen", None)

        assert cleared == {"preferred_categories": ["trash"], "avoided_categories": []}
        assert prefs["preferred_categories"] == ["kitchen", "trash"]

    def test_repeat_does_not_duplicate(self) -> None:
        """Marking twice keeps a single entry."""
        prefs = set_category_preference(None, "trash", PREFERENCE_CHOICE_AVOIDED)
        prefs = set_category_preference(prefs, "trash", PREFERENCE_CHOICE_AVOIDED)

        assert prefs["avoided_categories"] == ["trash"]

    def test_unknown_category_rejected(self) -> None:
        """Only known categories can be marked."""
        with pytest.raises(ValueError, match="Unknown task category"):
            set_category_preference(None, "spaceship", PREFERENCE_CHOICE_PREFERRED)

    def test_unknown_choice_rejected(self) -> None:
        """Only preferred, avoided or None are valid choices."""
        with pytest.raises(ValueError, match="Unknown preference choice"):
            set_category_preference(None, "kitchen", "loved")


# =============================================================================
# TEST: STORAGE
# =============================================================================


class TestStorage:
    """Storage key and serialization."""

    def test_storage_key(self) -> None:
        """Keys are scoped per space and user."""
        assert preference_storage_key("space-1", "user-9") == "prefs_space-1_user-9"

    def test_dump_matches_stored_shape(self) -> None:
        """Dumped preferences parse back to the same value."""
        prefs = {
            "preferred_categories": ["dishes"],
            "avoided_categories": ["washroom"],
        }

        dumped = dump_preferences(prefs)

        assert json.loads(dumped) == {
            const.PREF_STORED_PREFERRED: ["dishes"],
            const.PREF_STORED_AVOIDED: ["washroom"],
        }
        assert parse_stored_preferences(dumped) == prefs
