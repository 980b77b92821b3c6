"""Tests for data models."""

import pytest

from lifestyle_tracker.models import (
    Category,
    Favorite,
    FavoriteItemType,
    Session,
    SessionKind,
    SessionRef,
    SessionRefKind,
    TypeSettings,
    WeeklyDay,
    WeeklyPlan,
    favorite_key,
    parse_favorite_key,
)
from lifestyle_tracker.models.session import session_date


class TestSessionRef:
    """Tests for SessionRef model."""

    def test_explicit_kind_wins(self):
        """Test that a stored kind is used as-is."""
        ref = SessionRef.from_dict({"id": "manual:1", "kind": "real"})
        assert ref.kind == SessionRefKind.REAL

    def test_legacy_manual_prefix_is_placeholder(self):
        """Test that legacy `manual:` ids read as placeholders."""
        ref = SessionRef.from_dict({"id": "manual:2024-01-01", "sessionTypes": ["Bike"]})
        assert ref.is_placeholder
        assert not ref.is_real

    def test_legacy_id_is_real(self):
        """Test that legacy entries with a plain id read as real."""
        ref = SessionRef.from_dict({"id": "abc123", "sessionTypes": ["Rings"]})
        assert ref.is_real
        assert ref.session_types == ["Rings"]

    def test_idless_entry_is_not_real(self):
        """Test that an entry without an id never counts as a real session."""
        ref = SessionRef.from_dict({"sessionTypes": ["Bike"]})
        assert ref.id is None
        assert not ref.is_real

    def test_to_dict(self):
        """Test session ref serialization."""
        ref = SessionRef.placeholder("p1", ["Bike"])
        assert ref.to_dict() == {
            "id": "p1",
            "sessionTypes": ["Bike"],
            "kind": "placeholder",
        }


class TestWeeklyPlan:
    """Tests for WeeklyPlan and WeeklyDay models."""

    def test_sessions_follows_sessions_list(self):
        """Test that the sessions count is derived from the list."""
        day = WeeklyDay(
            date_iso="2024-01-01",
            sessions_list=[SessionRef.real("a", []), SessionRef.real("b", [])],
        )
        assert day.sessions == 2
        assert day.to_dict()["sessions"] == 2

    def test_checked_types(self):
        """Test that only checked types are reported, in grid order."""
        day = WeeklyDay(date_iso="2024-01-01", types={"Bike": True, "Calves": False, "Rings": True})
        assert day.checked_types() == ["Bike", "Rings"]

    def test_plan_round_trip(self, sample_plan):
        """Test plan serialization keeps categories and days."""
        restored = WeeklyPlan.from_dict(sample_plan.to_dict())

        assert restored == sample_plan
        assert restored.type_categories["Bike"] == Category.CARDIO

    def test_day_index(self, sample_plan):
        """Test locating a day by date."""
        assert sample_plan.day_index("2024-01-03") == 2
        assert sample_plan.day_index("2024-01-08") is None

    def test_copy_is_deep(self, sample_plan):
        """Test that copies do not share day state."""
        copied = sample_plan.copy()
        copied.days[0].types["Bike"] = True
        assert "Bike" not in sample_plan.days[0].types


class TestCategory:
    """Tests for Category parsing."""

    def test_unknown_is_none(self):
        """Test that unknown category values read as NONE."""
        assert Category.from_value("Swimming") == Category.NONE
        assert Category.from_value(None) == Category.NONE

    def test_known_value(self):
        """Test parsing a known category."""
        assert Category.from_value(" Cardio ") == Category.CARDIO


class TestSession:
    """Tests for Session model."""

    def test_legacy_manual_session_is_placeholder(self):
        """Test that sessions named Manual without kind are placeholders."""
        session = Session.from_dict(
            {"dateISO": "2024-01-01", "sessionName": "Manual", "sessionTypes": ["Bike"]},
            id="s1",
        )
        assert session.kind == SessionKind.PLACEHOLDER
        assert session.id == "s1"

    def test_stored_sessions_are_completed(self):
        """Test that loaded sessions cannot be completed again."""
        session = Session.from_dict({"dateISO": "2024-01-01"}, id="s1")
        assert session.completed

    def test_to_dict_omits_missing_template(self):
        """Test that sourceTemplateId is only written when set."""
        data = Session(date_iso="2024-01-01").to_dict()
        assert "sourceTemplateId" not in data
        assert data["kind"] == "real"

    def test_date_fallbacks(self):
        """Test deriving the session date from older fields."""
        assert session_date({"dateISO": "2024-01-02"}) == "2024-01-02"
        assert session_date({"date": "2024-01-03T10:00:00"}) == "2024-01-03"
        # 2024-01-15 12:00 UTC
        assert session_date({"completedAt": 1705320000000}) == "2024-01-15"
        assert session_date({"sessionName": "x"}) is None


class TestFavorite:
    """Tests for Favorite model."""

    def test_key(self):
        """Test the composite favorite key."""
        favorite = Favorite(item_type=FavoriteItemType.ROUTINE, item_id="r1")
        assert favorite.key == "routine::r1"
        assert favorite_key("exercise", "e9") == "exercise::e9"

    def test_parse_key(self):
        """Test splitting a composite key."""
        assert parse_favorite_key("exercise::e9") == (FavoriteItemType.EXERCISE, "e9")

    def test_parse_invalid_key(self):
        """Test that malformed keys are rejected."""
        with pytest.raises(ValueError):
            parse_favorite_key("routine")


class TestTypeSettings:
    """Tests for TypeSettings model."""

    def test_legacy_categories_key(self):
        """Test reading the older typeCategories key."""
        settings = TypeSettings.from_dict(
            {"types": ["Bike", 3], "typeCategories": {"Bike": "Cardio"}}
        )
        assert settings.types == ["Bike"]
        assert settings.categories == {"Bike": Category.CARDIO}
