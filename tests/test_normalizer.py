"""Tests for weekly plan normalization and validation."""

from datetime import date

import pytest

from lifestyle_tracker.errors import ValidationError
from lifestyle_tracker.models.weekly import WeeklyDay
from lifestyle_tracker.services.normalizer import (
    default_plan,
    ensure_unique_types,
    normalize_document,
    normalize_plan,
    validate_plan,
)

MALFORMED_DOCUMENTS = [
    None,
    [],
    "not a plan",
    {},
    {"customTypes": "Bike", "days": "nope", "benchmarks": [1, 2]},
    {
        "weekOfISO": " 2024-01-01 ",
        "weekNumber": "seven",
        "customTypes": [" Bike ", "Bike", "", None, 3, "Rings"],
        "benchmarks": {"Bike": "3", "Old": "x"},
        "typeCategories": {"Bike": "Cardio", " Rings ": "Lifting", "": "Cardio"},
        "days": [
            {
                "dateISO": "2024-01-01",
                "types": {" Bike ": 1, "": True, "Rings": 0},
                "sessionsList": [
                    {"id": "a", "sessionTypes": ["Bike"]},
                    {"id": " a ", "sessionTypes": ["Rings"]},
                    {"sessionTypes": ["Bike", " "]},
                    {"sessionTypes": ["Bike"]},
                    "garbage",
                    {"id": "manual:2024-01-01"},
                ],
                "sessions": 99,
                "comments": {" Bike ": 5, "": "x", "Rings": None},
            },
            "not a day",
            {"dateISO": 20240102},
        ],
    },
]


class TestEnsureUniqueTypes:
    """Tests for ensure_unique_types."""

    def test_trims_and_dedups_in_order(self):
        """Test that names are trimmed and first occurrences kept."""
        assert ensure_unique_types([" Yoga", "Bike", "Yoga ", "", "Bike"]) == ["Yoga", "Bike"]

    def test_non_list_input(self):
        """Test that non-list input yields no types."""
        assert ensure_unique_types(None) == []
        assert ensure_unique_types("Bike") == []


class TestNormalizeDocument:
    """Tests for normalize_document."""

    @pytest.mark.parametrize("raw", MALFORMED_DOCUMENTS)
    def test_idempotent(self, raw):
        """Test that normalizing twice equals normalizing once."""
        once = normalize_document(raw)
        assert normalize_document(once) == once

    @pytest.mark.parametrize("raw", MALFORMED_DOCUMENTS)
    def test_well_formed(self, raw):
        """Test the structural guarantees of the output."""
        doc = normalize_document(raw)

        assert set(doc["customTypes"]) <= set(doc["benchmarks"])
        assert doc["weekNumber"] >= 1
        for day in doc["days"]:
            ids = [ref["id"] for ref in day["sessionsList"] if ref["id"]]
            assert len(ids) == len(set(ids))
            assert day["sessions"] == len(day["sessionsList"])
            assert all(isinstance(v, bool) for v in day["types"].values())
            assert all(k for k in day["types"])

    def test_dedups_session_refs(self):
        """Test that refs are deduped by id, then by types for id-less ones."""
        doc = normalize_document(MALFORMED_DOCUMENTS[-1])
        refs = doc["days"][0]["sessionsList"]

        assert [r["id"] for r in refs] == ["a", None, None, "manual:2024-01-01"]
        assert refs[0]["sessionTypes"] == ["Bike"]
        assert refs[1]["sessionTypes"] == ["Bike"]
        assert refs[2]["sessionTypes"] == []
        assert refs[3]["kind"] == "placeholder"

    def test_coerces_fields(self):
        """Test type, benchmark and category coercion."""
        doc = normalize_document(MALFORMED_DOCUMENTS[-1])

        assert doc["weekOfISO"] == "2024-01-01"
        assert doc["customTypes"] == ["Bike", "Rings"]
        assert doc["benchmarks"] == {"Bike": 3, "Old": 0, "Rings": 0}
        assert doc["typeCategories"] == {"Bike": "Cardio", "Rings": "None"}
        assert doc["days"][0]["types"] == {"Bike": True, "Rings": False}
        assert doc["days"][0]["comments"] == {"Bike": "5"}
        assert doc["days"][1]["dateISO"] == ""

    def test_keeps_stale_benchmarks(self):
        """Test that benchmarks for types no longer listed survive."""
        doc = normalize_document({"customTypes": ["Bike"], "benchmarks": {"Swim": 2}})
        assert doc["benchmarks"] == {"Swim": 2, "Bike": 0}

    def test_counter_follows_sessions_list(self):
        """Test that a stored counter never outlives its session references."""
        doc = normalize_document(
            {
                "days": [
                    {"dateISO": "2024-01-01", "sessions": 2},
                    {
                        "dateISO": "2024-01-02",
                        "sessions": 5,
                        "sessionsList": [{"id": "a", "sessionTypes": ["Bike"]}],
                    },
                ]
            }
        )

        assert doc["days"][0]["sessionsList"] == []
        assert doc["days"][0]["sessions"] == 0
        assert doc["days"][1]["sessions"] == 1
        assert normalize_document(doc) == doc


class TestValidatePlan:
    """Tests for validate_plan."""

    def test_default_plan_is_valid(self, sample_plan):
        """Test that a fresh plan passes validation."""
        validate_plan(sample_plan)
        assert [d.date_iso for d in sample_plan.days][-1] == "2024-01-07"

    def test_wrong_day_count(self, sample_plan):
        """Test that a plan without seven days is rejected."""
        sample_plan.days.pop()
        with pytest.raises(ValidationError):
            validate_plan(sample_plan)

    def test_duplicate_dates(self, sample_plan):
        """Test that duplicate day dates are rejected."""
        sample_plan.days[1] = WeeklyDay(date_iso="2024-01-01")
        with pytest.raises(ValidationError):
            validate_plan(sample_plan)

    def test_non_contiguous_days(self, sample_plan):
        """Test that days must follow the week start."""
        sample_plan.days[6] = WeeklyDay(date_iso="2024-01-09")
        with pytest.raises(ValidationError):
            validate_plan(sample_plan)

    def test_empty_type(self, sample_plan):
        """Test that blank type names are rejected."""
        sample_plan.custom_types.append("  ")
        with pytest.raises(ValidationError):
            validate_plan(sample_plan)

    def test_bad_week_key(self, sample_plan):
        """Test that a non-date week key is rejected."""
        sample_plan.week_of_iso = "last week"
        with pytest.raises(ValidationError):
            validate_plan(sample_plan)


class TestDefaultPlan:
    """Tests for default_plan."""

    def test_starter_set(self):
        """Test the starter types and goals."""
        plan = default_plan(date(2024, 1, 8))

        assert plan.week_of_iso == "2024-01-08"
        assert plan.custom_types == ["Bike", "Calves", "Rings", "Mindfulness"]
        assert plan.benchmarks["Calves"] == 4
        assert len(plan.days) == 7

    def test_normalize_plan_fills_benchmarks(self):
        """Test that custom types always get a benchmark."""
        plan = default_plan(date(2024, 1, 8), custom_types=["Swim"], benchmarks={})
        assert normalize_plan(plan).benchmarks == {"Swim": 0}
