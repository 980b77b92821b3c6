"""Tests for workout type catalog edits."""

import pytest

from lifestyle_tracker.errors import ValidationError
from lifestyle_tracker.models.session import Session
from lifestyle_tracker.models.weekly import Category, SessionRef
from lifestyle_tracker.services.catalog import (
    CatalogService,
    add_type,
    remove_type,
    rename_type,
    set_benchmark,
    set_category,
)


@pytest.fixture
def catalog(plan_repo, settings_repo, reconciler):
    return CatalogService(plan_repo, settings_repo, reconciler)


class TestCatalogEdits:
    """Tests for the pure catalog transforms."""

    def test_add_type(self, sample_plan):
        """Test adding a type with a zero goal."""
        updated = add_type(sample_plan, " Swim ", Category.CARDIO)

        assert updated.custom_types[-1] == "Swim"
        assert updated.benchmarks["Swim"] == 0
        assert updated.category_of("Swim") == Category.CARDIO
        assert "Swim" not in sample_plan.custom_types

    def test_add_existing_type(self, sample_plan):
        """Test that adding a known type changes nothing."""
        assert add_type(sample_plan, "Bike") is sample_plan

    def test_add_empty_type(self, sample_plan):
        """Test that blank names are rejected."""
        with pytest.raises(ValidationError):
            add_type(sample_plan, "  ")

    def test_remove_type(self, sample_plan):
        """Test that removal prunes goals, categories and checkmarks."""
        sample_plan.days[0].types = {"Bike": True, "Rings": True}
        sample_plan.days[0].comments = {"Bike": "hills"}

        updated = remove_type(sample_plan, "Bike")

        assert "Bike" not in updated.custom_types
        assert "Bike" not in updated.benchmarks
        assert "Bike" not in updated.type_categories
        assert updated.days[0].types == {"Rings": True}
        assert updated.days[0].comments == {}

    def test_rename_type(self, sample_plan):
        """Test that a rename reaches every place the type appears."""
        sample_plan.days[2].types = {"Bike": True}
        sample_plan.days[2].comments = {"Bike": "commute"}

        updated = rename_type(sample_plan, "Bike", "Cycling")

        assert updated.custom_types[0] == "Cycling"
        assert updated.benchmarks["Cycling"] == 3
        assert "Bike" not in updated.benchmarks
        assert updated.category_of("Cycling") == Category.CARDIO
        assert updated.days[2].types == {"Cycling": True}
        assert updated.days[2].comments == {"Cycling": "commute"}
        assert set(updated.custom_types) <= set(updated.benchmarks)

    @pytest.mark.parametrize("new_name", ["", "   ", "Rings"])
    def test_rename_rejected(self, sample_plan, new_name):
        """Test that blank or taken names leave the plan unchanged."""
        assert rename_type(sample_plan, "Bike", new_name) is sample_plan

    def test_set_benchmark(self, sample_plan):
        """Test setting goals for types and categories."""
        updated = set_benchmark(sample_plan, "Skills", 2)
        assert updated.benchmarks["Skills"] == 2

        with pytest.raises(ValidationError):
            set_benchmark(sample_plan, "Bike", -1)

    def test_set_category(self, sample_plan):
        """Test reassigning a category."""
        updated = set_category(sample_plan, "Calves", Category.RESISTANCE)
        assert updated.category_of("Calves") == Category.RESISTANCE


class TestCatalogService:
    """Tests for persisted catalog edits."""

    async def test_add_persists_plan_and_settings(
        self, catalog, plan_repo, settings_repo, sample_plan
    ):
        """Test that catalog edits are saved for the week and the account."""
        await catalog.add_type(sample_plan, "Yoga", Category.MINDFULNESS)

        stored = await plan_repo.get(sample_plan.week_of_iso)
        settings = await settings_repo.get()
        assert "Yoga" in stored.custom_types
        assert settings.types == stored.custom_types
        assert settings.categories["Yoga"] == Category.MINDFULNESS

    async def test_rename_persists(self, catalog, settings_repo, sample_plan):
        """Test that renames reach the account catalog."""
        await catalog.rename_type(sample_plan, "Calves", "Calf raises")

        settings = await settings_repo.get()
        assert settings.types[1] == "Calf raises"

    async def test_set_benchmark_saves_week_only(
        self, catalog, plan_repo, settings_repo, sample_plan
    ):
        """Test that goals are per week."""
        await catalog.set_benchmark(sample_plan, "Bike", 5)

        stored = await plan_repo.get(sample_plan.week_of_iso)
        assert stored.benchmarks["Bike"] == 5
        assert await settings_repo.get() is None

    async def test_remove_rewrites_placeholder(
        self, catalog, reconciler, session_repo, plan_repo, sample_plan
    ):
        """Test that a removed type leaves the day's placeholder session."""
        plan = (await reconciler.toggle_type(sample_plan, 0, "Bike")).plan
        plan = (await reconciler.toggle_type(plan, 0, "Calves")).plan

        updated = await catalog.remove_type(plan, "Bike")

        stored = await session_repo.list_placeholders("2024-01-01")
        assert len(stored) == 1
        assert stored[0].session_types == ["Calves"]
        assert updated.days[0].sessions_list[0].session_types == ["Calves"]
        saved = await plan_repo.get(sample_plan.week_of_iso)
        assert saved.days[0].sessions_list[0].session_types == ["Calves"]

    async def test_remove_last_checked_type_drops_placeholder(
        self, catalog, reconciler, session_repo, sample_plan
    ):
        """Test that removing the only checked type deletes the placeholder."""
        plan = (await reconciler.toggle_type(sample_plan, 0, "Bike")).plan

        updated = await catalog.remove_type(plan, "Bike")

        assert await session_repo.list_placeholders("2024-01-01") == []
        assert updated.days[0].sessions == 0

    async def test_rename_rewrites_placeholder(
        self, catalog, reconciler, session_repo, sample_plan
    ):
        """Test that a rename reaches the placeholder session types."""
        plan = (await reconciler.toggle_type(sample_plan, 0, "Bike")).plan

        updated = await catalog.rename_type(plan, "Bike", "Cycling")

        stored = await session_repo.list_placeholders("2024-01-01")
        assert stored[0].session_types == ["Cycling"]
        assert updated.days[0].sessions_list[0].session_types == ["Cycling"]

    async def test_real_session_types_are_kept(
        self, catalog, reconciler, session_repo, sample_plan
    ):
        """Test that logged workouts keep the types they were done with."""
        session = Session(date_iso="2024-01-01", session_types=["Bike"])
        plan = (await reconciler.complete_workout(sample_plan, session)).plan

        updated = await catalog.remove_type(plan, "Bike")

        assert updated.days[0].sessions_list == [SessionRef.real(session.id, ["Bike"])]
        logged = await session_repo.list_by_date("2024-01-01")
        assert logged[0].session_types == ["Bike"]
