"""Workout type catalog edits.

The pure functions return an updated copy of the plan. `CatalogService`
applies them and writes both the week and the account-wide type settings so
new weeks start with the same catalog. Removing or renaming a type also
rewrites the placeholder sessions of checkbox-only days, so the log never
keeps a type the grid no longer has.
"""

from loguru import logger

from ..db.repositories import TypeSettingsRepository, WeeklyPlanRepository
from ..errors import ValidationError
from ..models.weekly import Category, TypeSettings, WeeklyPlan
from .normalizer import normalize_plan
from .reconciler import Reconciler


def _clean_name(name: str) -> str:
    cleaned = name.strip() if isinstance(name, str) else ""
    if not cleaned:
        raise ValidationError("Workout type names must not be empty")
    return cleaned


def add_type(
    plan: WeeklyPlan, name: str, category: Category = Category.NONE
) -> WeeklyPlan:
    """Append a type with a zero goal. Existing names are left as they are."""
    name = _clean_name(name)
    if name in plan.custom_types:
        return plan
    updated = plan.copy()
    updated.custom_types.append(name)
    updated.benchmarks[name] = 0
    updated.type_categories[name] = Category.from_value(category)
    return normalize_plan(updated)


def remove_type(plan: WeeklyPlan, name: str) -> WeeklyPlan:
    """Remove a type together with its goal, category and day checkmarks."""
    updated = plan.copy()
    updated.custom_types = [t for t in updated.custom_types if t != name]
    updated.benchmarks.pop(name, None)
    updated.type_categories.pop(name, None)
    for day in updated.days:
        day.types.pop(name, None)
        day.comments.pop(name, None)
    return normalize_plan(updated)


def _rename_key(mapping: dict, old: str, new: str) -> dict:
    return {(new if k == old else k): v for k, v in mapping.items()}


def rename_type(plan: WeeklyPlan, old_name: str, new_name: str) -> WeeklyPlan:
    """Rename a type everywhere it appears in the week.

    A blank new name or one already in use leaves the plan unchanged.
    """
    new_name = new_name.strip() if isinstance(new_name, str) else ""
    if not new_name or new_name in plan.custom_types or old_name not in plan.custom_types:
        return plan

    updated = plan.copy()
    updated.custom_types = [new_name if t == old_name else t for t in updated.custom_types]
    updated.benchmarks = _rename_key(updated.benchmarks, old_name, new_name)
    updated.type_categories = _rename_key(updated.type_categories, old_name, new_name)
    for day in updated.days:
        day.types = _rename_key(day.types, old_name, new_name)
        day.comments = _rename_key(day.comments, old_name, new_name)
    return normalize_plan(updated)


def set_benchmark(plan: WeeklyPlan, name: str, goal: int) -> WeeklyPlan:
    """Set the days-per-week goal for a type or category name."""
    name = _clean_name(name)
    if goal < 0:
        raise ValidationError(f"Goal for {name} must not be negative")
    updated = plan.copy()
    updated.benchmarks[name] = int(goal)
    return updated


def set_category(plan: WeeklyPlan, name: str, category: Category) -> WeeklyPlan:
    """Assign the aggregate category of a type."""
    name = _clean_name(name)
    updated = plan.copy()
    updated.type_categories[name] = Category.from_value(category)
    return updated


class CatalogService:
    """Persists catalog edits to the week and the account settings."""

    def __init__(
        self,
        plans: WeeklyPlanRepository,
        settings: TypeSettingsRepository,
        reconciler: Reconciler | None = None,
    ):
        self.plans = plans
        self.settings = settings
        self.reconciler = reconciler

    async def add_type(
        self, plan: WeeklyPlan, name: str, category: Category = Category.NONE
    ) -> WeeklyPlan:
        return await self._store(add_type(plan, name, category))

    async def remove_type(self, plan: WeeklyPlan, name: str) -> WeeklyPlan:
        return await self._store(await self._resync(remove_type(plan, name)))

    async def rename_type(self, plan: WeeklyPlan, old_name: str, new_name: str) -> WeeklyPlan:
        renamed = rename_type(plan, old_name, new_name)
        return await self._store(await self._resync(renamed))

    async def set_benchmark(self, plan: WeeklyPlan, name: str, goal: int) -> WeeklyPlan:
        updated = set_benchmark(plan, name, goal)
        await self.plans.save(updated)
        return updated

    async def set_category(
        self, plan: WeeklyPlan, name: str, category: Category
    ) -> WeeklyPlan:
        return await self._store(set_category(plan, name, category))

    async def _resync(self, plan: WeeklyPlan) -> WeeklyPlan:
        if self.reconciler is None:
            return plan
        return (await self.reconciler.sync_placeholders(plan)).plan

    async def _store(self, plan: WeeklyPlan) -> WeeklyPlan:
        await self.plans.save(plan)
        await self.settings.save(
            TypeSettings(types=list(plan.custom_types), categories=dict(plan.type_categories))
        )
        logger.debug("Saved type catalog ({} types)", len(plan.custom_types))
        return plan
