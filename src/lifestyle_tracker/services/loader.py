"""Loading the current week and the weeks before it."""

from dataclasses import dataclass, field, replace
from datetime import date

from loguru import logger

from ..db.document_store import STORE_ERRORS
from ..db.repositories import (
    SessionRepository,
    TypeSettingsRepository,
    WeeklyPlanRepository,
)
from ..models.weekly import TypeSettings, WeeklyPlan
from ..utils.week_utils import get_week_start, parse_iso, shift_week
from .normalizer import default_plan, ensure_unique_types, normalize_plan
from .reconciler import rebuild_sessions_list


@dataclass
class WeekHistory:
    """The current week and the loaded prior weeks, most recent first."""

    current: WeeklyPlan
    previous: list[WeeklyPlan] = field(default_factory=list)

    @property
    def weeks(self) -> list[WeeklyPlan]:
        return [self.current, *self.previous]


def renumber_weeks(
    current: WeeklyPlan, previous: list[WeeklyPlan]
) -> tuple[WeeklyPlan, list[WeeklyPlan]]:
    """Assign display week numbers.

    With k loaded prior weeks the current week is k + 1 and the prior weeks,
    most recent first, are k, k - 1, ..., 1. Missing weeks are not counted,
    so the numbers are labels, not calendar offsets.

    Args:
        current: The current week
        previous: Loaded prior weeks, most recent first

    Returns:
        Copies of the weeks carrying their new numbers
    """
    count = len(previous)
    return (
        replace(current, week_number=count + 1),
        [replace(week, week_number=count - i) for i, week in enumerate(previous)],
    )


def _merge_settings(plan: WeeklyPlan, settings: TypeSettings | None) -> WeeklyPlan:
    """Fill a plan without custom types from the account type catalog."""
    if plan.custom_types or settings is None:
        return plan
    types = ensure_unique_types(settings.types)
    if not types:
        return plan
    merged = replace(
        plan,
        custom_types=types,
        type_categories={**plan.type_categories, **settings.categories},
    )
    return normalize_plan(merged)


class WeekLoader:
    """Builds the weekly views from the stores."""

    def __init__(
        self,
        plans: WeeklyPlanRepository,
        sessions: SessionRepository,
        settings: TypeSettingsRepository,
    ):
        self.plans = plans
        self.sessions = sessions
        self.settings = settings

    async def load_current(self, today: date | None = None) -> WeeklyPlan:
        """Load the week containing `today`, creating a default one if absent.

        The day session references are rebuilt from the session log, which
        repairs a plan whose cached references drifted after a partial write.
        A fresh week is not persisted until it is first edited.
        """
        week_start = get_week_start(today or date.today())
        plan = await self.plans.get(week_start.isoformat())
        type_settings = await self.settings.get()

        if plan is None:
            plan = await self.fresh_week(week_start, type_settings)
            logger.debug("No stored plan for {}; starting a fresh week", plan.week_of_iso)
        else:
            plan = _merge_settings(plan, type_settings)

        return await self.heal(plan)

    async def fresh_week(
        self, week_start: date, type_settings: TypeSettings | None = None
    ) -> WeeklyPlan:
        """A default plan carrying over the previous week's types and goals."""
        previous = await self.plans.get(shift_week(week_start.isoformat(), -1))
        if previous is not None and previous.custom_types:
            return default_plan(
                week_start,
                custom_types=previous.custom_types,
                benchmarks=previous.benchmarks,
                type_categories=previous.type_categories,
            )
        if type_settings is not None and ensure_unique_types(type_settings.types):
            return default_plan(
                week_start,
                custom_types=type_settings.types,
                type_categories=type_settings.categories,
            )
        return default_plan(week_start)

    async def heal(self, plan: WeeklyPlan) -> WeeklyPlan:
        """Rebuild day session references from the session log."""
        try:
            sessions = await self.sessions.list_all()
        except STORE_ERRORS as e:
            logger.warning(
                "Could not read session log for {}; keeping cached references: {}",
                plan.week_of_iso,
                e,
            )
            return plan
        return rebuild_sessions_list(plan, sessions)

    async def load_previous(self, week_of_iso: str, lookback: int) -> list[WeeklyPlan]:
        """Load up to `lookback` prior weeks, most recent first.

        Weeks that were never stored are skipped, not synthesized.
        """
        loaded = []
        for i in range(1, lookback + 1):
            key = shift_week(week_of_iso, -i)
            plan = await self.plans.get(key)
            if plan is None:
                logger.debug("No plan stored for week {}", key)
                continue
            loaded.append(plan)
        loaded.sort(key=lambda p: parse_iso(p.week_of_iso), reverse=True)
        return loaded

    async def load_history(self, current: WeeklyPlan, lookback: int) -> WeekHistory:
        """Load prior weeks and renumber them together with the current week."""
        previous = await self.load_previous(current.week_of_iso, lookback)
        current, previous = renumber_weeks(current, previous)
        logger.debug(
            "Loaded {} of {} prior weeks before {}",
            len(previous),
            lookback,
            current.week_of_iso,
        )
        return WeekHistory(current=current, previous=previous)
