"""Checkbox grid / session log reconciliation.

The weekly grid (`WeeklyPlan`) and the session log are persisted separately.
The reconciler keeps them consistent after a one-sided edit:

- A checkbox-only day is backed by a single placeholder ("Manual") session,
  created, updated in place, or retired as boxes are toggled.
- Once a day has a real completed session the grid is view-only for the
  log: toggles update `types` but never touch session records.
- Completing a workout appends a real session and unions its types into the
  grid. An existing placeholder for that day stays in the log and in
  `sessions_list` next to the real entry.

Plans are treated as values: every operation returns an updated copy. Store
failures are reported on the result and to the notifier, never raised; the
two writes of an operation are not rolled back against each other.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from loguru import logger

from ..db.document_store import STORE_ERRORS
from ..db.repositories import SessionRepository, WeeklyPlanRepository
from ..errors import PartialPersistFailure, ValidationError
from ..models.session import Session, SessionKind, now_millis
from ..models.weekly import SessionRef, SessionRefKind, WeeklyDay, WeeklyPlan
from .normalizer import normalize_plan, validate_plan
from .notifications import Notifier


class CompletionStatus(str, Enum):
    """Outcome of completing a workout."""

    COMPLETED = "completed"
    ALREADY_PROCESSED = "already_processed"
    OUTSIDE_WEEK = "outside_week"
    FAILED = "failed"


@dataclass
class ReconcileResult:
    """Updated plan plus any persistence failures."""

    plan: WeeklyPlan
    errors: list[PartialPersistFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class ToggleResult(ReconcileResult):
    checked: bool = False
    placeholder_id: str | None = None


@dataclass
class CompletionResult(ReconcileResult):
    status: CompletionStatus = CompletionStatus.COMPLETED
    session: Session | None = None


def rebuild_sessions_list(plan: WeeklyPlan, sessions: list[Session]) -> WeeklyPlan:
    """Project the session log onto the plan's days.

    Each day's `sessions_list` becomes the logged sessions dated that day,
    ordered by completion time. The `types` grid is left alone: it is a
    separately editable view and may legitimately differ from the log.

    Args:
        plan: The week to rebuild
        sessions: Session log entries (any dates; others are ignored)

    Returns:
        A copy of the plan with rebuilt session references
    """
    updated = plan.copy()
    by_date: dict[str, list[Session]] = {day.date_iso: [] for day in updated.days}
    for session in sessions:
        if session.id and session.date_iso in by_date:
            by_date[session.date_iso].append(session)

    for day in updated.days:
        entries = sorted(by_date[day.date_iso], key=lambda s: s.completed_at or 0)
        day.sessions_list = [
            SessionRef(
                id=s.id,
                session_types=list(s.session_types),
                kind=SessionRefKind.PLACEHOLDER
                if s.kind == SessionKind.PLACEHOLDER
                else SessionRefKind.REAL,
            )
            for s in entries
        ]
    return updated


def _check_day_index(plan: WeeklyPlan, day_index: int) -> None:
    if not 0 <= day_index < len(plan.days):
        raise ValidationError(f"Day index {day_index} is outside the week")


def _check_type_name(workout_type: str) -> str:
    name = workout_type.strip() if isinstance(workout_type, str) else ""
    if not name:
        raise ValidationError("Workout type names must not be empty")
    return name


class Reconciler:
    """Applies grid edits and workout completions to both stores."""

    def __init__(
        self,
        plans: WeeklyPlanRepository,
        sessions: SessionRepository,
        notifier: Notifier | None = None,
    ):
        self.plans = plans
        self.sessions = sessions
        self.notifier = notifier or Notifier()

    async def toggle_type(
        self, plan: WeeklyPlan, day_index: int, workout_type: str
    ) -> ToggleResult:
        """Flip one checkbox and keep the day's backing session in sync.

        Args:
            plan: Current in-memory plan (not modified)
            day_index: 0-based day within the week
            workout_type: Type whose checkbox was clicked

        Returns:
            ToggleResult with the updated plan and the new checkbox value

        Raises:
            ValidationError: Bad day index, empty type or malformed plan
        """
        name = _check_type_name(workout_type)
        _check_day_index(plan, day_index)
        validate_plan(plan)

        updated = plan.copy()
        day = updated.days[day_index]
        checked = not day.types.get(name, False)
        day.types[name] = checked
        result = ToggleResult(plan=updated, checked=checked)

        if day.has_real_session():
            logger.debug(
                "Toggled {} on {} (real session present, log untouched)",
                name,
                day.date_iso,
            )
        else:
            await self._sync_placeholder(day, result)

        await self._save_plan(updated, result)
        return result

    async def complete_workout(
        self, plan: WeeklyPlan, session: Session
    ) -> CompletionResult:
        """Record a finished workout and mark its types on the grid.

        The same session object is only ever processed once; repeated calls
        (e.g. a double-clicked button) return ALREADY_PROCESSED.

        Args:
            plan: Current in-memory plan (not modified)
            session: The workout that was just finished

        Returns:
            CompletionResult with status, updated plan and the stored session
        """
        validate_plan(plan)
        if session.completed:
            logger.warning(
                "Session {!r} on {} already processed", session.session_name, session.date_iso
            )
            return CompletionResult(
                plan=plan, status=CompletionStatus.ALREADY_PROCESSED, session=session
            )
        session.completed = True
        if session.completed_at is None:
            session.completed_at = now_millis()

        # Always a new log entry, even if the caller reused a placeholder id
        record = replace(session, id=None, kind=SessionKind.REAL)
        try:
            session.id = await self.sessions.create(record)
        except STORE_ERRORS as e:
            # Nothing was stored, so the same object may be submitted again
            session.completed = False
            failure = PartialPersistFailure("session", e)
            logger.error("Failed to save completed session: {}", e)
            self.notifier.error("Could not save your workout. Please try again.")
            return CompletionResult(
                plan=plan,
                errors=[failure],
                status=CompletionStatus.FAILED,
                session=session,
            )

        index = plan.day_index(session.date_iso)
        if index is None:
            logger.warning(
                "Session {} dated {} is outside week {}; grid not updated",
                session.id,
                session.date_iso,
                plan.week_of_iso,
            )
            return CompletionResult(
                plan=plan, status=CompletionStatus.OUTSIDE_WEEK, session=session
            )

        updated = plan.copy()
        day = updated.days[index]
        session_types = [t.strip() for t in session.session_types if t.strip()]
        for workout_type in session_types:
            day.types[workout_type] = True

        result = CompletionResult(plan=updated, session=session)
        day.sessions_list.append(SessionRef.real(session.id, session_types))

        logger.debug(
            "Completed {!r} on {} ({} sessions that day)",
            session.session_name,
            day.date_iso,
            day.sessions,
        )
        await self._save_plan(updated, result)
        if result.ok:
            self.notifier.success(f"Saved {session.session_name}")
        return result

    async def delete_session(self, plan: WeeklyPlan, session_id: str) -> ReconcileResult:
        """Delete a session from the log and drop every reference to it."""
        validate_plan(plan)
        try:
            await self.sessions.delete(session_id)
        except STORE_ERRORS as e:
            logger.error("Failed to delete session {}: {}", session_id, e)
            self.notifier.error("Delete failed. Please try again.")
            return ReconcileResult(plan=plan, errors=[PartialPersistFailure("session", e)])

        updated = plan.copy()
        for day in updated.days:
            day.sessions_list = [ref for ref in day.sessions_list if ref.id != session_id]
        updated = normalize_plan(updated)

        result = ReconcileResult(plan=updated)
        await self._save_plan(updated, result)
        return result

    async def set_comment(
        self, plan: WeeklyPlan, day_index: int, workout_type: str, text: str
    ) -> ReconcileResult:
        """Attach a note to a day/type cell. Empty text removes it."""
        name = _check_type_name(workout_type)
        _check_day_index(plan, day_index)
        validate_plan(plan)

        updated = plan.copy()
        comments = updated.days[day_index].comments
        if text.strip():
            comments[name] = text.strip()
        else:
            comments.pop(name, None)

        result = ReconcileResult(plan=updated)
        await self._save_plan(updated, result)
        return result

    async def _sync_placeholder(self, day: WeeklyDay, result: ReconcileResult) -> None:
        """Create, update or retire the placeholder backing a checkbox-only day."""
        checked = day.checked_types()
        try:
            if checked:
                existing = next(
                    (ref.id for ref in day.placeholder_refs() if ref.id), None
                )
                placeholder = Session.placeholder(day.date_iso, checked)
                if existing:
                    await self.sessions.put(existing, placeholder)
                    session_id = existing
                else:
                    session_id = await self.sessions.create(placeholder)
                day.sessions_list = [SessionRef.placeholder(session_id, checked)]
                if isinstance(result, ToggleResult):
                    result.placeholder_id = session_id
            else:
                await self._delete_placeholders(day)
                day.sessions_list = []
        except STORE_ERRORS as e:
            # The day's references keep pointing at what the log actually holds
            self._report(result, "placeholder session", e)

    async def _delete_placeholders(self, day: WeeklyDay) -> None:
        ids = {ref.id for ref in day.placeholder_refs() if ref.id}
        ids.update(s.id for s in await self.sessions.list_placeholders(day.date_iso))
        for session_id in sorted(ids):
            await self.sessions.delete(session_id)
        if ids:
            logger.debug("Retired {} placeholder(s) on {}", len(ids), day.date_iso)

    async def sync_placeholders(self, plan: WeeklyPlan) -> ReconcileResult:
        """Rewrite every checkbox-only day's placeholder from its current boxes.

        Used after catalog edits (type removal or rename) change `types`
        without going through `toggle_type`. Days with a real session and
        days with no placeholder are left alone. The plan is not saved.
        """
        updated = plan.copy()
        result = ReconcileResult(plan=updated)
        for day in updated.days:
            if day.has_real_session() or not day.placeholder_refs():
                continue
            await self._sync_placeholder(day, result)
        return result

    async def _save_plan(self, plan: WeeklyPlan, result: ReconcileResult) -> None:
        try:
            await self.plans.save(plan)
        except STORE_ERRORS as e:
            self._report(result, "weekly plan", e)

    def _report(self, result: ReconcileResult, step: str, error: BaseException) -> None:
        failure = PartialPersistFailure(step, error)
        result.errors.append(failure)
        logger.error("{}", failure)
        self.notifier.error(f"Could not save {step}. Reload to resync.")
