"""Pytest configuration and fixtures."""

import pytest
import tempfile
from datetime import date
from pathlib import Path

from lifestyle_tracker.db import (
    DocumentStore,
    FavoriteRepository,
    SessionRepository,
    TypeSettingsRepository,
    WeeklyPlanRepository,
    init_db,
)
from lifestyle_tracker.services.loader import WeekLoader
from lifestyle_tracker.services.normalizer import default_plan
from lifestyle_tracker.services.notifications import Notifier
from lifestyle_tracker.services.reconciler import Reconciler

ACCOUNT = "test-account"
WEEK_START = date(2024, 1, 1)


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
async def store(temp_db_path):
    """An initialized document store."""
    await init_db(temp_db_path)
    return DocumentStore(temp_db_path)


@pytest.fixture
def plan_repo(store):
    return WeeklyPlanRepository(store, ACCOUNT)


@pytest.fixture
def session_repo(store):
    return SessionRepository(store, ACCOUNT)


@pytest.fixture
def favorite_repo(store):
    return FavoriteRepository(store, ACCOUNT)


@pytest.fixture
def settings_repo(store):
    return TypeSettingsRepository(store, ACCOUNT)


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def reconciler(plan_repo, session_repo, notifier):
    return Reconciler(plan_repo, session_repo, notifier)


@pytest.fixture
def loader(plan_repo, session_repo, settings_repo):
    return WeekLoader(plan_repo, session_repo, settings_repo)


@pytest.fixture
def sample_plan():
    """A default week starting Monday 2024-01-01."""
    return default_plan(WEEK_START)
