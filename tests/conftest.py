"""Shared fixtures: in-memory SQLite database, store and activity factory."""

from datetime import datetime
from itertools import count

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from autobrief.config import Settings
from autobrief.database import enable_sqlite_savepoints, init_db
from autobrief.models import WorkActivity
from autobrief.storage import ActivityStore


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", groq_api_key="test-key", resend_api_key=None)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def store(db):
    return ActivityStore(db)


_external_ids = count(1)


def make_activity(
    provider="github",
    activity_type="commit",
    title="Some work",
    timestamp=None,
    metadata=None,
    user_id=1,
    external_id=None,
):
    """Unsaved WorkActivity for pure formatter / policy tests."""
    return WorkActivity(
        user_id=user_id,
        integration_id=None,
        provider=provider,
        activity_type=activity_type,
        title=title,
        description=None,
        external_id=external_id or f"ext-{next(_external_ids)}",
        extra=metadata,
        timestamp=timestamp or datetime(2025, 1, 18, 12, 0),
    )


@pytest.fixture
def activity_factory():
    return make_activity


@pytest.fixture
def add_activity(store):
    """Persist an activity through the store."""

    def _add(
        provider="github",
        activity_type="commit",
        title="Some work",
        timestamp=None,
        metadata=None,
        user_id=1,
        external_id=None,
    ):
        return store.create_work_activity(
            user_id=user_id,
            provider=provider,
            activity_type=activity_type,
            title=title,
            external_id=external_id or f"ext-{next(_external_ids)}",
            timestamp=timestamp or datetime(2025, 1, 18, 12, 0),
            metadata=metadata,
        )

    return _add
