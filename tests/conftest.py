"""
Shared pytest fixtures for the data-migration test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test app context + table recreate (autouse)
    - store: Store handle bound to db.session
    - frozen_now: fixed reference clock for date-relative templates
"""

from datetime import datetime, timezone

import pytest

from teamboard import create_app
from teamboard.models import db as _db
from teamboard.services.store import Store


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    return create_app("testing")


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def store():
    return Store(_db.session)


@pytest.fixture()
def frozen_now():
    return datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


# ── Seed helpers ─────────────────────────────────────────────────────────


@pytest.fixture()
def make_team():
    from teamboard.models.team import Team

    def _make(name="Core Team"):
        team = Team(name=name)
        _db.session.add(team)
        _db.session.commit()
        return team

    return _make


@pytest.fixture()
def make_project(make_team):
    from teamboard.models.project import Project

    def _make(title="Website Relaunch", team=None):
        project = Project(title=title, slug=title.lower().replace(" ", "-"), team_id=team.id if team else None)
        _db.session.add(project)
        _db.session.commit()
        return project

    return _make
