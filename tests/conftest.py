"""
Shared pytest fixtures for the Flow SMS dashboard test suite.

Provides:
    - app: Flask application (session-scoped, in-memory SQLite)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - make_user / auth_headers: users and Bearer headers per role
    - studio: a client, two users and one project with a phase
"""

import pytest

from flowsms import create_app
from flowsms.models import db as _db
from flowsms.models.project import Phase, Project, ProjectMember
from flowsms.models.user import Client, User
from flowsms.services import cache_service
from flowsms.services.jwt_service import generate_access_token
from flowsms.utils.crypto import hash_password

TEST_PASSWORD = "Pass1234!"

# bcrypt with the default 12 rounds makes every fixture user slow
_PASSWORD_HASH = hash_password(TEST_PASSWORD, rounds=4)


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
        cache_service.clear_all()
        yield
        cache_service.clear_all()
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def make_user():
    """Factory: create and commit a user with the shared test password."""
    counter = {"n": 0}

    def _make(role="viewer", email=None, name=None, is_active=True):
        counter["n"] += 1
        user = User(
            email=email or f"{role}{counter['n']}@flow.life",
            name=name or f"{role.title()} {counter['n']}",
            role=role,
            is_active=is_active,
            password_hash=_PASSWORD_HASH,
        )
        _db.session.add(user)
        _db.session.commit()
        return user

    return _make


@pytest.fixture()
def auth_headers(app, make_user):
    """Factory: Bearer headers for a freshly created user with *role*."""

    def _headers(role="admin", user=None):
        user = user or make_user(role=role)
        return {"Authorization": f"Bearer {generate_access_token(user)}"}

    return _headers


@pytest.fixture()
def studio(make_user):
    """One client, an admin, a designer and an active project with a phase."""
    admin = make_user(role="admin", name="Swapnil Meena")
    designer = make_user(role="designer", name="Omar Faisal")
    client_row = Client(name="Saudi Development Corp", email="contact@saudidev.com")
    _db.session.add(client_row)
    _db.session.flush()

    project = Project(
        name="Al-Mamlaka Tower",
        type="architecture",
        status="active",
        client_id=client_row.id,
        location="Riyadh, Saudi Arabia",
        progress=40,
    )
    _db.session.add(project)
    _db.session.flush()
    _db.session.add(ProjectMember(project_id=project.id, user_id=designer.id, role="Architect"))
    phase = Phase(project_id=project.id, name="Concept Design", order=1)
    _db.session.add(phase)
    _db.session.commit()

    return {
        "admin": admin,
        "designer": designer,
        "client": client_row,
        "project": project,
        "phase": phase,
    }
