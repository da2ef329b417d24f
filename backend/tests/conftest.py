"""
Point the app at a throwaway sqlite file before anything imports
liftlog.db, then build the schema and seed the exercise catalog once.
"""
import os
import tempfile
import uuid

import pytest

_tmpdir = tempfile.mkdtemp(prefix="liftlog-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_tmpdir}/liftlog.db"

from liftlog.db import Base, SessionLocal, engine  # noqa: E402
from liftlog import models  # noqa: E402,F401
from liftlog.repositories.exercise_repo import ExerciseRepository  # noqa: E402
from liftlog.repositories.user_repo import UserRepository  # noqa: E402
from liftlog.repositories.workout_repo import WorkoutRepository  # noqa: E402
from liftlog.security import create_access_token  # noqa: E402
from liftlog.seed import seed_exercises  # noqa: E402

Base.metadata.create_all(engine)
with SessionLocal() as _db:
    seed_exercises(_db)


def unique_sub():
    return f"idp|{uuid.uuid4().hex[:12]}"


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    return UserRepository(db).upsert(unique_sub(), email="lifter@example.com", name="Lifter")


@pytest.fixture
def bench(db):
    return ExerciseRepository(db).get_by_name("Bench Press")


@pytest.fixture
def make_set(db):
    """Fresh workout with one exercise; returns its default empty set."""
    def _make(user_id, exercise_id):
        repo = WorkoutRepository(db)
        w = repo.create(user_id, name="Push Day")
        we = repo.add_exercise(w, exercise_id=exercise_id)
        return we.sets[0]
    return _make


@pytest.fixture
def auth_headers():
    """Token for a brand-new identity-provider subject, already synced."""
    from fastapi.testclient import TestClient
    from liftlog.main import app

    client = TestClient(app)

    def _make(email=None):
        token = create_access_token(unique_sub())
        h = {"Authorization": f"Bearer {token}"}
        r = client.post("/auth/sync", headers=h, json={"email": email} if email else {})
        assert r.status_code == 200, r.text
        return h
    return _make
