"""Workout-set mutations: update (with PR detection), add, delete.

Each operation is one unit of work: either everything it staged is committed
or the session is rolled back and PersistenceError is raised.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from liftlog.errors import NotFoundError, PersistenceError
from liftlog.models import WorkoutSet
from liftlog.repositories.set_repo import SetRepository
from liftlog.schemas.workout_set import SetPatch
from liftlog.services.records import detect_and_record

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SetUpdateResult:
    set: WorkoutSet
    is_pr: bool


def _commit(db: Session, operation: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("commit failed: %s", operation)
        raise PersistenceError(operation)


def update_set(db: Session, set_id: int, user_id: int, patch: SetPatch) -> SetUpdateResult:
    s = SetRepository(db).get_owned(set_id, user_id)
    if s is None:
        raise NotFoundError("Set")

    fields = patch.model_dump(exclude_unset=True)

    is_pr = False
    try:
        # Only numbers sent with the completing patch count, not ones already stored
        if patch.completed is True and patch.weight and patch.reps:
            rec = detect_and_record(
                db,
                user_id=user_id,
                exercise_id=s.workout_exercise.exercise_id,
                weight=patch.weight,
                reps=patch.reps,
            )
            is_pr = rec is not None

        for name, value in fields.items():
            setattr(s, name, value)
        s.is_pr = is_pr
        db.flush()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("update_set staging failed set=%s", set_id)
        raise PersistenceError("update set")

    _commit(db, "update set")
    db.refresh(s)
    return SetUpdateResult(set=s, is_pr=is_pr)


def add_set(db: Session, workout_exercise_id: int, user_id: int) -> WorkoutSet:
    repo = SetRepository(db)
    we = repo.get_owned_exercise(workout_exercise_id, user_id)
    if we is None:
        raise NotFoundError("Exercise")
    try:
        s = repo.append(we)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("add_set failed workout_exercise=%s", workout_exercise_id)
        raise PersistenceError("add set")
    _commit(db, "add set")
    db.refresh(s)
    return s


def delete_set(db: Session, set_id: int, user_id: int) -> None:
    """Remove a set. Records it produced stay; completed sets aren't protected here."""
    repo = SetRepository(db)
    s = repo.get_owned(set_id, user_id)
    if s is None:
        raise NotFoundError("Set")
    try:
        repo.delete(s)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("delete_set failed set=%s", set_id)
        raise PersistenceError("delete set")
    _commit(db, "delete set")
    logger.info("deleted set=%s user=%s", set_id, user_id)
