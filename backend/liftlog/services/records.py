"""Personal-record detection.

A set is a new record for (user, exercise) when no record exists yet, or when
it is strictly heavier than the heaviest record *and* matches or beats that
record's reps. More reps at the same or a lower weight is deliberately not a
record.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy.orm import Session

from liftlog.models import PersonalRecord
from liftlog.repositories.record_repo import RecordRepository
from liftlog.settings import get_settings

logger = logging.getLogger(__name__)


class RecordLike(Protocol):
    weight: float
    reps: int


def estimate_one_rep_max(weight: float, reps: int, *, max_reps: Optional[int] = None) -> float:
    """Brzycki estimate: weight * 36 / (37 - reps).

    Raises ValueError for reps outside 1..max_reps, where the formula stops
    being meaningful (37 divides by zero, above that it goes negative).
    """
    limit = max_reps if max_reps is not None else get_settings().MAX_REPS_FOR_E1RM
    if reps < 1 or reps > limit:
        raise ValueError(f"reps must be between 1 and {limit} for an e1RM estimate, got {reps}")
    return weight * (36 / (37 - reps))


def is_new_record(best: Optional[RecordLike], weight: float, reps: int) -> bool:
    if best is None:
        return True
    return weight > best.weight and reps >= best.reps


def detect_and_record(
    db: Session,
    *,
    user_id: int,
    exercise_id: int,
    weight: float,
    reps: int,
) -> Optional[PersonalRecord]:
    """Stage a PersonalRecord if (weight, reps) beats the current best.

    Nothing is committed here; the caller commits the record together with
    the set update that triggered it.
    """
    try:
        e1rm = estimate_one_rep_max(weight, reps)
    except ValueError:
        logger.info("skip PR check user=%s exercise=%s: %s reps has no e1RM", user_id, exercise_id, reps)
        return None

    repo = RecordRepository(db)
    best = repo.find_best_by_weight(user_id, exercise_id)
    if not is_new_record(best, weight, reps):
        return None

    rec = repo.add(
        user_id=user_id,
        exercise_id=exercise_id,
        weight=weight,
        reps=reps,
        estimated_1rm=e1rm,
        achieved_at=datetime.now(timezone.utc),
    )
    logger.info(
        "new PR user=%s exercise=%s %sx%s e1RM=%.2f",
        user_id, exercise_id, weight, reps, e1rm,
    )
    return rec
