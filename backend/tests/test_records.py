from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from liftlog.repositories.record_repo import RecordRepository
from liftlog.services.records import detect_and_record, estimate_one_rep_max, is_new_record


def best(weight, reps):
    return SimpleNamespace(weight=weight, reps=reps)


def test_e1rm_brzycki():
    assert estimate_one_rep_max(100, 8) == pytest.approx(124.14, abs=0.01)
    assert estimate_one_rep_max(100, 5) == pytest.approx(112.5)

def test_e1rm_single_rep_is_the_weight():
    assert estimate_one_rep_max(140, 1) == 140

@pytest.mark.parametrize("reps", [0, 37, 40])
def test_e1rm_rejects_reps_outside_formula(reps):
    with pytest.raises(ValueError):
        estimate_one_rep_max(100, reps)

def test_e1rm_max_reps_override():
    with pytest.raises(ValueError):
        estimate_one_rep_max(100, 20, max_reps=12)


@pytest.mark.parametrize(
    "prior, weight, reps, expected",
    [
        (None, 50, 5, True),
        (best(100, 8), 105, 8, True),
        (best(100, 8), 105, 10, True),
        (best(100, 8), 105, 6, False),   # heavier but fewer reps
        (best(100, 8), 100, 12, False),  # more reps at the same weight isn't a PR
        (best(100, 8), 90, 20, False),
    ],
)
def test_dominance_rule(prior, weight, reps, expected):
    assert is_new_record(prior, weight, reps) is expected


def test_find_best_by_weight_ignores_recency(db, user, bench):
    repo = RecordRepository(db)
    detect_and_record(db, user_id=user.id, exercise_id=bench.id, weight=80, reps=5)
    detect_and_record(db, user_id=user.id, exercise_id=bench.id, weight=100, reps=5)
    # lighter and later, but written directly: still not the best
    repo.add(user_id=user.id, exercise_id=bench.id, weight=60, reps=12, estimated_1rm=None, achieved_at=datetime.now(timezone.utc))
    db.commit()

    top = repo.find_best_by_weight(user.id, bench.id)
    assert (top.weight, top.reps) == (100, 5)
    assert repo.count_for_exercise(user.id, bench.id) == 3


def test_detect_and_record_stages_without_commit(db, user, bench):
    rec = detect_and_record(db, user_id=user.id, exercise_id=bench.id, weight=70, reps=3)
    assert rec is not None
    assert rec.estimated_1rm == pytest.approx(70 * 36 / 34)
    db.rollback()
    assert RecordRepository(db).find_best_by_weight(user.id, bench.id) is None


def test_detect_and_record_skips_reps_without_e1rm(db, user, bench):
    assert detect_and_record(db, user_id=user.id, exercise_id=bench.id, weight=40, reps=40) is None
    assert RecordRepository(db).count_for_exercise(user.id, bench.id) == 0
