import pytest
from sqlalchemy.exc import SQLAlchemyError

from liftlog.db import SessionLocal
from liftlog.errors import NotFoundError, PersistenceError
from liftlog.models import WorkoutSet
from liftlog.repositories.record_repo import RecordRepository
from liftlog.repositories.user_repo import UserRepository
from liftlog.schemas.workout_set import SetPatch
from liftlog.services import set_mutations


def complete(weight, reps):
    return SetPatch(weight=weight, reps=reps, completed=True)


def test_first_completed_set_is_a_pr(db, user, bench, make_set):
    s = make_set(user.id, bench.id)
    result = set_mutations.update_set(db, s.id, user.id, complete(100, 5))

    assert result.is_pr is True
    assert result.set.is_pr is True
    assert result.set.completed is True
    rec = RecordRepository(db).find_best_by_weight(user.id, bench.id)
    assert rec.estimated_1rm == pytest.approx(112.5)


def test_heavier_with_fewer_reps_is_not_a_pr(db, user, bench, make_set):
    set_mutations.update_set(db, make_set(user.id, bench.id).id, user.id, complete(100, 8))
    result = set_mutations.update_set(db, make_set(user.id, bench.id).id, user.id, complete(105, 6))
    assert result.is_pr is False
    assert RecordRepository(db).count_for_exercise(user.id, bench.id) == 1


def test_heavier_with_same_reps_is_a_pr(db, user, bench, make_set):
    set_mutations.update_set(db, make_set(user.id, bench.id).id, user.id, complete(100, 8))
    result = set_mutations.update_set(db, make_set(user.id, bench.id).id, user.id, complete(105, 8))
    assert result.is_pr is True
    assert RecordRepository(db).count_for_exercise(user.id, bench.id) == 2


@pytest.mark.parametrize("patch", [
    SetPatch(weight=500),
    SetPatch(reps=1),
    SetPatch(weight=500, reps=1),
    SetPatch(is_warmup=True),
    SetPatch(weight=500, reps=1, completed=False),
])
def test_non_completing_patch_never_records(db, user, bench, make_set, patch):
    result = set_mutations.update_set(db, make_set(user.id, bench.id).id, user.id, patch)
    assert result.is_pr is False
    assert RecordRepository(db).count_for_exercise(user.id, bench.id) == 0


def test_completing_with_stored_numbers_only_is_not_checked(db, user, bench, make_set):
    s = make_set(user.id, bench.id)
    set_mutations.update_set(db, s.id, user.id, SetPatch(weight=100, reps=5))
    result = set_mutations.update_set(db, s.id, user.id, SetPatch(completed=True))
    assert result.is_pr is False
    assert result.set.weight == 100
    assert RecordRepository(db).count_for_exercise(user.id, bench.id) == 0


def test_absent_fields_are_left_alone(db, user, bench, make_set):
    s = make_set(user.id, bench.id)
    set_mutations.update_set(db, s.id, user.id, SetPatch(weight=60, reps=10, is_dropset=True))
    result = set_mutations.update_set(db, s.id, user.id, SetPatch(reps=8))
    assert (result.set.weight, result.set.reps, result.set.is_dropset) == (60, 8, True)


def test_superseded_pr_flag_is_kept(db, user, bench, make_set):
    first = make_set(user.id, bench.id)
    set_mutations.update_set(db, first.id, user.id, complete(100, 5))
    set_mutations.update_set(db, make_set(user.id, bench.id).id, user.id, complete(110, 5))
    db.expire_all()
    assert db.get(WorkoutSet, first.id).is_pr is True


def test_other_users_set_is_not_found(db, user, bench, make_set):
    s = make_set(user.id, bench.id)
    intruder = UserRepository(db).upsert("idp|intruder-svc")
    with pytest.raises(NotFoundError):
        set_mutations.update_set(db, s.id, intruder.id, complete(100, 5))
    with pytest.raises(NotFoundError):
        set_mutations.delete_set(db, s.id, intruder.id)
    with pytest.raises(NotFoundError):
        set_mutations.add_set(db, s.workout_exercise_id, intruder.id)


def test_failed_commit_leaves_no_record_and_no_update(db, user, bench, make_set, monkeypatch):
    s = make_set(user.id, bench.id)

    def boom():
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(db, "commit", boom)
    with pytest.raises(PersistenceError):
        set_mutations.update_set(db, s.id, user.id, complete(100, 5))

    with SessionLocal() as fresh:
        assert RecordRepository(fresh).count_for_exercise(user.id, bench.id) == 0
        assert fresh.get(WorkoutSet, s.id).completed is False


def test_add_set_copies_previous_numbers(db, user, bench, make_set):
    s = make_set(user.id, bench.id)
    set_mutations.update_set(db, s.id, user.id, SetPatch(weight=80, reps=6))
    added = set_mutations.add_set(db, s.workout_exercise_id, user.id)
    assert added.order == 1
    assert (added.weight, added.reps, added.completed) == (80, 6, False)


def test_delete_set_keeps_its_record(db, user, bench, make_set):
    s = make_set(user.id, bench.id)
    set_mutations.update_set(db, s.id, user.id, complete(100, 5))
    set_mutations.delete_set(db, s.id, user.id)
    db.expire_all()
    assert db.get(WorkoutSet, s.id) is None
    assert RecordRepository(db).count_for_exercise(user.id, bench.id) == 1
