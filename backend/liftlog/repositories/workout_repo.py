from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import select
from sqlalchemy.orm import contains_eager, selectinload
from liftlog.models import Workout, WorkoutExercise, WorkoutSet
from liftlog.repositories.base import BaseRepository, Page

# Workout -> exercises (+ catalog entry) -> sets, each ordered on the relationship
_FULL = (
    selectinload(Workout.exercises).selectinload(WorkoutExercise.sets),
    selectinload(Workout.exercises).joinedload(WorkoutExercise.exercise),
)

DEFAULT_REST_SECONDS = 90

class WorkoutRepository(BaseRepository[Workout]):
    model = Workout

    def get_owned(self, workout_id: int, user_id: int) -> Optional[Workout]:
        stmt = (
            select(Workout)
            .where(Workout.id == workout_id, Workout.user_id == user_id)
            .options(*_FULL)
        )
        return self.db.execute(stmt).scalars().first()

    def list_by_user(self, user_id: int, *, limit: int = 20, offset: int = 0) -> Page[Workout]:
        stmt = (
            select(Workout)
            .where(Workout.user_id == user_id)
            .order_by(Workout.started_at.desc(), Workout.id.desc())
        )
        return self.page_from_stmt(stmt, limit=limit, offset=offset, options=_FULL)

    def history_for_exercise(self, user_id: int, exercise_id: int, *, limit: int = 20) -> list[WorkoutExercise]:
        """Appearances of an exercise in finished workouts, newest first, completed sets only."""
        stmt = (
            select(WorkoutExercise)
            .join(WorkoutExercise.workout)
            .where(
                WorkoutExercise.exercise_id == exercise_id,
                Workout.user_id == user_id,
                Workout.completed_at.is_not(None),
            )
            .order_by(Workout.started_at.desc(), WorkoutExercise.id.desc())
            .limit(limit)
            .options(
                contains_eager(WorkoutExercise.workout),
                selectinload(WorkoutExercise.sets.and_(WorkoutSet.completed.is_(True))),
            )
            .execution_options(populate_existing=True)
        )
        return list(self.db.execute(stmt).unique().scalars().all())

    def create(self, user_id: int, *, name: str, notes: str | None = None) -> Workout:
        w = Workout(user_id=user_id, name=name, notes=notes, started_at=datetime.now(timezone.utc))
        self.db.add(w)
        self.db.commit()
        return self.get_owned(w.id, user_id)

    def add_exercise(self, workout: Workout, *, exercise_id: int) -> WorkoutExercise:
        """Append an exercise with one empty set so the user can start logging."""
        we = WorkoutExercise(
            workout_id=workout.id,
            exercise_id=exercise_id,
            order=len(workout.exercises),
            rest_time=DEFAULT_REST_SECONDS,
            sets=[WorkoutSet(order=0, completed=False)],
        )
        self.db.add(we)
        self.db.commit()
        self.db.refresh(we)
        return we

    def complete(self, workout: Workout) -> Workout:
        completed_at = datetime.now(timezone.utc)
        started_at = workout.started_at
        if started_at.tzinfo is None:
            # sqlite hands back naive datetimes
            started_at = started_at.replace(tzinfo=timezone.utc)
        workout.completed_at = completed_at
        workout.duration = max(0, int((completed_at - started_at).total_seconds()))
        self.db.commit()
        return self.get_owned(workout.id, workout.user_id)

    def delete(self, workout: Workout) -> None:
        self.db.delete(workout)
        self.db.commit()
