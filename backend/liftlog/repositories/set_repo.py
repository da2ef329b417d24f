from __future__ import annotations
from typing import Optional
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload, selectinload
from liftlog.models import Workout, WorkoutExercise, WorkoutSet

class SetRepository:
    """Set lookups always go through the owning workout so ownership is one query."""

    def __init__(self, db: Session):
        self.db = db

    def get_owned(self, set_id: int, user_id: int) -> Optional[WorkoutSet]:
        stmt = (
            select(WorkoutSet)
            .join(WorkoutSet.workout_exercise)
            .join(WorkoutExercise.workout)
            .where(WorkoutSet.id == set_id, Workout.user_id == user_id)
            .options(joinedload(WorkoutSet.workout_exercise))
        )
        return self.db.execute(stmt).scalars().first()

    def get_owned_exercise(self, workout_exercise_id: int, user_id: int) -> Optional[WorkoutExercise]:
        stmt = (
            select(WorkoutExercise)
            .join(WorkoutExercise.workout)
            .where(WorkoutExercise.id == workout_exercise_id, Workout.user_id == user_id)
            .options(selectinload(WorkoutExercise.sets))
        )
        return self.db.execute(stmt).scalars().first()

    def append(self, we: WorkoutExercise) -> WorkoutSet:
        """New set copying the previous set's numbers, not yet committed."""
        last = we.sets[-1] if we.sets else None
        s = WorkoutSet(
            workout_exercise_id=we.id,
            order=len(we.sets),
            weight=last.weight if last else None,
            reps=last.reps if last else None,
            completed=False,
        )
        self.db.add(s)
        self.db.flush()
        self.db.refresh(s)
        return s

    def delete(self, s: WorkoutSet) -> None:
        self.db.delete(s)
        self.db.flush()
