from __future__ import annotations
from typing import Optional
from sqlalchemy import select, func
from liftlog.models import PersonalRecord
from liftlog.repositories.base import BaseRepository

class RecordRepository(BaseRepository[PersonalRecord]):
    model = PersonalRecord

    def find_best_by_weight(self, user_id: int, exercise_id: int) -> Optional[PersonalRecord]:
        """Heaviest record for (user, exercise); latest wins a tie."""
        stmt = (
            select(PersonalRecord)
            .where(PersonalRecord.user_id == user_id, PersonalRecord.exercise_id == exercise_id)
            .order_by(PersonalRecord.weight.desc(), PersonalRecord.id.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalars().first()

    def list_for_exercise(self, user_id: int, exercise_id: int, *, limit: int = 10) -> list[PersonalRecord]:
        stmt = (
            select(PersonalRecord)
            .where(PersonalRecord.user_id == user_id, PersonalRecord.exercise_id == exercise_id)
            .order_by(PersonalRecord.achieved_at.desc(), PersonalRecord.id.desc())
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def count_for_exercise(self, user_id: int, exercise_id: int) -> int:
        stmt = select(func.count()).select_from(PersonalRecord).where(
            PersonalRecord.user_id == user_id, PersonalRecord.exercise_id == exercise_id
        )
        return self.db.execute(stmt).scalar_one()

    def add(self, *, user_id: int, exercise_id: int, weight: float, reps: int,
            estimated_1rm: float | None, achieved_at) -> PersonalRecord:
        rec = PersonalRecord(
            user_id=user_id,
            exercise_id=exercise_id,
            weight=weight,
            reps=reps,
            estimated_1rm=estimated_1rm,
            achieved_at=achieved_at,
        )
        return self.add_and_refresh(rec)
