from __future__ import annotations
from typing import Optional
from sqlalchemy import select, or_
from liftlog.models import Exercise

class ExerciseRepository:
    def __init__(self, db):
        self.db = db

    def get_visible(self, exercise_id: int, user_id: int) -> Optional[Exercise]:
        """Catalog exercise, or a custom one the user created."""
        ex = self.db.get(Exercise, exercise_id)
        if ex is None or (ex.created_by_id is not None and ex.created_by_id != user_id):
            return None
        return ex

    def list_visible(self, user_id: int, *, search: str | None = None,
                     muscle_group: str | None = None, equipment: str | None = None) -> list[Exercise]:
        stmt = select(Exercise).where(
            or_(Exercise.created_by_id.is_(None), Exercise.created_by_id == user_id)
        )
        if search:
            stmt = stmt.where(Exercise.name.ilike(f"%{search}%"))
        if muscle_group:
            stmt = stmt.where(Exercise.muscle_group == muscle_group)
        if equipment:
            stmt = stmt.where(Exercise.equipment == equipment)
        return list(self.db.execute(stmt.order_by(Exercise.name.asc())).scalars().all())

    def get_by_name(self, name: str) -> Optional[Exercise]:
        stmt = select(Exercise).where(Exercise.name == name, Exercise.created_by_id.is_(None))
        return self.db.execute(stmt).scalars().first()

    def create(self, *, name: str, muscle_group: str, equipment: str,
               instructions: str | None = None, created_by_id: int | None = None) -> Exercise:
        ex = Exercise(
            name=name,
            muscle_group=muscle_group,
            equipment=equipment,
            instructions=instructions,
            is_custom=created_by_id is not None,
            created_by_id=created_by_id,
        )
        self.db.add(ex)
        self.db.commit()
        self.db.refresh(ex)
        return ex
