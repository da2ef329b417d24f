from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from liftlog.db import get_db
from liftlog.deps.auth import get_current_user
from liftlog.models import User
from liftlog.repositories.exercise_repo import ExerciseRepository
from liftlog.repositories.record_repo import RecordRepository
from liftlog.repositories.workout_repo import WorkoutRepository
from liftlog.schemas.exercise import (
    EQUIPMENT,
    MUSCLE_GROUPS,
    Equipment,
    EquipmentResponse,
    ExerciseCreate,
    ExerciseResponse,
    ExercisesResponse,
    HistoryResponse,
    MuscleGroup,
    MuscleGroupsResponse,
    RecordsResponse,
)

router = APIRouter(prefix="/exercises", tags=["exercises"])

_MUSCLE_GROUP_ICONS = {
    "chest": "🫁", "back": "🔙", "shoulders": "💪", "arms": "💪",
    "legs": "🦵", "core": "🎯", "cardio": "❤️",
}
_EQUIPMENT_ICONS = {
    "barbell": "🏋️", "dumbbell": "🏋️", "machine": "⚙️", "cable": "🔗",
    "bodyweight": "🤸", "other": "📦",
}

def _visible_or_404(db: Session, exercise_id: int, user_id: int):
    ex = ExerciseRepository(db).get_visible(exercise_id, user_id)
    if not ex:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not found")
    return ex

@router.get("", response_model=ExercisesResponse)
def list_exercises(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    search: str | None = Query(None, max_length=100),
    muscle_group: MuscleGroup | None = Query(None, alias="muscleGroup"),
    equipment: Equipment | None = Query(None),
):
    exercises = ExerciseRepository(db).list_visible(
        current.id, search=search, muscle_group=muscle_group, equipment=equipment
    )
    return {"exercises": exercises}

@router.post("", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
def create_exercise(
    payload: ExerciseCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    ex = ExerciseRepository(db).create(
        name=payload.name,
        muscle_group=payload.muscle_group,
        equipment=payload.equipment,
        instructions=payload.instructions,
        created_by_id=current.id,
    )
    return {"exercise": ex}

@router.get("/meta/muscle-groups", response_model=MuscleGroupsResponse)
def muscle_groups(current: User = Depends(get_current_user)):
    return {"muscleGroups": [
        {"id": g, "name": g.title(), "icon": _MUSCLE_GROUP_ICONS[g]} for g in MUSCLE_GROUPS
    ]}

@router.get("/meta/equipment", response_model=EquipmentResponse)
def equipment_types(current: User = Depends(get_current_user)):
    return {"equipment": [
        {"id": e, "name": e.title(), "icon": _EQUIPMENT_ICONS[e]} for e in EQUIPMENT
    ]}

@router.get("/{exercise_id}/history", response_model=HistoryResponse)
def exercise_history(
    exercise_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    limit: int = Query(20, ge=1, le=50),
):
    _visible_or_404(db, exercise_id, current.id)
    return {"history": WorkoutRepository(db).history_for_exercise(current.id, exercise_id, limit=limit)}

@router.get("/{exercise_id}/records", response_model=RecordsResponse)
def list_records(
    exercise_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    limit: int = Query(10, ge=1, le=50),
):
    _visible_or_404(db, exercise_id, current.id)
    repo = RecordRepository(db)
    return {
        "records": repo.list_for_exercise(current.id, exercise_id, limit=limit),
        "total": repo.count_for_exercise(current.id, exercise_id),
    }
