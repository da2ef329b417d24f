import math
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from liftlog.db import get_db
from liftlog.deps.auth import get_current_user
from liftlog.models import User
from liftlog.repositories.exercise_repo import ExerciseRepository
from liftlog.repositories.workout_repo import WorkoutRepository
from liftlog.schemas.workout import (
    ExerciseAdd,
    WorkoutExerciseResponse,
    WorkoutResponse,
    WorkoutStart,
    WorkoutSummary,
    WorkoutsPage,
)
from liftlog.schemas.workout_set import SuccessResponse
from liftlog.services.stats import calculate_workout_stats, format_duration

router = APIRouter(prefix="/workouts", tags=["workouts"])

def _owned_or_404(repo: WorkoutRepository, workout_id: int, user_id: int):
    w = repo.get_owned(workout_id, user_id)
    if not w:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workout not found")
    return w

@router.get("", response_model=WorkoutsPage)
def list_workouts(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    result = WorkoutRepository(db).list_by_user(current.id, limit=limit, offset=(page - 1) * limit)
    return {
        "workouts": result.items,
        "total": result.total,
        "page": page,
        "totalPages": math.ceil(result.total / limit),
    }

@router.post("/start", response_model=WorkoutResponse, status_code=status.HTTP_201_CREATED)
def start_workout(payload: WorkoutStart, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return {"workout": WorkoutRepository(db).create(current.id, name=payload.name, notes=payload.notes)}

@router.get("/{workout_id}", response_model=WorkoutResponse)
def get_workout(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return {"workout": _owned_or_404(WorkoutRepository(db), workout_id, current.id)}

@router.get("/{workout_id}/summary", response_model=WorkoutSummary)
def workout_summary(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    w = _owned_or_404(WorkoutRepository(db), workout_id, current.id)
    stats = calculate_workout_stats(w)
    return {
        "totalSets": stats.total_sets,
        "completedSets": stats.completed_sets,
        "totalVolume": stats.total_volume,
        "prCount": stats.pr_count,
        "duration": w.duration,
        "durationLabel": format_duration(w.duration) if w.duration is not None else None,
    }

@router.post("/{workout_id}/exercises", response_model=WorkoutExerciseResponse, status_code=status.HTTP_201_CREATED)
def add_exercise(
    workout_id: int,
    payload: ExerciseAdd,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    repo = WorkoutRepository(db)
    w = _owned_or_404(repo, workout_id, current.id)
    if not ExerciseRepository(db).get_visible(payload.exercise_id, current.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not found")
    return {"exercise": repo.add_exercise(w, exercise_id=payload.exercise_id)}

@router.post("/{workout_id}/complete", response_model=WorkoutResponse)
def complete_workout(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    repo = WorkoutRepository(db)
    return {"workout": repo.complete(_owned_or_404(repo, workout_id, current.id))}

@router.delete("/{workout_id}", response_model=SuccessResponse)
def delete_workout(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    repo = WorkoutRepository(db)
    repo.delete(_owned_or_404(repo, workout_id, current.id))
    return {"success": True}
