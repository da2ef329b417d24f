from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from liftlog.db import get_db
from liftlog.deps.auth import get_current_user
from liftlog.models import User
from liftlog.schemas.workout_set import SetPatch, SetResponse, SetUpdateResponse, SuccessResponse
from liftlog.services import set_mutations

router = APIRouter(prefix="/workouts", tags=["sets"])

@router.patch("/sets/{set_id}", response_model=SetUpdateResponse)
def update_set(
    set_id: int,
    payload: SetPatch,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    result = set_mutations.update_set(db, set_id, current.id, payload)
    return {"set": result.set, "isPR": result.is_pr}

@router.post("/exercises/{workout_exercise_id}/sets", response_model=SetResponse)
def add_set(
    workout_exercise_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    return {"set": set_mutations.add_set(db, workout_exercise_id, current.id)}

@router.delete("/sets/{set_id}", response_model=SuccessResponse)
def delete_set(
    set_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    set_mutations.delete_set(db, set_id, current.id)
    return {"success": True}
