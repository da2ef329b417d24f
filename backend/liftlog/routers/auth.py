from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from liftlog.db import get_db
from liftlog.models import User
from liftlog.schemas.user import UserSync, UserResponse
from liftlog.deps.auth import get_current_user, get_token_subject
from liftlog.repositories.user_repo import UserRepository

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/sync", response_model=UserResponse)
def sync_user(
    payload: UserSync | None = None,
    db: Session = Depends(get_db),
    sub: str = Depends(get_token_subject),
):
    payload = payload or UserSync()
    user = UserRepository(db).upsert(sub, email=payload.email, name=payload.name)
    return {"user": user}

@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return {"user": current_user}
