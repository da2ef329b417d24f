# liftlog/deps/auth.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose.exceptions import ExpiredSignatureError, JWTError

from liftlog.db import get_db
from liftlog.models import User
from liftlog.repositories.user_repo import UserRepository
from liftlog.security import decode_token

# Tokens come from the identity provider; this only wires Bearer auth into Swagger
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)

def _unauthorized(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def get_token_subject(token: str | None = Depends(oauth2_scheme)) -> str:
    if not token:
        raise _unauthorized()
    try:
        payload = decode_token(token)
    except ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except JWTError:
        raise _unauthorized()
    sub = payload.get("sub")
    if not sub:
        raise _unauthorized()
    return str(sub)

def get_current_user(
    db: Session = Depends(get_db),
    sub: str = Depends(get_token_subject),
) -> User:
    """Resolve the token subject to a synced user row."""
    user = UserRepository(db).get_by_external_id(sub)
    if not user:
        raise _unauthorized()
    return user
