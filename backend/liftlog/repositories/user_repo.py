# liftlog/repositories/user_repo.py
from __future__ import annotations
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from liftlog.models import User
from liftlog.repositories.base import BaseRepository

class UserRepository(BaseRepository[User]):
    model = User

    # READS
    def get(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_external_id(self, external_id: str) -> Optional[User]:
        stmt = select(User).where(User.external_id == external_id)
        return self.db.execute(stmt).scalar_one_or_none()

    # WRITES
    def upsert(self, external_id: str, *, email: str | None = None, name: str | None = None) -> User:
        """Create on first sign-in, otherwise refresh profile fields that were sent."""
        user = self.get_by_external_id(external_id)
        if user is None:
            user = User(external_id=external_id, email=email, name=name)
            try:
                self.db.add(user)
                self.db.commit()
            except IntegrityError:
                # Two first requests raced; the other one created the row
                self.db.rollback()
                user = self.get_by_external_id(external_id)
                if user is None:
                    raise
            self.db.refresh(user)
            return user

        if email is not None:
            user.email = email
        if name is not None:
            user.name = name
        self.db.commit()
        self.db.refresh(user)
        return user
