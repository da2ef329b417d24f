from typing import Annotated
from pydantic import BaseModel, EmailStr, StringConstraints
from datetime import datetime

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]

class UserSync(BaseModel):
    # Profile fields the identity provider may hand the app on sign-in
    email: EmailStr | None = None
    name: NameStr | None = None

class UserRead(BaseModel):
    id: int
    external_id: str
    email: str | None = None
    name: str | None = None
    created_at: datetime
    model_config = {"from_attributes": True}

class UserResponse(BaseModel):
    user: UserRead
