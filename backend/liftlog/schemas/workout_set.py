from typing import Annotated
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictBool
from liftlog.schemas.base import CamelRead

# strict: "100" is not a weight, 5.5 is not a rep count, 1 is not a bool
Weight = Annotated[float, Field(ge=0, le=10000, strict=True)]
Reps = Annotated[int, Field(ge=0, le=1000, strict=True)]

def _flag(snake: str, camel: str):
    return Field(default=None, validation_alias=AliasChoices(snake, camel))

class SetPatch(BaseModel):
    """Partial set update. Absent fields stay untouched; null is not a value."""
    model_config = ConfigDict(extra="forbid")

    weight: Weight = None
    reps: Reps = None
    completed: StrictBool = None
    is_warmup: StrictBool = _flag("is_warmup", "isWarmup")
    is_dropset: StrictBool = _flag("is_dropset", "isDropset")
    is_failure: StrictBool = _flag("is_failure", "isFailure")

class SetRead(CamelRead):
    id: int
    order: int
    weight: float | None = None
    reps: int | None = None
    duration: int | None = None
    distance: float | None = None
    is_warmup: bool
    is_dropset: bool
    is_failure: bool
    is_pr: bool = Field(serialization_alias="isPR")
    completed: bool

class SetUpdateResponse(BaseModel):
    set: SetRead
    isPR: bool

class SetResponse(BaseModel):
    set: SetRead

class SuccessResponse(BaseModel):
    success: bool = True
