from typing import Annotated, Literal, get_args
from datetime import datetime
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StringConstraints
from liftlog.schemas.base import CamelRead
from liftlog.schemas.workout_set import SetRead

MuscleGroup = Literal["chest", "back", "shoulders", "arms", "legs", "core", "cardio"]
Equipment = Literal["barbell", "dumbbell", "machine", "cable", "bodyweight", "other"]

MUSCLE_GROUPS: tuple[str, ...] = get_args(MuscleGroup)
EQUIPMENT: tuple[str, ...] = get_args(Equipment)

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]

class ExerciseCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: NameStr
    muscle_group: MuscleGroup = Field(validation_alias=AliasChoices("muscleGroup", "muscle_group"))
    equipment: Equipment
    instructions: str | None = Field(default=None, max_length=2000)

class ExerciseRead(CamelRead):
    id: int
    name: str
    muscle_group: str
    equipment: str
    instructions: str | None = None
    is_custom: bool

class ExercisesResponse(BaseModel):
    exercises: list[ExerciseRead]

class ExerciseResponse(BaseModel):
    exercise: ExerciseRead

class RecordRead(CamelRead):
    id: int
    weight: float
    reps: int
    estimated_1rm: float | None = Field(default=None, serialization_alias="estimated1RM")
    achieved_at: datetime

class RecordsResponse(BaseModel):
    records: list[RecordRead]
    total: int

class HistoryWorkout(CamelRead):
    id: int
    name: str
    started_at: datetime

class HistoryEntry(CamelRead):
    """One past appearance of the exercise: its workout and the sets actually done."""
    id: int
    workout: HistoryWorkout
    sets: list[SetRead]

class HistoryResponse(BaseModel):
    history: list[HistoryEntry]

class MetaOption(BaseModel):
    id: str
    name: str
    icon: str

class MuscleGroupsResponse(BaseModel):
    muscleGroups: list[MetaOption]

class EquipmentResponse(BaseModel):
    equipment: list[MetaOption]
