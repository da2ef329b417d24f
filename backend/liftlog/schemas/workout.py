from typing import Annotated
from datetime import datetime
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StringConstraints
from liftlog.schemas.base import CamelRead
from liftlog.schemas.exercise import ExerciseRead
from liftlog.schemas.workout_set import SetRead

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
NotesStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]

class WorkoutStart(BaseModel):
    name: NameStr
    notes: NotesStr | None = None

class ExerciseAdd(BaseModel):
    model_config = ConfigDict(extra="forbid")
    exercise_id: int = Field(validation_alias=AliasChoices("exerciseId", "exercise_id"))

class WorkoutExerciseRead(CamelRead):
    id: int
    order: int
    rest_time: int | None = None
    notes: str | None = None
    exercise: ExerciseRead
    sets: list[SetRead]

class WorkoutRead(CamelRead):
    id: int
    name: str
    started_at: datetime
    completed_at: datetime | None = None
    duration: int | None = None
    notes: str | None = None
    exercises: list[WorkoutExerciseRead]

class WorkoutResponse(BaseModel):
    workout: WorkoutRead

class WorkoutExerciseResponse(BaseModel):
    exercise: WorkoutExerciseRead

class WorkoutsPage(BaseModel):
    workouts: list[WorkoutRead]
    total: int
    page: int
    totalPages: int

class WorkoutSummary(BaseModel):
    totalSets: int
    completedSets: int
    totalVolume: float
    prCount: int
    duration: int | None = None
    durationLabel: str | None = None
