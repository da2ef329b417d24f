from liftlog.models.user import User
from liftlog.models.exercise import Exercise
from liftlog.models.workout import Workout, WorkoutExercise
from liftlog.models.workout_set import WorkoutSet
from liftlog.models.personal_record import PersonalRecord

__all__ = ["User", "Exercise", "Workout", "WorkoutExercise", "WorkoutSet", "PersonalRecord"]
