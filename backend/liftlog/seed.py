"""Seed the built-in exercise catalog. Safe to run repeatedly.

    python -m liftlog.seed
"""
import logging

from liftlog.db import SessionLocal
from liftlog.repositories.exercise_repo import ExerciseRepository

log = logging.getLogger(__name__)

CATALOG = [
    ("Bench Press", "chest", "barbell"),
    ("Incline Dumbbell Press", "chest", "dumbbell"),
    ("Cable Fly", "chest", "cable"),
    ("Deadlift", "back", "barbell"),
    ("Barbell Row", "back", "barbell"),
    ("Pull Up", "back", "bodyweight"),
    ("Lat Pulldown", "back", "cable"),
    ("Overhead Press", "shoulders", "barbell"),
    ("Lateral Raise", "shoulders", "dumbbell"),
    ("Barbell Curl", "arms", "barbell"),
    ("Tricep Pushdown", "arms", "cable"),
    ("Squat", "legs", "barbell"),
    ("Leg Press", "legs", "machine"),
    ("Romanian Deadlift", "legs", "barbell"),
    ("Plank", "core", "bodyweight"),
    ("Rowing Machine", "cardio", "machine"),
]

def seed_exercises(db) -> int:
    repo = ExerciseRepository(db)
    created = 0
    for name, muscle_group, equipment in CATALOG:
        if repo.get_by_name(name):
            continue
        repo.create(name=name, muscle_group=muscle_group, equipment=equipment)
        created += 1
    return created

def main() -> None:
    logging.basicConfig(level=logging.INFO)
    with SessionLocal() as db:
        created = seed_exercises(db)
    log.info("seeded %d exercises (%d in catalog)", created, len(CATALOG))

if __name__ == "__main__":
    main()
