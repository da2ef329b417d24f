from __future__ import annotations
from dataclasses import dataclass
from liftlog.models import Workout

@dataclass(slots=True)
class WorkoutStats:
    total_sets: int = 0
    completed_sets: int = 0
    total_volume: float = 0.0
    pr_count: int = 0

def calculate_workout_stats(workout: Workout) -> WorkoutStats:
    stats = WorkoutStats()
    for we in workout.exercises:
        for s in we.sets:
            stats.total_sets += 1
            if not s.completed:
                continue
            stats.completed_sets += 1
            if s.weight and s.reps:
                stats.total_volume += s.weight * s.reps
            if s.is_pr:
                stats.pr_count += 1
    return stats

def format_duration(seconds: int) -> str:
    """1h 5m / 3m 20s / 45s"""
    hours, rem = divmod(int(seconds), 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"
