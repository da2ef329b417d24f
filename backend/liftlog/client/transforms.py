"""Optimistic transforms over a cached workout view-model.

Each factory returns a pure function old -> new for the cache entry shaped
like the GET /workouts/{id} response: {"workout": {..., "exercises": [...]}}.
Missing data (nothing cached yet) passes through as None.
"""
from __future__ import annotations

import uuid
from typing import Any, Callable, Optional

from pydantic.alias_generators import to_camel

ViewModel = Optional[dict]
Transform = Callable[[ViewModel], ViewModel]


def _map_exercises(old: dict, fn: Callable[[dict], dict]) -> dict:
    workout = old["workout"]
    return {
        **old,
        "workout": {**workout, "exercises": [fn(ex) for ex in workout["exercises"]]},
    }


def _map_sets(old: dict, fn: Callable[[dict], Optional[dict]]) -> dict:
    def per_exercise(ex: dict) -> dict:
        sets = [s2 for s2 in (fn(s) for s in ex["sets"]) if s2 is not None]
        return {**ex, "sets": sets}
    return _map_exercises(old, per_exercise)


def temp_set_id() -> str:
    return f"temp-{uuid.uuid4().hex[:12]}"


def is_temp_id(set_id: Any) -> bool:
    return isinstance(set_id, str) and set_id.startswith("temp-")


def update_set(set_id: Any, patch: dict) -> Transform:
    """Merge patch into one set. Keys may be snake_case or camelCase, like the API accepts."""
    fields = {to_camel(k): v for k, v in patch.items()}

    def transform(old: ViewModel) -> ViewModel:
        if old is None:
            return None
        return _map_sets(old, lambda s: {**s, **fields} if s["id"] == set_id else s)
    return transform


def add_set(workout_exercise_id: Any, temp_id: Optional[str] = None) -> Transform:
    """Append a blank placeholder set; the server fills in real numbers."""
    temp_id = temp_id or temp_set_id()

    def transform(old: ViewModel) -> ViewModel:
        if old is None:
            return None

        def per_exercise(ex: dict) -> dict:
            if ex["id"] != workout_exercise_id:
                return ex
            placeholder = {
                "id": temp_id,
                "order": len(ex["sets"]),
                "weight": None,
                "reps": None,
                "isWarmup": False,
                "isDropset": False,
                "isFailure": False,
                "isPR": False,
                "completed": False,
            }
            return {**ex, "sets": [*ex["sets"], placeholder]}
        return _map_exercises(old, per_exercise)
    return transform


def delete_set(set_id: Any) -> Transform:
    def transform(old: ViewModel) -> ViewModel:
        if old is None:
            return None
        return _map_sets(old, lambda s: None if s["id"] == set_id else s)
    return transform


def replace_set(set_id: Any, server_set: dict) -> Transform:
    """Swap a set (optimistic or temp-id) for the server's copy."""
    def transform(old: ViewModel) -> ViewModel:
        if old is None:
            return None

        def swap(s: dict) -> Optional[dict]:
            if s["id"] == set_id:
                return server_set
            # a refetch may already have brought the server copy in
            if s["id"] == server_set["id"]:
                return None
            return s
        return _map_sets(old, swap)
    return transform
