"""Async client for the LiftLog API with an optimistic, rollback-able cache."""
from liftlog.client.api import ApiError, ApiUnavailable, ClientError, LiftLogClient
from liftlog.client.cache import CacheEntry, OptimisticCache, Snapshot
from liftlog.client.mutations import (
    MutationOutcome,
    MutationState,
    OptimisticMutation,
    WorkoutMutations,
    workout_key,
)

__all__ = [
    "ApiError",
    "ApiUnavailable",
    "ClientError",
    "LiftLogClient",
    "CacheEntry",
    "OptimisticCache",
    "Snapshot",
    "MutationOutcome",
    "MutationState",
    "OptimisticMutation",
    "WorkoutMutations",
    "workout_key",
]
