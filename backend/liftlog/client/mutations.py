"""Optimistic mutations: apply locally first, then reconcile or roll back.

    IDLE --begin()--> OPTIMISTIC --settle()--> RECONCILED | ROLLED_BACK

begin() is synchronous: it cancels refetches for the key, snapshots it and
applies the transform before any network I/O. settle() awaits the request;
on success the write is confirmed and the reconcile hook folds the server's
answer into the cache, on any ClientError only this mutation's write is
undone (others still in flight on the key stay visible) and the notifier
is told. Either way the key is invalidated so the next refetch brings the
cache back in line with the server.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Hashable, Optional

from liftlog.client import transforms
from liftlog.client.api import ClientError, LiftLogClient
from liftlog.client.cache import OptimisticCache, Snapshot

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]
Reconcile = Callable[[OptimisticCache, Hashable, Any], None]


class MutationState(str, Enum):
    IDLE = "idle"
    OPTIMISTIC = "optimistic"
    RECONCILED = "reconciled"
    ROLLED_BACK = "rolled_back"


@dataclass(slots=True)
class MutationOutcome:
    state: MutationState
    result: Any = None
    error: Optional[ClientError] = None

    @property
    def ok(self) -> bool:
        return self.state is MutationState.RECONCILED


def log_notifier(message: str) -> None:
    logger.warning(message)


def workout_key(workout_id: Any) -> tuple:
    return ("workout", workout_id)


class OptimisticMutation:
    def __init__(
        self,
        cache: OptimisticCache,
        key: Hashable,
        *,
        transform: transforms.Transform,
        request: Callable[[], Awaitable[Any]],
        reconcile: Optional[Reconcile] = None,
        notify: Optional[Notifier] = None,
        label: str = "save changes",
    ):
        self.cache = cache
        self.key = key
        self.transform = transform
        self.request = request
        self.reconcile = reconcile
        self.notify = notify or log_notifier
        self.label = label
        self.state = MutationState.IDLE
        self._snapshot: Optional[Snapshot] = None

    def begin(self) -> Snapshot:
        if self.state is not MutationState.IDLE:
            raise RuntimeError(f"mutation already {self.state.value}")
        self.cache.cancel_refetches(self.key)
        self._snapshot = self.cache.apply(self.key, self.transform)
        self.state = MutationState.OPTIMISTIC
        return self._snapshot

    async def settle(self) -> MutationOutcome:
        if self.state is not MutationState.OPTIMISTIC:
            raise RuntimeError("settle() before begin()")
        try:
            result = await self.request()
        except ClientError as e:
            self.cache.rollback(self._snapshot)
            self.state = MutationState.ROLLED_BACK
            logger.warning("rolled back %r after failed %s: %s", self.key, self.label, e)
            self.notify(f"Couldn't {self.label}: {e}")
            return MutationOutcome(self.state, error=e)
        finally:
            self.cache.invalidate(self.key)

        self.cache.confirm(self._snapshot)
        if self.reconcile is not None:
            self.reconcile(self.cache, self.key, result)
        self.state = MutationState.RECONCILED
        return MutationOutcome(self.state, result=result)

    async def run(self) -> MutationOutcome:
        self.begin()
        return await self.settle()

    def dispatch(self) -> "asyncio.Task[MutationOutcome]":
        """Apply now, finish in the background; needs a running loop."""
        self.begin()
        return asyncio.create_task(self.settle())


class WorkoutMutations:
    """Set mutations for one cached workout, keyed ("workout", id)."""

    def __init__(self, client: LiftLogClient, cache: OptimisticCache, notify: Optional[Notifier] = None):
        self.client = client
        self.cache = cache
        self.notify = notify

    async def load(self, workout_id: Any) -> dict:
        key = workout_key(workout_id)

        async def fetch() -> dict:
            return await self.client.get_workout(workout_id)

        self.cache.register_fetcher(key, fetch)
        data = await fetch()
        self.cache.commit(key, data)
        return data

    def _mutation(self, workout_id: Any, **kwargs) -> OptimisticMutation:
        return OptimisticMutation(self.cache, workout_key(workout_id), notify=self.notify, **kwargs)

    def update_set(self, workout_id: Any, set_id: Any, patch: dict) -> OptimisticMutation:
        def reconcile(cache: OptimisticCache, key: Hashable, result: dict) -> None:
            cache.update(key, transforms.replace_set(set_id, result["set"]))

        return self._mutation(
            workout_id,
            transform=transforms.update_set(set_id, patch),
            request=lambda: self.client.update_set(set_id, patch),
            reconcile=reconcile,
            label="update set",
        )

    def add_set(self, workout_id: Any, workout_exercise_id: Any) -> OptimisticMutation:
        temp_id = transforms.temp_set_id()

        def reconcile(cache: OptimisticCache, key: Hashable, result: dict) -> None:
            # server id replaces the placeholder's temp id
            cache.update(key, transforms.replace_set(temp_id, result["set"]))

        return self._mutation(
            workout_id,
            transform=transforms.add_set(workout_exercise_id, temp_id),
            request=lambda: self.client.add_set(workout_exercise_id),
            reconcile=reconcile,
            label="add set",
        )

    def delete_set(self, workout_id: Any, set_id: Any) -> OptimisticMutation:
        return self._mutation(
            workout_id,
            transform=transforms.delete_set(set_id),
            request=lambda: self.client.delete_set(set_id),
            label="delete set",
        )
