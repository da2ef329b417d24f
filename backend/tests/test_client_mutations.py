import asyncio
import copy

import httpx
import pytest

from liftlog.client import transforms
from liftlog.client import (
    ApiError,
    ApiUnavailable,
    LiftLogClient,
    MutationState,
    OptimisticCache,
    WorkoutMutations,
    workout_key,
)
from liftlog.main import app

WORKOUT = {
    "workout": {
        "id": 7,
        "name": "Pull",
        "exercises": [
            {"id": 70, "order": 0, "sets": [
                {"id": 700, "order": 0, "weight": 50.0, "reps": 10, "isWarmup": False, "isDropset": False,
                 "isFailure": False, "isPR": False, "completed": False},
            ]},
        ],
    }
}


def mock_client(handler):
    return LiftLogClient("http://api.test", token="t", transport=httpx.MockTransport(handler))


def seeded_cache():
    cache = OptimisticCache()
    cache.set(workout_key(7), copy.deepcopy(WORKOUT))
    return cache


@pytest.mark.asyncio
async def test_server_error_rolls_back_and_notifies():
    def handler(request):
        return httpx.Response(500, json={"error": "Failed to update set"})

    notes = []
    cache = seeded_cache()
    async with mock_client(handler) as client:
        m = WorkoutMutations(client, cache, notify=notes.append)
        outcome = await m.update_set(7, 700, {"completed": True}).run()

    assert outcome.state is MutationState.ROLLED_BACK
    assert isinstance(outcome.error, ApiError)
    assert outcome.error.status_code == 500
    assert cache.get(workout_key(7)) == WORKOUT
    assert notes == ["Couldn't update set: Failed to update set"]


@pytest.mark.asyncio
async def test_network_failure_rolls_back_add_and_delete():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    cache = seeded_cache()
    async with mock_client(handler) as client:
        m = WorkoutMutations(client, cache, notify=lambda msg: None)
        added = await m.add_set(7, 70).run()
        deleted = await m.delete_set(7, 700).run()

    for outcome in (added, deleted):
        assert outcome.state is MutationState.ROLLED_BACK
        assert isinstance(outcome.error, ApiUnavailable)
    assert cache.get(workout_key(7)) == WORKOUT


@pytest.mark.asyncio
async def test_optimistic_state_is_visible_before_response():
    gate = asyncio.Event()

    async def handler(request):
        await gate.wait()
        return httpx.Response(200, json={"set": {**WORKOUT["workout"]["exercises"][0]["sets"][0],
                                                 "completed": True, "isPR": True}, "isPR": True})

    cache = seeded_cache()
    async with mock_client(handler) as client:
        mutation = WorkoutMutations(client, cache).update_set(7, 700, {"completed": True})
        task = mutation.dispatch()

        assert mutation.state is MutationState.OPTIMISTIC
        s = cache.get(workout_key(7))["workout"]["exercises"][0]["sets"][0]
        assert s["completed"] is True
        assert s["isPR"] is False

        gate.set()
        outcome = await task

    assert outcome.ok
    assert cache.get(workout_key(7))["workout"]["exercises"][0]["sets"][0]["isPR"] is True


@pytest.mark.asyncio
async def test_mutation_runs_once():
    cache = seeded_cache()
    async with mock_client(lambda r: httpx.Response(200, json={"success": True})) as client:
        mutation = WorkoutMutations(client, cache).delete_set(7, 700)
        await mutation.run()
        with pytest.raises(RuntimeError):
            mutation.begin()


@pytest.mark.asyncio
async def test_against_real_app(auth_headers):
    h = auth_headers()
    token = h["Authorization"].split()[1]
    transport = httpx.ASGITransport(app=app)

    async with LiftLogClient("http://testserver", token=token, transport=transport) as client:
        workout = (await client.start_workout("Back"))["workout"]
        exercises = await client.list_exercises("deadlift")
        deadlift = next(e["id"] for e in exercises["exercises"] if e["name"] == "Deadlift")
        we = (await client.add_exercise(workout["id"], deadlift))["exercise"]

        cache = OptimisticCache()
        m = WorkoutMutations(client, cache)
        await m.load(workout["id"])
        key = workout_key(workout["id"])

        added = await m.add_set(workout["id"], we["id"]).run()
        assert added.ok
        new_id = added.result["set"]["id"]
        sets = cache.get(key)["workout"]["exercises"][0]["sets"]
        assert new_id in [s["id"] for s in sets]
        assert not any(isinstance(s["id"], str) for s in sets)

        updated = await m.update_set(workout["id"], new_id, {"weight": 100, "reps": 5, "completed": True}).run()
        assert updated.result["isPR"] is True

        missing = await m.delete_set(workout["id"], 987654).run()
        assert missing.state is MutationState.ROLLED_BACK
        assert missing.error.status_code == 404

        await cache.wait_refetches(key)
        server = await client.get_workout(workout["id"])
        assert cache.get(key) == server
        assert server["workout"]["exercises"][0]["sets"][-1]["isPR"] is True


def two_set_workout():
    w = copy.deepcopy(WORKOUT)
    first = w["workout"]["exercises"][0]["sets"][0]
    w["workout"]["exercises"][0]["sets"].append({**first, "id": 701, "order": 1})
    return w


def gated_handler(gates, responses):
    async def handler(request):
        set_id = int(request.url.path.rsplit("/", 1)[-1])
        await gates[set_id].wait()
        status_code, body = responses[set_id]
        return httpx.Response(status_code, json=body)
    return handler


@pytest.mark.asyncio
@pytest.mark.parametrize("first_to_fail", [700, 701])
async def test_overlapping_failures_undo_only_their_own_write(first_to_fail):
    patches = {700: {"completed": True}, 701: {"weight": 99.0}}
    gates = {700: asyncio.Event(), 701: asyncio.Event()}
    failed = (500, {"error": "Failed to update set"})
    key = workout_key(7)
    cache = OptimisticCache()
    cache.set(key, two_set_workout())

    async with mock_client(gated_handler(gates, {700: failed, 701: failed})) as client:
        m = WorkoutMutations(client, cache, notify=lambda msg: None)
        tasks = {set_id: m.update_set(7, set_id, patch).dispatch() for set_id, patch in patches.items()}
        both = transforms.update_set(701, patches[701])(transforms.update_set(700, patches[700])(two_set_workout()))
        assert cache.get(key) == both

        gates[first_to_fail].set()
        assert (await tasks[first_to_fail]).state is MutationState.ROLLED_BACK
        other = 701 if first_to_fail == 700 else 700
        assert cache.get(key) == transforms.update_set(other, patches[other])(two_set_workout())

        gates[other].set()
        assert (await tasks[other]).state is MutationState.ROLLED_BACK

    assert cache.get(key) == two_set_workout()
    assert cache.pending(key) == 0


@pytest.mark.asyncio
async def test_rollback_keeps_an_earlier_confirmed_write():
    gates = {700: asyncio.Event(), 701: asyncio.Event()}
    saved = {**two_set_workout()["workout"]["exercises"][0]["sets"][0], "completed": True, "isPR": True}
    responses = {
        700: (200, {"set": saved, "isPR": True}),
        701: (500, {"error": "Failed to update set"}),
    }
    key = workout_key(7)
    cache = OptimisticCache()
    cache.set(key, two_set_workout())

    async with mock_client(gated_handler(gates, responses)) as client:
        m = WorkoutMutations(client, cache, notify=lambda msg: None)
        a = m.update_set(7, 700, {"completed": True}).dispatch()
        b = m.update_set(7, 701, {"weight": 99.0}).dispatch()
        gates[700].set()
        assert (await a).ok
        gates[701].set()
        assert (await b).state is MutationState.ROLLED_BACK

    sets = cache.get(key)["workout"]["exercises"][0]["sets"]
    assert sets[0] == saved
    assert sets[1] == two_set_workout()["workout"]["exercises"][0]["sets"][1]


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [httpx.TooManyRedirects, httpx.DecodingError])
async def test_any_request_error_rolls_back(error):
    def handler(request):
        raise error("request went nowhere", request=request)

    notes = []
    cache = seeded_cache()
    async with mock_client(handler) as client:
        outcome = await WorkoutMutations(client, cache, notify=notes.append).update_set(
            7, 700, {"completed": True}
        ).run()

    assert outcome.state is MutationState.ROLLED_BACK
    assert isinstance(outcome.error, ApiUnavailable)
    assert cache.get(workout_key(7)) == WORKOUT
    assert len(notes) == 1
