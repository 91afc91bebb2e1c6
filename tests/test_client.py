import asyncio
import copy
import json

import httpx
import pytest

from placenet.client.api import APPLICATIONS_KEY, METRICS_KEY, PUBLIC_JOBS_KEY, RECRUITER_JOBS_KEY, PlacenetClient
from placenet.client.cache import QueryCache
from placenet.client.mutations import OptimisticMutation
from placenet.core.errors import Conflict, NotFound, TransportError

APPLICATIONS = [
    {"id": "a1", "status": "applied", "student": {"firstName": "Asha"}},
    {"id": "a2", "status": "screening", "student": {"firstName": "Ravi"}},
]
JOBS = [{"id": "j1", "title": "Backend"}, {"id": "j2", "title": "Frontend"}]


class Toasts:
    def __init__(self):
        self.seen = []

    def __call__(self, title, description, variant="default"):
        self.seen.append((title, variant))


def make_client(handler, cache=None, timeout=30.0, notify=None):
    return PlacenetClient(
        "http://test",
        token="t0ken",
        cache=cache,
        timeout=timeout,
        notify=notify or Toasts(),
        transport=httpx.MockTransport(handler),
    )


# ------------------------------------------------------------
# QueryCache
# ------------------------------------------------------------

def test_fetch_loads_once_until_invalidated():
    cache = QueryCache()
    loads = []

    async def loader():
        loads.append(1)
        return len(loads)

    async def scenario():
        assert await cache.fetch("k", loader) == 1
        assert await cache.fetch("k", loader) == 1
        cache.invalidate("k")
        assert cache.is_stale("k")
        assert await cache.fetch("k", loader) == 2

    asyncio.run(scenario())
    assert len(loads) == 2


def test_write_during_fetch_discards_the_older_result():
    cache = QueryCache()
    cache.set("k", ["old"])
    cache.invalidate("k")

    async def slow_loader():
        await asyncio.sleep(0.01)
        return ["pre-mutation"]

    async def scenario():
        pending = asyncio.create_task(cache.fetch("k", slow_loader))
        await asyncio.sleep(0)
        cache.update("k", lambda value: ["optimistic"])
        return await pending

    assert asyncio.run(scenario()) == ["optimistic"]
    assert cache.get("k") == ["optimistic"]


def test_snapshot_restore_is_exact():
    cache = QueryCache()
    cache.set("k", copy.deepcopy(APPLICATIONS))
    snapshot = cache.snapshot("k")

    cache.get("k")[0]["student"]["firstName"] = "mutated in place"
    cache.update("k", lambda apps: apps[1:])
    cache.restore(snapshot)

    assert cache.get("k") == APPLICATIONS


def test_restore_of_missing_key_removes_it():
    cache = QueryCache()
    snapshot = cache.snapshot("k")
    cache.set("k", [1])
    cache.restore(snapshot)
    assert not cache.has("k")


# ------------------------------------------------------------
# OptimisticMutation
# ------------------------------------------------------------

def test_failure_rolls_back_to_snapshot():
    cache = QueryCache()
    cache.set(APPLICATIONS_KEY, copy.deepcopy(APPLICATIONS))
    toasts = Toasts()
    observed = []

    async def call():
        observed.append(copy.deepcopy(cache.get(APPLICATIONS_KEY)))
        raise TransportError("connection reset")

    mutation = OptimisticMutation(
        cache, APPLICATIONS_KEY,
        apply=lambda apps: [{**a, "status": "interview"} if a["id"] == "a2" else a for a in apps],
        call=call,
        secondary_keys=[METRICS_KEY],
        notify=toasts,
        failure_message=("Update Failed", "Failed to update application status."),
    )
    with pytest.raises(TransportError):
        asyncio.run(mutation.run())

    # optimistic value was visible while the call was in flight
    assert observed[0][1]["status"] == "interview"
    assert cache.get(APPLICATIONS_KEY) == APPLICATIONS
    assert toasts.seen == [("Update Failed", "destructive")]
    assert cache.is_stale(APPLICATIONS_KEY)


def test_timeout_counts_as_failure():
    cache = QueryCache()
    cache.set(RECRUITER_JOBS_KEY, copy.deepcopy(JOBS))

    async def hang():
        await asyncio.sleep(5)

    mutation = OptimisticMutation(
        cache, RECRUITER_JOBS_KEY,
        apply=lambda jobs: [j for j in jobs if j["id"] != "j1"],
        call=hang,
        timeout=0.05,
        notify=Toasts(),
    )
    with pytest.raises(TransportError):
        asyncio.run(mutation.run())
    assert cache.get(RECRUITER_JOBS_KEY) == JOBS


def test_success_keeps_optimistic_value_and_invalidates_secondary():
    cache = QueryCache()
    cache.set(APPLICATIONS_KEY, copy.deepcopy(APPLICATIONS))
    cache.set(METRICS_KEY, {"totalApplications": 2})

    async def call():
        return {"id": "a1", "status": "screening"}

    result = asyncio.run(OptimisticMutation(
        cache, APPLICATIONS_KEY,
        apply=lambda apps: [{**a, "status": "screening"} if a["id"] == "a1" else a for a in apps],
        call=call,
        secondary_keys=[METRICS_KEY],
        notify=Toasts(),
    ).run())

    assert result["status"] == "screening"
    assert cache.get(APPLICATIONS_KEY)[0]["status"] == "screening"
    assert cache.is_stale(METRICS_KEY)
    # settle marks the primary stale but does not reload it
    assert cache.is_stale(APPLICATIONS_KEY)


def test_not_found_can_be_idempotent_success():
    cache = QueryCache()
    cache.set(RECRUITER_JOBS_KEY, copy.deepcopy(JOBS))
    toasts = Toasts()

    async def call():
        raise NotFound("Job not found")

    asyncio.run(OptimisticMutation(
        cache, RECRUITER_JOBS_KEY,
        apply=lambda jobs: [j for j in jobs if j["id"] != "j1"],
        call=call,
        notify=toasts,
        success_message=("Job Deleted", "gone"),
        not_found_is_success=True,
    ).run())

    assert [j["id"] for j in cache.get(RECRUITER_JOBS_KEY)] == ["j2"]
    assert toasts.seen == [("Job Deleted", "default")]


def test_refetch_during_call_keeps_optimistic_value():
    cache = QueryCache()
    cache.set(APPLICATIONS_KEY, copy.deepcopy(APPLICATIONS))
    cache.invalidate(APPLICATIONS_KEY)
    loads = []

    async def load_old_list():
        loads.append(1)
        return copy.deepcopy(APPLICATIONS)

    async def call():
        during = await cache.fetch(APPLICATIONS_KEY, load_old_list)
        return during[1]["status"]

    status_during_call = asyncio.run(OptimisticMutation(
        cache, APPLICATIONS_KEY,
        apply=lambda apps: [{**a, "status": "interview"} if a["id"] == "a2" else a for a in apps],
        call=call,
        notify=Toasts(),
    ).run())

    assert status_during_call == "interview"
    assert loads == []
    assert cache.get(APPLICATIONS_KEY)[1]["status"] == "interview"
    assert not cache.is_pending(APPLICATIONS_KEY)


def test_back_to_back_mutations_survive_refetch():
    cache = QueryCache()
    cache.set(APPLICATIONS_KEY, copy.deepcopy(APPLICATIONS))

    async def load_old_list():
        return copy.deepcopy(APPLICATIONS)

    def move(app_id, status):
        async def call():
            await cache.fetch(APPLICATIONS_KEY, load_old_list)
            return {"id": app_id, "status": status}

        return OptimisticMutation(
            cache, APPLICATIONS_KEY,
            apply=lambda apps: [{**a, "status": status} if a["id"] == app_id else a for a in apps],
            call=call,
            notify=Toasts(),
        )

    async def scenario():
        await move("a1", "screening").run()
        # the first settle left the key stale
        await move("a2", "interview").run()

    asyncio.run(scenario())
    assert [a["status"] for a in cache.get(APPLICATIONS_KEY)] == ["screening", "interview"]


def test_fetch_landing_after_settle_is_discarded():
    cache = QueryCache()
    cache.set(APPLICATIONS_KEY, copy.deepcopy(APPLICATIONS))
    cache.invalidate(APPLICATIONS_KEY)

    async def slow_old_list():
        await asyncio.sleep(0.05)
        return copy.deepcopy(APPLICATIONS)

    async def call():
        return {"id": "a1", "status": "rejected"}

    async def scenario():
        pending = asyncio.create_task(cache.fetch(APPLICATIONS_KEY, slow_old_list))
        await asyncio.sleep(0)
        await OptimisticMutation(
            cache, APPLICATIONS_KEY,
            apply=lambda apps: [{**a, "status": "rejected"} if a["id"] == "a1" else a for a in apps],
            call=call,
            notify=Toasts(),
        ).run()
        await pending

    asyncio.run(scenario())
    assert cache.get(APPLICATIONS_KEY)[0]["status"] == "rejected"


# ------------------------------------------------------------
# PlacenetClient over a mock transport
# ------------------------------------------------------------

def test_move_candidate_sends_status_and_skips_primary_refetch():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append((request.method, request.url.path))
        if request.url.path == APPLICATIONS_KEY:
            return httpx.Response(200, json=APPLICATIONS)
        if request.method == "PUT":
            assert request.headers["Authorization"] == "Bearer t0ken"
            assert json.loads(request.content) == {"status": "interview", "version": 3}
            return httpx.Response(200, json={"id": "a2", "status": "interview", "updatedAt": "x", "version": 4})
        return httpx.Response(404, json={"detail": "nope"})

    async def scenario():
        async with make_client(handler) as client:
            await client.list_recruiter_applications()
            await client.move_candidate("a2", "interview", version=3)
            return client.cache.get(APPLICATIONS_KEY)

    cached = asyncio.run(scenario())

    assert [a["status"] for a in cached] == ["applied", "interview"]
    assert requests == [("GET", APPLICATIONS_KEY), ("PUT", "/api/applications/a2/status")]


def test_move_candidate_conflict_rolls_back():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=APPLICATIONS)
        return httpx.Response(409, json={"detail": "modified by someone else"})

    async def scenario():
        async with make_client(handler) as client:
            await client.list_recruiter_applications()
            with pytest.raises(Conflict) as exc:
                await client.move_candidate("a1", "screening", version=1)
            return exc.value, client.cache.get(APPLICATIONS_KEY)

    error, cached = asyncio.run(scenario())
    assert error.message == "modified by someone else"
    assert cached == APPLICATIONS


def test_remove_job_treats_404_as_done():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=JOBS)
        return httpx.Response(404, json={"detail": "Job not found"})

    async def scenario():
        async with make_client(handler) as client:
            client.cache.set(PUBLIC_JOBS_KEY, JOBS)
            await client.list_recruiter_jobs()
            await client.remove_job("j1")
            return client.cache

    cache = asyncio.run(scenario())
    assert [j["id"] for j in cache.get(RECRUITER_JOBS_KEY)] == ["j2"]
    assert cache.is_stale(PUBLIC_JOBS_KEY)


def test_network_error_becomes_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async def scenario():
        async with make_client(handler) as client:
            await client.fetch_metrics()

    with pytest.raises(TransportError):
        asyncio.run(scenario())
