import asyncio
import json

import pytest

from achievement_api.live_clients import ClientChannel, LiveClientRegistry, format_sse
from achievement_api.router.api.events import stream_events
from achievement_api.router.api.logics.progress_logic import publish_progress


def test_missing_client_id_is_rejected(client):
    response = client.get("/api/achievements-events")
    assert response.status_code == 400
    assert response.json() == {"error": "Client ID is required"}
    assert len(client.app.state.live_clients) == 0


def test_blank_client_id_is_rejected(client):
    response = client.get("/api/achievements-events", params={"clientId": "  "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_stream_yields_frames_and_releases_the_slot():
    registry = LiveClientRegistry()
    channel = ClientChannel("user-1")
    channel.write(format_sse("connection established"))
    channel.write(format_sse("user-1"))

    stream = stream_events(registry, "user-1", channel)
    assert "user-1" not in registry
    assert await stream.__anext__() == "data: connection established\n\n"
    assert registry.get("user-1") is channel
    assert await stream.__anext__() == "data: user-1\n\n"

    registry.send_to("user-1", "progress", {"status": "FINISHED"})
    assert await stream.__anext__() == 'event: progress\ndata: {"status": "FINISHED"}\n\n'

    # client goes away
    await stream.aclose()
    assert "user-1" not in registry


@pytest.mark.asyncio
async def test_stream_that_never_starts_holds_no_slot():
    registry = LiveClientRegistry()
    channel = ClientChannel("user-1")
    channel.write(format_sse("connection established"))

    stream = stream_events(registry, "user-1", channel)
    await stream.aclose()

    assert len(registry) == 0
    assert registry.send_to("user-1", "progress", {}) is False


@pytest.mark.asyncio
async def test_reconnect_ends_the_previous_stream():
    registry = LiveClientRegistry()
    old = ClientChannel("user-1")
    old.write(format_sse("connection established"))
    old_stream = stream_events(registry, "user-1", old)
    await old_stream.__anext__()

    new = ClientChannel("user-1")
    registry.register("user-1", new)

    with pytest.raises(StopAsyncIteration):
        await asyncio.wait_for(old_stream.__anext__(), timeout=1)
    assert registry.get("user-1") is new


def test_publish_progress_sends_progress_and_work_events():
    registry = LiveClientRegistry()
    channel = ClientChannel("user-1")
    registry.register("user-1", channel)

    record = {"id": "p1", "userId": "user-1", "status": "INPROGRESS", "currentStep": 3}
    assert publish_progress(registry, "user-1", record) is True

    frames = [channel._queue.get_nowait() for _ in range(channel._queue.qsize())]
    assert frames[0].startswith("event: progress\n")
    assert json.loads(frames[0].split("data: ", 1)[1]) == record
    assert frames[1] == "event: work\ndata: work\n\n"


def test_publish_progress_without_listener_does_nothing():
    assert publish_progress(LiveClientRegistry(), "user-1", {"id": "p1"}) is False
