import asyncio

import pytest

from achievement_api.live_clients import (
    HEARTBEAT_FRAME,
    ChannelClosedError,
    ClientChannel,
    LiveClientRegistry,
    format_sse,
)


def drain(channel: ClientChannel):
    frames = []
    while not channel._queue.empty():
        frames.append(channel._queue.get_nowait())
    return frames


def test_format_sse_named_event_with_json_payload():
    frame = format_sse({"status": "FINISHED"}, "progress")
    assert frame == 'event: progress\ndata: {"status": "FINISHED"}\n\n'


def test_format_sse_splits_multiline_data():
    assert format_sse("a\nb") == "data: a\ndata: b\n\n"


def test_second_registration_replaces_the_first():
    registry = LiveClientRegistry()
    first = ClientChannel("user-1")
    second = ClientChannel("user-1")
    registry.register("user-1", first)
    registry.register("user-1", second)

    assert registry.send_to("user-1", "progress", {"n": 1})
    assert len(registry) == 1
    assert first.closed
    assert [f for f in drain(first) if f is not None] == []
    assert drain(second) == [format_sse({"n": 1}, "progress")]


def test_send_to_unknown_client_is_a_noop():
    registry = LiveClientRegistry()
    assert registry.send_to("nobody", "progress", {}) is False


def test_failed_write_evicts_the_client():
    registry = LiveClientRegistry()
    channel = ClientChannel("user-1", max_pending=1)
    registry.register("user-1", channel)

    assert registry.send_to("user-1", "progress", {"n": 1})
    # the queue is full: the consumer is considered gone
    assert registry.send_to("user-1", "progress", {"n": 2}) is False
    assert "user-1" not in registry


def test_stale_stream_does_not_unregister_its_replacement():
    registry = LiveClientRegistry()
    old = ClientChannel("user-1")
    new = ClientChannel("user-1")
    registry.register("user-1", old)
    registry.register("user-1", new)

    registry.unregister("user-1", old)
    assert registry.get("user-1") is new

    registry.unregister("user-1", new)
    assert "user-1" not in registry
    assert new.closed


def test_heartbeat_reaches_everyone_and_drops_dead_channels():
    registry = LiveClientRegistry()
    alive = ClientChannel("alive")
    dead = ClientChannel("dead")
    registry.register("alive", alive)
    registry.register("dead", dead)
    dead.closed = True

    assert registry.broadcast_heartbeat() == 1
    assert drain(alive) == [HEARTBEAT_FRAME]
    assert "dead" not in registry
    assert "alive" in registry


def test_closed_channel_rejects_writes():
    channel = ClientChannel("user-1")
    channel.close()
    with pytest.raises(ChannelClosedError):
        channel.write("data: x\n\n")


@pytest.mark.asyncio
async def test_frames_are_yielded_until_close():
    channel = ClientChannel("user-1")
    channel.write("data: one\n\n")
    channel.write("data: two\n\n")

    received = []

    async def consume():
        async for frame in channel.frames():
            received.append(frame)

    task = asyncio.create_task(consume())
    await asyncio.sleep(0)
    channel.close()
    await asyncio.wait_for(task, timeout=1)

    assert received == ["data: one\n\n", "data: two\n\n"]


@pytest.mark.asyncio
async def test_heartbeat_task_keeps_writing():
    from achievement_api.router.background.heartbeat_task import run_heartbeat

    registry = LiveClientRegistry()
    channel = ClientChannel("user-1")
    registry.register("user-1", channel)

    task = asyncio.create_task(run_heartbeat(registry, interval=0.01))
    await asyncio.sleep(0.05)
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)

    frames = drain(channel)
    assert len(frames) >= 2
    assert all(frame == HEARTBEAT_FRAME for frame in frames)
