import asyncio
import json
from typing import Any, AsyncIterator, Dict, Optional

from achievement_api.log import get_logger

log = get_logger(__name__)

HEARTBEAT_FRAME = "data: SSE heartbeat\n\n"


class ChannelClosedError(Exception):
    pass


def format_sse(data: Any, event: Optional[str] = None) -> str:
    """
    Builds one Server-Sent Events frame.

    Parameters:
        data (Any): Payload; anything that is not a string is JSON encoded.
        event (Optional[str]): Event name, omitted for plain `message` events.

    Returns:
        str: The frame, terminated by a blank line.
    """
    if not isinstance(data, str):
        data = json.dumps(data, ensure_ascii=False)
    lines = [f"event: {event}"] if event else []
    lines.extend(f"data: {line}" for line in data.split("\n"))
    return "\n".join(lines) + "\n\n"


class ClientChannel:
    """An open event stream, fed through a bounded queue of frames."""

    def __init__(self, client_id: str, max_pending: int = 100):
        self.client_id = client_id
        self.closed = False
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_pending)

    def write(self, frame: str) -> None:
        if self.closed:
            raise ChannelClosedError(f"channel for {self.client_id} is closed")
        try:
            self._queue.put_nowait(frame)
        except asyncio.QueueFull as e:
            raise ChannelClosedError(f"channel for {self.client_id} is not draining") from e

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        # wake the consumer; a full queue is drained before it sees `closed`
        try:
            self._queue.put_nowait(None)
        except asyncio.QueueFull:
            pass

    async def frames(self) -> AsyncIterator[str]:
        while True:
            if self.closed and self._queue.empty():
                return
            frame = await self._queue.get()
            if frame is None:
                return
            yield frame


class LiveClientRegistry:
    """
    Maps a client id (usually the user id) to its single open channel.

    Every method runs without awaiting, so a check and the update that follows
    it can't interleave with other request handlers on the event loop.
    """

    def __init__(self):
        self._channels: Dict[str, ClientChannel] = {}

    def __len__(self) -> int:
        return len(self._channels)

    def __contains__(self, client_id: str) -> bool:
        return client_id in self._channels

    def get(self, client_id: str) -> Optional[ClientChannel]:
        return self._channels.get(client_id)

    def register(self, client_id: str, channel: ClientChannel) -> None:
        previous = self._channels.pop(client_id, None)
        if previous is not None and previous is not channel:
            previous.close()
            log.info("Client %s reconnected, previous stream replaced", client_id)
        self._channels[client_id] = channel
        log.info("Client %s connected. Total clients: %d", client_id, len(self._channels))

    def unregister(self, client_id: str, channel: Optional[ClientChannel] = None) -> None:
        current = self._channels.get(client_id)
        if current is None or (channel is not None and current is not channel):
            return
        del self._channels[client_id]
        current.close()
        log.info("Client %s disconnected. Total clients: %d", client_id, len(self._channels))

    def _evict(self, client_id: str, channel: ClientChannel, error: Exception) -> None:
        log.warning("Dropping client %s after failed write: %s", client_id, error)
        self.unregister(client_id, channel)

    def send_to(self, client_id: str, event: str, payload: Any) -> bool:
        """
        Pushes a named event to one client.

        Returns:
            bool: True if the frame was queued, False if the client isn't
            connected or its channel was dead (and has been evicted).
        """
        channel = self._channels.get(client_id)
        if channel is None:
            return False
        try:
            channel.write(format_sse(payload, event))
        except ChannelClosedError as e:
            self._evict(client_id, channel, e)
            return False
        return True

    def broadcast_heartbeat(self) -> int:
        delivered = 0
        for client_id, channel in list(self._channels.items()):
            try:
                channel.write(HEARTBEAT_FRAME)
                delivered += 1
            except ChannelClosedError as e:
                self._evict(client_id, channel, e)
        return delivered

    def close_all(self) -> None:
        for client_id in list(self._channels):
            self.unregister(client_id)
