from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from achievement_api.config import settings
from achievement_api.exceptions import ValidationException
from achievement_api.live_clients import ClientChannel, LiveClientRegistry, format_sse
from achievement_api.log import get_logger
from achievement_api.router.dependencies import get_live_clients

log = get_logger(__name__)

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Cache-Control",
    "X-Accel-Buffering": "no",    # nginx must not buffer the stream
}


async def stream_events(
    live_clients: LiveClientRegistry,
    client_id: str,
    channel: ClientChannel,
) -> AsyncIterator[str]:
    """
    Registers the channel, then yields its frames until it is closed or the
    client goes away. A disconnect cancels the generator; either way the
    channel is released. Registering here means a response that never starts
    never occupies a slot.
    """
    live_clients.register(client_id, channel)
    try:
        async for frame in channel.frames():
            yield frame
    finally:
        live_clients.unregister(client_id, channel)


@router.get("/achievements-events")
async def achievements_events(
    request: Request,
    client_id: Optional[str] = Query(None, alias="clientId", description="Id of the client, usually the user id"),
    live_clients: LiveClientRegistry = Depends(get_live_clients),
):
    """Server-Sent Events stream of progress updates for one client.

    Emits two greeting frames, a heartbeat every SSE_HEARTBEAT_INTERVAL
    seconds and a `progress` event whenever this client's progress changes.
    A second connection with the same clientId replaces the first.
    """
    log.info(f"SSE connection attempt from {request.client.host if request.client else '?'} with clientId {client_id}")
    if not client_id or not client_id.strip():
        raise ValidationException("Client ID is required")

    channel = ClientChannel(client_id, max_pending=settings.SSE_QUEUE_SIZE)
    channel.write(format_sse("connection established"))
    channel.write(format_sse(client_id))

    return StreamingResponse(
        stream_events(live_clients, client_id, channel),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
