import asyncio

from achievement_api.live_clients import LiveClientRegistry
from achievement_api.log import get_logger

log = get_logger(__name__)


#################
### heartbeat ###
#################

async def run_heartbeat(live_clients: LiveClientRegistry, interval: float = 30):
    """
    Writes a keep-alive frame to every open event stream every `interval`
    seconds until cancelled. A failing round is logged and the loop goes on.
    """
    while True:
        await asyncio.sleep(interval)
        try:
            delivered = live_clients.broadcast_heartbeat()
            log.debug(f"Heartbeat sent to {delivered} client(s)")
        except Exception as e:
            log.error(f"Error in heartbeat: {e}")
