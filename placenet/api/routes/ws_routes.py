"""
WebSocket Route

WS /ws - Real-time channel (chat pushes, announcements, heartbeat)

Inbound frames:
- {"type": "announcement", "title", "message", "priority"} -> broadcast to all
- any other JSON object -> relayed verbatim to every other client
"""

import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from placenet.api.deps import get_hub
from placenet.services.realtime import ChannelHub

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Real-time"])


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, hub: ChannelHub = Depends(get_hub)):
    await websocket.accept()
    connection = hub.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            hub.handle_inbound(connection, raw)
    except WebSocketDisconnect:
        pass
    finally:
        await hub.disconnect(connection)
