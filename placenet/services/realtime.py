"""
Real-time Fan-out Channel.

Every open WebSocket is wrapped in a Connection holding a bounded outbound
queue and a single sender task, so each client receives messages in the
order they were published. publish() never waits on a client: it only
enqueues. A client that cannot keep up loses its oldest queued messages;
a client whose send fails is closed and dropped.

Message types sent by the server:
- new_message          {type, data: <chat message>}
- system_announcement  {type, title, message, priority, timestamp}
- admin_activity       {type, data: {timestamp, activeConnections, systemStatus}}
Anything else a client sends is relayed verbatim to the other clients.
"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional, Set

logger = logging.getLogger(__name__)


def iso_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class Connection:
    """One subscriber. websocket needs async send_text() and close()."""

    def __init__(self, websocket: Any, queue_size: int = 100):
        self.websocket = websocket
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self.sender_task: Optional[asyncio.Task] = None
        self.dropped = 0
        self.closed = False

    def enqueue(self, payload: str) -> None:
        if self.queue.full():
            self.queue.get_nowait()
            self.queue.task_done()
            self.dropped += 1
        self.queue.put_nowait(payload)

    async def drain(self) -> None:
        """Wait until everything queued so far has been handed to the socket."""
        await self.queue.join()


class ChannelHub:

    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self.connections: Set[Connection] = set()
        self._heartbeat_task: Optional[asyncio.Task] = None

    @property
    def connection_count(self) -> int:
        return len(self.connections)

    # ------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------

    def connect(self, websocket: Any) -> Connection:
        """Register an accepted socket and start its sender task."""
        connection = Connection(websocket, self.queue_size)
        connection.sender_task = asyncio.create_task(self._sender(connection))
        self.connections.add(connection)
        logger.info("WebSocket connected (%d open)", self.connection_count)
        return connection

    async def disconnect(self, connection: Connection) -> None:
        self.connections.discard(connection)
        connection.closed = True
        task = connection.sender_task
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info("WebSocket disconnected (%d open)", self.connection_count)

    async def _sender(self, connection: Connection) -> None:
        while True:
            payload = await connection.queue.get()
            try:
                await connection.websocket.send_text(payload)
            except Exception as e:
                connection.queue.task_done()
                logger.debug("Dropping connection after failed send: %s", e)
                await self._drop(connection)
                return
            connection.queue.task_done()

    async def _drop(self, connection: Connection) -> None:
        self.connections.discard(connection)
        connection.closed = True
        # Release anyone waiting on drain()
        while not connection.queue.empty():
            connection.queue.get_nowait()
            connection.queue.task_done()
        try:
            await connection.websocket.close()
        except Exception as e:
            logger.debug("Close after failed send also failed: %s", e)

    # ------------------------------------------------------------
    # Fan-out
    # ------------------------------------------------------------

    def publish(self, message: dict, exclude: Optional[Connection] = None) -> int:
        """
        Serialize once and enqueue on every open connection except exclude.
        Returns the number of connections the message was queued for.
        """
        return self.publish_raw(json.dumps(message, default=str), exclude=exclude)

    def publish_raw(self, payload: str, exclude: Optional[Connection] = None) -> int:
        """Enqueue an already serialized frame unchanged."""
        delivered = 0
        for connection in list(self.connections):
            if connection is exclude or connection.closed:
                continue
            connection.enqueue(payload)
            delivered += 1
        return delivered

    def announce(self, title: str, message: str, priority: str = "normal",
                 timestamp: Optional[str] = None) -> int:
        """Broadcast a system announcement to everyone. Not persisted."""
        return self.publish({
            "type": "system_announcement",
            "title": title,
            "message": message,
            "priority": priority,
            "timestamp": timestamp or iso_timestamp(),
        })

    def handle_inbound(self, connection: Connection, raw: str) -> None:
        """Route one text frame received from a client."""
        try:
            message = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring non-JSON WebSocket message")
            return
        if not isinstance(message, dict):
            logger.warning("Ignoring WebSocket message that is not an object")
            return

        if message.get("type") == "announcement":
            self.announce(
                message.get("title", ""),
                message.get("message", ""),
                message.get("priority", "normal"),
                message.get("timestamp"),
            )
        else:
            self.publish_raw(raw, exclude=connection)

    # ------------------------------------------------------------
    # Heartbeat
    # ------------------------------------------------------------

    def heartbeat_message(self) -> dict:
        return {
            "type": "admin_activity",
            "data": {
                "timestamp": iso_timestamp(),
                "activeConnections": self.connection_count,
                "systemStatus": "healthy",
            },
        }

    async def run_heartbeat(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.publish(self.heartbeat_message())

    def start_heartbeat(self, interval: float) -> None:
        if self._heartbeat_task is None or self._heartbeat_task.done():
            self._heartbeat_task = asyncio.create_task(self.run_heartbeat(interval))

    async def stop_heartbeat(self) -> None:
        task, self._heartbeat_task = self._heartbeat_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def close_all(self) -> None:
        for connection in list(self.connections):
            await self.disconnect(connection)


# Singleton instance
_hub: Optional[ChannelHub] = None


def get_channel_hub() -> ChannelHub:
    """Get or create the channel hub (singleton pattern)"""
    global _hub
    if _hub is None:
        from placenet.core.config import get_settings
        _hub = ChannelHub(queue_size=get_settings().ws_queue_size)
    return _hub


def reset_channel_hub() -> None:
    global _hub
    _hub = None
