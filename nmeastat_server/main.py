"""FastAPI web exporter for the live GNSS state.

Started by ``nmeastat --web``, or standalone around any publisher::

    app = create_app(publisher)
    uvicorn.run(app, host="127.0.0.1", port=8000)

``GET /api/state`` returns the current snapshot as JSON. WebSocket clients
connect to ``ws://<host>:<port>/ws``, receive the current snapshot right
away, and then one message per published snapshot, the same shape as
``/api/state``. A browser map page polls or subscribes to either.
"""

import asyncio
import logging
import threading
from collections.abc import AsyncIterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from nmeastat.publisher import SnapshotPublisher
from nmeastat_server.broadcaster import Broadcaster
from nmeastat_server.formatters import format_snapshot_message, snapshot_to_dict
from nmeastat_server.relay import run_snapshot_loop

__all__ = ["create_app", "serve_in_background"]

logger = logging.getLogger(__name__)

_QUEUE_MAX_SIZE = 10
_TIMEOUT_SECONDS = 5.0


async def _send_messages_until_disconnect(
    queue: asyncio.Queue[str],
    websocket: WebSocket,
) -> None:
    try:
        while True:
            message = await asyncio.wait_for(queue.get(), timeout=_TIMEOUT_SECONDS)
            await websocket.send_text(message)
    except TimeoutError:
        await websocket.close(code=1001)
    except WebSocketDisconnect:
        logger.debug("websocket client disconnected")


def create_app(publisher: SnapshotPublisher) -> FastAPI:
    """Build the exporter app around *publisher*.

    The app subscribes to *publisher* for its lifetime; closing the
    publisher stops forwarding, and idle clients are then disconnected.
    """
    broadcaster = Broadcaster()

    @asynccontextmanager
    async def _lifespan(_application: FastAPI) -> AsyncIterator[None]:
        loop = asyncio.get_running_loop()
        subscription = publisher.subscribe()
        executor = ThreadPoolExecutor(max_workers=1)
        loop.run_in_executor(executor, run_snapshot_loop, loop, subscription, broadcaster)
        yield
        subscription.close()
        executor.shutdown(wait=False)

    app = FastAPI(lifespan=_lifespan)

    @app.get("/api/state")
    def get_state() -> dict[str, Any]:
        """Return the latest published snapshot."""
        return snapshot_to_dict(publisher.latest())

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        """Stream snapshot JSON messages to a connected WebSocket client.

        Each client gets its own bounded queue (max ``_QUEUE_MAX_SIZE``
        messages). The oldest message is dropped when the queue is full so
        slow clients do not stall the others. The connection closes with code
        1001, and the client should reconnect, if no message arrives within
        ``_TIMEOUT_SECONDS``.

        Args:
            websocket: The incoming WebSocket connection.
        """
        await websocket.accept()
        queue: asyncio.Queue[str] = asyncio.Queue(maxsize=_QUEUE_MAX_SIZE)
        queue.put_nowait(format_snapshot_message(publisher.latest()))
        broadcaster.add(queue)
        try:
            await _send_messages_until_disconnect(queue, websocket)
        finally:
            broadcaster.remove(queue)

    return app


def serve_in_background(app: FastAPI, host: str, port: int) -> uvicorn.Server:
    """Run *app* under uvicorn in a daemon thread.

    Set ``should_exit`` on the returned server to stop it.
    """
    config = uvicorn.Config(app, host=host, port=port, log_level="warning")
    server = uvicorn.Server(config)
    thread = threading.Thread(target=server.run, name="nmeastat-web", daemon=True)
    thread.start()
    logger.info("web exporter listening on http://%s:%d", host, port)
    return server
