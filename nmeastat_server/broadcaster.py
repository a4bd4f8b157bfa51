"""Manages active WebSocket subscriber queues and message broadcasting."""

import asyncio

__all__ = ["Broadcaster"]


def _enqueue_message(queue: asyncio.Queue[str], message: str) -> None:
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(message)


class Broadcaster:
    """Fan-out of JSON messages to one bounded queue per WebSocket client.

    Queues belong to the event loop; ``broadcast`` may be called from any
    thread and hands the work to the loop.
    """

    def __init__(self) -> None:
        self._queues: list[asyncio.Queue[str]] = []

    def __len__(self) -> int:
        return len(self._queues)

    def add(self, queue: asyncio.Queue[str]) -> None:
        self._queues.append(queue)

    def remove(self, queue: asyncio.Queue[str]) -> None:
        self._queues.remove(queue)

    def broadcast(self, message: str, loop: asyncio.AbstractEventLoop) -> None:
        """Dispatch a message to all subscriber queues, dropping their oldest
        message when full so a slow client never holds up the others."""
        for queue in list(self._queues):
            loop.call_soon_threadsafe(_enqueue_message, queue, message)
