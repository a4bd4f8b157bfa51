"""Background loop forwarding published snapshots to WebSocket clients."""

import asyncio

from nmeastat.publisher import Subscription
from nmeastat_server.broadcaster import Broadcaster
from nmeastat_server.formatters import format_snapshot_message

__all__ = ["run_snapshot_loop"]


def run_snapshot_loop(
    loop: asyncio.AbstractEventLoop,
    subscription: Subscription,
    broadcaster: Broadcaster,
) -> None:
    """Broadcast every new snapshot until the subscription closes.

    Runs in an executor thread. The loop exits when the subscription or its
    publisher is closed: at end of input, or when the app shuts down.

    Args:
        loop: Running asyncio event loop that owns the client queues.
        subscription: Subscription owned by the caller.
        broadcaster: Client queues to deliver to.
    """
    while True:
        snapshot = subscription.get()
        if snapshot is None:
            return
        if loop.is_closed():
            return
        broadcaster.broadcast(format_snapshot_message(snapshot), loop)
