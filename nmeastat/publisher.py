"""SnapshotPublisher: hands the latest GnssState to any number of readers.

Publishing replaces a single "latest" slot and wakes waiting subscribers.
Each subscriber remembers the version it saw last and receives the newest
snapshot on its next ``get()``, so a slow subscriber skips intermediate
snapshots instead of queueing them, and never slows the publisher or the
other subscribers down.
"""

import threading
from collections.abc import Callable

from nmeastat.state import GnssState

__all__ = ["SnapshotPublisher", "Subscription"]


class SnapshotPublisher:
    """Latest-value broadcast of ``GnssState`` snapshots.

    Thread-safe. One thread publishes; any thread may subscribe.

    Args:
        initial: Snapshot returned by ``latest()`` before anything is
            published.
    """

    def __init__(self, initial: GnssState | None = None) -> None:
        self._condition = threading.Condition()
        self._latest = initial if initial is not None else GnssState.initial()
        self._version = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, snapshot: GnssState) -> None:
        """Make *snapshot* the latest one and wake every subscriber."""
        with self._condition:
            if self._closed:
                return
            self._latest = snapshot
            self._version += 1
            self._condition.notify_all()

    def latest(self) -> GnssState:
        with self._condition:
            return self._latest

    def subscribe(self) -> "Subscription":
        """Register a reader that starts from the current snapshot."""
        with self._condition:
            return Subscription(self, self._version)

    def close(self) -> None:
        """End publication. Subscribers drain the latest snapshot, then stop."""
        with self._condition:
            self._closed = True
            self._condition.notify_all()

    def wait_newer(
        self,
        version: int,
        timeout: float | None = None,
        cancelled: Callable[[], bool] = lambda: False,
    ) -> tuple[int, GnssState] | None:
        """Wait for a snapshot published after *version*.

        Args:
            version: Last version the caller has seen.
            timeout: Seconds to wait; None waits until a publish or close.
            cancelled: Checked under the publisher's lock; returning True
                ends the wait early. Pair with ``wake()``.

        Returns:
            ``(version, snapshot)`` for the newest snapshot, or None on
            timeout, cancellation, or close with nothing newer.
        """
        with self._condition:
            self._condition.wait_for(
                lambda: version < self._version or self._closed or cancelled(),
                timeout=timeout,
            )
            if cancelled() or version >= self._version:
                return None
            return self._version, self._latest

    def wake(self) -> None:
        """Wake every waiter so it re-checks its cancellation."""
        with self._condition:
            self._condition.notify_all()


class Subscription:
    """One reader's view of a ``SnapshotPublisher``.

    ``get()`` returns each new snapshot at most once. Obtain instances from
    ``SnapshotPublisher.subscribe()``.
    """

    def __init__(self, publisher: SnapshotPublisher, version: int) -> None:
        self._publisher = publisher
        self._version = version
        self._closed = False

    @property
    def closed(self) -> bool:
        """True once this subscription or its publisher is closed."""
        return self._closed or self._publisher.closed

    def get(self, timeout: float | None = None) -> GnssState | None:
        """Wait for a snapshot newer than the last one returned.

        Args:
            timeout: Seconds to wait; None waits until a publish or close.

        Returns:
            The newest unseen snapshot, or None on timeout or once closed
            with nothing left unseen.
        """
        result = self._publisher.wait_newer(self._version, timeout, lambda: self._closed)
        if result is None:
            return None
        self._version, snapshot = result
        return snapshot

    def close(self) -> None:
        """Stop this subscription and release any waiting ``get()``."""
        self._closed = True
        self._publisher.wake()
