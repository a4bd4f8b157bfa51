"""Pipeline: wires reader, parser, aggregator and publisher together.

Two daemon threads do the work::

    ingest thread     LineReader -> parse() -> queue
    aggregate thread  queue -> Aggregator -> SnapshotPublisher

The bounded queue keeps arrival order and, when full, blocks the ingest
thread, which in turn stops reading input. The aggregate thread wakes at
least every tick to expire stale satellite groups even when input is idle.

When input ends, fails, or ``stop()`` is called, the aggregate thread
publishes the final snapshot and closes the publisher, which ends every
subscription.
"""

import logging
import queue
import threading
import time
from collections.abc import Callable
from typing import BinaryIO

from nmeastat.aggregator import Aggregator
from nmeastat.config import Settings
from nmeastat.errors import InputStreamError, ParseError
from nmeastat.nmea import Sentence, parse
from nmeastat.publisher import SnapshotPublisher
from nmeastat.reader import LineReader

__all__ = ["Pipeline"]

logger = logging.getLogger(__name__)

# Upper bound on how long the aggregator sleeps without input
_TICK_SECONDS = 0.25
# How often a blocked put re-checks for stop()
_PUT_TIMEOUT_SECONDS = 0.5

# Queue item marking the end of input
_END = None


class Pipeline:
    """Ingestion and aggregation running in background threads.

    Usage::

        pipeline = Pipeline(sys.stdin.buffer, Settings())
        subscription = pipeline.publisher.subscribe()
        pipeline.start()
        ...
        pipeline.join()
        if pipeline.error is not None:
            raise pipeline.error

    Args:
        stream: Binary input stream of NMEA lines. Not closed by the pipeline.
        settings: Runtime settings.
        publisher: Publisher to feed; a new one is created when omitted.
        clock: Wall-clock source for freshness stamps.
    """

    def __init__(
        self,
        stream: BinaryIO,
        settings: Settings,
        publisher: SnapshotPublisher | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._reader = LineReader(stream, max_line_length=settings.max_line_length)
        self._aggregator = Aggregator(
            gsv_timeout=settings.gsv_timeout_seconds,
            publish_interval=settings.publish_interval_seconds,
            max_pending_groups=settings.max_pending_satellite_groups,
            satellite_retention=settings.staleness_seconds,
            clock=clock,
        )
        self._publisher = publisher if publisher is not None else SnapshotPublisher()
        self._queue: queue.Queue[Sentence | ParseError | None] = queue.Queue(
            maxsize=settings.queue_size
        )
        self._tick = min(_TICK_SECONDS, settings.gsv_timeout_seconds / 2)
        self._stop = threading.Event()
        self._error: InputStreamError | None = None
        self._ingest_thread = threading.Thread(
            target=self._ingest, name="nmeastat-ingest", daemon=True
        )
        self._aggregate_thread = threading.Thread(
            target=self._aggregate, name="nmeastat-aggregate", daemon=True
        )

    @property
    def publisher(self) -> SnapshotPublisher:
        return self._publisher

    @property
    def error(self) -> InputStreamError | None:
        """The input failure that ended the run, if any."""
        return self._error

    def start(self) -> None:
        self._ingest_thread.start()
        self._aggregate_thread.start()

    def stop(self) -> None:
        """Request shutdown. The final snapshot is still published."""
        self._stop.set()
        self._reader.cancel()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for aggregation to finish; True if it did within *timeout*.

        The ingest thread may stay blocked in a read until more input or end
        of input arrives; it is a daemon thread and does not keep the process
        alive.
        """
        self._aggregate_thread.join(timeout)
        return not self._aggregate_thread.is_alive()

    def run(self) -> None:
        """Start, wait for end of input, and raise the input failure, if any."""
        self.start()
        self.join()
        if self._error is not None:
            raise self._error

    def _put(self, item: Sentence | ParseError | None) -> bool:
        while not self._stop.is_set():
            try:
                self._queue.put(item, timeout=_PUT_TIMEOUT_SECONDS)
            except queue.Full:
                continue
            return True
        return False

    def _ingest(self) -> None:
        try:
            for item in self._reader:
                result = item if isinstance(item, ParseError) else parse(item.text)
                if not self._put(result):
                    break
        except InputStreamError as e:
            logger.error("%s", e)
            self._error = e
        finally:
            self._put(_END)

    def _aggregate(self) -> None:
        try:
            while not self._stop.is_set():
                try:
                    item = self._queue.get(timeout=self._tick)
                except queue.Empty:
                    pass
                else:
                    if item is _END:
                        break
                    snapshot = self._aggregator.ingest(item)
                    if snapshot is not None:
                        self._publisher.publish(snapshot)
                expired = self._aggregator.expire()
                if expired is not None:
                    self._publisher.publish(expired)
        finally:
            self._publisher.publish(self._aggregator.flush())
            self._publisher.close()

