"""Reassembly of multi-sentence GSV satellite groups.

A receiver reports the satellites in view as a numbered run of GSV
sentences, one run per constellation talker (GP, GL, GA, ...). Runs from
different talkers interleave freely, so pending groups are keyed by talker.

A group is flushed complete when its declared number of sentences has
arrived. If the rest never arrives, ``expire()`` flushes what was collected
marked incomplete once the completion timeout has passed.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field

from nmeastat.nmea.types import GSVData, SatelliteInfo

__all__ = ["SatelliteGroup", "SatelliteGroupBuffer"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SatelliteGroup:
    """A flushed group of satellites for one talker."""

    talker: str
    satellites: tuple[SatelliteInfo, ...]
    incomplete: bool = False


@dataclass
class _PendingGroup:
    total: int
    started_at: float
    received: set[int] = field(default_factory=set)
    satellites: list[SatelliteInfo] = field(default_factory=list)

    def complete(self) -> bool:
        return len(self.received) >= self.total

    def flush(self, talker: str, incomplete: bool) -> SatelliteGroup:
        return SatelliteGroup(talker, tuple(self.satellites), incomplete)


class SatelliteGroupBuffer:
    """Pending GSV groups, one per talker.

    Args:
        timeout: Seconds after the first sentence of a group before it is
            flushed incomplete.
        max_groups: Maximum number of talkers with a pending group. Starting
            one more flushes the oldest pending group incomplete.
    """

    def __init__(self, timeout: float, max_groups: int = 8) -> None:
        self._timeout = timeout
        self._max_groups = max_groups
        self._pending: OrderedDict[str, _PendingGroup] = OrderedDict()

    def __len__(self) -> int:
        return len(self._pending)

    def add(self, gsv: GSVData, now: float) -> list[SatelliteGroup]:
        """Add one GSV sentence.

        Returns:
            Groups flushed by this sentence: the talker's own group when it
            became complete, plus any group evicted to make room. Usually
            empty.
        """
        total = gsv.total_sentences
        number = gsv.sentence_number
        if not total or not number or number > total:
            logger.debug("ignoring GSV %s with sentence %s of %s", gsv.talker, number, total)
            return []

        flushed: list[SatelliteGroup] = []
        pending = self._pending.get(gsv.talker)
        if pending is not None and (number == 1 or pending.total != total):
            # A new run started before the previous one finished
            del self._pending[gsv.talker]
            flushed.append(pending.flush(gsv.talker, incomplete=True))
            pending = None

        if pending is None:
            if len(self._pending) >= self._max_groups:
                talker, oldest = self._pending.popitem(last=False)
                logger.warning("too many pending satellite groups, flushing %s", talker)
                flushed.append(oldest.flush(talker, incomplete=True))
            pending = _PendingGroup(total=total, started_at=now)
            self._pending[gsv.talker] = pending

        if number not in pending.received:
            pending.received.add(number)
            pending.satellites.extend(gsv.satellites)

        if pending.complete():
            del self._pending[gsv.talker]
            flushed.append(pending.flush(gsv.talker, incomplete=False))
        return flushed

    def expire(self, now: float) -> list[SatelliteGroup]:
        """Flush every group older than the timeout, marked incomplete."""
        expired = [
            talker
            for talker, pending in self._pending.items()
            if now - pending.started_at >= self._timeout
        ]
        flushed = []
        for talker in expired:
            pending = self._pending.pop(talker)
            logger.warning(
                "satellite group %s timed out with %d of %d sentences",
                talker,
                len(pending.received),
                pending.total,
            )
            flushed.append(pending.flush(talker, incomplete=True))
        return flushed

    def drain(self) -> list[SatelliteGroup]:
        """Flush every pending group incomplete, regardless of age."""
        flushed = [
            pending.flush(talker, incomplete=True)
            for talker, pending in self._pending.items()
        ]
        self._pending.clear()
        return flushed
