"""Aggregator: folds decoded sentences into a single GnssState.

The aggregator is the only writer of GNSS state. It consumes the parser's
output in arrival order and, for every item, replaces the current snapshot
with a new one. Each sentence type refreshes a fixed set of field groups:

    ====  ==========================================================
    GGA   position, altitude, fix, satellitesUsed, dop (HDOP), time
    RMC   position, velocity, time (with date)
    GLL   position, time
    GSA   fix, dop (PDOP/HDOP/VDOP)
    VTG   velocity
    ZDA   time (with date)
    GSV   satellitesInView, once a group is flushed
    ====  ==========================================================

Values always replace what was there, an empty field included: a receiver
that stops reporting altitude leaves the altitude unknown rather than stale.

The satellites-in-view list joins the latest group of each talker. At most
``max_pending_groups`` talkers are kept, and a talker that sends no group for
``satellite_retention`` seconds is dropped from the list.

Parse failures and unsupported sentences only move the diagnostic counters.
"""

import datetime
import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import replace
from types import MappingProxyType

from nmeastat.errors import ChecksumMismatch, FieldParseError, FramingError, ParseError
from nmeastat.nmea.types import (
    FixQuality,
    GGAData,
    GLLData,
    GSAData,
    GSVData,
    RMCData,
    Sentence,
    UnsupportedSentence,
    VTGData,
    ZDAData,
)
from nmeastat.satellites import SatelliteGroup, SatelliteGroupBuffer
from nmeastat.state import FieldGroup, GnssState

__all__ = ["Aggregator"]

logger = logging.getLogger(__name__)

# A time of day this far behind the previous one means midnight has passed
_ROLLOVER_THRESHOLD = datetime.timedelta(hours=12)

_GSA_NO_FIX = 1


def _seconds_of_day(value: datetime.time) -> datetime.timedelta:
    return datetime.timedelta(
        hours=value.hour,
        minutes=value.minute,
        seconds=value.second,
        microseconds=value.microsecond,
    )


class Aggregator:
    """Single-writer merge of sentences into ``GnssState`` snapshots.

    Not thread-safe: exactly one thread calls ``ingest``, ``expire`` and
    ``flush``. Snapshots it returns are immutable and may be shared freely.

    Publication policy:
        ``ingest`` and ``expire`` return the new snapshot when a GNSS value
        changed. A change limited to freshness stamps or diagnostic counters
        is returned at most once per ``publish_interval`` seconds, which keeps
        the staleness display of a stationary receiver current without
        flooding subscribers. ``None`` means nothing needs publishing.

    Args:
        gsv_timeout: Seconds before a partial satellite group is flushed
            incomplete.
        publish_interval: Minimum seconds between freshness-only publications.
        max_pending_groups: Bound on talkers with a partial satellite group,
            and on talkers whose last group is kept in the published list.
        satellite_retention: Seconds a talker's last satellite group stays
            published without a newer one from the same talker.
        clock: Wall-clock source used for ``last_updated`` stamps.
    """

    def __init__(
        self,
        gsv_timeout: float = 2.0,
        publish_interval: float = 1.0,
        max_pending_groups: int = 8,
        satellite_retention: float = 5.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._clock = clock
        self._publish_interval = publish_interval
        self._buffer = SatelliteGroupBuffer(gsv_timeout, max_pending_groups)
        self._max_talkers = max_pending_groups
        self._satellite_retention = satellite_retention
        # talker -> (last flushed group, flush time), least recently flushed first
        self._satellite_groups: OrderedDict[str, tuple[SatelliteGroup, float]] = OrderedDict()
        self._date: datetime.date | None = None
        self._time: datetime.time | None = None
        self._state = GnssState.initial()
        self._published = self._state
        self._published_at = float("-inf")

    @property
    def state(self) -> GnssState:
        """Current snapshot, published or not."""
        return self._state

    def ingest(self, item: Sentence | ParseError) -> GnssState | None:
        """Merge one parser result.

        Never raises for malformed input; failures only bump counters.

        Returns:
            The snapshot to publish, or None when publication is not due.
        """
        now = self._clock()
        if isinstance(item, ParseError):
            self._count_failure(item)
        else:
            self._count(sentences=1)
            self._apply(item, now)
        return self._publication(now)

    def expire(self) -> GnssState | None:
        """Flush timed-out satellite groups and publish due freshness changes.

        Also drops the satellites of talkers that stopped sending GSV more
        than ``satellite_retention`` seconds ago. Meant to be called
        periodically even when no input arrives.
        """
        now = self._clock()
        groups = self._buffer.expire(now)
        if groups:
            self._merge_satellites(groups, now)
        self._retire_satellites(now)
        return self._publication(now)

    def flush(self) -> GnssState:
        """Final snapshot at end of input, with pending groups flushed."""
        groups = self._buffer.drain()
        if groups:
            self._merge_satellites(groups, self._clock())
        self._published = self._state
        return self._state

    def _publication(self, now: float) -> GnssState | None:
        state = self._state
        if state is self._published:
            return None
        due = now - self._published_at >= self._publish_interval
        if not due and state.same_values(self._published):
            return None
        self._published = state
        self._published_at = now
        return state

    def _count(self, **increments: int) -> None:
        diagnostics = self._state.diagnostics
        changes = {
            name: getattr(diagnostics, name) + amount
            for name, amount in increments.items()
        }
        self._state = replace(self._state, diagnostics=replace(diagnostics, **changes))

    def _count_failure(self, error: ParseError) -> None:
        logger.debug("discarded line %r: %s", error.line, error.reason)
        if isinstance(error, FramingError):
            self._count(framing_errors=1)
        elif isinstance(error, ChecksumMismatch):
            self._count(checksum_mismatches=1)
        elif isinstance(error, FieldParseError):
            self._count(field_errors=1)

    def _merge(self, groups: tuple[FieldGroup, ...], now: float, **values: object) -> None:
        updated = dict(self._state.last_updated)
        for group in groups:
            updated[group] = now
        self._state = replace(
            self._state, last_updated=MappingProxyType(updated), **values
        )

    def _timestamp(
        self, utc_time: datetime.time | None, date: datetime.date | None = None
    ) -> datetime.datetime | None:
        """Combine the latest date with the latest time of day.

        Without a fresh date, a time of day far behind the previous one
        advances the carried date by one day.
        """
        if date is not None:
            self._date = date
        elif (
            utc_time is not None
            and self._time is not None
            and self._date is not None
            and _seconds_of_day(self._time) - _seconds_of_day(utc_time) > _ROLLOVER_THRESHOLD
        ):
            self._date += datetime.timedelta(days=1)
        self._time = utc_time
        if self._date is None or self._time is None:
            return None
        return datetime.datetime.combine(self._date, self._time, tzinfo=datetime.timezone.utc)

    def _apply(self, sentence: Sentence, now: float) -> None:
        if isinstance(sentence, UnsupportedSentence):
            self._count(unsupported=1)
            return
        if sentence.field_errors:
            self._count(field_errors=1)

        if isinstance(sentence, GGAData):
            self._apply_gga(sentence, now)
        elif isinstance(sentence, RMCData):
            self._merge(
                (FieldGroup.POSITION, FieldGroup.VELOCITY, FieldGroup.TIME),
                now,
                latitude=sentence.latitude_degrees,
                longitude=sentence.longitude_degrees,
                speed_knots=sentence.speed_knots,
                course_degrees=sentence.course_true_degrees,
                utc_timestamp=self._timestamp(sentence.utc_time, sentence.date),
            )
        elif isinstance(sentence, GLLData):
            self._merge(
                (FieldGroup.POSITION, FieldGroup.TIME),
                now,
                latitude=sentence.latitude_degrees,
                longitude=sentence.longitude_degrees,
                utc_timestamp=self._timestamp(sentence.utc_time),
            )
        elif isinstance(sentence, GSAData):
            self._apply_gsa(sentence, now)
        elif isinstance(sentence, VTGData):
            self._merge(
                (FieldGroup.VELOCITY,),
                now,
                speed_knots=sentence.speed_knots,
                course_degrees=sentence.track_true_degrees,
            )
        elif isinstance(sentence, ZDAData):
            self._merge(
                (FieldGroup.TIME,),
                now,
                utc_timestamp=self._timestamp(sentence.utc_time, sentence.date),
            )
        elif isinstance(sentence, GSVData):
            groups = self._buffer.add(sentence, now)
            if groups:
                self._merge_satellites(groups, now)

    def _apply_gga(self, gga: GGAData, now: float) -> None:
        self._merge(
            (
                FieldGroup.POSITION,
                FieldGroup.ALTITUDE,
                FieldGroup.FIX,
                FieldGroup.SATELLITES_USED,
                FieldGroup.DOP,
                FieldGroup.TIME,
            ),
            now,
            latitude=gga.latitude_degrees,
            longitude=gga.longitude_degrees,
            altitude_meters=gga.altitude_meters,
            fix_quality=gga.fix_quality,
            satellites_used=gga.num_satellites,
            hdop=gga.horizontal_dilution_of_precision,
            utc_timestamp=self._timestamp(gga.utc_time),
        )

    def _apply_gsa(self, gsa: GSAData, now: float) -> None:
        # GSA only knows whether there is a fix, not its quality: it can
        # downgrade to no fix, or upgrade from no fix to a plain GPS fix.
        quality = self._state.fix_quality
        if gsa.fix_mode == _GSA_NO_FIX:
            quality = FixQuality.NO_FIX
        elif gsa.fix_mode is not None and quality in (FixQuality.NO_FIX, None):
            quality = FixQuality.GPS
        self._merge(
            (FieldGroup.FIX, FieldGroup.DOP),
            now,
            fix_quality=quality,
            fix_mode=gsa.fix_mode,
            pdop=gsa.position_dilution_of_precision,
            hdop=gsa.horizontal_dilution_of_precision,
            vdop=gsa.vertical_dilution_of_precision,
        )

    def _merge_satellites(self, groups: list[SatelliteGroup], now: float) -> None:
        timeouts = 0
        for group in groups:
            self._satellite_groups[group.talker] = (group, now)
            self._satellite_groups.move_to_end(group.talker)
            timeouts += group.incomplete
        if timeouts:
            self._count(gsv_timeouts=timeouts)

        while len(self._satellite_groups) > self._max_talkers:
            talker, _ = self._satellite_groups.popitem(last=False)
            logger.debug("dropping satellites of talker %s to make room", talker)

        self._merge(
            (FieldGroup.SATELLITES_IN_VIEW,),
            now,
            **self._satellite_values(),
        )

    def _retire_satellites(self, now: float) -> None:
        """Drop talkers that have sent no satellite group for too long.

        The remaining groups are republished without refreshing the
        satellites-in-view stamp: nothing new was received.
        """
        retired = [
            talker
            for talker, (_, flushed_at) in self._satellite_groups.items()
            if now - flushed_at > self._satellite_retention
        ]
        if not retired:
            return
        for talker in retired:
            del self._satellite_groups[talker]
        logger.info("satellites of %s no longer reported", ", ".join(retired))
        self._state = replace(self._state, **self._satellite_values())

    def _satellite_values(self) -> dict[str, object]:
        current = [self._satellite_groups[talker][0] for talker in sorted(self._satellite_groups)]
        return {
            "satellites_in_view": tuple(sat for group in current for sat in group.satellites),
            "satellites_incomplete": any(group.incomplete for group in current),
        }
