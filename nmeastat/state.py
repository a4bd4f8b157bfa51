"""GnssState: the immutable snapshot of everything currently known.

A snapshot is never modified. The aggregator builds a new one with
``dataclasses.replace`` for every accepted change, so a reference handed to a
renderer stays internally consistent for as long as it is held.

Freshness is tracked per field group rather than per value: a GGA sentence
refreshes position, altitude, fix, satellites used, HDOP and time together.
"""

import datetime
import enum
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType

from nmeastat.nmea.types import FixQuality, SatelliteInfo

__all__ = ["Diagnostics", "FieldGroup", "GnssState"]


class FieldGroup(enum.Enum):
    """Related values that are always updated together."""

    POSITION = "position"
    ALTITUDE = "altitude"
    FIX = "fix"
    SATELLITES_USED = "satellitesUsed"
    SATELLITES_IN_VIEW = "satellitesInView"
    DOP = "dop"
    VELOCITY = "velocity"
    TIME = "time"


@dataclass(frozen=True)
class Diagnostics:
    """Running counters of what the pipeline has seen.

    Attributes:
        sentences: Checksum-valid sentences decoded, unsupported ones included.
        framing_errors: Lines rejected for framing (start marker, checksum
            field, address, over-length).
        checksum_mismatches: Lines whose well-formed checksum was wrong.
        unsupported: Valid sentences of a type that is not decoded.
        field_errors: Truncated sentences plus sentences with malformed fields.
        gsv_timeouts: Satellite groups published incomplete.
    """

    sentences: int = 0
    framing_errors: int = 0
    checksum_mismatches: int = 0
    unsupported: int = 0
    field_errors: int = 0
    gsv_timeouts: int = 0


def _empty_updates() -> Mapping[FieldGroup, float]:
    return MappingProxyType({})


# Bookkeeping fields that do not count as a change of value
_META_FIELDS = frozenset({"last_updated", "diagnostics"})


@dataclass(frozen=True)
class GnssState:
    """Current GNSS solution as assembled from all sentence types.

    ``None`` means unknown: nothing was received yet, or the last sentence
    carrying the value had it empty or malformed. ``fix_quality`` starts as
    ``FixQuality.NO_FIX`` and is ``None`` only after an unrecognized GGA code.

    Attributes:
        latitude: Decimal degrees, positive north.
        longitude: Decimal degrees, positive east.
        altitude_meters: Altitude above mean sea level.
        fix_quality: GGA fix quality.
        fix_mode: GSA fix mode (1 = none, 2 = 2D, 3 = 3D).
        satellites_used: Satellites in the GGA solution.
        satellites_in_view: Latest satellite groups of every talker, ordered
            by talker.
        satellites_incomplete: True if any talker's group was flushed before
            all of its sentences arrived.
        utc_timestamp: Latest UTC date and time of day, timezone aware. Only
            set once a date has been received.
        last_updated: Wall-clock seconds of the latest update of each group.
        diagnostics: Pipeline counters.
    """

    latitude: float | None = None
    longitude: float | None = None
    altitude_meters: float | None = None
    fix_quality: FixQuality | None = FixQuality.NO_FIX
    fix_mode: int | None = None
    satellites_used: int | None = None
    satellites_in_view: tuple[SatelliteInfo, ...] = ()
    satellites_incomplete: bool = False
    pdop: float | None = None
    hdop: float | None = None
    vdop: float | None = None
    speed_knots: float | None = None
    course_degrees: float | None = None
    utc_timestamp: datetime.datetime | None = None
    last_updated: Mapping[FieldGroup, float] = field(default_factory=_empty_updates)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @classmethod
    def initial(cls) -> "GnssState":
        """State before any sentence: no fix, every value unknown."""
        return cls()

    def age(self, group: FieldGroup, now: float) -> float | None:
        """Seconds since *group* was last updated, None if it never was."""
        updated = self.last_updated.get(group)
        if updated is None:
            return None
        return max(0.0, now - updated)

    def is_stale(self, group: FieldGroup, now: float, threshold: float) -> bool:
        """True if *group* was updated, but not within *threshold* seconds."""
        age = self.age(group, now)
        return age is not None and age > threshold

    def same_values(self, other: "GnssState") -> bool:
        """Compare the GNSS values only, ignoring freshness and counters."""
        return all(
            getattr(self, f.name) == getattr(other, f.name)
            for f in fields(self)
            if f.name not in _META_FIELDS
        )
