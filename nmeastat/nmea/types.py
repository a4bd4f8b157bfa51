"""NMEA data types for parsed sentences.

This module defines the tagged variant returned by the parser: one frozen
dataclass per supported sentence type plus ``UnsupportedSentence`` for
anything else.

Design Decisions:
    1. Optional fields (float | None): NMEA fields may be empty, indicated by
       consecutive commas. Using None distinguishes "no data received" from
       "measured zero". A field that was present but malformed is also None;
       its name is listed in ``field_errors``.

    2. Immutable records: sentences are frozen once decoded so they can be
       handed across threads without copying.

    3. Decoded units: times are ``datetime.time`` (UTC), dates are
       ``datetime.date``, coordinates are signed decimal degrees.
"""

import datetime
import enum
from dataclasses import dataclass, field

__all__ = [
    "FixQuality",
    "GGAData",
    "GLLData",
    "GSAData",
    "GSVData",
    "RMCData",
    "SatelliteInfo",
    "Sentence",
    "UnsupportedSentence",
    "VTGData",
    "ZDAData",
]


class FixQuality(enum.IntEnum):
    """GGA fix quality indicator.

    0 = Invalid (no fix)
    1 = GPS fix (SPS - Standard Positioning Service)
    2 = DGPS fix (Differential GPS)
    3 = PPS fix (Precise Positioning Service)
    4 = RTK Fixed (centimeter-level accuracy)
    5 = RTK Float (decimeter-level accuracy, converging)
    6 = Estimated (dead reckoning)
    7 = Manual input
    8 = Simulation
    """

    NO_FIX = 0
    GPS = 1
    DGPS = 2
    PPS = 3
    RTK = 4
    FLOAT_RTK = 5
    ESTIMATED = 6
    MANUAL = 7
    SIMULATION = 8

    @property
    def label(self) -> str:
        return _FIX_LABELS[self]


_FIX_LABELS = {
    FixQuality.NO_FIX: "NoFix",
    FixQuality.GPS: "GPS",
    FixQuality.DGPS: "DGPS",
    FixQuality.PPS: "PPS",
    FixQuality.RTK: "RTK",
    FixQuality.FLOAT_RTK: "FloatRTK",
    FixQuality.ESTIMATED: "Estimated",
    FixQuality.MANUAL: "Manual",
    FixQuality.SIMULATION: "Simulation",
}


@dataclass(frozen=True)
class SatelliteInfo:
    """One satellite-in-view record from a GSV sentence.

    Attributes:
        prn: Satellite PRN / slot number.
        elevation_degrees: Elevation above the horizon (0-90), None if empty.
        azimuth_degrees: Azimuth from true north (0-359), None if empty.
        snr_db: Carrier-to-noise ratio in dB-Hz, None when not tracked.
        talker: Talker ID of the GSV sentence (GP, GL, GA, ...), which
            disambiguates PRNs shared between constellations.
    """

    prn: int
    elevation_degrees: int | None
    azimuth_degrees: int | None
    snr_db: int | None
    talker: str = ""


@dataclass(frozen=True)
class GGAData:
    """Parsed GGA (Global Positioning System Fix Data) sentence.

    Attributes:
        talker: Two-letter talker ID (e.g. "GP", "GN").
        utc_time: UTC time of day, None if field was empty.
        latitude_degrees: Latitude in decimal degrees, positive=North.
        longitude_degrees: Longitude in decimal degrees, positive=East.
        fix_quality: Fix quality indicator. An empty field means no fix;
            None only when the field held an unknown code.
        num_satellites: Number of satellites used in the fix solution.
        horizontal_dilution_of_precision: HDOP value. Lower is better.
        altitude_meters: Altitude above mean sea level (MSL) in meters.
        geoid_height_meters: Height of geoid (MSL) above WGS84 ellipsoid.
        field_errors: Names of fields that were present but malformed.
    """

    talker: str
    utc_time: datetime.time | None
    latitude_degrees: float | None
    longitude_degrees: float | None
    fix_quality: FixQuality | None
    num_satellites: int | None
    horizontal_dilution_of_precision: float | None
    altitude_meters: float | None
    geoid_height_meters: float | None
    field_errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class RMCData:
    """Parsed RMC (Recommended Minimum Navigation Information) sentence.

    Attributes:
        status: "A" (data valid) or "V" (receiver warning), None if empty.
        speed_knots: Speed over ground in knots.
        course_true_degrees: Course over ground relative to true north.
        date: UTC date.
        magnetic_variation_degrees: Signed variation (East positive).
        mode: FAA mode indicator (NMEA 2.3+), None on older receivers.
    """

    talker: str
    utc_time: datetime.time | None
    status: str | None
    latitude_degrees: float | None
    longitude_degrees: float | None
    speed_knots: float | None
    course_true_degrees: float | None
    date: datetime.date | None
    magnetic_variation_degrees: float | None
    mode: str | None
    field_errors: tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return self.status == "A"


@dataclass(frozen=True)
class GSAData:
    """Parsed GSA (GNSS DOP and Active Satellites) sentence.

    Attributes:
        selection_mode: "A" (automatic 2D/3D) or "M" (manual).
        fix_mode: 1 = no fix, 2 = 2D fix, 3 = 3D fix.
        satellite_prns: PRNs used in the solution (up to 12).
        position_dilution_of_precision: PDOP.
        horizontal_dilution_of_precision: HDOP.
        vertical_dilution_of_precision: VDOP.
    """

    talker: str
    selection_mode: str | None
    fix_mode: int | None
    satellite_prns: tuple[int, ...]
    position_dilution_of_precision: float | None
    horizontal_dilution_of_precision: float | None
    vertical_dilution_of_precision: float | None
    field_errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class GSVData:
    """Parsed GSV (GNSS Satellites in View) sentence.

    One GSV sentence carries at most four satellites; a full view is split
    over ``total_sentences`` sentences numbered from 1.
    """

    talker: str
    total_sentences: int | None
    sentence_number: int | None
    satellites_in_view: int | None
    satellites: tuple[SatelliteInfo, ...]
    field_errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class VTGData:
    """Parsed VTG (Track Made Good and Ground Speed) sentence.

    Attributes:
        track_true_degrees: Heading/track relative to true north in degrees.
            None when stationary (GNSS cannot determine heading without movement).
        track_magnetic_degrees: Track relative to magnetic north.
        speed_knots: Ground speed in knots.
        speed_kilometers_per_hour: Ground speed in km/h.
        speed_meters_per_second: Ground speed in m/s, derived from km/h.
        mode: FAA mode indicator ('A', 'D', 'E', 'N'), None on older receivers.
    """

    talker: str
    track_true_degrees: float | None
    track_magnetic_degrees: float | None
    speed_knots: float | None
    speed_kilometers_per_hour: float | None
    speed_meters_per_second: float | None
    mode: str | None
    field_errors: tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return self.mode is not None and self.mode != "N"


@dataclass(frozen=True)
class GLLData:
    """Parsed GLL (Geographic Position - Latitude/Longitude) sentence."""

    talker: str
    latitude_degrees: float | None
    longitude_degrees: float | None
    utc_time: datetime.time | None
    status: str | None
    mode: str | None
    field_errors: tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return self.status == "A"


@dataclass(frozen=True)
class ZDAData:
    """Parsed ZDA (Time and Date) sentence.

    Attributes:
        date: UTC date assembled from the day, month and four-digit year fields.
        local_zone_hours: Local zone offset hours (informational only).
        local_zone_minutes: Local zone offset minutes.
    """

    talker: str
    utc_time: datetime.time | None
    date: datetime.date | None
    local_zone_hours: int | None
    local_zone_minutes: int | None
    field_errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class UnsupportedSentence:
    """A checksum-valid sentence of a type this package does not decode."""

    talker: str
    sentence_type: str
    fields: tuple[str, ...] = field(default=())


Sentence = (
    GGAData
    | RMCData
    | GSAData
    | GSVData
    | VTGData
    | GLLData
    | ZDAData
    | UnsupportedSentence
)
