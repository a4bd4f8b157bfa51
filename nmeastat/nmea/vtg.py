"""VTG sentence decoder.

VTG (Track Made Good and Ground Speed) provides velocity information from GNSS.

VTG Sentence Format:
    $GNVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B
           |     | |     | |     | |     | |
           |     | |     | |     | |     | +-- Mode indicator (A/D/E/N)
           |     | |     | |     | +-----+-- Speed in km/h
           |     | |     | +-----+-- Speed in knots
           |     | +-----+-- Track (magnetic north, degrees)
           +-----+-- Track (true north, degrees)

Mode Indicators (FAA mode, NMEA 2.3+):
    A = Autonomous (standard GPS positioning)
    D = Differential (DGPS or RTK)
    E = Estimated (dead reckoning)
    N = Not valid (no fix)

Note: When stationary, the track angle may be empty (no heading when not moving).
"""

from nmeastat.nmea.fields import FieldReader
from nmeastat.nmea.types import VTGData

__all__ = ["MINIMUM_FIELD_COUNT", "decode_vtg"]

# VTG has 9 fields in basic format, 10 with FAA mode indicator
MINIMUM_FIELD_COUNT = 9

# Conversion factor: km/h to m/s
# 1 km/h = 1000m / 3600s = 1/3.6 m/s
_KILOMETERS_PER_HOUR_TO_METERS_PER_SECOND = 3.6

_MODES = "ADEMSNP"


def _compute_speed_meters_per_second(
    speed_kilometers_per_hour: float | None,
) -> float | None:
    """Convert speed from km/h to m/s (m/s = km/h ÷ 3.6)."""
    if speed_kilometers_per_hour is None:
        return None
    return speed_kilometers_per_hour / _KILOMETERS_PER_HOUR_TO_METERS_PER_SECOND


def decode_vtg(talker: str, reader: FieldReader) -> VTGData:
    """Construct a VTGData object from parsed fields.

    Maps NMEA field indices to VTGData attributes:
        fields[1] -> track_true_degrees (heading relative to true north)
        fields[3] -> track_magnetic_degrees
        fields[5] -> speed_knots
        fields[7] -> speed_kilometers_per_hour
        (computed) -> speed_meters_per_second (derived from km/h)
        fields[9] -> mode (FAA mode indicator, if present)
    """
    speed_kilometers_per_hour = reader.float_field(7, "speed_kmh")

    return VTGData(
        talker=talker,
        track_true_degrees=reader.float_field(1, "track_true"),
        track_magnetic_degrees=reader.float_field(3, "track_magnetic"),
        speed_knots=reader.float_field(5, "speed_knots"),
        speed_kilometers_per_hour=speed_kilometers_per_hour,
        speed_meters_per_second=_compute_speed_meters_per_second(
            speed_kilometers_per_hour
        ),
        mode=reader.choice_field(9, "mode", _MODES),
        field_errors=tuple(reader.errors),
    )
