"""RMC sentence decoder.

RMC (Recommended Minimum Navigation Information) is the only sentence that
carries position, velocity and the UTC date together.

RMC Sentence Format:
    $GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A
           |      | |        | |         | |     |     |      |     |
           |      | |        | |         | |     |     |      +-----+-- Magnetic variation + E/W
           |      | |        | |         | |     |     +-- Date (DDMMYY)
           |      | |        | |         | |     +-- Course over ground (true)
           |      | |        | |         | +-- Speed over ground (knots)
           |      | |        | +---------+-- Longitude + E/W
           |      | +--------+-- Latitude + N/S
           |      +-- Status (A=valid, V=receiver warning)
           +-- UTC time (HHMMSS.ss)

NMEA 2.3 adds an FAA mode indicator after the variation direction.
"""

from nmeastat.nmea.fields import FieldReader
from nmeastat.nmea.types import RMCData

__all__ = ["MINIMUM_FIELD_COUNT", "decode_rmc"]

# Everything up to and including the date field
MINIMUM_FIELD_COUNT = 10

_MODES = "ADEMSNFRP"


def _decode_magnetic_variation(reader: FieldReader) -> float | None:
    variation = reader.float_field(10, "magnetic_variation")
    if variation is None:
        return None
    direction = reader.choice_field(11, "magnetic_variation_direction", "EW")
    if direction == "W":
        return -variation
    return variation


def decode_rmc(talker: str, reader: FieldReader) -> RMCData:
    """Construct an RMCData object from parsed fields.

    Maps NMEA field indices to RMCData attributes:
        fields[1]  -> utc_time
        fields[2]  -> status (A/V)
        fields[3]  -> latitude + fields[4] N/S
        fields[5]  -> longitude + fields[6] E/W
        fields[7]  -> speed_knots
        fields[8]  -> course_true_degrees
        fields[9]  -> date (DDMMYY)
        fields[10] -> magnetic variation + fields[11] E/W
        fields[12] -> mode (FAA mode indicator, if present)
    """
    return RMCData(
        talker=talker,
        utc_time=reader.time_field(1, "utc_time"),
        status=reader.choice_field(2, "status", "AV"),
        latitude_degrees=reader.coordinate_field(3, "latitude", "lat"),
        longitude_degrees=reader.coordinate_field(5, "longitude", "lon"),
        speed_knots=reader.float_field(7, "speed_knots"),
        course_true_degrees=reader.float_field(8, "course_true"),
        date=reader.date_field(9, "date"),
        magnetic_variation_degrees=_decode_magnetic_variation(reader),
        mode=reader.choice_field(12, "mode", _MODES),
        field_errors=tuple(reader.errors),
    )
