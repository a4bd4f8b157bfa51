"""GGA sentence decoder.

GGA (Global Positioning System Fix Data) is one of the most important NMEA
sentences, providing position fix information including coordinates, altitude,
fix quality, and satellite/accuracy metrics.

GGA Sentence Format:
    $GNGGA,123519.00,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,*7F
           |         |        | |         | | |  |   |     | |     |
           |         |        | |         | | |  |   |     | |     +-- DGPS info (optional)
           |         |        | |         | | |  |   |     | +-- Geoid height (M=meters)
           |         |        | |         | | |  |   +-----+-- Altitude above MSL
           |         |        | |         | | |  +-- HDOP (horizontal dilution)
           |         |        | |         | | +-- Number of satellites
           |         |        | |         | +-- Fix quality (0-8)
           |         |        | +---------+-- Longitude + E/W
           |         +--------+-- Latitude + N/S
           +-- UTC time (HHMMSS.ss)
"""

from nmeastat.nmea.fields import FieldReader
from nmeastat.nmea.types import FixQuality, GGAData

__all__ = ["MINIMUM_FIELD_COUNT", "decode_gga"]

# Address + 13 data fields; the DGPS station ID (index 14) is often omitted
MINIMUM_FIELD_COUNT = 14


def _decode_fix_quality(reader: FieldReader) -> FixQuality | None:
    """Read the fix quality indicator at index 6.

    An empty field defaults to NO_FIX: 0 already means "no fix", so there is
    no semantic difference between "empty" and "0". An unknown code is a
    field error and decodes as None.
    """
    if not reader.raw(6):
        return FixQuality.NO_FIX
    code = reader.int_field(6, "fix_quality")
    if code is None:
        return None
    try:
        return FixQuality(code)
    except ValueError:
        reader.errors.append("fix_quality")
        return None


def decode_gga(talker: str, reader: FieldReader) -> GGAData:
    """Construct a GGAData object from parsed fields.

    Maps NMEA field indices to GGAData attributes:
        fields[1]  -> utc_time (HHMMSS.ss format)
        fields[2]  -> latitude (DDMM.MMMM format)
        fields[3]  -> latitude direction (N/S)
        fields[4]  -> longitude (DDDMM.MMMM format)
        fields[5]  -> longitude direction (E/W)
        fields[6]  -> fix_quality (0-8)
        fields[7]  -> num_satellites
        fields[8]  -> HDOP (horizontal dilution of precision)
        fields[9]  -> altitude above MSL (meters)
        fields[11] -> geoid height (meters)
    """
    return GGAData(
        talker=talker,
        utc_time=reader.time_field(1, "utc_time"),
        latitude_degrees=reader.coordinate_field(2, "latitude", "lat"),
        longitude_degrees=reader.coordinate_field(4, "longitude", "lon"),
        fix_quality=_decode_fix_quality(reader),
        num_satellites=reader.int_field(7, "num_satellites"),
        horizontal_dilution_of_precision=reader.float_field(8, "hdop"),
        altitude_meters=reader.float_field(9, "altitude"),
        geoid_height_meters=reader.float_field(11, "geoid_height"),
        field_errors=tuple(reader.errors),
    )
