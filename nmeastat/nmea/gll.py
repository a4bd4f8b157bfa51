"""GLL sentence decoder.

GLL Sentence Format:
    $GPGLL,4916.45,N,12311.12,W,225444,A,*1D
           |       | |        | |      | |
           |       | |        | |      | +-- Mode indicator (NMEA 2.3+)
           |       | |        | |      +-- Status (A=valid, V=invalid)
           |       | |        | +-- UTC time (HHMMSS.ss)
           |       | +--------+-- Longitude + E/W
           +-------+-- Latitude + N/S
"""

from nmeastat.nmea.fields import FieldReader
from nmeastat.nmea.types import GLLData

__all__ = ["MINIMUM_FIELD_COUNT", "decode_gll"]

MINIMUM_FIELD_COUNT = 5

_MODES = "ADEMSNP"


def decode_gll(talker: str, reader: FieldReader) -> GLLData:
    return GLLData(
        talker=talker,
        latitude_degrees=reader.coordinate_field(1, "latitude", "lat"),
        longitude_degrees=reader.coordinate_field(3, "longitude", "lon"),
        utc_time=reader.time_field(5, "utc_time"),
        status=reader.choice_field(6, "status", "AV"),
        mode=reader.choice_field(7, "mode", _MODES),
        field_errors=tuple(reader.errors),
    )
