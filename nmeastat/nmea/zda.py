"""ZDA sentence decoder.

ZDA Sentence Format:
    $GPZDA,201530.00,04,07,2002,00,00*60
           |         |  |  |    |  |
           |         |  |  |    |  +-- Local zone minutes
           |         |  |  |    +-- Local zone hours
           |         |  |  +-- Year (four digits)
           |         |  +-- Month
           |         +-- Day
           +-- UTC time (HHMMSS.ss)
"""

import datetime

from nmeastat.nmea.fields import FieldReader
from nmeastat.nmea.types import ZDAData

__all__ = ["MINIMUM_FIELD_COUNT", "decode_zda"]

MINIMUM_FIELD_COUNT = 5


def _decode_date(reader: FieldReader) -> datetime.date | None:
    """Assemble the date from the separate day, month and year fields.

    The three fields count as one attribute: if any is malformed or the
    combination is not a calendar date, ``date`` is recorded as the error.
    """
    values = [reader.raw(index) for index in (2, 3, 4)]
    if not any(values):
        return None
    if not all(value.isdigit() for value in values) or len(values[2]) != 4:
        reader.errors.append("date")
        return None
    day, month, year = (int(value) for value in values)
    try:
        date = datetime.date(year, month, day)
    except ValueError:
        reader.errors.append("date")
        return None
    reader.parsed += 1
    return date


def decode_zda(talker: str, reader: FieldReader) -> ZDAData:
    return ZDAData(
        talker=talker,
        utc_time=reader.time_field(1, "utc_time"),
        date=_decode_date(reader),
        local_zone_hours=reader.int_field(5, "local_zone_hours"),
        local_zone_minutes=reader.int_field(6, "local_zone_minutes"),
        field_errors=tuple(reader.errors),
    )
