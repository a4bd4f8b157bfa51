"""NMEA field parsing utilities.

This module provides utilities for parsing individual fields from NMEA sentences.
NMEA fields are comma-separated and may be empty (consecutive commas indicate
missing data). These utilities handle empty fields gracefully by returning None,
allowing callers to distinguish "no data" from "zero value".

``FieldReader`` wraps the split fields of one sentence for the decoders. It
adds one thing on top of the plain converters: it remembers which non-empty
fields failed to convert, so a malformed attribute becomes "unknown" without
discarding the rest of the sentence.
"""

import datetime
from collections.abc import Sequence

__all__ = [
    "FieldReader",
    "convert_to_decimal_degrees",
    "format_coordinate",
    "parse_date_field",
    "parse_float_field",
    "parse_int_field",
    "parse_string_field",
    "parse_time_field",
]

# Two-digit years above this pivot belong to the 1900s (NMEA dates are ddmmyy)
_CENTURY_PIVOT = 80

_HEMISPHERES = {
    "lat": ("N", "S"),
    "lon": ("E", "W"),
}
_AXIS_LIMITS = {"lat": 90.0, "lon": 180.0}
# Degree digits used when encoding: ddmm.mmmm for latitude, dddmm.mmmm for longitude
_DEGREE_WIDTH = {"lat": 2, "lon": 3}


def parse_float_field(value: str) -> float | None:
    """Parse a string field to float, returning None if empty or invalid.

    NMEA fields may be empty (indicated by consecutive commas like ",,").
    This function treats empty strings as "no data" rather than an error.

    Example:
        >>> parse_float_field("545.4")
        545.4
        >>> parse_float_field("")  # empty field
        None
    """
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def parse_int_field(value: str) -> int | None:
    """Parse a string field to int, returning None if empty or invalid.

    Example:
        >>> parse_int_field("08")
        8
        >>> parse_int_field("")
        None
    """
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_string_field(value: str) -> str | None:
    """Parse a string field, returning None if empty."""
    if not value:
        return None
    return value


def parse_time_field(value: str) -> datetime.time | None:
    """Parse an ``hhmmss[.ss]`` UTC time-of-day field.

    Fractional seconds are kept to microsecond resolution.

    Example:
        >>> parse_time_field("123519.50")
        datetime.time(12, 35, 19, 500000)
    """
    if len(value) < 6 or not value[:6].isdigit():
        return None
    fraction = value[6:]
    microsecond = 0
    if fraction:
        if fraction[0] != "." or not fraction[1:].isdigit():
            return None
        microsecond = int(fraction[1:7].ljust(6, "0"))
    try:
        return datetime.time(
            int(value[0:2]),
            int(value[2:4]),
            int(value[4:6]),
            microsecond,
        )
    except ValueError:
        return None


def parse_date_field(value: str) -> datetime.date | None:
    """Parse a ``ddmmyy`` UTC date field.

    Two-digit years above 80 are read as 19xx, the rest as 20xx.

    Example:
        >>> parse_date_field("230394")
        datetime.date(1994, 3, 23)
    """
    if len(value) != 6 or not value.isdigit():
        return None
    day, month, year = int(value[0:2]), int(value[2:4]), int(value[4:6])
    year += 1900 if year > _CENTURY_PIVOT else 2000
    try:
        return datetime.date(year, month, day)
    except ValueError:
        return None


def _parse_coordinate_parts(value: str) -> tuple[int, float] | None:
    """Parse NMEA coordinate into degrees and minutes components.

    NMEA coordinates use DDDMM.MMMM format where:
    - DDD (or DD for latitude) = degrees
    - MM.MMMM = decimal minutes

    The decimal point position determines the split between degrees and minutes:
    the 2 digits before the decimal point are always minutes. A value without a
    decimal point carries whole minutes.

    Example:
        >>> _parse_coordinate_parts("4807.038")  # 48° 07.038'
        (48, 7.038)
        >>> _parse_coordinate_parts("01131.000")  # 11° 31.000'
        (11, 31.0)
    """
    dot_position = value.find(".")
    if dot_position == -1:
        dot_position = len(value)
    head = value[: dot_position - 2]
    if dot_position < 3 or not head.isdigit() or not value[dot_position - 2 : dot_position].isdigit():
        return None
    try:
        minutes = float(value[dot_position - 2 :])
    except ValueError:
        return None
    if minutes >= 60.0:
        return None
    return int(head), minutes


def convert_to_decimal_degrees(
    value: str,
    direction: str,
) -> float | None:
    """Convert NMEA coordinate (DDDMM.MMMM) to decimal degrees.

    NMEA uses degrees-minutes format with a hemisphere indicator.
    This function converts to decimal degrees with sign convention:
    - North/East = positive
    - South/West = negative

    The conversion formula is:
        decimal_degrees = degrees + (minutes / 60)

    Args:
        value: Coordinate in DDDMM.MMMM format (e.g., "4807.038")
        direction: Hemisphere indicator ("N", "S", "E", or "W")

    Returns:
        Decimal degrees (positive for N/E, negative for S/W),
        or None if either field is empty or unparseable

    Example:
        >>> convert_to_decimal_degrees("4916.45", "N")
        49.274166...
        >>> convert_to_decimal_degrees("12311.12", "W")
        -123.185333...
    """
    if not value or not direction:
        return None

    parts = _parse_coordinate_parts(value)
    if parts is None:
        return None

    degrees, minutes = parts
    decimal_degrees = degrees + minutes / 60.0

    if direction in ("S", "W"):
        return -decimal_degrees

    return decimal_degrees


def format_coordinate(degrees: float, axis: str, decimals: int = 6) -> tuple[str, str]:
    """Encode signed decimal degrees as an NMEA ``(value, hemisphere)`` pair.

    Minutes are rounded before splitting so a value never renders as
    ``60.000000`` minutes.

    Example:
        >>> format_coordinate(48.1173, "lat", decimals=3)
        ('4807.038', 'N')
        >>> format_coordinate(-11.516666667, "lon", decimals=3)
        ('01131.000', 'W')
    """
    positive, negative = _HEMISPHERES[axis]
    total_minutes = round(abs(degrees) * 60.0, decimals)
    whole_degrees, minutes = divmod(total_minutes, 60.0)
    width = _DEGREE_WIDTH[axis]
    value = f"{int(whole_degrees):0{width}d}{minutes:0{decimals + 3}.{decimals}f}"
    return value, negative if degrees < 0 else positive


class FieldReader:
    """Typed access to the fields of one sentence.

    Index 0 is the address field (e.g. ``"GNGGA"``), so indices match the
    field diagrams in the decoder modules. Fields past the end of a short
    sentence read as empty.

    Every converter returns ``None`` for an empty field. A non-empty field
    that fails to convert also returns ``None`` and its name is appended to
    ``errors``; ``parsed`` counts fields that converted successfully.
    """

    def __init__(self, fields: Sequence[str]) -> None:
        self._fields = fields
        self.errors: list[str] = []
        self.parsed = 0

    def __len__(self) -> int:
        return len(self._fields)

    def raw(self, index: int) -> str:
        if index >= len(self._fields):
            return ""
        return self._fields[index].strip()

    def _record(self, name: str, value: str, result: object) -> None:
        if result is not None:
            self.parsed += 1
        elif value:
            self.errors.append(name)

    def float_field(self, index: int, name: str) -> float | None:
        value = self.raw(index)
        result = parse_float_field(value)
        self._record(name, value, result)
        return result

    def int_field(self, index: int, name: str) -> int | None:
        value = self.raw(index)
        result = parse_int_field(value)
        self._record(name, value, result)
        return result

    def string_field(self, index: int) -> str | None:
        result = parse_string_field(self.raw(index))
        if result is not None:
            self.parsed += 1
        return result

    def choice_field(self, index: int, name: str, allowed: str) -> str | None:
        """Single-letter indicator restricted to the letters in *allowed*."""
        value = self.raw(index)
        result = value if len(value) == 1 and value in allowed else None
        self._record(name, value, result)
        return result

    def time_field(self, index: int, name: str) -> datetime.time | None:
        value = self.raw(index)
        result = parse_time_field(value)
        self._record(name, value, result)
        return result

    def date_field(self, index: int, name: str) -> datetime.date | None:
        value = self.raw(index)
        result = parse_date_field(value)
        self._record(name, value, result)
        return result

    def coordinate_field(self, index: int, name: str, axis: str) -> float | None:
        """Coordinate at *index* with its hemisphere letter at ``index + 1``.

        The hemisphere must belong to *axis* (``"lat"`` or ``"lon"``) and the
        result must lie within the axis range.
        """
        value = self.raw(index)
        direction = self.raw(index + 1)
        if not value and not direction:
            return None
        result = None
        if direction in _HEMISPHERES[axis]:
            result = convert_to_decimal_degrees(value, direction)
        if result is not None and abs(result) > _AXIS_LIMITS[axis]:
            result = None
        self._record(name, value or direction, result)
        return result
