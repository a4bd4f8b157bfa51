"""GSA sentence decoder.

GSA (GNSS DOP and Active Satellites) reports the fix mode, the PRNs used in
the solution and the dilution-of-precision triple.

GSA Sentence Format:
    $GPGSA,A,3,04,05,,09,12,,,24,,,,,2.5,1.3,2.1*39
           | | |                    | |   |   |
           | | |                    | |   |   +-- VDOP
           | | |                    | |   +-- HDOP
           | | |                    | +-- PDOP
           | | +--------------------+-- PRNs used in the fix (12 slots)
           | +-- Fix mode (1=no fix, 2=2D, 3=3D)
           +-- Selection mode (A=automatic, M=manual)

NMEA 4.1 appends a GNSS system ID after VDOP; it is ignored here.
"""

from nmeastat.nmea.fields import FieldReader
from nmeastat.nmea.types import GSAData

__all__ = ["MINIMUM_FIELD_COUNT", "decode_gsa"]

_PRN_SLOTS = 12
_FIRST_PRN_INDEX = 3
_PDOP_INDEX = _FIRST_PRN_INDEX + _PRN_SLOTS

# Address, selection mode, fix mode, 12 PRN slots, PDOP, HDOP, VDOP
MINIMUM_FIELD_COUNT = _PDOP_INDEX + 3


def _decode_fix_mode(reader: FieldReader) -> int | None:
    fix_mode = reader.choice_field(2, "fix_mode", "123")
    if fix_mode is None:
        return None
    return int(fix_mode)


def _decode_prns(reader: FieldReader) -> tuple[int, ...]:
    prns: list[int] = []
    for slot in range(_PRN_SLOTS):
        prn = reader.int_field(_FIRST_PRN_INDEX + slot, f"prn_{slot}")
        if prn is not None:
            prns.append(prn)
    return tuple(prns)


def decode_gsa(talker: str, reader: FieldReader) -> GSAData:
    """Construct a GSAData object from parsed fields.

    Empty PRN slots are skipped; the resulting tuple keeps the slot order.
    """
    return GSAData(
        talker=talker,
        selection_mode=reader.choice_field(1, "selection_mode", "AM"),
        fix_mode=_decode_fix_mode(reader),
        satellite_prns=_decode_prns(reader),
        position_dilution_of_precision=reader.float_field(_PDOP_INDEX, "pdop"),
        horizontal_dilution_of_precision=reader.float_field(_PDOP_INDEX + 1, "hdop"),
        vertical_dilution_of_precision=reader.float_field(_PDOP_INDEX + 2, "vdop"),
        field_errors=tuple(reader.errors),
    )
