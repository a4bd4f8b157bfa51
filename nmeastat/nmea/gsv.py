"""GSV sentence decoder.

GSV (GNSS Satellites in View) lists every satellite the receiver can see.
Each sentence holds up to four satellite blocks; a complete view is spread
over a group of sentences sharing the talker ID.

GSV Sentence Format:
    $GPGSV,2,1,08,01,40,083,46,02,17,308,41,12,07,344,39,14,22,228,45*75
           | | |  |  |  |   |
           | | |  |  |  |   +-- SNR (dB-Hz, empty when not tracking)
           | | |  |  |  +-- Azimuth (degrees true)
           | | |  |  +-- Elevation (degrees)
           | | |  +-- PRN            (block repeated up to 4 times)
           | | +-- Total satellites in view
           | +-- Sentence number (1-based)
           +-- Total sentences in group

NMEA 4.1 may append a signal ID after the last block; a trailing lone field
is therefore ignored.
"""

from nmeastat.nmea.fields import FieldReader
from nmeastat.nmea.types import GSVData, SatelliteInfo

__all__ = ["MINIMUM_FIELD_COUNT", "decode_gsv"]

# Address, total sentences, sentence number, satellites in view
MINIMUM_FIELD_COUNT = 4

_FIRST_BLOCK_INDEX = 4
_BLOCK_SIZE = 4
_MAX_BLOCKS = 4


def _decode_satellite(
    reader: FieldReader, index: int, talker: str
) -> SatelliteInfo | None:
    """Decode the four-field block starting at *index*.

    Blocks without a usable PRN are skipped; the other three attributes
    stay optional.
    """
    prn = reader.int_field(index, "prn")
    if prn is None:
        return None
    return SatelliteInfo(
        prn=prn,
        elevation_degrees=reader.int_field(index + 1, "elevation"),
        azimuth_degrees=reader.int_field(index + 2, "azimuth"),
        snr_db=reader.int_field(index + 3, "snr"),
        talker=talker,
    )


def _decode_satellites(reader: FieldReader, talker: str) -> tuple[SatelliteInfo, ...]:
    satellites: list[SatelliteInfo] = []
    for block in range(_MAX_BLOCKS):
        index = _FIRST_BLOCK_INDEX + block * _BLOCK_SIZE
        # A lone trailing field is the NMEA 4.1 signal ID, not a PRN
        if index + 1 >= len(reader):
            break
        satellite = _decode_satellite(reader, index, talker)
        if satellite is not None:
            satellites.append(satellite)
    return tuple(satellites)


def decode_gsv(talker: str, reader: FieldReader) -> GSVData:
    """Construct a GSVData object from parsed fields."""
    return GSVData(
        talker=talker,
        total_sentences=reader.int_field(1, "total_sentences"),
        sentence_number=reader.int_field(2, "sentence_number"),
        satellites_in_view=reader.int_field(3, "satellites_in_view"),
        satellites=_decode_satellites(reader, talker),
        field_errors=tuple(reader.errors),
    )
