"""NMEA 0183 sentence parser.

``parse()`` is a pure function of one line. It performs, in order:
    1. Whitespace stripping (handles \\r\\n line endings)
    2. Start marker check                       -> FramingError
    3. Checksum extraction                       -> FramingError when the
       "*HH" tail is missing or malformed
    4. Checksum validation                       -> ChecksumMismatch
    5. Address split into talker ID and type code
    6. Dispatch to the decoder for that type     -> FieldParseError when the
       sentence is truncated or no field could be decoded
    7. Unknown type codes                        -> UnsupportedSentence
"""

import logging
from collections.abc import Callable

from nmeastat.errors import ChecksumMismatch, FieldParseError, FramingError, ParseError
from nmeastat.nmea import gga, gll, gsa, gsv, rmc, vtg, zda
from nmeastat.nmea.checksum import START_MARKERS, compute_checksum, split_checksum
from nmeastat.nmea.fields import FieldReader
from nmeastat.nmea.types import Sentence, UnsupportedSentence

__all__ = ["parse"]

logger = logging.getLogger(__name__)

_TYPE_CODE_LENGTH = 3

_Decoder = Callable[[str, FieldReader], Sentence]

# sentence type -> (decoder, minimum number of fields including the address)
_DECODERS: dict[str, tuple[_Decoder, int]] = {
    "GGA": (gga.decode_gga, gga.MINIMUM_FIELD_COUNT),
    "RMC": (rmc.decode_rmc, rmc.MINIMUM_FIELD_COUNT),
    "GSA": (gsa.decode_gsa, gsa.MINIMUM_FIELD_COUNT),
    "GSV": (gsv.decode_gsv, gsv.MINIMUM_FIELD_COUNT),
    "VTG": (vtg.decode_vtg, vtg.MINIMUM_FIELD_COUNT),
    "GLL": (gll.decode_gll, gll.MINIMUM_FIELD_COUNT),
    "ZDA": (zda.decode_zda, zda.MINIMUM_FIELD_COUNT),
}


def _split_address(address: str) -> tuple[str, str] | None:
    """Split ``"GNGGA"`` into ``("GN", "GGA")``.

    The last three characters select the sentence type; whatever precedes
    them is the talker ID (empty for bare addresses, ``"P"`` for
    proprietary sentences like ``PUBX``).
    """
    if len(address) < _TYPE_CODE_LENGTH or not address.isalnum():
        return None
    return address[:-_TYPE_CODE_LENGTH], address[-_TYPE_CODE_LENGTH:]


def _check_framing(line: str) -> tuple[str, ParseError | None]:
    """Return the checksum-covered content, or the reason the line is unusable."""
    if not line.startswith(START_MARKERS):
        return "", FramingError(line, "missing start marker")

    parts = split_checksum(line)
    if parts is None:
        return "", FramingError(line, "missing or malformed checksum field")

    content, provided = parts
    calculated = compute_checksum(content)
    if calculated != int(provided, 16):
        return "", ChecksumMismatch(
            line, f"checksum {provided.upper()} != computed {calculated:02X}"
        )
    return content, None


def parse(line: str) -> Sentence | ParseError:
    """Validate and decode one NMEA line.

    Args:
        line: Candidate sentence text, with or without its line terminator.

    Returns:
        A sentence record from ``nmeastat.nmea.types``, or a ``ParseError``
        subclass describing why the line was rejected. Never raises for
        malformed input.

    Example:
        >>> parse("$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47")
        GGAData(talker='GP', utc_time=datetime.time(12, 35, 19), ...)
        >>> parse("$GPGGA,123519*00")
        ChecksumMismatch(line='$GPGGA,123519*00', reason='checksum 00 != computed ...')
    """
    line = line.strip()

    content, error = _check_framing(line)
    if error is not None:
        return error

    fields = content.split(",")
    address = _split_address(fields[0])
    if address is None:
        return FramingError(line, f"invalid address field {fields[0]!r}")
    talker, sentence_type = address

    entry = _DECODERS.get(sentence_type)
    if entry is None:
        return UnsupportedSentence(talker, sentence_type, tuple(fields[1:]))

    decoder, minimum_field_count = entry
    if len(fields) < minimum_field_count:
        return FieldParseError(
            line,
            f"{sentence_type} needs {minimum_field_count} fields, got {len(fields)}",
        )

    reader = FieldReader(fields)
    sentence = decoder(talker, reader)
    if reader.errors and not reader.parsed:
        return FieldParseError(
            line, f"no usable field in {sentence_type}: {', '.join(reader.errors)}"
        )
    if reader.errors:
        logger.debug("%s%s with malformed fields %s", talker, sentence_type, reader.errors)
    return sentence
