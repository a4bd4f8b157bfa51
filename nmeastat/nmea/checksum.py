"""NMEA checksum validation and sentence framing.

NMEA 0183 sentences use a simple XOR checksum for data integrity verification.
The checksum is calculated over all characters between '$' and '*' (exclusive),
then represented as a two-digit hexadecimal number after the '*'. Receivers
emit uppercase digits, but lowercase digits are accepted as well.

Example sentence structure:
    $GNGGA,123519.00,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,*7F
    ^                         checksum content                        ^^
    start                                                          checksum (0x7F = 127)
"""

import string

__all__ = [
    "START_MARKERS",
    "build_sentence",
    "compute_checksum",
    "split_checksum",
    "validate_checksum",
]

# '$' starts ordinary sentences, '!' encapsulated ones (AIS and friends)
START_MARKERS = ("$", "!")


def split_checksum(sentence: str) -> tuple[str, str] | None:
    """Extract the payload content and provided checksum from an NMEA sentence.

    NMEA sentences follow the format: $<content>*<checksum>
    This function separates these components for validation.

    Args:
        sentence: Stripped NMEA sentence string (e.g., "$GNGGA,...*7F")

    Returns:
        A tuple of (content, checksum_hex) if the sentence has valid structure,
        or None if:
        - Missing start delimiter
        - Missing '*' checksum delimiter
        - Checksum is not exactly 2 hexadecimal characters

    Example:
        >>> split_checksum("$GNGGA,123519*7F")
        ('GNGGA,123519', '7F')
    """
    if not sentence.startswith(START_MARKERS) or "*" not in sentence:
        return None

    end = sentence.rindex("*")
    content = sentence[1:end]
    provided = sentence[end + 1 :]

    if len(provided) != 2 or not all(c in string.hexdigits for c in provided):
        return None

    return content, provided


def compute_checksum(content: str) -> int:
    """Calculate the XOR checksum of a content string.

    The NMEA checksum algorithm XORs the ASCII value of each character
    in the content. This is a simple error-detection mechanism that can
    detect single-bit errors and some multi-bit errors.

    Args:
        content: The string between '$' and '*' (exclusive)

    Returns:
        Integer checksum value (0-255)
    """
    result = 0
    for character in content:
        result ^= ord(character)
    return result


def validate_checksum(sentence: str) -> bool:
    """Validate the checksum of an NMEA sentence.

    Args:
        sentence: Complete NMEA sentence including '$', '*', and checksum.
                  May include trailing whitespace/newlines (will be stripped).

    Returns:
        True if the checksum is valid, False if the sentence is malformed or
        the calculated checksum doesn't match the provided one.

    Example:
        >>> validate_checksum("$GNGGA,123519.00,...*7F")
        True
        >>> validate_checksum("$GNGGA,123519.00,...*FF")  # wrong checksum
        False
    """
    parts = split_checksum(sentence.strip())
    if parts is None:
        return False

    content, provided = parts
    return compute_checksum(content) == int(provided, 16)


def build_sentence(content: str, start: str = "$") -> str:
    """Frame a sentence body with its start marker and checksum.

    Example:
        >>> build_sentence("GPGLL,4916.45,N,12311.12,W,225444,A,")
        '$GPGLL,4916.45,N,12311.12,W,225444,A,*1D'
    """
    return f"{start}{content}*{compute_checksum(content):02X}"
