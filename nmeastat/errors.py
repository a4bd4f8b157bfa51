"""Failure types for the ingestion pipeline.

Parse failures are plain records returned by the parser instead of being
raised: a malformed line is an ordinary event on a live NMEA stream and must
never interrupt ingestion. They carry the original text for diagnostics only.

Design Decisions:
    1. Records, not exceptions: ``parse()`` returns ``Sentence | ParseError``
       so callers can route both through the same ordered queue.

    2. Fatal conditions (input stream failure, display unavailable at
       start) are real exceptions and end the run.
"""

from dataclasses import dataclass

__all__ = [
    "ChecksumMismatch",
    "FieldParseError",
    "FramingError",
    "InputStreamError",
    "ParseError",
    "RendererResourceError",
]


@dataclass(frozen=True)
class ParseError:
    """A line that could not be turned into a sentence.

    Attributes:
        line: The offending text as received (possibly truncated for
            over-length lines).
        reason: Short human-readable explanation.
    """

    line: str
    reason: str


@dataclass(frozen=True)
class FramingError(ParseError):
    """Line is garbled: over-length, or lacking a start marker, a
    well-formed ``*HH`` checksum field, or a usable address.
    """


@dataclass(frozen=True)
class ChecksumMismatch(ParseError):
    """Well-formed checksum digits differ from the computed XOR."""


@dataclass(frozen=True)
class FieldParseError(ParseError):
    """Sentence is truncated or none of its fields could be decoded."""


class InputStreamError(Exception):
    """Reading the input stream failed for a reason other than end of input."""


class RendererResourceError(Exception):
    """The display could not be opened when a renderer started."""
