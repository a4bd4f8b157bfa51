"""LineReader: frames a byte stream into candidate NMEA lines.

Reading strategy:
    Bytes are pulled from the stream in chunks (``read1`` when the stream
    offers it, so a pipe delivers whatever is available without waiting for a
    full chunk) and appended to a buffer. Complete lines are cut at LF; a
    preceding CR is dropped. Partial data stays buffered across reads.

    A line longer than ``max_line_length`` bytes is reported once as a
    ``FramingError`` and the remainder up to the next terminator is
    discarded, so the buffer never grows past the bound no matter what the
    input looks like.

End of input ends iteration normally. Any other read failure is raised as
``InputStreamError``.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

from nmeastat.errors import FramingError, InputStreamError

__all__ = ["DEFAULT_MAX_LINE_LENGTH", "LineReader", "RawLine"]

logger = logging.getLogger(__name__)

# NMEA 0183 caps sentences at 82 characters; leave room for receivers that
# exceed it with high-precision fields or proprietary sentences.
DEFAULT_MAX_LINE_LENGTH = 128

_CHUNK_SIZE = 4096


@dataclass(frozen=True)
class RawLine:
    """One framed line.

    Attributes:
        sequence: 1-based arrival index among all framed lines, including
            over-length ones.
        text: Line content without its terminator, decoded as ASCII with
            undecodable bytes replaced.
    """

    sequence: int
    text: str


def _decode(data: bytes) -> str:
    return data.decode("ascii", errors="replace")


class LineReader:
    """Iterator over the lines of a binary stream.

    Typical use::

        reader = LineReader(sys.stdin.buffer)
        for item in reader:
            if isinstance(item, FramingError):
                count(item)
            else:
                handle(item.text)

    The reader does not own the stream; the caller closes it.

    Args:
        stream: Binary stream to read from.
        max_line_length: Longest accepted line in bytes, terminator excluded.
        chunk_size: Maximum bytes requested per read.
    """

    def __init__(
        self,
        stream: BinaryIO,
        max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
        chunk_size: int = _CHUNK_SIZE,
    ) -> None:
        self._stream = stream
        self._max_line_length = max_line_length
        self._chunk_size = chunk_size
        self._buffer = bytearray()
        self._discarding = False
        self._sequence = 0
        self._cancelled = False

    def cancel(self) -> None:
        """Stop iteration before the next line is yielded.

        A read that is already blocked waiting for input is not interrupted;
        iteration ends as soon as it returns.
        """
        self._cancelled = True

    def _read_chunk(self) -> bytes:
        """Read one chunk; ``b""`` means end of input.

        Raises:
            InputStreamError: If the read fails for any other reason.
        """
        read = getattr(self._stream, "read1", self._stream.read)
        try:
            return read(self._chunk_size)
        except ValueError as e:
            # Reading a closed stream after cancel() is an orderly stop
            if self._cancelled:
                return b""
            raise InputStreamError(f"input stream unusable: {e}") from e
        except OSError as e:
            raise InputStreamError(f"input stream read failed: {e}") from e

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def _overlength(self, data: bytes) -> FramingError:
        self._next_sequence()
        logger.debug("discarding line longer than %d bytes", self._max_line_length)
        return FramingError(
            _decode(data[: self._max_line_length]),
            f"line exceeds {self._max_line_length} bytes",
        )

    def _frame(self, data: bytes) -> RawLine | FramingError | None:
        """Turn one terminated line into an item, or None for a blank line."""
        if data.endswith(b"\r"):
            data = data[:-1]
        if len(data) > self._max_line_length:
            return self._overlength(data)
        if not data.strip():
            return None
        return RawLine(self._next_sequence(), _decode(data))

    def _drain_buffer(self) -> Iterator[RawLine | FramingError]:
        """Yield every complete line in the buffer, keeping the partial tail."""
        while not self._cancelled:
            newline = self._buffer.find(b"\n")
            if newline == -1:
                break
            data = bytes(self._buffer[:newline])
            del self._buffer[: newline + 1]
            if self._discarding:
                self._discarding = False
                continue
            item = self._frame(data)
            if item is not None:
                yield item

        if self._discarding:
            self._buffer.clear()
        elif len(self._buffer) > self._max_line_length + 1:
            # +1 leaves room for a CR whose LF has not arrived yet
            self._discarding = True
            data = bytes(self._buffer)
            self._buffer.clear()
            yield self._overlength(data)

    def __iter__(self) -> Iterator[RawLine | FramingError]:
        """Yield framed lines until end of input or cancellation.

        Yields:
            ``RawLine`` for each complete line, ``FramingError`` for each
            over-length one. A final unterminated line is yielded at end of
            input.

        Raises:
            InputStreamError: If reading fails other than by end of input.
        """
        while not self._cancelled:
            chunk = self._read_chunk()
            if not chunk:
                break
            self._buffer.extend(chunk)
            yield from self._drain_buffer()

        if self._buffer and not self._discarding and not self._cancelled:
            item = self._frame(bytes(self._buffer))
            self._buffer.clear()
            if item is not None:
                yield item
