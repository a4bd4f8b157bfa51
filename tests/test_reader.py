"""Tests for LineReader framing."""

import io

import pytest

from nmeastat.errors import FramingError, InputStreamError
from nmeastat.reader import LineReader, RawLine

GGA = b"$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47"


class _ChunkedStream:
    """Stream returning predefined chunks, then end of input."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = list(chunks)

    def read(self, _size: int = -1) -> bytes:
        if not self._chunks:
            return b""
        return self._chunks.pop(0)


class _FailingStream:
    def read(self, _size: int = -1) -> bytes:
        raise OSError("device unplugged")


def _texts(items: list[RawLine | FramingError]) -> list[str]:
    return [item.text for item in items if isinstance(item, RawLine)]


class TestLineReader:
    def test_lf_and_crlf_terminators(self):
        stream = io.BytesIO(b"$A*00\n$B*00\r\n$C*00\n")
        assert _texts(list(LineReader(stream))) == ["$A*00", "$B*00", "$C*00"]

    def test_sequence_numbers_in_arrival_order(self):
        items = list(LineReader(io.BytesIO(b"one\ntwo\nthree\n")))
        assert [item.sequence for item in items] == [1, 2, 3]

    def test_blank_lines_skipped(self):
        items = list(LineReader(io.BytesIO(b"\n\r\none\n  \n")))
        assert items == [RawLine(1, "one")]

    def test_line_split_across_reads(self):
        stream = _ChunkedStream([GGA[:20], GGA[20:50], GGA[50:] + b"\r", b"\n"])
        assert _texts(list(LineReader(stream))) == [GGA.decode()]

    def test_trailing_partial_line_yielded_at_end(self):
        items = list(LineReader(io.BytesIO(b"first\nsecond")))
        assert _texts(items) == ["first", "second"]

    def test_overlength_line_reported_once(self):
        data = b"x" * 300 + b"\n" + GGA + b"\n"
        items = list(LineReader(io.BytesIO(data), max_line_length=128, chunk_size=16))
        assert isinstance(items[0], FramingError)
        assert len(items[0].line) == 128
        assert items[1:] == [RawLine(2, GGA.decode())]

    def test_overlength_line_within_one_chunk(self):
        data = b"y" * 200 + b"\nok\n"
        items = list(LineReader(io.BytesIO(data), max_line_length=128))
        assert isinstance(items[0], FramingError)
        assert _texts(items) == ["ok"]

    def test_line_at_limit_accepted(self):
        line = b"z" * 128
        items = list(LineReader(io.BytesIO(line + b"\r\n"), max_line_length=128))
        assert items == [RawLine(1, line.decode())]

    def test_non_ascii_bytes_replaced(self):
        items = list(LineReader(io.BytesIO(b"$GP\xffGGA\n")))
        assert items[0].text == "$GP�GGA"

    def test_read_failure_raises_input_stream_error(self):
        with pytest.raises(InputStreamError):
            list(LineReader(_FailingStream()))

    def test_cancel_stops_iteration(self):
        reader = LineReader(io.BytesIO(b"one\ntwo\n" * 1000), chunk_size=8)
        received = []
        for item in reader:
            received.append(item)
            reader.cancel()
        assert len(received) == 1
