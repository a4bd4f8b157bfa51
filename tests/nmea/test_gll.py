"""Tests for GLL sentence parsing."""

import datetime

import pytest

from nmeastat.nmea import GLLData, parse


def parse_gll(sentence: str) -> GLLData:
    result = parse(sentence)
    assert isinstance(result, GLLData)
    return result


class TestParseGLL:
    def test_valid_gll(self):
        result = parse_gll("$GPGLL,4916.45,N,12311.12,W,225444,A,*1D")
        assert result.latitude_degrees == pytest.approx(49.2741667, abs=1e-6)
        assert result.longitude_degrees == pytest.approx(-123.1853333, abs=1e-6)
        assert result.utc_time == datetime.time(22, 54, 44)
        assert result.valid
        assert result.mode is None

    def test_gll_invalid_status_with_mode(self):
        result = parse_gll("$GPGLL,4916.45,N,12311.12,W,225444,V,N*44")
        assert result.status == "V" and not result.valid
        assert result.mode == "N"
