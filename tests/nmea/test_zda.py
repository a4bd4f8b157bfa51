"""Tests for ZDA sentence parsing."""

import datetime

from nmeastat.nmea import ZDAData, parse


def parse_zda(sentence: str) -> ZDAData:
    result = parse(sentence)
    assert isinstance(result, ZDAData)
    return result


class TestParseZDA:
    def test_valid_zda(self):
        result = parse_zda("$GPZDA,201530.00,04,07,2002,00,00*60")
        assert result.utc_time == datetime.time(20, 15, 30)
        assert result.date == datetime.date(2002, 7, 4)
        assert result.local_zone_hours == 0
        assert result.local_zone_minutes == 0

    def test_impossible_date_is_field_error(self):
        result = parse_zda("$GPZDA,201530.00,31,02,2002,00,00*63")
        assert result.date is None
        assert result.utc_time == datetime.time(20, 15, 30)
        assert result.field_errors == ("date",)
