"""Tests for merging sentences into GnssState."""

import datetime

import pytest

from nmeastat.aggregator import Aggregator
from nmeastat.nmea import FixQuality, build_sentence, parse
from nmeastat.state import FieldGroup, GnssState

GGA = "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47"
GGA_RTK = "$GPGGA,123519,4807.038,N,01131.000,E,4,12,0.5,545.4,M,46.9,M,,*45"
GGA_NO_ALTITUDE = "$GPGGA,123520,4807.038,N,01131.000,E,1,08,0.9,,M,46.9,M,,*63"
GGA_NO_FIX = "$GNGGA,123519.00,,,,,0,00,,,,,,,*5B"
GSA_3D = "$GPGSA,A,3,04,05,,09,12,,,24,,,,,2.5,1.3,2.1*39"
GSA_NO_FIX = "$GPGSA,A,1,,,,,,,,,,,,,,,*1E"
VTG = "$GNVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B"
RMC_BEFORE_MIDNIGHT = "$GPRMC,235959.00,A,4807.038,N,01131.000,E,022.4,084.4,311223,003.1,W*47"
GGA_AFTER_MIDNIGHT = "$GPGGA,000001.00,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*65"
GLL = "$GPGLL,4916.45,N,12311.12,W,225444,A,*1D"
ZDA = "$GPZDA,201530.00,04,07,2002,00,00*60"
GSV_1_OF_3 = "$GPGSV,3,1,09,01,40,083,46,02,17,308,41,12,07,344,39,14,22,228,45*75"
GSV_2_OF_3 = "$GPGSV,3,2,09,15,53,012,47,17,42,110,30,19,09,301,22,22,60,190,40*79"
GSV_3_OF_3 = "$GPGSV,3,3,09,30,11,045,20*40"
GLGSV = "$GLGSV,1,1,02,65,30,120,35,66,45,200,38*6A"


@pytest.fixture
def aggregator(clock) -> Aggregator:
    return Aggregator(gsv_timeout=2.0, publish_interval=1.0, clock=clock)


def feed(aggregator: Aggregator, *lines: str) -> GnssState:
    for line in lines:
        aggregator.ingest(parse(line))
    return aggregator.state


class TestInitialState:
    def test_no_fix_and_unknown_values(self):
        state = GnssState.initial()
        assert state.fix_quality is FixQuality.NO_FIX
        assert state.latitude is None and state.longitude is None
        assert state.satellites_in_view == ()
        assert dict(state.last_updated) == {}
        assert state.diagnostics.sentences == 0


class TestMerge:
    def test_gga_sets_position_fix_and_altitude(self, aggregator, clock):
        snapshot = aggregator.ingest(parse(GGA))
        assert snapshot is not None
        assert snapshot.fix_quality is FixQuality.GPS
        assert snapshot.latitude == pytest.approx(48.1173)
        assert snapshot.longitude == pytest.approx(11.516667, abs=1e-6)
        assert snapshot.altitude_meters == pytest.approx(545.4)
        assert snapshot.satellites_used == 8
        assert snapshot.hdop == pytest.approx(0.9)
        for group in (FieldGroup.POSITION, FieldGroup.ALTITUDE, FieldGroup.FIX, FieldGroup.DOP):
            assert snapshot.last_updated[group] == clock.now
        assert FieldGroup.VELOCITY not in snapshot.last_updated

    def test_same_sentence_twice_is_idempotent(self, aggregator):
        first = aggregator.ingest(parse(GGA))
        second = aggregator.ingest(parse(GGA))
        assert second is None
        assert aggregator.state.same_values(first)
        assert aggregator.state.diagnostics.sentences == 2

    def test_corrupted_sentence_leaves_state_unchanged(self, aggregator):
        before = feed(aggregator, GGA)
        corrupted = GGA[:20] + chr(ord(GGA[20]) ^ 0x01) + GGA[21:]
        after = feed(aggregator, corrupted)
        assert after.same_values(before)
        assert after.last_updated == before.last_updated
        assert after.diagnostics.checksum_mismatches == 1

    def test_empty_field_replaces_previous_value(self, aggregator):
        state = feed(aggregator, GGA, GGA_NO_ALTITUDE)
        assert state.altitude_meters is None
        assert state.latitude == pytest.approx(48.1173)

    def test_no_fix_gga_clears_position(self, aggregator):
        state = feed(aggregator, GGA, GGA_NO_FIX)
        assert state.fix_quality is FixQuality.NO_FIX
        assert state.latitude is None

    def test_vtg_sets_velocity(self, aggregator):
        state = feed(aggregator, VTG)
        assert state.speed_knots == pytest.approx(5.5)
        assert state.course_degrees == pytest.approx(54.7)
        assert FieldGroup.VELOCITY in state.last_updated

    def test_gll_sets_position(self, aggregator):
        state = feed(aggregator, GLL)
        assert state.latitude == pytest.approx(49.2741667, abs=1e-6)
        assert state.longitude == pytest.approx(-123.1853333, abs=1e-6)
        assert state.fix_quality is FixQuality.NO_FIX

    def test_unknown_fix_code_becomes_unknown(self, aggregator):
        state = feed(aggregator, "$GPGGA,123519,4807.038,N,01131.000,E,9,08,0.9,545.4,M,46.9,M,,*4F")
        assert state.fix_quality is None
        assert state.diagnostics.field_errors == 1


class TestGsaFix:
    def test_gsa_upgrades_no_fix_to_gps(self, aggregator):
        state = feed(aggregator, GSA_3D)
        assert state.fix_quality is FixQuality.GPS
        assert state.fix_mode == 3
        assert state.pdop == pytest.approx(2.5)
        assert state.hdop == pytest.approx(1.3)
        assert state.vdop == pytest.approx(2.1)

    def test_gsa_keeps_better_gga_quality(self, aggregator):
        state = feed(aggregator, GGA_RTK, GSA_3D)
        assert state.fix_quality is FixQuality.RTK

    def test_gsa_mode_one_means_no_fix(self, aggregator):
        state = feed(aggregator, GGA_RTK, GSA_NO_FIX)
        assert state.fix_quality is FixQuality.NO_FIX
        assert state.fix_mode == 1


class TestTime:
    def test_time_without_date_is_unknown(self, aggregator):
        assert feed(aggregator, GGA).utc_timestamp is None

    def test_zda_gives_date_and_time(self, aggregator):
        state = feed(aggregator, ZDA)
        assert state.utc_timestamp == datetime.datetime(
            2002, 7, 4, 20, 15, 30, tzinfo=datetime.timezone.utc
        )

    def test_gga_time_combined_with_rmc_date(self, aggregator):
        state = feed(aggregator, RMC_BEFORE_MIDNIGHT)
        assert state.utc_timestamp == datetime.datetime(
            2023, 12, 31, 23, 59, 59, tzinfo=datetime.timezone.utc
        )

    def test_midnight_rollover_advances_date(self, aggregator):
        state = feed(aggregator, RMC_BEFORE_MIDNIGHT, GGA_AFTER_MIDNIGHT)
        assert state.utc_timestamp == datetime.datetime(
            2024, 1, 1, 0, 0, 1, tzinfo=datetime.timezone.utc
        )


class TestSatellites:
    def test_complete_group_published(self, aggregator):
        state = feed(aggregator, GSV_1_OF_3, GSV_2_OF_3)
        assert state.satellites_in_view == ()
        state = feed(aggregator, GSV_3_OF_3)
        assert len(state.satellites_in_view) == 9
        assert not state.satellites_incomplete
        assert FieldGroup.SATELLITES_IN_VIEW in state.last_updated

    def test_missing_part_times_out_incomplete(self, aggregator, clock):
        feed(aggregator, GSV_1_OF_3, GSV_2_OF_3)
        clock.advance(1.0)
        aggregator.expire()
        assert aggregator.state.satellites_in_view == ()
        clock.advance(1.5)
        snapshot = aggregator.expire()
        assert snapshot is not None
        assert len(snapshot.satellites_in_view) == 8
        assert snapshot.satellites_incomplete
        assert snapshot.diagnostics.gsv_timeouts == 1

    def test_talkers_concatenated_in_order(self, aggregator):
        state = feed(aggregator, GSV_1_OF_3, GSV_2_OF_3, GSV_3_OF_3, GLGSV)
        assert [sat.talker for sat in state.satellites_in_view] == ["GL"] * 2 + ["GP"] * 9
        assert [sat.prn for sat in state.satellites_in_view[:2]] == [65, 66]

    def test_flush_publishes_pending_group(self, aggregator):
        feed(aggregator, GSV_1_OF_3)
        state = aggregator.flush()
        assert len(state.satellites_in_view) == 4
        assert state.satellites_incomplete


class TestSatelliteRetention:
    def test_talkers_kept_are_capped(self, clock):
        aggregator = Aggregator(max_pending_groups=3, clock=clock)
        for i in range(50):
            aggregator.ingest(parse(build_sentence(f"X{i:03d}GSV,1,1,01,{i + 1:02d},40,083,46")))
        state = aggregator.state
        assert [sat.talker for sat in state.satellites_in_view] == ["X047", "X048", "X049"]
        assert [sat.prn for sat in state.satellites_in_view] == [48, 49, 50]

    def test_cap_keeps_recently_flushed_talker(self, clock):
        aggregator = Aggregator(max_pending_groups=2, clock=clock)
        state = feed(aggregator, GLGSV, GSV_1_OF_3, GSV_2_OF_3, GSV_3_OF_3, GLGSV)
        state = feed(aggregator, build_sentence("GAGSV,1,1,01,07,40,083,46"))
        assert {sat.talker for sat in state.satellites_in_view} == {"GA", "GL"}

    def test_silent_talker_dropped(self, aggregator, clock):
        feed(aggregator, GLGSV)
        for _ in range(10):
            clock.advance(1.0)
            feed(aggregator, GSV_1_OF_3, GSV_2_OF_3, GSV_3_OF_3)
            aggregator.expire()
        talkers = {sat.talker for sat in aggregator.state.satellites_in_view}
        assert talkers == {"GP"}

    def test_talker_within_retention_kept(self, aggregator, clock):
        feed(aggregator, GLGSV)
        clock.advance(4.0)
        aggregator.expire()
        assert len(aggregator.state.satellites_in_view) == 2

    def test_retirement_published_without_refreshing_stamp(self, aggregator, clock):
        feed(aggregator, GLGSV)
        clock.advance(6.0)
        snapshot = aggregator.expire()
        assert snapshot is not None
        assert snapshot.satellites_in_view == ()
        assert not snapshot.satellites_incomplete
        assert snapshot.last_updated[FieldGroup.SATELLITES_IN_VIEW] == 1000.0


class TestDiagnostics:
    def test_failures_counted_by_kind(self, aggregator):
        state = feed(
            aggregator,
            "no start marker",
            GGA[:-2] + "00",
            "$GPGGA,123519,4807.038*45",
            "$GPTXT,01,01,02,hello*2F",
        )
        d = state.diagnostics
        assert d.framing_errors == 1
        assert d.checksum_mismatches == 1
        assert d.field_errors == 1
        assert d.unsupported == 1
        assert d.sentences == 1
        assert state.same_values(GnssState.initial())


class TestPublication:
    def test_counter_only_change_is_throttled(self, aggregator, clock):
        assert aggregator.ingest(parse(GGA)) is not None
        clock.advance(0.5)
        assert aggregator.ingest(parse("$GPTXT,01,01,02,hello*2F")) is None
        clock.advance(0.5)
        snapshot = aggregator.expire()
        assert snapshot is not None
        assert snapshot.diagnostics.unsupported == 1
        assert aggregator.expire() is None

    def test_value_change_published_immediately(self, aggregator, clock):
        aggregator.ingest(parse(GGA))
        clock.advance(0.1)
        snapshot = aggregator.ingest(parse(GGA_NO_ALTITUDE))
        assert snapshot is not None
        assert snapshot.altitude_meters is None

    def test_freshness_refresh_republished_after_interval(self, aggregator, clock):
        aggregator.ingest(parse(GGA))
        clock.advance(1.5)
        snapshot = aggregator.ingest(parse(GGA))
        assert snapshot is not None
        assert snapshot.last_updated[FieldGroup.POSITION] == clock.now


class TestStaleness:
    def test_group_goes_stale(self, aggregator, clock):
        state = feed(aggregator, GGA)
        assert not state.is_stale(FieldGroup.POSITION, clock.now + 4.0, threshold=5.0)
        assert state.is_stale(FieldGroup.POSITION, clock.now + 6.0, threshold=5.0)
        assert state.age(FieldGroup.POSITION, clock.now + 6.0) == pytest.approx(6.0)

    def test_never_updated_group_is_not_stale(self, aggregator, clock):
        state = feed(aggregator, GGA)
        assert state.age(FieldGroup.VELOCITY, clock.now) is None
        assert not state.is_stale(FieldGroup.VELOCITY, clock.now + 100.0, threshold=5.0)
