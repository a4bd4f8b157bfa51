"""Helper factories for server tests."""

import dataclasses
import datetime
from types import MappingProxyType

from nmeastat.nmea import FixQuality, SatelliteInfo
from nmeastat.state import Diagnostics, FieldGroup, GnssState


def make_state(fix_quality: FixQuality | None = FixQuality.GPS) -> GnssState:
    return dataclasses.replace(
        GnssState.initial(),
        latitude=45.0,
        longitude=9.0,
        altitude_meters=100.0,
        fix_quality=fix_quality,
        fix_mode=3,
        satellites_used=8,
        satellites_in_view=(SatelliteInfo(12, 7, 344, 39, talker="GP"),),
        hdop=1.0,
        speed_knots=4.5,
        course_degrees=12.3,
        utc_timestamp=datetime.datetime(2024, 5, 1, 12, 0, tzinfo=datetime.timezone.utc),
        last_updated=MappingProxyType({FieldGroup.POSITION: 1700000000.0}),
        diagnostics=Diagnostics(sentences=3, checksum_mismatches=1),
    )
