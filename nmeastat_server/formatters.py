"""JSON formatting of GNSS snapshots."""

import json
from typing import Any

from nmeastat.nmea import SatelliteInfo
from nmeastat.state import GnssState

__all__ = ["format_snapshot_message", "snapshot_to_dict"]


def _satellite_to_dict(satellite: SatelliteInfo) -> dict[str, Any]:
    return {
        "talker": satellite.talker,
        "prn": satellite.prn,
        "elevation": satellite.elevation_degrees,
        "azimuth": satellite.azimuth_degrees,
        "snr": satellite.snr_db,
    }


def snapshot_to_dict(state: GnssState) -> dict[str, Any]:
    """Convert a snapshot into the JSON-ready shape served to clients.

    Unknown values are ``null``. ``lastUpdated`` maps field group names to
    epoch seconds and only lists groups that were ever updated.
    """
    diagnostics = state.diagnostics
    return {
        "fixQuality": state.fix_quality.label if state.fix_quality is not None else None,
        "fixMode": state.fix_mode,
        "latitude": state.latitude,
        "longitude": state.longitude,
        "altitudeMeters": state.altitude_meters,
        "speedKnots": state.speed_knots,
        "courseDegrees": state.course_degrees,
        "satellitesUsed": state.satellites_used,
        "satellitesInView": [_satellite_to_dict(sat) for sat in state.satellites_in_view],
        "satellitesIncomplete": state.satellites_incomplete,
        "hdop": state.hdop,
        "vdop": state.vdop,
        "pdop": state.pdop,
        "utcTimestamp": state.utc_timestamp.isoformat() if state.utc_timestamp else None,
        "lastUpdated": {group.value: stamp for group, stamp in state.last_updated.items()},
        "diagnostics": {
            "sentences": diagnostics.sentences,
            "framingErrors": diagnostics.framing_errors,
            "checksumMismatches": diagnostics.checksum_mismatches,
            "unsupported": diagnostics.unsupported,
            "fieldErrors": diagnostics.field_errors,
            "gsvTimeouts": diagnostics.gsv_timeouts,
        },
    }


def format_snapshot_message(state: GnssState) -> str:
    """Serialize a snapshot into a JSON string for WebSocket transmission."""
    return json.dumps(snapshot_to_dict(state))
