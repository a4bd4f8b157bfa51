"""nmeastat: live GNSS status from an NMEA 0183 stream."""

from nmeastat.aggregator import Aggregator
from nmeastat.config import Settings
from nmeastat.pipeline import Pipeline
from nmeastat.publisher import SnapshotPublisher, Subscription
from nmeastat.reader import LineReader, RawLine
from nmeastat.state import Diagnostics, FieldGroup, GnssState

__all__ = [
    "Aggregator",
    "Diagnostics",
    "FieldGroup",
    "GnssState",
    "LineReader",
    "Pipeline",
    "RawLine",
    "Settings",
    "SnapshotPublisher",
    "Subscription",
]
