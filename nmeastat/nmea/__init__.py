"""NMEA 0183 parser for GGA, RMC, GSA, GSV, VTG, GLL and ZDA sentences."""

from nmeastat.nmea.checksum import build_sentence, compute_checksum, validate_checksum
from nmeastat.nmea.fields import convert_to_decimal_degrees, format_coordinate
from nmeastat.nmea.parser import parse
from nmeastat.nmea.types import (
    FixQuality,
    GGAData,
    GLLData,
    GSAData,
    GSVData,
    RMCData,
    SatelliteInfo,
    Sentence,
    UnsupportedSentence,
    VTGData,
    ZDAData,
)

__all__ = [
    "FixQuality",
    "GGAData",
    "GLLData",
    "GSAData",
    "GSVData",
    "RMCData",
    "SatelliteInfo",
    "Sentence",
    "UnsupportedSentence",
    "VTGData",
    "ZDAData",
    "build_sentence",
    "compute_checksum",
    "convert_to_decimal_degrees",
    "format_coordinate",
    "parse",
    "validate_checksum",
]
