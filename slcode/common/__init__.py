"""Data model shared by the codecs: patterns, captures and correspondence maps."""

from .pattern import Pattern, PatternSequence, Bitdepth, Color, DataType, Orientation
from .capture import Capture, CaptureSequence, CaptureDataType
from .correspondence_map import CorrespondenceMap

__all__ = [
    'Pattern',
    'PatternSequence',
    'Bitdepth',
    'Color',
    'DataType',
    'Orientation',
    'Capture',
    'CaptureSequence',
    'CaptureDataType',
    'CorrespondenceMap',
]
