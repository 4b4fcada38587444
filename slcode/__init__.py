"""
slcode - structured light pattern coding.

Generates Gray code and three-phase pattern sequences for a projector and
decodes the matching camera captures into per pixel correspondence maps.

Quick start:
    from slcode import GrayCode, GrayCodeConfig, Orientation, Color
    codec = GrayCode()
    codec.setup(GrayCodeConfig(pattern_rows=1140, pattern_columns=912,
                               pattern_color=Color.WHITE,
                               pattern_orientation=Orientation.VERTICAL,
                               include_inverted=True, pixel_threshold=5))
    result, patterns = codec.generate_pattern_sequence()
"""

# Import version from pyproject.toml to maintain single source of truth
try:
    import importlib.metadata
    __version__ = importlib.metadata.version("slcode")
except (ImportError, importlib.metadata.PackageNotFoundError):
    # Fallback for development installs
    __version__ = "1.0.0"

from .core import Result, Parameters, SlcodeException, StructuredLightError
from .core.constants import INVALID_PIXEL, EMPTY_PIXEL
from .core.logging_config import setup_logging, get_logger, debug_mode
from .common import (
    Pattern,
    PatternSequence,
    Bitdepth,
    Color,
    DataType,
    Orientation,
    Capture,
    CaptureSequence,
    CaptureDataType,
    CorrespondenceMap,
)
from .structured_light import (
    CodingMethod,
    StructuredLight,
    GrayCode,
    GrayCodeConfig,
    ThreePhase,
    ThreePhaseConfig,
    create_structured_light,
    compute_wrapped_phase,
)

__all__ = [
    '__version__',
    'Result',
    'Parameters',
    'SlcodeException',
    'StructuredLightError',
    'INVALID_PIXEL',
    'EMPTY_PIXEL',
    'setup_logging',
    'get_logger',
    'debug_mode',
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
    'CodingMethod',
    'StructuredLight',
    'GrayCode',
    'GrayCodeConfig',
    'ThreePhase',
    'ThreePhaseConfig',
    'create_structured_light',
    'compute_wrapped_phase',
]
