"""
Common interface and configuration for the structured light codecs.

Every codec turns its configuration into a :class:`PatternSequence` to
project, and turns the matching :class:`CaptureSequence` back into a
:class:`CorrespondenceMap`.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

import numpy as np

from slcode.common.capture import CaptureSequence
from slcode.common.correspondence_map import CorrespondenceMap
from slcode.common.pattern import Color, Orientation, PatternSequence
from slcode.core.constants import (
    CAPTURE_SEQUENCE_EMPTY,
    DECODE_LOW_DYNAMIC_RANGE,
    LOW_DYNAMIC_RANGE_LIMIT,
    STRUCTURED_LIGHT_CAPTURE_SEQUENCE_EMPTY,
    STRUCTURED_LIGHT_CAPTURE_SEQUENCE_SIZE_INVALID,
    STRUCTURED_LIGHT_NOT_SETUP,
    STRUCTURED_LIGHT_PATTERN_SIZE_INVALID,
    STRUCTURED_LIGHT_PLATFORM_NOT_SETUP,
    STRUCTURED_LIGHT_SETTINGS_PATTERN_COLOR_MISSING,
    STRUCTURED_LIGHT_SETTINGS_PATTERN_COLUMNS_MISSING,
    STRUCTURED_LIGHT_SETTINGS_PATTERN_ORIENTATION_MISSING,
    STRUCTURED_LIGHT_SETTINGS_PATTERN_ROWS_MISSING,
)
from slcode.core.parameters import Parameters
from slcode.core.result import Result

logger = logging.getLogger(__name__)


class CodingMethod(Enum):
    """Available structured light codings."""
    GRAY_CODE = "gray_code"
    THREE_PHASE = "three_phase"


@dataclass
class StructuredLightConfig:
    """
    Projector geometry shared by every codec.

    Fields left as None have not been set and are reported as missing at setup.
    """
    pattern_rows: Optional[int] = None
    pattern_columns: Optional[int] = None
    pattern_color: Optional[Color] = None
    pattern_orientation: Optional[Orientation] = None

    PARAMETER_NAMES: ClassVar[Dict[str, str]] = {
        'pattern_rows': 'PatternRows',
        'pattern_columns': 'PatternColumns',
        'pattern_color': 'PatternColor',
        'pattern_orientation': 'PatternOrientation',
    }

    @classmethod
    def from_parameters(cls, params: Parameters) -> 'StructuredLightConfig':
        """Build a config from named entries; absent entries keep their defaults."""
        values = {}
        for f in fields(cls):
            name = cls.PARAMETER_NAMES.get(f.name)
            if name and params.contains(name):
                values[f.name] = params.get(name)
        return cls(**values)

    def to_parameters(self) -> Parameters:
        params = Parameters()
        for f in fields(self):
            name = self.PARAMETER_NAMES.get(f.name)
            value = getattr(self, f.name)
            if name and value is not None:
                params.set(name, value)
        return params


def pattern_resolution(orientation: Orientation, columns: int, rows: int) -> int:
    """Number of distinct positions encoded along the pattern axis."""
    if orientation == Orientation.VERTICAL:
        return columns
    if orientation == Orientation.HORIZONTAL:
        return rows
    if orientation in (Orientation.DIAMOND_ANGLE_1, Orientation.DIAMOND_ANGLE_2):
        return columns + rows // 2
    return 0


def pattern_positions(orientation: Orientation, columns: int, rows: int) -> np.ndarray:
    """
    Encoded position of every projector pixel.

    Returns:
        int64 array of shape (rows, columns)
    """
    x = np.arange(columns, dtype=np.int64)[np.newaxis, :]
    y = np.arange(rows, dtype=np.int64)[:, np.newaxis]

    if orientation == Orientation.VERTICAL:
        positions = np.broadcast_to(x, (rows, columns)).copy()
    elif orientation == Orientation.HORIZONTAL:
        positions = np.broadcast_to(y, (rows, columns)).copy()
    elif orientation == Orientation.DIAMOND_ANGLE_1:
        positions = y // 2 + x
    elif orientation == Orientation.DIAMOND_ANGLE_2:
        positions = (rows - y) // 2 + x
    else:
        raise ValueError(f"Orientation {orientation} has no pattern positions")
    return positions


class StructuredLight(ABC):
    """
    Base class for the codecs.

    Subclasses implement ``_setup``, ``generate_pattern_sequence`` and
    ``decode_capture_sequence``. Configuration is written by ``setup`` only.
    """

    config_class = StructuredLightConfig
    method: CodingMethod = None

    def __init__(self):
        self.config = self.config_class()
        self.resolution = 0
        self.sequence_count_total = 0
        self._is_setup = False
        self._projector_set = False
        self._projector_rows = 0
        self._projector_columns = 0

    def set_dlp_platform(self, platform: Any) -> Result:
        """
        Take the pattern resolution from a projector platform.

        The platform must expose ``is_platform_setup()``, ``get_rows()`` and
        ``get_columns()``. Afterwards PatternRows and PatternColumns are no
        longer required at setup.
        """
        result = Result()
        logger.debug("Retrieving projector platform resolution...")

        if not platform.is_platform_setup():
            logger.error("Projector platform has not been set up")
            result.add_error(STRUCTURED_LIGHT_PLATFORM_NOT_SETUP)
            return result

        self._projector_rows = int(platform.get_rows())
        self._projector_columns = int(platform.get_columns())
        self._projector_set = True

        logger.info(f"Projector resolution = {self._projector_columns} by {self._projector_rows}")
        return result

    def setup(self, settings: Union[Parameters, StructuredLightConfig]) -> Result:
        """
        Validate and store the codec configuration.

        Args:
            settings: Parameters block or the codec's config dataclass

        Returns:
            Result with one error per missing required entry
        """
        if isinstance(settings, Parameters):
            config = self.config_class.from_parameters(settings)
        elif isinstance(settings, self.config_class):
            config = self.config_class(**{f.name: getattr(settings, f.name) for f in fields(settings)})
        else:
            raise TypeError(
                f"Expected Parameters or {self.config_class.__name__}, got {type(settings).__name__}"
            )

        self._is_setup = False
        self.sequence_count_total = 0

        if self._projector_set:
            config.pattern_rows = self._projector_rows
            config.pattern_columns = self._projector_columns

        result = self._check_geometry(config)
        if result.has_errors():
            logger.warning(f"{type(self).__name__} setup failed: {result.get_errors()}")
            return result

        self.resolution = pattern_resolution(
            config.pattern_orientation, config.pattern_columns, config.pattern_rows
        )

        result.add(self._setup(config))
        if result.has_errors():
            logger.warning(f"{type(self).__name__} setup failed: {result.get_errors()}")
            return result

        self.config = config
        self._is_setup = True
        logger.info(f"{type(self).__name__} setup complete: resolution {self.resolution}, "
                    f"{self.sequence_count_total} patterns")
        return result

    def is_setup(self) -> bool:
        return self._is_setup

    def get_setup(self) -> Parameters:
        """Effective configuration as a Parameters block."""
        return self.config.to_parameters()

    def get_total_pattern_count(self) -> int:
        """Number of patterns generated, which is also the expected capture count."""
        return self.sequence_count_total

    @abstractmethod
    def _setup(self, config: StructuredLightConfig) -> Result:
        """Codec specific validation. Geometry has already been checked."""

    @abstractmethod
    def generate_pattern_sequence(self) -> Tuple[Result, PatternSequence]:
        """Build the patterns to project, in projection order."""

    @abstractmethod
    def decode_capture_sequence(self, captures: CaptureSequence) -> Tuple[Result, Optional[CorrespondenceMap]]:
        """Decode captures taken of the generated patterns."""

    def _check_geometry(self, config: StructuredLightConfig) -> Result:
        result = Result()
        if not self._projector_set:
            if config.pattern_rows is None:
                result.add_error(STRUCTURED_LIGHT_SETTINGS_PATTERN_ROWS_MISSING)
            if config.pattern_columns is None:
                result.add_error(STRUCTURED_LIGHT_SETTINGS_PATTERN_COLUMNS_MISSING)
        if (config.pattern_rows is not None and config.pattern_columns is not None
                and (config.pattern_rows <= 0 or config.pattern_columns <= 0)):
            result.add_error(STRUCTURED_LIGHT_PATTERN_SIZE_INVALID)
        if config.pattern_color is None:
            result.add_error(STRUCTURED_LIGHT_SETTINGS_PATTERN_COLOR_MISSING)
        if config.pattern_orientation is None or config.pattern_orientation == Orientation.INVALID:
            result.add_error(STRUCTURED_LIGHT_SETTINGS_PATTERN_ORIENTATION_MISSING)
        return result

    def _check_captures(self, captures: CaptureSequence) -> Result:
        """Shape checks run before any pixel is decoded."""
        result = Result()
        if not self._is_setup:
            result.add_error(STRUCTURED_LIGHT_NOT_SETUP)
            return result

        result.add(captures.check_decodable())
        if result.contains_error(CAPTURE_SEQUENCE_EMPTY):
            result.add_error(STRUCTURED_LIGHT_CAPTURE_SEQUENCE_EMPTY)
        if result.has_errors():
            return result

        if captures.get_count() != self.sequence_count_total:
            logger.error(f"Expected {self.sequence_count_total} captures, got {captures.get_count()}")
            result.add_error(STRUCTURED_LIGHT_CAPTURE_SEQUENCE_SIZE_INVALID)
        return result

    def _load_capture_stack(self, captures: CaptureSequence) -> Tuple[Result, Optional[np.ndarray]]:
        """
        Load the captures into one float32 array of shape (count, rows, columns).

        Adds a low dynamic range warning when the stack is nearly flat.
        """
        result, images = captures.load_images()
        if result.has_errors():
            return result, None

        shape = images[0].shape
        if any(image.shape != shape for image in images):
            logger.error("Captures do not share the same image size")
            result.add_error(STRUCTURED_LIGHT_PATTERN_SIZE_INVALID)
            return result, None

        stack = np.stack(images).astype(np.float32)
        if float(stack.max() - stack.min()) < LOW_DYNAMIC_RANGE_LIMIT:
            logger.warning("Captures have a very small dynamic range")
            result.add_warning(DECODE_LOW_DYNAMIC_RANGE)
        return result, stack
