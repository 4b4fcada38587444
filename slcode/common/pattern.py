"""
Projectable patterns and the ordered sequences that carry them to a projector.

A :class:`PatternSequence` keeps patterns in projection order. Patterns are
validated when they enter the sequence; sequence-wide uniformity (same bit
depth, same color...) is left to consumers through the ``equal_*`` predicates.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

import numpy as np

from slcode.core.constants import (
    FILE_DOES_NOT_EXIST,
    PATTERN_BITDEPTH_INVALID,
    PATTERN_COLOR_INVALID,
    PATTERN_DATA_TYPE_INVALID,
    PATTERN_EXPOSURE_TOO_SHORT,
    PATTERN_IMAGE_DATA_EMPTY,
    PATTERN_IMAGE_FILE_EMPTY,
    PATTERN_PARAMETERS_EMPTY,
    PATTERN_PERIOD_TOO_SHORT,
    PATTERN_SEQUENCE_INDEX_OUT_OF_RANGE,
)
from slcode.core.parameters import Parameters, register_enum_type
from slcode.core.result import Result

logger = logging.getLogger(__name__)


@register_enum_type
class Bitdepth(Enum):
    """Pattern pixel depth."""
    MONO_1BPP = "mono_1bpp"  # Binary pattern
    MONO_2BPP = "mono_2bpp"
    MONO_3BPP = "mono_3bpp"
    MONO_4BPP = "mono_4bpp"
    MONO_5BPP = "mono_5bpp"
    MONO_6BPP = "mono_6bpp"
    MONO_7BPP = "mono_7bpp"
    MONO_8BPP = "mono_8bpp"
    RGB_3BPP = "rgb_3bpp"    # Three sequential MONO_1BPP planes
    RGB_6BPP = "rgb_6bpp"
    RGB_9BPP = "rgb_9bpp"
    RGB_12BPP = "rgb_12bpp"
    RGB_15BPP = "rgb_15bpp"
    RGB_18BPP = "rgb_18bpp"
    RGB_21BPP = "rgb_21bpp"
    RGB_24BPP = "rgb_24bpp"  # Three sequential MONO_8BPP planes
    INVALID = "invalid"


@register_enum_type
class Color(Enum):
    """LEDs used while the pattern is displayed."""
    NONE = "none"
    BLACK = "black"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    CYAN = "cyan"        # Green and blue together
    YELLOW = "yellow"    # Red and green together
    MAGENTA = "magenta"  # Red and blue together
    WHITE = "white"      # All LEDs together
    RGB = "rgb"          # All LEDs sequentially
    INVALID = "invalid"


@register_enum_type
class DataType(Enum):
    """Which payload field of a pattern or capture holds its content."""
    IMAGE_FILE = "image_file"
    IMAGE_DATA = "image_data"
    PARAMETERS = "parameters"
    INVALID = "invalid"


@register_enum_type
class Orientation(Enum):
    """Axis encoded by a pattern, used to select the decode axis."""
    VERTICAL = "vertical"              # Encodes projector columns
    HORIZONTAL = "horizontal"          # Encodes projector rows
    DIAMOND_ANGLE_1 = "diamond_angle_1"
    DIAMOND_ANGLE_2 = "diamond_angle_2"
    INVALID = "invalid"


@dataclass
class Pattern:
    """
    One projectable unit.

    Attributes:
        id: Pattern identifier
        exposure: Exposure time in microseconds
        period: Time between this pattern and the next in microseconds
        bitdepth: Pixel depth
        color: LEDs used
        data_type: Which payload field is used
        orientation: Encoded axis
        image_data: Raster payload for DataType.IMAGE_DATA
        image_file: File payload for DataType.IMAGE_FILE
        parameters: Parameter payload for DataType.PARAMETERS
    """
    id: int = 0
    exposure: int = 0
    period: int = 0
    bitdepth: Bitdepth = Bitdepth.INVALID
    color: Color = Color.INVALID
    data_type: DataType = DataType.INVALID
    orientation: Orientation = Orientation.INVALID
    image_data: Optional[np.ndarray] = None
    image_file: str = ""
    parameters: Parameters = field(default_factory=Parameters)

    def copy(self) -> 'Pattern':
        """Deep copy, including the raster payload."""
        return Pattern(
            id=self.id,
            exposure=self.exposure,
            period=self.period,
            bitdepth=self.bitdepth,
            color=self.color,
            data_type=self.data_type,
            orientation=self.orientation,
            image_data=None if self.image_data is None else self.image_data.copy(),
            image_file=self.image_file,
            parameters=self.parameters.copy()
        )

    def validate(self) -> Result:
        """Check that the enum fields are set and the tagged payload is present."""
        result = Result()

        if self.bitdepth == Bitdepth.INVALID:
            result.add_error(PATTERN_BITDEPTH_INVALID)
            return result

        if self.color == Color.INVALID:
            result.add_error(PATTERN_COLOR_INVALID)
            return result

        if self.data_type == DataType.IMAGE_FILE:
            if not self.image_file:
                result.add_error(PATTERN_IMAGE_FILE_EMPTY)
            elif not os.path.exists(self.image_file):
                result.add_error(FILE_DOES_NOT_EXIST)
        elif self.data_type == DataType.IMAGE_DATA:
            if self.image_data is None or self.image_data.size == 0:
                result.add_error(PATTERN_IMAGE_DATA_EMPTY)
        elif self.data_type == DataType.PARAMETERS:
            if self.parameters.is_empty():
                result.add_error(PATTERN_PARAMETERS_EMPTY)
        else:
            result.add_error(PATTERN_DATA_TYPE_INVALID)

        return result


class PatternSequence:
    """
    Ordered list of patterns plus an attached settings block.

    Insertion order is projection order. Mutation goes through add, extend,
    set and remove; each returns a Result and leaves the sequence unchanged
    on error.
    """

    def __init__(self, patterns: Optional[List[Pattern]] = None):
        self._patterns: List[Pattern] = []
        self.parameters = Parameters()
        if patterns:
            for pattern in patterns:
                self.add(pattern).raise_for_errors()

    def get_count(self) -> int:
        return len(self._patterns)

    def clear(self) -> None:
        self._patterns.clear()

    def add(self, pattern: Union[Pattern, 'PatternSequence']) -> Result:
        """
        Append a copy of a pattern, or every pattern of another sequence.

        Appending a sequence also copies its settings block.

        Args:
            pattern: Pattern or PatternSequence to append

        Returns:
            Result of validating the pattern(s)
        """
        if isinstance(pattern, PatternSequence):
            return self.extend(pattern)
        if not isinstance(pattern, Pattern):
            raise TypeError(f"Expected Pattern, got {type(pattern).__name__}")

        result = pattern.validate()
        if result.has_errors():
            logger.debug(f"Pattern {pattern.id} rejected: {result.get_errors()}")
            return result

        self._patterns.append(pattern.copy())
        return result

    def extend(self, sequence: 'PatternSequence') -> Result:
        """Append every pattern of another sequence and copy its settings."""
        result = Result()
        for pattern in sequence:
            result.add(self.add(pattern))
        self.parameters = sequence.parameters.copy()
        return result

    def get(self, index: int) -> Tuple[Result, Optional[Pattern]]:
        """
        Retrieve a copy of the pattern at an index.

        Returns:
            Result and the pattern (None if the index is out of range)
        """
        result = Result()
        if not self._index_in_range(index):
            result.add_error(PATTERN_SEQUENCE_INDEX_OUT_OF_RANGE)
            return result, None
        return result, self._patterns[index].copy()

    def set(self, index: int, pattern: Pattern) -> Result:
        """Replace the pattern at an index."""
        result = Result()
        if not self._index_in_range(index):
            result.add_error(PATTERN_SEQUENCE_INDEX_OUT_OF_RANGE)
            return result

        result = pattern.validate()
        if result.has_errors():
            return result

        self._patterns[index] = pattern.copy()
        return result

    def remove(self, index: int) -> Result:
        result = Result()
        if not self._index_in_range(index):
            result.add_error(PATTERN_SEQUENCE_INDEX_OUT_OF_RANGE)
            return result
        del self._patterns[index]
        return result

    def set_bitdepths(self, bitdepth: Bitdepth) -> Result:
        result = Result()
        if bitdepth == Bitdepth.INVALID:
            result.add_error(PATTERN_BITDEPTH_INVALID)
            return result
        for pattern in self._patterns:
            pattern.bitdepth = bitdepth
        return result

    def set_colors(self, color: Color) -> Result:
        result = Result()
        if color == Color.INVALID:
            result.add_error(PATTERN_COLOR_INVALID)
            return result
        for pattern in self._patterns:
            pattern.color = color
        return result

    def set_exposures(self, exposure: int) -> Result:
        result = Result()
        if exposure <= 0:
            result.add_error(PATTERN_EXPOSURE_TOO_SHORT)
            return result
        for pattern in self._patterns:
            pattern.exposure = exposure
        return result

    def set_periods(self, period: int) -> Result:
        result = Result()
        if period <= 0:
            result.add_error(PATTERN_PERIOD_TOO_SHORT)
            return result
        for pattern in self._patterns:
            pattern.period = period
        return result

    # Uniformity checks; all are true for an empty sequence
    def equal_bitdepths(self) -> bool:
        return self._all_equal('bitdepth')

    def equal_colors(self) -> bool:
        return self._all_equal('color')

    def equal_exposures(self) -> bool:
        return self._all_equal('exposure')

    def equal_periods(self) -> bool:
        return self._all_equal('period')

    def equal_data_types(self) -> bool:
        return self._all_equal('data_type')

    def _all_equal(self, attribute: str) -> bool:
        if not self._patterns:
            return True
        first = getattr(self._patterns[0], attribute)
        return all(getattr(p, attribute) == first for p in self._patterns[1:])

    def _index_in_range(self, index: int) -> bool:
        return 0 <= index < len(self._patterns)

    def __len__(self):
        return len(self._patterns)

    def __iter__(self) -> Iterator[Pattern]:
        return iter(list(self._patterns))

    def __repr__(self):
        return f"PatternSequence(count={len(self._patterns)})"
