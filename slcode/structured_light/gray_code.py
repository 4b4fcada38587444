"""
Gray code structured light codec.

Each bit-plane of a reflected binary code is projected as a black and white
stripe pattern. Decoding thresholds every plane per camera pixel, assembles
the Gray word MSB first and converts it back to the projector position.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from slcode.common.capture import CaptureSequence
from slcode.common.correspondence_map import CorrespondenceMap
from slcode.common.pattern import Bitdepth, DataType, Pattern, PatternSequence
from slcode.core.constants import (
    DECODE_NO_VALID_PIXELS,
    DEFAULT_FIXED_THRESHOLD,
    GRAY_CODE_PIXEL_THRESHOLD_MISSING,
    GRAY_CODE_REGIONS_REQUIRE_SUB_PIXELS,
    GRAY_CODE_RESOLUTION_TOO_SMALL,
    INVALID_PIXEL,
    PATTERN_VALUE_OFF,
    PATTERN_VALUE_ON,
    STRUCTURED_LIGHT_CAPTURE_SEQUENCE_SIZE_INVALID,
    STRUCTURED_LIGHT_NOT_SETUP,
    STRUCTURED_LIGHT_SETTINGS_SEQUENCE_INCLUDE_INVERTED_MISSING,
)
from slcode.core.result import Result
from .structured_light import (
    CodingMethod,
    StructuredLight,
    StructuredLightConfig,
    pattern_positions,
)

logger = logging.getLogger(__name__)


def binary_to_gray(binary):
    """Convert a binary value (int or integer array) to Gray code."""
    return binary ^ (binary >> 1)


def gray_to_binary(gray, num_bits: int):
    """
    Convert Gray code to binary.

    Args:
        gray: Gray code value (int or integer array)
        num_bits: Number of significant bits in the code

    Returns:
        Binary value with the same type as ``gray``
    """
    binary = gray
    shift = 1
    while shift < num_bits:
        binary = binary ^ (binary >> shift)
        shift <<= 1
    return binary


def bit_planes_for(count: float) -> int:
    """Smallest N with 2**N >= count."""
    return (int(math.ceil(count)) - 1).bit_length()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class GrayCodeConfig(StructuredLightConfig):
    """
    Gray code settings.

    Attributes:
        include_inverted: Project the complement after every bit-plane (required)
        pixel_threshold: Minimum intensity margin for a bit to count (required)
        sequence_count: Number of bit-planes to project, 0 for all of them
        measure_regions: Decode region indices instead of pixels when > 0
        albedo_reference: Without inversion, prepend all-on/all-off patterns
            and threshold every pixel at the mean of its two captures
    """
    include_inverted: Optional[bool] = None
    pixel_threshold: Optional[int] = None
    sequence_count: int = 0
    measure_regions: float = 0.0
    albedo_reference: bool = False

    PARAMETER_NAMES = {
        **StructuredLightConfig.PARAMETER_NAMES,
        'include_inverted': 'IncludeInverted',
        'pixel_threshold': 'PixelThreshold',
        'sequence_count': 'SequenceCount',
        'measure_regions': 'MeasureRegions',
        'albedo_reference': 'AlbedoReference',
    }


class GrayCode(StructuredLight):
    """Binary reflected Gray code with optional inverted patterns."""

    config_class = GrayCodeConfig
    method = CodingMethod.GRAY_CODE

    def __init__(self):
        super().__init__()
        self.maximum_patterns = 0
        self.offset = 0
        self.region_size = 0
        self.code_limit = 0
        self.sequence_count = 0

    def _setup(self, config: GrayCodeConfig) -> Result:
        result = Result()
        if config.include_inverted is None:
            result.add_error(STRUCTURED_LIGHT_SETTINGS_SEQUENCE_INCLUDE_INVERTED_MISSING)
        if config.pixel_threshold is None:
            result.add_error(GRAY_CODE_PIXEL_THRESHOLD_MISSING)
        if result.has_errors():
            return result

        resolution = self.resolution

        if config.measure_regions and config.measure_regions > 0:
            regions = float(config.measure_regions)
            region_size = _round_half_up(resolution / regions)
            logger.debug(f"Region size = {region_size}")

            if region_size < 1 or _round_half_up(region_size * regions) != resolution:
                result.add_error(GRAY_CODE_REGIONS_REQUIRE_SUB_PIXELS)
                return result
            if regions < 2:
                result.add_error(GRAY_CODE_RESOLUTION_TOO_SMALL)
                return result

            self.region_size = region_size
            self.maximum_patterns = bit_planes_for(regions)
            self.offset = 0
            self.code_limit = int(math.ceil(resolution / region_size))
            self.sequence_count = self.maximum_patterns
        else:
            if resolution < 2:
                result.add_error(GRAY_CODE_RESOLUTION_TOO_SMALL)
                return result

            self.region_size = 0
            self.maximum_patterns = bit_planes_for(resolution)
            self.code_limit = resolution

            # The code space is a power of two wider than the resolution,
            # so it is centered on the projector
            self.offset = ((1 << self.maximum_patterns) - resolution) // 2

            requested = config.sequence_count or 0
            if requested < 0 or requested > self.maximum_patterns:
                logger.error(f"SequenceCount {requested} exceeds the {self.maximum_patterns} "
                             f"bit-planes needed for resolution {resolution}")
                result.add_error(STRUCTURED_LIGHT_CAPTURE_SEQUENCE_SIZE_INVALID)
                return result
            self.sequence_count = requested or self.maximum_patterns


        if config.include_inverted:
            self.sequence_count_total = self.sequence_count * 2
        elif config.albedo_reference:
            self.sequence_count_total = self.sequence_count + 2
        else:
            self.sequence_count_total = self.sequence_count

        return result

    def is_region_mode(self) -> bool:
        return self.region_size > 0

    def generate_pattern_sequence(self) -> Tuple[Result, PatternSequence]:
        """
        Generate the bit-plane patterns.

        Order is the albedo pair (when enabled) followed by bit-plane 0 (MSB)
        to N-1, each followed by its inverse when IncludeInverted is set.

        Returns:
            Result and the generated sequence (empty on error)
        """
        result = Result()
        sequence = PatternSequence()

        if not self.is_setup():
            result.add_error(STRUCTURED_LIGHT_NOT_SETUP)
            return result, sequence

        config = self.config
        rows, columns = config.pattern_rows, config.pattern_columns

        positions = pattern_positions(config.pattern_orientation, columns, rows)
        if self.is_region_mode():
            codes = positions // self.region_size
        else:
            codes = positions + self.offset
        gray = binary_to_gray(codes)

        if not config.include_inverted and config.albedo_reference:
            white = np.full((rows, columns), PATTERN_VALUE_ON, dtype=np.uint8)
            black = np.full((rows, columns), PATTERN_VALUE_OFF, dtype=np.uint8)
            result.add(sequence.add(self._make_pattern(sequence.get_count(), white)))
            result.add(sequence.add(self._make_pattern(sequence.get_count(), black)))

        for plane in range(self.sequence_count):
            bit = (gray >> (self.maximum_patterns - 1 - plane)) & 1
            image = (bit * PATTERN_VALUE_ON).astype(np.uint8)
            result.add(sequence.add(self._make_pattern(sequence.get_count(), image)))

            if config.include_inverted:
                inverted = (PATTERN_VALUE_ON - image).astype(np.uint8)
                result.add(sequence.add(self._make_pattern(sequence.get_count(), inverted)))

        sequence.parameters = self.get_setup()
        logger.info(f"Generated {sequence.get_count()} Gray code patterns "
                    f"({self.sequence_count} bit-planes)")
        return result, sequence

    def decode_capture_sequence(self, captures: CaptureSequence) -> Tuple[Result, Optional[CorrespondenceMap]]:
        """
        Decode a capture sequence into a correspondence map.

        Args:
            captures: Captures of the generated patterns, in the same order

        Returns:
            Result and the map (None when the sequence could not be decoded)
        """
        result = self._check_captures(captures)
        if result.has_errors():
            logger.error(f"Gray code decode refused: {result.get_errors()}")
            return result, None

        load_result, stack = self._load_capture_stack(captures)
        result.add(load_result)
        if result.has_errors():
            return result, None

        values, valid = self.decode_image_stack(stack)

        rows, columns = values.shape
        correspondence = CorrespondenceMap()
        result.add(correspondence.create(columns, rows, self.config.pattern_orientation))
        result.add(correspondence.set_data(np.where(valid, values, INVALID_PIXEL)))

        valid_count = int(np.count_nonzero(valid))
        if valid_count == 0:
            logger.warning("No pixel could be decoded")
            result.add_warning(DECODE_NO_VALID_PIXELS)

        logger.debug(f"Decoded {valid_count} of {valid.size} pixels")
        return result, correspondence

    def decode_image_stack(self, stack: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Decode a stack of captures without any sequence checks.

        Args:
            stack: float32 array (sequence_count_total, rows, columns)

        Returns:
            Tuple of (values, valid) where values are int64 projector positions
            (region indices in region mode) and valid is a boolean mask
        """
        config = self.config
        threshold = float(config.pixel_threshold)

        if config.include_inverted:
            plain = stack[0::2]
            inverse = stack[1::2]
            difference = plain - inverse
            bits = difference > threshold
            valid = np.all(np.abs(difference) > threshold, axis=0)
        elif config.albedo_reference:
            white, black = stack[0], stack[1]
            planes = stack[2:]
            valid = (white - black) >= threshold
            bits = planes > (white + black) / 2.0
        else:
            planes = stack
            bits = planes > DEFAULT_FIXED_THRESHOLD + threshold
            valid = np.all(np.abs(planes - DEFAULT_FIXED_THRESHOLD) > threshold, axis=0)

        gray = np.zeros(stack.shape[1:], dtype=np.int64)
        for plane in bits:
            gray = (gray << 1) | plane.astype(np.int64)

        # Planes that were not projected are zero in the binary result
        binary = gray_to_binary(gray, self.sequence_count)
        binary = binary << (self.maximum_patterns - self.sequence_count)

        values = binary - self.offset
        valid &= (values >= 0) & (values < self.code_limit)
        return values, valid

    def _make_pattern(self, pattern_id: int, image: np.ndarray) -> Pattern:
        return Pattern(
            id=pattern_id,
            bitdepth=Bitdepth.MONO_1BPP,
            color=self.config.pattern_color,
            data_type=DataType.IMAGE_DATA,
            orientation=self.config.pattern_orientation,
            image_data=image
        )
