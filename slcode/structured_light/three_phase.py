"""
Three-phase (sinusoidal fringe) structured light codec.

Three fringe patterns phase-stepped by 2*pi/3 give the wrapped phase at each
camera pixel. An embedded Gray code block addressing eight regions per fringe
period resolves which period the pixel lies in (hybrid unwrapping).
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from slcode.common.capture import CaptureSequence
from slcode.common.correspondence_map import CorrespondenceMap
from slcode.common.pattern import Bitdepth, DataType, Pattern, PatternSequence
from slcode.core.constants import (
    DECODE_NO_VALID_PIXELS,
    DEFAULT_MODULATION_THRESHOLD,
    DEFAULT_PIXEL_THRESHOLD,
    HYBRID_REGIONS_PER_PERIOD,
    INVALID_PIXEL,
    MIN_PIXELS_PER_PERIOD,
    OVERSAMPLING_SET_TO_ONE,
    STRUCTURED_LIGHT_NOT_SETUP,
    THREE_PHASE_BITDEPTH_MISSING,
    THREE_PHASE_BITDEPTH_TOO_SMALL,
    THREE_PHASE_FREQUENCY_INVALID,
    THREE_PHASE_HYBRID_UNWRAP_MODULE_SETUP_FAILED,
    THREE_PHASE_MAXIMUM_VALUES,
    THREE_PHASE_ONLY_HYBRID_UNWRAP_SUPPORTED,
    THREE_PHASE_PIXELS_PER_PERIOD_MISSING,
    THREE_PHASE_PIXELS_PER_PERIOD_NOT_DIVISIBLE,
    THREE_PHASE_REPEAT_PHASES_INVALID,
    THREE_PHASE_STEPS,
)
from slcode.core.result import Result
from .gray_code import GrayCode, GrayCodeConfig
from .structured_light import (
    CodingMethod,
    StructuredLight,
    StructuredLightConfig,
    pattern_positions,
)

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * np.pi
PHASE_STEP = TWO_PI / THREE_PHASE_STEPS


def compute_wrapped_phase(i0: np.ndarray, i1: np.ndarray, i2: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Three-step phase estimator.

    Args:
        i0: Intensity of the pattern shifted by -2*pi/3
        i1: Intensity of the unshifted pattern
        i2: Intensity of the pattern shifted by +2*pi/3

    Returns:
        Tuple of (phase in [0, 2*pi), modulation amplitude)
    """
    i0 = np.asarray(i0, dtype=np.float64)
    i1 = np.asarray(i1, dtype=np.float64)
    i2 = np.asarray(i2, dtype=np.float64)

    sine = np.sqrt(3.0) * (i0 - i2)
    cosine = 2.0 * i1 - i0 - i2

    phase = np.mod(np.arctan2(sine, cosine), TWO_PI)
    # arctan2 of a tiny negative value wraps to exactly 2*pi after mod
    phase = np.where(phase >= TWO_PI, 0.0, phase)

    modulation = np.sqrt(3.0 * (i0 - i2) ** 2 + cosine ** 2) / 3.0
    return phase, modulation


def unwrap_hybrid(phase: np.ndarray, regions: np.ndarray, pixels_per_period: float) -> np.ndarray:
    """
    Combine wrapped phase with Gray code region indices into absolute positions.

    The coarse period is ``regions // 8``. When the region's center within
    the period and the phase fraction disagree by more than half a period the
    coarse index is moved by one toward the phase, so that the chosen period
    minimizes the distance to the continuous coarse plus phase estimate.

    Args:
        phase: Wrapped phase in [0, 2*pi)
        regions: Gray code region indices, eight per fringe period
        pixels_per_period: Fringe period in projector pixels

    Returns:
        float64 absolute positions in projector pixels
    """
    regions = np.asarray(regions, dtype=np.int64)
    fraction = np.asarray(phase, dtype=np.float64) / TWO_PI

    period = regions // HYBRID_REGIONS_PER_PERIOD
    region_center = (regions % HYBRID_REGIONS_PER_PERIOD + 0.5) / HYBRID_REGIONS_PER_PERIOD

    delta = region_center - fraction
    period = period + (delta > 0.5).astype(np.int64) - (delta < -0.5).astype(np.int64)

    return (period + fraction) * pixels_per_period


@dataclass
class ThreePhaseConfig(StructuredLightConfig):
    """
    Three-phase settings.

    Attributes:
        bitdepth: Quantization of the fringe patterns, MONO_5BPP to MONO_8BPP (required)
        pixels_per_period: Fringe period in pixels, >= 8 and divisible by 8
        frequency: Periods across the resolution, used when pixels_per_period is unset
        use_hybrid_unwrap: Must be True, only hybrid unwrapping is implemented
        repeat_phases: Number of three-pattern blocks averaged at decode
        over_sample: Sub-pixel multiplier of the decoded values
        modulation_threshold: Pixels with a modulation at or below this are invalid
        hybrid_include_inverted: IncludeInverted of the embedded Gray code
        hybrid_pixel_threshold: PixelThreshold of the embedded Gray code
    """
    bitdepth: Optional[Bitdepth] = None
    pixels_per_period: Optional[int] = None
    frequency: Optional[float] = None
    use_hybrid_unwrap: bool = True
    repeat_phases: int = 1
    over_sample: int = 1
    modulation_threshold: float = DEFAULT_MODULATION_THRESHOLD
    hybrid_include_inverted: bool = True
    hybrid_pixel_threshold: int = DEFAULT_PIXEL_THRESHOLD

    PARAMETER_NAMES = {
        **StructuredLightConfig.PARAMETER_NAMES,
        'bitdepth': 'Bitdepth',
        'pixels_per_period': 'PixelsPerPeriod',
        'frequency': 'Frequency',
        'use_hybrid_unwrap': 'UseHybridUnwrap',
        'repeat_phases': 'RepeatPhases',
        'over_sample': 'Oversampling',
        'modulation_threshold': 'ModulationThreshold',
        'hybrid_include_inverted': 'HybridIncludeInverted',
        'hybrid_pixel_threshold': 'HybridPixelThreshold',
    }


class ThreePhase(StructuredLight):
    """Three-step phase shifting with Gray code hybrid unwrapping."""

    config_class = ThreePhaseConfig
    method = CodingMethod.THREE_PHASE

    def __init__(self):
        super().__init__()
        self.maximum_value = 0
        self.pixels_per_period = 0
        self.hybrid_unwrap_module = GrayCode()

    def _setup(self, config: ThreePhaseConfig) -> Result:
        result = Result()

        if config.over_sample is None or config.over_sample < 1:
            logger.warning(f"Oversampling {config.over_sample} is below 1, using 1")
            result.add_warning(OVERSAMPLING_SET_TO_ONE)
            config.over_sample = 1

        if config.bitdepth is None:
            result.add_error(THREE_PHASE_BITDEPTH_MISSING)
        elif config.bitdepth.name not in THREE_PHASE_MAXIMUM_VALUES:
            result.add_error(THREE_PHASE_BITDEPTH_TOO_SMALL)
        else:
            self.maximum_value = THREE_PHASE_MAXIMUM_VALUES[config.bitdepth.name]

        if config.pixels_per_period is None and config.frequency is None:
            result.add_error(THREE_PHASE_PIXELS_PER_PERIOD_MISSING)

        if config.repeat_phases is None or config.repeat_phases < 1:
            result.add_error(THREE_PHASE_REPEAT_PHASES_INVALID)

        if not config.use_hybrid_unwrap:
            result.add_error(THREE_PHASE_ONLY_HYBRID_UNWRAP_SUPPORTED)

        if result.has_errors():
            return result

        if config.pixels_per_period is None:
            if config.frequency <= 0:
                result.add_error(THREE_PHASE_FREQUENCY_INVALID)
                return result
            period = self.resolution / float(config.frequency)
            if abs(period - round(period)) > 1e-9:
                logger.error(f"Frequency {config.frequency} gives a fractional period {period}")
                result.add_error(THREE_PHASE_FREQUENCY_INVALID)
                return result
            config.pixels_per_period = int(round(period))

        pixels_per_period = int(config.pixels_per_period)
        if pixels_per_period < MIN_PIXELS_PER_PERIOD or pixels_per_period % HYBRID_REGIONS_PER_PERIOD:
            result.add_error(THREE_PHASE_PIXELS_PER_PERIOD_NOT_DIVISIBLE)
            return result

        config.pixels_per_period = pixels_per_period
        config.frequency = self.resolution / float(pixels_per_period)
        self.pixels_per_period = pixels_per_period

        hybrid_config = GrayCodeConfig(
            pattern_rows=config.pattern_rows,
            pattern_columns=config.pattern_columns,
            pattern_color=config.pattern_color,
            pattern_orientation=config.pattern_orientation,
            include_inverted=config.hybrid_include_inverted,
            pixel_threshold=config.hybrid_pixel_threshold,
            measure_regions=config.frequency * HYBRID_REGIONS_PER_PERIOD
        )
        hybrid_result = self.hybrid_unwrap_module.setup(hybrid_config)
        if hybrid_result.has_errors():
            result.add(hybrid_result)
            result.add_error(THREE_PHASE_HYBRID_UNWRAP_MODULE_SETUP_FAILED)
            return result

        self.sequence_count_total = (THREE_PHASE_STEPS * config.repeat_phases
                                     + self.hybrid_unwrap_module.get_total_pattern_count())
        return result

    def generate_pattern_sequence(self) -> Tuple[Result, PatternSequence]:
        """
        Generate the fringe blocks followed by the hybrid Gray code block.

        Returns:
            Result and the generated sequence (empty on error)
        """
        result = Result()
        sequence = PatternSequence()

        if not self.is_setup():
            result.add_error(STRUCTURED_LIGHT_NOT_SETUP)
            return result, sequence

        config = self.config
        positions = pattern_positions(config.pattern_orientation,
                                      config.pattern_columns, config.pattern_rows)
        angle = TWO_PI * (positions % self.pixels_per_period) / float(self.pixels_per_period)
        amplitude = self.maximum_value / 2.0

        fringes = []
        for step in range(THREE_PHASE_STEPS):
            offset = (step - 1) * PHASE_STEP
            values = amplitude + amplitude * np.cos(angle + offset)
            fringes.append(np.clip(np.rint(values), 0, self.maximum_value).astype(np.uint8))

        for _ in range(config.repeat_phases):
            for fringe in fringes:
                pattern = Pattern(
                    id=sequence.get_count(),
                    bitdepth=config.bitdepth,
                    color=config.pattern_color,
                    data_type=DataType.IMAGE_DATA,
                    orientation=config.pattern_orientation,
                    image_data=fringe
                )
                result.add(sequence.add(pattern))

        gray_result, gray_sequence = self.hybrid_unwrap_module.generate_pattern_sequence()
        result.add(gray_result)
        if result.has_errors():
            return result, PatternSequence()

        for pattern in gray_sequence:
            pattern.id = sequence.get_count()
            result.add(sequence.add(pattern))

        sequence.parameters = self.get_setup()
        logger.info(f"Generated {sequence.get_count()} three-phase patterns "
                    f"(period {self.pixels_per_period} px, {config.repeat_phases} repeats)")
        return result, sequence

    def decode_capture_sequence(self, captures: CaptureSequence) -> Tuple[Result, Optional[CorrespondenceMap]]:
        """
        Decode a capture sequence into an oversampled correspondence map.

        Args:
            captures: Captures of the generated patterns, in the same order

        Returns:
            Result and the map (None when the sequence could not be decoded)
        """
        result = self._check_captures(captures)
        if result.has_errors():
            logger.error(f"Three-phase decode refused: {result.get_errors()}")
            return result, None

        load_result, stack = self._load_capture_stack(captures)
        result.add(load_result)
        if result.has_errors():
            return result, None

        config = self.config
        phase_count = THREE_PHASE_STEPS * config.repeat_phases
        rows, columns = stack.shape[1:]

        # Average the repeats of every phase step
        phase_stack = stack[:phase_count].reshape(config.repeat_phases, THREE_PHASE_STEPS, rows, columns)
        i0, i1, i2 = phase_stack.mean(axis=0)

        phase, modulation = compute_wrapped_phase(i0, i1, i2)
        phase_valid = modulation > config.modulation_threshold

        regions, region_valid = self.hybrid_unwrap_module.decode_image_stack(stack[phase_count:])

        positions = unwrap_hybrid(phase, regions, self.pixels_per_period)
        values = np.rint(positions * config.over_sample).astype(np.int64)

        valid = phase_valid & region_valid
        valid &= (values >= 0) & (values < self.resolution * config.over_sample)

        correspondence = CorrespondenceMap()
        result.add(correspondence.create(columns, rows, config.pattern_orientation, config.over_sample))
        result.add(correspondence.set_data(np.where(valid, values, INVALID_PIXEL)))

        valid_count = int(np.count_nonzero(valid))
        if valid_count == 0:
            logger.warning("No pixel could be decoded")
            result.add_warning(DECODE_NO_VALID_PIXELS)

        logger.debug(f"Decoded {valid_count} of {valid.size} pixels "
                     f"({int(np.count_nonzero(~phase_valid))} below modulation threshold)")
        return result, correspondence

    def get_maximum_value(self) -> int:
        return self.maximum_value
