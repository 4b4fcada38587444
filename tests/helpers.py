"""
Shared fixtures for the slcode tests.
"""

import numpy as np

from slcode.common.capture import Capture, CaptureSequence
from slcode.common.pattern import Bitdepth, Color, Orientation
from slcode.structured_light.gray_code import GrayCodeConfig
from slcode.structured_light.three_phase import ThreePhaseConfig

ROWS = 48
COLUMNS = 96


class FakePlatform:
    """Stand-in for a projector platform object."""

    def __init__(self, rows, columns, is_setup=True):
        self.rows = rows
        self.columns = columns
        self.is_setup = is_setup

    def is_platform_setup(self):
        return self.is_setup

    def get_rows(self):
        return self.rows

    def get_columns(self):
        return self.columns


def gray_config(**overrides):
    values = dict(
        pattern_rows=ROWS,
        pattern_columns=COLUMNS,
        pattern_color=Color.WHITE,
        pattern_orientation=Orientation.VERTICAL,
        include_inverted=True,
        pixel_threshold=5,
    )
    values.update(overrides)
    return GrayCodeConfig(**values)


def three_phase_config(**overrides):
    values = dict(
        pattern_rows=32,
        pattern_columns=128,
        pattern_color=Color.WHITE,
        pattern_orientation=Orientation.VERTICAL,
        bitdepth=Bitdepth.MONO_8BPP,
        pixels_per_period=16,
    )
    values.update(overrides)
    return ThreePhaseConfig(**values)


def captures_from_patterns(patterns, transform=None):
    """
    Simulate a noiseless camera that sees the projector pixel for pixel.

    Args:
        patterns: PatternSequence to "capture"
        transform: Optional callable applied to every image

    Returns:
        CaptureSequence with one capture per pattern
    """
    captures = CaptureSequence()
    for pattern in patterns:
        image = pattern.image_data.astype(np.float32)
        if transform is not None:
            image = transform(image)
        result = captures.add(Capture.from_image(image, pattern_id=pattern.id))
        assert not result.has_errors(), result
    return captures
