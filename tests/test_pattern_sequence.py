"""
Tests for Pattern and PatternSequence.
"""

import tempfile
import unittest

import numpy as np

from slcode.common.pattern import Bitdepth, Color, DataType, Orientation, Pattern, PatternSequence
from slcode.core.constants import (
    FILE_DOES_NOT_EXIST,
    PATTERN_BITDEPTH_INVALID,
    PATTERN_COLOR_INVALID,
    PATTERN_DATA_TYPE_INVALID,
    PATTERN_EXPOSURE_TOO_SHORT,
    PATTERN_IMAGE_DATA_EMPTY,
    PATTERN_PARAMETERS_EMPTY,
    PATTERN_PERIOD_TOO_SHORT,
    PATTERN_SEQUENCE_INDEX_OUT_OF_RANGE,
)
from slcode.core.parameters import Parameters


def make_pattern(pattern_id=0, value=255, **overrides):
    values = dict(
        id=pattern_id,
        exposure=1000,
        period=1000,
        bitdepth=Bitdepth.MONO_1BPP,
        color=Color.WHITE,
        data_type=DataType.IMAGE_DATA,
        orientation=Orientation.VERTICAL,
        image_data=np.full((4, 4), value, dtype=np.uint8),
    )
    values.update(overrides)
    return Pattern(**values)


class TestPattern(unittest.TestCase):
    """Single pattern defaults and validation."""

    def test_default_pattern_is_invalid(self):
        pattern = Pattern()
        self.assertEqual(pattern.bitdepth, Bitdepth.INVALID)
        self.assertEqual(pattern.color, Color.INVALID)
        self.assertEqual(pattern.data_type, DataType.INVALID)
        self.assertEqual(pattern.orientation, Orientation.INVALID)
        self.assertIsNone(pattern.image_data)
        self.assertTrue(pattern.validate().has_errors())

    def test_copy_is_deep(self):
        pattern = make_pattern()
        duplicate = pattern.copy()
        duplicate.image_data[0, 0] = 0
        self.assertEqual(pattern.image_data[0, 0], 255)


class TestPatternSequence(unittest.TestCase):
    """Ordered pattern container."""

    def setUp(self):
        self.sequence = PatternSequence()

    def test_add_rejects_untagged_fields(self):
        cases = [
            (dict(bitdepth=Bitdepth.INVALID), PATTERN_BITDEPTH_INVALID),
            (dict(color=Color.INVALID), PATTERN_COLOR_INVALID),
            (dict(data_type=DataType.INVALID), PATTERN_DATA_TYPE_INVALID),
            (dict(image_data=None), PATTERN_IMAGE_DATA_EMPTY),
            (dict(image_data=np.zeros((0, 0), dtype=np.uint8)), PATTERN_IMAGE_DATA_EMPTY),
            (dict(data_type=DataType.PARAMETERS), PATTERN_PARAMETERS_EMPTY),
            (dict(data_type=DataType.IMAGE_FILE, image_file="/does/not/exist.png"), FILE_DOES_NOT_EXIST),
        ]
        for overrides, error in cases:
            with self.subTest(error=error):
                result = self.sequence.add(make_pattern(**overrides))
                self.assertTrue(result.contains_error(error))
        self.assertEqual(self.sequence.get_count(), 0)

    def test_add_parameter_and_file_payloads(self):
        params_pattern = make_pattern(data_type=DataType.PARAMETERS,
                                      parameters=Parameters({"Bit": 3}))
        self.assertFalse(self.sequence.add(params_pattern).has_errors())

        with tempfile.NamedTemporaryFile(suffix=".png") as f:
            file_pattern = make_pattern(data_type=DataType.IMAGE_FILE, image_file=f.name)
            self.assertFalse(self.sequence.add(file_pattern).has_errors())

        self.assertEqual(len(self.sequence), 2)

    def test_insertion_order_is_preserved(self):
        for pattern_id in range(5):
            self.sequence.add(make_pattern(pattern_id))
        self.assertEqual([p.id for p in self.sequence], [0, 1, 2, 3, 4])

    def test_get_out_of_range(self):
        self.sequence.add(make_pattern())
        result, pattern = self.sequence.get(1)
        self.assertTrue(result.contains_error(PATTERN_SEQUENCE_INDEX_OUT_OF_RANGE))
        self.assertIsNone(pattern)

        result, pattern = self.sequence.get(-1)
        self.assertTrue(result.has_errors())

    def test_get_returns_copy(self):
        self.sequence.add(make_pattern())
        _, pattern = self.sequence.get(0)
        pattern.image_data[:] = 0
        pattern.id = 99

        _, again = self.sequence.get(0)
        self.assertEqual(again.id, 0)
        self.assertTrue(np.all(again.image_data == 255))

    def test_set_and_remove(self):
        self.sequence.add(make_pattern(0))
        self.sequence.add(make_pattern(1))

        self.assertFalse(self.sequence.set(1, make_pattern(7)).has_errors())
        self.assertEqual(self.sequence.get(1)[1].id, 7)

        result = self.sequence.set(0, make_pattern(8, color=Color.INVALID))
        self.assertTrue(result.contains_error(PATTERN_COLOR_INVALID))
        self.assertEqual(self.sequence.get(0)[1].id, 0)

        self.assertTrue(self.sequence.set(5, make_pattern()).contains_error(
            PATTERN_SEQUENCE_INDEX_OUT_OF_RANGE))

        self.assertFalse(self.sequence.remove(0).has_errors())
        self.assertEqual([p.id for p in self.sequence], [7])
        self.assertTrue(self.sequence.remove(3).contains_error(PATTERN_SEQUENCE_INDEX_OUT_OF_RANGE))

    def test_equal_predicates_are_vacuously_true(self):
        self.assertTrue(self.sequence.equal_bitdepths())
        self.assertTrue(self.sequence.equal_colors())
        self.assertTrue(self.sequence.equal_exposures())
        self.assertTrue(self.sequence.equal_periods())
        self.assertTrue(self.sequence.equal_data_types())

    def test_equal_predicates(self):
        self.sequence.add(make_pattern(0))
        self.sequence.add(make_pattern(1))
        self.assertTrue(self.sequence.equal_bitdepths())
        self.assertTrue(self.sequence.equal_colors())

        self.sequence.add(make_pattern(2, bitdepth=Bitdepth.MONO_8BPP, color=Color.RED,
                                       exposure=5, period=6))
        self.assertFalse(self.sequence.equal_bitdepths())
        self.assertFalse(self.sequence.equal_colors())
        self.assertFalse(self.sequence.equal_exposures())
        self.assertFalse(self.sequence.equal_periods())
        self.assertTrue(self.sequence.equal_data_types())

    def test_set_sequence_wide_values(self):
        self.sequence.add(make_pattern(0))
        self.sequence.add(make_pattern(1, color=Color.RED))

        self.assertFalse(self.sequence.set_colors(Color.BLUE).has_errors())
        self.assertTrue(self.sequence.equal_colors())
        self.assertTrue(self.sequence.set_colors(Color.INVALID).contains_error(PATTERN_COLOR_INVALID))
        self.assertTrue(self.sequence.set_bitdepths(Bitdepth.INVALID).contains_error(
            PATTERN_BITDEPTH_INVALID))

        self.assertFalse(self.sequence.set_exposures(2000).has_errors())
        self.assertTrue(self.sequence.set_exposures(0).contains_error(PATTERN_EXPOSURE_TOO_SHORT))
        self.assertTrue(self.sequence.set_periods(0).contains_error(PATTERN_PERIOD_TOO_SHORT))
        self.assertEqual({p.exposure for p in self.sequence}, {2000})

    def test_extend_copies_patterns_and_parameters(self):
        other = PatternSequence()
        other.add(make_pattern(10))
        other.add(make_pattern(11))
        other.parameters.set("IncludeInverted", True)

        self.sequence.add(make_pattern(0))
        result = self.sequence.add(other)

        self.assertFalse(result.has_errors())
        self.assertEqual([p.id for p in self.sequence], [0, 10, 11])
        self.assertTrue(self.sequence.parameters.get("IncludeInverted"))

    def test_add_wrong_type(self):
        with self.assertRaises(TypeError):
            self.sequence.add("not a pattern")


if __name__ == '__main__':
    unittest.main()
