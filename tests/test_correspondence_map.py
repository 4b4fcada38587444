"""
Tests for CorrespondenceMap.
"""

import unittest

import numpy as np

from slcode.common.correspondence_map import CorrespondenceMap
from slcode.common.pattern import Orientation
from slcode.core.constants import (
    CORRESPONDENCE_MAP_EMPTY,
    CORRESPONDENCE_MAP_PIXEL_OUT_OF_RANGE,
    CORRESPONDENCE_MAP_SIZE_INVALID,
    EMPTY_PIXEL,
    INVALID_PIXEL,
    OVERSAMPLING_SET_TO_ONE,
)


class TestCorrespondenceMap(unittest.TestCase):
    """Per pixel correspondence buffer."""

    def test_sentinels_are_distinct_and_negative(self):
        self.assertNotEqual(INVALID_PIXEL, EMPTY_PIXEL)
        self.assertLess(INVALID_PIXEL, 0)
        self.assertLess(EMPTY_PIXEL, 0)

    def test_create_fills_with_empty(self):
        correspondence = CorrespondenceMap()
        result = correspondence.create(5, 3, Orientation.VERTICAL)

        self.assertFalse(result.has_errors())
        data = correspondence.get_data()
        self.assertEqual(data.shape, (3, 5))
        self.assertEqual(data.dtype, np.int32)
        self.assertTrue(np.all(data == EMPTY_PIXEL))
        self.assertEqual(correspondence.get_columns(), 5)
        self.assertEqual(correspondence.get_rows(), 3)
        self.assertEqual(correspondence.get_orientation(), Orientation.VERTICAL)
        self.assertEqual(correspondence.count_valid(), 0)

    def test_create_clamps_oversampling(self):
        correspondence = CorrespondenceMap()
        result = correspondence.create(2, 2, Orientation.HORIZONTAL, over_sample=0)
        self.assertTrue(result.contains_warning(OVERSAMPLING_SET_TO_ONE))
        self.assertFalse(result.has_errors())
        self.assertEqual(correspondence.over_sample, 1)

    def test_create_invalid_size(self):
        result = CorrespondenceMap().create(0, 4, Orientation.VERTICAL)
        self.assertTrue(result.contains_error(CORRESPONDENCE_MAP_SIZE_INVALID))

    def test_pixel_access(self):
        correspondence = CorrespondenceMap(4, 2, Orientation.VERTICAL)

        self.assertFalse(correspondence.set_pixel(3, 1, 42).has_errors())
        result, value = correspondence.get_pixel(3, 1)
        self.assertFalse(result.has_errors())
        self.assertEqual(value, 42)
        self.assertFalse(correspondence.is_empty())

        correspondence.set_pixel_invalid(0, 0)
        self.assertEqual(correspondence.get_pixel(0, 0)[1], INVALID_PIXEL)

        result, value = correspondence.get_pixel(4, 0)
        self.assertTrue(result.contains_error(CORRESPONDENCE_MAP_PIXEL_OUT_OF_RANGE))
        self.assertEqual(value, INVALID_PIXEL)

    def test_get_data_is_a_copy(self):
        correspondence = CorrespondenceMap(2, 2, Orientation.VERTICAL)
        data = correspondence.get_data()
        data[:] = 5
        self.assertTrue(np.all(correspondence.get_data() == EMPTY_PIXEL))

    def test_empty_map_operations(self):
        correspondence = CorrespondenceMap()
        self.assertTrue(correspondence.is_empty())
        self.assertTrue(correspondence.set_pixel(0, 0, 1).contains_error(CORRESPONDENCE_MAP_EMPTY))
        self.assertTrue(correspondence.flip(True, False).contains_error(CORRESPONDENCE_MAP_EMPTY))
        self.assertTrue(correspondence.oversample_and_smooth(2).contains_error(CORRESPONDENCE_MAP_EMPTY))

    def test_flip(self):
        data = np.arange(6, dtype=np.int32).reshape(2, 3)
        correspondence = CorrespondenceMap.from_array(data, Orientation.VERTICAL)

        correspondence.flip(True, False)
        np.testing.assert_array_equal(correspondence.get_data(), data[:, ::-1])

        correspondence.flip(False, True)
        np.testing.assert_array_equal(correspondence.get_data(), data[::-1, ::-1])

        correspondence.flip(True, True)
        np.testing.assert_array_equal(correspondence.get_data(), data)

    def test_oversample_and_smooth_keeps_sentinels(self):
        data = np.full((9, 9), 10, dtype=np.int32)
        data[4, 4] = INVALID_PIXEL
        correspondence = CorrespondenceMap.from_array(data, Orientation.VERTICAL)

        result = correspondence.oversample_and_smooth(2)

        self.assertFalse(result.has_errors())
        smoothed = correspondence.get_data()
        self.assertEqual(smoothed[4, 4], INVALID_PIXEL)
        self.assertEqual(smoothed[0, 0], 20)
        self.assertEqual(smoothed[4, 3], 20)
        self.assertEqual(correspondence.over_sample, 2)

    def test_oversample_of_one_is_a_no_op(self):
        data = np.arange(4, dtype=np.int32).reshape(2, 2)
        correspondence = CorrespondenceMap.from_array(data, Orientation.VERTICAL)
        correspondence.oversample_and_smooth(1)
        np.testing.assert_array_equal(correspondence.get_data(), data)

    def test_equality(self):
        data = np.arange(4, dtype=np.int32).reshape(2, 2)
        first = CorrespondenceMap.from_array(data, Orientation.VERTICAL)
        second = CorrespondenceMap.from_array(data, Orientation.VERTICAL)
        self.assertEqual(first, second)

        second.set_pixel(0, 0, 3)
        self.assertNotEqual(first, second)


if __name__ == '__main__':
    unittest.main()
