"""
Per camera pixel correspondence (disparity) map produced by the decoders.
"""

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from slcode.common.pattern import Orientation
from slcode.core.constants import (
    CORRESPONDENCE_MAP_EMPTY,
    CORRESPONDENCE_MAP_PIXEL_OUT_OF_RANGE,
    CORRESPONDENCE_MAP_SIZE_INVALID,
    EMPTY_PIXEL,
    INVALID_PIXEL,
    OVERSAMPLING_SET_TO_ONE,
)
from slcode.core.result import Result

logger = logging.getLogger(__name__)


class CorrespondenceMap:
    """
    Dense int32 buffer with one cell per camera pixel.

    Each cell holds a decoded projector coordinate (column for vertical
    patterns, row for horizontal, diagonal code for diamond patterns),
    multiplied by the map's oversampling factor, or one of the sentinels
    ``INVALID_PIXEL`` (undecodable) and ``EMPTY_PIXEL`` (never written).
    """

    INVALID_PIXEL = INVALID_PIXEL
    EMPTY_PIXEL = EMPTY_PIXEL

    def __init__(self, columns: int = 0, rows: int = 0,
                 orientation: Orientation = Orientation.INVALID,
                 over_sample: int = 1):
        self._map: Optional[np.ndarray] = None
        self.orientation = Orientation.INVALID
        self.over_sample = 1
        if columns > 0 and rows > 0:
            self.create(columns, rows, orientation, over_sample)

    def create(self, columns: int, rows: int, orientation: Orientation,
               over_sample: int = 1) -> Result:
        """
        Allocate the map and fill it with EMPTY_PIXEL.

        Args:
            columns: Camera image width
            rows: Camera image height
            orientation: Axis encoded by the decoded values
            over_sample: Sub-pixel multiplier of the stored values

        Returns:
            Result with a warning when over_sample was clamped to 1
        """
        result = Result()
        if columns <= 0 or rows <= 0:
            result.add_error(CORRESPONDENCE_MAP_SIZE_INVALID)
            return result

        if over_sample >= 1:
            self.over_sample = int(over_sample)
        else:
            logger.warning(f"Oversampling {over_sample} is below 1, using 1")
            result.add_warning(OVERSAMPLING_SET_TO_ONE)
            self.over_sample = 1

        self.orientation = orientation
        self._map = np.full((rows, columns), EMPTY_PIXEL, dtype=np.int32)
        return result

    @classmethod
    def from_array(cls, data: np.ndarray, orientation: Orientation,
                   over_sample: int = 1) -> 'CorrespondenceMap':
        """Wrap an existing array of decoded values (copied as int32)."""
        correspondence = cls()
        rows, columns = data.shape[:2]
        correspondence.create(columns, rows, orientation, over_sample)
        correspondence._map[:, :] = data.astype(np.int32)
        return correspondence

    def clear(self) -> None:
        self._map = None
        self.orientation = Orientation.INVALID
        self.over_sample = 1

    def is_empty(self) -> bool:
        return self._map is None

    def get_columns(self) -> int:
        return 0 if self._map is None else self._map.shape[1]

    def get_rows(self) -> int:
        return 0 if self._map is None else self._map.shape[0]

    def get_orientation(self) -> Orientation:
        return self.orientation

    def get_data(self) -> np.ndarray:
        """Copy of the underlying int32 buffer, shape (rows, columns)."""
        if self._map is None:
            return np.empty((0, 0), dtype=np.int32)
        return self._map.copy()

    def set_data(self, data: np.ndarray) -> Result:
        """Overwrite every cell from an array of the same shape."""
        result = Result()
        if self._map is None:
            result.add_error(CORRESPONDENCE_MAP_EMPTY)
            return result
        if data.shape[:2] != self._map.shape:
            result.add_error(CORRESPONDENCE_MAP_SIZE_INVALID)
            return result
        self._map[:, :] = data.astype(np.int32)
        return result

    def get_pixel(self, column: int, row: int) -> Tuple[Result, int]:
        result = self._check_pixel(column, row)
        if result.has_errors():
            return result, INVALID_PIXEL
        return result, int(self._map[row, column])

    def set_pixel(self, column: int, row: int, value: int) -> Result:
        result = self._check_pixel(column, row)
        if not result.has_errors():
            self._map[row, column] = value
        return result

    def set_pixel_invalid(self, column: int, row: int) -> Result:
        return self.set_pixel(column, row, INVALID_PIXEL)

    def valid_mask(self) -> np.ndarray:
        """Boolean mask of cells holding a decoded coordinate."""
        if self._map is None:
            return np.zeros((0, 0), dtype=bool)
        return self._map >= 0

    def count_valid(self) -> int:
        return int(np.count_nonzero(self.valid_mask()))

    def flip(self, flip_x: bool, flip_y: bool) -> Result:
        """Mirror the map horizontally and/or vertically."""
        result = Result()
        if self._map is None:
            result.add_error(CORRESPONDENCE_MAP_EMPTY)
            return result

        if flip_x and flip_y:
            self._map = cv2.flip(self._map, -1)
        elif flip_x:
            self._map = cv2.flip(self._map, 1)
        elif flip_y:
            self._map = cv2.flip(self._map, 0)
        return result

    def oversample_and_smooth(self, over_sample: int) -> Result:
        """
        Multiply decoded values by over_sample and smooth them with a bilateral filter.

        Sentinel cells keep their sentinel value. Has no effect for over_sample <= 1.
        """
        result = Result()
        if self._map is None:
            result.add_error(CORRESPONDENCE_MAP_EMPTY)
            return result

        if over_sample <= 1:
            return result

        valid = self.valid_mask()
        scaled = self._map.astype(np.float32) * over_sample

        diameter = over_sample if over_sample % 2 == 1 else over_sample + 1
        smooth = cv2.bilateralFilter(scaled, diameter, over_sample * 3, over_sample * 3)

        self._map = np.where(valid, np.rint(smooth), self._map).astype(np.int32)
        self.over_sample = self.over_sample * over_sample
        logger.debug(f"Map oversampled by {over_sample}, total factor {self.over_sample}")
        return result

    def _check_pixel(self, column: int, row: int) -> Result:
        result = Result()
        if self._map is None:
            result.add_error(CORRESPONDENCE_MAP_EMPTY)
        elif not (0 <= column < self._map.shape[1] and 0 <= row < self._map.shape[0]):
            result.add_error(CORRESPONDENCE_MAP_PIXEL_OUT_OF_RANGE)
        return result

    def __eq__(self, other):
        if not isinstance(other, CorrespondenceMap):
            return NotImplemented
        if self._map is None or other._map is None:
            return self._map is None and other._map is None
        return (self.orientation == other.orientation
                and self.over_sample == other.over_sample
                and np.array_equal(self._map, other._map))

    def __repr__(self):
        return (f"CorrespondenceMap(columns={self.get_columns()}, rows={self.get_rows()}, "
                f"orientation={self.orientation.name}, over_sample={self.over_sample})")
