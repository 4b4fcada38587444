"""
Camera captures and the ordered sequences handed to the decoders.

Capture ``i`` of a sequence corresponds to pattern ``i`` of the pattern
sequence that was projected.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

import numpy as np

from slcode.core.constants import (
    CAPTURE_SEQUENCE_EMPTY,
    CAPTURE_SEQUENCE_INDEX_OUT_OF_RANGE,
    CAPTURE_SEQUENCE_TYPES_NOT_EQUAL,
    CAPTURE_TYPE_INVALID,
    FILE_DOES_NOT_EXIST,
    IMAGE_EMPTY,
)
from slcode.core.image import load_image, to_mono
from slcode.core.parameters import register_enum_type
from slcode.core.result import Result

logger = logging.getLogger(__name__)


@register_enum_type
class CaptureDataType(Enum):
    """Which payload field of a capture holds its image."""
    IMAGE_FILE = "image_file"
    IMAGE_DATA = "image_data"
    INVALID = "invalid"


@dataclass
class Capture:
    """
    One acquired camera frame.

    Attributes:
        camera_id: Camera that produced the frame
        pattern_id: Projected pattern the frame contains
        data_type: Which payload field is used
        image_data: Raster payload for CaptureDataType.IMAGE_DATA
        image_file: File payload for CaptureDataType.IMAGE_FILE
    """
    camera_id: int = 0
    pattern_id: int = 0
    data_type: CaptureDataType = CaptureDataType.INVALID
    image_data: Optional[np.ndarray] = None
    image_file: str = ""

    @classmethod
    def from_image(cls, image: np.ndarray, camera_id: int = 0, pattern_id: int = 0) -> 'Capture':
        return cls(camera_id=camera_id, pattern_id=pattern_id,
                   data_type=CaptureDataType.IMAGE_DATA, image_data=image)

    @classmethod
    def from_file(cls, image_file: str, camera_id: int = 0, pattern_id: int = 0) -> 'Capture':
        return cls(camera_id=camera_id, pattern_id=pattern_id,
                   data_type=CaptureDataType.IMAGE_FILE, image_file=image_file)

    def copy(self) -> 'Capture':
        return Capture(
            camera_id=self.camera_id,
            pattern_id=self.pattern_id,
            data_type=self.data_type,
            image_data=None if self.image_data is None else self.image_data.copy(),
            image_file=self.image_file
        )

    def validate(self) -> Result:
        result = Result()
        if self.data_type == CaptureDataType.IMAGE_FILE:
            if not self.image_file or not os.path.exists(self.image_file):
                result.add_error(FILE_DOES_NOT_EXIST)
        elif self.data_type == CaptureDataType.IMAGE_DATA:
            if self.image_data is None or self.image_data.size == 0:
                result.add_error(IMAGE_EMPTY)
        else:
            result.add_error(CAPTURE_TYPE_INVALID)
        return result

    def get_image(self) -> Tuple[Result, Optional[np.ndarray]]:
        """
        Return the capture's image as grayscale float32.

        File payloads are read from disk on each call.
        """
        if self.data_type == CaptureDataType.IMAGE_FILE:
            return load_image(self.image_file)

        result = self.validate()
        if result.has_errors():
            return result, None
        return result, to_mono(self.image_data)


class CaptureSequence:
    """Ordered list of captures in acquisition order."""

    def __init__(self, captures: Optional[List[Capture]] = None):
        self._captures: List[Capture] = []
        if captures:
            for capture in captures:
                self.add(capture).raise_for_errors()

    def get_count(self) -> int:
        return len(self._captures)

    def clear(self) -> None:
        self._captures.clear()

    def add(self, capture: Capture) -> Result:
        """
        Append a copy of a capture.

        Returns:
            Result with CAPTURE_TYPE_INVALID, FILE_DOES_NOT_EXIST or IMAGE_EMPTY
            when the payload is untagged or missing
        """
        if isinstance(capture, CaptureSequence):
            return self.extend(capture)
        if not isinstance(capture, Capture):
            raise TypeError(f"Expected Capture, got {type(capture).__name__}")

        result = capture.validate()
        if result.has_errors():
            logger.debug(f"Capture for pattern {capture.pattern_id} rejected: {result.get_errors()}")
            return result

        self._captures.append(capture.copy())
        return result

    def extend(self, sequence: 'CaptureSequence') -> Result:
        result = Result()
        for capture in sequence:
            result.add(self.add(capture))
        return result

    def get(self, index: int) -> Tuple[Result, Optional[Capture]]:
        result = Result()
        if not 0 <= index < len(self._captures):
            result.add_error(CAPTURE_SEQUENCE_INDEX_OUT_OF_RANGE)
            return result, None
        return result, self._captures[index].copy()

    def set(self, index: int, capture: Capture) -> Result:
        result = Result()
        if not 0 <= index < len(self._captures):
            result.add_error(CAPTURE_SEQUENCE_INDEX_OUT_OF_RANGE)
            return result

        result = capture.validate()
        if result.has_errors():
            return result

        self._captures[index] = capture.copy()
        return result

    def remove(self, index: int) -> Result:
        result = Result()
        if not 0 <= index < len(self._captures):
            result.add_error(CAPTURE_SEQUENCE_INDEX_OUT_OF_RANGE)
            return result
        del self._captures[index]
        return result

    def equal_data_types(self) -> bool:
        """True when every capture uses the same payload kind (or the sequence is empty)."""
        if not self._captures:
            return True
        first = self._captures[0].data_type
        return all(c.data_type == first for c in self._captures[1:])

    def check_decodable(self) -> Result:
        """Sequence shape checks run by the decoders before touching any pixel."""
        result = Result()
        if not self._captures:
            result.add_error(CAPTURE_SEQUENCE_EMPTY)
        elif not self.equal_data_types():
            result.add_error(CAPTURE_SEQUENCE_TYPES_NOT_EQUAL)
        return result

    def load_images(self) -> Tuple[Result, List[np.ndarray]]:
        """
        Load every capture as a grayscale float32 image.

        Returns:
            Result and the image list (empty if any capture failed to load)
        """
        result = Result()
        images = []
        for index, capture in enumerate(self._captures):
            load_result, image = capture.get_image()
            if load_result.has_errors():
                logger.error(f"Failed to load capture {index}: {load_result.get_errors()}")
                result.add(load_result)
                return result, []
            images.append(image)
        return result, images

    def __len__(self):
        return len(self._captures)

    def __iter__(self) -> Iterator[Capture]:
        return iter(list(self._captures))

    def __repr__(self):
        return f"CaptureSequence(count={len(self._captures)})"
