"""
Image helpers used when reading capture payloads.
"""

import logging
import os
from typing import Optional, Tuple

import cv2
import numpy as np

from slcode.core.constants import FILE_DOES_NOT_EXIST, IMAGE_EMPTY, IMAGE_LOAD_FAILED
from slcode.core.result import Result

logger = logging.getLogger(__name__)


def to_mono(image: np.ndarray) -> np.ndarray:
    """
    Convert an image to a single channel float32 array.

    Args:
        image: Grayscale (H, W), single channel (H, W, 1), BGR or BGRA image

    Returns:
        Grayscale image as float32
    """
    if image.ndim == 3:
        if image.shape[2] == 1:
            image = image[:, :, 0]
        elif image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
        else:
            image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return image.astype(np.float32)


def load_image(path: str) -> Tuple[Result, Optional[np.ndarray]]:
    """
    Load an image file as grayscale float32.

    Args:
        path: Image file path

    Returns:
        Result and the loaded image (None on failure)
    """
    result = Result()
    if not path or not os.path.exists(path):
        logger.error(f"Image file does not exist: {path}")
        result.add_error(FILE_DOES_NOT_EXIST)
        return result, None

    image = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if image is None:
        logger.error(f"OpenCV could not read image: {path}")
        result.add_error(IMAGE_LOAD_FAILED)
        return result, None

    if image.size == 0:
        result.add_error(IMAGE_EMPTY)
        return result, None

    return result, to_mono(image)
