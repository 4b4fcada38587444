"""Structured light codecs."""

import logging

from .structured_light import (
    CodingMethod,
    StructuredLight,
    StructuredLightConfig,
    pattern_positions,
    pattern_resolution,
)
from .gray_code import GrayCode, GrayCodeConfig, binary_to_gray, gray_to_binary
from .three_phase import ThreePhase, ThreePhaseConfig, compute_wrapped_phase, unwrap_hybrid

logger = logging.getLogger(__name__)

_CODECS = {
    CodingMethod.GRAY_CODE: GrayCode,
    CodingMethod.THREE_PHASE: ThreePhase,
}


def create_structured_light(method) -> StructuredLight:
    """
    Create a codec for a coding method.

    Args:
        method: CodingMethod member or its value ("gray_code", "three_phase")

    Returns:
        New, not yet set up codec
    """
    if not isinstance(method, CodingMethod):
        try:
            method = CodingMethod(method)
        except ValueError:
            raise ValueError(f"Unknown coding method: {method}") from None

    logger.debug(f"Creating {method.value} codec")
    return _CODECS[method]()


__all__ = [
    'CodingMethod',
    'StructuredLight',
    'StructuredLightConfig',
    'GrayCode',
    'GrayCodeConfig',
    'ThreePhase',
    'ThreePhaseConfig',
    'create_structured_light',
    'compute_wrapped_phase',
    'unwrap_hybrid',
    'binary_to_gray',
    'gray_to_binary',
    'pattern_positions',
    'pattern_resolution',
]
