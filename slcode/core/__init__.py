"""Core building blocks: results, parameters, logging and image helpers."""

from .result import Result
from .parameters import Parameters, register_enum_type
from .exceptions import SlcodeException, StructuredLightError

__all__ = [
    'Result',
    'Parameters',
    'register_enum_type',
    'SlcodeException',
    'StructuredLightError',
]
