"""
Named setting entries consumed by the codecs at setup time.

A :class:`Parameters` block maps entry names (``PatternRows``,
``IncludeInverted``...) to plain values or enum members. It can be written to
and read back from a JSON file.
"""

import json
import logging
import os
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple, Type

from slcode.core.constants import (
    PARAMETERS_EMPTY,
    PARAMETERS_FILE_DOES_NOT_EXIST,
    PARAMETERS_FILE_INVALID,
    PARAMETERS_FILE_WRITE_FAILED,
)
from slcode.core.result import Result

logger = logging.getLogger(__name__)

# Enum types that may appear in a saved parameters file, by class name
_ENUM_TYPES: Dict[str, Type[Enum]] = {}


def register_enum_type(enum_cls: Type[Enum]) -> Type[Enum]:
    """Class decorator making an enum restorable by Parameters.load()."""
    _ENUM_TYPES[enum_cls.__name__] = enum_cls
    return enum_cls


class Parameters:
    """Ordered collection of named setting entries."""

    def __init__(self, entries: Optional[Dict[str, Any]] = None):
        self._entries: Dict[str, Any] = {}
        if entries:
            for name, value in entries.items():
                self.set(name, value)

    def set(self, name: str, value: Any) -> 'Parameters':
        if not name:
            raise ValueError("Parameter name must not be empty")
        self._entries[name] = value
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return self._entries.get(name, default)

    def contains(self, name: str) -> bool:
        return name in self._entries

    def remove(self, name: str) -> bool:
        """Remove an entry. Returns False when the entry did not exist."""
        if name not in self._entries:
            return False
        del self._entries[name]
        return True

    def clear(self) -> None:
        self._entries.clear()

    def count(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def update(self, other: 'Parameters') -> 'Parameters':
        """Copy every entry of another block into this one."""
        for name, value in other.items():
            self._entries[name] = value
        return self

    def copy(self) -> 'Parameters':
        return Parameters(dict(self._entries))

    def items(self) -> Iterator[Tuple[str, Any]]:
        return iter(list(self._entries.items()))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = {}
        for name, value in self._entries.items():
            if isinstance(value, Enum):
                data[name] = {'enum': type(value).__name__, 'name': value.name}
            else:
                data[name] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Parameters':
        params = cls()
        for name, value in data.items():
            if isinstance(value, dict) and set(value.keys()) == {'enum', 'name'}:
                enum_cls = _ENUM_TYPES.get(value['enum'])
                if enum_cls is None:
                    raise ValueError(f"Unknown enum type '{value['enum']}' for entry '{name}'")
                value = enum_cls[value['name']]
            params.set(name, value)
        return params

    def save(self, path: str) -> Result:
        """
        Write all entries to a JSON file.

        Args:
            path: Destination file

        Returns:
            Result with PARAMETERS_EMPTY when there is nothing to save, or
            PARAMETERS_FILE_WRITE_FAILED when an entry is not serializable or
            the file cannot be written
        """
        result = Result()
        if self.is_empty():
            result.add_error(PARAMETERS_EMPTY)
            return result

        try:
            text = json.dumps(self.to_dict(), indent=2)
            with open(path, 'w') as f:
                f.write(text)
        except (TypeError, ValueError, OSError) as e:
            logger.error(f"Error saving parameters to {path}: {e}")
            result.add_error(PARAMETERS_FILE_WRITE_FAILED)
            return result

        logger.debug(f"Saved {self.count()} parameters to {path}")
        return result

    def load(self, path: str) -> Result:
        """
        Read entries from a JSON file, replacing entries with the same name.

        Args:
            path: Source file

        Returns:
            Result with PARAMETERS_FILE_DOES_NOT_EXIST or PARAMETERS_FILE_INVALID
        """
        result = Result()
        if not os.path.exists(path):
            logger.warning(f"Parameters file not found: {path}")
            result.add_error(PARAMETERS_FILE_DOES_NOT_EXIST)
            return result

        try:
            with open(path, 'r') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("top level must be an object")
            loaded = Parameters.from_dict(data)
        except (ValueError, KeyError) as e:
            logger.error(f"Error loading parameters from {path}: {e}")
            result.add_error(PARAMETERS_FILE_INVALID)
            return result

        self.update(loaded)
        logger.debug(f"Loaded {loaded.count()} parameters from {path}")
        return result

    def __len__(self):
        return len(self._entries)

    def __contains__(self, name):
        return name in self._entries

    def __iter__(self):
        return iter(list(self._entries.keys()))

    def __eq__(self, other):
        if not isinstance(other, Parameters):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self):
        return f"Parameters({self._entries!r})"
