"""
Accumulating result value returned by every fallible operation.

A :class:`Result` carries zero or more named errors and warnings. Operations
return a fresh result (or merge into one passed along) instead of raising.
Callers check :meth:`Result.has_errors` before trusting any output.
"""

from typing import List, Iterable

from slcode.core.exceptions import StructuredLightError


class Result:
    """List of error and warning names produced by an operation."""

    def __init__(self):
        self._errors: List[str] = []
        self._warnings: List[str] = []

    @classmethod
    def from_error(cls, error: str) -> 'Result':
        result = cls()
        result.add_error(error)
        return result

    def add_error(self, error: str) -> None:
        """Record an error name. Empty names are ignored."""
        if error:
            self._errors.append(error)

    def add_warning(self, warning: str) -> None:
        """Record a warning name. Empty names are ignored."""
        if warning:
            self._warnings.append(warning)

    def add(self, other: 'Result') -> 'Result':
        """
        Merge the errors and warnings of another result into this one.

        Args:
            other: Result to merge

        Returns:
            self, so merges can be chained
        """
        for error in other.get_errors():
            self.add_error(error)
        for warning in other.get_warnings():
            self.add_warning(warning)
        return self

    def has_errors(self) -> bool:
        return len(self._errors) > 0

    def has_warnings(self) -> bool:
        return len(self._warnings) > 0

    def contains_error(self, error: str) -> bool:
        return error in self._errors

    def contains_warning(self, warning: str) -> bool:
        return warning in self._warnings

    def get_errors(self) -> List[str]:
        return list(self._errors)

    def get_warnings(self) -> List[str]:
        return list(self._warnings)

    def get_error_count(self) -> int:
        return len(self._errors)

    def get_warning_count(self) -> int:
        return len(self._warnings)

    def clear(self) -> None:
        self._errors.clear()
        self._warnings.clear()

    def raise_for_errors(self) -> None:
        """
        Raise StructuredLightError if this result carries any error.

        Raises:
            StructuredLightError: With the error and warning lists attached
        """
        if self.has_errors():
            raise StructuredLightError(self._errors, self._warnings)

    def __bool__(self):
        raise TypeError(
            "Result has no truth value; use has_errors() or has_warnings()"
        )

    def __eq__(self, other):
        if not isinstance(other, Result):
            return NotImplemented
        return self._errors == other._errors and self._warnings == other._warnings

    def __repr__(self):
        return f"Result(errors={self._errors!r}, warnings={self._warnings!r})"

    def __str__(self):
        lines = []
        if self._errors:
            lines.append(f"Errors ({len(self._errors)}):")
            lines.extend(f"  {error}" for error in self._errors)
        if self._warnings:
            lines.append(f"Warnings ({len(self._warnings)}):")
            lines.extend(f"  {warning}" for warning in self._warnings)
        return "\n".join(lines) if lines else "OK"


def merge_results(results: Iterable[Result]) -> Result:
    """Combine several results into a new one."""
    merged = Result()
    for result in results:
        merged.add(result)
    return merged
