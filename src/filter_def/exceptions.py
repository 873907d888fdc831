"""
Filter definition exception hierarchy with fuzzy-match suggestions.

All exceptions inherit from ``FilterDefError`` and provide
``to_dict()`` for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .validation import FilterViolation


class FilterDefError(Exception):
    """Base exception for all filter definition errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class UnknownFilterKindError(FilterDefError):
    """
    Unknown filter kind specified.

    Provides fuzzy-matched suggestions for likely intended kinds.
    """

    def __init__(self, kind: str, valid_kinds: list[str]) -> None:
        self.kind = kind
        self.valid_kinds = valid_kinds
        self.suggestions = get_close_matches(kind, valid_kinds, n=3, cutoff=0.6)

        message = f"Unknown filter kind: '{kind}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += f" Valid kinds: {', '.join(sorted(valid_kinds))}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNKNOWN_FILTER_KIND",
            "kind": self.kind,
            "suggestions": self.suggestions,
            "valid_kinds": sorted(self.valid_kinds),
        }


class FieldNotFoundError(FilterDefError):
    """
    A filter references a field the entity shape does not declare.

    Example message::

        Unknown field 'emial' on 'User'. Did you mean: email?
        Known fields: age, email, name
    """

    #: Known fields listed in the message before it is truncated.
    max_listed = 12

    def __init__(
        self,
        field: str,
        model_name: str,
        available_fields: list[str],
        full_path: str | None = None,
        cutoff: float = 0.6,
    ) -> None:
        self.field = field
        self.model_name = model_name
        self.available_fields = sorted(available_fields)
        self.full_path = full_path or field
        self.suggestions = get_close_matches(
            field, self.available_fields, n=3, cutoff=cutoff
        )
        super().__init__(self._describe())

    def _describe(self) -> str:
        head = f"Unknown field '{self.field}' on '{self.model_name}'"
        if self.full_path != self.field:
            head += f" (in '{self.full_path}')"
        head += "."
        if self.suggestions:
            head += f" Did you mean: {', '.join(self.suggestions)}?"

        listed = self.available_fields[: self.max_listed]
        known = ", ".join(listed) or "(none)"
        hidden = len(self.available_fields) - len(listed)
        if hidden > 0:
            known += f" (+{hidden} more)"
        return f"{head}\nKnown fields: {known}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_NOT_FOUND",
            "field": self.field,
            "model": self.model_name,
            "path": self.full_path,
            "suggestions": self.suggestions,
            "known_fields": self.available_fields,
        }


class InvalidFilterDefError(FilterDefError):
    """
    A filter definition failed validation.

    Carries every violation found, so callers can report them all at once.
    """

    def __init__(self, violations: list[FilterViolation]) -> None:
        self.violations = list(violations)
        lines = [f"Invalid filter definition ({len(self.violations)} problem(s)):"]
        lines.extend(f"  - {v}" for v in self.violations)
        super().__init__("\n".join(lines))

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_FILTER_DEF",
            "violations": [v.to_dict() for v in self.violations],
        }


class FilterInputError(FilterDefError, TypeError):
    """A filter input value has the wrong shape for its filter kind."""

    def __init__(self, message: str, filter_name: str | None = None) -> None:
        self.message = message
        self.filter_name = filter_name
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_FILTER_INPUT",
            "message": self.message,
            "filter": self.filter_name,
        }
