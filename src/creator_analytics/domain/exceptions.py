"""Exception hierarchy for metric analysis failures."""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Tuple

from creator_analytics.validation.rules import FieldViolation

VALIDATION_ERROR = "400_VALIDATION_ERROR"
INTERNAL_SERVER_ERROR = "500_INTERNAL_SERVER_ERROR"


class AnalyticsError(Exception):
    """Base class for all domain-level errors in the analytics engine."""

    default_message = "Analytics error occurred"
    code = INTERNAL_SERVER_ERROR

    def __init__(
        self, message: str | None = None, *, context: Mapping[str, Any] | None = None
    ):
        self.message = message or self.default_message
        self.context: Mapping[str, Any] = dict(context or {})
        formatted = self._format_message()
        super().__init__(formatted)

    def _format_message(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


class ValidationError(AnalyticsError):
    """Caller-supplied data violates a metric invariant.

    Carries every violated field, not only the first one found.
    """

    default_message = "Metric validation failed"
    code = VALIDATION_ERROR

    def __init__(
        self,
        violations: Sequence[FieldViolation] = (),
        message: str | None = None,
        *,
        context: Mapping[str, Any] | None = None,
    ):
        self.violations: Tuple[FieldViolation, ...] = tuple(violations)
        merged = dict(context or {})
        if self.violations:
            merged.setdefault("fields", list(self.fields))
        super().__init__(message, context=merged)

    @property
    def fields(self) -> Tuple[str, ...]:
        seen: list[str] = []
        for violation in self.violations:
            if violation.field not in seen:
                seen.append(violation.field)
        return tuple(seen)


class MixedCurrencyError(ValidationError):
    """Revenue records in one batch use more than one currency."""

    default_message = "Revenue batch spans multiple currencies"


class ProcessingError(AnalyticsError):
    """Engine-internal fault unrelated to the shape of the input."""

    default_message = "Metric processing failed"


class PersistenceError(AnalyticsError):
    """Time-series sink could not store or load data."""

    default_message = "Time-series persistence failed"
