"""Pure per-category invariant checks.

Every check returns the full list of violations so callers can surface
complete diagnostics. Nothing here raises or logs.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from creator_analytics.utils.timeutils import as_utc, utc_now

CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")
MAX_ID_LENGTH = 255


@dataclass(frozen=True)
class FieldViolation:
    """A single field that failed its invariant."""

    field: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    return False


def count_violations(**counts: Any) -> List[FieldViolation]:
    return [
        FieldViolation(name, "must be a non-negative integer", value)
        for name, value in counts.items()
        if not _is_count(value)
    ]


def identifier_violations(value: Any, field: str = "id") -> List[FieldViolation]:
    if not isinstance(value, str) or not value.strip():
        return [FieldViolation(field, "must be a non-empty string", value)]
    if len(value) > MAX_ID_LENGTH:
        return [
            FieldViolation(field, f"must be at most {MAX_ID_LENGTH} characters", value)
        ]
    return []


def timestamp_violations(
    value: Any,
    *,
    field: str = "timestamp",
    not_after: Optional[datetime] = None,
) -> List[FieldViolation]:
    if not isinstance(value, datetime):
        return [FieldViolation(field, "must be a datetime", value)]
    if not_after is not None and as_utc(value) > as_utc(not_after):
        return [FieldViolation(field, "must not be in the future", value)]
    return []


def engagement_violations(views: Any, clicks: Any, shares: Any) -> List[FieldViolation]:
    violations = count_violations(views=views, clicks=clicks, shares=shares)
    if _is_count(views):
        if _is_count(clicks) and clicks > views:
            violations.append(
                FieldViolation("clicks", "cannot exceed number of views", clicks)
            )
        if _is_count(shares) and shares > views:
            violations.append(
                FieldViolation("shares", "cannot exceed number of views", shares)
            )
    return violations


def revenue_violations(
    id: Any,
    amount: Any,
    currency: Any,
    timestamp: Any,
    *,
    include_timestamp: bool = True,
) -> List[FieldViolation]:
    violations = identifier_violations(id)
    if not _is_finite_number(amount) or amount < 0:
        violations.append(
            FieldViolation("amount", "must be a finite non-negative number", amount)
        )
    if not isinstance(currency, str) or not CURRENCY_PATTERN.match(currency):
        violations.append(
            FieldViolation(
                "currency", "must be a 3-letter uppercase currency code", currency
            )
        )
    if include_timestamp:
        violations.extend(timestamp_violations(timestamp))
    return violations


def subscriber_violations(
    id: Any,
    total_subscribers: Any,
    new_subscribers: Any,
    churn_rate: Any,
    timestamp: Any,
    *,
    include_timestamp: bool = True,
    now: Optional[datetime] = None,
) -> List[FieldViolation]:
    violations = identifier_violations(id)
    violations.extend(
        count_violations(
            total_subscribers=total_subscribers, new_subscribers=new_subscribers
        )
    )
    if (
        _is_count(total_subscribers)
        and _is_count(new_subscribers)
        and new_subscribers > total_subscribers
    ):
        violations.append(
            FieldViolation(
                "new_subscribers",
                "cannot exceed total_subscribers",
                new_subscribers,
            )
        )
    if not _is_finite_number(churn_rate) or not 0 <= churn_rate <= 1:
        violations.append(
            FieldViolation("churn_rate", "must be between 0 and 1", churn_rate)
        )
    if include_timestamp:
        violations.extend(
            timestamp_violations(timestamp, not_after=now or utc_now())
        )
    return violations
