"""Record-level validator shared by construction and aggregation."""

from __future__ import annotations

from creator_analytics.domain.exceptions import ValidationError
from creator_analytics.domain.interfaces import IMetricValidator
from creator_analytics.domain.models import (
    EngagementMetric,
    MetricRecord,
    RevenueMetric,
    SubscriberMetric,
)
from creator_analytics.validation.rules import FieldViolation

_RECORD_TYPES = (EngagementMetric, RevenueMetric, SubscriberMetric)


class MetricValidator(IMetricValidator):
    """Re-checks records that may have bypassed construction-time validation."""

    def validate(
        self, record: MetricRecord, *, include_timestamp: bool = True
    ) -> MetricRecord:
        if not isinstance(record, _RECORD_TYPES):
            raise ValidationError(
                [
                    FieldViolation(
                        "category", "unsupported metric record type", type(record).__name__
                    )
                ]
            )
        violations = record.violations(include_timestamp=include_timestamp)
        if violations:
            raise ValidationError(
                violations,
                context={"category": record.category, "source_id": record.id},
            )
        return record
