"""Time-series synthesis with a soft-failure boundary.

Each valid record is reduced to one scalar point. Any failure while doing
so is recorded as a diagnostic and the summary degrades to empty; nothing
raised here ever reaches the caller.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from creator_analytics.domain.exceptions import ProcessingError, ValidationError
from creator_analytics.domain.interfaces import IMetricValidator, ITimeSeriesSynthesizer
from creator_analytics.domain.models import (
    EngagementMetric,
    MetricCategory,
    MetricRecord,
    RevenueMetric,
    SubscriberMetric,
    TimeSeriesPoint,
    TimeSeriesSummary,
)
from creator_analytics.utils.timeutils import as_utc
from creator_analytics.validation.validator import MetricValidator


class Diagnostic(BaseModel):
    """Why a time series degraded. Recorded and logged, never raised."""

    model_config = ConfigDict(frozen=True)

    message: str
    error_type: str
    category: Optional[str] = None
    fields: Tuple[str, ...] = Field(default_factory=tuple)
    source_id: Optional[str] = None


class SynthesisOutcome(BaseModel):
    """Summary plus the diagnostics collected while building it."""

    model_config = ConfigDict(frozen=True)

    summary: TimeSeriesSummary
    diagnostics: Tuple[Diagnostic, ...] = Field(default_factory=tuple)

    @property
    def degraded(self) -> bool:
        return bool(self.diagnostics)


class TimeSeriesSynthesizer(ITimeSeriesSynthesizer):
    """Reduces records to points, orders them by time and computes statistics."""

    def __init__(
        self,
        validator: IMetricValidator | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._validator = validator or MetricValidator()
        self._logger = logger or logging.getLogger(__name__)

    def synthesize(self, records: Sequence[MetricRecord]) -> TimeSeriesSummary:
        return self.synthesize_with_diagnostics(records).summary

    def synthesize_with_diagnostics(
        self, records: Sequence[MetricRecord]
    ) -> SynthesisOutcome:
        current: MetricRecord | None = None
        points: List[TimeSeriesPoint] = []
        minimum, maximum, total = math.inf, -math.inf, 0.0
        try:
            for current in records:
                self._validator.validate(current)
                point = self.to_point(current)
                points.append(point)
                minimum = min(minimum, point.value)
                maximum = max(maximum, point.value)
                total += point.value
            current = None
            # input order carries no meaning; this is the only ordering imposed
            points.sort(key=lambda point: point.timestamp)
        except Exception as exc:
            return self._degrade(exc, current, len(records))

        if not points:
            return SynthesisOutcome(summary=TimeSeriesSummary.empty())

        summary = TimeSeriesSummary(
            points=tuple(points),
            min=minimum,
            max=maximum,
            avg=total / len(points),
            sum=total,
        )
        self._logger.info(
            "time_series_synthesized",
            extra={"point_count": len(points), "sum": summary.sum},
        )
        return SynthesisOutcome(summary=summary)

    @staticmethod
    def to_point(record: MetricRecord) -> TimeSeriesPoint:
        if isinstance(record, EngagementMetric):
            value = float(record.views + record.clicks + record.shares)
            category = MetricCategory.ENGAGEMENT
        elif isinstance(record, RevenueMetric):
            value = float(record.amount)
            category = MetricCategory.REVENUE
        elif isinstance(record, SubscriberMetric):
            value = float(record.total_subscribers)
            category = MetricCategory.SUBSCRIBER
        else:
            raise ProcessingError(
                "Unhandled metric record type",
                context={"type": type(record).__name__},
            )
        return TimeSeriesPoint(
            timestamp=as_utc(record.timestamp),
            value=value,
            category=category,
            source_id=record.id,
        )

    def _degrade(
        self,
        exc: Exception,
        record: MetricRecord | None,
        record_count: int,
    ) -> SynthesisOutcome:
        fields = exc.fields if isinstance(exc, ValidationError) else ()
        category = getattr(record, "category", None)
        source_id = getattr(record, "id", None)
        diagnostic = Diagnostic(
            message=str(exc),
            error_type=type(exc).__name__,
            category=None if category is None else str(category),
            fields=fields,
            source_id=None if source_id is None else str(source_id),
        )
        self._logger.warning(
            "time_series_degraded",
            extra={
                "error": diagnostic.message,
                "error_type": diagnostic.error_type,
                "category": diagnostic.category,
                "fields": list(diagnostic.fields),
                "source_id": diagnostic.source_id,
                "record_count": record_count,
            },
        )
        return SynthesisOutcome(
            summary=TimeSeriesSummary.empty(), diagnostics=(diagnostic,)
        )
