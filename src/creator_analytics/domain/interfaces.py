"""Domain-level interfaces defining contracts for analysis collaborators."""

from __future__ import annotations

from datetime import datetime
from typing import List, Protocol, Sequence

from pydantic import BaseModel, ConfigDict

from .models import (
    AggregatedTotals,
    DerivedRates,
    MetricRecord,
    TimeSeriesSummary,
)


class StoredTimeSeriesRow(BaseModel):
    """Time-series row as persisted by a sink, including summary statistics."""

    model_config = ConfigDict(frozen=True)

    source_id: str
    category: str
    timestamp: datetime
    value: float
    min: float
    max: float
    avg: float
    sum: float


class IMetricValidator(Protocol):
    """Checks a single record against the invariants of its category."""

    def validate(
        self, record: MetricRecord, *, include_timestamp: bool = True
    ) -> MetricRecord:
        """Return the record unchanged or raise ValidationError naming every bad field."""


class IMetricsAggregator(Protocol):
    """Partitions a batch by category and folds each partition into totals."""

    def aggregate(self, records: Sequence[MetricRecord]) -> AggregatedTotals:
        """Return per-category totals; any invalid record aborts the whole batch."""


class IRateCalculator(Protocol):
    """Derives percentages and ratios from aggregated totals."""

    def derive_rates(self, totals: AggregatedTotals) -> DerivedRates:
        """Return rates for the totals. Defined for every input, including zeros."""


class ITimeSeriesSynthesizer(Protocol):
    """Reduces a batch to ordered time-series points with summary statistics."""

    def synthesize(self, records: Sequence[MetricRecord]) -> TimeSeriesSummary:
        """Return the summary, or an empty one when synthesis fails."""


class ITimeSeriesSink(Protocol):
    """Accepts time-series points for storage; duplicates must be tolerated."""

    def insert(
        self,
        source_id: str,
        category: str,
        timestamp: datetime,
        value: float,
        min: float,
        max: float,
        avg: float,
        sum: float,
    ) -> None:
        """Store one point together with the statistics of its summary."""


class ITimeSeriesRepository(ITimeSeriesSink, Protocol):
    """Sink that can also read stored rows back."""

    def find_by_date(self, start: datetime, end: datetime) -> List[StoredTimeSeriesRow]:
        """Return rows whose timestamps fall within the inclusive window."""

    def find_by_source(self, source_id: str) -> List[StoredTimeSeriesRow]:
        """Return rows produced from the given source record id."""
