"""Classifies a batch of metric records and folds each category into totals."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, List, Sequence

from creator_analytics.domain.exceptions import (
    MixedCurrencyError,
    ProcessingError,
    ValidationError,
)
from creator_analytics.domain.interfaces import IMetricsAggregator, IMetricValidator
from creator_analytics.domain.models import (
    AggregatedTotals,
    EngagementMetric,
    EngagementTotals,
    MetricCategory,
    MetricRecord,
    RevenueMetric,
    RevenueTotals,
    SubscriberMetric,
    SubscriberTotals,
)
from creator_analytics.validation.rules import FieldViolation
from creator_analytics.validation.validator import MetricValidator

DEFAULT_CURRENCY = "USD"


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class MetricsAggregator(IMetricsAggregator):
    """All-or-nothing aggregation: one invalid record aborts the whole batch."""

    def __init__(
        self,
        validator: IMetricValidator | None = None,
        *,
        reject_mixed_currency: bool = False,
        default_currency: str = DEFAULT_CURRENCY,
        logger: logging.Logger | None = None,
    ) -> None:
        self._validator = validator or MetricValidator()
        self._reject_mixed_currency = reject_mixed_currency
        self._default_currency = default_currency
        self._logger = logger or logging.getLogger(__name__)

    def aggregate(self, records: Sequence[MetricRecord]) -> AggregatedTotals:
        partitions = self.partition(records)
        totals = AggregatedTotals(
            engagement=self.sum_engagement(partitions[MetricCategory.ENGAGEMENT]),
            revenue=self.sum_revenue(partitions[MetricCategory.REVENUE]),
            subscribers=self.sum_subscribers(partitions[MetricCategory.SUBSCRIBER]),
        )
        self._logger.info(
            "metrics_aggregated",
            extra={
                "record_count": len(records),
                "engagement_records": len(partitions[MetricCategory.ENGAGEMENT]),
                "revenue_records": len(partitions[MetricCategory.REVENUE]),
                "subscriber_records": len(partitions[MetricCategory.SUBSCRIBER]),
            },
        )
        return totals

    def partition(
        self, records: Sequence[MetricRecord]
    ) -> Dict[MetricCategory, List[MetricRecord]]:
        """Validate every record and bucket it by category.

        Timestamps are not part of this check; aggregation never reads them.
        """

        grouped: Dict[MetricCategory, List[MetricRecord]] = {
            category: [] for category in MetricCategory
        }
        for record in records:
            try:
                self._validator.validate(record, include_timestamp=False)
            except ValidationError as exc:
                self._logger.error(
                    "metric_validation_failed",
                    extra={
                        "code": exc.code,
                        "fields": list(exc.fields),
                        "source_id": getattr(record, "id", None),
                        "record_count": len(records),
                    },
                )
                raise
            grouped[self.category_of(record)].append(record)
        return grouped

    @staticmethod
    def category_of(record: MetricRecord) -> MetricCategory:
        if isinstance(record, EngagementMetric):
            return MetricCategory.ENGAGEMENT
        if isinstance(record, RevenueMetric):
            return MetricCategory.REVENUE
        if isinstance(record, SubscriberMetric):
            return MetricCategory.SUBSCRIBER
        raise ProcessingError(
            "Unhandled metric record type",
            context={"type": type(record).__name__},
        )

    @staticmethod
    def sum_engagement(records: Sequence[EngagementMetric]) -> EngagementTotals:
        views = sum(record.views for record in records)
        clicks = sum(record.clicks for record in records)
        shares = sum(record.shares for record in records)
        return EngagementTotals(
            views=views,
            clicks=clicks,
            shares=shares,
            total_engagement=clicks + shares,
        )

    def sum_revenue(self, records: Sequence[RevenueMetric]) -> RevenueTotals:
        total = Decimal("0")
        by_currency: Dict[str, Decimal] = {}
        currency = self._default_currency
        for record in records:
            amount = _as_decimal(record.amount)
            total += amount
            by_currency[record.currency] = (
                by_currency.get(record.currency, Decimal("0")) + amount
            )
            # last one seen wins; mixed batches are flagged below
            currency = record.currency

        mixed = len(by_currency) > 1
        if mixed:
            currencies = sorted(by_currency)
            if self._reject_mixed_currency:
                raise MixedCurrencyError(
                    [
                        FieldViolation(
                            "currency",
                            "batch mixes currencies " + ", ".join(currencies),
                            currencies,
                        )
                    ]
                )
            self._logger.warning(
                "mixed_currency_batch",
                extra={"currencies": currencies, "reported_currency": currency},
            )

        return RevenueTotals(
            total=total,
            currency=currency,
            transactions=len(records),
            by_currency=by_currency,
            mixed_currency=mixed,
        )

    @staticmethod
    def sum_subscribers(records: Sequence[SubscriberMetric]) -> SubscriberTotals:
        if not records:
            return SubscriberTotals()
        churn_total = sum(
            (_as_decimal(record.churn_rate) for record in records), Decimal("0")
        )
        return SubscriberTotals(
            # current state, not a cumulative count
            total=max(record.total_subscribers for record in records),
            new=sum(record.new_subscribers for record in records),
            churn_rate=churn_total / len(records),
            samples=len(records),
        )
