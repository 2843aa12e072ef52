from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from creator_analytics.analytics.aggregator import MetricsAggregator
from creator_analytics.domain.exceptions import (
    MixedCurrencyError,
    ProcessingError,
    ValidationError,
)
from creator_analytics.domain.models import (
    EngagementMetric,
    MetricCategory,
    RevenueMetric,
    SubscriberMetric,
)

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _revenue(idx: int, amount: str, currency: str = "USD") -> RevenueMetric:
    return RevenueMetric(
        id=f"txn-{idx}",
        amount=Decimal(amount),
        currency=currency,
        timestamp=START + timedelta(minutes=idx),
    )


def _subscribers(idx: int, total: int, new: int, churn: str) -> SubscriberMetric:
    return SubscriberMetric(
        id=f"subs-{idx}",
        total_subscribers=total,
        new_subscribers=new,
        churn_rate=Decimal(churn),
        timestamp=START + timedelta(days=idx),
    )


def test_engagement_sums_fields_and_total_engagement():
    totals = MetricsAggregator().aggregate(
        [EngagementMetric(views=1000, clicks=150, shares=50)]
    )

    assert totals.engagement.views == 1000
    assert totals.engagement.clicks == 150
    assert totals.engagement.shares == 50
    assert totals.engagement.total_engagement == 200


def test_engagement_sums_across_records():
    totals = MetricsAggregator().aggregate(
        [
            EngagementMetric(views=100, clicks=10, shares=5),
            EngagementMetric(views=50, clicks=5, shares=0),
        ]
    )

    assert totals.engagement.views == 150
    assert totals.engagement.total_engagement == 20


def test_revenue_totals_and_transaction_count():
    totals = MetricsAggregator().aggregate([_revenue(1, "1000")])

    assert totals.revenue.total == Decimal("1000")
    assert totals.revenue.transactions == 1
    assert totals.revenue.currency == "USD"
    assert totals.revenue.mixed_currency is False


def test_subscribers_take_max_total_and_mean_churn():
    totals = MetricsAggregator().aggregate(
        [_subscribers(1, 100, 10, "0.05"), _subscribers(2, 150, 20, "0.03")]
    )

    assert totals.subscribers.total == 150
    assert totals.subscribers.new == 30
    assert totals.subscribers.churn_rate == Decimal("0.04")
    assert totals.subscribers.samples == 2


def test_empty_batch_yields_zero_totals():
    totals = MetricsAggregator().aggregate([])

    assert totals.engagement.views == 0
    assert totals.revenue.total == 0
    assert totals.revenue.currency == "USD"
    assert totals.subscribers.churn_rate == 0
    assert totals.subscribers.samples == 0


def test_default_currency_is_configurable():
    totals = MetricsAggregator(default_currency="EUR").aggregate([])

    assert totals.revenue.currency == "EUR"


def test_invalid_record_aborts_entire_batch():
    records = [
        _revenue(1, "10"),
        EngagementMetric(views=10, clicks=1, shares=1),
        EngagementMetric.model_construct(views=100, clicks=300, shares=0),
    ]

    with pytest.raises(ValidationError) as exc_info:
        MetricsAggregator().aggregate(records)

    assert "clicks" in exc_info.value.fields


def test_aggregation_ignores_timestamps():
    broken_timestamp = RevenueMetric.model_construct(
        id="txn-9", amount=Decimal("7"), currency="USD", timestamp=None
    )

    totals = MetricsAggregator().aggregate([broken_timestamp])

    assert totals.revenue.total == Decimal("7")


def test_mixed_currency_is_flagged_with_breakdown():
    totals = MetricsAggregator().aggregate(
        [_revenue(1, "10", "USD"), _revenue(2, "5", "EUR"), _revenue(3, "2", "USD")]
    )

    assert totals.revenue.mixed_currency is True
    assert totals.revenue.currency == "USD"
    assert totals.revenue.by_currency == {
        "USD": Decimal("12"),
        "EUR": Decimal("5"),
    }
    assert totals.revenue.total == Decimal("17")


def test_mixed_currency_can_be_rejected():
    aggregator = MetricsAggregator(reject_mixed_currency=True)

    with pytest.raises(MixedCurrencyError) as exc_info:
        aggregator.aggregate([_revenue(1, "10", "USD"), _revenue(2, "5", "EUR")])

    assert exc_info.value.fields == ("currency",)
    assert isinstance(exc_info.value, ValidationError)


def test_partition_groups_by_category():
    records = [
        _revenue(1, "1"),
        EngagementMetric(views=1, clicks=0, shares=0),
        _subscribers(1, 5, 1, "0.1"),
        _revenue(2, "2"),
    ]

    grouped = MetricsAggregator().partition(records)

    assert len(grouped[MetricCategory.REVENUE]) == 2
    assert len(grouped[MetricCategory.ENGAGEMENT]) == 1
    assert len(grouped[MetricCategory.SUBSCRIBER]) == 1


def test_category_of_rejects_unknown_types():
    with pytest.raises(ProcessingError):
        MetricsAggregator.category_of(object())  # type: ignore[arg-type]
