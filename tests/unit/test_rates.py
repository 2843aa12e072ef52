from decimal import Decimal

import pytest

from creator_analytics.analytics.rates import RateCalculator
from creator_analytics.domain.models import (
    AggregatedTotals,
    EngagementTotals,
    RevenueTotals,
    SubscriberTotals,
)


def _totals(**parts) -> AggregatedTotals:
    return AggregatedTotals(**parts)


def test_engagement_rate_example():
    rates = RateCalculator().derive_rates(
        _totals(
            engagement=EngagementTotals(
                views=1000, clicks=150, shares=50, total_engagement=200
            )
        )
    )

    assert rates.engagement_rate == 20.0
    assert rates.click_through_rate == 15.0
    assert rates.share_rate == 5.0


def test_zero_views_yield_zero_rates():
    rates = RateCalculator().derive_rates(_totals())

    assert rates.engagement_rate == 0.0
    assert rates.click_through_rate == 0.0


@pytest.mark.parametrize(
    "views,clicks,shares",
    [(1, 0, 0), (10, 10, 10), (7, 3, 5), (1000, 999, 1)],
)
def test_engagement_rate_stays_within_percentage_bounds(views, clicks, shares):
    rates = RateCalculator().derive_rates(
        _totals(
            engagement=EngagementTotals(
                views=views,
                clicks=clicks,
                shares=shares,
                total_engagement=clicks + shares,
            )
        )
    )

    assert 0.0 <= rates.engagement_rate <= 100.0


def test_average_transaction_value():
    rates = RateCalculator().derive_rates(
        _totals(revenue=RevenueTotals(total=Decimal("300"), transactions=3))
    )

    assert rates.average_transaction_value == Decimal("100")


def test_average_transaction_value_without_transactions():
    assert RateCalculator.average_transaction_value(Decimal("0"), 0) == 0


def test_retention_rate_from_mean_churn():
    rates = RateCalculator().derive_rates(
        _totals(subscribers=SubscriberTotals(churn_rate=Decimal("0.04"), samples=2))
    )

    assert rates.retention_rate == 96


def test_retention_rate_defaults_to_hundred():
    assert RateCalculator().derive_rates(_totals()).retention_rate == 100
    assert RateCalculator.retention_rate(Decimal("0")) == 100


def test_clamped_engagement_rate_leaves_component_rates_unclamped():
    rates = RateCalculator().derive_rates(
        _totals(
            engagement=EngagementTotals(
                views=10, clicks=10, shares=10, total_engagement=20
            )
        )
    )

    assert rates.engagement_rate == 100.0
    assert rates.click_through_rate + rates.share_rate == 200.0
