"""Pure rate derivation from aggregated totals."""

from __future__ import annotations

from decimal import Decimal

from creator_analytics.domain.interfaces import IRateCalculator
from creator_analytics.domain.models import AggregatedTotals, DerivedRates

_HUNDRED = Decimal("100")


class RateCalculator(IRateCalculator):
    """Every formula is defined for zero denominators, so this never fails."""

    def derive_rates(self, totals: AggregatedTotals) -> DerivedRates:
        engagement = totals.engagement
        return DerivedRates(
            # capped at 100; click_through_rate + share_rate keeps the unclamped ratio
            engagement_rate=min(
                self._percentage(engagement.total_engagement, engagement.views), 100.0
            ),
            click_through_rate=self._percentage(engagement.clicks, engagement.views),
            share_rate=self._percentage(engagement.shares, engagement.views),
            average_transaction_value=self.average_transaction_value(
                totals.revenue.total, totals.revenue.transactions
            ),
            retention_rate=self.retention_rate(totals.subscribers.churn_rate),
        )

    @staticmethod
    def average_transaction_value(total: Decimal, transactions: int) -> Decimal:
        if transactions <= 0:
            return Decimal("0")
        return total / transactions

    @staticmethod
    def retention_rate(churn_rate: Decimal) -> Decimal:
        # zero churn and "no subscriber data" both land on 100
        if churn_rate == 0:
            return _HUNDRED
        return _HUNDRED - churn_rate * _HUNDRED

    @staticmethod
    def _percentage(numerator: int, denominator: int) -> float:
        if denominator <= 0:
            return 0.0
        return round(numerator * 100 / denominator, 6)
