"""Demonstrates persisting time-series points through a custom sink."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from creator_analytics.core.config import AnalyticsConfig
from creator_analytics.core.container import DIContainer
from creator_analytics.domain.models import RevenueMetric


class PrintingSink:
    """Echoes every point instead of writing it to a database."""

    def insert(self, source_id, category, timestamp, value, min, max, avg, sum) -> None:
        print(f"{timestamp.isoformat()} {category}/{source_id} = {value} (avg {avg})")


def main() -> None:
    analyzer = DIContainer.create_analyzer(
        config=AnalyticsConfig(), sink=PrintingSink()
    )
    start = datetime.now(timezone.utc) - timedelta(hours=3)

    records = [
        RevenueMetric(
            id=f"txn-{idx}",
            amount=Decimal("19.99") * idx,
            currency="USD",
            timestamp=start + timedelta(hours=idx),
        )
        for idx in range(1, 4)
    ]
    result = analyzer.analyze(records)
    print("Revenue total:", result.revenue.total)


if __name__ == "__main__":
    main()
