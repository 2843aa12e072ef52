"""Basic analysis example using the built-in DI container."""

from datetime import datetime, timedelta, timezone

from creator_analytics.core.config import AnalyticsConfig
from creator_analytics.core.container import DIContainer
from creator_analytics.domain.models import parse_records


def main() -> None:
    analyzer = DIContainer.create_analyzer(config=AnalyticsConfig())
    yesterday = datetime.now(timezone.utc) - timedelta(days=1)

    records = parse_records(
        [
            {"category": "engagement", "views": 1000, "clicks": 150, "shares": 50},
            {
                "category": "revenue",
                "id": "txn-1",
                "amount": "1000.00",
                "currency": "USD",
                "timestamp": yesterday.isoformat(),
            },
            {
                "category": "subscriber",
                "id": "subs-1",
                "totalSubscribers": 1200,
                "newSubscribers": 40,
                "churnRate": "0.05",
                "timestamp": yesterday.isoformat(),
            },
        ]
    )

    result = analyzer.analyze(records)
    print("Engagement rate:", result.engagement.engagement_rate)
    print("Average transaction:", result.revenue.average_transaction_value)
    print("Retention:", result.subscribers.retention_rate)
    print("Dashboard payload:", result.to_dict())


if __name__ == "__main__":
    main()
