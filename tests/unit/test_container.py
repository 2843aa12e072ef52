from datetime import datetime, timezone
from decimal import Decimal

from creator_analytics.analytics.sqlite_repository import SQLiteTimeSeriesRepository
from creator_analytics.core.analyzer import MetricsAnalyzer
from creator_analytics.core.config import AnalyticsConfig
from creator_analytics.core.container import DIContainer
from creator_analytics.domain.models import RevenueMetric


class _ListSink:
    def __init__(self):
        self.rows = []

    def insert(self, **row) -> None:
        self.rows.append(row)


def _revenue() -> RevenueMetric:
    return RevenueMetric(
        id="txn-1",
        amount=Decimal("25"),
        currency="USD",
        timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


def test_create_analyzer_with_defaults():
    analyzer = DIContainer.create_analyzer(config=AnalyticsConfig())

    assert isinstance(analyzer, MetricsAnalyzer)
    assert analyzer.analyze([_revenue()]).revenue.total == Decimal("25")


def test_create_analyzer_reads_env_when_no_config(monkeypatch):
    monkeypatch.setenv("ANALYTICS_DEFAULT_CURRENCY", "CAD")

    analyzer = DIContainer.create_analyzer()

    assert analyzer.config.default_currency == "CAD"
    assert analyzer.analyze([]).revenue.currency == "CAD"


def test_create_analyzer_uses_injected_sink():
    sink = _ListSink()
    analyzer = DIContainer.create_analyzer(
        config=AnalyticsConfig(persist_time_series=True), sink=sink
    )

    analyzer.analyze([_revenue()])

    assert [row["source_id"] for row in sink.rows] == ["txn-1"]


def test_injected_sink_persists_with_default_config():
    sink = _ListSink()
    analyzer = DIContainer.create_analyzer(config=AnalyticsConfig(), sink=sink)

    analyzer.analyze([_revenue()])

    assert [row["source_id"] for row in sink.rows] == ["txn-1"]


def test_create_analyzer_writes_nothing_without_sink_or_persistence(
    tmp_path, monkeypatch
):
    monkeypatch.chdir(tmp_path)

    DIContainer.create_analyzer(config=AnalyticsConfig()).analyze([_revenue()])

    assert list(tmp_path.iterdir()) == []


def test_create_analyzer_builds_sqlite_sink_when_persisting(tmp_path):
    db_path = tmp_path / "series.db"
    analyzer = DIContainer.create_analyzer(
        config=AnalyticsConfig(
            persist_time_series=True, time_series_db_path=str(db_path)
        )
    )

    analyzer.analyze([_revenue()])

    rows = SQLiteTimeSeriesRepository(db_path).find_by_source("txn-1")
    assert len(rows) == 1
    assert rows[0].value == 25.0
