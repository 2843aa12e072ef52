import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from creator_analytics.analytics.sqlite_repository import SQLiteTimeSeriesRepository
from creator_analytics.domain.exceptions import PersistenceError


@pytest.fixture
def temp_db(tmp_path: Path) -> Path:
    return tmp_path / "analytics.db"


@pytest.fixture
def repo(temp_db: Path) -> SQLiteTimeSeriesRepository:
    return SQLiteTimeSeriesRepository(temp_db)


def _insert(repo: SQLiteTimeSeriesRepository, idx: int, when: datetime) -> None:
    repo.insert(
        source_id=f"txn-{idx}",
        category="revenue" if idx % 2 else "subscriber",
        timestamp=when,
        value=float(idx * 10),
        min=10.0,
        max=50.0,
        avg=30.0,
        sum=150.0,
    )


def test_insert_and_find_by_source(repo: SQLiteTimeSeriesRepository):
    when = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    _insert(repo, 1, when)
    _insert(repo, 2, when + timedelta(minutes=1))

    rows = repo.find_by_source("txn-1")

    assert len(rows) == 1
    assert rows[0].category == "revenue"
    assert rows[0].timestamp == when
    assert rows[0].value == 10.0
    assert (rows[0].min, rows[0].max, rows[0].avg, rows[0].sum) == (
        10.0,
        50.0,
        30.0,
        150.0,
    )


def test_duplicate_inserts_are_tolerated(repo: SQLiteTimeSeriesRepository):
    when = datetime(2024, 1, 1, tzinfo=timezone.utc)
    _insert(repo, 1, when)
    _insert(repo, 1, when)

    assert len(repo.find_by_source("txn-1")) == 2


def test_find_by_date_filters_window(repo: SQLiteTimeSeriesRepository):
    start = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    for idx in range(1, 6):
        _insert(repo, idx, start + timedelta(minutes=idx * 5))

    results = repo.find_by_date(
        start + timedelta(minutes=5), start + timedelta(minutes=15)
    )

    assert [row.source_id for row in results] == ["txn-1", "txn-2", "txn-3"]


def test_insert_failure_raises_persistence_error(
    repo: SQLiteTimeSeriesRepository, temp_db: Path
):
    with sqlite3.connect(temp_db) as conn:
        conn.execute("DROP TABLE time_series_data")
        conn.commit()

    with pytest.raises(PersistenceError) as exc_info:
        _insert(repo, 1, datetime(2024, 1, 1, tzinfo=timezone.utc))

    assert isinstance(exc_info.value.__cause__, sqlite3.Error)
