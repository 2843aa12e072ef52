"""SQLite-backed time-series repository."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Tuple

from creator_analytics.domain.exceptions import PersistenceError
from creator_analytics.domain.interfaces import ITimeSeriesRepository, StoredTimeSeriesRow
from creator_analytics.utils.timeutils import as_utc

# no uniqueness constraint: concurrent or repeated inserts are expected
_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS time_series_data (
    metric_id TEXT NOT NULL,
    metric_type TEXT NOT NULL,
    timestamp REAL NOT NULL,
    value REAL NOT NULL,
    aggregation_min REAL NOT NULL,
    aggregation_max REAL NOT NULL,
    aggregation_avg REAL NOT NULL,
    aggregation_sum REAL NOT NULL
);
"""

_CREATE_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_time_series_timestamp
ON time_series_data (timestamp);
"""

_INSERT_SQL = """
INSERT INTO time_series_data (
    metric_id, metric_type, timestamp, value,
    aggregation_min, aggregation_max, aggregation_avg, aggregation_sum
)
VALUES (?, ?, ?, ?, ?, ?, ?, ?);
"""

_SELECT_COLUMNS = """
SELECT metric_id, metric_type, timestamp, value,
       aggregation_min, aggregation_max, aggregation_avg, aggregation_sum
FROM time_series_data
"""

_SELECT_BY_DATE_SQL = (
    _SELECT_COLUMNS + "WHERE timestamp BETWEEN ? AND ? ORDER BY timestamp ASC;"
)

_SELECT_BY_SOURCE_SQL = (
    _SELECT_COLUMNS + "WHERE metric_id = ? ORDER BY timestamp ASC;"
)

_Row = Tuple[str, str, float, float, float, float, float, float]


class SQLiteTimeSeriesRepository(ITimeSeriesRepository):
    """Lightweight repository focused on persistence only."""

    def __init__(self, db_path: str | Path):
        self._db_path = str(db_path)
        self._ensure_schema()

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
        try:
            with sqlite3.connect(self._db_path) as conn:
                conn.execute(
                    _INSERT_SQL,
                    (
                        source_id,
                        category,
                        as_utc(timestamp).timestamp(),
                        value,
                        min,
                        max,
                        avg,
                        sum,
                    ),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(
                "Failed to store time-series point",
                context={"source_id": source_id, "category": category},
            ) from exc

    def find_by_date(self, start: datetime, end: datetime) -> List[StoredTimeSeriesRow]:
        with sqlite3.connect(self._db_path) as conn:
            rows = conn.execute(
                _SELECT_BY_DATE_SQL,
                (as_utc(start).timestamp(), as_utc(end).timestamp()),
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

    def find_by_source(self, source_id: str) -> List[StoredTimeSeriesRow]:
        with sqlite3.connect(self._db_path) as conn:
            rows = conn.execute(_SELECT_BY_SOURCE_SQL, (source_id,)).fetchall()
        return [self._row_to_record(row) for row in rows]

    def _ensure_schema(self) -> None:
        with sqlite3.connect(self._db_path) as conn:
            conn.execute(_CREATE_TABLE_SQL)
            conn.execute(_CREATE_INDEX_SQL)
            conn.commit()

    @staticmethod
    def _row_to_record(row: _Row) -> StoredTimeSeriesRow:
        source_id, category, timestamp, value, min_, max_, avg, sum_ = row
        return StoredTimeSeriesRow(
            source_id=source_id,
            category=category,
            timestamp=datetime.fromtimestamp(float(timestamp), tz=timezone.utc),
            value=value,
            min=min_,
            max=max_,
            avg=avg,
            sum=sum_,
        )
