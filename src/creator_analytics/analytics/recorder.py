"""Fire-and-forget persistence of time-series summaries."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from creator_analytics.domain.exceptions import INTERNAL_SERVER_ERROR
from creator_analytics.domain.interfaces import ITimeSeriesRepository, ITimeSeriesSink
from creator_analytics.domain.models import TimeSeriesSummary


class TimeSeriesRecorder:
    """Writes summary points to a sink; write failures are logged, never raised."""

    def __init__(
        self,
        sink: ITimeSeriesSink,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._sink = sink
        self._logger = logger or logging.getLogger(__name__)

    @property
    def sink(self) -> ITimeSeriesSink:
        return self._sink

    def record(self, summary: TimeSeriesSummary) -> int:
        """Insert every point and return how many were stored."""

        written = 0
        for row in summary.to_rows():
            try:
                self._sink.insert(**row)
            except Exception as exc:
                self._logger.error(
                    "time_series_store_failed",
                    extra={
                        "code": getattr(exc, "code", INTERNAL_SERVER_ERROR),
                        "error": str(exc),
                        "source_id": row["source_id"],
                        "category": row["category"],
                    },
                )
                continue
            written += 1
        if written:
            self._logger.info(
                "time_series_stored",
                extra={"stored": written, "points": len(summary.points)},
            )
        return written

    def to_dataframe(self, *, days: int = 30) -> Any:
        """Export stored rows from the last ``days`` days to a pandas DataFrame."""

        if not hasattr(self._sink, "find_by_date"):
            raise RuntimeError("Configured sink does not support reading rows back")
        try:
            import pandas as pd  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pandas is required for dataframe export") from exc

        repository: ITimeSeriesRepository = self._sink  # type: ignore[assignment]
        end = datetime.now(timezone.utc)
        start = end - timedelta(days=days)
        rows = repository.find_by_date(start, end)
        return pd.DataFrame([row.model_dump() for row in rows])
