"""Analysis facade composing aggregation, rates and time-series synthesis."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from creator_analytics.analytics.recorder import TimeSeriesRecorder
from creator_analytics.core.config import AnalyticsConfig
from creator_analytics.domain.exceptions import ProcessingError, ValidationError
from creator_analytics.domain.interfaces import (
    IMetricsAggregator,
    IRateCalculator,
    ITimeSeriesSynthesizer,
)
from creator_analytics.domain.models import (
    AnalysisResult,
    MetricRecord,
    TimeSeriesSummary,
)


class MetricsAnalyzer:
    """Runs one batch through the pipeline and returns a fresh result.

    Aggregation failures are fatal: a ``ValidationError`` propagates as is and
    any other fault is wrapped in ``ProcessingError``. Time-series problems
    only ever degrade ``time_series`` to an empty summary. The analyzer holds
    no per-call state, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        aggregator: IMetricsAggregator,
        rate_calculator: IRateCalculator,
        synthesizer: ITimeSeriesSynthesizer,
        *,
        recorder: Optional[TimeSeriesRecorder] = None,
        config: Optional[AnalyticsConfig] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._aggregator = aggregator
        self._rate_calculator = rate_calculator
        self._synthesizer = synthesizer
        self._recorder = recorder
        self._config = config or AnalyticsConfig()
        self._logger = logger or logging.getLogger(__name__)

    @property
    def config(self) -> AnalyticsConfig:
        return self._config

    def analyze(self, records: Iterable[MetricRecord]) -> AnalysisResult:
        batch: List[MetricRecord] = list(records)
        try:
            totals = self._aggregator.aggregate(batch)
            rates = self._rate_calculator.derive_rates(totals)
        except ValidationError as exc:
            self._logger.error(
                "metrics_analysis_rejected",
                extra={
                    "code": exc.code,
                    "fields": list(exc.fields),
                    "record_count": len(batch),
                },
            )
            raise
        except Exception as exc:
            self._logger.error(
                "metrics_analysis_failed",
                extra={
                    "code": ProcessingError.code,
                    "error": str(exc),
                    "record_count": len(batch),
                },
            )
            raise ProcessingError(
                "Failed to aggregate metrics",
                context={"record_count": len(batch), "error": str(exc)},
            ) from exc

        time_series = (
            self._synthesize(batch) if self._config.enable_time_series else None
        )
        result = AnalysisResult.from_parts(totals, rates, time_series)

        # a configured recorder is the persistence switch
        if (
            time_series is not None
            and not time_series.is_empty
            and self._recorder is not None
        ):
            self._recorder.record(time_series)

        self._logger.info(
            "metrics_analyzed",
            extra={
                "record_count": len(batch),
                "time_series_points": len(time_series.points) if time_series else 0,
            },
        )
        return result

    def _synthesize(self, batch: List[MetricRecord]) -> TimeSeriesSummary:
        # the synthesizer soft-fails itself; this guards injected implementations
        try:
            return self._synthesizer.synthesize(batch)
        except Exception as exc:
            self._logger.warning(
                "time_series_degraded",
                extra={"error": str(exc), "record_count": len(batch)},
            )
            return TimeSeriesSummary.empty()
