"""Dependency injection container for building fully-wired analyzers."""

from __future__ import annotations

from typing import Optional

from creator_analytics.analytics.aggregator import MetricsAggregator
from creator_analytics.analytics.rates import RateCalculator
from creator_analytics.analytics.recorder import TimeSeriesRecorder
from creator_analytics.analytics.sqlite_repository import SQLiteTimeSeriesRepository
from creator_analytics.analytics.timeseries import TimeSeriesSynthesizer
from creator_analytics.core.analyzer import MetricsAnalyzer
from creator_analytics.core.config import AnalyticsConfig
from creator_analytics.domain.interfaces import ITimeSeriesSink
from creator_analytics.validation.validator import MetricValidator


class DIContainer:
    """Factory helpers that assemble a MetricsAnalyzer with default wiring."""

    @staticmethod
    def create_analyzer(
        *,
        config: Optional[AnalyticsConfig] = None,
        sink: Optional[ITimeSeriesSink] = None,
    ) -> MetricsAnalyzer:
        cfg = config or AnalyticsConfig.from_env()
        validator = MetricValidator()
        aggregator = MetricsAggregator(
            validator,
            reject_mixed_currency=cfg.reject_mixed_currency,
            default_currency=cfg.default_currency,
        )
        synthesizer = TimeSeriesSynthesizer(validator)
        recorder = DIContainer._build_recorder(cfg, sink)
        return MetricsAnalyzer(
            aggregator,
            RateCalculator(),
            synthesizer,
            recorder=recorder,
            config=cfg,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _build_recorder(
        config: AnalyticsConfig, sink: Optional[ITimeSeriesSink]
    ) -> Optional[TimeSeriesRecorder]:
        if sink is not None:
            return TimeSeriesRecorder(sink)
        if config.persist_time_series:
            return TimeSeriesRecorder(
                SQLiteTimeSeriesRepository(config.time_series_db_path)
            )
        return None
