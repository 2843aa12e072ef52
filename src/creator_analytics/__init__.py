"""Creator dashboard metric analysis following Clean Architecture layering."""

from .core.analyzer import MetricsAnalyzer
from .core.container import DIContainer
from .domain.exceptions import ProcessingError, ValidationError
from .domain.models import (
    AnalysisResult,
    EngagementMetric,
    RevenueMetric,
    SubscriberMetric,
    parse_records,
)

__all__ = [
    "MetricsAnalyzer",
    "DIContainer",
    "AnalysisResult",
    "EngagementMetric",
    "RevenueMetric",
    "SubscriberMetric",
    "ProcessingError",
    "ValidationError",
    "parse_records",
    "domain",
    "validation",
    "analytics",
    "core",
    "utils",
]
