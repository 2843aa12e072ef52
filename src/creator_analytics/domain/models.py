"""Domain value objects for metric records, totals and analysis results."""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import (
    Annotated,
    Any,
    Dict,
    Iterable,
    List,
    Literal,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    TypeAdapter,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from creator_analytics.domain.exceptions import ValidationError
from creator_analytics.utils.timeutils import as_utc, utc_now
from creator_analytics.validation.rules import (
    FieldViolation,
    engagement_violations,
    revenue_violations,
    subscriber_violations,
    timestamp_violations,
)

DEFAULT_ENGAGEMENT_ID = "engagement_metric"

# Decimal in memory, a plain number in JSON payloads
JsonDecimal = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class MetricCategory(str, Enum):
    """Categories a metric record can belong to."""

    ENGAGEMENT = "engagement"
    REVENUE = "revenue"
    SUBSCRIBER = "subscriber"


def _coerce_decimal(value: Any) -> Any:
    # floats go through str() so 0.05 stays 0.05 instead of its binary expansion
    if isinstance(value, float):
        return Decimal(str(value))
    return value


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )


class _MetricRecordBase(_FrozenModel):
    @field_validator("timestamp", mode="after", check_fields=False)
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def check_invariants(self) -> "_MetricRecordBase":
        violations = self.violations()
        if violations:
            raise ValidationError(
                violations,
                context={"category": self.category, "source_id": self.id},
            )
        return self

    @abstractmethod
    def violations(self, *, include_timestamp: bool = True) -> List[FieldViolation]:
        """Rule violations for this record; empty when it is valid."""


class EngagementMetric(_MetricRecordBase):
    """Content engagement counters for one piece of content."""

    category: Literal["engagement"] = "engagement"
    views: int
    clicks: int
    shares: int
    id: str = DEFAULT_ENGAGEMENT_ID
    timestamp: datetime = Field(default_factory=utc_now)

    def violations(self, *, include_timestamp: bool = True) -> List[FieldViolation]:
        violations = engagement_violations(self.views, self.clicks, self.shares)
        if include_timestamp:
            violations.extend(timestamp_violations(self.timestamp))
        return violations

    def click_through_rate(self) -> float:
        return _percent(self.clicks, self.views)

    def share_rate(self) -> float:
        return _percent(self.shares, self.views)

    def total_engagement_rate(self) -> float:
        return _percent(self.clicks + self.shares, self.views)


class RevenueMetric(_MetricRecordBase):
    """A single revenue transaction."""

    category: Literal["revenue"] = "revenue"
    id: str
    amount: Decimal
    currency: str
    timestamp: datetime

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any) -> Any:
        return _coerce_decimal(value)

    def violations(self, *, include_timestamp: bool = True) -> List[FieldViolation]:
        return revenue_violations(
            self.id,
            self.amount,
            self.currency,
            self.timestamp,
            include_timestamp=include_timestamp,
        )


class SubscriberMetric(_MetricRecordBase):
    """Snapshot of subscriber state at a point in time."""

    category: Literal["subscriber"] = "subscriber"
    id: str
    total_subscribers: int
    new_subscribers: int
    churn_rate: Decimal
    timestamp: datetime

    @field_validator("churn_rate", mode="before")
    @classmethod
    def coerce_churn_rate(cls, value: Any) -> Any:
        return _coerce_decimal(value)

    def violations(self, *, include_timestamp: bool = True) -> List[FieldViolation]:
        return subscriber_violations(
            self.id,
            self.total_subscribers,
            self.new_subscribers,
            self.churn_rate,
            self.timestamp,
            include_timestamp=include_timestamp,
        )


MetricRecord = Annotated[
    Union[EngagementMetric, RevenueMetric, SubscriberMetric],
    Field(discriminator="category"),
]

_RECORDS_ADAPTER: TypeAdapter[List[MetricRecord]] = TypeAdapter(List[MetricRecord])


def parse_records(raw: Iterable[Mapping[str, Any]]) -> List[MetricRecord]:
    """Validate plain mappings from upstream producers into metric records."""

    return _RECORDS_ADAPTER.validate_python(list(raw))


def _percent(numerator: int, denominator: int) -> float:
    if denominator <= 0:
        return 0.0
    return round(numerator * 100 / denominator, 6)


class EngagementTotals(_FrozenModel):
    views: int = 0
    clicks: int = 0
    shares: int = 0
    total_engagement: int = 0


class RevenueTotals(_FrozenModel):
    total: JsonDecimal = Decimal("0")
    currency: str = "USD"
    transactions: int = 0
    by_currency: Mapping[str, JsonDecimal] = Field(default_factory=dict)
    mixed_currency: bool = False


class SubscriberTotals(_FrozenModel):
    total: int = 0
    new: int = 0
    churn_rate: JsonDecimal = Decimal("0")
    samples: int = 0


class AggregatedTotals(_FrozenModel):
    """Per-category raw counters, before rate derivation."""

    engagement: EngagementTotals = Field(default_factory=EngagementTotals)
    revenue: RevenueTotals = Field(default_factory=RevenueTotals)
    subscribers: SubscriberTotals = Field(default_factory=SubscriberTotals)


class DerivedRates(_FrozenModel):
    """Percentages and ratios computed from aggregated totals.

    Engagement percentages are floats: they are ratios of integer counters
    and feed charts directly. The average transaction value and retention
    rate stay Decimal because they derive from Decimal amounts and churn,
    and rounding them through float would drift money figures. Both kinds
    serialize as JSON numbers.
    """

    engagement_rate: float = 0.0
    click_through_rate: float = 0.0
    share_rate: float = 0.0
    average_transaction_value: JsonDecimal = Decimal("0")
    retention_rate: JsonDecimal = Decimal("100")


class TimeSeriesPoint(_FrozenModel):
    """One scalar reduction of a single metric record."""

    timestamp: datetime
    value: float
    category: MetricCategory
    source_id: str


class TimeSeriesSummary(_FrozenModel):
    """Points ordered by timestamp plus their summary statistics."""

    points: Tuple[TimeSeriesPoint, ...] = Field(default_factory=tuple)
    min: float = 0.0
    max: float = 0.0
    avg: float = 0.0
    sum: float = 0.0

    @classmethod
    def empty(cls) -> "TimeSeriesSummary":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.points

    def to_rows(self) -> List[Dict[str, Any]]:
        """Flatten into the rows accepted by a time-series sink."""

        return [
            {
                "source_id": point.source_id,
                "category": point.category.value,
                "timestamp": point.timestamp,
                "value": point.value,
                "min": self.min,
                "max": self.max,
                "avg": self.avg,
                "sum": self.sum,
            }
            for point in self.points
        ]


class EngagementAnalysis(EngagementTotals):
    engagement_rate: float = 0.0
    click_through_rate: float = 0.0
    share_rate: float = 0.0


class RevenueAnalysis(RevenueTotals):
    average_transaction_value: JsonDecimal = Decimal("0")


class SubscriberAnalysis(SubscriberTotals):
    retention_rate: JsonDecimal = Decimal("100")


class AnalysisResult(_FrozenModel):
    """Complete dashboard analysis for one batch of metric records."""

    engagement: EngagementAnalysis
    revenue: RevenueAnalysis
    subscribers: SubscriberAnalysis
    time_series: Optional[TimeSeriesSummary] = None

    @classmethod
    def from_parts(
        cls,
        totals: AggregatedTotals,
        rates: DerivedRates,
        time_series: Optional[TimeSeriesSummary] = None,
    ) -> "AnalysisResult":
        return cls(
            engagement=EngagementAnalysis(
                **totals.engagement.model_dump(),
                engagement_rate=rates.engagement_rate,
                click_through_rate=rates.click_through_rate,
                share_rate=rates.share_rate,
            ),
            revenue=RevenueAnalysis(
                **totals.revenue.model_dump(),
                average_transaction_value=rates.average_transaction_value,
            ),
            subscribers=SubscriberAnalysis(
                **totals.subscribers.model_dump(),
                retention_rate=rates.retention_rate,
            ),
            time_series=time_series,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape consumed by dashboards."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
