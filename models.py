"""
Data model for stores, date ranges and analytics snapshots.
Parses the backend's camelCase JSON into dataclasses.
"""

from enum import Enum
from typing import Optional, Tuple, Iterable
from datetime import date, datetime, timedelta
from dataclasses import dataclass
from dateutil import parser as date_parser


class SyncStatus(str, Enum):
    PENDING = "PENDING"
    SYNCING = "SYNCING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ComparisonPeriod(str, Enum):
    NONE = "none"
    PREVIOUS_PERIOD = "previous_period"
    REF_1 = "ref_1"
    REF_2 = "ref_2"
    REF_3 = "ref_3"


class BenchmarkPeriod(str, Enum):
    REF = "ref"
    REF_1 = "ref_1"
    REF_2 = "ref_2"
    REF_3 = "ref_3"


def parse_datetime(dt_string: Optional[str]) -> Optional[datetime]:
    """Parse ISO datetime string to datetime object."""
    if not dt_string:
        return None
    try:
        return date_parser.parse(dt_string)
    except (ValueError, TypeError, OverflowError):
        return None


def normalize_tags(tags: Optional[Iterable[str]]) -> Tuple[str, ...]:
    """
    Build an ordered set of tags.

    Blank entries are dropped, surrounding whitespace is trimmed and
    duplicates keep their first position.
    """
    if not tags:
        return ()
    seen = []
    for tag in tags:
        if tag is None:
            continue
        clean = str(tag).strip()
        if clean and clean not in seen:
            seen.append(clean)
    return tuple(seen)


def parse_tags(text: Optional[str]) -> Tuple[str, ...]:
    """Parse the comma separated tag field of the edit form."""
    if not text:
        return ()
    return normalize_tags(text.split(","))


def serialize_tags(tags: Iterable[str]) -> str:
    """Render tags for the comma separated edit field."""
    return ", ".join(tags)


@dataclass(frozen=True)
class Store:
    """A connected storefront as reported by the backend."""
    id: str
    name: str
    url: str
    sync_status: SyncStatus
    last_sync_at: Optional[datetime] = None
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "Store":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            url=data.get("url", ""),
            sync_status=SyncStatus(data.get("syncStatus", SyncStatus.PENDING.value)),
            last_sync_at=parse_datetime(data.get("lastSyncAt")),
            tags=normalize_tags(data.get("tags")),
        )


@dataclass(frozen=True)
class StoreUpdate:
    """Fields sent when a store is edited."""
    name: str
    tags: Tuple[str, ...] = ()
    access_token: Optional[str] = None

    def to_payload(self) -> dict:
        payload = {
            "name": self.name,
            "tags": list(normalize_tags(self.tags)),
        }
        # Blank token means "keep the current one"
        if self.access_token:
            payload["accessToken"] = self.access_token
        return payload


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar window."""
    start: date
    end: date

    @property
    def duration_days(self) -> int:
        return (self.end - self.start).days + 1

    @property
    def is_ordered(self) -> bool:
        return self.start <= self.end

    def previous_period(self) -> "DateRange":
        """Window of the same length ending the day before this one starts."""
        length = max(self.duration_days, 1)
        end = self.start - timedelta(days=1)
        return DateRange(start=end - timedelta(days=length - 1), end=end)

    @classmethod
    def month_to_date(cls, today: Optional[date] = None) -> "DateRange":
        today = today or date.today()
        return cls(start=today.replace(day=1), end=today)


@dataclass(frozen=True)
class AnalyticsQuery:
    """Parameters of a single analytics request."""
    store_id: str
    date_range: DateRange
    comparison_period: Optional[ComparisonPeriod] = None

    def to_params(self) -> dict:
        params = {
            "startDate": self.date_range.start.isoformat(),
            "endDate": self.date_range.end.isoformat(),
        }
        if self.comparison_period is not None:
            params["comparisonPeriod"] = self.comparison_period.value
        return params


def _number(data: dict, key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0
    return value


def _optional_number(data: dict, key: str) -> Optional[float]:
    value = data.get(key)
    if value is None:
        return None
    return float(value)


@dataclass(frozen=True)
class SalesPoint:
    name: str
    value: float


@dataclass(frozen=True)
class TopProduct:
    id: str
    title: str
    total_sales: float


@dataclass(frozen=True)
class AnalyticsComparison:
    """Percentage change of each metric against the comparison period."""
    total_revenue_change: Optional[float] = None
    total_orders_change: Optional[float] = None
    average_order_value_change: Optional[float] = None
    total_sessions_change: Optional[float] = None
    conversion_rate_change: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict) -> "AnalyticsComparison":
        return cls(
            total_revenue_change=_optional_number(data, "totalRevenueChange"),
            total_orders_change=_optional_number(data, "totalOrdersChange"),
            average_order_value_change=_optional_number(data, "averageOrderValueChange"),
            total_sessions_change=_optional_number(data, "totalSessionsChange"),
            conversion_rate_change=_optional_number(data, "conversionRateChange"),
        )


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Metrics for one store, date range and comparison period."""
    total_revenue: float = 0
    total_orders: int = 0
    average_order_value: float = 0
    total_sessions: int = 0
    conversion_rate: float = 0
    comparison: Optional[AnalyticsComparison] = None
    sales_over_time: Tuple[SalesPoint, ...] = ()
    top_products: Tuple[TopProduct, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "AnalyticsSnapshot":
        comparison = data.get("comparison")
        return cls(
            total_revenue=_number(data, "totalRevenue"),
            total_orders=_number(data, "totalOrders"),
            average_order_value=_number(data, "averageOrderValue"),
            total_sessions=_number(data, "totalSessions"),
            conversion_rate=_number(data, "conversionRate"),
            comparison=AnalyticsComparison.from_dict(comparison) if comparison else None,
            sales_over_time=tuple(
                SalesPoint(name=str(p.get("name", "")), value=p.get("value") or 0)
                for p in data.get("salesOverTime") or []
            ),
            top_products=tuple(
                TopProduct(
                    id=str(p.get("id", "")),
                    title=p.get("title", ""),
                    total_sales=p.get("totalSales") or 0,
                )
                for p in data.get("topProducts") or []
            ),
        )


@dataclass(frozen=True)
class User:
    id: str
    email: str
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=str(data.get("id", "")),
            email=data.get("email", ""),
            name=data.get("name"),
        )


@dataclass(frozen=True)
class LoginResult:
    access_token: str
    user: User


@dataclass(frozen=True)
class Thresholds:
    """Cutoffs for the low, medium and high success tiers."""
    low: float
    medium: float
    high: float


@dataclass(frozen=True)
class SuccessMetrics:
    fixed_increase: float
    percentage_increase: Optional[float]  # None when the previous revenue is zero
    fixed_level: str
    percentage_level: str


@dataclass(frozen=True)
class SuccessStatus:
    """Success case summary shown in the banner."""
    store_name: str
    duration_in_days: int
    reference_period: DateRange
    previous_period: DateRange
    reference_revenue: float
    previous_revenue: float
    metrics: SuccessMetrics
    fixed_thresholds: Optional[Thresholds] = None
    percentage_thresholds: Optional[Thresholds] = None
