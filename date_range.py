"""
Reporting window and comparison period shared by the analytics views.
"""

from datetime import date, timedelta
from typing import Optional, Tuple

from models import BenchmarkPeriod, ComparisonPeriod, DateRange


DATE_PRESETS = [
    "This month",
    "Last 7 days",
    "Last 14 days",
    "Last 30 days",
    "This week",
    "Last week",
    "Today",
    "Yesterday",
    "Custom",
]


def preset_range(preset: str, today: Optional[date] = None) -> DateRange:
    """Date range for a sidebar preset. Unknown presets fall back to month to date."""
    today = today or date.today()
    if preset == "Today":
        start, end = today, today
    elif preset == "Yesterday":
        start = end = today - timedelta(days=1)
    elif preset == "Last 7 days":
        start, end = today - timedelta(days=7), today
    elif preset == "Last 14 days":
        start, end = today - timedelta(days=14), today
    elif preset == "Last 30 days":
        start, end = today - timedelta(days=30), today
    elif preset == "This week":
        start = today - timedelta(days=today.weekday())
        end = today
    elif preset == "Last week":
        start = today - timedelta(days=today.weekday() + 7)
        end = start + timedelta(days=6)
    else:
        return DateRange.month_to_date(today)
    return DateRange(start=start, end=end)


class DateRangeSelector:
    """
    Holds the active date range, comparison period and benchmark period.

    Setters replace the whole value and have no side effects; analytics
    fetchers read the current values when they sync.
    """

    def __init__(self, today: Optional[date] = None):
        self.date_range = DateRange.month_to_date(today)
        self.comparison_period = ComparisonPeriod.NONE
        self.benchmark_period = BenchmarkPeriod.REF

    def set_date_range(self, date_range: DateRange) -> None:
        self.date_range = date_range

    def set_start(self, start: date) -> None:
        self.date_range = DateRange(start=start, end=self.date_range.end)

    def set_end(self, end: date) -> None:
        self.date_range = DateRange(start=self.date_range.start, end=end)

    def set_comparison_period(self, period: ComparisonPeriod) -> None:
        self.comparison_period = ComparisonPeriod(period)

    def set_benchmark_period(self, period: BenchmarkPeriod) -> None:
        self.benchmark_period = BenchmarkPeriod(period)


def benchmark_windows(date_range: DateRange, benchmark: BenchmarkPeriod) -> Tuple[DateRange, DateRange]:
    """
    Reference and previous windows for the success banner.

    "ref" compares the selected range with the period before it; "ref_N"
    moves both windows N periods further back.
    """
    steps = {
        BenchmarkPeriod.REF: 0,
        BenchmarkPeriod.REF_1: 1,
        BenchmarkPeriod.REF_2: 2,
        BenchmarkPeriod.REF_3: 3,
    }[BenchmarkPeriod(benchmark)]

    reference = date_range
    for _ in range(steps):
        reference = reference.previous_period()
    return reference, reference.previous_period()
