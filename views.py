"""
View models for the dashboard tabs.
Turns stores and snapshots into display rows and DataFrames.
"""

from dataclasses import dataclass
from typing import List, Optional

import pandas as pd

from formatting import (
    change_tone,
    format_change,
    format_currency,
    format_number,
    format_rate,
    format_timestamp,
    initials,
    status_icon,
    status_label,
    truncate,
)
from models import AnalyticsSnapshot, Store


COMPARISON_TITLES = [
    "Total Revenue",
    "Total Orders",
    "Average Order Value",
    "Total Sessions",
    "Conversion Rate",
]
PLAIN_TITLES = ["Total Revenue", "Total Orders", "Conversion Rate"]


@dataclass
class MetricCard:
    """One metric tile."""
    title: str
    value: str
    change: Optional[float] = None

    @property
    def change_label(self) -> str:
        return format_change(self.change)

    @property
    def tone(self) -> str:
        return change_tone(self.change)


def metric_cards(snapshot: Optional[AnalyticsSnapshot], with_comparison: bool = True) -> List[MetricCard]:
    """
    Build the metric tiles for a snapshot.

    The comparison layout shows all five metrics with their deltas; the
    plain layout shows revenue, orders and a placeholder conversion rate.
    A missing snapshot (nothing loaded, or the last fetch failed) renders
    every value as "-".
    """
    if snapshot is None:
        titles = COMPARISON_TITLES if with_comparison else PLAIN_TITLES
        return [MetricCard(title, "-") for title in titles]

    if not with_comparison:
        return [
            MetricCard("Total Revenue", format_currency(snapshot.total_revenue)),
            MetricCard("Total Orders", format_number(snapshot.total_orders)),
            MetricCard("Conversion Rate", "-"),
        ]

    comparison = snapshot.comparison
    return [
        MetricCard(
            "Total Revenue",
            format_currency(snapshot.total_revenue),
            comparison.total_revenue_change if comparison else None,
        ),
        MetricCard(
            "Total Orders",
            format_number(snapshot.total_orders),
            comparison.total_orders_change if comparison else None,
        ),
        MetricCard(
            "Average Order Value",
            format_currency(snapshot.average_order_value, decimals=2),
            comparison.average_order_value_change if comparison else None,
        ),
        MetricCard(
            "Total Sessions",
            format_number(snapshot.total_sessions),
            comparison.total_sessions_change if comparison else None,
        ),
        MetricCard(
            "Conversion Rate",
            format_rate(snapshot.conversion_rate),
            comparison.conversion_rate_change if comparison else None,
        ),
    ]


def stores_frame(stores: List[Store]) -> pd.DataFrame:
    """Create a DataFrame of stores for the table views."""
    data = []
    for s in stores:
        data.append({
            "id": s.id,
            "name": s.name,
            "url": s.url,
            "status": f"{status_icon(s.sync_status)} {status_label(s.sync_status)}",
            "last_sync": format_timestamp(s.last_sync_at),
            "tags": ", ".join(s.tags),
        })

    return pd.DataFrame(data, columns=["id", "name", "url", "status", "last_sync", "tags"])


def sales_frame(snapshot: Optional[AnalyticsSnapshot]) -> pd.DataFrame:
    """Sales over time, indexed by period label, for the area chart."""
    points = snapshot.sales_over_time if snapshot else ()
    df = pd.DataFrame(
        [{"name": p.name, "value": p.value} for p in points],
        columns=["name", "value"],
    )
    return df.set_index("name")


def top_products_rows(snapshot: Optional[AnalyticsSnapshot]) -> List[dict]:
    if not snapshot:
        return []
    return [
        {
            "badge": initials(p.title),
            "title": truncate(p.title),
            "sales": format_currency(p.total_sales),
        }
        for p in snapshot.top_products
    ]
