"""Tests for parsing backend payloads."""

from datetime import date

import pytest

from models import (
    AnalyticsQuery,
    AnalyticsSnapshot,
    ComparisonPeriod,
    DateRange,
    Store,
    StoreUpdate,
    SyncStatus,
    parse_tags,
    serialize_tags,
)


def test_store_from_dict():
    store = Store.from_dict({
        "id": 42,
        "name": "Main",
        "url": "https://main.example.com",
        "syncStatus": "SYNCING",
        "lastSyncAt": "2024-01-15T10:00:00Z",
        "tags": ["Pets", " Toys ", "Pets", ""],
    })

    assert store.id == "42"
    assert store.sync_status == SyncStatus.SYNCING
    assert store.last_sync_at.year == 2024
    assert store.last_sync_at.tzinfo is not None
    assert store.tags == ("Pets", "Toys")


def test_store_without_sync_timestamp():
    store = Store.from_dict({"id": "1", "name": "A", "url": "", "syncStatus": "PENDING", "lastSyncAt": None})
    assert store.last_sync_at is None
    assert store.tags == ()


def test_unknown_sync_status_rejected():
    with pytest.raises(ValueError):
        Store.from_dict({"id": "1", "syncStatus": "BROKEN"})


def test_snapshot_from_dict_defaults_missing_fields():
    snapshot = AnalyticsSnapshot.from_dict({"totalRevenue": 1000, "totalOrders": 10})

    assert snapshot.total_revenue == 1000
    assert snapshot.total_orders == 10
    assert snapshot.average_order_value == 0
    assert snapshot.comparison is None
    assert snapshot.sales_over_time == ()


def test_snapshot_comparison_keeps_nulls():
    snapshot = AnalyticsSnapshot.from_dict({
        "totalRevenue": 10,
        "comparison": {"totalRevenueChange": 12.5, "totalOrdersChange": None},
        "salesOverTime": [{"name": "Jan 1", "value": 3}],
        "topProducts": [{"id": "p", "title": "Bowl", "totalSales": 9}],
    })

    assert snapshot.comparison.total_revenue_change == 12.5
    assert snapshot.comparison.total_orders_change is None
    assert snapshot.sales_over_time[0].value == 3
    assert snapshot.top_products[0].total_sales == 9


def test_query_params():
    query = AnalyticsQuery("s1", DateRange(date(2024, 1, 1), date(2024, 1, 31)))
    assert query.to_params() == {"startDate": "2024-01-01", "endDate": "2024-01-31"}

    query = AnalyticsQuery("s1", query.date_range, ComparisonPeriod.REF_1)
    assert query.to_params()["comparisonPeriod"] == "ref_1"


class TestTags:
    def test_parse_form_field(self):
        assert parse_tags("Car accessories,  Pet food ,,Car accessories") == ("Car accessories", "Pet food")
        assert parse_tags("") == ()
        assert parse_tags(None) == ()

    def test_serialize_for_form(self):
        assert serialize_tags(("Pets", "Toys")) == "Pets, Toys"

    def test_update_payload_omits_blank_token(self):
        assert StoreUpdate(name="A", tags=("x",)).to_payload() == {"name": "A", "tags": ["x"]}
        assert "accessToken" not in StoreUpdate(name="A", access_token="").to_payload()

    def test_update_payload_includes_token(self):
        payload = StoreUpdate(name="A", access_token="shpat_123").to_payload()
        assert payload["accessToken"] == "shpat_123"
