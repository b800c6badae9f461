"""Tests for the store registry and selection reconciliation."""

import pytest

from api_client import ApiError
from fakes import FakeApiClient, make_store
from models import StoreUpdate, SyncStatus
from store_registry import StoreRegistry, reconcile_selection


class TestReconcileSelection:
    def test_keeps_previous_when_still_listed(self):
        stores = [make_store("1"), make_store("2")]
        assert reconcile_selection("2", stores) == "2"

    def test_falls_back_to_first_store(self):
        stores = [make_store("3"), make_store("4")]
        assert reconcile_selection("1", stores) == "3"

    def test_selects_first_when_nothing_selected(self):
        assert reconcile_selection(None, [make_store("7")]) == "7"

    def test_empty_list_clears_selection(self):
        assert reconcile_selection("1", []) is None
        assert reconcile_selection(None, []) is None


@pytest.fixture()
def registry(client):
    registry = StoreRegistry(client)
    registry.refresh()
    return registry


class TestRefresh:
    def test_starts_loading(self, client):
        assert StoreRegistry(client).is_loading is True

    def test_first_refresh_selects_first_store(self, registry):
        assert registry.is_loading is False
        assert [s.id for s in registry.stores] == ["1", "2"]
        assert registry.selected_store.id == "1"

    def test_failure_keeps_previous_state(self, registry, client):
        client.fail_on.add("list_stores")
        client.stores = []

        registry.refresh()

        assert [s.id for s in registry.stores] == ["1", "2"]
        assert registry.selected_store.id == "1"
        assert registry.is_loading is False
        assert registry.last_error == "Failed to load stores"

    def test_failure_on_first_load_stops_loading(self):
        client = FakeApiClient()
        client.fail_on.add("list_stores")
        registry = StoreRegistry(client)

        registry.refresh()

        assert registry.is_loading is False
        assert registry.stores == []
        assert registry.selected_store is None

    def test_selection_repoints_when_store_disappears(self, registry, client):
        registry.select("2")
        client.stores = [make_store("3"), make_store("1")]

        registry.refresh()

        assert registry.selected_store.id == "3"

    def test_selection_cleared_when_list_empties(self, registry, client):
        client.stores = []
        registry.refresh()
        assert registry.selected_store is None


class TestSelect:
    def test_select_known_store(self, registry):
        registry.select("2")
        assert registry.selected_store.id == "2"

    def test_unknown_id_is_noop(self, registry):
        registry.select("2")
        registry.select("missing")
        assert registry.selected_store.id == "2"


class TestMutations:
    def test_retry_sync_refreshes_and_updates_selected_record(self):
        client = FakeApiClient([make_store("1", SyncStatus.COMPLETED)])
        registry = StoreRegistry(client)
        registry.refresh()
        registry.select("1")

        def start_sync(store_id):
            client.stores = [make_store(store_id, SyncStatus.SYNCING)]

        client.on_sync = start_sync
        registry.retry_sync("1")

        assert client.calls[-2:] == [("trigger_sync", "1"), ("list_stores",)]
        assert registry.selected_store.id == "1"
        assert registry.selected_store.sync_status == SyncStatus.SYNCING

    def test_delete_selected_clears_selection_before_refresh(self, registry, client):
        registry.select("2")
        seen = []

        original_list = client.list_stores

        def list_stores():
            seen.append(registry.selected_store)
            return original_list()

        client.list_stores = list_stores
        registry.delete("2")

        assert seen == [None]
        assert [s.id for s in registry.stores] == ["1"]
        assert registry.selected_store.id == "1"

    def test_deleted_store_dropped_when_refresh_fails(self, registry, client):
        client.fail_on.add("list_stores")

        registry.delete("1")

        assert [s.id for s in registry.stores] == ["2"]
        assert registry.get("1") is None
        assert registry.selected_store is None
        assert registry.last_error == "Failed to load stores"

    def test_delete_other_store_keeps_selection(self, registry):
        registry.delete("2")
        assert registry.selected_store.id == "1"

    def test_delete_failure_is_raised_without_refresh(self, registry, client):
        client.fail_on.add("delete_store")
        refreshes = client.count("list_stores")

        with pytest.raises(ApiError):
            registry.delete("1")

        assert client.count("list_stores") == refreshes
        assert registry.selected_store.id == "1"

    def test_retry_failure_is_raised(self, registry, client):
        client.fail_on.add("trigger_sync")
        with pytest.raises(ApiError):
            registry.retry_sync("1")

    def test_update_sends_tags_and_refreshes(self, registry, client):
        registry.update("1", StoreUpdate(name="Renamed", tags=("Pet food", "Toys")))

        assert client.calls[-2][0] == "update_store"
        assert registry.get("1").name == "Renamed"
        assert registry.get("1").tags == ("Pet food", "Toys")


def test_status_counts(client):
    client.stores.append(make_store("3", SyncStatus.SYNCING))
    client.stores.append(make_store("4", SyncStatus.COMPLETED))
    registry = StoreRegistry(client)
    registry.refresh()

    assert registry.status_counts() == {"total": 4, "active": 2, "syncing": 1, "failed": 1}
