"""
Store registry: the list of connected stores and the current selection.
"""

import logging
from typing import Dict, List, Optional

from api_client import ApiError
from models import Store, StoreUpdate, SyncStatus


logger = logging.getLogger(__name__)


def reconcile_selection(previous_id: Optional[str], stores: List[Store]) -> Optional[str]:
    """
    Work out which store stays selected after the list changes.

    Keeps the previous id while it is still listed, otherwise falls back
    to the first store, or to nothing for an empty list.
    """
    if previous_id is not None and any(s.id == previous_id for s in stores):
        return previous_id
    if stores:
        return stores[0].id
    return None


class StoreRegistry:
    """Holds the store list fetched from the backend and the selected store."""

    def __init__(self, client):
        self.client = client
        self.stores: List[Store] = []
        self._selected_id: Optional[str] = None
        self.is_loading = True
        self.last_error: Optional[str] = None

    @property
    def selected_store(self) -> Optional[Store]:
        if self._selected_id is None:
            return None
        return self.get(self._selected_id)

    def get(self, store_id: str) -> Optional[Store]:
        for store in self.stores:
            if store.id == store_id:
                return store
        return None

    def refresh(self) -> None:
        """Reload the store list. Failures keep the previous list."""
        self.is_loading = True
        try:
            stores = self.client.list_stores()
        except ApiError as e:
            logger.error("Failed to fetch stores: %s", e)
            self.last_error = "Failed to load stores"
            return
        finally:
            self.is_loading = False

        self.stores = list(stores)
        self.last_error = None
        self._selected_id = reconcile_selection(self._selected_id, self.stores)

    def select(self, store_id: str) -> None:
        if self.get(store_id) is not None:
            self._selected_id = store_id

    def delete(self, store_id: str) -> None:
        try:
            self.client.delete_store(store_id)
        except ApiError:
            logger.exception("Failed to delete store %s", store_id)
            raise

        logger.info("Deleted store %s", store_id)
        # Gone on the backend even if the refresh below fails
        self.stores = [s for s in self.stores if s.id != store_id]
        if self._selected_id == store_id:
            self._selected_id = None
        self.refresh()

    def retry_sync(self, store_id: str) -> None:
        try:
            self.client.trigger_sync(store_id)
        except ApiError:
            logger.exception("Failed to retry sync for store %s", store_id)
            raise

        logger.info("Triggered sync for store %s", store_id)
        self.refresh()

    def update(self, store_id: str, update: StoreUpdate) -> None:
        try:
            self.client.update_store(store_id, update)
        except ApiError:
            logger.exception("Failed to update store %s", store_id)
            raise

        logger.info("Updated store %s", store_id)
        self.refresh()

    def status_counts(self) -> Dict[str, int]:
        """Store counts for the overview cards."""
        return {
            "total": len(self.stores),
            "active": sum(1 for s in self.stores if s.sync_status == SyncStatus.COMPLETED),
            "syncing": sum(1 for s in self.stores if s.sync_status == SyncStatus.SYNCING),
            "failed": sum(1 for s in self.stores if s.sync_status == SyncStatus.FAILED),
        }
