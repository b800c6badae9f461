"""
Per-view analytics fetching.

Each view owns one AnalyticsFetcher. Requests are numbered so that a
response only lands if it belongs to the most recently issued request.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from api_client import ApiError
from date_range import benchmark_windows
from models import AnalyticsQuery, AnalyticsSnapshot, Store, SuccessStatus, Thresholds
from success import build_success_status


logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Failed to load analytics data"


@dataclass(frozen=True)
class AnalyticsRequest:
    sequence: int
    query: AnalyticsQuery


class AnalyticsFetcher:
    """Keeps one view's snapshot in line with the selected store and date range."""

    def __init__(self, client, registry, selector, include_comparison: bool = True):
        self.client = client
        self.registry = registry
        self.selector = selector
        self.include_comparison = include_comparison

        self.snapshot: Optional[AnalyticsSnapshot] = None
        self.error: Optional[str] = None
        self.is_loading = False

        self._sequence = 0
        self._last_query: Optional[AnalyticsQuery] = None

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    def params(self) -> Optional[AnalyticsQuery]:
        store = self.registry.selected_store
        if store is None:
            return None
        return AnalyticsQuery(
            store_id=store.id,
            date_range=self.selector.date_range,
            comparison_period=self.selector.comparison_period if self.include_comparison else None,
        )

    def sync(self) -> bool:
        """
        Fetch if the inputs changed since the last request.

        Returns True when a request was issued.
        """
        query = self.params()
        if query is None:
            self._last_query = None
            self.snapshot = None
            self.error = None
            self.is_loading = False
            return False
        if query == self._last_query:
            return False
        self._run(query)
        return True

    def refresh(self) -> None:
        """Fetch again for the current inputs."""
        query = self.params()
        if query is None:
            return
        self._run(query)

    def start_request(self, query: Optional[AnalyticsQuery] = None) -> Optional[AnalyticsRequest]:
        query = query or self.params()
        if query is None:
            return None
        self._sequence += 1
        self._last_query = query
        self.is_loading = True
        self.error = None
        return AnalyticsRequest(sequence=self._sequence, query=query)

    def is_current(self, request: AnalyticsRequest) -> bool:
        return request.sequence == self._sequence

    def complete(self, request: AnalyticsRequest, snapshot: AnalyticsSnapshot) -> bool:
        """Apply a response. Stale responses are dropped and False returned."""
        if not self.is_current(request):
            logger.debug("Discarding stale analytics response #%s", request.sequence)
            return False
        self.snapshot = snapshot
        self.error = None
        self.is_loading = False
        return True

    def fail(self, request: AnalyticsRequest, error: Exception) -> bool:
        if not self.is_current(request):
            logger.debug("Discarding stale analytics failure #%s: %s", request.sequence, error)
            return False
        logger.error("Error fetching analytics for store %s: %s", request.query.store_id, error)
        # Never leave another period's figures on screen
        self.snapshot = None
        self.error = FETCH_ERROR_MESSAGE
        self.is_loading = False
        return True

    def _run(self, query: AnalyticsQuery) -> None:
        request = self.start_request(query)
        try:
            snapshot = self.client.get_analytics(query)
        except ApiError as e:
            self.fail(request, e)
            return
        self.complete(request, snapshot)


def load_success_status(
    client,
    store: Store,
    selector,
    fixed_thresholds: Optional[Thresholds],
    percentage_thresholds: Optional[Thresholds],
) -> Optional[SuccessStatus]:
    """
    Fetch revenue for the benchmark windows and classify the result.

    Returns None when either window cannot be loaded.
    """
    reference, previous = benchmark_windows(selector.date_range, selector.benchmark_period)
    try:
        reference_snapshot = client.get_analytics(AnalyticsQuery(store.id, reference))
        previous_snapshot = client.get_analytics(AnalyticsQuery(store.id, previous))
    except ApiError as e:
        logger.error("Error fetching success status for store %s: %s", store.id, e)
        return None

    return build_success_status(
        store_name=store.name,
        reference=reference,
        previous=previous,
        reference_revenue=reference_snapshot.total_revenue,
        previous_revenue=previous_snapshot.total_revenue,
        fixed_thresholds=fixed_thresholds,
        percentage_thresholds=percentage_thresholds,
    )


class SuccessStatusLoader:
    """
    Success banner state for the selected store.

    The benchmark windows are fetched again only when the store, date
    range or benchmark period changes, or on an explicit refresh.
    """

    def __init__(
        self,
        client,
        registry,
        selector,
        fixed_thresholds: Optional[Thresholds],
        percentage_thresholds: Optional[Thresholds],
    ):
        self.client = client
        self.registry = registry
        self.selector = selector
        self.fixed_thresholds = fixed_thresholds
        self.percentage_thresholds = percentage_thresholds

        self.status: Optional[SuccessStatus] = None
        self._last_key: Optional[Tuple] = None

    def key(self) -> Optional[Tuple]:
        store = self.registry.selected_store
        if store is None:
            return None
        return (store.id, store.name, self.selector.date_range, self.selector.benchmark_period)

    def sync(self) -> Optional[SuccessStatus]:
        key = self.key()
        if key is None:
            self._last_key = None
            self.status = None
            return None
        if key != self._last_key:
            self._last_key = key
            self.status = load_success_status(
                self.client,
                self.registry.selected_store,
                self.selector,
                self.fixed_thresholds,
                self.percentage_thresholds,
            )
        return self.status

    def refresh(self) -> Optional[SuccessStatus]:
        self._last_key = None
        return self.sync()
