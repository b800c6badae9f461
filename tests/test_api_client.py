"""Tests for the REST client against a stub session."""

from datetime import date

import pytest
import requests

from api_client import ApiError, AuthenticationError, DashboardApiClient, check_connection
from models import AnalyticsQuery, ComparisonPeriod, DateRange, StoreUpdate, SyncStatus


class StubResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class StubSession:
    def __init__(self):
        self.headers = {}
        self.requests = []
        self.responses = []

    def queue(self, response):
        self.responses.append(response)

    def request(self, method, url, timeout=None, **kwargs):
        self.requests.append({"method": method, "url": url, "timeout": timeout, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture()
def session():
    return StubSession()


@pytest.fixture()
def api(session):
    return DashboardApiClient(base_url="http://api.test/", timeout=5, session=session)


STORE_JSON = {
    "id": "s1",
    "name": "Main",
    "url": "https://main.example.com",
    "syncStatus": "COMPLETED",
    "lastSyncAt": "2024-01-15T10:00:00Z",
}


class TestLogin:
    def test_success_sets_bearer_token(self, api, session):
        session.queue(StubResponse(200, {"access_token": "tok", "user": {"id": 1, "email": "a@b.com"}}))

        result = api.login("a@b.com", "secret")

        assert result.access_token == "tok"
        assert result.user.email == "a@b.com"
        assert session.headers["Authorization"] == "Bearer tok"
        sent = session.requests[0]
        assert sent["method"] == "POST"
        assert sent["url"] == "http://api.test/auth/login"
        assert sent["json"] == {"email": "a@b.com", "password": "secret"}

    @pytest.mark.parametrize("status", [401, 500])
    def test_any_error_status_is_invalid_credentials(self, api, session, status):
        session.queue(StubResponse(status))

        with pytest.raises(AuthenticationError) as excinfo:
            api.login("a@b.com", "wrong")

        assert str(excinfo.value) == "Invalid email or password"
        assert excinfo.value.status_code == status
        assert "Authorization" not in session.headers

    def test_network_error_is_invalid_credentials(self, api, session):
        session.queue(requests.ConnectionError("refused"))

        with pytest.raises(AuthenticationError) as excinfo:
            api.login("a@b.com", "secret")

        assert excinfo.value.status_code is None
        assert isinstance(excinfo.value.__cause__, ApiError)

    def test_logout_drops_token(self, api, session):
        api.set_access_token("tok")
        api.logout()
        assert "Authorization" not in session.headers


class TestStores:
    def test_list_stores(self, api, session):
        session.queue(StubResponse(200, [STORE_JSON]))

        stores = api.list_stores()

        assert stores[0].id == "s1"
        assert stores[0].sync_status == SyncStatus.COMPLETED
        assert session.requests[0]["url"] == "http://api.test/stores"
        assert session.requests[0]["timeout"] == 5

    def test_non_success_status_raises(self, api, session):
        session.queue(StubResponse(503))
        with pytest.raises(ApiError) as excinfo:
            api.list_stores()
        assert excinfo.value.status_code == 503

    def test_delete_and_sync_paths(self, api, session):
        session.queue(StubResponse(204))
        session.queue(StubResponse(202))

        api.delete_store("s1")
        api.trigger_sync("s1")

        assert [(r["method"], r["url"]) for r in session.requests] == [
            ("DELETE", "http://api.test/stores/s1"),
            ("POST", "http://api.test/stores/s1/sync"),
        ]

    def test_update_store(self, api, session):
        session.queue(StubResponse(200, dict(STORE_JSON, name="Renamed", tags=["Pets"])))

        store = api.update_store("s1", StoreUpdate(name="Renamed", tags=("Pets",)))

        assert store.name == "Renamed"
        assert session.requests[0]["method"] == "PATCH"
        assert session.requests[0]["json"] == {"name": "Renamed", "tags": ["Pets"]}


def test_get_analytics_sends_query(api, session):
    session.queue(StubResponse(200, {"totalRevenue": 1000, "totalOrders": 10}))
    query = AnalyticsQuery("s1", DateRange(date(2024, 1, 1), date(2024, 1, 31)), ComparisonPeriod.PREVIOUS_PERIOD)

    snapshot = api.get_analytics(query)

    assert snapshot.total_revenue == 1000
    sent = session.requests[0]
    assert sent["url"] == "http://api.test/analytics/s1"
    assert sent["params"] == {
        "startDate": "2024-01-01",
        "endDate": "2024-01-31",
        "comparisonPeriod": "previous_period",
    }


def test_check_connection(api, session):
    session.queue(StubResponse(200, []))
    assert check_connection(api) is True

    session.queue(requests.Timeout("slow"))
    assert check_connection(api) is False


class TestMalformedBody:
    def test_analytics_list_body(self, api, session):
        session.queue(StubResponse(200, []))
        query = AnalyticsQuery("s1", DateRange(date(2024, 1, 1), date(2024, 1, 31)))

        with pytest.raises(ApiError) as excinfo:
            api.get_analytics(query)

        assert excinfo.value.status_code == 200
        assert isinstance(excinfo.value.__cause__, AttributeError)

    def test_analytics_missing_body(self, api, session):
        session.queue(StubResponse(200))
        query = AnalyticsQuery("s1", DateRange(date(2024, 1, 1), date(2024, 1, 31)))

        with pytest.raises(ApiError):
            api.get_analytics(query)

    def test_store_without_id(self, api, session):
        session.queue(StubResponse(200, [{"name": "No id", "syncStatus": "COMPLETED"}]))

        with pytest.raises(ApiError) as excinfo:
            api.list_stores()

        assert isinstance(excinfo.value.__cause__, KeyError)

    def test_update_with_unknown_status(self, api, session):
        session.queue(StubResponse(200, dict(STORE_JSON, syncStatus="BROKEN")))

        with pytest.raises(ApiError):
            api.update_store("s1", StoreUpdate(name="Main"))

    def test_login_list_body_is_invalid_credentials(self, api, session):
        session.queue(StubResponse(200, ["token"]))

        with pytest.raises(AuthenticationError) as excinfo:
            api.login("a@b.com", "pw")

        assert excinfo.value.status_code == 200
        assert "Authorization" not in session.headers

    def test_check_connection_reports_malformed_list(self, api, session):
        session.queue(StubResponse(200, [{"syncStatus": "COMPLETED"}]))
        assert check_connection(api) is False
