"""
REST client for the storefront analytics backend.
"""

import logging
from typing import List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from config import AppConfig
from models import (
    AnalyticsQuery,
    AnalyticsSnapshot,
    LoginResult,
    Store,
    StoreUpdate,
    User,
)


logger = logging.getLogger(__name__)

# Raised by response.json() and the from_dict parsers on an unexpected body
PARSE_ERRORS = (KeyError, TypeError, AttributeError, ValueError)


class ApiError(Exception):
    """A backend call failed (network error, non-success status or malformed body)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ApiError):
    """Login was rejected. The cause is kept for diagnostics only."""


class DashboardApiClient:
    """Client for the stores and analytics endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: int = 0,
        session: Optional[requests.Session] = None,
    ):
        config = None
        if base_url is None or timeout is None:
            config = AppConfig.from_env()

        self.base_url = (base_url or config.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config.timeout
        self.access_token: Optional[str] = None

        if session is None:
            session = requests.Session()
            if max_retries > 0:
                retry_strategy = Retry(
                    total=max_retries,
                    backoff_factor=1,
                    status_forcelist=[500, 502, 503, 504],
                    allowed_methods=["GET"],
                )
                adapter = HTTPAdapter(max_retries=retry_strategy)
                session.mount("https://", adapter)
                session.mount("http://", adapter)
        self.session = session
        self.session.headers.update({"Content-Type": "application/json"})

    @classmethod
    def from_config(cls, config: AppConfig) -> "DashboardApiClient":
        return cls(
            base_url=config.api_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )

    def set_access_token(self, token: Optional[str]) -> None:
        self.access_token = token
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            self.session.headers.pop("Authorization", None)

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        """Send a request and raise ApiError unless it succeeded."""
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ApiError(f"{method} {path} failed: {e}") from e

        if not response.ok:
            raise ApiError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def _parse(self, method: str, path: str, response: requests.Response, parse):
        """Decode a successful response, raising ApiError on a malformed body."""
        try:
            return parse(response.json())
        except PARSE_ERRORS as e:
            raise ApiError(
                f"{method} {path} returned an unexpected body: {e}",
                status_code=response.status_code,
            ) from e

    def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate and keep the returned token on the session.

        Every failure is reported as invalid credentials to the caller;
        the real status code is logged and kept on the exception.
        """
        try:
            response = self._request(
                "POST", "/auth/login", json={"email": email, "password": password}
            )
            result = self._parse(
                "POST",
                "/auth/login",
                response,
                lambda data: LoginResult(
                    access_token=data["access_token"],
                    user=User.from_dict(data.get("user") or {}),
                ),
            )
        except ApiError as e:
            status_code = e.status_code
            logger.warning("Login failed for %s (status=%s): %s", email, status_code, e)
            raise AuthenticationError("Invalid email or password", status_code=status_code) from e

        self.set_access_token(result.access_token)
        logger.info("Logged in as %s", result.user.email or email)
        return result

    def logout(self) -> None:
        self.set_access_token(None)

    def list_stores(self) -> List[Store]:
        response = self._request("GET", "/stores")
        return self._parse("GET", "/stores", response, lambda data: [Store.from_dict(item) for item in data])

    def delete_store(self, store_id: str) -> None:
        self._request("DELETE", f"/stores/{store_id}")

    def trigger_sync(self, store_id: str) -> None:
        self._request("POST", f"/stores/{store_id}/sync")

    def update_store(self, store_id: str, update: StoreUpdate) -> Store:
        path = f"/stores/{store_id}"
        response = self._request("PATCH", path, json=update.to_payload())
        return self._parse("PATCH", path, response, Store.from_dict)

    def get_analytics(self, query: AnalyticsQuery) -> AnalyticsSnapshot:
        """
        Fetch the analytics snapshot for one store.

        Args:
            query: Store id, date range and optional comparison period

        Returns:
            AnalyticsSnapshot parsed from the response
        """
        path = f"/analytics/{query.store_id}"
        response = self._request("GET", path, params=query.to_params())
        return self._parse("GET", path, response, AnalyticsSnapshot.from_dict)


def check_connection(client: Optional[DashboardApiClient] = None) -> bool:
    """Test if the backend answers the stores endpoint."""
    try:
        client = client or DashboardApiClient()
        client.list_stores()
        return True
    except (ApiError, ValueError) as e:
        logger.warning("Connection check failed: %s", e)
        return False
