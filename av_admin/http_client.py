# -*- coding: utf-8 -*-

# AV Tournament Admin
# Copyright (C) 2025 AV Tournament Admin contributors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""
HTTP client for the platform API.

A global connection pool is shared by all screens. Requests are never
retried: a failure is raised to the screen that issued the call.
"""

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from av_admin.config import (
    LOGIN_PATH,
    OVERVIEW_PATH,
    USERS_PATH,
    USERS_PER_PAGE,
    settings,
)
from av_admin.exceptions import (
    ApiError,
    AuthenticationError,
    ResponseFormatError,
    SessionExpiredError,
    TransportError,
    format_error_detail,
)
from av_admin.models import LoginRequest, OverviewSnapshot, TokenResponse, UsersPage

if TYPE_CHECKING:
    from av_admin.screens.users import UserQuery


class GlobalHTTPClientManager:
    """
    Global HTTP client manager.

    Maintains a global connection pool to avoid creating new clients for each request.
    Relative URLs resolve against the console's own origin.
    """

    def __init__(self):
        """Initialize global client manager."""
        self._client: Optional[httpx.AsyncClient] = None
        self._lock = asyncio.Lock()

    async def get_client(self) -> httpx.AsyncClient:
        """
        Get or create HTTP client.

        Returns:
            HTTP client instance
        """
        async with self._lock:
            if self._client is None or self._client.is_closed:
                limits = httpx.Limits(
                    max_connections=20,
                    max_keepalive_connections=10,
                    keepalive_expiry=60.0
                )
                self._client = httpx.AsyncClient(
                    base_url=settings.console_origin,
                    timeout=settings.request_timeout,
                    follow_redirects=True,
                    limits=limits,
                )
                logger.debug("Created new global HTTP client with connection pool")

            return self._client

    async def close(self) -> None:
        """Close global HTTP client."""
        async with self._lock:
            if self._client and not self._client.is_closed:
                await self._client.aclose()
                logger.debug("Closed global HTTP client")


# Global manager instance
global_http_client_manager = GlobalHTTPClientManager()


@dataclass
class ApiResponse:
    """
    Outcome of a single API call.

    Attributes:
        ok: True for 2xx statuses
        status: HTTP status code
        json: Decoded body, None if the body is not JSON
    """
    ok: bool
    status: int
    json: Any = None

    @property
    def detail(self) -> Optional[str]:
        """Server-supplied error message, if any."""
        if isinstance(self.json, dict):
            return format_error_detail(self.json.get("detail"))
        return None


def build_users_params(query: "UserQuery", per_page: int = USERS_PER_PAGE) -> Dict[str, Any]:
    """
    Serialize a users query to URL parameters.

    Empty `q` and `status` are left out rather than sent empty.

    Args:
        query: Current query state
        per_page: Page size

    Returns:
        Ordered parameter dict: page, per_page, then q and status when set
    """
    params: Dict[str, Any] = {"page": query.page, "per_page": per_page}
    if query.q:
        params["q"] = query.q
    if query.status:
        params["status"] = query.status
    return params


class AdminApiClient:
    """
    Platform API client.

    Every call targets one origin. Errors are raised as console exceptions:
    - Transport failures and timeouts: TransportError
    - 401 on an authenticated call: SessionExpiredError
    - Other non-2xx statuses: ApiError
    - Payloads that do not match the models: ResponseFormatError

    Example:
        >>> api = AdminApiClient(origin="https://api.example.com")
        >>> token = await api.login("admin@example.com", "secret")
        >>> overview = await api.fetch_overview({"Authorization": f"Bearer {token}"})
    """

    def __init__(
        self,
        origin: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize API client.

        Args:
            origin: API origin, "" for the console's own origin (default from config)
            client: HTTP client to use instead of the global pool
            timeout: Per-request timeout in seconds (default from config)
        """
        self.origin = (settings.backend_url if origin is None else origin).rstrip("/")
        self._client = client
        self.timeout = timeout if timeout is not None else settings.request_timeout

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return await global_http_client_manager.get_client()

    async def request(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        """
        Perform one HTTP call.

        Args:
            path: Endpoint path, appended to the origin
            method: HTTP method
            headers: Extra request headers
            body: JSON body
            params: Query parameters

        Returns:
            ApiResponse

        Raises:
            TransportError: No response was received
        """
        client = await self._get_client()
        url = f"{self.origin}{path}"

        try:
            response = await client.request(
                method,
                url,
                headers=headers or {},
                json=body,
                params=params,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out after {self.timeout}s")
            raise TransportError(f"Request timed out: {method} {path}") from e
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise TransportError(f"Network error: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        logger.debug(f"{method} {path} -> {response.status_code}")
        return ApiResponse(
            ok=response.is_success,
            status=response.status_code,
            json=payload,
        )

    def _raise_for_status(self, response: ApiResponse) -> None:
        if response.ok:
            return
        if response.status == 401:
            raise SessionExpiredError(response.detail, status_code=401)
        logger.warning(f"API error {response.status}: {response.detail}")
        raise ApiError(response.detail, status_code=response.status)

    async def login(self, email: str, password: str) -> str:
        """
        Exchange admin credentials for a bearer token.

        Args:
            email: Admin email
            password: Admin password

        Returns:
            Access token

        Raises:
            AuthenticationError: The server rejected the login
            TransportError: No response was received
        """
        body = LoginRequest(email=email, password=password).model_dump()
        response = await self.request(
            LOGIN_PATH,
            method="POST",
            headers={"Content-Type": "application/json"},
            body=body,
        )

        if not response.ok:
            logger.info(f"Login rejected for {email} (HTTP {response.status})")
            raise AuthenticationError(response.detail, status_code=response.status)

        try:
            token = TokenResponse.model_validate(response.json)
        except ValidationError as e:
            logger.warning(f"Login response without access token: {e}")
            raise AuthenticationError(status_code=response.status) from e

        if not token.access_token:
            raise AuthenticationError(status_code=response.status)

        logger.info(f"Login succeeded for {email}")
        return token.access_token

    async def fetch_overview(self, headers: Dict[str, str]) -> OverviewSnapshot:
        """
        Fetch the dashboard overview.

        Args:
            headers: Session headers

        Returns:
            OverviewSnapshot
        """
        response = await self.request(OVERVIEW_PATH, headers=headers)
        self._raise_for_status(response)

        try:
            return OverviewSnapshot.model_validate(response.json)
        except ValidationError as e:
            logger.warning(f"Malformed overview response: {e}")
            raise ResponseFormatError(status_code=response.status) from e

    async def fetch_users(self, headers: Dict[str, str], query: "UserQuery") -> UsersPage:
        """
        Fetch one page of users.

        Args:
            headers: Session headers
            query: Search, status filter and page

        Returns:
            UsersPage with the items of the page and the total match count
        """
        response = await self.request(
            USERS_PATH,
            headers=headers,
            params=build_users_params(query),
        )
        self._raise_for_status(response)

        try:
            return UsersPage.model_validate(response.json)
        except ValidationError as e:
            logger.warning(f"Malformed users response: {e}")
            raise ResponseFormatError(status_code=response.status) from e


async def close_global_http_client():
    """Close global HTTP client (called on app shutdown)."""
    await global_http_client_manager.close()
