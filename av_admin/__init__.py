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
AV Tournament Admin - administrative console for the AV tournament platform.

Modules:
    - config: Settings and constants
    - exceptions: Error types and exception handlers
    - models: Pydantic models of the platform API
    - session: Credential store and session context
    - http_client: Platform API client
    - view_router: Tab selection gated by the session
    - screens: Login, dashboard and users screens
    - console: Composition of the above for one operator
    - pages: HTML rendering
    - routes: FastAPI routes
"""

from av_admin.config import APP_VERSION as __version__

from av_admin.config import APP_TITLE, APP_VERSION, settings
from av_admin.console import AdminConsole
from av_admin.exceptions import (
    AdminConsoleError,
    ApiError,
    AuthenticationError,
    NetworkError,
    ResponseFormatError,
    SessionExpiredError,
    TransportError,
)
from av_admin.http_client import AdminApiClient, ApiResponse, build_users_params
from av_admin.session import (
    FileCredentialStorage,
    MemoryCredentialStorage,
    SessionContext,
    SessionStore,
    headers_for,
)
from av_admin.view_router import Tab, ViewRouter, ViewState

__all__ = [
    "__version__",
    "APP_TITLE",
    "APP_VERSION",
    "settings",
    "AdminConsole",
    "AdminConsoleError",
    "ApiError",
    "AuthenticationError",
    "NetworkError",
    "ResponseFormatError",
    "SessionExpiredError",
    "TransportError",
    "AdminApiClient",
    "ApiResponse",
    "build_users_params",
    "FileCredentialStorage",
    "MemoryCredentialStorage",
    "SessionContext",
    "SessionStore",
    "headers_for",
    "Tab",
    "ViewRouter",
    "ViewState",
]
