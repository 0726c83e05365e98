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
AV Tournament Admin configuration.

All settings and constants live here.
Uses Pydantic Settings for type-safe loading of environment variables.
"""

from typing import Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Console settings.

    Loaded from environment variables and the .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==================================================================================================
    # Backend API
    # ==================================================================================================

    # Origin of the platform API. Empty means the console's own origin.
    # Example: https://api.example.com
    backend_url: str = Field(default="", alias="BACKEND_URL")

    # Per-request timeout (seconds)
    request_timeout: float = Field(default=30.0, alias="REQUEST_TIMEOUT")

    # ==================================================================================================
    # Session
    # ==================================================================================================

    # JSON file holding the persisted bearer credential
    session_file: str = Field(default="data/session.json", alias="SESSION_FILE")

    # Whether a 401 on an authenticated call forces a global logout
    logout_on_unauthorized: bool = Field(default=False, alias="LOGOUT_ON_UNAUTHORIZED")

    # ==================================================================================================
    # Screens
    # ==================================================================================================

    # Dashboard overview poll period (seconds)
    dashboard_poll_interval: float = Field(default=10.0, alias="DASHBOARD_POLL_INTERVAL")

    # ==================================================================================================
    # Server
    # ==================================================================================================

    server_host: str = Field(default="127.0.0.1", alias="SERVER_HOST")
    server_port: int = Field(default=8080, alias="SERVER_PORT")

    # ==================================================================================================
    # Logging
    # ==================================================================================================

    # TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def console_origin(self) -> str:
        """Origin the console itself is served from."""
        host = self.server_host
        if host in ("0.0.0.0", "::", ""):
            host = "127.0.0.1"
        return f"http://{host}:{self.server_port}"

    @field_validator("backend_url")
    @classmethod
    def validate_backend_url(cls, v: str) -> str:
        """Strip whitespace and trailing slashes so paths can be appended."""
        return v.strip().rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.upper()
        if v not in valid_levels:
            return "INFO"
        return v

    @field_validator("dashboard_poll_interval", "request_timeout")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v


# Global settings instance
settings = Settings()

# ==================================================================================================
# Application constants
# ==================================================================================================

APP_TITLE: str = "AV Tournament Admin"
APP_DESCRIPTION: str = "Administrative console for the AV tournament platform."
APP_VERSION: str = "1.0.0"

# Storage key of the persisted credential
SESSION_TOKEN_KEY: str = "av_admin_token"

# Fixed page size of the users table
USERS_PER_PAGE: int = 20

# (value, label) pairs of the users status filter; "" means all
USER_STATUS_FILTERS: Tuple[Tuple[str, str], ...] = (
    ("", "All"),
    ("active", "Active"),
    ("suspended", "Suspended"),
)

# Platform API endpoints
LOGIN_PATH: str = "/auth/login"
OVERVIEW_PATH: str = "/analytics/overview"
USERS_PATH: str = "/users"

LOG_LEVEL: str = settings.log_level
BACKEND_URL: str = settings.backend_url
