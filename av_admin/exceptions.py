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
Console errors and exception handlers.

Errors raised by the API gateway client are handled by the screen that issued
the request. Validation failures of the console's own routes are logged and
answered with a JSON 422.
"""

from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


class AdminConsoleError(Exception):
    """Base class of all console errors."""


class TransportError(AdminConsoleError):
    """The request never produced an HTTP response (connection error, timeout)."""


# Fetch-level failures are reported as network errors in the UI
NetworkError = TransportError


class ApiError(AdminConsoleError):
    """
    The platform API answered with a non-success status.

    Attributes:
        status_code: HTTP status of the response
        detail: Message extracted from the response body
    """

    default_detail = "Request failed"

    def __init__(self, detail: Optional[str] = None, status_code: Optional[int] = None):
        self.detail = detail or self.default_detail
        self.status_code = status_code
        super().__init__(self.detail)


class AuthenticationError(ApiError):
    """Bad credentials or a rejected login."""

    default_detail = "Login failed"


class SessionExpiredError(AuthenticationError):
    """An authenticated call was rejected with 401."""

    default_detail = "Session expired, please sign in again"


class ResponseFormatError(ApiError):
    """The response body does not match the expected shape."""

    default_detail = "Unexpected response from server"


def sanitize_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Convert validation errors into a JSON-serializable form.

    Pydantic may put bytes into the 'input' field, which JSON cannot encode.

    Args:
        errors: Validation errors from Pydantic

    Returns:
        Errors with bytes decoded to strings
    """
    sanitized = []
    for error in errors:
        sanitized_error = {}
        for key, value in error.items():
            if isinstance(value, bytes):
                sanitized_error[key] = value.decode("utf-8", errors="replace")
            elif isinstance(value, (list, tuple)):
                sanitized_error[key] = [
                    v.decode("utf-8", errors="replace") if isinstance(v, bytes) else v
                    for v in value
                ]
            else:
                sanitized_error[key] = value
        sanitized.append(sanitized_error)
    return sanitized


def format_error_detail(detail: Any) -> Optional[str]:
    """
    Turn a server `detail` field into a single message.

    FastAPI backends answer with either a string or a list of validation
    errors ({"loc": [...], "msg": "..."}).

    Args:
        detail: Value of the `detail` key, if any

    Returns:
        Message, or None when the detail carries nothing useful
    """
    if detail is None:
        return None
    if isinstance(detail, str):
        return detail.strip() or None
    if isinstance(detail, list):
        messages = []
        for item in detail:
            if isinstance(item, dict):
                msg = item.get("msg")
                loc = [str(part) for part in item.get("loc", []) if part != "body"]
                if msg and loc:
                    messages.append(f"{'.'.join(loc)}: {msg}")
                elif msg:
                    messages.append(str(msg))
            elif item:
                messages.append(str(item))
        return "; ".join(messages) or None
    return str(detail)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle Pydantic validation errors on console routes.

    Args:
        request: FastAPI Request
        exc: Validation error

    Returns:
        JSONResponse with status 422
    """
    sanitized_errors = sanitize_validation_errors(exc.errors())

    logger.error(f"Validation error (422) on {request.url.path}: {sanitized_errors}")

    return JSONResponse(
        status_code=422,
        content={"detail": sanitized_errors},
    )
