# -*- coding: utf-8 -*-

"""
Error helpers unit tests.
"""

import pytest

from av_admin.exceptions import (
    ApiError,
    AuthenticationError,
    ResponseFormatError,
    SessionExpiredError,
    format_error_detail,
    sanitize_validation_errors,
)


class TestFormatErrorDetail:
    """format_error_detail tests."""

    @pytest.mark.parametrize("detail", [None, "", "   ", []])
    def test_empty_details(self, detail):
        assert format_error_detail(detail) is None

    def test_string_detail(self):
        assert format_error_detail("Invalid credentials") == "Invalid credentials"

    def test_validation_list(self):
        detail = [
            {"loc": ["body", "email"], "msg": "field required", "type": "missing"},
            {"loc": ["query", "page"], "msg": "must be positive"},
            {"msg": "something else"},
        ]

        assert format_error_detail(detail) == (
            "email: field required; query.page: must be positive; something else"
        )

    def test_other_types_are_stringified(self):
        assert format_error_detail({"code": 7}) == "{'code': 7}"


class TestErrorHierarchy:
    """Console error classes."""

    def test_default_messages(self):
        assert AuthenticationError().detail == "Login failed"
        assert SessionExpiredError().detail == "Session expired, please sign in again"
        assert ResponseFormatError().detail == "Unexpected response from server"
        assert ApiError().detail == "Request failed"

    def test_session_expired_is_authentication_error(self):
        error = SessionExpiredError("Token revoked", status_code=401)

        assert isinstance(error, AuthenticationError)
        assert isinstance(error, ApiError)
        assert str(error) == "Token revoked"
        assert error.status_code == 401


class TestSanitizeValidationErrors:

    def test_bytes_are_decoded(self):
        errors = [{"type": "missing", "loc": ("body", b"email"), "input": b"\xff{}"}]

        result = sanitize_validation_errors(errors)

        assert result[0]["loc"] == ["body", "email"]
        assert result[0]["input"] == "�{}"
        assert result[0]["type"] == "missing"
