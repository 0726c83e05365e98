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
Login screen.
"""

from typing import Callable

from loguru import logger

from av_admin.exceptions import AuthenticationError, TransportError
from av_admin.http_client import AdminApiClient


class LoginScreen:
    """
    Email/password form.

    On success the new credential is handed to on_login; on failure the
    message is kept in `error` and the form is enabled again. While a
    request is in flight the form is disabled and further submissions are
    ignored.
    """

    def __init__(self, api: AdminApiClient, on_login: Callable[[str], None]):
        self.api = api
        self.on_login = on_login
        self.email = ""
        self.error = ""
        self.submitting = False

    @property
    def submit_disabled(self) -> bool:
        return self.submitting

    @property
    def submit_label(self) -> str:
        return "Signing in..." if self.submitting else "Sign in"

    async def submit(self, email: str, password: str) -> bool:
        """
        Submit the form.

        Args:
            email: Admin email
            password: Admin password

        Returns:
            True if a credential was obtained
        """
        if self.submitting:
            logger.debug("Login already in flight, ignoring submit")
            return False

        self.email = email
        self.submitting = True
        self.error = ""
        try:
            token = await self.api.login(email, password)
        except AuthenticationError as e:
            self.error = e.detail
            return False
        except TransportError as e:
            self.error = str(e)
            return False
        finally:
            self.submitting = False

        self.on_login(token)
        return True

    def reset(self) -> None:
        """Clear the inline error, keep the last email."""
        self.error = ""
        self.submitting = False
