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
Users screen.

Paginated, filterable user table. Page and status changes refetch
immediately; the search text is only sent on explicit submission.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from av_admin.config import USERS_PER_PAGE
from av_admin.exceptions import AdminConsoleError, SessionExpiredError
from av_admin.http_client import AdminApiClient
from av_admin.models import UsersPage
from av_admin.screens.state import LoadState, RequestSequencer
from av_admin.session import SessionContext


@dataclass
class UserQuery:
    """
    Current search, filter and pagination of the users table.

    Attributes:
        q: Free-text search, "" for none
        status: Status filter, "" for all
        page: 1-indexed page number
    """
    q: str = ""
    status: str = ""
    page: int = 1


class UsersScreen:
    """
    User table controller.

    State:
        query: Query the next fetch will use
        page_data: Last successfully fetched window
        state: LoadState of the last fetch
        error: Message of the last failed fetch
    """

    def __init__(self, api: AdminApiClient, session: SessionContext, per_page: int = USERS_PER_PAGE):
        self.api = api
        self.session = session
        self.per_page = per_page

        self.query = UserQuery()
        self.page_data = UsersPage()
        self.state = LoadState.LOADING
        self.error: Optional[str] = None
        self.revision = 0

        self._mounted = False
        self._sequencer = RequestSequencer()

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def has_prev(self) -> bool:
        return self.query.page > 1

    @property
    def has_next(self) -> bool:
        return self.query.page * self.per_page < self.page_data.total

    async def mount(self) -> None:
        if self._mounted:
            return
        self._mounted = True
        await self.load()

    async def unmount(self) -> None:
        self._mounted = False

    def set_search_text(self, q: str) -> None:
        """Update the search box. Does not fetch."""
        self.query.q = q

    async def submit_search(self, q: Optional[str] = None) -> None:
        """Search with the current (or given) text, keeping the page."""
        if q is not None:
            self.set_search_text(q)
        await self.load()

    async def set_status(self, status: str) -> None:
        """Change the status filter. Always goes back to page 1."""
        if status == self.query.status and self.query.page == 1:
            return
        self.query.status = status
        self.query.page = 1
        await self.load()

    async def set_page(self, page: int) -> None:
        page = max(1, page)
        if page == self.query.page:
            return
        self.query.page = page
        await self.load()

    async def next_page(self) -> None:
        if self.has_next:
            await self.set_page(self.query.page + 1)

    async def prev_page(self) -> None:
        if self.has_prev:
            await self.set_page(self.query.page - 1)

    async def load(self) -> None:
        """
        Fetch the window described by the current query.

        Only the latest issued load may change state.
        """
        ticket = self._sequencer.issue()
        query = UserQuery(q=self.query.q, status=self.query.status, page=self.query.page)
        try:
            page_data = await self.api.fetch_users(self.session.headers, query)
        except SessionExpiredError as e:
            if self._accepts(ticket):
                self._fail(e.detail)
                self.session.report_unauthorized()
            return
        except AdminConsoleError as e:
            logger.warning(f"Users fetch failed: {e}")
            if self._accepts(ticket):
                self._fail(str(e))
            return

        if not self._accepts(ticket):
            logger.debug(f"Discarding stale users response #{ticket}")
            return
        self.page_data = page_data
        self.state = LoadState.LOADED
        self.error = None
        self.revision += 1

    def _accepts(self, ticket: int) -> bool:
        return self._mounted and self._sequencer.is_latest(ticket)

    def _fail(self, message: str) -> None:
        self.state = LoadState.FAILED
        self.error = message
        self.revision += 1
