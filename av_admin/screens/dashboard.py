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
Dashboard screen.

Polls the overview endpoint on mount and then at a fixed interval while
mounted. Each poll runs as its own task so that unmounting only stops the
timer; polls already in flight finish and are discarded.
"""

import asyncio
from typing import Optional, Set

from loguru import logger

from av_admin.config import settings
from av_admin.exceptions import AdminConsoleError, SessionExpiredError
from av_admin.http_client import AdminApiClient
from av_admin.models import OverviewSnapshot
from av_admin.screens.state import LoadState, RequestSequencer
from av_admin.session import SessionContext


class DashboardScreen:
    """
    Overview metrics with periodic refresh.

    State:
        snapshot: Latest successfully fetched overview (None until the first success)
        state: LoadState of the last poll
        error: Message of the last failed poll
        revision: Incremented on every state change
    """

    def __init__(
        self,
        api: AdminApiClient,
        session: SessionContext,
        poll_interval: Optional[float] = None,
    ):
        self.api = api
        self.session = session
        self.poll_interval = poll_interval if poll_interval is not None else settings.dashboard_poll_interval

        self.snapshot: Optional[OverviewSnapshot] = None
        self.state = LoadState.LOADING
        self.error: Optional[str] = None
        self.revision = 0

        self._mounted = False
        self._timer: Optional[asyncio.Task] = None
        self._generation = 0
        self._inflight: Set[asyncio.Task] = set()
        self._sequencer = RequestSequencer()
        self._applied = 0

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def pending_polls(self) -> int:
        return len(self._inflight)

    async def mount(self) -> None:
        """Start polling. The first poll is issued immediately."""
        if self._mounted:
            return
        self._mounted = True
        self._generation += 1
        self._timer = asyncio.create_task(self._poll_loop())
        logger.debug(f"Dashboard mounted, polling every {self.poll_interval}s")

    async def unmount(self) -> None:
        """Stop the timer. No state changes happen after this returns."""
        if not self._mounted:
            return
        self._mounted = False

        if self._timer:
            self._timer.cancel()
            try:
                await self._timer
            except asyncio.CancelledError:
                pass
            self._timer = None
        logger.debug("Dashboard unmounted")

    async def _poll_loop(self) -> None:
        while self._mounted:
            self._spawn_poll()
            try:
                await asyncio.sleep(self.poll_interval)
            except asyncio.CancelledError:
                break

    def _spawn_poll(self) -> None:
        task = asyncio.create_task(self._poll(self._generation))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def refresh(self) -> None:
        """
        Fetch the overview once.

        The result is dropped if the screen was unmounted (or unmounted and
        mounted again) meanwhile, or a newer poll has already been applied.
        """
        await self._poll(self._generation)

    async def _poll(self, generation: int) -> None:
        ticket = self._sequencer.issue()
        try:
            snapshot = await self.api.fetch_overview(self.session.headers)
        except SessionExpiredError as e:
            if self._accepts(ticket, generation):
                self._fail(ticket, e.detail)
                self.session.report_unauthorized()
            return
        except AdminConsoleError as e:
            logger.warning(f"Dashboard poll failed: {e}")
            if self._accepts(ticket, generation):
                self._fail(ticket, str(e))
            return

        if not self._accepts(ticket, generation):
            logger.debug(f"Discarding dashboard poll #{ticket}")
            return
        self.snapshot = snapshot
        self.state = LoadState.LOADED
        self.error = None
        self._applied = ticket
        self.revision += 1

    def _accepts(self, ticket: int, generation: int) -> bool:
        return self._mounted and generation == self._generation and ticket > self._applied

    def _fail(self, ticket: int, message: str) -> None:
        # keep the previous snapshot on screen
        self.state = LoadState.FAILED
        self.error = message
        self._applied = ticket
        self.revision += 1
