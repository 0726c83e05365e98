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
Admin console.

Wires the session store, API client, view router and screens together and
keeps exactly the screen of the current view mounted.
"""

import asyncio
from typing import Any, Dict, Optional, Union

from loguru import logger

from av_admin.config import settings
from av_admin.http_client import AdminApiClient
from av_admin.screens import DashboardScreen, LoginScreen, UsersScreen
from av_admin.session import SessionContext, SessionStore
from av_admin.view_router import Tab, ViewRouter, ViewState


class AdminConsole:
    """
    One operator's console.

    Attributes:
        store: Credential store
        api: Platform API client
        session: Context handed to the screens
        router: Tab selection
        login_screen: Login form
        dashboard: Dashboard screen (always exists, mounted only on its tab)
        users: Users screen (always exists, mounted only on its tab)

    Example:
        >>> console = AdminConsole(store, api)
        >>> await console.start()
        >>> await console.login("admin@example.com", "secret")
        >>> str(console.view)
        'authenticated:dashboard'
    """

    def __init__(
        self,
        store: SessionStore,
        api: AdminApiClient,
        logout_on_unauthorized: Optional[bool] = None,
        poll_interval: Optional[float] = None,
    ):
        self.store = store
        self.api = api
        self.logout_on_unauthorized = (
            settings.logout_on_unauthorized if logout_on_unauthorized is None else logout_on_unauthorized
        )
        self.session = SessionContext(store, on_unauthenticated=self._on_unauthenticated)
        self.router = ViewRouter(store)
        self.login_screen = LoginScreen(api, on_login=store.set_credential)
        self.dashboard = DashboardScreen(api, self.session, poll_interval=poll_interval)
        self.users = UsersScreen(api, self.session)
        self.session_expired = False

        self._active: Optional[Union[DashboardScreen, UsersScreen]] = None
        self._logout_tasks: set = set()

    @property
    def view(self) -> ViewState:
        return self.router.state

    @property
    def active_screen(self) -> Optional[Union[DashboardScreen, UsersScreen]]:
        return self._active

    async def start(self) -> None:
        """Mount the screen of the restored view, if any."""
        if self.store.is_authenticated:
            logger.info("Restored admin session from storage")
        await self.sync()

    async def sync(self) -> ViewState:
        """
        Bring mounted screens in line with the current view.

        Returns:
            The current view state
        """
        view = self.router.state
        target = self._screen_for(view)
        if target is not self._active:
            if self._active is not None:
                await self._active.unmount()
            if target is self.users:
                # the users table starts from a blank query on every visit
                target = self.users = UsersScreen(self.api, self.session)
            self._active = target
            if target is not None:
                await target.mount()
        return view

    async def login(self, email: str, password: str) -> bool:
        """
        Submit the login form.

        Returns:
            True if the operator is now signed in
        """
        if not await self.login_screen.submit(email, password):
            return False
        self.session_expired = False
        # fresh screens for the new session
        self.dashboard = DashboardScreen(self.api, self.session, poll_interval=self.dashboard.poll_interval)
        self.users = UsersScreen(self.api, self.session)
        await self.sync()
        return True

    async def logout(self) -> None:
        self.store.clear()
        self.login_screen.reset()
        await self.sync()
        logger.info("Operator signed out")

    async def select_tab(self, tab: Union[Tab, str]) -> ViewState:
        """
        Select a tab and mount its screen.

        Raises:
            ValueError: Unknown tab
        """
        self.router.select(tab)
        return await self.sync()

    async def close(self) -> None:
        """Unmount the active screen and detach from the store."""
        if self._active is not None:
            await self._active.unmount()
            self._active = None
        self.router.close()

    def snapshot(self) -> Dict[str, Any]:
        """JSON-serializable view of the console state."""
        view = self.router.state
        data: Dict[str, Any] = {
            "view": str(view),
            "authenticated": view.authenticated,
            "tab": view.tab.value if view.tab else None,
            "session_expired": self.session_expired,
        }
        if not view.authenticated:
            data["login"] = {
                "email": self.login_screen.email,
                "error": self.login_screen.error or None,
                "submitting": self.login_screen.submitting,
            }
            return data

        if view.tab == Tab.DASHBOARD:
            snapshot = self.dashboard.snapshot
            data["dashboard"] = {
                "state": self.dashboard.state.value,
                "error": self.dashboard.error,
                "overview": snapshot.model_dump() if snapshot else None,
            }
        elif view.tab == Tab.USERS:
            data["users"] = {
                "state": self.users.state.value,
                "error": self.users.error,
                "query": {
                    "q": self.users.query.q,
                    "status": self.users.query.status,
                    "page": self.users.query.page,
                },
                "total": self.users.page_data.total,
                "items": [u.model_dump(by_alias=True) for u in self.users.page_data.items],
                "has_prev": self.users.has_prev,
                "has_next": self.users.has_next,
            }
        return data

    def _screen_for(self, view: ViewState) -> Optional[Union[DashboardScreen, UsersScreen]]:
        if view.tab == Tab.DASHBOARD:
            return self.dashboard
        if view.tab == Tab.USERS:
            return self.users
        return None

    def _on_unauthenticated(self) -> None:
        self.session_expired = True
        if not self.logout_on_unauthorized:
            logger.warning("Admin session rejected by the API; staying signed in")
            return
        logger.warning("Admin session rejected by the API; signing out")
        # called from inside a screen fetch, so the unmount runs as its own task
        task = asyncio.create_task(self.logout())
        self._logout_tasks.add(task)
        task.add_done_callback(self._logout_tasks.discard)
