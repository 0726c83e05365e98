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
View selection.

The view is `unauthenticated` whenever the session holds no credential,
otherwise `authenticated:<tab>`. Tab selection is purely local.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from loguru import logger

from av_admin.session import SessionStore


class Tab(str, Enum):
    DASHBOARD = "dashboard"
    USERS = "users"
    TOURNAMENTS = "tournaments"
    SETTINGS = "settings"

    @property
    def label(self) -> str:
        return self.value.capitalize()


DEFAULT_TAB = Tab.DASHBOARD


@dataclass(frozen=True)
class ViewState:
    """Observed view: tab is None when unauthenticated."""
    tab: Optional[Tab] = None

    @property
    def authenticated(self) -> bool:
        return self.tab is not None

    def __str__(self) -> str:
        if self.tab is None:
            return "unauthenticated"
        return f"authenticated:{self.tab.value}"


UNAUTHENTICATED = ViewState()


class ViewRouter:
    """
    Selected-tab state gated by the session.

    The tab goes back to the dashboard whenever the credential appears or
    disappears, so every sign-in starts on the dashboard.
    """

    def __init__(self, store: SessionStore):
        self._store = store
        self._tab = DEFAULT_TAB
        self._unsubscribe = store.subscribe(self._on_credential_change)

    @property
    def state(self) -> ViewState:
        if not self._store.is_authenticated:
            return UNAUTHENTICATED
        return ViewState(tab=self._tab)

    @property
    def tab(self) -> Tab:
        return self._tab

    def select(self, tab: Union[Tab, str]) -> ViewState:
        """
        Select a tab.

        Args:
            tab: Tab or its name

        Returns:
            The resulting view state

        Raises:
            ValueError: Unknown tab
        """
        tab = Tab(tab)
        if tab != self._tab:
            logger.debug(f"Tab {self._tab.value} -> {tab.value}")
        self._tab = tab
        return self.state

    def close(self) -> None:
        self._unsubscribe()

    def _on_credential_change(self, credential: str) -> None:
        self._tab = DEFAULT_TAB
