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
Fetch state shared by the data screens.
"""

from enum import Enum


class LoadState(str, Enum):
    """
    Outcome of the last fetch of a screen.

    LOADING: nothing received yet
    LOADED: last fetch succeeded
    FAILED: last fetch failed, previous data (if any) is still shown
    """
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class RequestSequencer:
    """
    Monotonic request numbering.

    Each request takes a ticket from issue(); a response is applied only if
    its ticket is still the latest one issued.
    """

    def __init__(self):
        self._latest = 0

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_latest(self, ticket: int) -> bool:
        return ticket == self._latest
