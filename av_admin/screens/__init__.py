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
Screen controllers: login form, dashboard and users table.
"""

from av_admin.screens.dashboard import DashboardScreen
from av_admin.screens.login import LoginScreen
from av_admin.screens.state import LoadState, RequestSequencer
from av_admin.screens.users import UserQuery, UsersScreen

__all__ = [
    "DashboardScreen",
    "LoadState",
    "LoginScreen",
    "RequestSequencer",
    "UserQuery",
    "UsersScreen",
]
