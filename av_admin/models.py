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
Pydantic models of the platform API payloads.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ==================================================================================================
# /auth/login
# ==================================================================================================

class LoginRequest(BaseModel):
    """Body of POST /auth/login."""
    email: str
    password: str


class TokenResponse(BaseModel):
    """Successful login response."""
    access_token: str

    model_config = {"extra": "allow"}


# ==================================================================================================
# /analytics/overview
# ==================================================================================================

class Metrics(BaseModel):
    """
    Platform totals shown on the dashboard cards.

    Missing or null values count as 0.
    """
    users: int = 0
    tournaments: int = 0
    transactions: int = 0
    revenue: float = 0

    model_config = {"extra": "allow"}

    @field_validator("users", "tournaments", "transactions", "revenue", mode="before")
    @classmethod
    def null_as_zero(cls, v):
        return 0 if v is None else v


class ActivityItem(BaseModel):
    """
    One entry of the recent activity feed.

    Attributes:
        type: Event kind (signup, deposit, ...)
        username: Acting user, for user events
        amount: Amount, for money events
    """
    type: str = ""
    username: Optional[str] = None
    amount: Optional[Union[int, float, str]] = None

    model_config = {"extra": "allow"}

    @property
    def label(self) -> str:
        """Right-hand column of the feed: username, else amount."""
        if self.username:
            return self.username
        if self.amount is not None:
            return str(self.amount)
        return ""


class SystemHealth(BaseModel):
    server: Optional[str] = None
    db: Optional[str] = None

    model_config = {"extra": "allow"}


class OverviewSnapshot(BaseModel):
    """
    Point-in-time aggregate metrics for the dashboard.

    Replaced as a whole on every poll.
    """
    metrics: Metrics = Field(default_factory=Metrics)
    recent_activity: List[ActivityItem] = Field(default_factory=list)
    system_health: SystemHealth = Field(default_factory=SystemHealth)

    model_config = ConfigDict(extra="allow", frozen=True)


# ==================================================================================================
# /users
# ==================================================================================================

class Balances(BaseModel):
    deposited: float = 0
    winnings: float = 0
    gifted: float = 0

    model_config = {"extra": "allow"}

    @field_validator("deposited", "winnings", "gifted", mode="before")
    @classmethod
    def null_as_zero(cls, v):
        return 0 if v is None else v

    @property
    def total(self) -> float:
        return (self.deposited or 0) + (self.winnings or 0) + (self.gifted or 0)


class UserRecord(BaseModel):
    """
    Administrative view of a single platform user.

    Identity is `_id`.
    """
    id: str = Field(alias="_id")
    uid: Optional[Union[str, int]] = None
    username: str = ""
    email: Optional[str] = None
    status: str = ""
    balances: Balances = Field(default_factory=Balances)

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class UsersPage(BaseModel):
    """A paginated window of users plus the total match count."""
    items: List[UserRecord] = Field(default_factory=list)
    total: int = 0

    model_config = {"extra": "allow"}
