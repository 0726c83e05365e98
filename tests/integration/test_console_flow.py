# -*- coding: utf-8 -*-

"""
Console integration tests.

Drive AdminConsole end to end against the fake platform API with a
file-backed session store.
"""

import asyncio
import json

import pytest

from av_admin.console import AdminConsole
from av_admin.screens.state import LoadState
from av_admin.screens.users import UserQuery
from av_admin.session import FileCredentialStorage, SessionStore


@pytest.fixture
def session_file(tmp_path):
    return tmp_path / "session.json"


def file_store(path) -> SessionStore:
    return SessionStore(FileCredentialStorage(path))


async def settle(seconds: float = 0.01) -> None:
    await asyncio.sleep(seconds)


class TestLoginFlow:
    """Login, persistence and logout."""

    @pytest.mark.asyncio
    async def test_wrong_credentials_store_nothing(self, api, backend, session_file):
        console = AdminConsole(file_store(session_file), api, poll_interval=3600)
        await console.start()

        ok = await console.login(backend.email, "wrong-password")

        assert ok is False
        assert str(console.view) == "unauthenticated"
        assert console.login_screen.error == "Invalid credentials"
        assert not session_file.exists()
        await console.close()

    @pytest.mark.asyncio
    async def test_login_lands_on_dashboard_and_persists(self, api, backend, session_file):
        console = AdminConsole(file_store(session_file), api, poll_interval=3600)
        await console.start()

        ok = await console.login(backend.email, backend.password)
        await settle()

        assert ok is True
        assert str(console.view) == "authenticated:dashboard"
        assert console.active_screen is console.dashboard
        assert console.dashboard.state == LoadState.LOADED
        assert json.loads(session_file.read_text())["av_admin_token"] == backend.token
        await console.close()

    @pytest.mark.asyncio
    async def test_logout_survives_restart(self, api, backend, session_file):
        console = AdminConsole(file_store(session_file), api, poll_interval=3600)
        await console.start()
        await console.login(backend.email, backend.password)

        await console.logout()
        await console.close()

        restarted = AdminConsole(file_store(session_file), api, poll_interval=3600)
        await restarted.start()
        assert str(restarted.view) == "unauthenticated"
        assert restarted.active_screen is None
        await restarted.close()

    @pytest.mark.asyncio
    async def test_restored_token_mounts_dashboard(self, api, backend, session_file):
        session_file.write_text(json.dumps({"av_admin_token": backend.token}))
        console = AdminConsole(file_store(session_file), api, poll_interval=3600)

        await console.start()
        await settle()

        assert str(console.view) == "authenticated:dashboard"
        assert console.dashboard.mounted is True
        assert console.dashboard.snapshot.metrics.tournaments == 12
        assert backend.requests_to("/auth/login") == []
        await console.close()


class TestTabSwitching:
    """Only the screen of the current tab is mounted."""

    @pytest.mark.asyncio
    async def test_switching_tabs_mounts_and_unmounts(self, api, signed_in_store, backend):
        console = AdminConsole(signed_in_store, api, poll_interval=3600)
        await console.start()
        await settle()

        await console.select_tab("users")
        assert console.dashboard.mounted is False
        assert console.users.mounted is True
        assert console.users.page_data.total == 45

        await console.select_tab("tournaments")
        assert console.users.mounted is False
        assert console.active_screen is None
        assert str(console.view) == "authenticated:tournaments"

        await console.select_tab("dashboard")
        await settle()
        assert console.dashboard.mounted is True
        assert len(backend.requests_to("/analytics/overview")) == 2
        await console.close()

    @pytest.mark.asyncio
    async def test_users_query_resets_when_tab_is_revisited(self, api, signed_in_store, backend):
        console = AdminConsole(signed_in_store, api, poll_interval=3600)
        await console.start()
        await console.select_tab("users")
        await console.users.set_status("suspended")
        await console.users.submit_search("player")

        await console.select_tab("dashboard")
        await console.select_tab("users")

        assert console.users.query == UserQuery()
        assert console.users.page_data.total == 45
        assert backend.requests_to("/users")[-1].url.query == b"page=1&per_page=20"
        await console.close()

    @pytest.mark.asyncio
    async def test_unknown_tab_keeps_view(self, api, signed_in_store):
        console = AdminConsole(signed_in_store, api, poll_interval=3600)
        await console.start()

        with pytest.raises(ValueError):
            await console.select_tab("reports")

        assert str(console.view) == "authenticated:dashboard"
        await console.close()

    @pytest.mark.asyncio
    async def test_no_polls_after_leaving_dashboard(self, api, signed_in_store, backend):
        console = AdminConsole(signed_in_store, api, poll_interval=0.02)
        await console.start()
        await settle(0.05)

        await console.select_tab("settings")
        await settle()
        polls = len(backend.requests_to("/analytics/overview"))
        await settle(0.1)

        assert len(backend.requests_to("/analytics/overview")) == polls
        await console.close()

    @pytest.mark.asyncio
    async def test_snapshot_of_users_tab(self, api, signed_in_store):
        console = AdminConsole(signed_in_store, api, poll_interval=3600)
        await console.start()
        await console.select_tab("users")

        state = console.snapshot()

        assert state["view"] == "authenticated:users"
        assert state["users"]["total"] == 45
        assert state["users"]["items"][0]["_id"] == "64b7f0c2a10001"
        assert state["users"]["has_prev"] is False
        assert state["users"]["has_next"] is True
        json.dumps(state)
        await console.close()


class TestUnauthorized:
    """Expired or revoked credentials."""

    @pytest.mark.asyncio
    async def test_rejected_token_stays_signed_in_by_default(self, api, store, backend):
        store.set_credential("revoked-token")
        console = AdminConsole(store, api, logout_on_unauthorized=False, poll_interval=3600)

        await console.start()
        await settle()

        assert console.session_expired is True
        assert str(console.view) == "authenticated:dashboard"
        assert console.dashboard.state == LoadState.FAILED
        assert store.get_credential() == "revoked-token"
        await console.close()

    @pytest.mark.asyncio
    async def test_rejected_token_signs_out_when_enabled(self, api, store, backend):
        store.set_credential("revoked-token")
        console = AdminConsole(store, api, logout_on_unauthorized=True, poll_interval=3600)

        await console.start()
        await settle(0.05)

        assert str(console.view) == "unauthenticated"
        assert store.get_credential() == ""
        assert console.active_screen is None
        assert console.session_expired is True
        await console.close()

    @pytest.mark.asyncio
    async def test_login_clears_expired_flag(self, api, store, backend):
        store.set_credential("revoked-token")
        console = AdminConsole(store, api, logout_on_unauthorized=True, poll_interval=3600)
        await console.start()
        await settle(0.05)

        await console.login(backend.email, backend.password)

        assert console.session_expired is False
        assert str(console.view) == "authenticated:dashboard"
        await console.close()
