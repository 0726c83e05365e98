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
FastAPI routes of the console.

Pages are rendered from the console held in app.state.console. Form posts
act on the console and redirect back to "/".
"""

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from av_admin.config import APP_VERSION
from av_admin.console import AdminConsole
from av_admin.pages import render_console_page, render_login_page
from av_admin.view_router import Tab

router = APIRouter()


def _console(request: Request) -> AdminConsole:
    return request.app.state.console


def _back_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=303)


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index(request: Request):
    """Login form, or the selected tab of the console."""
    console = _console(request)
    view = await console.sync()
    if not view.authenticated:
        return HTMLResponse(content=render_login_page(console.login_screen))
    return HTMLResponse(
        content=render_console_page(
            view.tab,
            console.dashboard,
            console.users,
            session_expired=console.session_expired,
        )
    )


@router.post("/login", include_in_schema=False)
async def login(request: Request, email: str = Form(...), password: str = Form(...)):
    console = _console(request)
    if await console.login(email, password):
        return _back_home()
    return HTMLResponse(content=render_login_page(console.login_screen), status_code=401)


@router.post("/logout", include_in_schema=False)
async def logout(request: Request):
    await _console(request).logout()
    return _back_home()


@router.get("/tab/{tab}", include_in_schema=False)
async def select_tab(request: Request, tab: str):
    try:
        tab = Tab(tab)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown tab: {tab}")
    console = _console(request)
    if console.view.authenticated:
        await console.select_tab(tab)
    return _back_home()


@router.post("/dashboard/refresh", include_in_schema=False)
async def refresh_dashboard(request: Request):
    console = _console(request)
    if console.dashboard.mounted:
        await console.dashboard.refresh()
    return _back_home()


@router.post("/users/search", include_in_schema=False)
async def search_users(request: Request, q: str = Form("")):
    console = _console(request)
    if console.users.mounted:
        await console.users.submit_search(q.strip())
    return _back_home()


@router.post("/users/status", include_in_schema=False)
async def filter_users(request: Request, status: str = Form("")):
    console = _console(request)
    if console.users.mounted:
        await console.users.set_status(status)
    return _back_home()


@router.post("/users/page/prev", include_in_schema=False)
async def prev_users_page(request: Request):
    console = _console(request)
    if console.users.mounted:
        await console.users.prev_page()
    return _back_home()


@router.post("/users/page/next", include_in_schema=False)
async def next_users_page(request: Request):
    console = _console(request)
    if console.users.mounted:
        await console.users.next_page()
    return _back_home()


@router.get("/api/state", response_class=JSONResponse)
async def console_state(request: Request):
    """Console state as JSON."""
    console = _console(request)
    await console.sync()
    return console.snapshot()


@router.get("/health")
async def health():
    return {"status": "healthy", "version": APP_VERSION}
