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
HTML pages of the console.

Pages are plain strings built from the screen state; every value coming
from the API is escaped.
"""

from html import escape
from typing import Optional, Union

from av_admin.config import APP_TITLE, USER_STATUS_FILTERS
from av_admin.screens import DashboardScreen, LoadState, LoginScreen, UsersScreen
from av_admin.view_router import Tab

COMMON_STYLE = """
body { margin: 0; background: #000; color: #fff; font-family: system-ui, sans-serif; }
a { color: inherit; text-decoration: none; }
.card { background: #18181b; border: 1px solid #27272a; border-radius: 12px; padding: 16px; }
.muted { color: #a1a1aa; }
.error { color: #f87171; }
.banner { background: #450a0a; border: 1px solid #7f1d1d; color: #fecaca; border-radius: 8px; padding: 10px 14px; margin-bottom: 16px; }
.btn { background: #00509D; color: #fff; border: 0; border-radius: 8px; padding: 8px 16px; cursor: pointer; }
.btn[disabled] { opacity: .5; cursor: default; }
.btn-ghost { background: #18181b; border: 1px solid #27272a; color: #d4d4d8; border-radius: 6px; padding: 6px 12px; cursor: pointer; }
.btn-ghost[disabled] { opacity: .5; cursor: default; }
input, select { background: #09090b; border: 1px solid #27272a; border-radius: 8px; padding: 8px 10px; color: #fff; }
.topbar { display: flex; justify-content: space-between; align-items: center; padding: 12px 24px; border-bottom: 1px solid #27272a; }
.logo { width: 32px; height: 32px; border-radius: 4px; background: #00509D; color: #000; font-weight: 700; display: inline-flex; align-items: center; justify-content: center; }
.layout { display: grid; grid-template-columns: 200px 1fr; gap: 24px; padding: 24px; max-width: 1280px; margin: 0 auto; }
.nav a { display: block; padding: 8px 12px; margin-bottom: 8px; border: 1px solid #27272a; border-radius: 6px; background: #18181b; }
.nav a.active { border-color: #00509D; background: rgba(0, 80, 157, .1); }
.grid4 { display: grid; grid-template-columns: repeat(4, 1fr); gap: 16px; margin-bottom: 24px; }
.grid3 { display: grid; grid-template-columns: 2fr 1fr; gap: 16px; }
.stat { font-size: 24px; font-weight: 600; margin-top: 8px; }
.ok { color: #4ade80; }
table { width: 100%; border-collapse: collapse; font-size: 14px; }
th, td { text-align: left; padding: 10px; border-top: 1px solid #27272a; }
th { background: #18181b; color: #d4d4d8; }
.row { display: flex; justify-content: space-between; padding: 8px 0; border-bottom: 1px solid #27272a; font-size: 14px; }
.toolbar { display: flex; gap: 8px; align-items: center; margin-bottom: 16px; flex-wrap: wrap; }
.pager { display: flex; gap: 8px; align-items: center; margin-top: 16px; }
"""


def _page(title: str, body: str, refresh: Optional[float] = None) -> str:
    meta_refresh = ""
    if refresh:
        meta_refresh = f'<meta http-equiv="refresh" content="{int(refresh)}">'
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
{meta_refresh}
<title>{escape(title)}</title>
<style>{COMMON_STYLE}</style>
</head>
<body>
{body}
</body>
</html>"""


def format_number(value: Union[int, float, None]) -> str:
    """Thousands-separated number; whole floats lose their decimals."""
    value = value or 0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int):
        return f"{value:,}"
    return f"{value:,.2f}"


def plain_number(value: Union[int, float, None]) -> str:
    """Number without separators; whole floats lose their decimals."""
    value = value or 0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int):
        return str(value)
    return f"{value:.2f}"


def render_login_page(screen: LoginScreen) -> str:
    """Login form with the inline error of the last attempt."""
    error = f'<div class="error">{escape(screen.error)}</div>' if screen.error else ""
    disabled = " disabled" if screen.submit_disabled else ""
    body = f"""
<div style="min-height:100vh;display:flex;align-items:center;justify-content:center;">
  <div class="card" style="width:100%;max-width:420px;padding:32px;">
    <h1 style="font-size:24px;margin:0 0 24px;">{escape(APP_TITLE)}</h1>
    <form method="post" action="/login" style="display:grid;gap:16px;">
      <label class="muted">Email
        <input name="email" type="email" value="{escape(screen.email)}" style="width:100%;margin-top:4px;" required>
      </label>
      <label class="muted">Password
        <input name="password" type="password" style="width:100%;margin-top:4px;" required>
      </label>
      {error}
      <button class="btn" type="submit"{disabled}>{escape(screen.submit_label)}</button>
    </form>
  </div>
</div>"""
    return _page(f"{APP_TITLE} - Sign in", body)


def _error_banner(state: LoadState, error: Optional[str]) -> str:
    if state != LoadState.FAILED:
        return ""
    return f'<div class="banner">{escape(error or "Request failed")}</div>'


def render_dashboard_panel(screen: DashboardScreen) -> str:
    snapshot = screen.snapshot
    banner = _error_banner(screen.state, screen.error)
    if snapshot is None:
        if screen.state == LoadState.FAILED:
            return banner
        return '<div class="muted">Loading dashboard...</div>'

    metrics = snapshot.metrics
    cards = [
        ("Users", format_number(metrics.users)),
        ("Tournaments", format_number(metrics.tournaments)),
        ("Transactions", format_number(metrics.transactions)),
        ("Revenue (BDT)", format_number(metrics.revenue)),
    ]
    cards_html = "".join(
        f'<div class="card"><div class="muted">{label}</div><div class="stat">{value}</div></div>'
        for label, value in cards
    )

    if snapshot.recent_activity:
        activity = "".join(
            f'<div class="row"><span>{escape(item.type)}</span>'
            f'<span class="muted">{escape(item.label)}</span></div>'
            for item in snapshot.recent_activity
        )
    else:
        activity = '<div class="muted">No recent activity</div>'

    health = snapshot.system_health
    return f"""{banner}
<div class="grid4">{cards_html}</div>
<div class="grid3">
  <div class="card"><div style="margin-bottom:12px;">Recent activity</div>{activity}</div>
  <div class="card">
    <div style="margin-bottom:12px;">System health</div>
    <div class="muted">Server: <span class="ok">{escape(health.server or "")}</span></div>
    <div class="muted">Database: <span class="ok">{escape(health.db or "")}</span></div>
  </div>
</div>
<form method="post" action="/dashboard/refresh" style="margin-top:16px;">
  <button class="btn-ghost" type="submit">Refresh now</button>
</form>"""


def render_users_panel(screen: UsersScreen) -> str:
    query = screen.query
    options = "".join(
        f'<option value="{value}"{" selected" if value == query.status else ""}>{label}</option>'
        for value, label in USER_STATUS_FILTERS
    )
    rows = "".join(
        f"<tr><td>{escape(str(user.uid or ''))}</td>"
        f"<td>{escape(user.username)}</td>"
        f"<td>{escape(user.email or '-')}</td>"
        f"<td>{escape(user.status)}</td>"
        f"<td>BDT {plain_number(user.balances.total)}</td></tr>"
        for user in screen.page_data.items
    )
    prev_disabled = "" if screen.has_prev else " disabled"
    next_disabled = "" if screen.has_next else " disabled"
    loading = '<div class="muted">Loading users...</div>' if screen.state == LoadState.LOADING else ""

    return f"""{_error_banner(screen.state, screen.error)}
<div class="toolbar">
  <form method="post" action="/users/search" style="display:flex;gap:8px;">
    <input name="q" value="{escape(query.q)}" placeholder="Search users">
    <button class="btn" type="submit">Search</button>
  </form>
  <form method="post" action="/users/status">
    <select name="status" onchange="this.form.submit()">{options}</select>
    <noscript><button class="btn-ghost" type="submit">Filter</button></noscript>
  </form>
</div>
{loading}
<div class="card" style="padding:0;overflow:auto;">
  <table>
    <thead><tr><th>UID</th><th>Username</th><th>Email</th><th>Status</th><th>Balances</th></tr></thead>
    <tbody>{rows}</tbody>
  </table>
</div>
<div class="pager">
  <form method="post" action="/users/page/prev"><button class="btn-ghost" type="submit"{prev_disabled}>Prev</button></form>
  <span class="muted">Page {query.page}</span>
  <form method="post" action="/users/page/next"><button class="btn-ghost" type="submit"{next_disabled}>Next</button></form>
</div>"""


PLACEHOLDERS = {
    Tab.TOURNAMENTS: "Tournament management UI coming next.",
    Tab.SETTINGS: "Settings and role management interface to be added on request.",
}


def render_console_page(
    tab: Tab,
    dashboard: DashboardScreen,
    users: UsersScreen,
    session_expired: bool = False,
) -> str:
    """Tabbed shell around the panel of the selected tab."""
    nav = "".join(
        f'<a href="/tab/{t.value}" class="{"active" if t == tab else ""}">{t.label}</a>'
        for t in Tab
    )

    refresh = None
    if tab == Tab.DASHBOARD:
        panel = render_dashboard_panel(dashboard)
        refresh = dashboard.poll_interval
    elif tab == Tab.USERS:
        panel = render_users_panel(users)
    else:
        panel = f'<div class="muted">{escape(PLACEHOLDERS[tab])}</div>'

    expired = ""
    if session_expired:
        expired = '<div class="banner">The server rejected this session. Sign out and sign in again.</div>'

    body = f"""
<div class="topbar">
  <div style="display:flex;gap:12px;align-items:center;"><span class="logo">AV</span><span class="muted">Admin Panel</span></div>
  <form method="post" action="/logout"><button class="btn-ghost" type="submit">Logout</button></form>
</div>
<div class="layout">
  <aside class="nav">{nav}</aside>
  <main class="card" style="min-height:60vh;">{expired}{panel}</main>
</div>"""
    return _page(f"{APP_TITLE} - {tab.label}", body, refresh=refresh)
