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
AV Tournament Admin - console for the AV tournament platform API.

Application entry point. Creates the FastAPI app and connects routes.

Usage:
    uvicorn main:app --host 127.0.0.1 --port 8080
    or directly:
    python main.py
"""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from loguru import logger

from av_admin.config import (
    APP_DESCRIPTION,
    APP_TITLE,
    APP_VERSION,
    settings,
)
from av_admin.console import AdminConsole
from av_admin.exceptions import validation_exception_handler
from av_admin.http_client import AdminApiClient, close_global_http_client
from av_admin.routes import router
from av_admin.session import FileCredentialStorage, SessionStore


# --- Loguru Configuration ---
logger.remove()
logger.add(
    sys.stderr,
    level=settings.log_level,
    colorize=True,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


# --- Configuration Validation ---
def validate_configuration() -> None:
    """
    Log the effective configuration.

    An empty BACKEND_URL is valid (same origin) but usually a mistake when
    the console runs on its own, so it is reported.
    """
    if settings.backend_url:
        logger.info(f"Platform API: {settings.backend_url}")
    else:
        logger.warning(
            f"BACKEND_URL is not set, API calls go to the console origin {settings.console_origin}"
        )
    logger.info(f"Session file: {settings.session_file}")
    if settings.logout_on_unauthorized:
        logger.info("A 401 from the API signs the operator out")


# --- Lifespan Manager ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle.

    Creates:
    - SessionStore backed by the session file
    - AdminApiClient for the platform API
    - AdminConsole holding the operator's view
    """
    logger.info("Starting application... Creating console.")
    validate_configuration()

    store = SessionStore(FileCredentialStorage(settings.session_file))
    app.state.console = AdminConsole(store, AdminApiClient())
    await app.state.console.start()

    yield

    logger.info("Shutting down application.")
    await app.state.console.close()
    await close_global_http_client()


# --- FastAPI application ---
app = FastAPI(
    title=APP_TITLE,
    description=APP_DESCRIPTION,
    version=APP_VERSION,
    lifespan=lifespan
)


# --- Validation error handler ---
app.add_exception_handler(RequestValidationError, validation_exception_handler)


# --- Routes ---
app.include_router(router)


# --- Entry point ---
if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Uvicorn server...")
    uvicorn.run(app, host=settings.server_host, port=settings.server_port)
