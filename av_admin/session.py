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
Admin session state.

Holds the bearer credential of the signed-in operator:
- Persists it in durable storage so it survives restarts
- Derives the Authorization header from it
- Notifies listeners when it changes
- Routes 401 reports to a single on_unauthenticated callback
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, List, Optional

from loguru import logger

from av_admin.config import SESSION_TOKEN_KEY


def headers_for(credential: Optional[str]) -> Dict[str, str]:
    """
    Build request headers for a credential.

    Args:
        credential: Bearer token, may be empty

    Returns:
        {"Authorization": "Bearer <credential>"}, or {} for an empty credential
    """
    if not credential:
        return {}
    return {"Authorization": f"Bearer {credential}"}


class CredentialStorage(ABC):
    """Durable key/value storage for the credential."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class MemoryCredentialStorage(CredentialStorage):
    """Process-local storage. Nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileCredentialStorage(CredentialStorage):
    """
    JSON file storage.

    Every write rewrites the whole file synchronously. Read and write
    failures are logged and otherwise ignored: an unreadable file behaves
    like an empty one.
    """

    def __init__(self, path: str):
        self.path = Path(path).expanduser()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read session file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed session file {self.path}")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to write session file {self.path}: {e}")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class SessionStore:
    """
    Holds the bearer credential.

    The in-memory value is loaded once from storage; every mutation writes
    through to storage before listeners are notified.

    Example:
        >>> store = SessionStore(MemoryCredentialStorage())
        >>> store.set_credential("abc")
        >>> store.headers
        {'Authorization': 'Bearer abc'}
    """

    def __init__(self, storage: CredentialStorage, key: str = SESSION_TOKEN_KEY):
        """
        Initialize the store.

        Args:
            storage: Durable storage backend
            key: Name under which the credential is persisted
        """
        self._storage = storage
        self._key = key
        self._listeners: List[Callable[[str], None]] = []
        self._credential = storage.get(key) or ""

    def get_credential(self) -> str:
        return self._credential

    def set_credential(self, credential: str) -> None:
        """Persist a new credential. An empty value is the same as clear()."""
        if not credential:
            self.clear()
            return
        self._storage.set(self._key, credential)
        self._credential = credential
        logger.info("Admin session stored")
        self._notify()

    def clear(self) -> None:
        """Remove the persisted credential and reset the in-memory value."""
        self._storage.remove(self._key)
        had_credential = bool(self._credential)
        self._credential = ""
        if had_credential:
            logger.info("Admin session cleared")
        self._notify()

    @property
    def is_authenticated(self) -> bool:
        return bool(self._credential)

    @property
    def headers(self) -> Dict[str, str]:
        """Request headers derived from the current credential."""
        return headers_for(self._credential)

    def subscribe(self, listener: Callable[[str], None]) -> Callable[[], None]:
        """
        Register a change listener.

        Args:
            listener: Called with the new credential ("" after clear)

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._credential)


class SessionContext:
    """
    Session handed to every screen.

    Screens read request headers from here and report rejected sessions
    through report_unauthorized(); what happens next is decided by the
    on_unauthenticated callback of whoever built the context.
    """

    def __init__(
        self,
        store: SessionStore,
        on_unauthenticated: Optional[Callable[[], None]] = None,
    ):
        self.store = store
        self._on_unauthenticated = on_unauthenticated

    @property
    def headers(self) -> Dict[str, str]:
        return self.store.headers

    @property
    def is_authenticated(self) -> bool:
        return self.store.is_authenticated

    def report_unauthorized(self) -> None:
        """Called by a screen when the API rejected the credential."""
        logger.warning("API rejected the admin session (401)")
        if self._on_unauthenticated is not None:
            self._on_unauthenticated()
