"""
Session store: the current identity and bearer token, persisted between runs.

Only login, register and logout write to the store. Everything else reads
through `token` / `identity`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from gigline.config import config_dir
from gigline.models.identity import Identity

logger = logging.getLogger(__name__)


def default_session_file() -> Path:
    return config_dir() / "session.json"


class SessionStore:
    def __init__(self, path: Optional[Path] = None, persist: bool = True):
        self._path = path or default_session_file()
        self._persist = persist
        self._token: Optional[str] = None
        self._identity: Optional[Identity] = None
        if persist:
            self._restore()

    @classmethod
    def in_memory(cls, token: Optional[str] = None, identity: Optional[Identity] = None) -> "SessionStore":
        store = cls(persist=False)
        if token and identity:
            store._token = token
            store._identity = identity
        return store

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def authenticated(self) -> bool:
        return bool(self._token) and self._identity is not None

    def login(self, token: str, user: dict[str, Any]) -> Identity:
        """Record a fresh login. `user` is the raw backend user record."""
        identity = Identity.from_api(user)
        self._token = token
        self._identity = identity
        self._write()
        logger.info("Logged in as %s (%s)", identity.display_name, identity.role.value)
        return identity

    def logout(self) -> None:
        self._token = None
        self._identity = None
        if self._persist:
            try:
                self._path.unlink()
            except FileNotFoundError:
                pass

    def _restore(self) -> None:
        try:
            raw = json.loads(self._path.read_text())
        except FileNotFoundError:
            return
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable session file %s", self._path)
            return
        token = raw.get("token") if isinstance(raw, dict) else None
        user = raw.get("user") if isinstance(raw, dict) else None
        if not token or not isinstance(user, dict):
            return
        try:
            self._identity = Identity.model_validate(user)
        except ValidationError as e:
            logger.warning("Discarding invalid stored identity: %s", e)
            return
        self._token = token
        logger.debug("Restored session for %s", self._identity.display_name)

    def _write(self) -> None:
        if not self._persist or self._identity is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(
            {"token": self._token, "user": self._identity.model_dump(mode="json")},
            indent=2,
        ))
