"""
Gigline / AsyncGigline: main client objects.
"""

import asyncio
from pathlib import Path
from typing import Any, Optional

import httpx

from gigline.auth import Auth
from gigline.config import Settings, load_settings
from gigline.hooks import ViewHooks
from gigline.inbox import Inbox
from gigline.messages import Endpoints, MessagesAPI
from gigline.models.identity import Identity
from gigline.session import SessionStore
from gigline.thread import ConversationView
from gigline.transport.http import HttpClient


class AsyncGigline:
    """Async client (primary). Owns the session store and the HTTP client."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[SessionStore] = None,
        session_file: Optional[Path] = None,
        endpoints: Optional[Endpoints] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or load_settings()
        self.session = session or SessionStore(path=session_file)
        self.http = HttpClient(
            self.session,
            base_url=self.settings.base_url,
            timeout=self.settings.timeout,
            transport=transport,
        )
        self.auth = Auth(self.http, self.session)
        self.messages = MessagesAPI(self.http, endpoints, upload_folder=self.settings.upload_folder)

    @property
    def identity(self) -> Optional[Identity]:
        return self.session.identity

    def inbox(self, hooks: Optional[ViewHooks] = None) -> Inbox:
        return Inbox(self.messages, self.session, hooks)

    def conversation(self, conversation_id: str, hooks: Optional[ViewHooks] = None) -> ConversationView:
        return ConversationView(self.messages, self.session, conversation_id, hooks)

    async def close(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "AsyncGigline":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()


class Gigline:
    """Sync wrapper around AsyncGigline. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncGigline(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def session(self) -> SessionStore:
        return self._async.session

    @property
    def identity(self) -> Optional[Identity]:
        return self._async.identity

    def login(self, email: str, password: str) -> Identity:
        return self._run(self._async.auth.login(email, password))

    def logout(self) -> None:
        self._async.auth.logout()

    def load_inbox(self, hooks: Optional[ViewHooks] = None) -> Inbox:
        """Inbox with conversations and unread flags loaded."""
        inbox = self._async.inbox(hooks)
        self._run(inbox.refresh())
        return inbox

    def send(self, conversation_id: str, text: str, hooks: Optional[ViewHooks] = None) -> bool:
        view = self._async.conversation(conversation_id, hooks)

        async def _send() -> bool:
            await view.mount()
            try:
                return await view.send(text)
            finally:
                await view.unmount()

        return self._run(_send())

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()
