"""
Conversation view: keeps one conversation's messages in step with the server
and mediates sending.

Lifecycle per mount:
- INIT:    mount() marks the thread seen and fetches history concurrently
- READY:   idle; visibility regained, pageshow, or a finished send re-syncs
- SYNCING: mark-seen + fetch in flight, back to READY afterwards
- CLOSED:  unmount() cancels outstanding work; no state changes after this

Text-only sends are shown immediately as a `temp-` message and reconciled by
the next fetch, or rolled back if the send fails.

Concurrent fetches are ordered by issue: each fetch takes a generation number
and a result older than one already applied is dropped.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Coroutine, Optional

from gigline.attachments import Attachment
from gigline.errors import AttachmentError, GiglineError
from gigline.hooks import ViewHooks
from gigline.messages import MessagesAPI
from gigline.models.conversation import TEMP_ID_PREFIX, Message, Participant
from gigline.models.identity import Identity
from gigline.session import SessionStore

logger = logging.getLogger(__name__)


class ViewState(str, Enum):
    INIT = "init"
    READY = "ready"
    SYNCING = "syncing"
    CLOSED = "closed"


class ConversationView:
    def __init__(
        self,
        api: MessagesAPI,
        session: SessionStore,
        conversation_id: str,
        hooks: Optional[ViewHooks] = None,
    ):
        self._api = api
        self._session = session
        self.conversation_id = str(conversation_id)
        self.hooks = hooks or ViewHooks()

        self.messages: list[Message] = []
        self.draft = ""
        self.attachment: Optional[Attachment] = None
        self.state = ViewState.INIT
        self.sending = False
        self.uploading = False
        # last fetch failure; the view shows no banner for it
        self.last_error: Optional[GiglineError] = None

        self._mounted = False
        self._issued = 0
        self._applied = 0
        self._pending: set[str] = set()
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def latest(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None

    def is_own(self, message: Message) -> bool:
        identity = self._session.identity
        return identity is not None and message.sender.id == identity.id

    def _authenticated(self, operation: str) -> bool:
        if not self._session.token or self._session.identity is None:
            logger.warning("%s skipped: not logged in", operation)
            return False
        return True

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # lifecycle

    async def mount(self) -> None:
        if self._mounted or self.state == ViewState.CLOSED:
            return
        self._mounted = True
        await self._sync()

    async def unmount(self) -> None:
        self._mounted = False
        self.state = ViewState.CLOSED
        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def _sync(self) -> None:
        if not self._mounted:
            return
        if self.state == ViewState.READY:
            self.state = ViewState.SYNCING
        await asyncio.gather(
            self._spawn(self.mark_seen()),
            self._spawn(self.fetch_messages()),
            return_exceptions=True,
        )
        if self._mounted:
            self.state = ViewState.READY

    async def on_visibility_change(self, visible: bool) -> None:
        if visible and self.state == ViewState.READY:
            await self._sync()

    async def on_pageshow(self) -> None:
        if self.state == ViewState.READY:
            await self._sync()

    # server reads

    async def fetch_messages(self) -> bool:
        if not self._authenticated("fetch_messages"):
            return False
        self._issued += 1
        generation = self._issued
        try:
            messages = await self._api.list_messages(self.conversation_id)
        except GiglineError as e:
            logger.error("Message fetch failed for %s: %s", self.conversation_id, e)
            if self._mounted and generation > self._applied:
                self.last_error = e
            return False
        if not self._mounted:
            return False
        if generation < self._applied:
            logger.debug("Dropping stale fetch %d (applied %d)", generation, self._applied)
            return False
        self._applied = generation
        in_flight = [m for m in self.messages if m.id in self._pending]
        self.messages = messages + in_flight
        self.last_error = None
        return True

    async def mark_seen(self) -> bool:
        if not self._authenticated("mark_seen"):
            return False
        try:
            await self._api.mark_seen(self.conversation_id)
        except GiglineError as e:
            logger.info("mark-seen failed for %s: %s", self.conversation_id, e)
            return False
        if not self._mounted:
            return False
        me = self._session.identity.id  # type: ignore[union-attr]
        if any(m.sender.id != me and not m.seen for m in self.messages):
            self.messages = [
                m.model_copy(update={"seen": True}) if m.sender.id != me and not m.seen else m
                for m in self.messages
            ]
        return True

    # sending

    def _optimistic(self, text: str, identity: Identity) -> Message:
        return Message(
            id=f"{TEMP_ID_PREFIX}{uuid.uuid4().hex}",
            content=text,
            created_at=datetime.now(timezone.utc),
            sender=Participant(id=identity.id, name=identity.display_name),
            seen=False,
        )

    def _rollback(self) -> None:
        self.messages = [m for m in self.messages if not m.is_temporary]

    async def send(self, text: str = "", attachment: Optional[Attachment] = None) -> bool:
        """Set the draft and attachment, then send them."""
        self.draft = text
        self.attachment = attachment
        return await self.handle_send()

    async def handle_send(self) -> bool:
        if self.uploading:
            logger.debug("Send ignored: upload in progress")
            return False
        text = (self.draft or "").strip()
        attachment = self.attachment
        if not text and attachment is None:
            return False
        identity = self._session.identity
        if not self._mounted or not self._authenticated("send") or identity is None:
            return False

        if attachment is not None:
            try:
                attachment.validate()
            except AttachmentError as e:
                self.hooks.alert(str(e))
                return False

        temp: Optional[Message] = None
        if text and attachment is None:
            temp = self._optimistic(text, identity)
            self._pending.add(temp.id)
            self.messages = [*self.messages, temp]

        fields = {"conversationId": self.conversation_id}
        if text:
            fields["content"] = text
        if attachment is not None and attachment.kind:
            fields["type"] = attachment.kind

        self.sending = True
        self.uploading = attachment is not None
        try:
            result = await self._api.send(fields, attachment.as_upload() if attachment else None)
        except GiglineError as e:
            logger.error("Send failed in %s: %s", self.conversation_id, e)
            if self._mounted:
                self.hooks.alert("Your message could not be sent.")
                self._rollback()
            return False
        finally:
            self.sending = False
            self.uploading = False
            if temp is not None:
                self._pending.discard(temp.id)

        if not self._mounted:
            return True
        self.draft = ""
        self.attachment = None
        if result.conversation_id and result.conversation_id != self.conversation_id:
            self.hooks.navigate(result.conversation_id)
            return True
        await self._sync()
        return True
