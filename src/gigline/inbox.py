"""
Inbox: the conversation list view's state.

Loads the current identity's conversations, derives a transient unread flag per
conversation, and starts/opens/deletes threads. Every operation contains its own
failures: the inbox never raises out of a public coroutine.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timezone
from typing import Optional

from gigline.errors import GiglineError
from gigline.hooks import ViewHooks
from gigline.messages import MessagesAPI
from gigline.models.conversation import Conversation, Message
from gigline.models.identity import Identity
from gigline.session import SessionStore

logger = logging.getLogger(__name__)


def is_unread(messages: list[Message], identity_id: str) -> bool:
    """True iff the latest message came from someone else and is not seen."""
    if not messages:
        return False
    last = messages[-1]
    return last.sender.id != identity_id and not last.seen


def _recency(conversation: Conversation) -> float:
    ts = conversation.updated_at
    if ts is None:
        return float("-inf")
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.timestamp()


def sort_by_recency(conversations: list[Conversation]) -> list[Conversation]:
    return sorted(conversations, key=_recency, reverse=True)


class Inbox:
    def __init__(self, api: MessagesAPI, session: SessionStore, hooks: Optional[ViewHooks] = None):
        self._api = api
        self._session = session
        self.hooks = hooks or ViewHooks()
        self.conversations: list[Conversation] = []
        self.unread: dict[str, bool] = {}
        self.load_error = False

    def _identity(self, operation: str) -> Optional[Identity]:
        if not self._session.token or self._session.identity is None:
            logger.warning("%s skipped: not logged in", operation)
            return None
        return self._session.identity

    def find(self, conversation_id: str) -> Optional[Conversation]:
        for c in self.conversations:
            if c.id == conversation_id:
                return c
        return None

    @property
    def unread_count(self) -> int:
        return sum(1 for flag in self.unread.values() if flag)

    async def load_conversations(self) -> bool:
        if self._identity("load_conversations") is None:
            return False
        try:
            conversations = await self._api.list_conversations()
        except GiglineError as e:
            logger.error("Conversations load error: %s", e)
            self.load_error = True
            return False
        self.conversations = sort_by_recency(conversations)
        self.load_error = False
        return True

    async def compute_unread(self, conversations: Optional[list[Conversation]] = None) -> dict[str, bool]:
        identity = self._identity("compute_unread")
        if identity is None:
            return {}
        targets = self.conversations if conversations is None else conversations

        async def check(conversation: Conversation) -> tuple[str, bool]:
            try:
                messages = await self._api.list_messages(conversation.id)
            except GiglineError as e:
                logger.debug("Unread check failed for %s: %s", conversation.id, e)
                return conversation.id, False
            return conversation.id, is_unread(messages, identity.id)

        results = await asyncio.gather(*(check(c) for c in targets))
        self.unread = dict(results)
        return self.unread

    async def refresh(self) -> None:
        if await self.load_conversations():
            await self.compute_unread()

    async def on_visibility_change(self, visible: bool) -> None:
        if visible:
            await self.refresh()

    async def on_pageshow(self) -> None:
        await self.refresh()

    def _existing_thread(self, identity_id: str, recipient_id: str) -> Optional[Conversation]:
        for c in self.conversations:
            if c.has_participants(identity_id, recipient_id):
                return c
        return None

    async def start_conversation(self, recipient_id: str, content: str) -> Optional[str]:
        """Open the thread with `recipient_id`, creating it with `content` if needed.

        Returns the conversation id navigated to, or None.
        """
        identity = self._identity("start_conversation")
        if identity is None:
            return None
        recipient_id = str(recipient_id)
        existing = self._existing_thread(identity.id, recipient_id)
        if existing is not None:
            self.hooks.navigate(existing.id)
            return existing.id

        text = content.strip()
        if not text:
            logger.warning("start_conversation skipped: empty first message")
            return None
        try:
            result = await self._api.send({"recipientId": recipient_id, "content": text})
        except GiglineError as e:
            logger.error("Could not start conversation with %s: %s", recipient_id, e)
            self.hooks.alert("Could not start the conversation.")
            return None

        if result.conversation_id:
            self.hooks.navigate(result.conversation_id)
            return result.conversation_id

        await self.load_conversations()
        created = self._existing_thread(identity.id, recipient_id)
        if created is None:
            logger.warning("New conversation with %s not found after reload", recipient_id)
            return None
        self.hooks.navigate(created.id)
        return created.id

    async def delete_conversation(self, conversation_id: str) -> bool:
        if self._identity("delete_conversation") is None:
            return False
        if not self.hooks.confirm("Delete this conversation?"):
            return False
        try:
            await self._api.delete_conversation(conversation_id)
        except GiglineError as e:
            logger.error("Delete failed for %s: %s", conversation_id, e)
            self.hooks.alert("The conversation could not be deleted.")
            return False
        self.conversations = [c for c in self.conversations if c.id != conversation_id]
        self.unread.pop(conversation_id, None)
        return True

    async def open_conversation(self, conversation_id: str) -> None:
        if self._identity("open_conversation") is None:
            return
        try:
            await self._api.mark_seen(conversation_id)
        except GiglineError as e:
            logger.info("mark-seen failed for %s: %s", conversation_id, e)
        else:
            self.unread[conversation_id] = False
        self.hooks.navigate(conversation_id)