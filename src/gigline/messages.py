"""
Messaging REST API: conversations, message history, mark-seen, send, delete.

Message history is served under several historical paths depending on the
backend deployment. `list_messages` walks them in order and returns the first
successful answer.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from gigline.errors import ApiError, GiglineError
from gigline.models.conversation import Conversation, Message, SendResult
from gigline.transport.http import HttpClient

logger = logging.getLogger(__name__)


class Endpoints(BaseModel):
    conversations: str = "/api/messages/conversations"
    conversation: str = "/api/messages/conversations/{id}"
    mark_seen: str = "/api/messages/conversations/{id}/seen"
    send: str = "/messages/send-file"
    # tried in order: primary, alternate, legacy
    message_history: list[str] = [
        "/api/messages/conversations/{id}/messages",
        "/messages/messages/{id}",
        "/messages/conversation/{id}",
    ]


def _extract_list(payload: Any, key: str) -> Optional[list[Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return payload[key]
    return None


def _parse_all(model: type[BaseModel], items: list[Any]) -> list[Any]:
    parsed = []
    for item in items:
        try:
            parsed.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping malformed %s: %s", model.__name__, e.errors()[0].get("msg"))
    return parsed


class MessagesAPI:
    def __init__(self, http: HttpClient, endpoints: Optional[Endpoints] = None, upload_folder: str = "messages"):
        self._http = http
        self.endpoints = endpoints or Endpoints()
        self.upload_folder = upload_folder

    async def list_conversations(self) -> list[Conversation]:
        payload = await self._http.get(self.endpoints.conversations, fresh=True)
        if payload is None:
            return []
        items = _extract_list(payload, "conversations")
        if items is None:
            raise ApiError(200, "Unexpected conversations payload")
        return _parse_all(Conversation, items)

    async def list_messages(self, conversation_id: str) -> list[Message]:
        """Fetch history through the path fallback chain.

        Raises the last error if every candidate fails.
        """
        last_error: Optional[GiglineError] = None
        for template in self.endpoints.message_history:
            path = template.format(id=conversation_id)
            try:
                payload = await self._http.get(path, fresh=True)
            except GiglineError as e:
                logger.debug("History path %s failed: %s", path, e)
                last_error = e
                continue
            items = _extract_list(payload, "messages")
            return _parse_all(Message, items or [])
        raise last_error or ApiError(404, "No message history endpoint configured")

    async def mark_seen(self, conversation_id: str) -> None:
        await self._http.post(self.endpoints.mark_seen.format(id=conversation_id))

    async def send(
        self,
        fields: dict[str, str],
        file: Optional[tuple[str, bytes, str]] = None,
    ) -> SendResult:
        fields = {**fields, "folder": fields.get("folder", self.upload_folder)}
        files = {"file": file} if file else None
        result = await self._http.post_multipart(self.endpoints.send, fields, files)
        return SendResult.from_api(result)

    async def delete_conversation(self, conversation_id: str) -> None:
        await self._http.delete(self.endpoints.conversation.format(id=conversation_id))
