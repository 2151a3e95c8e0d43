"""
Conversation and message models: tolerant of the API's camelCase and id types.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

TEMP_ID_PREFIX = "temp-"


def _str_id(v: Any) -> Any:
    return str(v) if isinstance(v, int) else v


class Participant(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: str = ""
    role: Optional[str] = None
    image: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        return _str_id(v)


class Message(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    content: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    sender: Participant
    seen: bool = False
    file_url: Optional[str] = Field(default=None, alias="fileUrl")
    attachment_url: Optional[str] = Field(default=None, alias="attachmentUrl")
    media_url: Optional[str] = Field(default=None, alias="mediaUrl")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        return _str_id(v)

    @property
    def is_temporary(self) -> bool:
        return self.id.startswith(TEMP_ID_PREFIX)


class Conversation(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    participants: list[Participant] = Field(default_factory=list)
    last_message: str = Field(default="", alias="lastMessage")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        return _str_id(v)

    @field_validator("last_message", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    def has_participants(self, *identity_ids: str) -> bool:
        ids = {p.id for p in self.participants}
        return all(i in ids for i in identity_ids)

    def other_participant(self, identity_id: str) -> Optional[Participant]:
        for p in self.participants:
            if p.id != identity_id:
                return p
        return None


class SendResult(BaseModel):
    """Response of the send-file endpoint. Either field may be missing."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    conversation_id: Optional[str] = Field(default=None, alias="conversationId")
    message: Optional[Message] = None

    @field_validator("conversation_id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        return _str_id(v)

    @classmethod
    def from_api(cls, raw: Any) -> "SendResult":
        if not isinstance(raw, dict):
            return cls()
        msg = raw.get("message")
        conversation_id = raw.get("conversationId")
        if conversation_id is None and isinstance(msg, dict):
            conversation_id = msg.get("conversationId")
        if isinstance(conversation_id, bool) or not isinstance(conversation_id, (str, int)):
            conversation_id = None
        message = None
        if isinstance(msg, dict):
            try:
                message = Message.model_validate(msg)
            except ValidationError:
                # partial message objects still carry a usable conversation id
                message = None
        return cls(conversation_id=conversation_id, message=message)
