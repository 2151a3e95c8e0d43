"""
Attachment handling: kind tagging, the image allow-list, and URL helpers used
when rendering messages.
"""

from __future__ import annotations

import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urljoin, urlsplit

from gigline.errors import AttachmentError
from gigline.models.conversation import Message

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp", "image/gif"})

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif")
VIDEO_EXTENSIONS = (".mp4", ".webm", ".ogg", ".mov")

_URL_RE = re.compile(r"(https?://[^\s]+|//[^\s/]+/[^\s]*|/uploads/[^\s]+)", re.IGNORECASE)


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    mime_type: str

    @classmethod
    def from_path(cls, path: Path | str) -> "Attachment":
        p = Path(path)
        mime, _ = mimetypes.guess_type(p.name)
        return cls(filename=p.name, content=p.read_bytes(), mime_type=mime or "application/octet-stream")

    @property
    def kind(self) -> Optional[str]:
        """`image`, `video`, or None for documents."""
        if self.mime_type.startswith("image/"):
            return "image"
        if self.mime_type.startswith("video/"):
            return "video"
        return None

    def validate(self) -> None:
        if self.kind == "image" and self.mime_type not in ALLOWED_IMAGE_TYPES:
            raise AttachmentError(
                f"Unsupported image format {self.mime_type}. Use JPEG, PNG, WEBP or GIF.",
                mime_type=self.mime_type,
            )

    def as_upload(self) -> tuple[str, bytes, str]:
        return (self.filename, self.content, self.mime_type)


def find_url(content: Optional[str]) -> Optional[str]:
    if not content:
        return None
    match = _URL_RE.search(content)
    return match.group(0) if match else None


def attachment_url(message: Message) -> Optional[str]:
    return message.file_url or message.attachment_url or message.media_url or find_url(message.content)


def normalize_url(url: str, base_url: str) -> str:
    """Resolve an attachment URL for display.

    Absolute URLs pass through, `//host/path` gets `https:`, and anything else
    is resolved against the API origin.
    """
    url = url.strip()
    if url.startswith("//"):
        return f"https:{url}"
    if urlsplit(url).scheme:
        return url
    parts = urlsplit(base_url)
    origin = f"{parts.scheme}://{parts.netloc}/"
    return urljoin(origin, url)


def media_kind(url: str) -> str:
    path = urlsplit(url.strip()).path.lower()
    if path.endswith(IMAGE_EXTENSIONS):
        return "image"
    if path.endswith(VIDEO_EXTENSIONS):
        return "video"
    return "document"
