"""
Identity model: the authenticated actor held by the session store.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Role(str, Enum):
    ARTIST = "ARTIST"
    ORGANIZER = "ORGANIZER"
    PROVIDER = "PROVIDER"
    ADMIN = "ADMIN"


class Identity(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    email: str = ""
    name: Optional[str] = None
    role: Role
    avatar_url: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> str:
        return str(v)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "Identity":
        """Normalize a backend user record (numeric ids, avatar fallbacks)."""
        profile = raw.get("profile") or {}
        return cls(
            id=raw["id"],
            email=raw.get("email", ""),
            name=raw.get("name"),
            role=raw["role"],
            avatar_url=raw.get("avatar") or raw.get("avatarUrl") or raw.get("avatar_url")
            or profile.get("bannerUrl"),
        )

    @property
    def display_name(self) -> str:
        return self.name or self.email or self.id
