from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from src.domain import exceptions


# --- Value objects ---


@dataclass(eq=True, frozen=True)
class Identity:
    """A verified caller, as produced by the authentication layer."""

    user_id: int
    nickname: str


@dataclass(eq=True, frozen=True)
class Like:
    post_id: int
    user_id: int


class LikeState(str, Enum):
    created = "created"
    deleted = "deleted"


# --- Entities ---
# eq=False: entities compare and hash by identity so repositories can track them in sets


@dataclass(eq=False)
class Post:
    id: int | None
    user_id: int
    nickname: str
    content: str
    title: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    events: List = field(default_factory=list, repr=False)


@dataclass(eq=False)
class Comment:
    id: int | None
    post_id: int
    user_id: int
    nickname: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    events: List = field(default_factory=list, repr=False)


# --- Policies ---


def authorize(identity: Identity, record: Union[Post, Comment]) -> bool:
    """Only the creator of a post or comment may change or delete it."""
    return record.user_id == identity.user_id


def require_content(content: Optional[str], message: str) -> str:
    if (content or "") == "":
        raise exceptions.ValidationError(message)
    return content
