from dataclasses import dataclass
from typing import Optional


class Command:
    """Marker base class for commands."""


@dataclass
class CreatePost(Command):
    user_id: int
    nickname: str
    content: Optional[str]
    title: Optional[str] = None


@dataclass
class UpdatePost(Command):
    post_id: int
    user_id: int
    nickname: str
    content: Optional[str]
    title: Optional[str] = None


@dataclass
class DeletePost(Command):
    post_id: int
    user_id: int
    nickname: str


@dataclass
class CreateComment(Command):
    post_id: int
    user_id: int
    nickname: str
    content: Optional[str]


@dataclass
class UpdateComment(Command):
    post_id: int
    comment_id: int
    user_id: int
    nickname: str
    content: Optional[str]


@dataclass
class DeleteComment(Command):
    post_id: int
    comment_id: int
    user_id: int
    nickname: str


@dataclass
class ToggleLike(Command):
    post_id: int
    user_id: int
