from dataclasses import dataclass


class Event:
    """Marker base class for domain events."""


@dataclass
class PostCreated(Event):
    post_id: int
    user_id: int
    nickname: str


@dataclass
class CommentAdded(Event):
    post_id: int
    comment_id: int
    user_id: int


@dataclass
class LikeToggled(Event):
    post_id: int
    user_id: int
    liked: bool
