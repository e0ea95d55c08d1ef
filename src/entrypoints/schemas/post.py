from typing import Optional
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator


def _as_utc(value):
    if value is None or isinstance(value, datetime):
        dt = value
    else:
        # SQLite hands timestamps back as text
        dt = datetime.fromisoformat(str(value))

    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


# Posts
class UserPostI(BaseModel):
    title: Optional[str] = None
    # Optional here so a missing body field reaches the content check (412)
    content: Optional[str] = None


class UserPost(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    nickname: str
    title: Optional[str] = None
    content: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def ensure_timezone_aware_utc(cls, value):
        return _as_utc(value)


class UserPostWithLikes(UserPost):
    like_count: int


# Comments
class CommentI(BaseModel):
    content: Optional[str] = None


class Comment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    user_id: int
    nickname: str
    content: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def ensure_timezone_aware_utc(cls, value):
        return _as_utc(value)


# Responses
class MessageResponse(BaseModel):
    success: bool
    message: Optional[str] = None


class LikeResponse(MessageResponse):
    liked: bool


class PostListResponse(BaseModel):
    success: bool = True
    posts: list[UserPostWithLikes]


class LikedPostListResponse(BaseModel):
    success: bool = True
    posts: list[UserPost]


class PostDetailResponse(BaseModel):
    success: bool = True
    post: Optional[UserPost] = None


class CommentListResponse(BaseModel):
    success: bool = True
    comments: list[Comment]
