import logging
from typing import Annotated, Optional

import databases
from fastapi import APIRouter, Depends, status

from src.bootstrap import get_message_bus
from src.db import get_database
from src.domain import commands, exceptions
from src.domain.model import Identity, LikeState
from src.entrypoints.routers.common import failure, row_as
from src.entrypoints.schemas.post import (
    LikedPostListResponse,
    LikeResponse,
    MessageResponse,
    PostDetailResponse,
    PostListResponse,
    UserPost,
    UserPostI,
    UserPostWithLikes,
)
from src.security import get_current_user
from src.service_layer.messagebus import MessageBus
from src.views import posts as post_views

logger = logging.getLogger(__name__)

router = APIRouter()

CurrentUser = Annotated[Identity, Depends(get_current_user)]
Bus = Annotated[MessageBus, Depends(get_message_bus)]
Database = Annotated[databases.Database, Depends(get_database)]


# Mutating routes are sync and run in the threadpool, one bus per request


@router.post("/posts", response_model=MessageResponse, status_code=201)
def create_post(post: UserPostI, current_user: CurrentUser, bus: Bus):
    cmd = commands.CreatePost(
        user_id=current_user.user_id,
        nickname=current_user.nickname,
        title=post.title,
        content=post.content,
    )
    try:
        bus.handle(cmd)
    except exceptions.ValidationError:
        return failure(status.HTTP_412_PRECONDITION_FAILED, "Please enter the post content.")
    except exceptions.OperationFailed:
        return failure(status.HTTP_400_BAD_REQUEST, "Failed to create the post.")
    return {"success": True, "message": "Post created."}


@router.get("/posts", response_model=PostListResponse, status_code=200)
async def get_all_posts(database: Database, search: Optional[str] = None):
    try:
        rows = await post_views.list_posts(database, search=search)
    except Exception:
        logger.exception("Failed to list posts, search=%r", search)
        return failure(status.HTTP_400_BAD_REQUEST, "Failed to load posts.")
    return {"posts": [row_as(UserPostWithLikes, row) for row in rows]}


@router.get("/posts/my/like", response_model=LikedPostListResponse, status_code=200)
async def get_liked_posts(current_user: CurrentUser, database: Database):
    try:
        rows = await post_views.liked_posts(database, current_user.user_id)
    except Exception:
        logger.exception("Failed to load liked posts for user_id=%s", current_user.user_id)
        return failure(status.HTTP_400_BAD_REQUEST, "Failed to load liked posts.")
    return {"posts": [row_as(UserPost, row) for row in rows]}


@router.get("/posts/{post_id}", response_model=PostDetailResponse, status_code=200)
async def get_post(post_id: int, database: Database):
    try:
        row = await post_views.get_post(database, post_id)
    except Exception:
        logger.exception("Failed to load post_id=%s", post_id)
        return failure(status.HTTP_400_BAD_REQUEST, "Failed to load the post.")
    return {"post": row_as(UserPost, row) if row else None}


@router.put("/posts/{post_id}", response_model=MessageResponse, status_code=200)
def update_post(post_id: int, post: UserPostI, current_user: CurrentUser, bus: Bus):
    cmd = commands.UpdatePost(
        post_id=post_id,
        user_id=current_user.user_id,
        nickname=current_user.nickname,
        title=post.title,
        content=post.content,
    )
    try:
        bus.handle(cmd)
    except exceptions.ValidationError:
        return failure(status.HTTP_412_PRECONDITION_FAILED, "Please enter the post content.")
    except exceptions.Unauthorized:
        return failure(status.HTTP_401_UNAUTHORIZED, "The post was not updated.")
    except exceptions.OperationFailed:
        return failure(status.HTTP_400_BAD_REQUEST, "Failed to update the post.")
    return {"success": True, "message": "Post updated."}


@router.delete("/posts/{post_id}", response_model=MessageResponse, status_code=200)
def delete_post(post_id: int, current_user: CurrentUser, bus: Bus):
    cmd = commands.DeletePost(
        post_id=post_id, user_id=current_user.user_id, nickname=current_user.nickname
    )
    try:
        bus.handle(cmd)
    except exceptions.Unauthorized:
        return failure(status.HTTP_401_UNAUTHORIZED, "The post was not deleted.")
    except exceptions.OperationFailed:
        return failure(status.HTTP_400_BAD_REQUEST, "Failed to delete the post.")
    return {"success": True, "message": "Post deleted."}


@router.put("/posts/{post_id}/like", response_model=LikeResponse, status_code=200)
def like_post(post_id: int, current_user: CurrentUser, bus: Bus):
    cmd = commands.ToggleLike(post_id=post_id, user_id=current_user.user_id)
    try:
        [state] = bus.handle(cmd)
    except exceptions.PostNotFound:
        return failure(status.HTTP_400_BAD_REQUEST, "The post does not exist.")
    except exceptions.OperationFailed:
        return failure(status.HTTP_400_BAD_REQUEST, "Failed to like or unlike the post.")
    if state is LikeState.created:
        return {"success": True, "message": "Liked the post.", "liked": True}
    return {"success": True, "message": "Removed the like from the post.", "liked": False}
