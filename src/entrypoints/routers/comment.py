import logging
from typing import Annotated

import databases
from fastapi import APIRouter, Depends, status

from src.bootstrap import get_message_bus
from src.db import get_database
from src.domain import commands, exceptions
from src.domain.model import Identity
from src.entrypoints.routers.common import failure, row_as
from src.entrypoints.schemas.post import Comment, CommentI, CommentListResponse, MessageResponse
from src.security import get_current_user
from src.service_layer.messagebus import MessageBus
from src.views import comments as comment_views

logger = logging.getLogger(__name__)

router = APIRouter()

CurrentUser = Annotated[Identity, Depends(get_current_user)]
Bus = Annotated[MessageBus, Depends(get_message_bus)]
Database = Annotated[databases.Database, Depends(get_database)]


@router.post("/posts/{post_id}/comments", response_model=MessageResponse, status_code=201)
def create_comment(post_id: int, comment: CommentI, current_user: CurrentUser, bus: Bus):
    cmd = commands.CreateComment(
        post_id=post_id,
        user_id=current_user.user_id,
        nickname=current_user.nickname,
        content=comment.content,
    )
    try:
        bus.handle(cmd)
    except exceptions.ValidationError:
        return failure(status.HTTP_412_PRECONDITION_FAILED, "Please enter the comment content.")
    except exceptions.OperationFailed:
        return failure(status.HTTP_400_BAD_REQUEST, "Failed to create the comment.")
    return {"success": True, "message": "Comment created."}


@router.get("/posts/{post_id}/comments", response_model=CommentListResponse, status_code=200)
async def get_comments_on_post(post_id: int, database: Database):
    try:
        rows = await comment_views.list_comments_for_post(database, post_id)
    except Exception:
        logger.exception("Failed to list comments for post_id=%s", post_id)
        return failure(status.HTTP_400_BAD_REQUEST, "Failed to load comments.")
    return {"comments": [row_as(Comment, row) for row in rows]}


@router.put(
    "/posts/{post_id}/comments/{comment_id}", response_model=MessageResponse, status_code=200
)
def update_comment(
    post_id: int, comment_id: int, comment: CommentI, current_user: CurrentUser, bus: Bus
):
    cmd = commands.UpdateComment(
        post_id=post_id,
        comment_id=comment_id,
        user_id=current_user.user_id,
        nickname=current_user.nickname,
        content=comment.content,
    )
    try:
        bus.handle(cmd)
    except exceptions.ValidationError:
        return failure(status.HTTP_412_PRECONDITION_FAILED, "Please enter the comment content.")
    except exceptions.Unauthorized:
        return failure(status.HTTP_401_UNAUTHORIZED, "The comment was not updated.")
    except exceptions.OperationFailed:
        return failure(status.HTTP_400_BAD_REQUEST, "Failed to update the comment.")
    return {"success": True, "message": "Comment updated."}


@router.delete(
    "/posts/{post_id}/comments/{comment_id}", response_model=MessageResponse, status_code=200
)
def delete_comment(post_id: int, comment_id: int, current_user: CurrentUser, bus: Bus):
    cmd = commands.DeleteComment(
        post_id=post_id,
        comment_id=comment_id,
        user_id=current_user.user_id,
        nickname=current_user.nickname,
    )
    try:
        bus.handle(cmd)
    except exceptions.Unauthorized:
        return failure(status.HTTP_401_UNAUTHORIZED, "The comment was not deleted.")
    except exceptions.OperationFailed:
        return failure(status.HTTP_400_BAD_REQUEST, "Failed to delete the comment.")
    return {"success": True, "message": "Comment deleted."}
