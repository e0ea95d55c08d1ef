from __future__ import annotations

import logging

from src.domain import commands, events, exceptions, model
from src.service_layer import unit_of_work

logger = logging.getLogger(__name__)


# --- Command handlers ---
# Content is validated before the unit of work is entered, so an invalid
# request never reaches the store.


def create_post(cmd: commands.CreatePost, uow: unit_of_work.AbstractUnitOfWork) -> int:
    content = model.require_content(cmd.content, "Post content is required")
    with uow:
        post = model.Post(
            id=None,
            user_id=cmd.user_id,
            nickname=cmd.nickname,
            title=cmd.title,
            content=content,
        )
        uow.posts.add(post)
        post.events.append(
            events.PostCreated(post_id=post.id, user_id=cmd.user_id, nickname=cmd.nickname)
        )
        uow.commit()
    return post.id


def update_post(cmd: commands.UpdatePost, uow: unit_of_work.AbstractUnitOfWork) -> int:
    content = model.require_content(cmd.content, "Post content is required")
    identity = model.Identity(user_id=cmd.user_id, nickname=cmd.nickname)
    with uow:
        if not uow.posts.update_owned(identity, cmd.post_id, content=content, title=cmd.title):
            raise exceptions.Unauthorized(f"Post {cmd.post_id} was not updated")
        uow.commit()
    return cmd.post_id


def delete_post(cmd: commands.DeletePost, uow: unit_of_work.AbstractUnitOfWork) -> int:
    identity = model.Identity(user_id=cmd.user_id, nickname=cmd.nickname)
    with uow:
        if not uow.posts.delete_owned(identity, cmd.post_id):
            raise exceptions.Unauthorized(f"Post {cmd.post_id} was not deleted")
        uow.commit()
    return cmd.post_id


def create_comment(cmd: commands.CreateComment, uow: unit_of_work.AbstractUnitOfWork) -> int:
    content = model.require_content(cmd.content, "Comment content is required")
    with uow:
        comment = model.Comment(
            id=None,
            post_id=cmd.post_id,
            user_id=cmd.user_id,
            nickname=cmd.nickname,
            content=content,
        )
        uow.comments.add(comment)
        comment.events.append(
            events.CommentAdded(post_id=cmd.post_id, comment_id=comment.id, user_id=cmd.user_id)
        )
        uow.commit()
    return comment.id


def update_comment(cmd: commands.UpdateComment, uow: unit_of_work.AbstractUnitOfWork) -> int:
    content = model.require_content(cmd.content, "Comment content is required")
    identity = model.Identity(user_id=cmd.user_id, nickname=cmd.nickname)
    with uow:
        changed = uow.comments.update_owned(identity, cmd.post_id, cmd.comment_id, content=content)
        if not changed:
            raise exceptions.Unauthorized(f"Comment {cmd.comment_id} was not updated")
        uow.commit()
    return cmd.comment_id


def delete_comment(cmd: commands.DeleteComment, uow: unit_of_work.AbstractUnitOfWork) -> int:
    identity = model.Identity(user_id=cmd.user_id, nickname=cmd.nickname)
    with uow:
        if not uow.comments.delete_owned(identity, cmd.post_id, cmd.comment_id):
            raise exceptions.Unauthorized(f"Comment {cmd.comment_id} was not deleted")
        uow.commit()
    return cmd.comment_id


def toggle_like(cmd: commands.ToggleLike, uow: unit_of_work.AbstractUnitOfWork) -> model.LikeState:
    with uow:
        post = uow.posts.get(cmd.post_id)
        if not post:
            raise exceptions.PostNotFound(f"Post {cmd.post_id} not found")

        like, created = uow.likes.get_or_create(post_id=cmd.post_id, user_id=cmd.user_id)
        if created:
            state = model.LikeState.created
        else:
            uow.likes.remove(like)
            state = model.LikeState.deleted

        post.events.append(
            events.LikeToggled(
                post_id=cmd.post_id,
                user_id=cmd.user_id,
                liked=state is model.LikeState.created,
            )
        )
        uow.commit()
    return state


# --- Event handlers ---


def log_activity(event: events.Event) -> None:
    logger.info("Activity: %s", event)
