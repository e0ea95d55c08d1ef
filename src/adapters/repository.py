from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.db import comment_table, likes_table, post_table
from src.domain import model
from src.service_layer import repository as abs_repo

logger = logging.getLogger(__name__)


# Ownership is enforced in the WHERE clause of the same statement that mutates
# the row, so "not yours" and "does not exist" both come back as rowcount 0.


class SqlAlchemyPostRepository(abs_repo.AbstractPostRepository):
    def __init__(self, session: Session) -> None:
        super().__init__()
        self.session = session

    def _add(self, post: model.Post) -> None:
        stmt = post_table.insert().values(
            user_id=post.user_id,
            nickname=post.nickname,
            title=post.title,
            content=post.content,
        )
        result = self.session.execute(stmt)
        post.id = result.inserted_primary_key[0]

    def _get(self, post_id: int) -> Optional[model.Post]:
        stmt = select(post_table).where(post_table.c.id == post_id)
        row = self.session.execute(stmt).mappings().first()
        if not row:
            return None
        return model.Post(
            id=row["id"],
            user_id=row["user_id"],
            nickname=row["nickname"],
            title=row["title"],
            content=row["content"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _update_owned(
        self, identity: model.Identity, post_id: int, content: str, title: Optional[str]
    ) -> int:
        values = {
            "nickname": identity.nickname,
            "content": content,
            "updated_at": func.now(),
        }
        # title is left untouched when the caller did not send one
        if title is not None:
            values["title"] = title
        result = self.session.execute(
            post_table.update()
            .where(post_table.c.id == post_id, post_table.c.user_id == identity.user_id)
            .values(**values)
        )
        return result.rowcount

    def _delete_owned(self, identity: model.Identity, post_id: int) -> int:
        result = self.session.execute(
            post_table.delete().where(
                post_table.c.id == post_id, post_table.c.user_id == identity.user_id
            )
        )
        if result.rowcount:
            # likes go with the post even where the store does not cascade
            self.session.execute(likes_table.delete().where(likes_table.c.post_id == post_id))
        return result.rowcount


class SqlAlchemyCommentRepository(abs_repo.AbstractCommentRepository):
    def __init__(self, session: Session) -> None:
        super().__init__()
        self.session = session

    def _add(self, comment: model.Comment) -> None:
        stmt = comment_table.insert().values(
            post_id=comment.post_id,
            user_id=comment.user_id,
            nickname=comment.nickname,
            content=comment.content,
        )
        result = self.session.execute(stmt)
        comment.id = result.inserted_primary_key[0]

    def _update_owned(
        self, identity: model.Identity, post_id: int, comment_id: int, content: str
    ) -> int:
        result = self.session.execute(
            comment_table.update()
            .where(
                comment_table.c.id == comment_id,
                comment_table.c.post_id == post_id,
                comment_table.c.user_id == identity.user_id,
            )
            .values(nickname=identity.nickname, content=content, updated_at=func.now())
        )
        return result.rowcount

    def _delete_owned(self, identity: model.Identity, post_id: int, comment_id: int) -> int:
        result = self.session.execute(
            comment_table.delete().where(
                comment_table.c.id == comment_id,
                comment_table.c.post_id == post_id,
                comment_table.c.user_id == identity.user_id,
            )
        )
        return result.rowcount


class SqlAlchemyLikeRepository(abs_repo.AbstractLikeRepository):
    def __init__(self, session: Session) -> None:
        self.session = session

    def _get(self, post_id: int, user_id: int) -> Optional[model.Like]:
        stmt = select(likes_table.c.post_id, likes_table.c.user_id).where(
            likes_table.c.post_id == post_id, likes_table.c.user_id == user_id
        )
        row = self.session.execute(stmt).mappings().first()
        if not row:
            return None
        return model.Like(post_id=row["post_id"], user_id=row["user_id"])

    def _create(self, like: model.Like) -> bool:
        try:
            # SAVEPOINT so a duplicate only undoes this insert, not the whole unit of work
            with self.session.begin_nested():
                self.session.execute(
                    likes_table.insert().values(post_id=like.post_id, user_id=like.user_id)
                )
        except IntegrityError:
            logger.info(
                "Like (post_id=%s, user_id=%s) inserted concurrently, treating as existing",
                like.post_id,
                like.user_id,
            )
            return False
        return True

    def _remove(self, like: model.Like) -> None:
        self.session.execute(
            likes_table.delete().where(
                likes_table.c.post_id == like.post_id, likes_table.c.user_id == like.user_id
            )
        )
