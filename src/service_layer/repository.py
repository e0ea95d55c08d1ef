from __future__ import annotations

import abc
from typing import Optional, Set, Tuple

from src.domain.model import Comment, Identity, Like, Post


class AbstractPostRepository(abc.ABC):
    def __init__(self) -> None:
        self.seen: Set[Post] = set()

    def add(self, post: Post) -> None:
        self._add(post)
        self.seen.add(post)

    def get(self, post_id: int) -> Optional[Post]:
        post = self._get(post_id)
        if post:
            self.seen.add(post)
        return post

    def update_owned(
        self, identity: Identity, post_id: int, content: str, title: Optional[str] = None
    ) -> int:
        """Conditional update scoped to the owner. Returns the number of rows changed."""
        return self._update_owned(identity, post_id, content, title)

    def delete_owned(self, identity: Identity, post_id: int) -> int:
        return self._delete_owned(identity, post_id)

    @abc.abstractmethod
    def _add(self, post: Post) -> None: ...

    @abc.abstractmethod
    def _get(self, post_id: int) -> Optional[Post]: ...

    @abc.abstractmethod
    def _update_owned(
        self, identity: Identity, post_id: int, content: str, title: Optional[str]
    ) -> int: ...

    @abc.abstractmethod
    def _delete_owned(self, identity: Identity, post_id: int) -> int: ...


class AbstractCommentRepository(abc.ABC):
    def __init__(self) -> None:
        self.seen: Set[Comment] = set()

    def add(self, comment: Comment) -> None:
        self._add(comment)
        self.seen.add(comment)

    def update_owned(
        self, identity: Identity, post_id: int, comment_id: int, content: str
    ) -> int:
        return self._update_owned(identity, post_id, comment_id, content)

    def delete_owned(self, identity: Identity, post_id: int, comment_id: int) -> int:
        return self._delete_owned(identity, post_id, comment_id)

    @abc.abstractmethod
    def _add(self, comment: Comment) -> None: ...

    @abc.abstractmethod
    def _update_owned(
        self, identity: Identity, post_id: int, comment_id: int, content: str
    ) -> int: ...

    @abc.abstractmethod
    def _delete_owned(self, identity: Identity, post_id: int, comment_id: int) -> int: ...


class AbstractLikeRepository(abc.ABC):
    def get_or_create(self, post_id: int, user_id: int) -> Tuple[Like, bool]:
        """
        Find the like for (post_id, user_id), inserting it when absent.

        Returns the like and whether this call created it. An insert that loses
        a race against a concurrent insert of the same pair reports
        ``created=False``: the store's unique key decides, not this method.
        """
        like = self._get(post_id, user_id)
        if like is not None:
            return like, False
        like = Like(post_id=post_id, user_id=user_id)
        return like, self._create(like)

    def remove(self, like: Like) -> None:
        self._remove(like)

    @abc.abstractmethod
    def _get(self, post_id: int, user_id: int) -> Optional[Like]: ...

    @abc.abstractmethod
    def _create(self, like: Like) -> bool:
        """Insert the like; return False if the unique key already holds a row."""

    @abc.abstractmethod
    def _remove(self, like: Like) -> None: ...
