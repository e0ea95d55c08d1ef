from __future__ import annotations

import abc
from typing import List

from sqlalchemy.orm import Session, sessionmaker

from src.db import metadata, SessionLocal
from src.service_layer import repository
from src.adapters import repository as sql_repo


class AbstractUnitOfWork(abc.ABC):
    posts: repository.AbstractPostRepository
    comments: repository.AbstractCommentRepository
    likes: repository.AbstractLikeRepository

    def __enter__(self) -> "AbstractUnitOfWork":
        return self

    def __exit__(self, *args) -> None:
        self.rollback()

    def collect_new_events(self) -> List:
        events = []
        for repo in (getattr(self, "posts", None), getattr(self, "comments", None)):
            if repo is None:
                continue
            for agg in repo.seen:
                events.extend(agg.events)
                agg.events.clear()
        return events

    @abc.abstractmethod
    def commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    _schema_initialized = False

    def __init__(self, session_factory: sessionmaker | None = None) -> None:
        # Reuse the shared SessionLocal (configured in src.db) by default
        self.session_factory = session_factory or SessionLocal
        self.session: Session | None = None

    def __enter__(self) -> "SqlAlchemyUnitOfWork":
        self.session = self.session_factory()
        self._ensure_schema()
        self.posts = sql_repo.SqlAlchemyPostRepository(self.session)
        self.comments = sql_repo.SqlAlchemyCommentRepository(self.session)
        self.likes = sql_repo.SqlAlchemyLikeRepository(self.session)
        return super().__enter__()

    def __exit__(self, *args) -> None:
        super().__exit__(*args)
        if self.session:
            self.session.close()

    def commit(self) -> None:
        if self.session:
            self.session.commit()

    def rollback(self) -> None:
        if self.session:
            self.session.rollback()

    def _ensure_schema(self) -> None:
        """
        Guarantee tables exist for the configured database (helpful for SQLite dev/test).
        Runs once per process.
        """
        if self.__class__._schema_initialized:
            return
        if self.session is None:
            return
        metadata.create_all(bind=self.session.bind)
        self.__class__._schema_initialized = True


class FakeUnitOfWork(AbstractUnitOfWork):
    def __init__(
        self,
        posts_repo: repository.AbstractPostRepository,
        comments_repo: repository.AbstractCommentRepository,
        likes_repo: repository.AbstractLikeRepository,
    ) -> None:
        self.posts = posts_repo
        self.comments = comments_repo
        self.likes = likes_repo
        self.committed = False

    def commit(self) -> None:
        self.committed = True

    def rollback(self) -> None:
        # Fake repositories apply writes immediately; nothing to undo
        pass
