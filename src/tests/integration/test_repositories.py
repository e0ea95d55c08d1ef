import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from src.adapters import repository as sql_repo
from src.adapters.repository import (
    SqlAlchemyCommentRepository,
    SqlAlchemyLikeRepository,
    SqlAlchemyPostRepository,
)
from src.db import comment_table, enable_sqlite_foreign_keys, likes_table, metadata, post_table
from src.domain import commands, model
from src.domain.model import Identity, Like, LikeState
from src.service_layer import handlers
from src.service_layer.unit_of_work import SqlAlchemyUnitOfWork

ALICE = Identity(user_id=1, nickname="alice")
BOB = Identity(user_id=2, nickname="bob")


@pytest.fixture
def session_factory():
    engine = create_engine("sqlite:///:memory:", future=True)
    enable_sqlite_foreign_keys(engine)
    metadata.create_all(engine)
    try:
        yield sessionmaker(bind=engine, expire_on_commit=False)
    finally:
        metadata.drop_all(engine)


@pytest.fixture
def session(session_factory):
    with session_factory() as sess:
        yield sess


def _add_post(session, owner=ALICE, title="Hello", content="hello"):
    post = model.Post(id=None, user_id=owner.user_id, nickname=owner.nickname, title=title, content=content)
    SqlAlchemyPostRepository(session).add(post)
    session.commit()
    return post


def _like_rows(session):
    return session.execute(select(likes_table.c.post_id, likes_table.c.user_id)).all()


class StaleReadLikeRepository(SqlAlchemyLikeRepository):
    """Never sees an existing row, as if another request inserted it a moment ago."""

    def _get(self, post_id, user_id):
        return None


def test_post_repository_roundtrip(session):
    post = _add_post(session)

    fetched = SqlAlchemyPostRepository(session).get(post.id)

    assert fetched is not None
    assert (fetched.title, fetched.content, fetched.user_id, fetched.nickname) == (
        "Hello", "hello", 1, "alice"
    )
    assert fetched.created_at is not None


def test_post_update_is_conditional_on_owner(session):
    post = _add_post(session)
    repo = SqlAlchemyPostRepository(session)

    assert repo.update_owned(BOB, post.id, content="hijacked", title="Mine") == 0
    assert repo.update_owned(ALICE, 999, content="nothing") == 0
    assert repo.update_owned(Identity(1, "alice2"), post.id, content="edited") == 1
    session.commit()

    row = session.execute(select(post_table).where(post_table.c.id == post.id)).mappings().one()
    assert (row["title"], row["content"], row["nickname"]) == ("Hello", "edited", "alice2")


def test_post_delete_is_conditional_on_owner(session):
    post = _add_post(session)
    repo = SqlAlchemyPostRepository(session)

    assert repo.delete_owned(BOB, post.id) == 0
    assert repo.delete_owned(ALICE, post.id) == 1
    session.commit()

    assert repo.get(post.id) is None


def test_post_delete_takes_its_likes_and_id_is_not_reused(session):
    post = _add_post(session)
    SqlAlchemyLikeRepository(session).get_or_create(post.id, BOB.user_id)
    session.commit()

    assert SqlAlchemyPostRepository(session).delete_owned(ALICE, post.id) == 1
    session.commit()
    assert _like_rows(session) == []

    newer = _add_post(session, owner=BOB, title="Fresh", content="fresh")
    assert newer.id != post.id


def test_comment_mutations_are_scoped_to_post_and_owner(session):
    repo = SqlAlchemyCommentRepository(session)
    comment = model.Comment(id=None, post_id=5, user_id=BOB.user_id, nickname="bob", content="nice")
    repo.add(comment)
    session.commit()

    assert repo.update_owned(BOB, 6, comment.id, content="wrong post") == 0
    assert repo.update_owned(ALICE, 5, comment.id, content="not mine") == 0
    assert repo.update_owned(BOB, 5, comment.id, content="great") == 1
    assert repo.delete_owned(ALICE, 5, comment.id) == 0
    session.commit()

    row = session.execute(select(comment_table)).mappings().one()
    assert row["content"] == "great"

    assert repo.delete_owned(BOB, 5, comment.id) == 1
    session.commit()
    assert session.execute(select(comment_table)).first() is None


def test_like_get_or_create_then_remove(session):
    post = _add_post(session)
    repo = SqlAlchemyLikeRepository(session)

    like, created = repo.get_or_create(post.id, BOB.user_id)
    assert created is True
    session.commit()

    again, created = repo.get_or_create(post.id, BOB.user_id)
    assert created is False
    assert again == like

    repo.remove(again)
    session.commit()
    assert _like_rows(session) == []


def test_unique_key_rejects_duplicate_and_keeps_session_usable(session):
    post = _add_post(session)
    session.execute(likes_table.insert().values(post_id=post.id, user_id=BOB.user_id))
    session.commit()
    repo = StaleReadLikeRepository(session)

    like, created = repo.get_or_create(post.id, BOB.user_id)

    assert created is False
    assert like == Like(post_id=post.id, user_id=BOB.user_id)
    repo.remove(like)
    session.commit()
    assert _like_rows(session) == []


def test_toggle_like_through_unit_of_work(session_factory):
    with session_factory() as session:
        post = _add_post(session)
    uow = SqlAlchemyUnitOfWork(session_factory=session_factory)
    cmd = commands.ToggleLike(post_id=post.id, user_id=BOB.user_id)

    assert handlers.toggle_like(cmd, uow=uow) is LikeState.created
    with session_factory() as session:
        assert _like_rows(session) == [(post.id, BOB.user_id)]

    assert handlers.toggle_like(cmd, uow=uow) is LikeState.deleted
    with session_factory() as session:
        assert _like_rows(session) == []


def test_toggle_like_losing_the_race_deletes_instead_of_failing(session_factory, monkeypatch):
    with session_factory() as session:
        post = _add_post(session)
        session.execute(likes_table.insert().values(post_id=post.id, user_id=BOB.user_id))
        session.commit()
    monkeypatch.setattr(sql_repo, "SqlAlchemyLikeRepository", StaleReadLikeRepository)

    state = handlers.toggle_like(
        commands.ToggleLike(post_id=post.id, user_id=BOB.user_id),
        uow=SqlAlchemyUnitOfWork(session_factory=session_factory),
    )

    assert state is LikeState.deleted
    with session_factory() as session:
        assert _like_rows(session) == []
