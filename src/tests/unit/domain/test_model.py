import pytest

from src.domain import exceptions
from src.domain.model import Comment, Identity, Like, LikeState, Post, authorize, require_content


def test_owner_is_authorized_for_own_post():
    post = Post(id=1, user_id=2, nickname="alice", content="hello world")

    assert authorize(Identity(user_id=2, nickname="alice"), post) is True


def test_other_user_is_not_authorized_even_with_same_nickname():
    post = Post(id=1, user_id=2, nickname="alice", content="hello world")

    assert authorize(Identity(user_id=3, nickname="alice"), post) is False


def test_authorize_applies_to_comments():
    comment = Comment(id=5, post_id=1, user_id=7, nickname="bob", content="nice")

    assert authorize(Identity(user_id=7, nickname="renamed"), comment) is True
    assert authorize(Identity(user_id=8, nickname="bob"), comment) is False


@pytest.mark.parametrize("content", [None, ""])
def test_require_content_rejects_missing_or_empty(content):
    with pytest.raises(exceptions.ValidationError, match="content is required"):
        require_content(content, "content is required")


def test_require_content_accepts_whitespace():
    # Only presence is checked
    assert require_content(" ", "content is required") == " "


def test_likes_are_equal_per_user_and_post():
    assert Like(post_id=1, user_id=2) == Like(post_id=1, user_id=2)
    assert len({Like(post_id=1, user_id=2), Like(post_id=1, user_id=2)}) == 1


def test_entities_hash_by_identity():
    first = Post(id=1, user_id=2, nickname="alice", content="same")
    second = Post(id=1, user_id=2, nickname="alice", content="same")

    assert first != second
    assert len({first, second}) == 2


def test_like_state_serializes_as_string():
    assert LikeState.created == "created"
    assert LikeState.deleted.value == "deleted"
