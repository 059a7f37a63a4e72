"""CommentService: replies, ownership and the comment counter."""

from __future__ import annotations

import pytest

from tests.factories.comment import CommentFactory
from tests.factories.post import PostFactory
from tests.factories.user import UserFactory
from tests.helpers.utils import identity_of
from threadboard.models.comment import Comment
from threadboard.models.post import PostStats
from threadboard.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    NotFoundError,
)
from threadboard.services.comments.dto import CommentIn
from threadboard.services.comments.service import CommentService


@pytest.fixture()
def service() -> CommentService:
    return CommentService()


def _comment_count(session, post_id: int) -> int:
    session.expire_all()
    return session.query(PostStats).filter_by(post_id=post_id).one().comment_count


class TestCreate:
    def test_root_comment_and_reply_bump_counter(self, service, session):
        post = PostFactory()
        me = identity_of(UserFactory())

        root = service.create_comment(me, CommentIn(content="first", post_id=post.id))
        reply = service.create_comment(
            me, CommentIn(content="second", post_id=post.id, parent_id=root.id)
        )

        assert root.message == "Comment created"
        assert session.get(Comment, reply.id).parent_id == root.id
        assert _comment_count(session, post.id) == 2

    def test_deleted_author(self, service, session):
        post = PostFactory()
        with pytest.raises(AuthenticationError):
            service.create_comment(
                identity_of(UserFactory(deleted=True)), CommentIn(content="x", post_id=post.id)
            )

    def test_missing_or_deleted_post(self, service, session):
        me = identity_of(UserFactory())
        gone = PostFactory(deleted=True)
        for post_id in (gone.id, 999_999):
            with pytest.raises(NotFoundError):
                service.create_comment(me, CommentIn(content="x", post_id=post_id))

    def test_parent_rules(self, service, session):
        post = PostFactory()
        me = identity_of(UserFactory())
        elsewhere = CommentFactory()
        deleted_parent = CommentFactory(post=post, deleted=True)

        with pytest.raises(NotFoundError):
            service.create_comment(me, CommentIn(content="x", post_id=post.id, parent_id=999_999))
        with pytest.raises(BadRequestError):
            service.create_comment(
                me, CommentIn(content="x", post_id=post.id, parent_id=elsewhere.id)
            )
        with pytest.raises(BadRequestError):
            service.create_comment(
                me, CommentIn(content="x", post_id=post.id, parent_id=deleted_parent.id)
            )
        assert _comment_count(session, post.id) == 0

    def test_deleted_parent_on_another_post(self, service, session):
        post = PostFactory()
        me = identity_of(UserFactory())
        foreign = CommentFactory(deleted=True)

        with pytest.raises(BadRequestError) as excinfo:
            service.create_comment(me, CommentIn(content="x", post_id=post.id, parent_id=foreign.id))
        assert "another post" in str(excinfo.value)
        assert _comment_count(session, post.id) == 0


class TestDelete:
    def test_author_deletes_and_counter_drops(self, service, session):
        post = PostFactory()
        me = identity_of(UserFactory())
        created = service.create_comment(me, CommentIn(content="x", post_id=post.id))

        assert service.delete_comment(me, created.id).message == "Comment deleted"
        assert session.get(Comment, created.id).is_deleted
        assert _comment_count(session, post.id) == 0

    def test_only_the_author_may_delete(self, service, session):
        comment = CommentFactory()
        with pytest.raises(AuthorizationError):
            service.delete_comment(identity_of(UserFactory()), comment.id)

    def test_missing_or_deleted_comment(self, service, session):
        gone = CommentFactory(deleted=True)
        me = identity_of(gone.author)
        for comment_id in (gone.id, 999_999):
            with pytest.raises(NotFoundError):
                service.delete_comment(me, comment_id)

    def test_deleted_actor(self, service, session):
        comment = CommentFactory(author=UserFactory(deleted=True))
        with pytest.raises(AuthenticationError):
            service.delete_comment(identity_of(comment.author), comment.id)
