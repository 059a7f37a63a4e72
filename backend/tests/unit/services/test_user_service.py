"""UserService: profile reads, edits, deletion and personal listings."""

from __future__ import annotations

import pytest

from tests.factories.comment import CommentFactory
from tests.factories.post import PostFactory
from tests.factories.user import UserFactory
from tests.helpers.utils import identity_of
from threadboard.models.user import User
from threadboard.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
)
from threadboard.services.users.dto import MeOut, ProfileUpdateIn, UserPublicOut
from threadboard.services.users.service import UserService


@pytest.fixture()
def service() -> UserService:
    return UserService(page_size=2)


class TestQueries:
    def test_get_me(self, service, session):
        user = UserFactory(email="a@x.com", name="A", nickname="nickA")
        assert service.get_me(identity_of(user)) == MeOut(
            email="a@x.com", name="A", nickname="nickA"
        )

    def test_get_me_of_deleted_account(self, service, session):
        user = UserFactory(deleted=True)
        with pytest.raises(AuthenticationError):
            service.get_me(identity_of(user))

    def test_get_user_public_profile(self, service, session):
        user = UserFactory(name="B", nickname="bee")
        assert service.get_user(user.id) == UserPublicOut(id=user.id, name="B", nickname="bee")

    def test_get_user_hides_deleted(self, service, session):
        user = UserFactory(deleted=True)
        with pytest.raises(NotFoundError):
            service.get_user(user.id)

    def test_my_posts_pages_with_cursor(self, service, session):
        user = UserFactory()
        ids = [PostFactory(author=user).id for _ in range(3)]
        PostFactory(author=user, deleted=True)
        me = identity_of(user)

        first = service.list_my_posts(me)
        assert [p.id for p in first] == [ids[2], ids[1]]
        assert [p.id for p in service.list_my_posts(me, cursor=ids[1])] == [ids[0]]

    def test_foreign_cursor_restarts_from_first_page(self, service, session):
        user = UserFactory()
        ids = [PostFactory(author=user).id for _ in range(3)]
        foreign = PostFactory()

        page = service.list_my_posts(identity_of(user), cursor=foreign.id)
        assert [p.id for p in page] == [ids[2], ids[1]]

    def test_my_comments(self, service, session):
        user = UserFactory()
        post = PostFactory()
        c1 = CommentFactory(author=user, post=post)
        c2 = CommentFactory(author=user, post=post)
        CommentFactory(author=user, post=post, deleted=True)

        page = service.list_my_comments(identity_of(user))
        assert [(c.id, c.post_id) for c in page] == [(c2.id, post.id), (c1.id, post.id)]


class TestCommands:
    def test_update_me(self, service, session):
        user = UserFactory(name="Old", nickname="oldnick")
        out = service.update_me(identity_of(user), ProfileUpdateIn(name="New", nickname="newnick"))

        assert out.message == "Profile updated"
        session.expire_all()
        stored = session.get(User, user.id)
        assert (stored.name, stored.nickname) == ("New", "newnick")

    def test_update_me_without_changes(self, service, session):
        user = UserFactory(name="Same", nickname="same")
        out = service.update_me(identity_of(user), ProfileUpdateIn(name="Same", nickname="same"))
        assert out.message == "No changes"

    def test_update_me_nickname_conflict(self, service, session):
        UserFactory(nickname="taken")
        user = UserFactory()
        with pytest.raises(ConflictError):
            service.update_me(identity_of(user), ProfileUpdateIn(name="X", nickname="taken"))

    def test_delete_me_soft_deletes_and_logs_out(self, service, session):
        user = UserFactory(refresh_token="rt")
        assert service.delete_me(identity_of(user)).message == "Account deleted"

        session.expire_all()
        stored = session.get(User, user.id)
        assert stored.is_deleted
        assert stored.refresh_token is None

        with pytest.raises(AuthenticationError):
            service.delete_me(identity_of(user))
