"""AccessGuard resolves token subjects into live identities."""

from __future__ import annotations

import pytest

from tests.factories.user import UserFactory
from threadboard.services._shared.base import AuthenticatedIdentity
from threadboard.services._shared.errors import AuthenticationError
from threadboard.services.auth import AccessGuard


def test_resolves_live_user(session):
    user = UserFactory()
    identity = AccessGuard().resolve(str(user.id), user.email)
    assert identity == AuthenticatedIdentity(id=user.id, email=user.email)


def test_falls_back_to_stored_email(session):
    user = UserFactory()
    assert AccessGuard().resolve(user.id).email == user.email


@pytest.mark.parametrize("subject", [None, "", "abc", "-1"])
def test_malformed_subject(session, subject):
    with pytest.raises(AuthenticationError, match="Access token is invalid"):
        AccessGuard().resolve(subject)


def test_absent_and_deleted_users_look_the_same(session):
    gone = UserFactory(deleted=True)
    with pytest.raises(AuthenticationError, match="User does not exist"):
        AccessGuard().resolve(str(gone.id))
    with pytest.raises(AuthenticationError, match="User does not exist"):
        AccessGuard().resolve("999999")
