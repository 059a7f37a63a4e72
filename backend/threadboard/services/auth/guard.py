"""Resolve verified access-token claims into a live caller identity."""

from __future__ import annotations

import logging

from threadboard.services._shared.base import AuthenticatedIdentity, BaseService
from threadboard.services._shared.errors import AuthenticationError

logger = logging.getLogger(__name__)


class AccessGuard(BaseService):
    """
    Second half of the access check, run after the token signature passed.

    The token only says which user it claims to be. Every request re-reads
    the user row so a deleted account stops working immediately instead of
    at token expiry. Absent and deleted users share one message.
    """

    def resolve(self, subject: str | int | None, email: str | None = None) -> AuthenticatedIdentity:
        """
        :param subject: ``sub`` claim of the verified access token.
        :param email: ``email`` claim, falling back to the stored address.
        :raises AuthenticationError: On a malformed subject or a dead account.
        """
        if subject is None or not str(subject).isdigit():
            raise AuthenticationError("Access token is invalid")

        with self.ro_uow() as uow:
            user = uow.users.get_active(int(subject))
            if user is None:
                logger.warning("auth.guard_rejected", extra={"user_id": int(subject)})
                raise AuthenticationError("User does not exist")
            return AuthenticatedIdentity(id=user.id, email=email or user.email)
