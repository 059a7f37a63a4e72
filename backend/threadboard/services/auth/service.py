# threadboard/services/auth/service.py
from __future__ import annotations

import logging
import secrets

from sqlalchemy.exc import IntegrityError

from threadboard.models.user import User
from threadboard.repositories.user import UserRepository
from threadboard.services._shared.base import AuthenticatedIdentity, BaseService
from threadboard.services._shared.dto import MessageOut
from threadboard.services._shared.errors import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    InvalidTokenError,
    violates,
)
from threadboard.services._shared.ports.token_provider import TokenProvider
from threadboard.services.auth.dto import LoginIn, RefreshIn, SignUpIn, TokenPairOut

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Session lifecycle service (sign-up / login / logout / reissue).

    A user is logged in exactly when ``User.refresh_token`` is set. Login and
    reissue overwrite it, logout clears it, so at most one refresh token is
    accepted per user and a rotated token can never be replayed.
    """

    def __init__(self, *, token_provider: TokenProvider) -> None:
        """
        :param token_provider: Adapter for issuing/verifying tokens.
        """
        super().__init__()
        self.tokens = token_provider

    # ------------------------------------------------------------------ #
    # Sign-up
    # ------------------------------------------------------------------ #

    def sign_up(self, dto: SignUpIn) -> MessageOut:
        """
        Register a user, or revive a soft-deleted account with the same email.

        :raises ConflictError: If the email belongs to a live account, or the
            nickname is held by another account.
        """
        with self.atomic("Sign-up failed") as uow:
            repo: UserRepository = uow.users
            existing = repo.get_by_email(dto.email)

            if existing is not None and existing.is_active:
                raise ConflictError("User", "email already in use")
            if repo.nickname_taken(dto.nickname, exclude_id=existing.id if existing else None):
                raise ConflictError("User", "nickname already in use")

            try:
                if existing is not None:
                    existing.restore()
                    existing.password = dto.password
                    existing.name = dto.name
                    existing.nickname = dto.nickname
                    existing.refresh_token = None
                    repo.flush()
                    logger.info("auth.revived", extra={"user_id": existing.id})
                else:
                    user = repo.add(
                        User(
                            email=dto.email,
                            password=dto.password,
                            name=dto.name,
                            nickname=dto.nickname,
                        )
                    )
                    logger.info("auth.signed_up", extra={"user_id": user.id})
            except IntegrityError as exc:
                if violates(exc, "uq_users_nickname"):
                    raise ConflictError("User", "nickname already in use") from exc
                raise ConflictError("User", "email already in use") from exc

        return MessageOut(message="Sign-up completed")

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Verify credentials and start a new session.

        The new refresh token replaces any previous one, which ends every
        other session of the same user.

        :raises AuthenticationError: ``Email mismatch`` for an absent or deleted
            account, ``Password mismatch`` for a wrong password.
        """
        with self.atomic("Login failed") as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_email(dto.email)
            if user is None or user.is_deleted:
                logger.warning("auth.login_rejected")
                raise AuthenticationError("Email mismatch")
            if not user.verify_password(dto.password):
                logger.warning("auth.login_rejected", extra={"user_id": user.id})
                raise AuthenticationError("Password mismatch")

            pair = self._issue_pair(user)
            repo.set_refresh_token(user, pair.refresh_token)
            logger.info("auth.logged_in", extra={"user_id": user.id})
        return pair

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, identity: AuthenticatedIdentity) -> MessageOut:
        """
        End the caller's session.

        :raises AuthenticationError: If the account is absent or deleted.
        :raises BadRequestError: If no session is active. A second logout is a
            client error, not a no-op.
        """
        with self.atomic("Logout failed") as uow:
            repo: UserRepository = uow.users
            user = self.active_user(repo, identity.id, AuthenticationError("User does not exist"))
            if user.refresh_token is None:
                raise BadRequestError("Already logged out")
            repo.set_refresh_token(user, None)
            logger.info("auth.logged_out", extra={"user_id": user.id})
        return MessageOut(message="Logged out")

    # ------------------------------------------------------------------ #
    # Reissue with rotation
    # ------------------------------------------------------------------ #

    def reissue_token(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a refresh token for a new pair and rotate the stored one.

        Security
        --------
        - Signature and expiry are checked with the refresh secret.
        - The presented token must equal the stored one, so a token that was
          already rotated or logged out is rejected.

        :raises AuthenticationError: ``Invalid refresh token``,
            ``User does not exist`` or ``Refresh token mismatch``.
        :raises TokenConfigurationError: If the refresh secret is missing.
        """
        try:
            claims = self.tokens.verify_refresh_token(dto.refresh_token)
        except InvalidTokenError as exc:
            logger.warning("auth.refresh_rejected")
            raise AuthenticationError("Invalid refresh token") from exc

        with self.atomic("Token reissue failed") as uow:
            repo: UserRepository = uow.users
            user = repo.get_for_update(claims.user_id)
            if user is None or user.is_deleted:
                raise AuthenticationError("User does not exist")

            stored = user.refresh_token
            if stored is None or not secrets.compare_digest(
                stored.encode("utf-8"), dto.refresh_token.encode("utf-8")
            ):
                logger.warning("auth.refresh_mismatch", extra={"user_id": user.id})
                raise AuthenticationError("Refresh token mismatch")

            pair = self._issue_pair(user)
            repo.set_refresh_token(user, pair.refresh_token)
            logger.info("auth.rotated", extra={"user_id": user.id})
        return pair

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _issue_pair(self, user: User) -> TokenPairOut:
        return TokenPairOut(
            access_token=self.tokens.create_access_token(user_id=user.id, email=user.email),
            refresh_token=self.tokens.create_refresh_token(user_id=user.id, email=user.email),
        )
