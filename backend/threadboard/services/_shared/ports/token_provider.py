from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from typing import Protocol

from threadboard.services._shared.errors import InvalidTokenError


@dataclass(frozen=True, slots=True)
class RefreshClaims:
    """Verified payload of a refresh token."""

    user_id: int
    email: str


class TokenProvider(Protocol):
    """Port for issuing and verifying signed tokens.

    Access and refresh tokens are signed with independent secrets and
    lifetimes. Both carry the user id and email.
    """

    def create_access_token(self, *, user_id: int, email: str) -> str: ...

    def create_refresh_token(self, *, user_id: int, email: str) -> str: ...

    def verify_refresh_token(self, token: str) -> RefreshClaims:
        """Return the claims of a valid refresh token.

        :raises InvalidTokenError: On any signature, expiry or shape failure.
        :raises TokenConfigurationError: When the signing secret is missing.
        """
        ...


class StubTokenProvider(TokenProvider):
    """Deterministic token provider used in unit tests.

    Every issued token is unique. ``expire`` makes a previously issued token
    fail verification as if its lifetime had passed.
    """

    def __init__(self) -> None:
        self._seq = count(1)
        self._issued: dict[str, tuple[str, RefreshClaims]] = {}
        self._expired: set[str] = set()

    def _mk(self, ttype: str, user_id: int, email: str) -> str:
        token = f"{ttype}.{user_id}.{next(self._seq)}"
        self._issued[token] = (ttype, RefreshClaims(user_id=user_id, email=email))
        return token

    def create_access_token(self, *, user_id: int, email: str) -> str:
        return self._mk("access", user_id, email)

    def create_refresh_token(self, *, user_id: int, email: str) -> str:
        return self._mk("refresh", user_id, email)

    def verify_refresh_token(self, token: str) -> RefreshClaims:
        issued = self._issued.get(token)
        if issued is None or issued[0] != "refresh" or token in self._expired:
            raise InvalidTokenError("Invalid token")
        return issued[1]

    def expire(self, token: str) -> None:
        self._expired.add(token)
