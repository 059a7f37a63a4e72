# threadboard/services/_shared/base.py
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from threadboard.models.user import User
from threadboard.repositories.user import UserRepository
from threadboard.services._shared.errors import (
    AuthorizationError,
    InternalServiceError,
    ServiceError,
)
from threadboard.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthenticatedIdentity:
    """
    Caller identity resolved by the access guard.

    Passed explicitly into every service operation that acts on behalf of a
    user; services never read it from ambient request state.

    :param id: Authenticated user id.
    :param email: Email claimed by the access token.
    """

    id: int
    email: str


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Wrap multi-row mutations in :meth:`atomic`.
    * Offer shared lookups and ownership checks.
    * Keep services thin, orchestration-only, no web leakage.

    Notes
    -----
    Services never touch the global session; they always go through a Unit of
    Work.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-write Unit of Work."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level (e.g. "READ COMMITTED").
        :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    @contextmanager
    def atomic(self, failure_message: str) -> Iterator[SQLAlchemyUnitOfWork]:
        """
        Run a block inside one read-write transaction.

        The block commits on success and rolls back on any exception.
        :class:`ServiceError` subclasses propagate unchanged; anything else is
        logged and re-raised as :class:`InternalServiceError` carrying
        ``failure_message``.

        :param failure_message: Client-safe message for unexpected failures.
        :raises InternalServiceError: When the block fails unexpectedly.
        """
        try:
            with self.rw_uow() as uow:
                yield uow
        except ServiceError:
            raise
        except Exception as exc:
            logger.exception("transaction.failed: %s", failure_message)
            raise InternalServiceError(failure_message) from exc

    # --------------------------- Lookups --------------------------------

    @staticmethod
    def active_user(users: UserRepository, user_id: int, error: ServiceError) -> User:
        """
        Return the live user ``user_id`` or raise ``error``.

        Absent and soft-deleted accounts are indistinguishable to callers.
        """
        user = users.get_active(user_id)
        if user is None:
            raise error
        return user

    # --------------------------- AuthZ --------------------------------

    def ensure_owner(
        self,
        actor_id: int | None,
        owner_id: int,
        *,
        error: ServiceError | None = None,
    ) -> None:
        """
        Ensure the current actor is the resource owner.

        :param actor_id: Authenticated user id.
        :param owner_id: Expected owner id.
        :param error: Error raised on mismatch; ``AuthorizationError`` by default.
        """
        from threadboard.services._shared.policies.common import is_owner

        if not is_owner(actor_id=actor_id, owner_id=owner_id):
            raise error or AuthorizationError("You can only modify your own content.")
