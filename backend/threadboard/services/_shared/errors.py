"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. They are the stable contract between repositories, models and
application services; ``threadboard.core.errors`` maps each family to an
RFC 7807 response.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name in the driver message. SQLite only
    reports the offending columns (``UNIQUE constraint failed: users.email``),
    so the ``uq_<table>_<column>`` naming convention is also matched against
    that form.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Database constraint to match (e.g. ``uq_users_email``).
    :returns: ``True`` if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    if name.startswith("uq_"):
        table, _, column = name[3:].partition("_")
        return f"{table}.{column}" in message
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    - Unclassified subclasses surface as ``400 Bad Request``.
    """

    pass


class BadRequestError(ServiceError):
    """Raised when input is well-formed but violates a business rule."""


class AuthenticationError(ServiceError):
    """Raised when the caller cannot be identified or its credentials fail."""


class InvalidTokenError(AuthenticationError):
    """Raised when a token fails signature, expiry or shape checks.

    The reason is not exposed: expired and tampered tokens look the same to
    callers.
    """


class AuthorizationError(ServiceError):
    """Raised when an identified caller may not perform the operation."""


class InternalServiceError(ServiceError):
    """Raised when an operation fails for reasons the caller cannot fix."""


class IntegrityFaultError(InternalServiceError):
    """Raised when persisted data breaks an invariant (e.g. missing stats row)."""


class TokenConfigurationError(InternalServiceError):
    """Raised when a token signing secret is not configured."""


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Post").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"
