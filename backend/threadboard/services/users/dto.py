# threadboard/services/users/dto.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Input DTO for editing one's own profile.

    :param name: New display name.
    :param nickname: New public handle.
    """

    name: str
    nickname: str


@dataclass(frozen=True, slots=True)
class MeOut:
    """Private view of the caller's own account."""

    email: str
    name: str
    nickname: str


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """Public profile visible to any authenticated user."""

    id: int
    name: str
    nickname: str


@dataclass(frozen=True, slots=True)
class MyPostOut:
    id: int
    title: str


@dataclass(frozen=True, slots=True)
class MyCommentOut:
    id: int
    content: str
    post_id: int
