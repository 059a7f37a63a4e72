"""Tiny helpers shared across test modules."""

from __future__ import annotations

from threadboard.services._shared.base import AuthenticatedIdentity


def identity_of(user) -> AuthenticatedIdentity:
    """Identity the access guard would resolve for ``user``."""
    return AuthenticatedIdentity(id=user.id, email=user.email)


def file_payload(n: int = 0, *, mime_type: str = "image/png", size: int | None = 10) -> dict:
    """Wire-format attachment used by API tests."""
    return {
        "url": f"https://cdn.example.com/{n}.png",
        "originalName": f"{n}.png",
        "mimeType": mime_type,
        "size": size,
    }
