"""Attachment metadata; the binary lives elsewhere and is referenced by URL."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from threadboard.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin

if TYPE_CHECKING:
    from .post import Post

ALLOWED_MIME_TYPES: frozenset[str] = frozenset(
    {
        # images
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/svg+xml",
        # documents
        "application/pdf",
        "text/plain",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-powerpoint",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        # archives
        "application/zip",
    }
)


class File(PKMixin, CreatedAtMixin, ReprMixin, db.Model):
    """File attached to a post. ``size`` is never negative."""

    __tablename__ = "files"

    post_id: Mapped[int] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(128), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    __table_args__ = (Index("ix_files_post_id", "post_id"),)

    post: Mapped[Post] = relationship("Post", back_populates="files")

    @validates("mime_type")
    def _check_mime_type(self, key: str, value: str) -> str:
        if value not in ALLOWED_MIME_TYPES:
            raise ValueError(f"MIME type not allowed: {value}")
        return value

    @validates("size")
    def _clamp_size(self, key: str, value: int | None) -> int:
        if value is None or value < 0:
            return 0
        return int(value)
