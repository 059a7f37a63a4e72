"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from threadboard.repositories.base import BaseRepository
from threadboard.repositories.comment import CommentRepository
from threadboard.repositories.file import FileRepository
from threadboard.repositories.like import LikeRepository
from threadboard.repositories.post import PostRepository, PostStatsRepository
from threadboard.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "CommentRepository",
    "FileRepository",
    "LikeRepository",
    "PostRepository",
    "PostStatsRepository",
    "UserRepository",
]
