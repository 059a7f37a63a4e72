"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import LoginSchema, RefreshTokenSchema, SignUpSchema, TokenPairSchema
from .comment import CommentCreateSchema
from .common import CreatedSchema, CursorQuerySchema, MessageSchema
from .post import (
    PostDetailSchema,
    PostListItemSchema,
    PostListQuerySchema,
    PostSearchHitSchema,
    PostSearchQuerySchema,
    PostWriteSchema,
)
from .user import MeSchema, MyCommentSchema, MyPostSchema, ProfileUpdateSchema, UserPublicSchema

__all__ = [
    "CommentCreateSchema",
    "CreatedSchema",
    "CursorQuerySchema",
    "LoginSchema",
    "MeSchema",
    "MessageSchema",
    "MyCommentSchema",
    "MyPostSchema",
    "PostDetailSchema",
    "PostListItemSchema",
    "PostListQuerySchema",
    "PostSearchHitSchema",
    "PostSearchQuerySchema",
    "PostWriteSchema",
    "ProfileUpdateSchema",
    "RefreshTokenSchema",
    "SignUpSchema",
    "TokenPairSchema",
    "UserPublicSchema",
]
