"""
CommentService
==============

Create and soft-delete comments while keeping ``PostStats.comment_count`` in
step, each in a single transaction.
"""

from __future__ import annotations

import logging

from threadboard.models.comment import Comment
from threadboard.services._shared.base import AuthenticatedIdentity, BaseService
from threadboard.services._shared.dto import CreatedOut, MessageOut
from threadboard.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    NotFoundError,
)
from threadboard.services._shared.policies.common import is_foreign_parent
from threadboard.services.comments.dto import CommentIn

logger = logging.getLogger(__name__)


class CommentService(BaseService):
    """Application service for comments."""

    def create_comment(self, identity: AuthenticatedIdentity, dto: CommentIn) -> CreatedOut:
        """
        Add a comment (optionally a reply) and bump the post's comment counter.

        :raises AuthenticationError: If the author's account is gone.
        :raises NotFoundError: If the post is absent or deleted, or the parent
            comment does not exist.
        :raises BadRequestError: If the parent is deleted or on another post.
        """
        with self.atomic("Failed to create comment") as uow:
            author = self.active_user(
                uow.users, identity.id, AuthenticationError("User does not exist")
            )
            post = uow.posts.get_active(dto.post_id)
            if post is None:
                raise NotFoundError("Post", dto.post_id)

            if dto.parent_id is not None:
                parent = uow.comments.get(dto.parent_id)
                if parent is None:
                    raise NotFoundError("Comment", dto.parent_id)
                if is_foreign_parent(parent_post_id=parent.post_id, post_id=post.id):
                    raise BadRequestError("Parent comment belongs to another post")
                if parent.is_deleted:
                    raise BadRequestError("Cannot reply to a deleted comment")

            comment = uow.comments.add(
                Comment(
                    content=dto.content,
                    post_id=post.id,
                    author_id=author.id,
                    parent_id=dto.parent_id,
                )
            )
            uow.post_stats.increment(post.id, "comment_count", 1)
            comment_id = comment.id
            logger.info(
                "comment.created",
                extra={"user_id": author.id, "post_id": post.id, "comment_id": comment_id},
            )

        return CreatedOut(message="Comment created", id=comment_id)

    def delete_comment(self, identity: AuthenticatedIdentity, comment_id: int) -> MessageOut:
        """
        Soft-delete one's own comment and decrement the post's comment counter.

        Replies are kept; they show up as roots once their parent is gone.

        :raises AuthenticationError: If the caller's account is gone.
        :raises NotFoundError: If the comment is absent or already deleted.
        :raises AuthorizationError: If the caller did not write the comment.
        """
        with self.atomic("Failed to delete comment") as uow:
            actor = self.active_user(
                uow.users, identity.id, AuthenticationError("User does not exist")
            )
            comment = uow.comments.get_active(comment_id)
            if comment is None:
                raise NotFoundError("Comment", comment_id)
            self.ensure_owner(
                actor.id,
                comment.author_id,
                error=AuthorizationError("You can only delete your own comments"),
            )

            uow.comments.delete(comment)
            uow.post_stats.increment(comment.post_id, "comment_count", -1)
            logger.info(
                "comment.deleted",
                extra={"user_id": actor.id, "post_id": comment.post_id, "comment_id": comment_id},
            )

        return MessageOut(message="Comment deleted")
