"""
LikeService
===========

At most one like per (user, post). ``PostStats.like_count`` is authoritative
and changes in the same transaction as the like row.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from threadboard.models.like import Like
from threadboard.services._shared.base import AuthenticatedIdentity, BaseService
from threadboard.services._shared.dto import MessageOut
from threadboard.services._shared.errors import AuthorizationError, NotFoundError

logger = logging.getLogger(__name__)


class LikeService(BaseService):
    """Application service toggling likes on posts."""

    def _check_targets(self, uow, identity: AuthenticatedIdentity, post_id: int) -> None:
        if uow.posts.get_active(post_id) is None:
            raise NotFoundError("Post", post_id)
        self.active_user(uow.users, identity.id, NotFoundError("User", identity.id))

    def like(self, identity: AuthenticatedIdentity, post_id: int) -> MessageOut:
        """
        :raises NotFoundError: If the post or the caller is absent or deleted.
        :raises AuthorizationError: If the caller already liked the post,
            including when a concurrent request wins the unique constraint.
        """
        with self.atomic("Failed to like post") as uow:
            self._check_targets(uow, identity, post_id)
            if uow.likes.find_pair(identity.id, post_id) is not None:
                raise AuthorizationError("Post already liked")
            try:
                uow.likes.add(Like(user_id=identity.id, post_id=post_id))
            except IntegrityError as exc:
                raise AuthorizationError("Post already liked") from exc
            uow.post_stats.increment(post_id, "like_count", 1)
            logger.info("like.created", extra={"user_id": identity.id, "post_id": post_id})

        return MessageOut(message="Post liked")

    def unlike(self, identity: AuthenticatedIdentity, post_id: int) -> MessageOut:
        """
        :raises NotFoundError: If the post, the caller or the like is missing.
        """
        with self.atomic("Failed to unlike post") as uow:
            self._check_targets(uow, identity, post_id)
            like = uow.likes.find_pair(identity.id, post_id)
            if like is None:
                raise NotFoundError("Like", post_id)
            uow.likes.delete(like)
            uow.post_stats.increment(post_id, "like_count", -1)
            logger.info("like.deleted", extra={"user_id": identity.id, "post_id": post_id})

        return MessageOut(message="Like removed")
