"""Like repository."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from threadboard.models.like import Like
from threadboard.repositories.base import BaseRepository


class LikeRepository(BaseRepository[Like]):
    model = Like

    def find_pair(self, user_id: int, post_id: int) -> Like | None:
        stmt = select(Like).where(Like.user_id == user_id, Like.post_id == post_id)
        return cast(Like | None, self.session.execute(stmt).scalars().first())
