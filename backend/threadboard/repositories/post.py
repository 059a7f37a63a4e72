"""Post and post-stats repositories, including keyset listings."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import Select, and_, or_, select, update

from threadboard.models.base import RecordState
from threadboard.models.post import Post, PostStats
from threadboard.models.user import User
from threadboard.repositories.base import BaseRepository

SEARCH_TYPES = ("title_data", "nickname")


class PostRepository(BaseRepository[Post]):
    """Persistence-only repository for :class:`Post`."""

    model = Post

    def _updatable_fields(self):
        return {"title", "content"}

    # ---------------------------- Visibility ----------------------------

    def _visible(self, stmt: Select[Any]) -> Select[Any]:
        """Keep live posts whose author is live as well."""
        return self._live(stmt.join(User, Post.author_id == User.id)).where(
            User.state == RecordState.ACTIVE
        )

    def get_visible(self, post_id: int) -> Post | None:
        """Return a live post by a live author, else ``None``."""
        stmt = self._visible(select(Post).where(Post.id == post_id))
        return cast(Post | None, self.session.execute(stmt).scalars().first())

    def get_active(self, post_id: int) -> Post | None:
        """Return a live post regardless of its author's state."""
        stmt = self._live(select(Post).where(Post.id == post_id))
        return cast(Post | None, self.session.execute(stmt).scalars().first())

    def is_live_owned(self, post_id: int, author_id: int) -> bool:
        """``True`` when ``post_id`` is one of ``author_id``'s live posts."""
        stmt = self._live(
            select(Post.id).where(Post.id == post_id, Post.author_id == author_id)
        )
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Listings ----------------------------

    def list_by_author(
        self,
        author_id: int,
        *,
        sort_by: str = "id",
        cursor: int | None = None,
        limit: int = 10,
    ) -> list[Post]:
        """Keyset page of an author's live posts, newest or most liked first.

        ``cursor`` must already be validated as one of the author's live posts;
        rows strictly after it in the chosen order are returned.
        """
        stmt = self._live(select(Post).where(Post.author_id == author_id))

        if sort_by == "like":
            stmt = stmt.join(PostStats, PostStats.post_id == Post.id)
            if cursor is not None:
                boundary = (
                    select(PostStats.like_count)
                    .where(PostStats.post_id == cursor)
                    .scalar_subquery()
                )
                stmt = stmt.where(
                    or_(
                        PostStats.like_count < boundary,
                        and_(PostStats.like_count == boundary, Post.id < cursor),
                    )
                )
            stmt = stmt.order_by(PostStats.like_count.desc(), Post.id.desc())
        else:
            if cursor is not None:
                stmt = stmt.where(Post.id < cursor)
            stmt = stmt.order_by(Post.id.desc())

        return list(self.session.execute(stmt.limit(limit)).scalars().all())

    def search(self, query: str, *, search_type: str, limit: int = 10) -> list[Post]:
        """Case-insensitive substring search over visible posts.

        :param search_type: ``"title_data"`` matches title or content,
            ``"nickname"`` matches the author's nickname.
        :raises ValueError: On an unknown ``search_type``.
        """
        stmt = self._visible(select(Post))
        if search_type == "title_data":
            stmt = stmt.where(
                or_(
                    Post.title.icontains(query, autoescape=True),
                    Post.content.icontains(query, autoescape=True),
                )
            )
        elif search_type == "nickname":
            stmt = stmt.where(User.nickname.icontains(query, autoescape=True))
        else:
            raise ValueError(f"Unknown search type: {search_type}")
        stmt = stmt.order_by(Post.id.desc()).limit(limit)
        return list(self.session.execute(stmt).scalars().all())


class PostStatsRepository(BaseRepository[PostStats]):
    """Counters attached to posts. Never overwritten as a whole row."""

    model = PostStats

    def get_by_post_id(self, post_id: int) -> PostStats | None:
        stmt = select(PostStats).where(PostStats.post_id == post_id)
        return cast(PostStats | None, self.session.execute(stmt).scalars().first())

    def create_for(self, post_id: int) -> PostStats:
        """Insert the zero-initialized stats row of a new post."""
        return self.add(PostStats(post_id=post_id, view_count=0, like_count=0, comment_count=0))

    def increment(self, post_id: int, field: str, amount: int = 1) -> int:
        """Atomically add ``amount`` (may be negative) to one counter.

        Emits ``UPDATE post_stats SET <field> = <field> + :amount`` so
        concurrent writers never lose updates. Already-loaded ``PostStats``
        instances are left untouched.

        :returns: Number of rows updated (0 when no stats row exists).
        :raises ValueError: If ``field`` is not a counter column.
        """
        if field not in PostStats.COUNTERS:
            raise ValueError(f"Unknown counter: {field}")
        column = getattr(PostStats, field)
        stmt = (
            update(PostStats)
            .where(PostStats.post_id == post_id)
            .values({column: column + amount})
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return int(result.rowcount or 0)
