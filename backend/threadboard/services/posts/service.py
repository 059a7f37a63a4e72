"""
PostService
===========

Use cases of the post aggregate (post row, attachments, stats row):

- create / update / soft-delete with ownership checks
- detail read, which also counts a view
- keyset listing of the caller's own posts
- substring search
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from threadboard.models.file import ALLOWED_MIME_TYPES, File
from threadboard.models.post import Post
from threadboard.repositories.post import SEARCH_TYPES
from threadboard.services._shared.base import AuthenticatedIdentity, BaseService
from threadboard.services._shared.dto import CreatedOut, MessageOut
from threadboard.services._shared.errors import (
    AuthenticationError,
    BadRequestError,
    IntegrityFaultError,
    NotFoundError,
)
from threadboard.services.posts._converters import (
    build_comment_tree,
    normalize_size,
    to_file_out,
    to_list_item,
    to_search_hit,
)
from threadboard.services.posts.dto import (
    AuthorOut,
    FileIn,
    PostDetailOut,
    PostIn,
    PostListItemOut,
    PostSearchHitOut,
    StatsOut,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
DEFAULT_MAX_FILES = 10
SORT_KEYS = ("id", "like")


class PostService(BaseService):
    """
    Application service for posts.

    Every multi-row mutation runs inside :meth:`BaseService.atomic`, so a post
    never exists without its stats row and an update never leaves a partial
    attachment set behind.
    """

    def __init__(
        self,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_files: int = DEFAULT_MAX_FILES,
    ) -> None:
        super().__init__()
        self.page_size = page_size
        self.max_files = max_files

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #

    def _check_files(self, files: Sequence[FileIn]) -> None:
        if len(files) > self.max_files:
            raise BadRequestError(f"A post can have at most {self.max_files} files")
        for f in files:
            if f.mime_type not in ALLOWED_MIME_TYPES:
                raise BadRequestError(f"MIME type not allowed: {f.mime_type}")

    @staticmethod
    def _to_models(files: Sequence[FileIn]) -> list[File]:
        return [
            File(
                url=f.url,
                original_name=f.original_name,
                mime_type=f.mime_type,
                size=normalize_size(f.size),
            )
            for f in files
        ]

    # --------------------------------------------------------------------- #
    # Commands
    # --------------------------------------------------------------------- #

    def create_post(self, identity: AuthenticatedIdentity, dto: PostIn) -> CreatedOut:
        """
        Insert a post with its files and a zeroed stats row in one transaction.

        :raises NotFoundError: If the author's account is gone.
        :raises BadRequestError: On more than ``max_files`` attachments.
        :raises InternalServiceError: If the transaction fails; nothing is kept.
        """
        with self.atomic("Failed to create post") as uow:
            author = self.active_user(uow.users, identity.id, NotFoundError("User", identity.id))
            self._check_files(dto.files)

            post = uow.posts.add(Post(title=dto.title, content=dto.content, author_id=author.id))
            uow.files.attach(post, self._to_models(dto.files))
            uow.post_stats.create_for(post.id)
            post_id = post.id
            logger.info("post.created", extra={"user_id": author.id, "post_id": post_id})

        return CreatedOut(message="Post created", id=post_id)

    def update_post(
        self, identity: AuthenticatedIdentity, post_id: int, dto: PostIn
    ) -> MessageOut:
        """
        Replace title, content and the whole attachment set.

        Missing actor, missing or deleted post and foreign ownership all
        surface as the same ``NotFoundError``.
        """
        with self.atomic("Failed to update post") as uow:
            actor = self.active_user(uow.users, identity.id, NotFoundError("User", identity.id))
            post = uow.posts.get_active(post_id)
            if post is None:
                raise NotFoundError("Post", post_id)
            self.ensure_owner(actor.id, post.author_id, error=NotFoundError("Post", post_id))
            self._check_files(dto.files)

            uow.files.replace_for_post(post, self._to_models(dto.files))
            uow.posts.assign_updates(post, {"title": dto.title, "content": dto.content})
            logger.info("post.updated", extra={"user_id": actor.id, "post_id": post_id})

        return MessageOut(message="Post updated")

    def delete_post(self, identity: AuthenticatedIdentity, post_id: int) -> MessageOut:
        """
        Soft-delete a post. Comments and files are left in place.

        :raises NotFoundError: If the post is absent or already deleted.
        :raises AuthenticationError: If the caller is not the author.
        """
        with self.atomic("Failed to delete post") as uow:
            post = uow.posts.get(post_id)
            if post is None:
                raise NotFoundError("Post", post_id)
            self.ensure_owner(
                identity.id,
                post.author_id,
                error=AuthenticationError("You can only delete your own posts"),
            )
            if post.is_deleted:
                raise NotFoundError("Post", post_id)
            uow.posts.delete(post)
            logger.info("post.deleted", extra={"user_id": identity.id, "post_id": post_id})

        return MessageOut(message="Post deleted")

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    def get_post(self, post_id: int) -> PostDetailOut:
        """
        Return a post with files, stats and threaded comments, counting a view.

        The returned ``view_count`` is the stored value before this read plus
        one. Comments by deleted authors are dropped; their replies become
        roots.

        :raises NotFoundError: If the post or its author is absent or deleted.
        :raises IntegrityFaultError: If the post has no stats row.
        """
        with self.atomic("Failed to load post") as uow:
            post = uow.posts.get_visible(post_id)
            if post is None:
                raise NotFoundError("Post", post_id)

            stats = uow.post_stats.get_by_post_id(post.id)
            if stats is None:
                raise IntegrityFaultError("Post statistics are missing")
            views_before = stats.view_count
            uow.post_stats.increment(post.id, "view_count", 1)

            comments = uow.comments.list_thread(post.id)
            return PostDetailOut(
                id=post.id,
                title=post.title,
                content=post.content,
                created_at=post.created_at,
                author=AuthorOut(id=post.author.id, nickname=post.author.nickname),
                files=[to_file_out(f) for f in post.files],
                stats=StatsOut(
                    post_id=post.id,
                    view_count=views_before + 1,
                    like_count=stats.like_count,
                    comment_count=stats.comment_count,
                ),
                comments=build_comment_tree(comments),
            )

    def list_posts(
        self,
        identity: AuthenticatedIdentity,
        *,
        sort_by: str = "id",
        cursor: int | None = None,
    ) -> list[PostListItemOut]:
        """
        Keyset page of the caller's live posts.

        :param sort_by: ``"id"`` (newest first) or ``"like"`` (most liked first).
        :param cursor: Last post id of the previous page. Anything that is not
            one of the caller's live posts restarts from the first page.
        :raises AuthenticationError: If the caller's account is gone.
        """
        if sort_by not in SORT_KEYS:
            raise BadRequestError(f"Unknown sort key: {sort_by}")

        with self.ro_uow() as uow:
            self.active_user(uow.users, identity.id, AuthenticationError("User does not exist"))
            if cursor is not None and not uow.posts.is_live_owned(cursor, identity.id):
                cursor = None
            posts = uow.posts.list_by_author(
                identity.id, sort_by=sort_by, cursor=cursor, limit=self.page_size
            )
            return [to_list_item(p) for p in posts]

    def search_posts(self, query: str, search_type: str) -> list[PostSearchHitOut]:
        """
        Case-insensitive substring search, newest first, one page.

        :param search_type: ``"title_data"`` or ``"nickname"``.
        :raises BadRequestError: On an empty query or unknown type.
        """
        if not query or not query.strip():
            raise BadRequestError("Search query is required")
        if search_type not in SEARCH_TYPES:
            raise BadRequestError(f"Unknown search type: {search_type}")

        with self.ro_uow() as uow:
            posts = uow.posts.search(query.strip(), search_type=search_type, limit=self.page_size)
            return [to_search_hit(p) for p in posts]
