"""Attachment repository."""

from __future__ import annotations

from collections.abc import Iterable

from threadboard.models.file import File
from threadboard.models.post import Post
from threadboard.repositories.base import BaseRepository


class FileRepository(BaseRepository[File]):
    model = File

    def attach(self, post: Post, files: Iterable[File]) -> list[File]:
        """Append ``files`` to ``post`` and flush to assign their ids."""
        items = list(files)
        post.files.extend(items)
        self.flush()
        return items

    def replace_for_post(self, post: Post, files: Iterable[File]) -> list[File]:
        """Delete every current attachment of ``post``, then insert ``files``.

        The old rows are removed by the ``delete-orphan`` cascade and flushed
        before the new rows are staged.
        """
        post.files.clear()
        self.flush()
        return self.attach(post, files)
