"""Factories for posts, their stats row and attachments."""

from __future__ import annotations

import factory

from tests.factories import BaseFactory
from tests.factories.user import UserFactory
from threadboard.models.base import RecordState
from threadboard.models.file import File
from threadboard.models.post import Post, PostStats


class PostFactory(BaseFactory):
    """Persisted post with a zeroed :class:`PostStats` row.

    Pass ``stats=None`` to skip the stats row, or ``stats__like_count=3`` to
    seed counters.
    """

    class Meta:
        model = Post

    id = None
    author = factory.SubFactory(UserFactory)
    title = factory.Faker("sentence", nb_words=4)
    content = factory.Faker("paragraph")
    state = RecordState.ACTIVE

    stats = factory.RelatedFactory(
        "tests.factories.post.PostStatsFactory", factory_related_name="post"
    )

    class Params:
        deleted = factory.Trait(state=RecordState.DELETED)


class PostStatsFactory(BaseFactory):
    class Meta:
        model = PostStats

    id = None
    post = factory.SubFactory(PostFactory, stats=None)
    view_count = 0
    like_count = 0
    comment_count = 0


class FileFactory(BaseFactory):
    class Meta:
        model = File

    id = None
    post = factory.SubFactory(PostFactory)
    url = factory.Sequence(lambda n: f"https://cdn.example.com/files/{n}.png")
    original_name = factory.Sequence(lambda n: f"image-{n}.png")
    mime_type = "image/png"
    size = 1024
