"""Factory Boy definition for :class:`threadboard.models.comment.Comment`."""

from __future__ import annotations

import factory

from tests.factories import BaseFactory
from tests.factories.post import PostFactory
from tests.factories.user import UserFactory
from threadboard.models.base import RecordState
from threadboard.models.comment import Comment


class CommentFactory(BaseFactory):
    """Root comment on a fresh post unless ``post``/``parent_id`` are given."""

    class Meta:
        model = Comment

    id = None
    post = factory.SubFactory(PostFactory)
    author = factory.SubFactory(UserFactory)
    parent_id = None
    content = factory.Faker("sentence")
    state = RecordState.ACTIVE

    class Params:
        deleted = factory.Trait(state=RecordState.DELETED)
