"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from tests.factories.user import UserFactory
from threadboard.models import User
from threadboard.uow import SQLAlchemyUnitOfWork


def _count(session) -> int:
    return session.execute(select(func.count(User.id))).scalar_one()


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, db, session):
        """
        GIVEN a writer UoW
        WHEN a user is added inside the context and the block exits cleanly
        THEN the transaction is committed and the row is visible afterwards.
        """
        initial = _count(session)

        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())

        assert _count(session) == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, db, session):
        """
        GIVEN a writer UoW
        WHEN an exception is raised inside the context
        THEN the transaction is rolled back and no rows are persisted.
        """
        initial = _count(session)

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())
            raise RuntimeError("boom")

        assert _count(session) == initial

    def test_repositories_share_the_session(self, db, session):
        with SQLAlchemyUnitOfWork() as uow:
            assert uow.users.session is uow.posts.session is uow.likes.session
