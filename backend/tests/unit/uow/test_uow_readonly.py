"""Read-only unit of work: write guards, rollback and commit refusal."""

import pytest
from sqlalchemy import text

from tests.factories.user import UserFactory
from threadboard.models.user import User
from threadboard.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, db, session):
        """Flushing ORM changes inside the RO UoW raises."""
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(UserFactory.build())
            uow.session.flush()

    def test_blocks_core_dml(self, db, session):
        """Raw SQL DML is blocked inside the RO UoW."""
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(
                text("UPDATE users SET name = :name"), {"name": "mutated"}
            )

    def test_allows_reads(self, db, session):
        user = UserFactory()

        with ROuow() as uow:
            assert uow.users.get_active(user.id).email == user.email

    def test_disallows_commit(self, db, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_always_rolls_back_changes(self, db, session):
        """Attempted modifications never persist after the RO UoW exits."""
        user = UserFactory()
        user_id, original = user.id, user.name

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            u = uow.session.get(User, user_id)
            u.name = "mutated-in-ro"
            uow.session.flush()

        session.expire_all()
        assert session.get(User, user_id).name == original

    def test_guards_are_removed_on_exit(self, db, session):
        with ROuow():
            pass

        user = UserFactory()  # commits through the same session
        assert user.id is not None
