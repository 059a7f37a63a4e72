from threadboard.uow.base import UnitOfWork
from threadboard.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

__all__ = ["UnitOfWork", "SQLAlchemyUnitOfWork", "SQLAlchemyReadOnlyUnitOfWork"]
