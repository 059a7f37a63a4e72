"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

import logging

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction, scoped_session

from threadboard.core.extensions import db
from threadboard.repositories import (
    CommentRepository,
    FileRepository,
    LikeRepository,
    PostRepository,
    PostStatsRepository,
    UserRepository,
)
from threadboard.uow.base import UnitOfWork

logger = logging.getLogger(__name__)


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.posts = PostRepository(session=self.session)
        self.post_stats = PostStatsRepository(session=self.session)
        self.files = FileRepository(session=self.session)
        self.comments = CommentRepository(session=self.session)
        self.likes = LikeRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    The same session is shared across all repositories for a consistent
    transaction. Leaving the block normally commits; leaving it through an
    exception rolls back every pending change and re-raises.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # No-op: the session is lazily started on the first statement.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    This UoW:
    - Sets the isolation level and ``READ ONLY`` flag on engines that support
      ``SET TRANSACTION`` (PostgreSQL, MySQL/MariaDB).
    - Installs portable write-guards and always rolls back what it owns.
    - Disallows ``commit()``.

    Parameters
    ----------
    isolation_level:
        Optional transaction isolation level hint, e.g. ``"READ COMMITTED"``.
    enforce_db_readonly:
        If ``True`` (default), applies ``SET TRANSACTION READ ONLY`` when supported.

    Notes
    -----
    *SQLite*: neither directive exists; the write-guards still prevent writes.
    """

    _WRITE_PREFIXES = (
        "insert",
        "update",
        "delete",
        "merge",
        "alter",
        "drop",
        "truncate",
        "create",
        "replace",
        "grant",
        "revoke",
    )
    _SET_TRANSACTION_DIALECTS = ("postgresql", "mysql", "mariadb")

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly

        self._conn: Connection | None = None
        self._txn: SessionTransaction | None = None
        self._listeners_installed = False

    def _session_instance(self) -> Session:
        """Resolve the concrete session behind a ``scoped_session`` proxy."""
        if isinstance(self.session, scoped_session):
            return self.session()
        return self.session

    # ----------------------------- Context Manager -----------------------------

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Enter a read scope, owning a fresh transaction when possible.

        If the session already runs a transaction (``InvalidRequestError``),
        the scope attaches to it instead. In that case the guards still block
        flushes and DML, but ``SET TRANSACTION`` is skipped and nothing is
        rolled back on exit.
        """
        self._txn = None
        try:
            self._txn = self.session.begin()
        except InvalidRequestError:
            pass

        self._conn = self.session.connection()
        dialect = self._conn.dialect.name

        self._install_listeners()

        if self._txn is not None and dialect in self._SET_TRANSACTION_DIALECTS:
            try:
                if self.isolation_level:
                    iso = self.isolation_level.upper().strip()
                    self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {iso}"))
                if self.enforce_db_readonly:
                    self.session.execute(text("SET TRANSACTION READ ONLY"))
            except SQLAlchemyError as exc:
                logger.warning(
                    "SET TRANSACTION directives failed (%s). Falling back to guards-only.", exc
                )

        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        """Always remove guards. Roll back only if we own the transaction."""
        try:
            if self._txn is not None and self._txn.is_active:
                self._txn.rollback()
        finally:
            self._txn = None
            self._remove_listeners()
            self._conn = None

    # ----------------------------- Public API ---------------------------------

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Guards & Listeners --------------------------

    def _install_listeners(self) -> None:
        """Install ORM/db-level listeners to prevent any write attempt."""
        if self._listeners_installed:
            return

        def _before_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError(
                    "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
                )

        def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            first_token = statement.lstrip().split(None, 1)[0].lower() if statement else ""
            if first_token.startswith(self._WRITE_PREFIXES):
                raise RuntimeError(
                    f"Read-only UnitOfWork: SQL statement blocked: {first_token.upper()}"
                )

        self._guarded_session = self._session_instance()
        event.listen(self._guarded_session, "before_flush", _before_flush)
        event.listen(self._conn, "before_cursor_execute", _before_cursor_execute)

        self._ro_before_flush = _before_flush
        self._ro_before_cursor_execute = _before_cursor_execute
        self._listeners_installed = True

    def _remove_listeners(self) -> None:
        if not self._listeners_installed:
            return
        event.remove(self._guarded_session, "before_flush", self._ro_before_flush)
        event.remove(self._conn, "before_cursor_execute", self._ro_before_cursor_execute)
        self._listeners_installed = False
