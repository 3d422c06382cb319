"""Transactions that follow the call stack through a context variable."""

from __future__ import annotations

import contextlib
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager
from contextvars import ContextVar
from typing import Any, TypeVar

from sqlalchemy.orm import Session

T = TypeVar("T")


class TransactionManager(ABC):
    """Runs work in a transaction and hands out the session to use."""

    @abstractmethod
    def execute(self, fn: Callable[[], T]) -> T:
        """Run ``fn`` inside a transaction and return its result."""

    @abstractmethod
    def get_transaction(self) -> AbstractContextManager[Session]:
        """Return a context manager yielding the session for the current work."""


class SessionTransactionManager(TransactionManager):
    """A transaction manager over a SQLAlchemy session factory."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self._current: ContextVar[Session | None] = ContextVar(
            f"transaction_{id(self)}", default=None
        )

    def execute(self, fn: Callable[[], T]) -> T:
        """Run ``fn`` in a transaction: commit on success, roll back on error.

        Called inside another transaction, ``fn`` runs in a savepoint.
        """
        active = self._current.get()
        if active is not None:
            with active.begin_nested():
                return fn()
        with self._session_factory() as session, session.begin():
            token = self._current.set(session)
            try:
                return fn()
            finally:
                self._current.reset(token)

    @contextlib.contextmanager
    def get_transaction(self) -> Iterator[Session]:
        """Yield the active transaction's session, or a session of its own.

        A session of its own commits when the block ends and rolls back on error.
        """
        active = self._current.get()
        if active is not None:
            yield active
            return
        with self._session_factory() as session, session.begin():
            yield session


def _describe(manager: Any) -> str:
    return type(manager).__name__