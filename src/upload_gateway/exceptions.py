"""Application errors and translation of SQLAlchemy failures."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from sqlalchemy import exc as sa_exc

__all__ = [
    "AppError",
    "RepositoryError",
    "IntegrityConstraintViolation",
    "DuplicateKeyError",
    "DatabaseOperationError",
    "QueueUnavailableError",
    "handle_sqlalchemy_errors",
    "handle_queue_errors",
]


class AppError(Exception):
    """Base class for application specific errors."""


class RepositoryError(AppError):
    """Base class for persistence layer failures."""


class IntegrityConstraintViolation(RepositoryError):
    """Raised when a database constraint is violated."""


class DuplicateKeyError(IntegrityConstraintViolation):
    """Raised when a unique column (e.g. the storage key) already holds the value."""


class DatabaseOperationError(RepositoryError):
    """Raised for unexpected database errors."""


class QueueUnavailableError(AppError):
    """Raised when the job queue cannot accept a submission."""


@dataclass(slots=True)
class _ErrorScope:
    entity: str | None = None
    identifier: str | None = None

    def describe(self, message: str) -> str:
        if self.entity and self.identifier:
            return f"{self.entity} '{self.identifier}': {message}"
        if self.entity:
            return f"{self.entity}: {message}"
        return message


def _translate(exc: sa_exc.DBAPIError, scope: _ErrorScope) -> RepositoryError:
    if isinstance(exc, sa_exc.IntegrityError):
        # sqlite: "UNIQUE constraint failed"; postgres: "violates unique constraint"
        if "unique" in str(exc.orig).lower():
            return DuplicateKeyError(scope.describe("unique value already stored"))
        return IntegrityConstraintViolation(scope.describe("integrity constraint violated"))
    return DatabaseOperationError(scope.describe("database operation failed"))


@contextmanager
def handle_sqlalchemy_errors(
    *, entity: str | None = None, identifier: str | None = None
) -> Iterator[None]:
    """Translate driver-level SQLAlchemy errors into repository errors."""

    scope = _ErrorScope(entity, identifier)
    try:
        yield
    except sa_exc.DBAPIError as exc:
        raise _translate(exc, scope) from exc


@contextmanager
def handle_queue_errors(job_name: str) -> Iterator[None]:
    """Any SQLAlchemy failure while submitting means the queue is unavailable."""

    try:
        yield
    except sa_exc.SQLAlchemyError as exc:
        raise QueueUnavailableError(f"failed to enqueue job '{job_name}'") from exc
