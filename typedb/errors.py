"""Exceptions raised by typedb."""

from __future__ import annotations


class TypedbError(Exception):
    """Base class for errors raised by typedb."""


class NotFoundError(TypedbError, LookupError):
    """Raised when a query returns no rows."""

    default_message = "typedb: record not found"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)