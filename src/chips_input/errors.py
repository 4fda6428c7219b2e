"""Exceptions raised by the chips input controller."""

from typing import Optional


class ChipsInputError(Exception):
    """Base class for all chips input errors."""


class FetchError(ChipsInputError):
    """The suggestion fetch collaborator failed.

    Raised to the caller of ``load_suggestions``. The previously published
    suggestion state is left untouched.
    """

    def __init__(self, message: str, query: Optional[str] = None):
        super().__init__(message)
        self.query = query


class DisposedStateError(ChipsInputError):
    """An operation was invoked on a disposed controller or stream."""

    def __init__(self, name: str, operation: str):
        super().__init__(f"Cannot {operation}: '{name}' has been disposed")
        self.name = name
        self.operation = operation
