"""Cancellable cursor over a lazily produced step sequence."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class UserInterrupt(Exception):
    """Raised into a traversal when the operator chooses to quit."""

    def __init__(self, message: str = "Interrupted by user") -> None:
        super().__init__(message)


class StepCursor(Generic[T]):
    """Iterator wrapper exposing ``next`` and ``cancel``.

    ``cancel`` closes the underlying generator chain so no further steps are
    computed, and makes the next pull raise the cancellation exception.  The
    exception is raised exactly once; afterwards the cursor is exhausted.
    """

    def __init__(self, steps: Iterator[T]) -> None:
        self._steps: Optional[Iterator[T]] = iter(steps)
        self._pending: Optional[BaseException] = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def __iter__(self) -> "StepCursor[T]":
        return self

    def __next__(self) -> T:
        if self._pending is not None:
            exc, self._pending = self._pending, None
            raise exc
        if self._steps is None:
            raise StopIteration
        return next(self._steps)

    def cancel(self, exc: Optional[BaseException] = None) -> None:
        """Stop the traversal at the current step.

        Args:
            exc: Exception delivered on the next pull.  Defaults to
                ``UserInterrupt``.
        """
        if self._cancelled:
            return
        self._cancelled = True
        self._pending = exc if exc is not None else UserInterrupt()
        steps, self._steps = self._steps, None
        close = getattr(steps, "close", None)
        if close is not None:
            close()
