"""Unit-of-work abstraction handing out a record store for one run."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from taxosync.domain.ports.persistence import RecordStore


@runtime_checkable
class RecordUnitOfWork(Protocol):
    """Scope owning the store connection for a sync run.

    Stores commit each write on their own; leaving the scope releases the
    connection and discards anything left uncommitted after an error.
    """

    @property
    def records(self) -> RecordStore: ...

    def __enter__(self) -> RecordUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...
