"""Error taxonomy for sync runs.

``SyncRunError`` subclasses are fatal for the run of one kind and propagate to
the caller. ``RecordStoreError`` and ``DetailFetchError`` concern a single
record or id and are caught by the sync components, which log them and move on.
"""

from __future__ import annotations


class SyncRunError(RuntimeError):
    """Raised when a sync run for a kind cannot proceed."""

    def __init__(self, message: str, *, kind: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind


class TransportFailure(SyncRunError):
    """The upstream API was unreachable or answered with a non-2xx status."""


class MalformedPayload(SyncRunError):
    """The upstream payload could not be decoded into the expected structure."""


class RecordStoreError(RuntimeError):
    """Raised by record stores when a read or write cannot be applied."""


class RecordNotFoundError(RecordStoreError):
    def __init__(self, internal_id: int) -> None:
        super().__init__(f"No stored record with internal id {internal_id}")
        self.internal_id = internal_id


class DetailFetchError(RuntimeError):
    """Raised when the secondary per-id lookup fails or returns unusable content."""

    def __init__(self, external_id: str, reason: str) -> None:
        super().__init__(f"Detail lookup for {external_id} failed: {reason}")
        self.external_id = external_id
        self.reason = reason
