"""Ports for the record store the sync components write to."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from taxosync.domain.records import FieldValue, FieldValues, StoredRecord


@runtime_checkable
class RecordStore(Protocol):
    """Kind-scoped key-value persistence addressed by internal id.

    Field names passed to the lookup methods may be any stored field name or
    ``taxosync.domain.records.EXTERNAL_ID``. Failures raise
    ``taxosync.domain.errors.RecordStoreError``.
    """

    def find_by_field(self, kind: str, field_name: str, value: FieldValue) -> int | None: ...

    def list_field_values(self, kind: str, field_name: str) -> Sequence[FieldValue]: ...

    def get(self, internal_id: int) -> StoredRecord | None: ...

    def list_records(self, kind: str) -> Sequence[StoredRecord]: ...

    def create(
        self,
        kind: str,
        external_id: str,
        fields: FieldValues,
        *,
        parent_internal_id: int | None = None,
    ) -> int: ...

    def update(self, internal_id: int, fields: FieldValues) -> None: ...

    def set_parent(self, internal_id: int, parent_internal_id: int | None) -> None: ...

    def delete(self, kind: str, internal_id: int) -> None: ...
