"""Record store backed by a SQLAlchemy session."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from taxosync.adapters.sqlalchemy.mappings import stored_record_table
from taxosync.domain.errors import RecordNotFoundError, RecordStoreError
from taxosync.domain.records import EXTERNAL_ID, StoredRecord

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from taxosync.domain.records import FieldValue, FieldValues

log = getLogger(__name__)

_table = stored_record_table


class SqlAlchemyRecordStore:
    """``RecordStore`` over the ``stored_record`` table.

    Every write commits on its own so that a failing record never takes
    earlier writes of the same run down with it.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_field(self, kind: str, field_name: str, value: FieldValue) -> int | None:
        if field_name == EXTERNAL_ID:
            if value is None:
                return None
            stmt = (
                select(_table.c.internal_id)
                .where(_table.c.kind == kind)
                .where(_table.c.external_id == str(value))
            )
            return self._read(lambda: self.session.execute(stmt).scalar_one_or_none())
        for record in self.list_records(kind):
            if record.fields.get(field_name) == value:
                return record.internal_id
        return None

    def list_field_values(self, kind: str, field_name: str) -> Sequence[FieldValue]:
        if field_name == EXTERNAL_ID:
            stmt = (
                select(_table.c.external_id)
                .where(_table.c.kind == kind)
                .order_by(_table.c.internal_id)
            )
            return self._read(lambda: list(self.session.execute(stmt).scalars()))
        return [record.fields.get(field_name) for record in self.list_records(kind)]

    def get(self, internal_id: int) -> StoredRecord | None:
        stmt = select(_table).where(_table.c.internal_id == internal_id)
        row = self._read(lambda: self.session.execute(stmt).one_or_none())
        return None if row is None else _to_record(row)

    def list_records(self, kind: str) -> Sequence[StoredRecord]:
        stmt = select(_table).where(_table.c.kind == kind).order_by(_table.c.internal_id)
        rows = self._read(lambda: self.session.execute(stmt).all())
        return [_to_record(row) for row in rows]

    def create(
        self,
        kind: str,
        external_id: str,
        fields: FieldValues,
        *,
        parent_internal_id: int | None = None,
    ) -> int:
        stmt = insert(_table).values(
            kind=kind,
            external_id=external_id,
            fields=dict(fields),
            parent_internal_id=parent_internal_id,
        )

        def _insert() -> int:
            result = self.session.execute(stmt)
            (internal_id,) = result.inserted_primary_key or (None,)
            if internal_id is None:
                raise RecordStoreError(f"No id assigned to {kind} record {external_id}")
            return int(internal_id)

        return self._write(_insert)

    def update(self, internal_id: int, fields: FieldValues) -> None:
        current = self.get(internal_id)
        if current is None:
            raise RecordNotFoundError(internal_id)
        merged = {**current.fields, **fields}
        stmt = update(_table).where(_table.c.internal_id == internal_id).values(fields=merged)
        self._write(lambda: self.session.execute(stmt))

    def set_parent(self, internal_id: int, parent_internal_id: int | None) -> None:
        stmt = (
            update(_table)
            .where(_table.c.internal_id == internal_id)
            .values(parent_internal_id=parent_internal_id)
        )

        def _link() -> None:
            if self.session.execute(stmt).rowcount == 0:
                raise RecordNotFoundError(internal_id)

        self._write(_link)

    def delete(self, kind: str, internal_id: int) -> None:
        detach = (
            update(_table)
            .where(_table.c.parent_internal_id == internal_id)
            .values(parent_internal_id=None)
        )
        remove = (
            delete(_table)
            .where(_table.c.internal_id == internal_id)
            .where(_table.c.kind == kind)
        )

        def _delete() -> None:
            # sqlite ignores ON DELETE unless foreign keys are enabled
            self.session.execute(detach)
            if self.session.execute(remove).rowcount == 0:
                raise RecordNotFoundError(internal_id)

        self._write(_delete)

    def _read[T](self, operation: Callable[[], T]) -> T:
        try:
            return operation()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise RecordStoreError(f"Record store read failed: {exc}") from exc

    def _write[T](self, operation: Callable[[], T]) -> T:
        try:
            result = operation()
            self.session.commit()
        except RecordStoreError:
            self.session.rollback()
            raise
        except SQLAlchemyError as exc:
            self.session.rollback()
            log.debug("Rolled back failed write", exc_info=True)
            raise RecordStoreError(f"Record store write failed: {exc}") from exc
        return result


def _to_record(row: Row[Any]) -> StoredRecord:
    return StoredRecord(
        internal_id=row.internal_id,
        kind=row.kind,
        external_id=row.external_id,
        fields=dict(row.fields or {}),
        parent_internal_id=row.parent_internal_id,
    )


if TYPE_CHECKING:
    from taxosync.domain.ports.persistence import RecordStore

    def _store_check(session: Session) -> RecordStore:
        return SqlAlchemyRecordStore(session)
