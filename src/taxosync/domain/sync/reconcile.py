"""Create/update/delete reconciliation of one kind against a record store."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from taxosync.domain.errors import RecordNotFoundError, RecordStoreError
from taxosync.domain.records import EXTERNAL_ID, is_blank
from taxosync.domain.report import RecordAction, RecordOutcome, SyncReport

from .compare import diff_fields

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from taxosync.domain.ports.persistence import RecordStore
    from taxosync.domain.records import ExternalRecord, FieldMapping, FieldValue, FieldValues

log = getLogger(__name__)


@dataclass(slots=True)
class Reconciler:
    """Make the records stored under a kind match an upstream batch.

    The batch is the source of truth: ids missing from it are deleted. Each
    record is applied on its own, so a store failure only costs that record.
    """

    store: RecordStore

    def reconcile(
        self,
        kind: str,
        records: Sequence[ExternalRecord],
        field_mapping: FieldMapping,
    ) -> SyncReport:
        report = SyncReport(kind=kind)
        stored_ids = _unique_ids(self.store.list_field_values(kind, EXTERNAL_ID))
        seen: set[str] = set()

        for record in records:
            outcome = self._apply(kind, record, field_mapping)
            report.add(outcome)
            if outcome.action is not RecordAction.SKIPPED and outcome.external_id is not None:
                seen.add(outcome.external_id)

        for external_id in stored_ids:
            if external_id in seen:
                continue
            outcome = self._delete(kind, external_id)
            if outcome is not None:
                report.add(outcome)

        log.info(
            "Reconciled %s: created=%s, updated=%s, deleted=%s, skipped=%s, failed=%s",
            kind,
            report.created,
            report.updated,
            report.deleted,
            report.skipped,
            report.failed,
        )
        return report

    def _apply(
        self,
        kind: str,
        record: ExternalRecord,
        field_mapping: FieldMapping,
    ) -> RecordOutcome:
        external_id = normalize_external_id(record.external_id)
        if external_id is None:
            log.warning("Skipping %s record without external id: %s", kind, dict(record.fields))
            return RecordOutcome.skipped(None, "missing external id")

        values = field_mapping.apply(record.fields)
        missing = field_mapping.missing_required(values)
        if missing:
            reason = f"missing required fields: {', '.join(missing)}"
            log.warning("Skipping %s record %s, %s: %s", kind, external_id, reason, dict(values))
            return RecordOutcome.skipped(external_id, reason)

        try:
            internal_id = self.store.find_by_field(kind, EXTERNAL_ID, external_id)
            if internal_id is None:
                return self._create(kind, external_id, values, record.parent_external_id)
            return self._update(kind, internal_id, external_id, values)
        except RecordStoreError as exc:
            log.error("Failed to import %s record %s: %s", kind, external_id, exc)
            return RecordOutcome.failed(external_id, str(exc))

    def _create(
        self,
        kind: str,
        external_id: str,
        values: FieldValues,
        parent_external_id: str | None,
    ) -> RecordOutcome:
        parent_internal_id = None
        if parent_external_id:
            # a parent further down the batch is linked by ParentLinker instead
            parent_internal_id = self.store.find_by_field(kind, EXTERNAL_ID, parent_external_id)
        self.store.create(kind, external_id, values, parent_internal_id=parent_internal_id)
        log.info("Created %s record %s", kind, external_id)
        return RecordOutcome(external_id, RecordAction.CREATED)

    def _update(
        self,
        kind: str,
        internal_id: int,
        external_id: str,
        values: FieldValues,
    ) -> RecordOutcome:
        current = self.store.get(internal_id)
        if current is None:
            raise RecordNotFoundError(internal_id)
        changes = diff_fields(current.fields, values)
        if not changes:
            return RecordOutcome(external_id, RecordAction.UNCHANGED)
        self.store.update(internal_id, changes)
        log.info("Updated %s record %s (%s)", kind, external_id, ", ".join(sorted(changes)))
        return RecordOutcome(external_id, RecordAction.UPDATED)

    def _delete(self, kind: str, external_id: str) -> RecordOutcome | None:
        try:
            internal_id = self.store.find_by_field(kind, EXTERNAL_ID, external_id)
            if internal_id is None:
                return None
            self.store.delete(kind, internal_id)
        except RecordStoreError as exc:
            log.error("Failed to delete %s record %s: %s", kind, external_id, exc)
            return RecordOutcome.failed(external_id, str(exc))
        log.info("Deleted %s record %s", kind, external_id)
        return RecordOutcome(external_id, RecordAction.DELETED)


def normalize_external_id(value: FieldValue) -> str | None:
    """Return ``value`` as a stripped string id, or ``None`` when it is blank."""

    if is_blank(value) or isinstance(value, bool):
        return None
    return str(value).strip()


def _unique_ids(values: Iterable[FieldValue]) -> list[str]:
    ids: list[str] = []
    known: set[str] = set()
    for value in values:
        external_id = normalize_external_id(value)
        if external_id is None or external_id in known:
            continue
        known.add(external_id)
        ids.append(external_id)
    return ids
