"""Second pass repairing parent references within one kind."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from taxosync.domain.errors import RecordStoreError
from taxosync.domain.records import EXTERNAL_ID

from .reconcile import normalize_external_id

if TYPE_CHECKING:
    from collections.abc import Iterable

    from taxosync.domain.ports.persistence import RecordStore
    from taxosync.domain.records import ExternalRecord

log = getLogger(__name__)


@dataclass(slots=True)
class ParentLinker:
    """Point each stored child at its parent once both exist.

    Run after ``Reconciler.reconcile`` over the same batch: a child listed
    before its parent was created while the parent had no internal id yet.
    Children without a parent are linked as well. A parent absent from the
    store (for instance filtered out upstream) leaves the child untouched.
    """

    store: RecordStore

    def relink(self, kind: str, records: Iterable[ExternalRecord]) -> int:
        """Return the number of children whose parent reference was rewritten."""

        relinked = 0
        for record in records:
            child_id = normalize_external_id(record.external_id)
            parent_id = normalize_external_id(record.parent_external_id)
            if child_id is None or parent_id is None or child_id == parent_id:
                continue
            try:
                if self._relink(kind, child_id, parent_id):
                    relinked += 1
            except RecordStoreError as exc:
                log.error(
                    "Failed to set parent %s of %s record %s: %s", parent_id, kind, child_id, exc
                )
        return relinked

    def _relink(self, kind: str, child_id: str, parent_id: str) -> bool:
        child_internal_id = self.store.find_by_field(kind, EXTERNAL_ID, child_id)
        if child_internal_id is None:
            log.debug("No stored %s record %s to link", kind, child_id)
            return False
        parent_internal_id = self.store.find_by_field(kind, EXTERNAL_ID, parent_id)
        if parent_internal_id is None:
            log.debug("Parent %s of %s record %s is not stored", parent_id, kind, child_id)
            return False
        child = self.store.get(child_internal_id)
        if child is None or child.parent_internal_id == parent_internal_id:
            return False
        self.store.set_parent(child_internal_id, parent_internal_id)
        log.info("Linked %s record %s to parent %s", kind, child_id, parent_id)
        return True
