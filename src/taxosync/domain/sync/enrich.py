"""Per-id detail lookups folded into targeted record updates."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

from taxosync.domain.errors import DetailFetchError, RecordStoreError
from taxosync.domain.ports.fetching import FetchFailure
from taxosync.domain.records import EXTERNAL_ID

from .compare import diff_fields
from .reconcile import normalize_external_id

if TYPE_CHECKING:
    from collections.abc import Iterable

    from taxosync.domain.ports.fetching import ApiClient, DetailFetcher
    from taxosync.domain.ports.persistence import RecordStore
    from taxosync.domain.records import FieldMapping, FieldValue, FieldValues

log = getLogger(__name__)

type DetailDecoder = Callable[[object], FieldValues]


@dataclass(slots=True)
class ApiDetailFetcher:
    """Fetch one detail document through an ``ApiClient`` and decode it.

    The id is percent-encoded before it is placed in ``url_template``.
    """

    api: ApiClient
    url_template: str
    decode: DetailDecoder

    def __call__(self, external_id: str) -> FieldValues:
        url = self.url_template.format(external_id=quote(external_id, safe=""))
        outcome = self.api.fetch(url, "GET")
        if isinstance(outcome, FetchFailure):
            raise DetailFetchError(external_id, outcome.reason)
        try:
            return self.decode(json.loads(outcome.text))
        except ValueError as exc:
            raise DetailFetchError(external_id, f"unreadable payload: {exc}") from exc


@dataclass(slots=True)
class DetailEnricher:
    """Update stored records with fields only available from a per-id lookup.

    Lookups run one at a time and are attempted once; a failing id is logged
    and skipped.
    """

    store: RecordStore
    fetch_details: DetailFetcher
    field_mapping: FieldMapping

    def enrich_details(self, kind: str, external_ids: Iterable[FieldValue]) -> int:
        """Return the number of stored records that were updated."""

        updated = 0
        for value in external_ids:
            external_id = normalize_external_id(value)
            if external_id is None:
                continue
            if self._enrich(kind, external_id):
                updated += 1
        log.info("Updated details of %s %s records", updated, kind)
        return updated

    def _enrich(self, kind: str, external_id: str) -> bool:
        try:
            internal_id = self.store.find_by_field(kind, EXTERNAL_ID, external_id)
            current = self.store.get(internal_id) if internal_id is not None else None
        except RecordStoreError as exc:
            log.error("Failed to load %s record %s: %s", kind, external_id, exc)
            return False
        if current is None:
            log.debug("No stored %s record %s to enrich", kind, external_id)
            return False

        try:
            details = self.fetch_details(external_id)
        except DetailFetchError as exc:
            log.warning("Skipping details of %s record %s: %s", kind, external_id, exc.reason)
            return False

        changes = diff_fields(current.fields, self.field_mapping.apply(details))
        if not changes:
            return False
        try:
            self.store.update(current.internal_id, changes)
        except RecordStoreError as exc:
            log.error("Failed to update details of %s record %s: %s", kind, external_id, exc)
            return False
        log.info(
            "Updated details of %s record %s (%s)", kind, external_id, ", ".join(sorted(changes))
        )
        return True
