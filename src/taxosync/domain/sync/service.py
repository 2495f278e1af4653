"""Run the sync pipeline for configured kinds.

Fetch, decode, flatten, reconcile and relink one kind, then optionally enrich
its stored records with per-id details. Transport and payload problems abort
the kind with a ``SyncRunError``; writes already applied stay in place.
"""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

from taxosync.domain.errors import (
    MalformedPayload,
    RecordStoreError,
    SyncRunError,
    TransportFailure,
)
from taxosync.domain.ports.fetching import FetchFailure
from taxosync.domain.records import EXTERNAL_ID
from taxosync.domain.report import RunReport

from .enrich import ApiDetailFetcher, DetailEnricher
from .flatten import flatten
from .reconcile import Reconciler
from .relink import ParentLinker

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from taxosync.domain.ports.fetching import ApiClient, HttpMethod
    from taxosync.domain.ports.persistence import RecordStore
    from taxosync.domain.report import SyncReport

    from .kinds import KindConfig

log = getLogger(__name__)


def fetch_json(
    api: ApiClient,
    url: str,
    *,
    kind: str,
    method: HttpMethod = "GET",
    body: Mapping[str, object] | None = None,
) -> object:
    """Fetch ``url`` and decode its JSON body, raising the run-level errors."""

    outcome = api.fetch(url, method, body)
    if isinstance(outcome, FetchFailure):
        raise TransportFailure(f"{kind} API unavailable: {outcome.reason}", kind=kind)
    try:
        return json.loads(outcome.text)
    except ValueError as exc:
        raise MalformedPayload(f"Malformed {kind} payload: {exc}", kind=kind) from exc


def sync_kind(
    config: KindConfig,
    *,
    api: ApiClient,
    store: RecordStore,
    detail_api: ApiClient | None = None,
    enrich: bool = True,
) -> SyncReport:
    """Synchronise one kind and return its report.

    ``detail_api`` serves the per-id detail lookups and defaults to ``api``.
    """

    payload = fetch_json(
        api, config.api_url, kind=config.kind, method=config.method, body=config.body
    )
    try:
        tree = config.decode(payload)
    except ValueError as exc:
        raise MalformedPayload(f"Malformed {config.kind} payload: {exc}", kind=config.kind) from exc

    records = flatten(tree, config.include)
    log.info("Fetched %s %s records to reconcile", len(records), config.kind)

    report = Reconciler(store).reconcile(config.vocabulary_id, records, config.field_mapping)
    report.relinked = ParentLinker(store).relink(config.vocabulary_id, records)

    if config.details is not None and enrich:
        fetcher = ApiDetailFetcher(
            api=detail_api or api,
            url_template=config.details.url_template,
            decode=config.details.decode,
        )
        enricher = DetailEnricher(store, fetcher, config.details.field_mapping)
        stored_ids = store.list_field_values(config.vocabulary_id, EXTERNAL_ID)
        report.updated_details = enricher.enrich_details(config.vocabulary_id, stored_ids)

    return report


def sync_kinds(
    configs: Iterable[KindConfig],
    *,
    api: ApiClient,
    store: RecordStore,
    detail_api: ApiClient | None = None,
    enrich: bool = True,
) -> RunReport:
    """Synchronise kinds one after another; a failing kind does not stop the next."""

    run = RunReport()
    for config in configs:
        log.info("Starting %s sync from %s", config.kind, config.api_url)
        try:
            run.reports[config.kind] = sync_kind(
                config, api=api, store=store, detail_api=detail_api, enrich=enrich
            )
        except (SyncRunError, RecordStoreError) as exc:
            log.error("%s sync aborted: %s", config.kind, exc)
            run.errors[config.kind] = str(exc)
    return run
