"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import ExitStack
from logging import getLogger
from typing import TYPE_CHECKING

from taxosync.adapters.http_api import HttpApiClient
from taxosync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from taxosync.adapters.vvf import build_kinds
from taxosync.config.vvf import get_vvf_config
from taxosync.domain.ports.unit_of_work import RecordUnitOfWork
from taxosync.domain.sync import sync_kinds

if TYPE_CHECKING:
    from collections.abc import Sequence

    from taxosync.config.vvf import VvfConfig
    from taxosync.domain.ports.fetching import ApiClient
    from taxosync.domain.report import RunReport
    from taxosync.domain.sync import KindConfig

UnitOfWorkFactory = Callable[[], RecordUnitOfWork]

log = getLogger(__name__)


def sync_records(
    kinds: Sequence[str] | None = None,
    *,
    enrich: bool = True,
    config: VvfConfig | None = None,
    api: ApiClient | None = None,
    detail_api: ApiClient | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> RunReport:
    """Synchronise the requested kinds (all of them by default) into the record store."""

    effective_config = config or get_vvf_config()
    selected = _select_kinds(effective_config, kinds)
    effective_uow = unit_of_work_factory or _default_unit_of_work()

    log.info(
        "Starting sync: kinds=%s, enrich=%s, base_url=%s",
        ", ".join(kind.kind for kind in selected),
        enrich,
        effective_config.base_url,
    )
    with ExitStack() as stack:
        effective_api = api or stack.enter_context(HttpApiClient(effective_config.resilience))
        effective_detail_api = detail_api or stack.enter_context(
            HttpApiClient(effective_config.detail_resilience)
        )
        uow = stack.enter_context(effective_uow())
        run = sync_kinds(
            selected,
            api=effective_api,
            store=uow.records,
            detail_api=effective_detail_api,
            enrich=enrich,
        )

    for kind, report in run.reports.items():
        log.info(
            "Finished %s sync: created=%s, updated=%s, deleted=%s, skipped=%s, failed=%s",
            kind,
            report.created,
            report.updated,
            report.deleted,
            report.skipped,
            report.failed,
        )
    return run


def export_records(
    kind: str,
    *,
    config: VvfConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[dict[str, object]]:
    """Return the stored records of ``kind`` as plain dictionaries."""

    (selected,) = _select_kinds(config or get_vvf_config(), [kind])
    effective_uow = unit_of_work_factory or _default_unit_of_work()
    with effective_uow() as uow:
        records = uow.records.list_records(selected.vocabulary_id)
    log.info("Exporting %s stored %s records", len(records), kind)
    return [
        {
            "internalId": record.internal_id,
            "externalId": record.external_id,
            "parentInternalId": record.parent_internal_id,
            **record.fields,
        }
        for record in records
    ]


def _select_kinds(config: VvfConfig, names: Sequence[str] | None) -> list[KindConfig]:
    kinds = build_kinds(config)
    if names is None:
        return list(kinds.values())
    unknown = [name for name in names if name not in kinds]
    if unknown:
        raise ValueError(f"Unknown kind(s): {', '.join(unknown)}")
    return [kinds[name] for name in names]


def _default_unit_of_work() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork
