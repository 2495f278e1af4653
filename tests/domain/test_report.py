from __future__ import annotations

from taxosync.domain.report import RecordAction, RecordOutcome, RunReport, SyncReport


def _report(kind: str, *actions: RecordAction) -> SyncReport:
    report = SyncReport(kind=kind)
    for index, action in enumerate(actions):
        report.add(RecordOutcome(str(index), action))
    return report


def test_sync_report_counts_actions() -> None:
    report = _report(
        "office_list",
        RecordAction.CREATED,
        RecordAction.CREATED,
        RecordAction.UPDATED,
        RecordAction.UNCHANGED,
        RecordAction.DELETED,
    )
    report.add(RecordOutcome.skipped(None, "missing external id"))
    report.add(RecordOutcome.failed("9", "locked"))

    assert (report.created, report.updated, report.deleted) == (2, 1, 1)
    assert (report.skipped, report.failed) == (1, 1)
    assert [outcome.reason for outcome in report.problems()] == ["missing external id", "locked"]
    assert report.as_dict() == {"created": 2, "updated": 1, "deleted": 1}


def test_sync_report_includes_detail_updates_when_enriched() -> None:
    report = _report("office_list")
    report.updated_details = 0

    assert report.as_dict() == {"created": 0, "updated": 0, "deleted": 0, "updatedDetails": 0}


def test_run_report_single_kind_payloads() -> None:
    ok = RunReport(reports={"locations": _report("office_list", RecordAction.CREATED)})
    failed = RunReport(errors={"locations": "locations API unavailable: HTTP 503"})

    assert ok.ok
    assert ok.as_payload() == {"report": {"created": 1, "updated": 0, "deleted": 0}}
    assert not failed.ok
    assert failed.as_payload() == {"error": "locations API unavailable: HTTP 503"}


def test_run_report_multi_kind_payload() -> None:
    run = RunReport(
        reports={
            "locations": _report("office_list"),
            "directors": _report("director_list", RecordAction.DELETED),
        }
    )

    assert run.as_payload() == {
        "report": {
            "locations": {"created": 0, "updated": 0, "deleted": 0},
            "directors": {"created": 0, "updated": 0, "deleted": 1},
        }
    }
