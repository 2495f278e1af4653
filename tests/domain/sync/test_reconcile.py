from __future__ import annotations

import pytest

from taxosync.domain.records import FieldMapping
from taxosync.domain.report import RecordAction
from taxosync.domain.sync import ParentLinker, Reconciler
from tests.support.records import InMemoryRecordStore, make_record

KIND = "office_list"
MAPPING = FieldMapping({"name": "name", "code": "field_code"})


def test_reconcile_creates_updates_and_deletes(memory_store: InMemoryRecordStore) -> None:
    memory_store.seed(KIND, "1", name="Old name", field_code="A")
    memory_store.seed(KIND, "2", name="Gone", field_code="B")

    report = Reconciler(memory_store).reconcile(
        KIND,
        [make_record("1", "New name", code="A"), make_record("3", "Fresh", code="C")],
        MAPPING,
    )

    assert (report.created, report.updated, report.deleted) == (1, 1, 1)
    assert memory_store.by_external_id(KIND, "1").fields["name"] == "New name"
    assert memory_store.by_external_id(KIND, "3").fields == {"name": "Fresh", "field_code": "C"}
    assert memory_store.find_by_field(KIND, "external_id", "2") is None
    assert report.as_dict() == {"created": 1, "updated": 1, "deleted": 1}


def test_reconcile_is_idempotent(memory_store: InMemoryRecordStore) -> None:
    records = [make_record("1", "Uno", code=1), make_record("2", "Due", code=2)]
    reconciler = Reconciler(memory_store)
    reconciler.reconcile(KIND, records, MAPPING)
    writes = len(memory_store.writes())

    second = reconciler.reconcile(KIND, records, MAPPING)

    assert (second.created, second.updated, second.deleted) == (0, 0, 0)
    assert second.count(RecordAction.UNCHANGED) == 2
    assert len(memory_store.writes()) == writes


def test_reconcile_only_writes_changed_fields(memory_store: InMemoryRecordStore) -> None:
    memory_store.seed(KIND, "1", name="Uno", field_code="7", field_extra="kept")

    Reconciler(memory_store).reconcile(KIND, [make_record("1", "Uno bis", code=7)], MAPPING)

    stored = memory_store.by_external_id(KIND, "1")
    assert stored.fields == {"name": "Uno bis", "field_code": "7", "field_extra": "kept"}


def test_reconcile_empty_batch_deletes_everything(memory_store: InMemoryRecordStore) -> None:
    memory_store.seed(KIND, "1", name="Uno")
    memory_store.seed(KIND, "2", name="Due")

    report = Reconciler(memory_store).reconcile(KIND, [], MAPPING)

    assert report.deleted == 2
    assert memory_store.list_records(KIND) == []


def test_reconcile_leaves_other_kinds_alone(memory_store: InMemoryRecordStore) -> None:
    memory_store.seed("director_list", "1", name="Mario Rossi")

    report = Reconciler(memory_store).reconcile(KIND, [], MAPPING)

    assert report.deleted == 0
    assert memory_store.by_external_id("director_list", "1").fields["name"] == "Mario Rossi"


@pytest.mark.parametrize("external_id", [None, "", "   "])
def test_reconcile_skips_records_without_id(
    memory_store: InMemoryRecordStore, external_id: str | None
) -> None:
    report = Reconciler(memory_store).reconcile(KIND, [make_record(external_id, "X")], MAPPING)

    assert report.skipped == 1
    assert memory_store.list_records(KIND) == []


def test_reconcile_skips_records_missing_required_fields(
    memory_store: InMemoryRecordStore,
) -> None:
    memory_store.seed(KIND, "1", name="Uno")

    report = Reconciler(memory_store).reconcile(KIND, [make_record("1", "  ")], MAPPING)

    (problem,) = report.problems()
    assert problem.action is RecordAction.SKIPPED
    assert problem.reason == "missing required fields: name"
    # a skipped record counts as absent, so the stored copy is removed
    assert report.deleted == 1


def test_reconcile_duplicate_ids_apply_in_order(memory_store: InMemoryRecordStore) -> None:
    report = Reconciler(memory_store).reconcile(
        KIND, [make_record("1", "First"), make_record("1", "Second")], MAPPING
    )

    assert (report.created, report.updated) == (1, 1)
    assert memory_store.by_external_id(KIND, "1").fields["name"] == "Second"
    assert len(memory_store.list_records(KIND)) == 1


def test_reconcile_store_failure_only_costs_that_record(
    memory_store: InMemoryRecordStore,
) -> None:
    memory_store.fail_on.add("2")

    report = Reconciler(memory_store).reconcile(
        KIND,
        [make_record("1", "Uno"), make_record("2", "Due"), make_record("3", "Tre")],
        MAPPING,
    )

    assert report.created == 2
    (failure,) = report.problems()
    assert failure.action is RecordAction.FAILED
    assert failure.external_id == "2"
    assert memory_store.find_by_field(KIND, "external_id", "3") is not None


def test_reconcile_failed_delete_is_reported(memory_store: InMemoryRecordStore) -> None:
    memory_store.seed(KIND, "1", name="Uno")
    memory_store.fail_on.add("1")

    report = Reconciler(memory_store).reconcile(KIND, [], MAPPING)

    assert report.deleted == 0
    assert report.failed == 1
    assert memory_store.find_by_field(KIND, "external_id", "1") is not None


def test_reconcile_links_parent_created_earlier(memory_store: InMemoryRecordStore) -> None:
    Reconciler(memory_store).reconcile(
        KIND, [make_record("1", "Parent"), make_record("2", "Child", parent="1")], MAPPING
    )

    assert memory_store.parent_external_id(KIND, "2") == "1"


def test_reconcile_numeric_ids_are_normalised(memory_store: InMemoryRecordStore) -> None:
    memory_store.seed(KIND, "42", name="Uno")

    report = Reconciler(memory_store).reconcile(
        KIND, [make_record(" 42 ", "Uno")], MAPPING
    )

    assert report.count(RecordAction.UNCHANGED) == 1
    assert report.deleted == 0


def test_reconcile_invalid_record_does_not_block_the_batch(
    memory_store: InMemoryRecordStore,
) -> None:
    report = Reconciler(memory_store).reconcile(
        KIND,
        [make_record("1", "Uno"), make_record(None, "Senza id"), make_record("3", "Tre")],
        MAPPING,
    )

    assert report.created == 2
    assert report.skipped == 1
    assert report.as_dict() == {"created": 2, "updated": 0, "deleted": 0}
    assert memory_store.find_by_field(KIND, "external_id", "1") is not None
    assert memory_store.find_by_field(KIND, "external_id", "3") is not None


def test_reconcile_then_relink_fresh_parent_and_child(
    memory_store: InMemoryRecordStore,
) -> None:
    records = [make_record("1", "Alpha"), make_record("2", "Beta", parent="1")]

    report = Reconciler(memory_store).reconcile(KIND, records, MAPPING)
    ParentLinker(memory_store).relink(KIND, records)

    assert report.as_dict() == {"created": 2, "updated": 0, "deleted": 0}
    assert memory_store.parent_external_id(KIND, "2") == "1"


def test_reconcile_unchanged_survivor_is_not_written(
    memory_store: InMemoryRecordStore,
) -> None:
    for external_id, name in (("A", "Alpha"), ("B", "Beta"), ("C", "Gamma")):
        memory_store.seed(KIND, external_id, name=name, field_code=None)
    seeded = len(memory_store.writes())

    report = Reconciler(memory_store).reconcile(KIND, [make_record("A", "Alpha")], MAPPING)

    assert report.as_dict() == {"created": 0, "updated": 0, "deleted": 2}
    assert memory_store.writes()[seeded:] == [("delete", "B"), ("delete", "C")]
    assert memory_store.by_external_id(KIND, "A").fields["name"] == "Alpha"
