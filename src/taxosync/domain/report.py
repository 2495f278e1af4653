"""Per-record outcomes and the reports built from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class RecordAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    DELETED = "deleted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class RecordOutcome:
    """What happened to one record during a run."""

    external_id: str | None
    action: RecordAction
    reason: str | None = None

    @classmethod
    def skipped(cls, external_id: str | None, reason: str) -> RecordOutcome:
        return cls(external_id, RecordAction.SKIPPED, reason)

    @classmethod
    def failed(cls, external_id: str | None, reason: str) -> RecordOutcome:
        return cls(external_id, RecordAction.FAILED, reason)


@dataclass(slots=True)
class SyncReport:
    """Outcome of reconciling one kind."""

    kind: str
    outcomes: list[RecordOutcome] = field(default_factory=list["RecordOutcome"])
    relinked: int = 0
    updated_details: int | None = None

    def add(self, outcome: RecordOutcome) -> None:
        self.outcomes.append(outcome)

    def count(self, action: RecordAction) -> int:
        return sum(1 for outcome in self.outcomes if outcome.action is action)

    @property
    def created(self) -> int:
        return self.count(RecordAction.CREATED)

    @property
    def updated(self) -> int:
        return self.count(RecordAction.UPDATED)

    @property
    def deleted(self) -> int:
        return self.count(RecordAction.DELETED)

    @property
    def skipped(self) -> int:
        return self.count(RecordAction.SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(RecordAction.FAILED)

    def problems(self) -> list[RecordOutcome]:
        return [
            outcome
            for outcome in self.outcomes
            if outcome.action in {RecordAction.SKIPPED, RecordAction.FAILED}
        ]

    def as_dict(self) -> dict[str, int]:
        payload = {"created": self.created, "updated": self.updated, "deleted": self.deleted}
        if self.updated_details is not None:
            payload["updatedDetails"] = self.updated_details
        return payload


@dataclass(slots=True)
class RunReport:
    """Reports and fatal errors for a multi-kind run, keyed by kind."""

    reports: dict[str, SyncReport] = field(default_factory=dict[str, SyncReport])
    errors: dict[str, str] = field(default_factory=dict[str, str])

    @property
    def ok(self) -> bool:
        return not self.errors

    def as_payload(self) -> dict[str, object]:
        """Render the payload returned at the hosting boundary.

        A single-kind run renders ``{"report": {...}}`` or ``{"error": "..."}``;
        multi-kind runs key both sections by kind.
        """

        if len(self.reports) + len(self.errors) == 1:
            if self.errors:
                return {"error": next(iter(self.errors.values()))}
            return {"report": next(iter(self.reports.values())).as_dict()}
        payload: dict[str, object] = {
            "report": {kind: report.as_dict() for kind, report in self.reports.items()}
        }
        if self.errors:
            payload["error"] = dict(self.errors)
        return payload
