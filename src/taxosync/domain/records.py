"""Record types shared by the sync components.

External records are immutable snapshots decoded from an upstream payload;
stored records are snapshots of what a record store currently holds. Parent
references are always expressed as ids, never as object references, so a
child can be processed before its parent exists.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

type FieldValue = str | int | float | bool | None
type FieldValues = Mapping[str, FieldValue]

EXTERNAL_ID: Final[str] = "external_id"
"""Field name addressing a stored record's external id in store queries."""


def _frozen(values: Mapping[str, FieldValue]) -> Mapping[str, FieldValue]:
    return MappingProxyType(dict(values))


@dataclass(frozen=True, slots=True)
class ExternalRecord:
    """Snapshot of one upstream record, keyed by upstream field names."""

    external_id: str | None
    fields: FieldValues = field(default_factory=dict)
    parent_external_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _frozen(self.fields))

    def get(self, name: str) -> FieldValue:
        return self.fields.get(name)


@dataclass(frozen=True, slots=True)
class RecordNode:
    """An external record and the records nested below it upstream."""

    record: ExternalRecord
    children: tuple[RecordNode, ...] = ()


@dataclass(frozen=True, slots=True)
class StoredRecord:
    """Snapshot of a persisted record of one kind."""

    internal_id: int
    kind: str
    external_id: str
    fields: FieldValues = field(default_factory=dict)
    parent_internal_id: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _frozen(self.fields))


type RecordPredicate = Callable[[ExternalRecord], bool]


@dataclass(frozen=True, slots=True)
class FieldMapping:
    """Table translating upstream field names into stored field names.

    ``required`` lists stored field names that must carry a non-blank value for
    an incoming record to be accepted at all.
    """

    fields: Mapping[str, str]
    required: tuple[str, ...] = ("name",)

    def __post_init__(self) -> None:
        targets = list(self.fields.values())
        duplicates = sorted({name for name in targets if targets.count(name) > 1})
        if duplicates:
            raise ValueError(f"Stored fields mapped more than once: {', '.join(duplicates)}")
        if EXTERNAL_ID in targets:
            raise ValueError(f"{EXTERNAL_ID!r} is reserved for the record key")
        unknown = sorted(set(self.required) - set(targets))
        if unknown:
            raise ValueError(f"Required fields missing from mapping: {', '.join(unknown)}")
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def stored_names(self) -> tuple[str, ...]:
        return tuple(self.fields.values())

    def apply(self, values: FieldValues) -> dict[str, FieldValue]:
        """Return ``values`` renamed to stored field names; unmapped keys are dropped."""

        return {stored: values.get(external) for external, stored in self.fields.items()}

    def missing_required(self, mapped: FieldValues) -> list[str]:
        return [name for name in self.required if is_blank(mapped.get(name))]


def is_blank(value: FieldValue) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()
