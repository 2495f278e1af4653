"""Flatten decoded record trees and the predicates used to filter them."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Iterator

    from taxosync.domain.records import ExternalRecord, RecordNode, RecordPredicate


def include_all(record: ExternalRecord) -> bool:  # noqa: ARG001
    return True


def flatten(
    tree: Iterable[RecordNode],
    include: RecordPredicate = include_all,
) -> list[ExternalRecord]:
    """Return the records of ``tree`` depth-first, parents before their children.

    Siblings keep their input order. A node rejected by ``include`` is left out
    but its children are still visited. Nothing is de-duplicated.
    """

    flat: list[ExternalRecord] = []
    pending: list[Iterator[RecordNode]] = [iter(tree)]
    while pending:
        node = next(pending[-1], None)
        if node is None:
            pending.pop()
            continue
        if include(node.record):
            flat.append(node.record)
        if node.children:
            pending.append(iter(node.children))
    return flat


def field_in(field: str, values: Collection[str]) -> RecordPredicate:
    """Match records whose ``field`` is one of ``values``."""

    blocked = frozenset(values)

    def predicate(record: ExternalRecord) -> bool:
        value = record.get(field)
        return isinstance(value, str) and value in blocked

    return predicate


def field_contains(field: str, substring: str) -> RecordPredicate:
    """Match records whose ``field`` contains ``substring``; missing values never match."""

    def predicate(record: ExternalRecord) -> bool:
        value = record.get(field)
        return isinstance(value, str) and substring in value

    return predicate


def exclude_any(*rules: RecordPredicate) -> RecordPredicate:
    """Build an include predicate rejecting records matched by any of ``rules``."""

    def predicate(record: ExternalRecord) -> bool:
        return not any(rule(record) for rule in rules)

    return predicate
