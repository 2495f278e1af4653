"""Diff-and-reconcile engine for upstream records.

Flow for one kind:
1) fetch the upstream payload and decode it into a ``RecordNode`` tree
2) flatten the tree, dropping records rejected by the kind's predicate
3) reconcile the flat batch against the record store (create/update/delete)
4) relink parent references now that every record has an internal id
5) optionally enrich stored records with per-id detail lookups
"""

from __future__ import annotations

from .compare import diff_fields, values_equal
from .enrich import ApiDetailFetcher, DetailEnricher
from .flatten import exclude_any, field_contains, field_in, flatten, include_all
from .kinds import DetailConfig, KindConfig, PayloadDecoder
from .reconcile import Reconciler
from .relink import ParentLinker
from .service import fetch_json, sync_kind, sync_kinds

__all__ = [
    "ApiDetailFetcher",
    "DetailConfig",
    "DetailEnricher",
    "KindConfig",
    "ParentLinker",
    "PayloadDecoder",
    "Reconciler",
    "diff_fields",
    "exclude_any",
    "fetch_json",
    "field_contains",
    "field_in",
    "flatten",
    "include_all",
    "sync_kind",
    "sync_kinds",
    "values_equal",
]
