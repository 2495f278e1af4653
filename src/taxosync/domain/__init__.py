"""Domain types and services for upstream-to-store synchronisation."""

from __future__ import annotations

from .errors import (
    DetailFetchError,
    MalformedPayload,
    RecordNotFoundError,
    RecordStoreError,
    SyncRunError,
    TransportFailure,
)
from .records import (
    EXTERNAL_ID,
    ExternalRecord,
    FieldMapping,
    FieldValue,
    FieldValues,
    RecordNode,
    RecordPredicate,
    StoredRecord,
)
from .report import RecordAction, RecordOutcome, RunReport, SyncReport

__all__ = [
    "EXTERNAL_ID",
    "DetailFetchError",
    "ExternalRecord",
    "FieldMapping",
    "FieldValue",
    "FieldValues",
    "MalformedPayload",
    "RecordAction",
    "RecordNode",
    "RecordNotFoundError",
    "RecordOutcome",
    "RecordPredicate",
    "RecordStoreError",
    "RunReport",
    "StoredRecord",
    "SyncReport",
    "SyncRunError",
    "TransportFailure",
]
