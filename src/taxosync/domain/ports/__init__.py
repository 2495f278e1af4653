"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import (
    ApiClient,
    DetailFetcher,
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
    HttpMethod,
)
from .persistence import RecordStore
from .unit_of_work import RecordUnitOfWork

__all__ = [
    "ApiClient",
    "DetailFetcher",
    "FetchFailure",
    "FetchOutcome",
    "FetchSuccess",
    "HttpMethod",
    "RecordStore",
    "RecordUnitOfWork",
]
