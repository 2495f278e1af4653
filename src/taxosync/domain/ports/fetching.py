"""Ports for fetching upstream payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from taxosync.domain.records import FieldValues

type HttpMethod = Literal["GET", "POST"]


@dataclass(frozen=True, slots=True)
class FetchSuccess:
    text: str
    status_code: int = 200

    @property
    def ok(self) -> Literal[True]:
        return True


@dataclass(frozen=True, slots=True)
class FetchFailure:
    """Transport-level failure reported as a value rather than raised."""

    reason: str
    status_code: int | None = None

    @property
    def ok(self) -> Literal[False]:
        return False


type FetchOutcome = FetchSuccess | FetchFailure


@runtime_checkable
class ApiClient(Protocol):
    """Issue one request and return the raw body or a failure value."""

    def fetch(
        self,
        url: str,
        method: HttpMethod = "GET",
        body: Mapping[str, object] | None = None,
    ) -> FetchOutcome: ...


@runtime_checkable
class DetailFetcher(Protocol):
    """Fetch supplementary fields for one record.

    Returns upstream-named field values; raises
    ``taxosync.domain.errors.DetailFetchError`` when the lookup fails.
    """

    def __call__(self, external_id: str) -> FieldValues: ...


__all__ = [
    "ApiClient",
    "DetailFetcher",
    "FetchFailure",
    "FetchOutcome",
    "FetchSuccess",
    "HttpMethod",
]
