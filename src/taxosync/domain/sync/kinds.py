"""Per-integration configuration of a synchronised kind."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

from taxosync.domain.ports.fetching import HttpMethod
from taxosync.domain.records import FieldMapping, RecordNode, RecordPredicate

from .enrich import DetailDecoder
from .flatten import include_all

type PayloadDecoder = Callable[[object], Sequence[RecordNode]]


@dataclass(frozen=True, slots=True)
class DetailConfig:
    """Secondary per-id lookup; ``url_template`` is formatted with ``external_id``."""

    url_template: str
    decode: DetailDecoder
    field_mapping: FieldMapping


@dataclass(frozen=True, slots=True)
class KindConfig:
    """Everything needed to sync one kind from one endpoint.

    ``kind`` names the integration in reports and logs; ``vocabulary_id`` is
    the namespace its records are stored under.
    """

    kind: str
    api_url: str
    vocabulary_id: str
    field_mapping: FieldMapping
    decode: PayloadDecoder
    include: RecordPredicate = field(default=include_all)
    method: HttpMethod = "GET"
    body: Mapping[str, object] | None = None
    details: DetailConfig | None = None
