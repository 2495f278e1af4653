"""Kind configurations for the offices and directors integrations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from taxosync.config.vvf import DIRECTORS_VOCABULARY, LOCATIONS_VOCABULARY
from taxosync.domain.records import FieldMapping
from taxosync.domain.sync import (
    DetailConfig,
    KindConfig,
    exclude_any,
    field_contains,
    field_in,
)

from .translator import decode_directors, decode_location_details, decode_locations

if TYPE_CHECKING:
    from taxosync.config.vvf import VvfConfig

LOCATIONS: Final[str] = "locations"
DIRECTORS: Final[str] = "directors"

# provincial commands and district detachments
EXCLUDED_LOCATION_TYPES: Final[tuple[str, ...]] = ("COM", "DST")

LOCATION_FIELDS = FieldMapping(
    {
        "descrizione": "name",
        "codice": "field_location_code",
        "codAOO": "field_location_aoo_code",
        "idSedePadre": "field_location_parent_id",
        "tipo": "field_location_type",
    },
    required=("name",),
)

LOCATION_DETAIL_FIELDS = FieldMapping(
    {
        "email": "field_email",
        "telefono": "field_phone",
        "indirizzoCompleto": "field_location_address",
    },
    required=(),
)

# a director without a full name is still stored
DIRECTOR_FIELDS = FieldMapping(
    {
        "nomeCompleto": "name",
        "emailVigilfuoco": "field_email",
        "qualifica.nome": "field_rank_id",
        "qualifica.descrizione": "field_rank_description",
        "esterno": "field_is_external",
        "sede.id": "field_location_id",
    },
    required=(),
)

include_location = exclude_any(
    field_in("tipo", EXCLUDED_LOCATION_TYPES),
    field_contains("codAOO", "DIR-"),
    field_contains("descrizione", "COMANDO"),
)


def locations_kind(config: VvfConfig) -> KindConfig:
    return KindConfig(
        kind=LOCATIONS,
        api_url=config.locations_url,
        vocabulary_id=LOCATIONS_VOCABULARY,
        field_mapping=LOCATION_FIELDS,
        decode=decode_locations,
        include=include_location,
        details=DetailConfig(
            url_template=config.location_details_url_template,
            decode=decode_location_details,
            field_mapping=LOCATION_DETAIL_FIELDS,
        ),
    )


def directors_kind(config: VvfConfig) -> KindConfig:
    return KindConfig(
        kind=DIRECTORS,
        api_url=config.directors_url,
        vocabulary_id=DIRECTORS_VOCABULARY,
        field_mapping=DIRECTOR_FIELDS,
        decode=decode_directors,
    )


def build_kinds(config: VvfConfig) -> dict[str, KindConfig]:
    """All configured kinds, keyed by name, in sync order."""

    return {
        LOCATIONS: locations_kind(config),
        DIRECTORS: directors_kind(config),
    }
