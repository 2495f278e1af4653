"""Translate upstream payloads into external records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from taxosync.domain.records import ExternalRecord, RecordNode

from .schema import DirectorList, LocationDetails, LocationNode, LocationTree

if TYPE_CHECKING:
    from taxosync.domain.records import FieldValue, FieldValues

    from .schema import Director

NAME_DELIMITERS: Final[str] = " \t\r\n\f\v'"
INTERNAL_PERSONNEL_CODE: Final[str] = "1"


def decode_locations(payload: object) -> list[RecordNode]:
    """Decode the department tree; raises ``pydantic.ValidationError`` on bad shapes."""

    return [_location_node(node) for node in LocationTree.validate_python(payload)]


def _location_node(node: LocationNode) -> RecordNode:
    return RecordNode(
        record=location_record(node),
        children=tuple(_location_node(child) for child in node.children),
    )


def location_record(node: LocationNode) -> ExternalRecord:
    return ExternalRecord(
        external_id=node.id,
        fields={
            "id": node.id,
            "codice": node.code,
            "descrizione": node.description,
            "tipo": node.type,
            "idSedePadre": node.parent_id,
            "codAOO": node.aoo_code,
        },
        parent_external_id=node.parent_id,
    )


def decode_location_details(payload: object) -> FieldValues:
    details = LocationDetails.model_validate(payload)
    return {
        "email": details.email,
        "telefono": details.phone,
        "indirizzoCompleto": postal_address(details),
    }


def postal_address(details: LocationDetails) -> str | None:
    """Three-line address, or ``None`` unless every part is present."""

    parts = (details.street, details.postal_code, details.municipality, details.province)
    if any(part is None for part in parts):
        return None
    return f"{details.street}\n{details.postal_code}\n{details.municipality} {details.province}"


def decode_directors(payload: object) -> list[RecordNode]:
    directors = DirectorList.validate_python(payload)
    return [RecordNode(record=director_record(director)) for director in directors]


def director_record(director: Director) -> ExternalRecord:
    rank = director.rank
    fields: dict[str, FieldValue] = {
        "codiceFiscale": director.fiscal_code,
        "nomeCompleto": full_name(director.first_name, director.last_name),
        "emailVigilfuoco": director.email,
        "qualifica.nome": rank.name if rank else None,
        "qualifica.descrizione": rank.description if rank else None,
        "esterno": is_external(director),
        "sede.id": director.office.id if director.office else None,
    }
    return ExternalRecord(external_id=director.fiscal_code, fields=fields)


def full_name(first_name: str | None, last_name: str | None) -> str | None:
    """``"MARIO D'ANGELO"`` style names become ``"Mario D'Angelo"``."""

    if not first_name or not last_name:
        return None
    return capitalize_words(f"{first_name} {last_name}".lower())


def capitalize_words(text: str, delimiters: str = NAME_DELIMITERS) -> str:
    chars = list(text)
    capitalize_next = True
    for index, char in enumerate(chars):
        if capitalize_next:
            chars[index] = char.upper()
        capitalize_next = char in delimiters
    return "".join(chars)


def is_external(director: Director) -> bool:
    personnel_type = director.personnel_type
    if personnel_type is None or personnel_type.code is None:
        return False
    return personnel_type.code != INTERNAL_PERSONNEL_CODE
