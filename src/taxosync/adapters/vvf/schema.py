"""Pydantic models describing the upstream offices and personnel payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


def _number_to_text(value: object) -> object:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return value


def _blank_to_none(value: object) -> object:
    value = _number_to_text(value)
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _parent_reference(value: object) -> object:
    # upstream roots carry 0 (or nothing) instead of a parent id
    value = _blank_to_none(value)
    return None if value == "0" else value


class VvfBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class LocationNode(VvfBaseModel):
    """One office of the department tree, with its sub-offices in ``sediChild``."""

    id: str | None = None
    code: str | None = Field(default=None, alias="codice")
    description: str | None = Field(default=None, alias="descrizione")
    type: str | None = Field(default=None, alias="tipo")
    parent_id: str | None = Field(default=None, alias="idSedePadre")
    aoo_code: str | None = Field(default=None, alias="codAOO")
    children: list[LocationNode] = Field(default_factory=list["LocationNode"], alias="sediChild")

    _normalize_id = field_validator("id", mode="before")(_blank_to_none)
    _normalize_parent = field_validator("parent_id", mode="before")(_parent_reference)
    _normalize_text = field_validator("code", "description", "type", "aoo_code", mode="before")(
        _number_to_text
    )

    @field_validator("children", mode="before")
    @classmethod
    def _null_children(cls, value: object) -> object:
        return [] if value is None else value


class LocationDetails(VvfBaseModel):
    email: str | None = None
    phone: str | None = Field(default=None, alias="telefono")
    street: str | None = Field(default=None, alias="indirizzo")
    postal_code: str | None = Field(default=None, alias="cap")
    municipality: str | None = Field(default=None, alias="comune")
    province: str | None = Field(default=None, alias="provincia")

    _normalize_text = field_validator(
        "email", "phone", "street", "postal_code", "municipality", "province", mode="before"
    )(_number_to_text)


class Rank(VvfBaseModel):
    name: str | None = Field(default=None, alias="nome")
    description: str | None = Field(default=None, alias="descrizione")

    _normalize_text = field_validator("name", "description", mode="before")(_number_to_text)


class PersonnelType(VvfBaseModel):
    code: str | None = Field(default=None, alias="codice")

    _normalize_code = field_validator("code", mode="before")(_number_to_text)


class OfficeReference(VvfBaseModel):
    id: str | None = None

    _normalize_id = field_validator("id", mode="before")(_blank_to_none)


class Director(VvfBaseModel):
    fiscal_code: str | None = Field(default=None, alias="codiceFiscale")
    first_name: str | None = Field(default=None, alias="nome")
    last_name: str | None = Field(default=None, alias="cognome")
    email: str | None = Field(default=None, alias="emailVigilfuoco")
    rank: Rank | None = Field(default=None, alias="qualifica")
    personnel_type: PersonnelType | None = Field(default=None, alias="tipoPersonale")
    office: OfficeReference | None = Field(default=None, alias="sede")

    _normalize_fiscal_code = field_validator("fiscal_code", mode="before")(_blank_to_none)


LocationTree = TypeAdapter(list[LocationNode])
DirectorList = TypeAdapter(list[Director])
