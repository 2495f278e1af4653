"""Adapter for the department offices and personnel API."""

from __future__ import annotations

from .kinds import (
    DIRECTOR_FIELDS,
    DIRECTORS,
    LOCATION_DETAIL_FIELDS,
    LOCATION_FIELDS,
    LOCATIONS,
    build_kinds,
    directors_kind,
    include_location,
    locations_kind,
)
from .schema import Director, LocationDetails, LocationNode
from .translator import decode_directors, decode_location_details, decode_locations

__all__ = [
    "DIRECTORS",
    "DIRECTOR_FIELDS",
    "LOCATIONS",
    "LOCATION_DETAIL_FIELDS",
    "LOCATION_FIELDS",
    "Director",
    "LocationDetails",
    "LocationNode",
    "build_kinds",
    "decode_directors",
    "decode_location_details",
    "decode_locations",
    "directors_kind",
    "include_location",
    "locations_kind",
]
