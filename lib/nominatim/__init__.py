"""
Nominatim API Client Library

This module provides a Python async client library for the Nominatim
geocoding API (OpenStreetMap) with typed responses.

Example usage:
    from lib.nominatim import IdentificationMethod, NominatimClient

    client = NominatimClient(IdentificationMethod.fromUserAgent("Example Application Name"))

    # Server status
    status = await client.status()

    # Forward geocoding
    places = await client.search("statue of liberty")

    # Reverse geocoding
    place = await client.reverse("40.689249", "-74.044500")

    # OSM lookup
    places = await client.lookup(["R146656", "W50637691"])

    await client.aclose()
"""

from lib.nominatim.client import NominatimClient, parseBaseUrl
from lib.nominatim.constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from lib.nominatim.exceptions import (
    InvalidHeaderValueError,
    NominatimConfigurationError,
    NominatimError,
    NominatimRequestError,
    UrlParseError,
)
from lib.nominatim.ident import IdentificationKind, IdentificationMethod
from lib.nominatim.models import Address, ExtraTags, Place, Status

__all__ = [
    "NominatimClient",
    "parseBaseUrl",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "IdentificationKind",
    "IdentificationMethod",
    "NominatimError",
    "NominatimConfigurationError",
    "InvalidHeaderValueError",
    "UrlParseError",
    "NominatimRequestError",
    "Status",
    "Place",
    "Address",
    "ExtraTags",
]
