"""
Nominatim API Data Models

This module defines the records returned by the Nominatim API. Nominatim
populates its responses loosely (fields come and go with the place type and
request options), so most fields are optional or fall back to an empty value
instead of failing.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _requireMapping(cls: type, data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"{cls.__name__} expects a JSON object, got {type(data).__name__}")
    return data


def _optionalStr(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key, None)
    if value is None:
        return None
    return str(value)


def _withDefault(data: Dict[str, Any], key: str, default: Any) -> Any:
    """Get value by key, treating explicit null same as missing key"""
    value = data.get(key, None)
    return default if value is None else value


@dataclass
class Status:
    """Status of a Nominatim server, dood!"""

    status: int  # 0 means OK
    message: str
    data_updated: Optional[str] = None  # Timestamp of last data import
    software_version: Optional[str] = None
    database_version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Status":
        """Create Status instance from API response dictionary.

        Args:
            data: Dictionary containing API response data

        Returns:
            Status: New Status instance

        Raises:
            TypeError: If data is not a dictionary
            KeyError: If ``status`` or ``message`` is missing
        """
        data = _requireMapping(cls, data)
        return cls(
            status=int(data["status"]),
            message=str(data["message"]),
            data_updated=_optionalStr(data, "data_updated"),
            software_version=_optionalStr(data, "software_version"),
            database_version=_optionalStr(data, "database_version"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "message": self.message,
            "data_updated": self.data_updated,
            "software_version": self.software_version,
            "database_version": self.database_version,
        }


@dataclass
class Address:
    """Structured address components of a place.

    All fields are optional as different places have different address structures.
    """

    city: Optional[str] = None
    state_district: Optional[str] = None
    state: Optional[str] = None
    iso3166_2_lvl4: Optional[str] = None  # ISO 3166-2 subdivision code, "ISO3166-2-lvl4" on the wire
    postcode: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None  # ISO country code (e.g., "us")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Address":
        data = _requireMapping(cls, data)
        return cls(
            city=_optionalStr(data, "city"),
            state_district=_optionalStr(data, "state_district"),
            state=_optionalStr(data, "state"),
            iso3166_2_lvl4=_optionalStr(data, "ISO3166-2-lvl4"),
            postcode=_optionalStr(data, "postcode"),
            country=_optionalStr(data, "country"),
            country_code=_optionalStr(data, "country_code"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "city": self.city,
            "state_district": self.state_district,
            "state": self.state,
            "ISO3166-2-lvl4": self.iso3166_2_lvl4,
            "postcode": self.postcode,
            "country": self.country,
            "country_code": self.country_code,
        }


@dataclass
class ExtraTags:
    """Additional OSM tags, returned only if the server has them"""

    capital: Optional[str] = None
    website: Optional[str] = None
    wikidata: Optional[str] = None  # Wikidata ID (e.g., "Q9585")
    wikipedia: Optional[str] = None  # Wikipedia article reference (e.g., "en:Statue of Liberty")
    population: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtraTags":
        data = _requireMapping(cls, data)
        return cls(
            capital=_optionalStr(data, "capital"),
            website=_optionalStr(data, "website"),
            wikidata=_optionalStr(data, "wikidata"),
            wikipedia=_optionalStr(data, "wikipedia"),
            population=_optionalStr(data, "population"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "capital": self.capital,
            "website": self.website,
            "wikidata": self.wikidata,
            "wikipedia": self.wikipedia,
            "population": self.population,
        }


@dataclass
class Place:
    """Single place returned by search, reverse or lookup, dood!

    Identifier, coordinate and name fields default to zero/empty values when
    the server omits them; everything else is optional.
    """

    place_id: int = 0
    licence: str = ""
    osm_type: str = ""  # node/way/relation
    osm_id: int = 0
    boundingbox: List[str] = field(default_factory=list)  # [south, north, west, east]
    lat: str = ""  # Latitude (string in API response)
    lon: str = ""  # Longitude (string in API response)
    display_name: str = ""
    category: Optional[str] = None  # "class" on the wire
    type: Optional[str] = None
    importance: Optional[float] = None
    icon: Optional[str] = None
    address: Optional[Address] = None
    extratags: Optional[ExtraTags] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Place":
        """Create Place instance from API response dictionary.

        Args:
            data: Dictionary containing API response data

        Returns:
            Place: New Place instance

        Raises:
            TypeError: If data (or a nested object) is not a dictionary
            ValueError: If a numeric field holds a non-numeric value
        """
        data = _requireMapping(cls, data)

        importance = data.get("importance", None)
        address = data.get("address", None)
        extratags = data.get("extratags", None)

        return cls(
            place_id=int(_withDefault(data, "place_id", 0)),
            licence=str(_withDefault(data, "licence", "")),
            osm_type=str(_withDefault(data, "osm_type", "")),
            osm_id=int(_withDefault(data, "osm_id", 0)),
            boundingbox=[str(v) for v in _withDefault(data, "boundingbox", [])],
            lat=str(_withDefault(data, "lat", "")),
            lon=str(_withDefault(data, "lon", "")),
            display_name=str(_withDefault(data, "display_name", "")),
            category=_optionalStr(data, "class"),
            type=_optionalStr(data, "type"),
            importance=float(importance) if importance is not None else None,
            icon=_optionalStr(data, "icon"),
            address=Address.from_dict(address) if address is not None else None,
            extratags=ExtraTags.from_dict(extratags) if extratags is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert place to dictionary using API field names"""
        return {
            "place_id": self.place_id,
            "licence": self.licence,
            "osm_type": self.osm_type,
            "osm_id": self.osm_id,
            "boundingbox": list(self.boundingbox),
            "lat": self.lat,
            "lon": self.lon,
            "display_name": self.display_name,
            "class": self.category,
            "type": self.type,
            "importance": self.importance,
            "icon": self.icon,
            "address": self.address.to_dict() if self.address is not None else None,
            "extratags": self.extratags.to_dict() if self.extratags is not None else None,
        }
