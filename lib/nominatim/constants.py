"""
Nominatim API Constants

Defaults and endpoint paths for the Nominatim (OpenStreetMap) geocoding API.
"""

from typing import Final

VERSION: Final[str] = "0.1.0"

# API Configuration
DEFAULT_BASE_URL: Final[str] = "https://nominatim.openstreetmap.org/"
DEFAULT_TIMEOUT: Final[float] = 10.0  # seconds

# Endpoint paths, resolved relative to the base URL
ENDPOINT_STATUS: Final[str] = "status.php"
ENDPOINT_SEARCH: Final[str] = ""
ENDPOINT_REVERSE: Final[str] = "reverse"
ENDPOINT_LOOKUP: Final[str] = "lookup"

# Response format requested from every endpoint
RESPONSE_FORMAT: Final[str] = "json"

# Identification headers
HEADER_USER_AGENT: Final[str] = "User-Agent"
HEADER_REFERER: Final[str] = "Referer"
