"""
Nominatim API Async Client

This module provides the NominatimClient class for interacting with a
Nominatim geocoding server (https://nominatim.org/release-docs/latest/api/Overview/).
Every call is a single GET request; there is no caching, retrying or rate
limiting. Users of the public instance must respect its usage policy
(at most 1 request per second) themselves.
"""

import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union
from urllib.parse import urlencode

import httpx

from .constants import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    ENDPOINT_LOOKUP,
    ENDPOINT_REVERSE,
    ENDPOINT_SEARCH,
    ENDPOINT_STATUS,
    RESPONSE_FORMAT,
)
from .exceptions import NominatimRequestError, UrlParseError
from .ident import IdentificationMethod
from .models import Place, Status

logger = logging.getLogger(__name__)

T = TypeVar("T")

QueryParams = Sequence[Tuple[str, Any]]
Coordinate = Union[str, int, float]


def parseBaseUrl(url: Union[str, httpx.URL]) -> httpx.URL:
    """Parse and validate base URL, dood!

    Args:
        url: Absolute http(s) URL (e.g., "https://nominatim.openstreetmap.org/")

    Returns:
        Parsed URL

    Raises:
        UrlParseError: If url is malformed or is not an absolute http(s) URL
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise UrlParseError(url, str(e)) from e

    if parsed.scheme not in ("http", "https"):
        raise UrlParseError(url, "absolute http(s) URL expected")
    if not parsed.host:
        raise UrlParseError(url, "URL has no host")
    return parsed


def _parseList(converter: Callable[[Any], T]) -> Callable[[Any], List[T]]:
    def parse(data: Any) -> List[T]:
        if not isinstance(data, list):
            raise TypeError(f"JSON array expected, got {type(data).__name__}")
        return [converter(item) for item in data]

    return parse


class NominatimClient:
    """Async client for the Nominatim geocoding API, dood!

    Holds a single HTTP connection pool which is reused by all requests, so
    the client can be shared between concurrent tasks. Close it with
    ``aclose()`` or use it as async context manager.

    Example:
        >>> from lib.nominatim import IdentificationMethod, NominatimClient
        >>>
        >>> ident = IdentificationMethod.fromUserAgent("Example Application Name")
        >>> async with NominatimClient(ident) as client:
        ...     status = await client.status()
        ...     places = await client.search("statue of liberty")
        ...     place = await client.reverse("40.689249", "-74.044500", zoom=18)
        ...     places = await client.lookup(["R146656", "W50637691"])

    Attributes:
        ident: How the client identifies itself to the server
        timeout: Request timeout in seconds, applied to every call (default: 10)
    """

    def __init__(
        self,
        ident: IdentificationMethod,
        *,
        baseUrl: Union[str, httpx.URL] = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize Nominatim client.

        Args:
            ident: Identification method (User-Agent or Referer)
            baseUrl: Base URL of the Nominatim server (default: public OSM instance)
            timeout: Request timeout in seconds (default: 10)
            transport: Optional httpx transport to send requests through

        Raises:
            UrlParseError: If baseUrl is not a valid absolute URL
        """
        self.ident = ident
        self._baseUrl = parseBaseUrl(baseUrl)
        self.timeout = timeout
        self._transport = transport
        self._httpClient: Optional[httpx.AsyncClient] = None

        logger.debug(f"NominatimClient initialized for {self._baseUrl}")

    async def __aenter__(self) -> "NominatimClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(ident={self.ident!r}, baseUrl={self.baseUrl!r}, timeout={self.timeout!r})"

    @property
    def baseUrl(self) -> str:
        """Base URL all endpoint paths are resolved against"""
        return str(self._baseUrl)

    def setBaseUrl(self, url: Union[str, httpx.URL]) -> None:
        """Set base URL for all following requests.

        Only well-formedness is checked, not reachability. On error the
        current base URL is kept.

        Args:
            url: Absolute http(s) URL of the Nominatim server

        Raises:
            UrlParseError: If url is not a valid absolute URL
        """
        self._baseUrl = parseBaseUrl(url)
        logger.debug(f"Base URL set to {self._baseUrl}")

    def _getHttpClient(self) -> httpx.AsyncClient:
        """Get or create the HTTP client.

        Returns:
            Configured httpx.AsyncClient instance
        """
        if self._httpClient is None or self._httpClient.is_closed:
            self._httpClient = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
            # Identification header is the only one we send on our behalf
            self._httpClient.headers.pop("User-Agent", None)
            logger.debug("Created new HTTP client")

        return self._httpClient

    async def aclose(self) -> None:
        """Close the HTTP client and cleanup resources."""
        if self._httpClient and not self._httpClient.is_closed:
            await self._httpClient.aclose()
            logger.debug("HTTP client closed")

    def buildUrl(self, endpoint: str, params: QueryParams) -> httpx.URL:
        """Build request URL for endpoint.

        Args:
            endpoint: Endpoint path relative to the base URL (e.g., "reverse")
            params: Ordered query parameters

        Returns:
            Full request URL
        """
        query = urlencode(params, safe=",")
        return self._baseUrl.join(endpoint).copy_with(query=query.encode("ascii"))

    async def status(self) -> Status:
        """Check the status of the Nominatim server.

        Returns:
            Server status, ``status == 0`` and ``message == "OK"`` if healthy

        Raises:
            NominatimRequestError: If the request fails
        """
        url = self.buildUrl(ENDPOINT_STATUS, [("format", RESPONSE_FORMAT)])
        return await self._makeRequest(url, Status.from_dict)

    async def search(self, query: str) -> List[Place]:
        """Forward geocoding: find places matching free-form query, dood!

        Args:
            query: Free-form search query (e.g., "statue of liberty")

        Returns:
            Places in the order returned by the server (most relevant first)

        Raises:
            NominatimRequestError: If the request fails
        """
        url = self.buildUrl(
            ENDPOINT_SEARCH,
            [
                ("addressdetails", 1),
                ("extratags", 1),
                ("q", query),
                ("format", RESPONSE_FORMAT),
            ],
        )
        return await self._makeRequest(url, _parseList(Place.from_dict))

    async def reverse(
        self,
        latitude: Coordinate,
        longitude: Coordinate,
        zoom: Optional[int] = None,
    ) -> Place:
        """Reverse geocoding: find the place at given coordinates, dood!

        Args:
            latitude: Latitude (e.g., "40.689249"), spaces are stripped
            longitude: Longitude (e.g., "-74.044500"), spaces are stripped
            zoom: Address detail level (0-18, higher = more detailed). Not validated,
                server decides what to do with out-of-range values.

        Returns:
            Nearest place

        Raises:
            NominatimRequestError: If the request fails
        """
        params: List[Tuple[str, Any]] = [
            ("addressdetails", 1),
            ("extratags", 1),
            ("format", RESPONSE_FORMAT),
            ("lat", str(latitude).replace(" ", "")),
            ("lon", str(longitude).replace(" ", "")),
        ]
        if zoom is not None:
            params.append(("zoom", zoom))

        url = self.buildUrl(ENDPOINT_REVERSE, params)
        return await self._makeRequest(url, Place.from_dict)

    async def lookup(self, queries: Union[str, Iterable[str]]) -> List[Place]:
        """Lookup places by OSM IDs.

        IDs must include type prefix: N (node), W (way) or R (relation).
        Unknown IDs are silently omitted by the server.

        Args:
            queries: OSM IDs (e.g., ["R146656", "W50637691"]), a single string is
                sent as one ID

        Returns:
            Places in the order of requested IDs

        Raises:
            NominatimRequestError: If the request fails
        """
        if isinstance(queries, str):
            queries = [queries]

        url = self.buildUrl(
            ENDPOINT_LOOKUP,
            [
                ("osm_ids", ",".join(str(q) for q in queries)),
                ("addressdetails", 1),
                ("extratags", 1),
                ("format", RESPONSE_FORMAT),
            ],
        )
        return await self._makeRequest(url, _parseList(Place.from_dict))

    async def _makeRequest(self, url: httpx.URL, parse: Callable[[Any], T]) -> T:
        """Make GET request and parse JSON response.

        Single point for all HTTP requests. Identification header is attached
        to each request, configured timeout overrides transport default.

        Args:
            url: Full request URL
            parse: Converter from decoded JSON to result type

        Returns:
            Parsed response

        Raises:
            NominatimRequestError: On network error, timeout, invalid JSON or JSON
                structure not matching the result type. Status code is not
                checked, a non-2xx reply fails only if its body doesn't parse.
        """
        urlStr = str(url)
        logger.debug(f"Making GET request to {urlStr}")

        try:
            response = await self._getHttpClient().get(
                url,
                headers=self.ident.toHeaders(),
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Request timeout: {urlStr}")
            raise NominatimRequestError(f"Request timeout: {type(e).__name__}#{e}", urlStr) from e
        except httpx.RequestError as e:
            logger.warning(f"Network error: {type(e).__name__}#{e}")
            raise NominatimRequestError(f"Network error: {type(e).__name__}#{e}", urlStr) from e

        try:
            result = parse(response.json())
        except (ValueError, TypeError, KeyError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Failed to parse response from {urlStr}: {response.status_code} {type(e).__name__}#{e}")
            raise NominatimRequestError(
                f"Invalid response: {type(e).__name__}#{e}", urlStr, response.status_code
            ) from e

        if not response.is_success:
            logger.warning(f"Error status {response.status_code} with parseable body from {urlStr}")
        else:
            logger.debug(f"API request successful: {response.status_code}")
        return result
