"""
Identification methods for the Nominatim API.

Nominatim usage policy requires every client to identify itself, either by an
application name in the ``User-Agent`` header or by a ``Referer`` URL.
"""

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Dict, Tuple

from .constants import HEADER_REFERER, HEADER_USER_AGENT
from .exceptions import InvalidHeaderValueError

# Visible ASCII and horizontal tab
_HEADER_VALUE_RE = re.compile(r"[\t\x20-\x7e]*")


class IdentificationKind(StrEnum):
    """How the client identifies itself. Member value is the header name."""

    USER_AGENT = HEADER_USER_AGENT
    REFERER = HEADER_REFERER


@dataclass(frozen=True)
class IdentificationMethod:
    """Identification header sent with every Nominatim request, dood!

    Example:
        >>> ident = IdentificationMethod.fromUserAgent("Example Application Name")
        >>> ident.toHeader()
        ('User-Agent', 'Example Application Name')
    """

    kind: IdentificationKind
    value: str

    def __post_init__(self):
        """Reject values which can't be sent as a header value"""
        if not isinstance(self.value, str) or _HEADER_VALUE_RE.fullmatch(self.value) is None:
            raise InvalidHeaderValueError(str(self.kind), self.value)

    @classmethod
    def fromUserAgent(cls, userAgent: str) -> "IdentificationMethod":
        """Identify by application name, sent as ``User-Agent``."""
        return cls(IdentificationKind.USER_AGENT, userAgent)

    @classmethod
    def fromReferer(cls, referer: str) -> "IdentificationMethod":
        """Identify by URL, sent as ``Referer``."""
        return cls(IdentificationKind.REFERER, referer)

    def headerName(self) -> str:
        return str(self.kind)

    def headerValue(self) -> str:
        return self.value

    def toHeader(self) -> Tuple[str, str]:
        return (self.headerName(), self.headerValue())

    def toHeaders(self) -> Dict[str, str]:
        """Build a new headers dict for a single request."""
        return {self.headerName(): self.headerValue()}
