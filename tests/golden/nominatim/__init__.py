"""Golden data for Nominatim client tests.

Each file in ``data/`` is a recorded Nominatim HTTP exchange: the request
(method and full URL) and the response (status code and JSON body).
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import httpx

GOLDEN_DATA_PATH = Path(__file__).parent / "data"


def loadScenario(name: str) -> Dict[str, Any]:
    """Load recorded exchange by file name (without extension)."""
    with open(GOLDEN_DATA_PATH / f"{name}.json", "rt", encoding="utf-8") as f:
        return json.load(f)


def loadAllScenarios() -> List[Dict[str, Any]]:
    """Load all recorded exchanges, sorted by file name."""
    return [loadScenario(path.stem) for path in sorted(GOLDEN_DATA_PATH.glob("*.json"))]


class ReplayTransport(httpx.AsyncBaseTransport):
    """httpx transport that replays recorded Nominatim responses.

    Requests are matched to recordings by method and full URL (including
    query string), so any change in request building breaks the match.
    """

    def __init__(self, scenarios: List[Dict[str, Any]]):
        self.scenarios = scenarios
        self.requests: List[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Return a recorded response for a matching request.

        Raises:
            ValueError: If no matching recorded call is found.
        """
        self.requests.append(request)
        for scenario in self.scenarios:
            recorded = scenario["request"]
            if recorded["method"] == request.method and recorded["url"] == str(request.url):
                response = scenario["response"]
                return httpx.Response(response["status_code"], json=response["json"], request=request)

        raise ValueError(f"No recorded response for {request.method} {request.url}")
