"""
Data Layer Base Classes.

The data layer talks to the remote backend over HTTP. It hides the
transport (httpx) from the controllers and turns every failure into one
of a small set of exceptions the presentation code knows how to report.

Key principles:
- API clients handle requests and response envelopes only
- No rendering or user messaging in the data layer
- Return domain objects, not raw dicts (when possible)
- The HTTP transport is injectable so tests never touch the network
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


# =============================================================================
# ERROR TAXONOMY
# =============================================================================

class GatewayError(Exception):
    """Base class for every failure raised by an API client."""


class NetworkFailure(GatewayError):
    """The request could not complete (connection error, timeout)."""


class HTTPError(GatewayError):
    """The backend answered with a non-success status code."""

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}" if message else f"HTTP {status_code}")


class AuthMissing(GatewayError):
    """A token-protected call was attempted without a token."""


# =============================================================================
# RESULTS
# =============================================================================

@dataclass
class MutationResult:
    """Outcome of a create/update/delete call."""
    success: bool
    message: str = ""


# =============================================================================
# BASE CLIENT
# =============================================================================

class BaseApiClient:
    """
    Async JSON-over-HTTP client.

    Owns a lazily created ``httpx.AsyncClient`` and maps transport and
    status failures onto the GatewayError hierarchy.

    Example:
        class DoctorApiClient(BaseApiClient):
            async def get_doctors(self) -> list:
                body = await self._request("GET", "/doctor")
                return body.get("doctors", [])
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Root URL of the backend
            timeout: Per-request timeout in seconds (None disables it)
            transport: Optional custom transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        label: Optional[str] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to base_url, already encoded
            label: Name used in logs and errors instead of the raw path
                   (paths may embed auth tokens)
            json: Optional JSON body
            headers: Optional extra headers

        Returns:
            The decoded JSON object ({} for an empty body)

        Raises:
            NetworkFailure: transport error or timeout
            HTTPError: non-success status code
        """
        label = label or f"{method} {path}"
        client = await self._get_client()

        try:
            response = await client.request(method, path, json=json, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"Request timed out: {label}")
            raise NetworkFailure(f"Request timed out: {label}") from e
        except httpx.RequestError as e:
            logger.warning(f"Request failed: {label}: {type(e).__name__}")
            raise NetworkFailure(f"Request failed: {label}") from e

        body = self._decode(response)

        if not response.is_success:
            message = body.get("error") or body.get("message") or response.reason_phrase
            logger.warning(f"{label} returned {response.status_code}: {message}")
            raise HTTPError(response.status_code, message)

        logger.debug(f"{label} -> {response.status_code}")
        return body

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        """Decode a JSON object body; anything else becomes an empty dict."""
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {"data": data}
