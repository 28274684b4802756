"""Directory Service client.

Every service in the portal reaches the spreadsheet-backed service through
one ``DirectoryClient``. Which wire strategy it uses is fixed at
construction. Each call is attempted exactly once; anything that keeps a
usable JSON answer from coming back is raised as ``DirectoryTransportError``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from portal.directory.transports import DirectoryTransport, QueryStringTransport
from portal.errors import DirectoryTransportError, FailureKind

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
IN_PROCESS_URL = "http://directory.local/exec"


class DirectoryClient:
    def __init__(
        self,
        base_url: str,
        transport: DirectoryTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url
        self.transport = transport or QueryStringTransport()
        self.timeout = timeout
        self._owns_http = http is None
        # Apps Script answers /exec with a redirect to the content host
        self._http = http or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    @classmethod
    def in_process(
        cls,
        app,
        transport: DirectoryTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> "DirectoryClient":
        """Client wired to an ASGI app instead of the network (mock mode)."""
        http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), timeout=timeout)
        client = cls(IN_PROCESS_URL, transport=transport, timeout=timeout, http=http)
        client._owns_http = True
        return client

    async def call(self, action: str, *params: Any) -> Any:
        """Invoke ``action`` with positional ``params``; return the decoded JSON body."""
        logger.debug("Directory call %s via %s", action, self.transport.name)
        try:
            response = await self.transport.send(self._http, self.base_url, action, list(params))
        except httpx.TimeoutException as e:
            logger.warning("Directory call %s timed out after %ss", action, self.timeout)
            raise DirectoryTransportError(f"Timed out after {self.timeout}s", action=action) from e
        except httpx.HTTPError as e:
            logger.warning("Directory call %s failed: %s", action, e)
            raise DirectoryTransportError(f"Request failed: {e}", action=action) from e

        if response.status_code >= 400:
            logger.warning("Directory call %s returned HTTP %s", action, response.status_code)
            raise DirectoryTransportError(
                f"HTTP {response.status_code}", action=action, status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            logger.warning("Directory call %s returned non-JSON body (%d bytes)", action, len(response.content))
            raise DirectoryTransportError("Malformed response", action=action) from e

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "DirectoryClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def unwrap_list(payload: Any) -> list | None:
    """Rows from a list endpoint, or None when the payload is unusable.

    The service answers either with a bare array or with
    ``{"success": true, "data": [...]}``.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and payload.get("success", True) and isinstance(payload.get("data"), list):
        return payload["data"]
    return None


def failure_message(payload: Any, default: str) -> str:
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return default


def unusable_reason(payload: Any) -> tuple[str, FailureKind]:
    """Message and kind for a list call whose payload held no rows."""
    if isinstance(payload, dict) and payload.get("success") is False:
        return failure_message(payload, "Request was refused"), FailureKind.REJECTED
    return "Directory returned no usable data", FailureKind.TRANSPORT
