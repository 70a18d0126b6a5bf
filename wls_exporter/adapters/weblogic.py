"""WebLogic REST management API adapter.

This adapter sends the exporter's search request to a WebLogic admin server
and returns the raw response body. It encapsulates transport concerns (base
URL, headers, basic auth, timeouts) and maps every failure to
``TransportError``.

Notes
-----
- No retries. A failed request fails the current probe only; the next scrape
  starts fresh.
- WebLogic rejects state-changing requests without an ``X-Requested-By``
  header, and search is a POST.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..domain.query import RequestSpec
from ..errors import TransportError
from ..utils.correlation import get_probe_id

logger = logging.getLogger(__name__)

SEARCH_PATH = "/management/weblogic/latest/serverRuntime/search"
REQUESTED_BY = "WlsExporter"


class WebLogicAdapter:
    """Adapter for the WebLogic REST management API.

    Parameters
    ----------
    host: str
        Admin server host name or address.
    port: int
        Admin server port.
    username, password: Optional[str]
        Basic-auth credentials. Auth is omitted when ``username`` is empty.
    timeout: float
        Request timeout in seconds.
    scheme: str
        ``http`` or ``https``.
    verify_tls: bool
        Verify the server certificate for https targets.

    Attributes
    ----------
    _client: httpx.AsyncClient
        Shared async client configured with base URL, timeout, and headers.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10.0,
        *,
        scheme: str = "http",
        verify_tls: bool = True,
    ) -> None:
        self._base_url = f"{scheme}://{host}:{port}"
        self._timeout_seconds = timeout
        auth = httpx.BasicAuth(username, password or "") if username else None
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            headers=self._headers(),
            auth=auth,
            verify=verify_tls,
        )
        logger.info(
            "weblogic.adapter.init",
            extra={"base_url": self._base_url, "timeout_seconds": timeout},
        )

    @staticmethod
    def _headers() -> Dict[str, str]:
        return {
            "X-Requested-By": REQUESTED_BY,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    @property
    def base_url(self) -> str:
        """Base URL of the probed admin server."""
        return self._base_url

    def inject_http_client_for_testing(self, client: Any) -> None:
        """Replace underlying HTTP client (testing only).

        This allows unit tests to provide a mock compatible with ``post()``.
        """
        self._client = client

    async def search(self, spec: RequestSpec) -> bytes:
        """POST the search request and return the raw response body.

        Parameters
        ----------
        spec: RequestSpec
            Request built from the query tree.

        Returns
        -------
        bytes
            Undecoded response body.

        Raises
        ------
        TransportError
            On connection failures, timeouts, or non-2xx responses.
        """
        payload = spec.to_payload()
        logger.debug(
            "weblogic.http.post",
            extra={
                "probe_id": get_probe_id(),
                "path": SEARCH_PATH,
                "children": list(payload.get("children", {}).keys()),
            },
        )
        try:
            resp = await self._client.post(SEARCH_PATH, json=payload)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise TransportError(
                f"WebLogic returned HTTP {status} for {SEARCH_PATH}",
                status_code=status,
            ) from exc
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"Request to {self._base_url}{SEARCH_PATH} timed out after "
                f"{self._timeout_seconds}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Request to {self._base_url}{SEARCH_PATH} failed: {exc}"
            ) from exc
        return resp.content

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
