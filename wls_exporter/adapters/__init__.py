"""Management API adapter interface."""

from __future__ import annotations

from typing import Protocol

from ..domain.query import RequestSpec


class ManagementAdapter(Protocol):
    """Protocol for management API transports.

    Implementations send a ``RequestSpec`` to the remote runtime tree and
    return the raw response body. They do not interpret the body.
    """

    async def search(self, spec: RequestSpec) -> bytes:
        """POST ``spec`` to the search endpoint and return the body bytes."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release transport resources."""
        raise NotImplementedError
