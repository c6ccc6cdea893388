"""Asynchronous PCE client.

Provides ``PCEAsyncClient``, an asyncio wrapper around the PCE REST API v1
using :mod:`httpx` with ``AsyncClient``.
"""

from __future__ import annotations

from typing import Any

import httpx

from pce.api import DEFAULT_MAX_POLLS, DEFAULT_TIMEOUT, api_call_async
from pce.config import PCESettings
from pce.models import PCE, APIResponse, encode_json
from pce.namespaces import AsyncPairingProfilesNamespace, AsyncTrafficNamespace


class PCEAsyncClient:
    """Asynchronous client for the PCE REST API.

    Usage::

        import asyncio
        from pce import PCE, PCEAsyncClient

        async def main():
            pce = PCE("pce.example.com", 8443, 1, "api_1234", "secret")
            async with PCEAsyncClient(pce) as client:
                profiles = await client.pairing_profiles.list()
                print(profiles)

        asyncio.run(main())

    Independent queries can be run concurrently with ``asyncio.gather``;
    each call keeps its own job state.

    Args:
        pce: The endpoint to talk to.
        timeout: HTTP request timeout in seconds. Defaults to 30.
        max_polls: Upper bound on async job polls; ``None`` polls forever.
    """

    def __init__(
        self,
        pce: PCE,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_polls: int | None = DEFAULT_MAX_POLLS,
    ) -> None:
        self.pce = pce
        self._max_polls = max_polls
        self._http = httpx.AsyncClient(
            verify=not pce.disable_tls_checking,
            timeout=timeout,
        )

        # Namespace accessors
        self.traffic = AsyncTrafficNamespace(self)
        self.pairing_profiles = AsyncPairingProfilesNamespace(self)

    @classmethod
    def from_settings(cls, settings: PCESettings | None = None) -> PCEAsyncClient:
        """Build a client from ``PCE_*`` environment settings."""
        settings = settings or PCESettings()
        return cls(settings.to_pce(), timeout=settings.timeout, max_polls=settings.max_polls)

    # -- Context manager ----------------------------------------------------

    async def __aenter__(self) -> PCEAsyncClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying async HTTP connection pool."""
        await self._http.aclose()

    # -- Requests -----------------------------------------------------------

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any | None = None,
        async_job: bool = False,
    ) -> APIResponse:
        """Send a request to the PCE; see :meth:`pce.client.PCEClient.request`."""
        if url.startswith("/"):
            url = self.pce.base_url + url
        return await api_call_async(
            method,
            url,
            self.pce,
            encode_json(json),
            async_job,
            client=self._http,
            max_polls=self._max_polls,
        )
