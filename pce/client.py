"""Synchronous PCE client.

Provides ``PCEClient``, a synchronous wrapper around the PCE REST API v1
using :mod:`httpx`.
"""

from __future__ import annotations

from typing import Any

import httpx

from pce.api import DEFAULT_MAX_POLLS, DEFAULT_TIMEOUT, api_call
from pce.config import PCESettings
from pce.models import PCE, APIResponse, encode_json
from pce.namespaces import PairingProfilesNamespace, TrafficNamespace


class PCEClient:
    """Synchronous client for the PCE REST API.

    Usage::

        from pce import PCE, PCEClient, TrafficQuery

        pce = PCE("pce.example.com", 8443, 1, "api_1234", "secret")
        with PCEClient(pce) as client:
            profiles = client.pairing_profiles.list()
            flows = client.traffic.analysis(
                TrafficQuery(sources_include=["10.0.0.1"]), async_job=True
            )

    The client manages its own :class:`httpx.Client`, with certificate
    verification disabled only when ``pce.disable_tls_checking`` is set.
    Use it as a context manager to close the connection pool promptly.

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
        self._http = httpx.Client(
            verify=not pce.disable_tls_checking,
            timeout=timeout,
        )

        # Namespace accessors
        self.traffic = TrafficNamespace(self)
        self.pairing_profiles = PairingProfilesNamespace(self)

    @classmethod
    def from_settings(cls, settings: PCESettings | None = None) -> PCEClient:
        """Build a client from ``PCE_*`` environment settings."""
        settings = settings or PCESettings()
        return cls(settings.to_pce(), timeout=settings.timeout, max_polls=settings.max_polls)

    # -- Context manager ----------------------------------------------------

    def __enter__(self) -> PCEClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    # -- Requests -----------------------------------------------------------

    def request(
        self,
        method: str,
        url: str,
        *,
        json: Any | None = None,
        async_job: bool = False,
    ) -> APIResponse:
        """Send a request to the PCE.

        Args:
            method: GET, POST, PUT or DELETE.
            url: Full URL, or a path relative to ``pce.base_url``
                (e.g. ``"/orgs/1/labels"``).
            json: Optional body, serialized to JSON.
            async_job: Run the request as an async job and poll for the result.

        Raises:
            PCEError: See :func:`pce.api.api_call` for the subclasses.
        """
        if url.startswith("/"):
            url = self.pce.base_url + url
        return api_call(
            method,
            url,
            self.pce,
            encode_json(json),
            async_job,
            client=self._http,
            max_polls=self._max_polls,
        )
