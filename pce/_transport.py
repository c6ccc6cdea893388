"""Transport protocol definitions for namespace type checking.

These protocols define the client surface that namespace classes depend
on. They are used only for static type checking and are not instantiated
at runtime.
"""

from __future__ import annotations

from typing import Any, Protocol

from pce.models import PCE, APIResponse


class SyncTransport(Protocol):
    """Protocol for the synchronous client request method."""

    pce: PCE

    def request(
        self,
        method: str,
        url: str,
        *,
        json: Any | None = None,
        async_job: bool = False,
    ) -> APIResponse: ...


class AsyncTransport(Protocol):
    """Protocol for the asynchronous client request method."""

    pce: PCE

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any | None = None,
        async_job: bool = False,
    ) -> APIResponse: ...
