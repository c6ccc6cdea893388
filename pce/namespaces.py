"""Namespace classes for the PCE SDK.

Each namespace groups related API endpoints, builds their URLs and bodies,
and delegates the HTTP exchange to the parent client's ``request`` method.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pce.exceptions import DecodeError
from pce.explorer import TrafficQuery, traffic_analysis_payload
from pce.models import APIResponse, PairingProfile

if TYPE_CHECKING:
    from pce._transport import SyncTransport, AsyncTransport


def _json_list(api: APIResponse) -> list[Any]:
    try:
        data = api.json()
    except ValueError as exc:
        raise DecodeError(f"response body is not valid JSON: {exc}") from exc
    if data is None:
        return []
    if not isinstance(data, list):
        raise DecodeError(f"expected a JSON array, got {type(data).__name__}")
    return data


def _profile_href(profile: PairingProfile | str) -> str:
    href = profile.href if isinstance(profile, PairingProfile) else profile
    if not href:
        raise ValueError("pairing profile has no href")
    return href


# ---------------------------------------------------------------------------
# Sync namespaces
# ---------------------------------------------------------------------------


class TrafficNamespace:
    """Explorer traffic flow endpoints."""

    def __init__(self, transport: SyncTransport) -> None:
        self._t = transport

    def analysis(self, query: TrafficQuery, *, async_job: bool = False) -> list[dict[str, Any]]:
        """Run a traffic analysis query and return the matching flows."""
        api = self._t.request(
            "POST",
            f"{self._t.pce.org_url}/traffic_flows/traffic_analysis_queries",
            json=traffic_analysis_payload(query),
            async_job=async_job,
        )
        return _json_list(api)


class PairingProfilesNamespace:
    """Pairing profile and pairing key endpoints."""

    def __init__(self, transport: SyncTransport) -> None:
        self._t = transport

    def list(self) -> list[PairingProfile]:
        """List all pairing profiles."""
        api = self._t.request("GET", f"{self._t.pce.org_url}/pairing_profiles")
        return [PairingProfile.from_dict(p) for p in _json_list(api)]

    def create(self, profile: PairingProfile) -> APIResponse:
        """Create a new pairing profile."""
        return self._t.request(
            "POST", f"{self._t.pce.org_url}/pairing_profiles", json=profile.to_dict()
        )

    def create_pairing_key(self, profile: PairingProfile | str) -> APIResponse:
        """Generate a pairing key from a pairing profile (or its href)."""
        href = _profile_href(profile)
        return self._t.request("POST", f"{self._t.pce.base_url}{href}/pairing_key", json={})


# ---------------------------------------------------------------------------
# Async namespaces
# ---------------------------------------------------------------------------


class AsyncTrafficNamespace:
    """Async explorer traffic flow endpoints."""

    def __init__(self, transport: AsyncTransport) -> None:
        self._t = transport

    async def analysis(
        self, query: TrafficQuery, *, async_job: bool = False
    ) -> list[dict[str, Any]]:
        """Run a traffic analysis query and return the matching flows."""
        api = await self._t.request(
            "POST",
            f"{self._t.pce.org_url}/traffic_flows/traffic_analysis_queries",
            json=traffic_analysis_payload(query),
            async_job=async_job,
        )
        return _json_list(api)


class AsyncPairingProfilesNamespace:
    """Async pairing profile and pairing key endpoints."""

    def __init__(self, transport: AsyncTransport) -> None:
        self._t = transport

    async def list(self) -> list[PairingProfile]:
        """List all pairing profiles."""
        api = await self._t.request("GET", f"{self._t.pce.org_url}/pairing_profiles")
        return [PairingProfile.from_dict(p) for p in _json_list(api)]

    async def create(self, profile: PairingProfile) -> APIResponse:
        """Create a new pairing profile."""
        return await self._t.request(
            "POST", f"{self._t.pce.org_url}/pairing_profiles", json=profile.to_dict()
        )

    async def create_pairing_key(self, profile: PairingProfile | str) -> APIResponse:
        """Generate a pairing key from a pairing profile (or its href)."""
        href = _profile_href(profile)
        return await self._t.request(
            "POST", f"{self._t.pce.base_url}{href}/pairing_key", json={}
        )
