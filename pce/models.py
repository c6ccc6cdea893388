"""Data types shared by the PCE transport and namespaces."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx

from pce.exceptions import DecodeError

JOB_DONE = "done"


def sanitize_fqdn(fqdn: str) -> str:
    """Clean up a user supplied PCE FQDN.

    Trims one trailing slash and a leading ``https://`` scheme. Nothing else
    is normalized, so ports and case are left alone.
    """
    if fqdn.endswith("/"):
        fqdn = fqdn[:-1]
    if fqdn.startswith("https://"):
        fqdn = fqdn[len("https://"):]
    return fqdn


def encode_json(body: Any | None) -> bytes | None:
    """Serialize a request body; ``None`` means no body."""
    if body is None:
        return None
    return json.dumps(body).encode("utf-8")


def _object(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DecodeError(f"{key!r} should be a JSON object, got {type(value).__name__}")
    return value


def _text(data: dict[str, Any], key: str, name: str | None = None) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"{name or key!r} should be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class PCE:
    """An Illumio-style PCE and the information needed to authenticate.

    Args:
        fqdn: Host name of the PCE. A scheme prefix or trailing slash is
            tolerated and stripped when URLs are built.
        port: HTTPS port of the API.
        org: Organization id.
        user: API user (key id) for basic authentication.
        key: API secret for basic authentication.
        disable_tls_checking: Skip certificate verification. Off by default.
    """

    fqdn: str
    port: int
    org: int
    user: str
    key: str = field(repr=False)
    disable_tls_checking: bool = False

    @property
    def host(self) -> str:
        return sanitize_fqdn(self.fqdn)

    @property
    def base_url(self) -> str:
        """Root of the versioned API, e.g. ``https://pce:8443/api/v1``."""
        return f"https://{self.host}:{self.port}/api/v1"

    @property
    def org_url(self) -> str:
        return f"{self.base_url}/orgs/{self.org}"


@dataclass
class APIResponse:
    """Information from one HTTP exchange with the PCE.

    Always populated, including when an error is raised, so that callers can
    read the error detail from ``resp_body``.
    """

    resp_body: str
    status_code: int
    header: httpx.Headers
    request: httpx.Request | None = None

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> APIResponse:
        return cls(
            resp_body=response.text,
            status_code=response.status_code,
            header=response.headers,
            request=response.request,
        )

    def json(self) -> Any:
        """Parse ``resp_body`` as JSON; an empty body yields ``None``."""
        if not self.resp_body:
            return None
        return json.loads(self.resp_body)


@dataclass
class AsyncJob:
    """State of a server side asynchronous job, as returned by a poll."""

    href: str = ""
    job_type: str = ""
    description: str = ""
    status: str = ""
    result_href: str = ""
    requested_at: str = ""
    terminated_at: str = ""
    requested_by_href: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AsyncJob:
        """Build a job from its status JSON.

        Raises:
            DecodeError: A field does not have the documented shape.
        """
        result = _object(data, "result")
        requested_by = _object(data, "requested_by")
        return cls(
            href=_text(data, "href"),
            job_type=_text(data, "job_type"),
            description=_text(data, "description"),
            status=_text(data, "status"),
            result_href=_text(result, "href", "result.href"),
            requested_at=_text(data, "requested_at"),
            terminated_at=_text(data, "terminated_at"),
            requested_by_href=_text(requested_by, "href", "requested_by.href"),
        )

    @property
    def is_done(self) -> bool:
        return self.status == JOB_DONE


# Flags the PCE expects on every write, even when false.
_PAIRING_PROFILE_FLAGS = (
    "app_label_lock",
    "enabled",
    "env_label_lock",
    "loc_label_lock",
    "log_traffic",
    "log_traffic_lock",
    "mode_lock",
    "role_label_lock",
    "visibility_level_lock",
)


@dataclass
class PairingProfile:
    """A pairing profile used to pair VENs with the PCE."""

    name: str = ""
    description: str = ""
    enabled: bool = False
    mode: str = ""
    href: str = ""
    labels: list[dict[str, Any]] = field(default_factory=list)
    allowed_uses_per_key: str = ""
    key_lifespan: str = ""
    visibility_level: str = ""
    external_data_set: str = ""
    external_data_reference: str = ""
    is_default: bool = False
    total_use_count: int = 0
    last_pairing_at: str = ""
    created_at: str = ""
    created_by: dict[str, Any] | None = None
    updated_at: str = ""
    updated_by: dict[str, Any] | None = None
    app_label_lock: bool = False
    env_label_lock: bool = False
    loc_label_lock: bool = False
    role_label_lock: bool = False
    log_traffic: bool = False
    log_traffic_lock: bool = False
    mode_lock: bool = False
    visibility_level_lock: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PairingProfile:
        known = cls.__dataclass_fields__
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the API, omitting empty optional fields."""
        body: dict[str, Any] = {}
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if name in _PAIRING_PROFILE_FLAGS or value:
                body[name] = value
        return body


@dataclass
class PairingKey:
    """Activation code generated from a pairing profile."""

    activation_code: str = ""

    @classmethod
    def from_response(cls, response: APIResponse) -> PairingKey:
        try:
            data = response.json()
        except ValueError as exc:
            raise DecodeError(f"pairing key response is not valid JSON: {exc}") from exc
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise DecodeError(f"expected a JSON object, got {type(data).__name__}")
        return cls(activation_code=_text(data, "activation_code"))
