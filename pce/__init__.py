"""PCE Python SDK.

Provides synchronous and asynchronous clients for the PCE REST API, with
transparent polling of async jobs.

Quick start::

    from pce import PCE, PCEClient

    pce = PCE("pce.example.com", 8443, 1, "api_1234", "secret")
    with PCEClient(pce) as client:
        print(client.pairing_profiles.list())

For one-off calls without a client::

    from pce import PCE, api_call

    resp = api_call("GET", pce.org_url + "/labels", pce, async_job=True)
    print(resp.status_code, resp.resp_body)
"""

from __future__ import annotations

from pce.api import api_call, api_call_async
from pce.async_client import PCEAsyncClient
from pce.client import PCEClient
from pce.config import PCESettings
from pce.exceptions import (
    DecodeError,
    HTTPStatusError,
    InvalidMethodError,
    MissingRetryAfterError,
    NetworkError,
    PCEError,
    PollTimeoutError,
)
from pce.explorer import TrafficQuery, traffic_analysis_payload
from pce.models import PCE, APIResponse, AsyncJob, PairingKey, PairingProfile, sanitize_fqdn

__all__ = [
    "PCE",
    "APIResponse",
    "AsyncJob",
    "DecodeError",
    "HTTPStatusError",
    "InvalidMethodError",
    "MissingRetryAfterError",
    "NetworkError",
    "PCEAsyncClient",
    "PCEClient",
    "PCEError",
    "PCESettings",
    "PairingKey",
    "PairingProfile",
    "PollTimeoutError",
    "TrafficQuery",
    "api_call",
    "api_call_async",
    "sanitize_fqdn",
    "traffic_analysis_payload",
]

__version__ = "0.1.0"
