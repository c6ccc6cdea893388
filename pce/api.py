"""HTTP transport core for the PCE REST API.

:func:`api_call` (and its coroutine twin :func:`api_call_async`) issues one
request against the PCE and returns an :class:`~pce.models.APIResponse`.
When ``async_job`` is set the request is submitted with
``Prefer: respond-async`` and the returned job is polled until it is done,
after which its result is fetched::

    submitted --> polling --(status "done")--> result ready --> fetched

The response handed back always belongs to the last exchange, so for async
jobs it is the result fetch rather than the submission acknowledgment.
"""

from __future__ import annotations

import asyncio
import logging
import time
from urllib.parse import urlsplit

import httpx

from pce.exceptions import (
    DecodeError,
    HTTPStatusError,
    InvalidMethodError,
    MissingRetryAfterError,
    NetworkError,
    PollTimeoutError,
)
from pce.models import PCE, APIResponse, AsyncJob

logger = logging.getLogger(__name__)

VALID_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_POLLS = 1000


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _validate_method(method: str) -> str:
    upper = method.upper()
    if upper not in VALID_METHODS:
        raise InvalidMethodError(method)
    return upper


def _headers(async_job: bool) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if async_job:
        headers["Prefer"] = "respond-async"
    return headers


def _auth(pce: PCE) -> httpx.BasicAuth:
    return httpx.BasicAuth(pce.user, pce.key)


def api_base_url(url: str) -> str:
    """Return the ``/api/v1`` root of the PCE that serves ``url``."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}/api/v1"


def _join(base: str, href: str) -> str:
    if href.startswith(("http://", "https://")):
        return href
    return base + href


def _retry_after(latest: httpx.Response, submitted: httpx.Response) -> int:
    """Seconds to wait before the next poll.

    The latest response's header wins; the submission's is used when the
    latest one carries none.
    """
    value = latest.headers.get("Retry-After")
    if value is None:
        value = submitted.headers.get("Retry-After")
    try:
        seconds = int(value.strip())
    except (AttributeError, ValueError):
        raise MissingRetryAfterError(value) from None
    if seconds < 0:
        raise MissingRetryAfterError(value)
    return seconds


def _job_url(base: str, submitted: httpx.Response) -> str:
    location = submitted.headers.get("Location")
    if not location:
        raise DecodeError("async job submission response has no Location header")
    return _join(base, location)


def _decode_poll(response: httpx.Response) -> AsyncJob:
    if not response.is_success:
        raise HTTPStatusError(APIResponse.from_httpx(response))
    try:
        data = response.json()
    except ValueError as exc:
        raise DecodeError(f"job status from {response.url} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise DecodeError(f"job status from {response.url} is not a JSON object")
    return AsyncJob.from_dict(data)


def _result_url(base: str, job: AsyncJob) -> str:
    if not job.result_href:
        raise DecodeError(f"job {job.href or '?'} is done but has no result href")
    return _join(base, job.result_href)


def _check_poll_budget(job_url: str, polls: int, job: AsyncJob, max_polls: int | None) -> None:
    if max_polls is not None and polls >= max_polls:
        logger.error("job %s not done after %d polls", job_url, polls)
        raise PollTimeoutError(job_url, polls, job.status)


def _finish(response: httpx.Response) -> APIResponse:
    api = APIResponse.from_httpx(response)
    if str(api.status_code)[0] != "2":
        logger.error(
            "%s %s -> %d: %s",
            response.request.method,
            response.request.url,
            api.status_code,
            api.resp_body[:200],
        )
        raise HTTPStatusError(api)
    return api


def _network_error(method: str, url: str, exc: httpx.RequestError) -> NetworkError:
    logger.error("%s %s connection failed: %s", method, url, exc)
    return NetworkError(f"{method} {url} failed: {exc}")


# ---------------------------------------------------------------------------
# Synchronous transport
# ---------------------------------------------------------------------------


def _send(client: httpx.Client, method: str, url: str, auth: httpx.BasicAuth, **kwargs) -> httpx.Response:
    logger.debug("%s %s", method, url)
    try:
        return client.request(method, url, auth=auth, **kwargs)
    except httpx.RequestError as exc:
        raise _network_error(method, url, exc) from exc


def _run_job(
    client: httpx.Client,
    url: str,
    auth: httpx.BasicAuth,
    submitted: httpx.Response,
    max_polls: int | None,
) -> httpx.Response:
    base = api_base_url(url)
    job_url = _job_url(base, submitted)
    logger.info("async job submitted: %s", job_url)

    job = AsyncJob()
    latest = submitted
    polls = 0
    while not job.is_done:
        _check_poll_budget(job_url, polls, job, max_polls)
        time.sleep(_retry_after(latest, submitted))
        latest = _send(client, "GET", job_url, auth, headers=_headers(False))
        polls += 1
        job = _decode_poll(latest)
        logger.debug("job %s status %r after %d polls", job_url, job.status, polls)

    result_url = _result_url(base, job)
    logger.info("async job %s done after %d polls, fetching %s", job_url, polls, result_url)
    return _send(client, "GET", result_url, auth, headers=_headers(False))


def api_call(
    method: str,
    url: str,
    pce: PCE,
    body: bytes | None = None,
    async_job: bool = False,
    *,
    client: httpx.Client | None = None,
    max_polls: int | None = DEFAULT_MAX_POLLS,
    timeout: float = DEFAULT_TIMEOUT,
) -> APIResponse:
    """Send one request to the PCE, polling an async job when asked to.

    Args:
        method: GET, POST, PUT or DELETE (any case).
        url: Fully-qualified endpoint URL.
        pce: Endpoint whose credentials and TLS policy are used.
        body: Raw JSON body for PUT and POST requests.
        async_job: Ask the PCE to run the request as an async job and poll
            it. Use for queries expected to return more than 500 items.
        client: Optional client to send through. When omitted a client is
            opened for this call only, honouring ``pce.disable_tls_checking``.
        max_polls: Upper bound on job-status polls; ``None`` polls forever.
        timeout: Per-request timeout for a call-owned client.

    Returns:
        The response of the last exchange (the result fetch for async jobs).

    Raises:
        InvalidMethodError: ``method`` is not supported. Nothing is sent.
        NetworkError: A request could not be completed.
        MissingRetryAfterError: The PCE gave no usable ``Retry-After``.
        DecodeError: A job response could not be interpreted.
        PollTimeoutError: The job was not done within ``max_polls`` polls.
        HTTPStatusError: The final status code is not 2xx. The response is
            attached to the error.
    """
    method = _validate_method(method)
    if client is None:
        with httpx.Client(verify=not pce.disable_tls_checking, timeout=timeout) as owned:
            return api_call(method, url, pce, body, async_job, client=owned, max_polls=max_polls)

    auth = _auth(pce)
    response = _send(client, method, url, auth, content=body, headers=_headers(async_job))
    if async_job and response.is_success:
        response = _run_job(client, url, auth, response, max_polls)
    return _finish(response)


# ---------------------------------------------------------------------------
# Asynchronous (asyncio) transport
# ---------------------------------------------------------------------------


async def _asend(
    client: httpx.AsyncClient, method: str, url: str, auth: httpx.BasicAuth, **kwargs
) -> httpx.Response:
    logger.debug("%s %s", method, url)
    try:
        return await client.request(method, url, auth=auth, **kwargs)
    except httpx.RequestError as exc:
        raise _network_error(method, url, exc) from exc


async def _arun_job(
    client: httpx.AsyncClient,
    url: str,
    auth: httpx.BasicAuth,
    submitted: httpx.Response,
    max_polls: int | None,
) -> httpx.Response:
    base = api_base_url(url)
    job_url = _job_url(base, submitted)
    logger.info("async job submitted: %s", job_url)

    job = AsyncJob()
    latest = submitted
    polls = 0
    while not job.is_done:
        _check_poll_budget(job_url, polls, job, max_polls)
        await asyncio.sleep(_retry_after(latest, submitted))
        latest = await _asend(client, "GET", job_url, auth, headers=_headers(False))
        polls += 1
        job = _decode_poll(latest)
        logger.debug("job %s status %r after %d polls", job_url, job.status, polls)

    result_url = _result_url(base, job)
    logger.info("async job %s done after %d polls, fetching %s", job_url, polls, result_url)
    return await _asend(client, "GET", result_url, auth, headers=_headers(False))


async def api_call_async(
    method: str,
    url: str,
    pce: PCE,
    body: bytes | None = None,
    async_job: bool = False,
    *,
    client: httpx.AsyncClient | None = None,
    max_polls: int | None = DEFAULT_MAX_POLLS,
    timeout: float = DEFAULT_TIMEOUT,
) -> APIResponse:
    """Coroutine version of :func:`api_call`; same arguments and errors."""
    method = _validate_method(method)
    if client is None:
        async with httpx.AsyncClient(verify=not pce.disable_tls_checking, timeout=timeout) as owned:
            return await api_call_async(
                method, url, pce, body, async_job, client=owned, max_polls=max_polls
            )

    auth = _auth(pce)
    response = await _asend(client, method, url, auth, content=body, headers=_headers(async_job))
    if async_job and response.is_success:
        response = await _arun_job(client, url, auth, response, max_polls)
    return _finish(response)
