"""Explorer (traffic analysis) query construction.

:class:`TrafficQuery` is the caller-friendly description of a flow search;
:func:`traffic_analysis_payload` turns it into the JSON body expected by
``POST /orgs/{org}/traffic_flows/traffic_analysis_queries``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class TrafficQuery:
    """Parameters for a traffic analysis query.

    Source and destination lists hold label hrefs, workload hrefs or IP
    addresses. A list is interpreted by its first entry, so do not mix kinds
    in one list.
    """

    sources_include: list[str] = field(default_factory=list)
    sources_exclude: list[str] = field(default_factory=list)
    destinations_include: list[str] = field(default_factory=list)
    destinations_exclude: list[str] = field(default_factory=list)
    # (port, proto) pairs, e.g. (3306, 6)
    port_proto_include: list[tuple[int, int]] = field(default_factory=list)
    port_proto_exclude: list[tuple[int, int]] = field(default_factory=list)
    # (port, to_port) pairs
    port_range_include: list[tuple[int, int]] = field(default_factory=list)
    port_range_exclude: list[tuple[int, int]] = field(default_factory=list)
    process_include: list[str] = field(default_factory=list)
    process_exclude: list[str] = field(default_factory=list)
    windows_service_include: list[str] = field(default_factory=list)
    windows_service_exclude: list[str] = field(default_factory=list)
    start_time: datetime | None = None
    end_time: datetime | None = None
    policy_statuses: list[str] = field(default_factory=list)
    max_flows: int | None = None


def _actor(value: str, kind: str) -> dict[str, Any]:
    if kind == "label":
        return {"label": {"href": value}}
    if kind == "workload":
        return {"workload": {"href": value}}
    return {"ip_address": {"value": value}}


def _actors(values: list[str]) -> list[dict[str, Any]]:
    """Translate one source/destination list into include/exclude objects."""
    if not values or not values[0]:
        return []
    first = values[0]
    if "label" in first:
        kind = "label"
    elif "workload" in first:
        kind = "workload"
    else:
        # Anything else is taken as an IP address; the PCE rejects bad ones.
        kind = "ip_address"
    return [_actor(v, kind) for v in values]


def _service(port: int = 0, to_port: int = 0, proto: int = 0,
             process: str = "", windows_service: str = "") -> dict[str, Any]:
    entry = {
        "port": port,
        "to_port": to_port,
        "proto": proto,
        "process_name": process,
        "windows_service_name": windows_service,
    }
    return {k: v for k, v in entry.items() if v}


def _services(port_proto: list[tuple[int, int]], port_range: list[tuple[int, int]],
              processes: list[str], windows_services: list[str]) -> list[dict[str, Any]]:
    services = [_service(port=p, proto=proto) for p, proto in port_proto]
    services += [_service(port=p, to_port=to) for p, to in port_range]
    services += [_service(process=name) for name in processes]
    services += [_service(windows_service=name) for name in windows_services]
    return services


def _timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + "Z"


def traffic_analysis_payload(query: TrafficQuery) -> dict[str, Any]:
    """Build the traffic analysis request body for ``query``.

    Empty lists are sent as ``[]`` rather than omitted, as the API requires.
    """
    payload: dict[str, Any] = {
        "sources": {
            "include": [_actors(query.sources_include)],
            "exclude": _actors(query.sources_exclude),
        },
        "destinations": {
            "include": [_actors(query.destinations_include)],
            "exclude": _actors(query.destinations_exclude),
        },
        "services": {
            "include": _services(
                query.port_proto_include,
                query.port_range_include,
                query.process_include,
                query.windows_service_include,
            ),
            "exclude": _services(
                query.port_proto_exclude,
                query.port_range_exclude,
                query.process_exclude,
                query.windows_service_exclude,
            ),
        },
        "policy_decisions": list(query.policy_statuses),
    }
    if query.start_time is not None:
        payload["start_date"] = _timestamp(query.start_time)
    if query.end_time is not None:
        payload["end_date"] = _timestamp(query.end_time)
    if query.max_flows:
        payload["max_results"] = query.max_flows
    return payload
