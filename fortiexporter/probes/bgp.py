"""BGP neighbor and path probes."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any

from ..client import FortiAPIError
from ..metrics import Desc, Metric, ProbeFailed, TargetMetadata

logger = logging.getLogger(__name__)

_BGP_STATES = {
    "Idle": 1,
    "Connect": 2,
    "Active": 3,
    "Open sent": 4,
    "Open confirm": 5,
    "Established": 6,
}

_NEIGHBOR_LABELS = ("vdom", "remote_as", "state", "admin_status", "local_ip", "neighbor_ip")
_NEIGHBOR_HELP = (
    "Configured bgp neighbor over {family}, return state as value (1 - Idle, 2 - Connect, "
    "3 - Active, 4 - Open sent, 5 - Open confirm, 6 - Established)"
)

_NEIGHBORS_V4 = Desc(
    "fortigate_bgp_neighbor_ipv4_info", _NEIGHBOR_HELP.format(family="ipv4"), _NEIGHBOR_LABELS
)
_NEIGHBORS_V6 = Desc(
    "fortigate_bgp_neighbor_ipv6_info", _NEIGHBOR_HELP.format(family="ipv6"), _NEIGHBOR_LABELS
)

_PATH_LABELS = ("vdom", "neighbor_ip")
_PATHS_V4 = Desc("fortigate_bgp_neighbor_ipv4_paths",
                 "Count of paths received from an BGP neighbor", _PATH_LABELS)
_BEST_PATHS_V4 = Desc("fortigate_bgp_neighbor_ipv4_best_paths",
                      "Count of best paths for an BGP neighbor", _PATH_LABELS)
_PATHS_V6 = Desc("fortigate_bgp_neighbor_ipv6_paths",
                 "Count of paths received from an BGP neighbor", _PATH_LABELS)
_BEST_PATHS_V6 = Desc("fortigate_bgp_neighbor_ipv6_best_paths",
                      "Count of best paths for an BGP neighbor", _PATH_LABELS)


def bgp_state_to_number(state: str) -> float:
    """Map a BGP session state name to its numeric value (0 when unknown)."""
    return float(_BGP_STATES.get(state, 0))


def _fetch_list(client: Any, path: str, query: str) -> list[dict]:
    try:
        data = client.get(path, query)
    except FortiAPIError as exc:
        logger.error("Error: %s", exc)
        raise ProbeFailed(str(exc)) from exc
    if data is None:
        return []
    if not isinstance(data, list):
        logger.error("Error: unexpected response for %s", path)
        raise ProbeFailed(f"unexpected response for {path!r}")
    return data


def _probe_paths(client: Any, meta: TargetMetadata, max_bgp_paths: int, path: str,
                 paths_desc: Desc, best_desc: Desc) -> list[Metric]:
    if max_bgp_paths == 0 or meta.version_major < 7:
        return []

    responses = _fetch_list(client, path, f"vdom=*&count={max_bgp_paths}")
    counts: Counter[tuple[str, str]] = Counter()
    best: Counter[tuple[str, str]] = Counter()
    for response in responses:
        vdom = response.get("vdom", "")
        routes = response.get("results") or []
        if len(routes) > max_bgp_paths:
            logger.error(
                "Error: Received more BGP Paths than maximum (%d > %d) allowed, "
                "ignoring metric ...", len(routes), max_bgp_paths,
            )
            raise ProbeFailed(
                f"received more BGP paths than maximum ({len(routes)} > {max_bgp_paths})"
            )
        for route in routes:
            key = (route.get("learned_from", ""), vdom)
            counts[key] += 1
            if route.get("is_best", False):
                best[key] += 1

    metrics = [paths_desc.metric(n, vdom, source) for (source, vdom), n in counts.items()]
    metrics += [best_desc.metric(n, vdom, source) for (source, vdom), n in best.items()]
    return metrics


def probe_bgp_neighbor_paths_ipv4(client: Any, meta: TargetMetadata,
                                  max_bgp_paths: int) -> list[Metric]:
    """Count IPv4 BGP paths and best paths per neighbor."""
    return _probe_paths(client, meta, max_bgp_paths, "api/v2/monitor/router/bgp/paths",
                        _PATHS_V4, _BEST_PATHS_V4)


def probe_bgp_neighbor_paths_ipv6(client: Any, meta: TargetMetadata,
                                  max_bgp_paths: int) -> list[Metric]:
    """Count IPv6 BGP paths and best paths per neighbor."""
    return _probe_paths(client, meta, max_bgp_paths, "api/v2/monitor/router/bgp/paths6",
                        _PATHS_V6, _BEST_PATHS_V6)


def _probe_neighbors(client: Any, meta: TargetMetadata, path: str, desc: Desc) -> list[Metric]:
    if meta.version_major < 7:
        return []
    metrics = []
    for response in _fetch_list(client, path, "vdom=*"):
        vdom = response.get("vdom", "")
        for peer in response.get("results") or []:
            state = peer.get("state", "")
            metrics.append(desc.metric(
                bgp_state_to_number(state),
                vdom,
                str(int(peer.get("remote_as", 0))),
                state,
                "true" if peer.get("admin_status", False) else "false",
                peer.get("local_ip", ""),
                peer.get("neighbor_ip", ""),
            ))
    return metrics


def probe_bgp_neighbors_ipv4(client: Any, meta: TargetMetadata) -> list[Metric]:
    """Report configured IPv4 BGP neighbors with their state."""
    return _probe_neighbors(client, meta, "api/v2/monitor/router/bgp/neighbors", _NEIGHBORS_V4)


def probe_bgp_neighbors_ipv6(client: Any, meta: TargetMetadata) -> list[Metric]:
    """Report configured IPv6 BGP neighbors with their state."""
    return _probe_neighbors(client, meta, "api/v2/monitor/router/bgp/neighbors6", _NEIGHBORS_V6)