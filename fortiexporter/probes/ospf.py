"""OSPF neighbor probe."""

from __future__ import annotations

import logging
from typing import Any

from ..client import FortiAPIError
from ..metrics import Desc, Metric, ProbeFailed, TargetMetadata

logger = logging.getLogger(__name__)

_OSPF_STATES = {
    "Down": 1,
    "Attempt": 2,
    "Init": 3,
    "Two way": 4,
    "Exchange start": 5,
    "Exchange": 6,
    "Loading": 7,
    "Full": 8,
}

_NEIGHBOR = Desc(
    "fortigate_ospf_neighbor_info",
    "List all discovered OSPF neighbors, return state as value (1 - Down, 2 - Attempt, "
    "3 - Init, 4 - Two way, 5 - Exchange start, 6 - Exchange, 7 - Loading, 8 - Full)",
    ("vdom", "state", "priority", "router_id", "neighbor_ip"),
)


def ospf_state_to_number(state: str) -> float:
    """Map an OSPF neighbor state name to its numeric value (Down when unknown)."""
    return float(_OSPF_STATES.get(state, 1))


def probe_ospf_neighbors(client: Any, meta: TargetMetadata) -> list[Metric]:
    """Report discovered OSPF neighbors with their state."""
    if meta.version_major < 7:
        return []
    path = "api/v2/monitor/router/ospf/neighbors"
    try:
        responses = client.get(path, "vdom=*")
    except FortiAPIError as exc:
        logger.error("Error: %s", exc)
        raise ProbeFailed(str(exc)) from exc
    if responses is None:
        return []
    if not isinstance(responses, list):
        raise ProbeFailed(f"unexpected response for {path!r}")

    metrics = []
    for response in responses:
        vdom = response.get("vdom", "")
        for peer in response.get("results") or []:
            state = peer.get("state", "")
            metrics.append(_NEIGHBOR.metric(
                ospf_state_to_number(state),
                vdom,
                state,
                str(int(peer.get("priority", 0))),
                peer.get("router_id", ""),
                peer.get("neighbor_ip", ""),
            ))
    return metrics