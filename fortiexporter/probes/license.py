"""License status probe."""

from __future__ import annotations

import logging
from typing import Any

from ..client import FortiAPIError
from ..metrics import Desc, Metric, ProbeFailed, TargetMetadata

logger = logging.getLogger(__name__)

_VDOM_USED = Desc("fortigate_license_vdom_usage", "The amount of VDOM licenses currently used")
_VDOM_MAX = Desc("fortigate_license_vdom_max", "The total amount of VDOM licenses available")


def probe_license_status(client: Any, meta: TargetMetadata) -> list[Metric]:
    """Report VDOM license usage and capacity."""
    path = "api/v2/monitor/license/status/select"
    try:
        response = client.get(path, "")
    except FortiAPIError as exc:
        logger.error("Error: %s", exc)
        raise ProbeFailed(str(exc)) from exc
    if response is None:
        response = {}
    if not isinstance(response, dict):
        raise ProbeFailed(f"unexpected response for {path!r}")
    vdom = (response.get("results") or {}).get("vdom") or {}
    return [
        _VDOM_USED.metric(float(vdom.get("used", 0))),
        _VDOM_MAX.metric(float(vdom.get("max", 0))),
    ]