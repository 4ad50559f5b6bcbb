"""Log disk usage and FortiAnalyzer probes."""

from __future__ import annotations

import logging
from typing import Any

from ..client import FortiAPIError
from ..metrics import Desc, Metric, ProbeFailed, TargetMetadata

logger = logging.getLogger(__name__)

_DISK_USED = Desc("fortigate_log_disk_used_bytes", "Disk used bytes for log", ("vdom",))
_DISK_TOTAL = Desc("fortigate_log_disk_total_bytes", "Disk total bytes for log", ("vdom",))

_ANALYZER_INFO = Desc(
    "fortigate_log_fortianalyzer_registration_info",
    "Fortianalyzer state info",
    ("vdom", "registration", "connection"),
)
_ANALYZER_RECEIVED = Desc(
    "fortigate_log_fortianalyzer_logs_received", "Received logs in fortianalyzer", ("vdom",)
)

_QUEUE_CONNECTIONS = Desc(
    "fortigate_log_fortianalyzer_queue_connections",
    "Fortianalyzer queue connected state",
    ("vdom",),
)
_QUEUE_LOGS = Desc(
    "fortigate_log_fortianalyzer_queue_logs", "State of logs in the queue", ("vdom", "state")
)


def _fetch_list(client: Any, path: str) -> list[dict]:
    try:
        data = client.get(path, "vdom=*")
    except FortiAPIError as exc:
        logger.error("Error: %s", exc)
        raise ProbeFailed(str(exc)) from exc
    if data is None:
        return []
    if not isinstance(data, list):
        raise ProbeFailed(f"unexpected response for {path!r}")
    return data


def probe_log_current_disk_usage(client: Any, meta: TargetMetadata) -> list[Metric]:
    """Report used and total log disk bytes per VDOM."""
    metrics = []
    for response in _fetch_list(client, "api/v2/monitor/log/current-disk-usage"):
        vdom = response.get("vdom", "")
        results = response.get("results") or {}
        metrics.append(_DISK_USED.metric(float(results.get("used_bytes", 0)), vdom))
        metrics.append(_DISK_TOTAL.metric(float(results.get("total_bytes", 0)), vdom))
    return metrics


def probe_log_analyzer(client: Any, meta: TargetMetadata) -> list[Metric]:
    """Report FortiAnalyzer registration state and received log count per VDOM."""
    metrics = []
    for response in _fetch_list(client, "api/v2/monitor/log/fortianalyzer"):
        vdom = response.get("vdom", "")
        results = response.get("results") or {}
        metrics.append(_ANALYZER_INFO.metric(
            1, vdom, results.get("registration", ""), results.get("connection", "")
        ))
        metrics.append(_ANALYZER_RECEIVED.metric(float(results.get("received", 0)), vdom))
    return metrics


def probe_log_analyzer_queue(client: Any, meta: TargetMetadata) -> list[Metric]:
    """Report FortiAnalyzer queue connection state and queued log counts per VDOM."""
    metrics = []
    for response in _fetch_list(client, "api/v2/monitor/log/fortianalyzer-queue"):
        vdom = response.get("vdom", "")
        results = response.get("results") or {}
        metrics.append(_QUEUE_CONNECTIONS.metric(float(results.get("connected", 0)), vdom))
        # Failed and cached logs are treated as gauges.
        metrics.append(_QUEUE_LOGS.metric(float(results.get("failed_logs", 0)), vdom, "failed"))
        metrics.append(_QUEUE_LOGS.metric(float(results.get("cached_logs", 0)), vdom, "cached"))
    return metrics