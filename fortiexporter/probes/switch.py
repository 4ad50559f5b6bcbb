"""Managed FortiSwitch probe."""

from __future__ import annotations

import logging
from typing import Any

from ..client import FortiAPIError
from ..metrics import Desc, Metric, MetricType, ProbeFailed, TargetMetadata

logger = logging.getLogger(__name__)

_PATH = "api/v2/monitor/switch-controller/managed-switch"
# Consider pagination to lift the limit of 1000 entries.
_QUERY = "vdom=*&start=0&poe=true&port_stats=true&transceiver=true&count=1000"

_SWITCH_INFO = Desc(
    "fortigate_managed_switch_info",
    "Infos about a managed switch",
    ("vdom", "switch_name", "os_version", "serial", "state", "status"),
    MetricType.COUNTER,
)
_MAX_POE_BUDGET = Desc(
    "fortigate_managed_switch_max_poe_budget_watt",
    "Max poe budget watt",
    ("vdom", "switch_name"),
    MetricType.COUNTER,
)
_PORT_INFO = Desc(
    "fortigate_managed_switch_port_info",
    "Infos about a switch port",
    ("vdom", "switch_name", "port", "vlan", "duplex", "status", "poe_status", "poe_capable"),
)

_PORT_LABELS = ("vdom", "switch_name", "port")
_PORT_STATUS = Desc("fortigate_managed_switch_port_status", "Port status up=1 down=0",
                    _PORT_LABELS)
_PORT_POWER = Desc("fortigate_managed_switch_port_power_watt", "Port power in watt",
                   _PORT_LABELS)
_PORT_POWER_STATUS = Desc("fortigate_managed_switch_port_power_status", "Port power status",
                          _PORT_LABELS)


def _counter(name: str, help_text: str) -> Desc:
    return Desc(name, help_text, _PORT_LABELS, MetricType.COUNTER)


_PORT_STATS: tuple[tuple[Desc, str], ...] = (
    (_counter("fortigate_managed_switch_rx_bytes_total",
              "Total number of received bytes"), "rx-bytes"),
    (_counter("fortigate_managed_switch_tx_bytes_total",
              "Total number of transmitted bytes"), "tx-bytes"),
    (_counter("fortigate_managed_switch_rx_packets_total",
              "Total number of received packets"), "rx-packets"),
    (_counter("fortigate_managed_switch_tx_packets_total",
              "Total number of transmitted packets"), "tx-packets"),
    (_counter("fortigate_managed_switch_rx_ucast_packets_total",
              "Total number of received unicast packets"), "rx-ucast"),
    (_counter("fortigate_managed_switch_tx_ucast_packets_total",
              "Total number of transmitted unicast packets"), "tx-ucast"),
    (_counter("fortigate_managed_switch_rx_mcast_packets_total",
              "Total number of received multicast packets"), "rx-mcast"),
    (_counter("fortigate_managed_switch_tx_mcast_packets_total",
              "Total number of transmitted multicast packets"), "tx-mcast"),
    (_counter("fortigate_managed_switch_rx_bcast_packets_total",
              "Total number of received broadcast packets"), "rx-bcast"),
    (_counter("fortigate_managed_switch_tx_bcast_packets_total",
              "Total number of transmitted broadcast packets"), "tx-bcast"),
    (_counter("fortigate_managed_switch_rx_errors_total",
              "Total number of received errors"), "rx-errors"),
    (_counter("fortigate_managed_switch_tx_errors_total",
              "Total number of transmitted errors"), "tx-errors"),
    (_counter("fortigate_managed_switch_rx_drops_total",
              "Total number of received drops"), "rx-drops"),
    (_counter("fortigate_managed_switch_tx_drops_total",
              "Total number of transmitted drops"), "tx-drops"),
    (_counter("fortigate_managed_switch_rx_oversize_total",
              "Total number of received oversize"), "rx-oversize"),
    (_counter("fortigate_managed_switch_tx_oversize_total",
              "Total number of transmitted oversize"), "tx-oversize"),
    (_counter("fortigate_managed_switch_under_size_total",
              "Total number of under size"), "undersize"),
    (_counter("fortigate_managed_switch_fragments_total",
              "Total number of fragments"), "fragments"),
    (_counter("fortigate_managed_switch_jabbers_total",
              "Total number of jabbers"), "jabbers"),
    (_counter("fortigate_managed_switch_collisions_total",
              "Total number of collisions"), "collisions"),
    (_counter("fortigate_managed_switch_crc_alignments_total",
              "Total number of crc alignments"), "crc-alignments"),
    (_counter("fortigate_managed_switch_l3_packets_total",
              "Total number of l3 packets"), "l3packets"),
)


def _num(data: dict, key: str) -> float:
    value = data.get(key)
    return 0.0 if value is None else float(value)


def _str(data: dict, key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _fetch(client: Any) -> list[dict]:
    try:
        data = client.get(_PATH, _QUERY)
    except FortiAPIError as exc:
        logger.error("Error: %s", exc)
        raise ProbeFailed(str(exc)) from exc
    if data is None:
        return []
    if not isinstance(data, list):
        logger.error("Error: unexpected response for %s", _PATH)
        raise ProbeFailed(f"unexpected response for {_PATH!r}")
    return data


def _port_metrics(vdom: str, switch: str, port: dict) -> list[Metric]:
    name = _str(port, "interface")
    status = _str(port, "status")
    return [
        _PORT_STATUS.metric(1 if status == "up" else 0, vdom, switch, name),
        _PORT_INFO.metric(
            1, vdom, switch, name, _str(port, "vlan"), _str(port, "duplex"), status,
            _str(port, "poe_status"), "true" if port.get("poe_capable") else "false",
        ),
        _PORT_POWER.metric(_num(port, "port_power"), vdom, switch, name),
        _PORT_POWER_STATUS.metric(_num(port, "power_status"), vdom, switch, name),
    ]


def probe_managed_switch(client: Any, meta: TargetMetadata) -> list[Metric]:
    """Report state, PoE and port counters of switches managed by the firewall."""
    metrics: list[Metric] = []
    for response in _fetch(client):
        for result in response.get("results") or []:
            vdom = _str(result, "vdom")
            switch = _str(result, "name")
            metrics.append(_SWITCH_INFO.metric(
                1, vdom, switch, _str(result, "os_version"), _str(result, "serial"),
                _str(result, "state"), _str(result, "status"),
            ))
            metrics.append(_MAX_POE_BUDGET.metric(_num(result, "max_poe_budget"), vdom, switch))
            for port in result.get("ports") or []:
                metrics += _port_metrics(vdom, switch, port)
            for port_name, stats in (result.get("port_stats") or {}).items():
                metrics += [
                    desc.metric(_num(stats, key), vdom, switch, port_name)
                    for desc, key in _PORT_STATS
                ]
    return metrics