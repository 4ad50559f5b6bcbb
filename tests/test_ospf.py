import pytest

from fortiexporter.client import FortiAPIError
from fortiexporter.metrics import ProbeFailed, TargetMetadata, render_text
from fortiexporter.probes.ospf import ospf_state_to_number, probe_ospf_neighbors


class FakeClient:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, path, query=""):
        self.calls.append((path, query))
        if path not in self.responses:
            raise FortiAPIError(f"Response code was 404, expected 200 (path: {path!r})")
        return self.responses[path]


META = TargetMetadata(version_major=7, version_minor=0)

STATES = ["Down", "Attempt", "Init", "Two way", "Exchange start", "Exchange", "Loading", "Full"]


def _neighbors():
    return [{
        "results": [
            {
                "neighbor_ip": f"10.0.0.{n}",
                "router_id": f"1234{n}",
                "state": state,
                "priority": 3,
            }
            for n, state in enumerate(STATES, start=1)
        ],
        "vdom": "root",
        "version": "v7.0.0",
    }]


def test_ospf_neighbors():
    client = FakeClient({"api/v2/monitor/router/ospf/neighbors": _neighbors()})
    lines = [
        "# HELP fortigate_ospf_neighbor_info List all discovered OSPF neighbors, return state "
        "as value (1 - Down, 2 - Attempt, 3 - Init, 4 - Two way, 5 - Exchange start, "
        "6 - Exchange, 7 - Loading, 8 - Full)",
        "# TYPE fortigate_ospf_neighbor_info gauge",
        'fortigate_ospf_neighbor_info{neighbor_ip="10.0.0.1",priority="3",router_id="12341",state="Down",vdom="root"} 1',
        'fortigate_ospf_neighbor_info{neighbor_ip="10.0.0.2",priority="3",router_id="12342",state="Attempt",vdom="root"} 2',
        'fortigate_ospf_neighbor_info{neighbor_ip="10.0.0.3",priority="3",router_id="12343",state="Init",vdom="root"} 3',
        'fortigate_ospf_neighbor_info{neighbor_ip="10.0.0.4",priority="3",router_id="12344",state="Two way",vdom="root"} 4',
        'fortigate_ospf_neighbor_info{neighbor_ip="10.0.0.5",priority="3",router_id="12345",state="Exchange start",vdom="root"} 5',
        'fortigate_ospf_neighbor_info{neighbor_ip="10.0.0.6",priority="3",router_id="12346",state="Exchange",vdom="root"} 6',
        'fortigate_ospf_neighbor_info{neighbor_ip="10.0.0.7",priority="3",router_id="12347",state="Loading",vdom="root"} 7',
        'fortigate_ospf_neighbor_info{neighbor_ip="10.0.0.8",priority="3",router_id="12348",state="Full",vdom="root"} 8',
    ]
    assert render_text(probe_ospf_neighbors(client, META)) == "\n".join(lines) + "\n"
    assert client.calls == [("api/v2/monitor/router/ospf/neighbors", "vdom=*")]


def test_ospf_skipped_before_version_7():
    client = FakeClient({})
    assert probe_ospf_neighbors(client, TargetMetadata(6, 4)) == []
    assert client.calls == []


def test_ospf_request_error_fails():
    with pytest.raises(ProbeFailed):
        probe_ospf_neighbors(FakeClient({}), META)


@pytest.mark.parametrize("state,value", [
    ("Down", 1), ("Attempt", 2), ("Init", 3), ("Two way", 4), ("Exchange start", 5),
    ("Exchange", 6), ("Loading", 7), ("Full", 8), ("Unknown", 1),
])
def test_ospf_state_to_number(state, value):
    assert ospf_state_to_number(state) == value