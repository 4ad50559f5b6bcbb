import pytest

from fortiexporter.client import FortiAPIError
from fortiexporter.metrics import ProbeFailed, TargetMetadata, render_text
from fortiexporter.probes.license import probe_license_status


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


def test_license_status():
    client = FakeClient({"api/v2/monitor/license/status/select": {
        "results": {"vdom": {"type": "licensed", "can_upgrade": True, "used": 114, "max": 125}},
    }})
    expected = "\n".join([
        "# HELP fortigate_license_vdom_max The total amount of VDOM licenses available",
        "# TYPE fortigate_license_vdom_max gauge",
        "fortigate_license_vdom_max 125",
        "# HELP fortigate_license_vdom_usage The amount of VDOM licenses currently used",
        "# TYPE fortigate_license_vdom_usage gauge",
        "fortigate_license_vdom_usage 114",
    ]) + "\n"
    assert render_text(probe_license_status(client, META)) == expected
    assert client.calls == [("api/v2/monitor/license/status/select", "")]


def test_license_status_missing_fields_are_zero():
    client = FakeClient({"api/v2/monitor/license/status/select": {"results": {}}})
    values = [m.value for m in probe_license_status(client, META)]
    assert values == [0.0, 0.0]


def test_license_status_request_error_fails():
    with pytest.raises(ProbeFailed):
        probe_license_status(FakeClient({}), META)