import math

import pytest

from fortiexporter.metrics import (
    BuildInfo,
    Desc,
    MetricType,
    build_info_metric,
    get_build_info,
    render_text,
)

DISK_USED = Desc("fortigate_log_disk_used_bytes", "Disk used bytes for log", ("vdom",))
DISK_TOTAL = Desc("fortigate_log_disk_total_bytes", "Disk total bytes for log", ("vdom",))


def test_render_disk_usage_like_source():
    text = render_text([DISK_USED.metric(7e8, "root"), DISK_TOTAL.metric(3e10, "root")])
    assert text == (
        "# HELP fortigate_log_disk_total_bytes Disk total bytes for log\n"
        "# TYPE fortigate_log_disk_total_bytes gauge\n"
        'fortigate_log_disk_total_bytes{vdom="root"} 3e+10\n'
        "# HELP fortigate_log_disk_used_bytes Disk used bytes for log\n"
        "# TYPE fortigate_log_disk_used_bytes gauge\n"
        'fortigate_log_disk_used_bytes{vdom="root"} 7e+08\n'
    )


@pytest.mark.parametrize(
    "value, expected",
    [
        (534459022, "5.34459022e+08"),
        (64687125982, "6.4687125982e+10"),
        (792806, "792806"),
        (0.001, "0.001"),
        (0.357, "0.357"),
        (6.099999904632568, "6.099999904632568"),
        (math.nan, "NaN"),
        (0, "0"),
        (38260, "38260"),
    ],
)
def test_value_formatting(value, expected):
    desc = Desc("m", "h")
    assert render_text([desc.metric(value)]).splitlines()[-1] == f"m {expected}"


def test_labels_sorted_by_name_and_samples_by_value():
    desc = Desc("x", "help", ("vdom", "port"), MetricType.COUNTER)
    text = render_text([desc.metric(1, "root", "port2"), desc.metric(2, "root", "port10")])
    lines = text.splitlines()
    assert lines[1] == "# TYPE x counter"
    assert lines[2:] == ['x{port="port10",vdom="root"} 2', 'x{port="port2",vdom="root"} 1']


def test_label_escaping():
    desc = Desc("x", "help", ("name",))
    line = render_text([desc.metric(1, 'a"b\\c')]).splitlines()[-1]
    assert line == 'x{name="a\\"b\\\\c"} 1'


def test_wrong_label_count_raises():
    with pytest.raises(ValueError):
        DISK_USED.metric(1)


def test_duplicate_sample_raises():
    with pytest.raises(ValueError):
        render_text([DISK_USED.metric(1, "root"), DISK_USED.metric(2, "root")])


def test_inconsistent_family_raises():
    other = Desc("fortigate_log_disk_used_bytes", "Other", ("vdom",))
    with pytest.raises(ValueError):
        render_text([DISK_USED.metric(1, "root"), other.metric(1, "a")])


def test_empty_render():
    assert render_text([]) == ""


def test_metric_labels_mapping():
    assert DISK_USED.metric(5, "root").labels == {"vdom": "root"}


def test_build_info_strips_v():
    info = get_build_info("v1.2.3", "abc")
    assert info.version == "1.2.3"
    assert info.git_hash == "abc"


def test_build_info_metric():
    info = BuildInfo(version="1.0", git_hash="deadbee", python_version="3.11.0")
    metric = build_info_metric(info)
    assert metric.desc.name == "fortigate_exporter_build_info"
    assert metric.value == 1.0
    assert metric.labels == {"version": "1.0", "revision": "deadbee", "pythonversion": "3.11.0"}