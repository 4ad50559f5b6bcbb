import pytest

from fortiexporter.version import parse_version


def test_parse_full_version():
    assert parse_version("v6.4.4") == (6, 4)


def test_parse_without_leading_v_fails():
    with pytest.raises(ValueError):
        parse_version("1.0.0")


def test_parse_needs_trailing_dot():
    with pytest.raises(ValueError):
        parse_version("v6.4")


def test_parse_major_seven():
    assert parse_version("v7.0.12") == (7, 0)