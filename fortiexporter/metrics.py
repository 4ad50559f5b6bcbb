"""Metric descriptions, samples and the text exposition format."""

from __future__ import annotations

import enum
import math
import platform
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable


class MetricType(enum.Enum):
    GAUGE = "gauge"
    COUNTER = "counter"


class ProbeFailed(Exception):
    """A probe could not collect its metrics."""


@dataclass(frozen=True)
class Desc:
    """Name, help text, label names and type of a metric family."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    type: MetricType = MetricType.GAUGE

    def __post_init__(self) -> None:
        object.__setattr__(self, "labels", tuple(self.labels))

    def metric(self, value: float, *args: object) -> "Metric":
        """Return a sample of this family with the given label values."""
        if len(args) != len(self.labels):
            raise ValueError(
                f"{self.name}: expected {len(self.labels)} label values, got {len(args)}"
            )
        return Metric(self, float(value), tuple(str(arg) for arg in args))


@dataclass(frozen=True)
class Metric:
    """One sample: a description, a value and label values."""

    desc: Desc
    value: float
    label_values: tuple[str, ...] = ()

    @property
    def labels(self) -> dict[str, str]:
        return dict(zip(self.desc.labels, self.label_values))


@dataclass
class TargetMetadata:
    """What is known about a probed device."""

    version_major: int = 0
    version_minor: int = 0


@dataclass(frozen=True)
class BuildInfo:
    version: str
    git_hash: str
    python_version: str = field(default_factory=platform.python_version)


def get_build_info(version: str = "(devel)", git_hash: str = "(no hash)") -> BuildInfo:
    """Return build information with any leading ``v`` removed from the version."""
    return BuildInfo(version=version.removeprefix("v"), git_hash=git_hash)


_BUILD_INFO_DESC = Desc(
    "fortigate_exporter_build_info",
    "This info metric contains build information for about the exporter",
    ("version", "revision", "pythonversion"),
)


def build_info_metric(info: BuildInfo) -> Metric:
    """Return the constant build-info sample for ``info``."""
    return _BUILD_INFO_DESC.metric(1, info.version, info.git_hash, info.python_version)


def _format_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    count = len(digits)
    point = count + exponent
    exp = point - 1
    prefix = "-" if sign else ""
    if exp < -4 or exp >= 6:
        mantissa = digits[0] + ("." + digits[1:] if count > 1 else "")
        return f"{prefix}{mantissa}e{'+' if exp >= 0 else '-'}{abs(exp):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= count:
        return prefix + digits + "0" * (point - count)
    return f"{prefix}{digits[:point]}.{digits[point:]}"


def _escape_label(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def render_text(metrics: Iterable[Metric]) -> str:
    """Render samples in the Prometheus text format, sorted by name and labels."""
    families: dict[str, tuple[Desc, dict[tuple[tuple[str, str], ...], Metric]]] = {}
    for metric in metrics:
        desc = metric.desc
        family = families.get(desc.name)
        if family is None:
            family = families[desc.name] = (desc, {})
        else:
            known = family[0]
            if (known.help, known.type, sorted(known.labels)) != (
                desc.help, desc.type, sorted(desc.labels)
            ):
                raise ValueError(f"inconsistent descriptions for metric {desc.name!r}")
        key = tuple(sorted(zip(desc.labels, metric.label_values)))
        if key in family[1]:
            raise ValueError(f"metric {desc.name!r} with labels {dict(key)} collected twice")
        family[1][key] = metric

    lines = []
    for name in sorted(families):
        desc, samples = families[name]
        lines.append(f"# HELP {name} {_escape_help(desc.help)}")
        lines.append(f"# TYPE {name} {desc.type.value}")
        for key in sorted(samples, key=lambda k: [v for _, v in k]):
            value = _format_value(samples[key].value)
            if key:
                labels = ",".join(f'{n}="{_escape_label(v)}"' for n, v in key)
                lines.append(f"{name}{{{labels}}} {value}")
            else:
                lines.append(f"{name} {value}")
    return "\n".join(lines) + "\n" if lines else ""