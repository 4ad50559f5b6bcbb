"""Command-line options and the authentication map of the exporter."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """The exporter configuration could not be loaded."""


@dataclass(frozen=True)
class Probes:
    """Probe names to include or exclude for a target."""

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()


@dataclass(frozen=True)
class TargetAuth:
    """Authentication data for one target."""

    token: str = ""
    probes: Probes = field(default_factory=Probes)


@dataclass(frozen=True)
class LocalCert:
    """An extra CA file and its PEM content."""

    path: str
    content: bytes


@dataclass
class ExporterConfig:
    """Runtime configuration of the exporter."""

    auth_keys: dict[str, TargetAuth] = field(default_factory=dict)
    listen: str = ":9710"
    scrape_timeout: int = 30
    tls_timeout: int = 10
    tls_insecure: bool = False
    tls_extra_cas: list[LocalCert] = field(default_factory=list)
    max_bgp_paths: int = 10000
    max_vpn_users: int = 0


def _add(parser: argparse.ArgumentParser, name: str, **kwargs) -> None:
    parser.add_argument(f"-{name}", f"--{name}", **kwargs)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the exporter's options."""
    parser = argparse.ArgumentParser(prog="fortiexporter", allow_abbrev=False)
    _add(parser, "auth-file", dest="auth_file", default="fortigate-key.yaml",
         help="file containing the authentication map to use when connecting to a Fortigate device")
    _add(parser, "listen", dest="listen", default=":9710", help="address to listen on")
    _add(parser, "scrape-timeout", dest="scrape_timeout", type=int, default=30,
         help="max seconds to allow a scrape to take")
    _add(parser, "https-timeout", dest="tls_timeout", type=int, default=10,
         help="TLS Handshake timeout in seconds")
    _add(parser, "insecure", dest="tls_insecure", action="store_true",
         help="Allow insecure certificates")
    _add(parser, "extra-ca-certs", dest="extra_ca_certs", default="",
         help="comma-separated files containing extra PEMs to trust for TLS connections "
              "in addition to the system trust store")
    _add(parser, "max-bgp-paths", dest="max_bgp_paths", type=int, default=10000,
         help="How many BGP Paths to receive when counting routes, needs to be greater than "
              "or equal to the number of routes or metrics will not be generated")
    _add(parser, "max-vpn-users", dest="max_vpn_users", type=int, default=0,
         help="How many VPN Users to receive when counting users, needs to be greater than "
              "or equal the number of users or metrics will not be generated (0 eq. none by default)")
    return parser


def _string_list(value: object, what: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigError(f"{what} must be a list")
    return tuple(str(item) for item in value)


def _parse_target(target: str, value: object) -> TargetAuth:
    if value is None:
        return TargetAuth()
    if not isinstance(value, dict):
        raise ConfigError(f"authentication entry for {target!r} must be a mapping")
    token = value.get("token")
    if isinstance(token, (list, dict)):
        raise ConfigError(f"token for {target!r} must be a string")
    probes = value.get("probes")
    if probes is None:
        probes = {}
    if not isinstance(probes, dict):
        raise ConfigError(f"probes for {target!r} must be a mapping")
    return TargetAuth(
        token="" if token is None else str(token),
        probes=Probes(
            include=_string_list(probes.get("include"), "probes.include"),
            exclude=_string_list(probes.get("exclude"), "probes.exclude"),
        ),
    )


def parse_auth_keys(text: str | bytes) -> dict[str, TargetAuth]:
    """Parse the YAML authentication map into target -> TargetAuth."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse API authentication map file: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("API authentication map must be a mapping")
    return {str(target): _parse_target(str(target), value) for target, value in data.items()}


def load_config(argv: list[str] | None = None) -> ExporterConfig:
    """Parse the options in ``argv`` and read the files they name."""
    args = build_parser().parse_args(argv)
    try:
        auth_text = Path(args.auth_file).read_bytes()
    except OSError as exc:
        raise ConfigError(f"Failed to read API authentication map file: {exc}") from exc
    auth_keys = parse_auth_keys(auth_text)
    logger.info("Loaded %d API keys", len(auth_keys))

    extra_cas = []
    for path in args.extra_ca_certs.split(","):
        if not path:
            continue
        try:
            content = Path(path).read_bytes()
        except OSError as exc:
            raise ConfigError(f"Failed to read extra CA file {path!r}: {exc}") from exc
        extra_cas.append(LocalCert(path=path, content=content))

    return ExporterConfig(
        auth_keys=auth_keys,
        listen=args.listen,
        scrape_timeout=args.scrape_timeout,
        tls_timeout=args.tls_timeout,
        tls_insecure=args.tls_insecure,
        tls_extra_cas=extra_cas,
        max_bgp_paths=args.max_bgp_paths,
        max_vpn_users=args.max_vpn_users,
    )