"""HTTP access to the FortiOS REST API with token authentication."""

from __future__ import annotations

import json
import ssl
import tempfile
from typing import Any
from urllib.parse import quote, urlsplit, urlunsplit

import requests
import requests.certs

from .config import ConfigError, ExporterConfig


class FortiAPIError(Exception):
    """A request to the FortiOS API failed."""


class FortiTokenClient:
    """Client that issues authenticated GET requests against one target."""

    def __init__(self, target: str, session: Any, token: str, timeout: float | None = None):
        self._target = target
        self._session = session
        self._token = token
        self._timeout = timeout

    def _url(self, path: str, query: str) -> str:
        parts = urlsplit(self._target)
        escaped = quote(path, safe="/-_.~!$&'()*+,;=:@")
        if parts.netloc and escaped and not escaped.startswith("/"):
            escaped = "/" + escaped
        return urlunsplit((parts.scheme, parts.netloc, escaped, query, ""))

    def get(self, path: str, query: str = "") -> Any:
        """Fetch ``path`` with ``query`` and return the decoded JSON body."""
        headers = {"Authorization": f"Bearer {self._token}"}
        try:
            response = self._session.get(self._url(path, query), headers=headers,
                                         timeout=self._timeout)
        except requests.RequestException as exc:
            raise FortiAPIError(str(exc)) from exc
        if response.status_code != 200:
            raise FortiAPIError(
                f"Response code was {response.status_code}, expected 200 (path: {path!r})"
            )
        try:
            return json.loads(response.content)
        except ValueError as exc:
            raise FortiAPIError(f"Invalid JSON in response (path: {path!r}): {exc}") from exc

    def __str__(self) -> str:
        return self._target


def new_forti_client(target: str, session: Any, config: ExporterConfig) -> FortiTokenClient:
    """Return a client for ``target`` using the credentials in ``config``."""
    auth = config.auth_keys.get(target)
    if auth is None:
        raise FortiAPIError(f"no API authentication registered for {target!r}")
    if auth.token:
        if urlsplit(target).scheme != "https":
            raise FortiAPIError("FortiOS only supports token for HTTPS connections")
        return FortiTokenClient(target, session, auth.token, timeout=config.scrape_timeout)
    raise FortiAPIError(f"invalid authentication data for {target!r}")


class _ExporterSession(requests.Session):
    def __init__(self, timeout: tuple[float, float]):
        super().__init__()
        self._default_timeout = timeout

    def request(self, method, url, **kwargs):
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self._default_timeout
        return super().request(method, url, **kwargs)


def _check_pem(path: str, content: bytes) -> str:
    try:
        text = content.decode("ascii")
        if not text.strip():
            raise ValueError("empty file")
        ssl.create_default_context().load_verify_locations(cadata=text)
    except (ValueError, ssl.SSLError) as exc:
        raise ConfigError(f"failed to append certs from PEM {path!r}, unknown error") from exc
    return text


def configure_session(config: ExporterConfig) -> requests.Session:
    """Return an HTTP session set up with the TLS options of ``config``."""
    extra = [_check_pem(cert.path, cert.content) for cert in config.tls_extra_cas]
    session = _ExporterSession(timeout=(config.tls_timeout, config.scrape_timeout))
    if config.tls_insecure:
        session.verify = False
    elif extra:
        with open(requests.certs.where(), encoding="ascii", errors="replace") as fh:
            bundle = fh.read()
        with tempfile.NamedTemporaryFile("w", suffix=".pem", delete=False,
                                         encoding="ascii") as out:
            out.write(bundle.rstrip("\n") + "\n")
            for text in extra:
                out.write(text.rstrip("\n") + "\n")
        session.verify = out.name
    return session