# portal/domain/errors.py
from __future__ import annotations

from typing import Any


class GatewayError(RuntimeError):
    """Base for every fault the listings gateway reports to its callers."""


class ConfigurationFault(GatewayError):
    """A required upstream secret is missing. Terminal for the request, never retried."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"missing_configuration: {', '.join(self.missing)}")


class UpstreamUnreachable(GatewayError):
    """Network-level failure: DNS, refused connection, TLS, transport timeout."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"upstream_unreachable: {url}: {reason}")


class UpstreamError(GatewayError):
    """Upstream answered with a non-2xx status."""

    def __init__(self, status_code: int, body: Any = None, *, reason: str = "", url: str = "") -> None:
        self.status_code = int(status_code)
        self.body = body
        self.reason = reason
        self.url = url
        super().__init__(f"upstream_error: HTTP {self.status_code} {reason}".rstrip())
