# portal/adapters/clients/http_dispatch.py
from __future__ import annotations

import asyncio
import json as jsonlib
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

import httpx

from ...config import Settings, settings as default_settings
from ...domain.errors import UpstreamError, UpstreamUnreachable

log = logging.getLogger(__name__)

_SECRET_HEADERS = {"authorization", "x-api-key"}

# Either a mapping or ordered (key, value) pairs; pairs keep repeated keys.
QueryParams = Union[Mapping[str, Any], Sequence[tuple[str, Any]]]


@dataclass
class RawResponse:
    status_code: int
    headers: dict[str, str]
    content: bytes
    url: str
    reason: str = ""
    _decoded: Any = field(default=None, repr=False)
    _decoded_ok: bool | None = field(default=None, repr=False)

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    @property
    def is_json(self) -> bool:
        ct = self.content_type.lower()
        return "application/json" in ct or ct.endswith("+json")

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decoded JSON body; raises ValueError when the body isn't JSON."""
        if self._decoded_ok is None:
            try:
                self._decoded = jsonlib.loads(self.content)
                self._decoded_ok = True
            except ValueError:
                self._decoded_ok = False
        if not self._decoded_ok:
            raise ValueError("response body is not JSON")
        return self._decoded


def redact(v: str | None) -> str | None:
    if not v:
        return v
    if len(v) <= 8:
        return "***"
    return v[:4] + "***" + v[-4:]


def safe_headers(headers: dict[str, str] | None) -> dict[str, str]:
    out = dict(headers or {})
    for k in list(out):
        if k.lower() in _SECRET_HEADERS:
            out[k] = f"<redacted len={len(out[k])}>"
    return out


def error_body(resp: RawResponse) -> Any:
    """Decoded JSON if possible, else text, else None."""
    try:
        return resp.json()
    except ValueError:
        return resp.text or None


async def dispatch(
    method: str,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: QueryParams | None = None,
    json: Any | None = None,
    cfg: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RawResponse:
    """
    One outbound round trip. Network failures => UpstreamUnreachable (retried up
    to HTTP_MAX_RETRIES with backoff); non-2xx => UpstreamError, never retried.
    """
    cfg = cfg or default_settings
    timeout = httpx.Timeout(cfg.HTTP_TIMEOUT_S)
    max_retries = max(0, int(cfg.HTTP_MAX_RETRIES))
    backoff = float(cfg.HTTP_BACKOFF_BASE_S)

    log.info("upstream request %s %s params=%s headers=%s", method, url, params, safe_headers(headers))

    attempt = 0
    while True:
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                r = await client.request(method, url, headers=headers, params=params, json=json)
            break
        except httpx.TransportError as e:
            log.warning("upstream unreachable %s %s attempt=%d: %r", method, url, attempt + 1, e)
            if attempt >= max_retries:
                raise UpstreamUnreachable(url, str(e) or type(e).__name__) from e
            await asyncio.sleep(min(5.0, backoff * (2**attempt)))
            attempt += 1
        except httpx.RequestError as e:
            # Undecodable bodies, redirect loops: a retry would fail the same way.
            log.warning("upstream request failed %s %s: %r", method, url, e)
            raise UpstreamUnreachable(url, str(e) or type(e).__name__) from e

    resp = RawResponse(
        status_code=r.status_code,
        headers={k.lower(): v for k, v in r.headers.items()},
        content=r.content,
        url=str(r.request.url),
        reason=r.reason_phrase,
    )
    log.info("upstream response %s %s -> %d", method, resp.url, resp.status_code)

    if not (200 <= resp.status_code < 300):
        body = error_body(resp)
        log.error("upstream error %s %s -> %d body=%s", method, resp.url, resp.status_code, str(body)[:500])
        raise UpstreamError(resp.status_code, body, reason=resp.reason, url=resp.url)

    return resp
