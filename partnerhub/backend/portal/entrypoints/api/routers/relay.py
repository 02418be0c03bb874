# portal/entrypoints/api/routers/relay.py
from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse

from ....domain.errors import GatewayError
from ....service_layer.gateway import ListingsGateway
from ..deps import get_gateway
from ..errors import relay_error_response

router = APIRouter(tags=["relay"])

_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def _forwarded_params(request: Request) -> list[tuple[str, str]]:
    # Pairs, not a dict: repeated keys such as ?status=a&status=b all go through.
    return [(k, v) for k, v in request.query_params.multi_items() if k != "path"]


async def _json_body(request: Request) -> Any:
    if request.method == "GET":
        return None
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw.decode("utf-8", errors="replace")


@router.api_route("/relay", methods=_METHODS)
async def relay(
    request: Request,
    path: str = Query(default=""),
    gateway: ListingsGateway = Depends(get_gateway),
) -> Response:
    try:
        result = await gateway.relay(request.method, path, _forwarded_params(request), await _json_body(request))
    except GatewayError as e:
        return relay_error_response(e)

    resp = result.response
    if result.normalized is None:
        text = resp.text
        return JSONResponse(
            status_code=500,
            content={
                "error": "Proxy did not return JSON",
                "details": f"Content type: {resp.content_type or None}",
                "sample": text[:100] + "...",
            },
        )

    return JSONResponse(status_code=resp.status_code, content=result.normalized.response_body())


@router.api_route("/relay-raw", methods=_METHODS)
async def relay_raw(
    request: Request,
    path: str = Query(default=""),
    gateway: ListingsGateway = Depends(get_gateway),
) -> Response:
    try:
        resp = await gateway.relay_raw(request.method, path, _forwarded_params(request), await _json_body(request))
    except GatewayError as e:
        return relay_error_response(e)

    # Body goes out byte-for-byte with the relay's own content type.
    media_type = resp.content_type or None
    return Response(content=resp.content, status_code=resp.status_code, media_type=media_type)
