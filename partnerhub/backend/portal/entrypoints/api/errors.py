# portal/entrypoints/api/errors.py
from __future__ import annotations

from fastapi.responses import JSONResponse

from ...domain.errors import ConfigurationFault, GatewayError, UpstreamError, UpstreamUnreachable


def configuration_fault_response(e: ConfigurationFault) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "error": "Missing API configuration",
            "message": "Please check that environment variables are set correctly",
            "details": {"missing": e.missing},
        },
    )


def gateway_error_response(e: GatewayError) -> JSONResponse:
    """Upstream errors keep their status and body; everything else is a 500."""
    if isinstance(e, ConfigurationFault):
        return configuration_fault_response(e)
    if isinstance(e, UpstreamError):
        return JSONResponse(
            status_code=e.status_code,
            content={
                "error": f"External API error: {e.reason or e.status_code}",
                "status": e.status_code,
                "details": e.body,
            },
        )
    if isinstance(e, UpstreamUnreachable):
        return JSONResponse(
            status_code=500,
            content={"error": "Server error", "message": f"Upstream unreachable: {e.reason}"},
        )
    return JSONResponse(status_code=500, content={"error": "Server error", "message": str(e)})


def relay_error_response(e: GatewayError) -> JSONResponse:
    if isinstance(e, ConfigurationFault):
        return configuration_fault_response(e)
    if isinstance(e, UpstreamError):
        return JSONResponse(
            status_code=e.status_code,
            content={"error": f"Proxy returned status {e.status_code}", "details": e.reason or None},
        )
    reason = e.reason if isinstance(e, UpstreamUnreachable) else str(e)
    return JSONResponse(status_code=500, content={"error": "Failed to proxy request", "details": reason})
