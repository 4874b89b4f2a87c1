"""Plain JSON bodies for the /functions job endpoints.

These endpoints are called by schedulers rather than the app, so they answer
with ``{"success": true, ...}`` or ``{"error": ...}`` instead of the usual
envelope, and always carry the CORS headers themselves.
"""

from fastapi import Response, status
from fastapi.responses import JSONResponse

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def job_success(result: dict) -> JSONResponse:
    return JSONResponse(
        content={"success": True, **result},
        status_code=status.HTTP_200_OK,
        headers=CORS_HEADERS,
    )


def job_failure(error: str) -> JSONResponse:
    return JSONResponse(
        content={"error": error},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers=CORS_HEADERS,
    )


def job_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)
