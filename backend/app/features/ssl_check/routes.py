# backend/app/features/ssl_check/routes.py
"""FastAPI routes for the SSL check API."""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from backend.app.core import AppException, ScanError, ValidationError, logs
from .models import SslReport
from .schemas import SslCheckRequest
from .services import SslCheckService

router = APIRouter(tags=["ssl"])


def get_ssl_check_service() -> SslCheckService:
    """Service factory; overridden in tests."""
    return SslCheckService()


@router.options("/check-ssl", include_in_schema=False)
async def check_ssl_preflight() -> Response:
    """Answer a pre-flight probe with an empty body."""
    return Response(status_code=200)


@router.post("/check-ssl", response_model=SslReport)
async def check_ssl(
    request: SslCheckRequest,
    service: SslCheckService = Depends(get_ssl_check_service),
) -> JSONResponse:
    """
    Grade a domain's HTTPS configuration.

    Connection failures (certificate, DNS, timeout, HTTP-only, unreachable)
    are returned as ``is_valid: false`` reports with status 200. Check
    ``is_valid`` and ``domain_exists`` rather than the HTTP status.
    """
    if not request.domain:
        raise ValidationError("Domain is required")

    logs.info("SSL check requested", "api", {"domain": request.domain})

    try:
        report = await service.check(request.domain)
    except AppException:
        raise
    except Exception as e:
        logs.error("SSL check failed", "api", {"domain": request.domain}, exception=e)
        raise ScanError(str(e) or "Unknown error") from e

    return JSONResponse(report.to_payload())
