# backend/app/main.py
"""FastAPI application entry point."""

from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backend.app.core import AppException, logs, settings
from backend.app.features.ssl_check.routes import router as ssl_router


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render application errors as ``{"error": message}``."""
    if exc.status_code >= 500:
        logs.error(exc.message, "api", {"path": request.url.path, **exc.details})
    else:
        logs.warning(exc.message, "api", {"path": request.url.path})
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are client errors (400), not 422."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logs.warning("Malformed request", "api", {"path": request.url.path, "error": message})
    return JSONResponse({"error": message}, status_code=400)


CORS_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"


def cors_headers(origin: Optional[str] = None) -> Dict[str, str]:
    """CORS headers sent on every response, pre-flights included."""
    allowed = settings.cors_origins
    if "*" in allowed:
        return {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        }
    headers = {"Access-Control-Allow-Headers": CORS_ALLOW_HEADERS, "Vary": "Origin"}
    if origin in allowed:
        headers["Access-Control-Allow-Origin"] = origin
    return headers


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
    )

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(cors_headers(request.headers.get("origin")))
        return response

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(ssl_router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "version": settings.APP_VERSION}

    return app


app = create_app()
