"""FastAPI application entry point.

Builds the career pathway API: logging, security headers, CORS, the
error envelope for every failure mode, the v1 router and /health.
Run with ``uvicorn career_pathway.main:app``.
"""

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from career_pathway.api.v1.router import router as v1_router
from career_pathway.core.config import settings
from career_pathway.core.errors import APIError, InternalError
from career_pathway.core.logging import configure_logging
from career_pathway.core.rate_limiting import limiter, rate_limit_exceeded_handler
from career_pathway.core.responses import ErrorDetail, ErrorResponse

logger = structlog.get_logger()

# Sent on every response. The API never serves HTML, so nothing may be
# framed, sniffed or loaded cross-origin.
_SECURITY_HEADERS: dict[str, str] = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Embedder-Policy": "require-corp",
    "Cross-Origin-Resource-Policy": "same-origin",
}

_HSTS = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses.

    API responses also get ``Cache-Control: no-store`` because turn
    replies carry the client's session state. HSTS is added only in
    production, where TLS terminates at the reverse proxy.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)

        response.headers.update(_SECURITY_HEADERS)
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store, max-age=0"
        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = _HSTS

        return response


def _error_response(
    status_code: int, code: str, message: str, details: list[dict] | None = None
) -> JSONResponse:
    """Render the standard ``{"error": {...}}`` envelope."""
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=body.model_dump())


def api_error_handler(_request: Request, exc: APIError) -> JSONResponse:
    """Render an APIError with its own status code and details."""
    return _error_response(exc.status_code, exc.code, exc.message, exc.details)


def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request body validation failures as 400 VALIDATION_ERROR.

    Each pydantic error becomes one ``{"loc", "msg", "type"}`` detail.
    """
    details = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    return _error_response(
        400, "VALIDATION_ERROR", "Request validation failed", details
    )


def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions.

    Security: The exception is logged with its traceback; the client only
    sees a generic 500 INTERNAL_ERROR.
    """
    logger.exception("unhandled_exception", exc_info=exc, path=request.url.path)
    generic = InternalError()
    return _error_response(generic.status_code, generic.code, generic.message)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    A factory so tests can build apps against patched settings.

    Returns:
        Configured FastAPI application instance.
    """
    configure_logging(settings.log_level, settings.log_json)

    app = FastAPI(
        title="Career Pathway Engine API",
        version="0.1.0",
        description="Guided career interview and direction recommendations",
    )

    # Starlette runs the last-added middleware first; CORS must see
    # preflight requests before anything else.
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "X-Request-ID"],
    )

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    app.state.limiter = limiter
    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/health")
    def health_check() -> dict:
        """Liveness probe, outside the versioned API."""
        return {"status": "healthy"}

    logger.info(
        "app_created",
        environment=settings.environment,
        llm_provider=settings.llm_provider,
        advisory_enabled=settings.advisory_enabled,
    )
    return app


app = create_app()
