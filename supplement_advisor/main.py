"""
FastAPI application entry point for the Supplement Advisor backend.

This module creates the FastAPI app instance, registers the routers and
maps pipeline errors to HTTP responses.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from supplement_advisor import __version__
from supplement_advisor.config import settings
from supplement_advisor.routes.health import router as health_router
from supplement_advisor.routes.recommendations import router as recommendations_router
from supplement_advisor.services.errors import LLMError

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: Uses CORS_ALLOWED_ORIGINS env var
    - Anything else: Allows all origins for local development

    Returns:
        List of allowed origin URLs, or ["*"] for development.
    """
    if settings.is_production():
        origins = settings.CORS_ALLOWED_ORIGINS
        if origins:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        else:
            logger.warning(
                "CORS_ALLOWED_ORIGINS not set in production. "
                "No web origins allowed. Set CORS_ALLOWED_ORIGINS for the web client."
            )
        return origins

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


def _jsonable_errors(exc: RequestValidationError) -> list:
    """Error list without the raw ctx objects (exceptions are not JSON-serializable)."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


# Create FastAPI app
app = FastAPI(
    title="Supplement Advisor API",
    description="Supplement recommendations with drug-interaction cautions from a health profile",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.exception_handler(LLMError)
async def llm_error_handler(request: Request, exc: LLMError):
    """
    Map a pipeline error to its status code and the sanitized {type, message} body.

    Diagnostics (raw responses, stacks) were already logged where the error
    was raised; only the user-facing message leaves the server.
    """
    logger.error(
        f"{request.method} {request.url.path} failed: kind={exc.kind}, message={exc.message}"
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Log where validation failed, never what was sent.

    Bodies carry medication and health details, so only the error locations,
    types and the body size reach the log. Malformed bodies are a caller
    error like any other profile violation, so they get the same
    400 + {type: "validation"} shape.
    """
    details = _jsonable_errors(exc)
    body = await request.body()
    logger.error(
        f"Validation error on {request.method} {request.url.path}: "
        f"{[(error['loc'], error['type']) for error in details]} ({len(body)} bytes)"
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "type": "validation",
            "message": "요청 형식이 올바르지 않습니다.",
            "details": details,
        }
    )


# Configure CORS with environment-based origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Register routers
app.include_router(health_router)
app.include_router(recommendations_router)

logger.info("FastAPI app initialized successfully")
