"""
FastAPI Application

HTTP surface of the training engine. Every endpoint is a stateless
computation: the caller sends the catalog subset, history and athlete it
wants evaluated and gets the result back. Nothing is stored server side.

Errors share one body shape, {"error": ..., "message": ...}, whether they
come from a route (HTTPException), from request validation or from an
unexpected failure.
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from training_engine.api.routes import catalog, freshness, goals, sessions, strength, substitution

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

app = FastAPI(
    title="Adaptive Training Engine API",
    description="Training load, muscle recovery, session generation and goal projection",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# No CORS middleware: the engine has no browser client of its own.
app.include_router(catalog.router, prefix="/api", tags=["Catalog"])
app.include_router(freshness.router, prefix="/api", tags=["Recovery"])
app.include_router(sessions.router, prefix="/api", tags=["Sessions"])
app.include_router(substitution.router, prefix="/api", tags=["Substitution"])
app.include_router(goals.router, prefix="/api", tags=["Goals"])
app.include_router(strength.router, prefix="/api", tags=["Strength"])


@app.get("/")
async def root() -> Dict[str, Any]:
    """API information and the computation endpoints it serves."""
    return {
        "name": "Adaptive Training Engine API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": sorted(
            route.path
            for route in app.routes
            if getattr(route, "path", "").startswith("/api/")
        ),
    }


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "training-engine-api"}


def _describe_validation_error(error: Dict[str, Any]) -> str:
    # Drop the leading "body"/"query" so the message names the field
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
    field = ".".join(location) or "request"
    return f"{field}: {error.get('msg', 'invalid value')}"


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Route errors (unknown exercise, bad catalog file) in the shared format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "message": str(exc.detail)},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Payloads rejected by the request models.

    The first failing field becomes the message; the full pydantic error
    list is kept under "details".
    """
    errors = exc.errors()
    message = _describe_validation_error(errors[0]) if errors else "Invalid request"
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "message": message,
            "details": jsonable_encoder(errors),
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Unexpected failures: logged with traceback, reported as 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "message": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")
