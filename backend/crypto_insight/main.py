"""Crypto Insight FastAPI Application.

Serves cryptocurrency listings, market metrics and generated technical,
fundamental and combined analyses.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .dependencies import build_services
from .routers import analysis, crypto, health, market
from .routers.responses import ErrorResponse, error_code_for
from .services.config import config_service
from .services.logging_service import setup_logging

logger = logging.getLogger(__name__)

# Invalid configuration is fatal: ConfigValidationException propagates and
# the server refuses to start.
config = config_service.load_and_validate()
setup_logging(config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    app.state.services = build_services(config_service)
    logger.info("Services initialized")

    yield

    # Shutdown: release the shared HTTP session
    await app.state.services.close()
    logger.info("Shutdown complete")


app = FastAPI(
    title="Crypto Insight API",
    description="Cryptocurrency market data and generated analysis",
    version=__version__,
    lifespan=lifespan,
)

# Middleware
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config_service.get("cors.allowed_origins", ["http://localhost:3000"]),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors in the standard error envelope."""
    body = ErrorResponse(message=str(exc.detail), error_code=error_code_for(exc.status_code))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log unexpected errors without exposing them to the client."""
    logger.error(f"Unhandled exception on {request.url.path}", exc_info=exc)
    body = ErrorResponse(
        message="An unexpected error occurred. Please try again later.",
        error_code=error_code_for(500),
    )
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(crypto.router, prefix="/api/crypto", tags=["Crypto"])
app.include_router(market.router, prefix="/api/market", tags=["Market"])
app.include_router(analysis.router, prefix="/api/analysis", tags=["Analysis"])


@app.get("/")
async def root():
    """Root endpoint redirect to docs."""
    return {"message": "Crypto Insight API", "docs": "/docs"}


def run():
    """Serve the API with uvicorn using the ``server`` config section."""
    import uvicorn

    uvicorn.run(
        "crypto_insight.main:app",
        host=config_service.get("server.host", "0.0.0.0"),
        port=config_service.get("server.port", 5000),
        reload=config_service.get("server.debug", False),
    )
