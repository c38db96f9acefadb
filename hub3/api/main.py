"""
FastAPI application factory.

Creates and configures the FastAPI app with:
- CORS middleware
- Route registration
- Exception handlers
- Startup/shutdown events
"""

import logging
from contextlib import asynccontextmanager

from elasticsearch import ApiError, TransportError
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hub3.core.config import get_settings
from hub3.core.database import get_db_session, init_db
from hub3.core.errors import EncodingError, NamespaceResolutionError, ParseError
from hub3.core.services.namespace import NamespaceService
from hub3.api.dependencies import get_namespace_registry
from hub3.api.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting hub3 search API")
    logger.info(f"Index: {settings.index_name} (org {settings.org_id})")

    try:
        init_db()
        with get_db_session() as db:
            service = NamespaceService(db)
            added = service.seed(settings.default_namespaces)
            if added:
                logger.info(f"Seeded {added} default namespaces")
            service.load(get_namespace_registry())
    except Exception as e:
        logger.warning(f"Namespace registry init warning: {e}")

    yield

    # Shutdown
    logger.info("Shutting down API")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""

    app = FastAPI(
        title="hub3 search API",
        description="Faceted search over fragment graphs stored in Elasticsearch",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    from hub3.api.routes import health, namespaces, search

    app.include_router(health.router, tags=["health"])
    app.include_router(search.router, prefix="/api/search", tags=["search"])
    app.include_router(namespaces.router, prefix="/api/namespaces", tags=["namespaces"])

    @app.exception_handler(ParseError)
    @app.exception_handler(NamespaceResolutionError)
    async def bad_request_handler(request: Request, exc: ParseError):
        logger.info(f"Rejected search request: {exc.message}")
        body = ErrorResponse(detail=exc.message, error_code=exc.code, context=exc.detail)
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(EncodingError)
    async def encoding_error_handler(request: Request, exc: EncodingError):
        logger.error(f"Unable to encode cursor: {exc.message}")
        body = ErrorResponse(detail=exc.message, error_code=exc.code, context=exc.detail)
        return JSONResponse(status_code=500, content=body.model_dump())

    @app.exception_handler(ApiError)
    @app.exception_handler(TransportError)
    async def search_backend_handler(request: Request, exc: Exception):
        logger.error(f"Elasticsearch error: {exc}")
        body = ErrorResponse(detail="Search backend error", error_code="search_backend")
        return JSONResponse(status_code=502, content=body.model_dump())

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )

    return app


# Create default app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=settings.log_level)
    uvicorn.run(
        "hub3.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
