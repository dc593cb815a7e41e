"""
Main application entry point.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from library_catalog.api.v1.books_endpoints import router as books_router
from library_catalog.api.v1.dependencies import get_settings
from library_catalog.api.v1.errors import map_validation_errors

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Schema violations answer 400 with every violation listed in details."""
    mapped = map_validation_errors(exc.errors())
    logger.debug(f"Request validation failed: {mapped.body['details']}")
    return JSONResponse(status_code=mapped.status_code, content=mapped.body)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Library Catalog API",
        description="Catalog of books, authors and categories with semantic embeddings.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include API routers
    app.include_router(books_router, prefix="/api", tags=["books"])

    @app.get("/")
    def read_root():
        """Root endpoint."""
        return {
            "message": "Welcome to the Library Catalog API",
            "docs": "/docs",
            "health": "/api/health",
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"Starting server: env={settings.app_env}, port={settings.port}")
    uvicorn.run(
        "library_catalog.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.app_env == "development",
    )
