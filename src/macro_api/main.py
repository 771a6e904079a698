"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from macro_api.api.routes import diagnostics, nutrition
from macro_api.core.config import get_settings
from macro_api.core.exceptions import APIError
from macro_api.services.nutrition import clear_service_cache, get_nutrition_service

# Configure logging
logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Logs the startup banner and closes the upstream HTTP client on shutdown.
    """
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.api_version}")
    logger.info(f"Server running on http://localhost:{settings.port}")
    if not settings.is_llm_configured:
        logger.warning("Make sure to set GEMINI_API_KEY in your .env file")

    yield

    logger.info("Shutting down...")
    await get_nutrition_service().close()
    clear_service_cache()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        description="Nutrition estimates for meal descriptions and food photos, powered by Gemini",
        lifespan=lifespan,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        """Handle custom API errors."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Report unparseable request bodies in the same error shape."""
        logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content=error_body("Invalid request body", jsonable_errors(exc)),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        """Last-resort handler so one failing request never leaks a traceback."""
        logger.exception(f"Server error on {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=error_body("Internal server error"),
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.api_version,
        }

    # Browser client
    static_dir = settings.static_dir
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.get("/", include_in_schema=False)
    async def root():
        """Serve the browser client."""
        index_file = static_dir / "index.html"
        if not index_file.is_file():
            raise APIError("Client application not found", status_code=404)
        return FileResponse(index_file)

    # Include routers
    app.include_router(nutrition.router, prefix="/api", tags=["Nutrition"])
    app.include_router(diagnostics.router, prefix="/api", tags=["Diagnostics"])

    return app


def error_body(message: str, details: Any = None) -> dict:
    """Error payload; ``details`` is only present when there is something to report."""
    body = {"error": message}
    if details is not None:
        body["details"] = details
    return body


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Strip non-serializable context from validation errors."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


def run() -> None:
    """Run the API with uvicorn using host/port from settings."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "macro_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
    )


# Create app instance
app = create_app()


if __name__ == "__main__":
    run()
