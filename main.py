from dotenv import load_dotenv
load_dotenv()

import time
import uuid
from contextlib import asynccontextmanager
from typing import Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import Engine

from api.exception_handlers import register_exception_handlers
from api.v1.content_types import router as v1_content_types_router
from api.v1.site import build_site_router

# Setup logging
from core.logging_config import setup_logging, get_logger, LogContext
from core.settings import Settings, settings as default_settings
setup_logging()
logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    packages: Optional[Iterable[str]] = None,
) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info("Content engine starting up")

        from services.bootstrap_service import bootstrap

        if engine is None:
            from db.session import engine as db_engine
            content_engine = bootstrap(db_engine, settings=settings, packages=packages)
        else:
            content_engine = bootstrap(engine, settings=settings, packages=packages)

        app.state.content_engine = content_engine
        for slug, error in content_engine.failures.items():
            logger.error_ctx(f"Content type unavailable: {error}", content_type=slug)

        # Public routes depend on the discovered content types
        if not getattr(app.state, "site_routes_mounted", False):
            app.include_router(build_site_router(content_engine.routes))
            app.state.site_routes_mounted = True

        yield

        # Shutdown
        logger.info("Content engine shutting down")

    app = FastAPI(title="Content Types API", version="1.0.0", debug=settings.DEBUG, lifespan=lifespan)

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    # Logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        request_id = getattr(request.state, "request_id", "unknown")

        # Skip health checks to reduce noise
        if request.url.path == "/health":
            return await call_next(request)

        with LogContext(request_id=request_id, path=request.url.path, method=request.method):
            logger.info(f"Request started: {request.method} {request.url.path}")

            response = await call_next(request)
            duration = round(time.time() - start_time, 3)

            with LogContext(
                request_id=request_id,
                path=request.url.path,
                method=request.method,
                status_code=response.status_code,
                duration=duration
            ):
                if response.status_code >= 500:
                    logger.error(f"Request failed: {request.method} {request.url.path} - {response.status_code} in {duration}s")
                elif response.status_code >= 400:
                    logger.warning(f"Request client error: {request.method} {request.url.path} - {response.status_code} in {duration}s")
                else:
                    logger.info(f"Request completed: {request.method} {request.url.path} - {response.status_code} in {duration}s")

            return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        request_id = getattr(request.state, "request_id", "unknown")

        with LogContext(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
            error_message=str(exc)
        ):
            logger.exception("Unhandled exception")

        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id
            }
        )

    app.include_router(v1_content_types_router, prefix="/api/v1/content-types")

    @app.get("/health")
    async def health():
        return {"status": "healthy", "service": "content-types-api"}

    return app


app = create_app()
