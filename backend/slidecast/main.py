"""
Slidecast Backend API
FastAPI application that turns news articles into short slideshow videos

This is the main entry point that wires together routes and services.
"""

import asyncio
import os
import shutil
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from .config import (
    API_TITLE,
    API_DESCRIPTION,
    API_VERSION,
    CORS_ORIGINS,
    OUTPUT_DIR,
    WORK_DIR,
)
from .routes import videos_router
from .core import (
    setup_logging,
    get_logger,
    set_request_id,
    clear_context,
    parse_bool_env,
    run_startup_runtime_checks,
    REQUIRED_RENDER_TOOLS,
)

# Initialize logging
log_level = os.getenv("LOG_LEVEL", "INFO")
log_file = os.getenv("LOG_FILE")
use_json_logs = parse_bool_env(os.getenv("JSON_LOGS"), default=False)

setup_logging(
    level=log_level,
    log_file=Path(log_file) if log_file else None,
    use_json=use_json_logs,
)

logger = get_logger(__name__, service="api")
logger.info("Starting Slidecast Backend API", extra={
    "log_level": log_level,
    "json_logs": use_json_logs,
})

MAX_REQUEST_BODY_BYTES = int(os.getenv("MAX_REQUEST_BODY_BYTES", str(2 * 1024 * 1024)))


async def _run_startup() -> None:
    """Check the runtime environment and start background cleanup."""
    from .services.infrastructure.storage import OutputCleanupService
    from .services.pipeline.rendering.fonts import resolve_font_path

    strict_runtime = parse_bool_env(
        os.getenv("STARTUP_STRICT_RUNTIME_CHECKS"),
        default=os.getenv("ENV", "").lower() == "production",
    )
    runtime_report = run_startup_runtime_checks(
        output_dir=OUTPUT_DIR,
        work_dir=WORK_DIR,
        strict_tools=strict_runtime,
        strict_dirs=True,
        font_path=resolve_font_path(os.getenv("SLIDECAST_FONT_PATH") or None),
    )
    app.state.runtime_report = runtime_report
    logger.info("Startup runtime checks complete", extra={"runtime_report": runtime_report})

    app.state.output_cleanup_task = None
    cleanup_service = OutputCleanupService(OUTPUT_DIR, work_dir=WORK_DIR)
    try:
        cleanup_service.run_once()
        app.state.output_cleanup_task = asyncio.create_task(cleanup_service.run_periodic())
    except OSError as exc:
        logger.error("Failed to initialize output cleanup", extra={"error": str(exc)}, exc_info=True)


async def _run_shutdown() -> None:
    """Stop background services gracefully."""
    cleanup_task = getattr(app.state, "output_cleanup_task", None)
    if cleanup_task:
        cleanup_task.cancel()
        try:
            await cleanup_task
        except asyncio.CancelledError:
            pass


@asynccontextmanager
async def lifespan(_app: FastAPI):
    await _run_startup()
    try:
        yield
    finally:
        await _run_shutdown()


# Create FastAPI app
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_correlation(request: Request, call_next):
    """Add correlation ID, enforce the body size limit, and attach security headers."""
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    set_request_id(request_id)
    path = request.url.path

    logger.info(f"{request.method} {path}", extra={
        "method": request.method,
        "path": path,
        "client": request.client.host if request.client else "unknown",
    })

    try:
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                too_large = int(content_length) > MAX_REQUEST_BODY_BYTES
            except ValueError:
                return JSONResponse(status_code=400, content={"detail": "Invalid Content-Length header"})
            if too_large:
                return JSONResponse(
                    status_code=413,
                    content={
                        "detail": f"Request body too large. Max allowed: {MAX_REQUEST_BODY_BYTES // (1024 * 1024)}MB"
                    },
                )

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")

        logger.info(f"Response: {response.status_code}", extra={
            "status_code": response.status_code,
            "method": request.method,
            "path": path,
        })
        return response
    finally:
        clear_context()


# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(videos_router)


@app.get("/")
async def root():
    """Root endpoint - API info"""
    return {
        "message": "Slidecast API - Turn news articles into slideshow videos",
        "version": API_VERSION,
    }


@app.get("/health")
async def health_check():
    """
    Health check endpoint for container orchestration.

    Returns 200 when the encoder binary is on PATH and the output directory
    exists, 503 otherwise.
    """
    checks = {}
    all_healthy = True

    for tool in REQUIRED_RENDER_TOOLS:
        tool_path = shutil.which(tool)
        checks[tool] = {"available": tool_path is not None, "path": tool_path}
        if tool_path is None:
            all_healthy = False
            logger.warning(f"Health check: {tool} not found in PATH")

    checks["output_dir"] = {"path": str(OUTPUT_DIR), "exists": OUTPUT_DIR.is_dir()}
    if not OUTPUT_DIR.is_dir():
        all_healthy = False

    body = {"status": "healthy" if all_healthy else "unhealthy", "checks": checks}
    return JSONResponse(status_code=200 if all_healthy else 503, content=body)
