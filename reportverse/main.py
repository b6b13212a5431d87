from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from reportverse.core.config import settings
from reportverse.core.database import init_db, close_db
from reportverse.core.exceptions import DatabaseUnavailableError, ReportVerseError, error_response
from reportverse.core.logging_config import logger
from reportverse.core.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    RequestSizeLimitMiddleware,
)
from reportverse.core.rate_limiter import limiter, rate_limit_exceeded_handler
from reportverse.api.router import api_router
import reportverse.models  # noqa: F401  Import models so metadata knows about them


def validate_critical_config() -> None:
    """Fail fast if configuration the server cannot run without is missing"""
    errors = settings.validate_critical()
    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Invalid configuration: {', '.join(errors)}")
    logger.info("[Startup] Critical configuration validated")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Starting {settings.APP_NAME} v{settings.VERSION} ({settings.ENVIRONMENT})",
        extra={"event_type": "startup", "environment": settings.ENVIRONMENT}
    )
    validate_critical_config()

    try:
        await init_db()
    except DatabaseUnavailableError as e:
        logger.critical(f"[Startup] {e.message}; exiting", extra={"event_type": "startup_failed"})
        raise SystemExit(1)

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="Mentor / mentee relationship management: issues, achievements, academics",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False
)

# Add rate limiter state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add middleware (order matters - last added runs first)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_REQUEST_SIZE)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


# Exception handlers
@app.exception_handler(ReportVerseError)
async def reportverse_exception_handler(request: Request, exc: ReportVerseError):
    if exc.status_code >= 500:
        logger.log_error_with_context(exc, f"{request.method} {request.url.path}")
    else:
        logger.warning(
            f"{exc.code}: {exc.message}",
            extra={"event_type": "request_rejected", "error_code": exc.code, "http_path": request.url.path}
        )
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": f"Invalid input data. {'. '.join(messages)}"}
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = "Resource not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    content = {"success": False, "error": "Server Error"}
    if not settings.is_production():
        content["detail"] = str(exc)
    return JSONResponse(status_code=500, content=content)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "API is running"}


app.include_router(api_router, prefix="/api")


def run():
    """Console entry point"""
    import uvicorn

    uvicorn.run(
        "reportverse.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
