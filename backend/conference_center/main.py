"""
Conference Center Booking API - Main Application Entry Point

Customers book conference facilities for date ranges; each booking gets
a versioned contract. Highlights:
- Double-booking prevention with per-facility row locks
- Redis caching of facility listings with invalidation on writes
- Structured logging with request correlation
- Problem-style JSON errors for every failure
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from conference_center.core.config import get_settings
from conference_center.core.exceptions import DomainError
from conference_center.core.logging import setup_logging, get_logger
from conference_center.core.metrics import metrics_endpoint
from conference_center.api.router import api_router
from conference_center.api.middleware import RequestLoggingMiddleware
from conference_center.services.cache_service import get_redis, close_redis, get_cache_stats

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Running without cache")

    yield

    await close_redis()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Conference facility booking API with contract management",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)


def _problem(request: Request, body: dict) -> JSONResponse:
    body["request_id"] = getattr(request.state, "request_id", None)
    return JSONResponse(status_code=body["status"], content=body)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    logger.warning("domain_error", kind=exc.kind, status=exc.status_code, detail=exc.message)
    return _problem(request, exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg")}
        for err in exc.errors()
    ]
    return _problem(request, {
        "type": "validation_error",
        "title": "Validation failed",
        "status": 400,
        "detail": "Request body or parameters are malformed.",
        "context": {"errors": errors},
    })


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", error=str(exc))
    return _problem(request, {
        "type": "server_error",
        "title": "Unexpected error",
        "status": 500,
        "detail": "An unexpected error occurred.",
        "context": None,
    })


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    cache_stats = await get_cache_stats()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "cache": cache_stats,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
