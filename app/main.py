"""
Main FastAPI application
Skill assessment and reporting portal
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import time

from app.config import Settings, settings as default_settings
from app.database import get_engine, get_session_factory, init_db
from app.api import admin, auth, notifications, questions, quiz, reports, skills, users
from app.exceptions import ServiceError
from app.utils.cache import CacheService
from app.utils.rate_limiter import RateLimiter, RateLimitExceeded

logger = logging.getLogger(__name__)

UNLIMITED_PATHS = ["/health", "/docs", "/redoc", "/openapi.json"]


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build a fully wired application

    The engine, session factory, cache and rate limiter live on app.state, so
    several independent apps (one per test, for instance) can coexist.
    """
    settings = settings or default_settings
    configure_logging(settings)

    engine = get_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    init_db(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        yield
        logger.info("Shutting down application")
        engine.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Backend for skill assessment quizzes, performance reports and leaderboards",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = get_session_factory(engine)
    app.state.cache = CacheService.from_url(settings.REDIS_URL, settings.OVERVIEW_CACHE_TTL)
    app.state.rate_limiter = RateLimiter(
        requests_per_minute=settings.RATE_LIMIT_PER_MINUTE,
        requests_per_hour=settings.RATE_LIMIT_PER_HOUR
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting middleware
    @app.middleware("http")
    async def rate_limit_middleware(request: Request, call_next):
        """Apply rate limiting to all requests except health and docs"""
        if not settings.RATE_LIMIT_ENABLED or request.url.path in UNLIMITED_PATHS:
            return await call_next(request)

        try:
            request.app.state.rate_limiter.check_rate_limit(request)
        except RateLimitExceeded as e:
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "message": e.message,
                    "retryAfter": e.retry_after
                },
                headers={"Retry-After": str(e.retry_after)}
            )

        return await call_next(request)

    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests with timing"""
        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Duration: {duration:.3f}s"
        )

        return response

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        """Map service exceptions to their status and the response envelope"""
        if exc.status_code >= 500:
            logger.error(f"Service error on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Format HTTP exceptions consistently"""
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "message": "Validation error",
                "errors": jsonable_encoder(exc.errors())
            }
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors gracefully"""
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

        content = {
            "success": False,
            "message": "An unexpected error occurred. Please try again later."
        }
        if settings.DEBUG:
            content["detail"] = str(exc)

        return JSONResponse(status_code=500, content=content)

    @app.get("/health")
    async def health_check():
        """
        Health check endpoint for monitoring

        Returns service status and dependencies
        """
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "cache": "enabled" if app.state.cache.enabled else "disabled",
            "timestamp": time.time()
        }

    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "message": "Skill Assessment & Reporting API",
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health"
        }

    app.include_router(auth.router)
    app.include_router(skills.router)
    app.include_router(questions.router)
    app.include_router(quiz.router)
    app.include_router(reports.router)
    app.include_router(users.router)
    app.include_router(notifications.router)
    app.include_router(admin.router)

    logger.info("Application created")
    return app


def run() -> None:
    """
    Serve the API with uvicorn

    The app is built by uvicorn through the factory, so importing this module
    never touches the database. Equivalent to
    `uvicorn app.main:create_app --factory`.
    """
    import uvicorn
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=default_settings.DEBUG
    )


if __name__ == "__main__":
    run()
