from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.dependencies import build_graph_client
from app.core.database import session_manager

# Routers for the portfolio backend
from app.api.v1.endpoints.contact import router as contact_router
from app.api.v1.endpoints.admin import router as admin_router

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import logging
from contextlib import asynccontextmanager
from app.core.config import settings
from app.core.exceptions import ContactServiceError
from app.core.limiter import limiter

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Async context manager for app lifespan events"""

    try:
        logger.info("🚀 Starting portfolio contact backend...")

        logger.info("🔌 Initializing database connection...")
        await session_manager.init()
        logger.info("✅ Database ready")

        app.state.email_client = build_graph_client()
        logger.info(f"✉️ Email client ready (sender: {settings.EMAIL_FROM})")

    except Exception as e:
        logger.critical(f"🔥 Application startup failed: {str(e)}")
        raise

    try:
        logger.info("🏁 Application startup complete")
        yield
    finally:
        logger.info("🔌 Closing database connections...")
        await session_manager.close()
        logger.info("👋 Application shutdown complete")


app = FastAPI(
    title="Portfolio Contact API",
    description="Contact form and submission admin API for the portfolio site",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"Request: {request.method} {request.url}")
    logger.info(f"Origin: {request.headers.get('origin')}")
    response = await call_next(request)
    logger.info(f"Response status: {response.status_code}")
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ContactServiceError)
async def contact_service_exception_handler(request: Request, exc: ContactServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} (cause: {exc.__cause__!r})")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logging.error(f"Validation Error: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors()},
    )


@app.get("/", tags=["Health Check"])
async def health_check():
    try:
        connected = await session_manager.ping()
        return {
            "status": "healthy" if connected else "unhealthy",
            "service": "Portfolio Contact API",
            "database": "connected" if connected else "not initialized",
        }
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        return {
            "status": "unhealthy",
            "service": "Portfolio Contact API",
            "database": "disconnected",
            "error": str(e)
        }


app.include_router(contact_router, prefix="/api/v1", tags=["Contact"])
app.include_router(admin_router, prefix="/api/v1", tags=["Admin"])

logger.info(f"✅ Loaded {len(app.routes)} routes")
