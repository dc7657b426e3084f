import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import all models to ensure they're registered with SQLAlchemy Base
# This is needed for relationships between models in different files
from . import (
    models,  # noqa: F401
    models_booking,  # noqa: F401
    models_menu,  # noqa: F401
    models_scheduling,  # noqa: F401
)
from .config import ALLOWED_ORIGINS, SECURITY_HEADERS_ENABLED
from .database import Base, engine
from .domain.bookings import router as bookings_router
from .domain.branches import router as branches_router
from .domain.employee_portal import router as employee_portal_router
from .domain.menu import attributes_router, categories_router, products_router
from .domain.pre_orders import config_router as pre_order_config_router
from .domain.pre_orders import router as pre_orders_router
from .domain.schedule_config import config_router as schedule_config_router
from .domain.schedule_config import lock_router as schedule_lock_router
from .domain.scheduling import router as scheduled_shifts_router
from .domain.scheduling import shifts_router
from .domain.shift_leave import router as shift_leave_router
from .domain.staffing import publish_router as publish_shifts_router
from .domain.staffing import router as staff_shifts_router
from .domain.users import router as users_router
from .domain.waitlist import router as waitlist_router
from .routes.auth import router as auth_router
from .routes.notifications import router as notifications_router
from .routes.status_automation import router as status_router
from .security_headers import SecurityHeadersMiddleware
from .shared.responses import GENERIC_ERROR_MESSAGE, error_body

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")

    try:
        from .rate_limiter import get_redis_client

        get_redis_client()  # Connection test
        logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed - cache and rate limiting fall back to local mode: {e}")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Restaurant Back-Office API", version="1.0.0", lifespan=lifespan)


# ============================================================================
# ERROR ENVELOPE
# ============================================================================


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else GENERIC_ERROR_MESSAGE
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path} - {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, message),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors(), custom_encoder={ValueError: str})
    logger.warning(f"⚠️ Validation error for {request.url.path}: {errors}")

    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    return JSONResponse(status_code=422, content=error_body(422, message, errors))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content=error_body(500, GENERIC_ERROR_MESSAGE))


# ============================================================================
# MIDDLEWARE
# ============================================================================

if SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"])
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# ============================================================================
# ROUTES
# ============================================================================

app.include_router(auth_router)
app.include_router(notifications_router)
app.include_router(users_router)
app.include_router(branches_router)
app.include_router(bookings_router)
app.include_router(pre_orders_router)
app.include_router(pre_order_config_router)
app.include_router(waitlist_router)
app.include_router(shifts_router)
app.include_router(scheduled_shifts_router)
app.include_router(staff_shifts_router)
app.include_router(publish_shifts_router)
app.include_router(schedule_lock_router)
app.include_router(schedule_config_router)
app.include_router(employee_portal_router)
app.include_router(shift_leave_router)
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(attributes_router)
app.include_router(status_router)


@app.get("/")
def root():
    return {"message": "Restaurant Back-Office API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
