import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./restaurant.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))

# Frontend base URL (back-office and guest site share the same Next.js app)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:3000").split(",")

# Resend Email Configuration - customer e-mails are skipped when the key is missing
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Restaurant <noreply@restaurant.local>")

# Redis-backed helpers
CACHE_ENABLED = os.getenv("CACHE_ENABLED", "true").lower() == "true"
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

# Reservations
# Unpaid bookings are cancelled once this window has elapsed
BOOKING_PAYMENT_WINDOW_MINUTES = int(os.getenv("BOOKING_PAYMENT_WINDOW_MINUTES", "15"))
DEFAULT_PRE_ORDER_DEPOSIT_PERCENTAGE = float(
    os.getenv("DEFAULT_PRE_ORDER_DEPOSIT_PERCENTAGE", "30")
)

# Waitlist
WAITLIST_MINUTES_PER_PARTY = int(os.getenv("WAITLIST_MINUTES_PER_PARTY", "15"))

# Scheduling
SHIFT_FEEDBACK_DEADLINE_HOURS = int(os.getenv("SHIFT_FEEDBACK_DEADLINE_HOURS", "48"))
DEFAULT_SHIFT_LEAVE_ALLOWANCE = int(os.getenv("DEFAULT_SHIFT_LEAVE_ALLOWANCE", "12"))
LOW_BALANCE_THRESHOLD = int(os.getenv("LOW_BALANCE_THRESHOLD", "2"))

# Deployment
IS_PRODUCTION = os.getenv("ENVIRONMENT", "development").lower() == "production"
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
