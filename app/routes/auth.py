import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..auth import create_access_token, get_current_user
from ..constants import RecordStatus
from ..database import get_db
from ..models import User
from ..rate_limiter import create_rate_limiter
from ..schemas import LoginRequest, LoginResponse, UserResponse
from ..security_utils import verify_password
from ..shared.responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

# Rate limiter for sign-in attempts (10 attempts per 5 minutes per IP)
login_rate_limiter = create_rate_limiter(limit=10, window_seconds=300, key_prefix="login")


@router.post("/login")
async def login(
    data: LoginRequest,
    _: None = Depends(login_rate_limiter),
    db: Session = Depends(get_db),
):
    """Exchange staff credentials for a bearer token"""
    user = db.query(User).filter(User.username == data.username.strip()).first()

    if not user or not verify_password(data.password, user.hashed_password):
        logger.warning(f"⚠️ Failed sign-in for username '{data.username}'")
        raise HTTPException(status_code=401, detail="Invalid username or password")

    if user.status != RecordStatus.ACTIVE.value:
        logger.warning(f"⚠️ Inactive user {user.id} tried to sign in")
        raise HTTPException(status_code=403, detail="This account is disabled")

    logger.info(f"✅ User {user.username} signed in")
    response = LoginResponse(accessToken=create_access_token(user), user=UserResponse.from_model(user))
    return ok(response, "Signed in successfully")


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user"""
    return ok(UserResponse.from_model(current_user))
