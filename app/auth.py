import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session, joinedload

from .constants import MANAGER_ROLES, RecordStatus
from .database import get_db
from .models import User
from .security_utils import create_jwt_token, verify_jwt_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def create_access_token(user: User) -> str:
    """Issue a staff access token carrying the user's role and branch"""
    return create_jwt_token(
        {"sub": str(user.id), "role": user.role, "branchId": user.branch_id}
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current staff user from the bearer token"""

    if not credentials:
        logger.warning("⚠️ No credentials provided")
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    token = credentials.credentials

    # Basic token format validation before processing
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, token length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    decoded_token = verify_jwt_token(token)
    if not decoded_token:
        raise HTTPException(
            status_code=401,
            detail="Token is invalid or has expired. Please sign in again.",
            headers={"X-Token-Expired": "true"},
        )

    user_id = decoded_token.get("sub")
    if not user_id or not str(user_id).isdigit():
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(decoded_token.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    user = (
        db.query(User)
        .options(joinedload(User.branch))
        .filter(User.id == int(user_id))
        .first()
    )
    if not user or user.status != RecordStatus.ACTIVE.value:
        logger.warning(f"⚠️ Token for unknown or inactive user {user_id}")
        raise HTTPException(status_code=401, detail="Authentication failed")

    logger.debug(f"✅ User authenticated: {user.username}")
    return user


async def get_current_manager(
    user: User = Depends(get_current_user),
) -> User:
    """
    Get current user and verify they manage the restaurant.
    Use this dependency for scheduling, approval and admin routes.
    """
    if user.role not in MANAGER_ROLES:
        logger.warning(f"⚠️ User {user.username} ({user.role}) attempted to access a manager route")
        raise HTTPException(
            status_code=403,
            detail="Manager role required to perform this action.",
        )
    return user
