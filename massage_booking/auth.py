import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .exceptions import AuthenticationError, AuthorizationError
from .models import User, UserRole
from .security_utils import verify_jwt_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header becomes our own 401 instead of the framework default
security = HTTPBearer(auto_error=False)


class RoleProvider:
    """
    Reads a user's role from storage.

    Admin checks go through this on every request, so a role change applies
    to tokens that were issued before it.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_role(self, user_id: str) -> Optional[str]:
        row = self.db.query(User.role).filter(User.id == user_id).first()
        return row[0] if row else None


def get_role_provider(db: Session = Depends(get_db)) -> RoleProvider:
    """Dependency injection for RoleProvider"""
    return RoleProvider(db)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer access token"""

    if not credentials:
        logger.debug("❌ No credentials provided")
        raise AuthenticationError(
            "Not authenticated. Please provide a valid Bearer token in the Authorization header."
        )

    payload = verify_jwt_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise AuthenticationError("Invalid or expired token")

    user = db.query(User).filter(User.id == payload["sub"]).first()
    if not user:
        # Account deleted after the token was issued
        logger.warning(f"⚠️ Token presented for unknown user {payload['sub']}")
        raise AuthenticationError("Invalid or expired token")

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


async def require_admin(
    user: User = Depends(get_current_user),
    roles: RoleProvider = Depends(get_role_provider),
) -> User:
    """
    Get current user and verify they are an administrator.
    Use this dependency for every admin-only route.
    """
    role = roles.get_role(user.id)
    if role != UserRole.ADMIN.value:
        logger.warning(f"⚠️ User {user.email} attempted to access an admin route (role={role})")
        raise AuthorizationError("Accès interdit - Admin uniquement")

    return user


def ensure_self_or_admin(user: User, target_user_id: str, roles: RoleProvider) -> None:
    """Allow an operation on target_user_id only for that user or an administrator"""
    if user.id == target_user_id:
        return
    if roles.get_role(user.id) != UserRole.ADMIN.value:
        raise AuthorizationError("Accès interdit")
