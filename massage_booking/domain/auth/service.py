"""Auth service - Credential checks and token issuing"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from ...exceptions import AuthenticationError
from ...models import User
from ...security_utils import create_access_token, verify_password
from ...shared.validators import normalize_email
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Identity checks behind POST /auth/login"""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository()

    def authenticate(self, email: str, password: str) -> User:
        """Return the user owning these credentials, AuthenticationError otherwise"""
        normalized = normalize_email(email)
        user = self.users.get_user_by_email(self.db, normalized)

        # Same answer for unknown email and wrong password
        if not user or not verify_password(password, user.password):
            logger.warning(f"🔒 Failed login attempt for {normalized}")
            raise AuthenticationError("Invalid credentials")

        logger.info(f"🔓 User {user.email} logged in")
        return user

    @staticmethod
    def issue_token(claims: dict[str, Any]) -> str:
        return create_access_token(claims)

    def login(self, email: str, password: str) -> tuple[str, User]:
        user = self.authenticate(email, password)
        token = self.issue_token({"sub": user.id, "email": user.email})
        return token, user
