"""
Security Utilities
Password hashing, password policy and JWT access tokens
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError
from jose import jwt as jose_jwt

# Password hashing
from passlib.context import CryptContext

from .config import ACCESS_TOKEN_EXPIRE_MINUTES, SECRET_KEY

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
PASSWORD_MIN_LENGTH = 11
# bcrypt ignores everything past 72 bytes
PASSWORD_MAX_LENGTH = 72

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


def check_password_policy(password: str) -> list[str]:
    """
    Check a password against the account policy.

    Returns:
        One message per failed rule, empty when the password is acceptable
    """
    problems = []

    if len(password) < PASSWORD_MIN_LENGTH:
        problems.append(
            f"Le mot de passe doit contenir au moins {PASSWORD_MIN_LENGTH} caractères"
        )
    if len(password.encode("utf-8")) > PASSWORD_MAX_LENGTH:
        problems.append(
            f"Le mot de passe ne doit pas dépasser {PASSWORD_MAX_LENGTH} octets"
        )
    if not re.search(r"[a-z]", password):
        problems.append("Le mot de passe doit contenir au moins une minuscule")
    if not re.search(r"[A-Z]", password):
        problems.append("Le mot de passe doit contenir au moins une majuscule")
    if not re.search(r"\d", password):
        problems.append("Le mot de passe doit contenir au moins un chiffre")
    if not re.search(r"[^a-zA-Z0-9]", password):
        problems.append("Le mot de passe doit contenir au moins un symbole")

    return problems


# ============================================================================
# TOKEN GENERATION & VALIDATION
# ============================================================================


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token

    Args:
        data: Claims to encode in the token
        expires_delta: Token expiration time (default ACCESS_TOKEN_EXPIRE_MINUTES)
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    return jose_jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_jwt_token(token: str) -> Optional[dict[str, Any]]:
    """
    Verify and decode a JWT token

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jose_jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None
