"""Auth router - login endpoint"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...config import LOGIN_RATE_LIMIT, LOGIN_RATE_WINDOW_SECONDS
from ...database import get_db
from ...rate_limiter import create_rate_limiter
from ..users.router import user_to_response
from .schemas import LoginRequest, LoginResponse
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])

login_rate_limit = create_rate_limiter(
    limit=LOGIN_RATE_LIMIT, window_seconds=LOGIN_RATE_WINDOW_SECONDS, key_prefix="login"
)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency injection for AuthService"""
    return AuthService(db)


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    _: None = Depends(login_rate_limit),
    service: AuthService = Depends(get_auth_service),
):
    """Exchange email and password for a bearer access token"""
    token, user = service.login(data.email, data.password)
    return LoginResponse(access_token=token, user=user_to_response(user))
