"""User router - FastAPI endpoints for accounts"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...auth import (
    RoleProvider,
    ensure_self_or_admin,
    get_current_user,
    get_role_provider,
    require_admin,
)
from ...database import get_db
from ...models import User, UserRole
from ...shared.validators import format_api_datetime
from .schemas import RoleUpdate, UserCreate, UserResponse, UserUpdate
from .service import UserService

router = APIRouter(prefix="/user", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        firstname=user.firstname,
        name=user.name,
        phoneNumber=user.phone_number,
        role=user.role,
        createdAt=format_api_datetime(user.created_at),
    )


@router.get("", response_model=list[UserResponse])
async def get_users(
    _admin: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """Every account (admin)"""
    return [user_to_response(u) for u in service.get_users()]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    roles: RoleProvider = Depends(get_role_provider),
    service: UserService = Depends(get_user_service),
):
    ensure_self_or_admin(current_user, user_id, roles)
    return user_to_response(service.get_user(user_id))


@router.post("", response_model=UserResponse, status_code=201)
async def register(data: UserCreate, service: UserService = Depends(get_user_service)):
    """Public registration, always creates a USER account"""
    return user_to_response(service.create_user(data, UserRole.USER))


@router.post("/admin", response_model=UserResponse, status_code=201)
async def create_admin(
    data: UserCreate,
    _admin: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """Create an administrator account (admin)"""
    return user_to_response(service.create_user(data, UserRole.ADMIN))


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    roles: RoleProvider = Depends(get_role_provider),
    service: UserService = Depends(get_user_service),
):
    ensure_self_or_admin(current_user, user_id, roles)
    return user_to_response(service.update_user(user_id, data))


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    roles: RoleProvider = Depends(get_role_provider),
    service: UserService = Depends(get_user_service),
):
    ensure_self_or_admin(current_user, user_id, roles)
    service.delete_user(user_id)
    return Response(status_code=204)


@router.patch("/{user_id}/role", response_model=UserResponse)
async def change_user_role(
    user_id: str,
    data: RoleUpdate,
    _admin: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """Change the role of an account (admin); applies to the next request of that user"""
    return user_to_response(service.update_role(user_id, data.role))
