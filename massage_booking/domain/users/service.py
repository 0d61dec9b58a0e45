"""User service - Business logic for accounts"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...exceptions import ConflictError, NotFoundError
from ...models import User, UserRole
from ...security_utils import hash_password
from .repository import UserRepository
from .schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for account business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def get_users(self) -> list[User]:
        return self.repo.get_users(self.db)

    def get_user(self, user_id: str) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise NotFoundError("Utilisateur non trouvé")
        return user

    def create_user(self, data: UserCreate, role: UserRole = UserRole.USER) -> User:
        """Create an account; the role always comes from the caller, never from the payload"""
        if self.repo.get_user_by_email(self.db, data.email):
            raise ConflictError("Cet email est déjà utilisé")

        try:
            user = self.repo.create_user(
                self.db,
                email=data.email,
                password=hash_password(data.password),
                firstname=data.firstname,
                name=data.name,
                phone_number=data.phoneNumber,
                role=role.value,
            )
        except IntegrityError as e:
            # Email taken between the check and the insert
            self.db.rollback()
            logger.error(f"❌ Email {data.email} was taken by another account (race condition)")
            raise ConflictError("Cet email est déjà utilisé") from e

        logger.info(f"🆕 User created: {user.email} ({user.role})")
        return user

    def update_user(self, user_id: str, data: UserUpdate) -> User:
        user = self.get_user(user_id)

        updates = {}
        if data.email is not None and data.email != user.email:
            if self.repo.get_user_by_email(self.db, data.email):
                raise ConflictError("Cet email est déjà utilisé")
            updates["email"] = data.email
        if data.password is not None:
            updates["password"] = hash_password(data.password)
        if data.firstname is not None:
            updates["firstname"] = data.firstname
        if data.name is not None:
            updates["name"] = data.name
        if data.phoneNumber is not None:
            updates["phone_number"] = data.phoneNumber

        try:
            return self.repo.update_user(self.db, user, **updates)
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Cet email est déjà utilisé") from e

    def update_role(self, user_id: str, role: UserRole) -> User:
        user = self.get_user(user_id)
        user = self.repo.update_user(self.db, user, role=role.value)
        logger.info(f"🔑 Role of {user.email} changed to {role.value}")
        return user

    def delete_user(self, user_id: str) -> None:
        user = self.get_user(user_id)
        self.repo.delete_user(self.db, user)
        logger.info(f"🗑️ User {user_id} deleted")
