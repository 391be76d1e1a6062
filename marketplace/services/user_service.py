# marketplace/services/user_service.py
from uuid import UUID

from sqlalchemy.orm import Session

from marketplace.data.models.user import UserModel
from marketplace.domain.errors import ConflictError, NotFoundError
from marketplace.domain.schemas import UserCreate, UserRead
from marketplace.repos.user_repo import UserRepo
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        email = payload.email.strip().lower()

        if payload.id:
            existing = self.repo.get_user(payload.id)
            if existing:
                return UserRead.model_validate(existing)

        if self.repo.get_by_email(email):
            raise ConflictError("Email is already registered")

        user = UserModel(name=payload.name.strip(), email=email)
        if payload.id:
            user.id = payload.id
        created = self.repo.create_user(user)
        logger.info(f"Registered user {created.id}")
        return UserRead.model_validate(created)

    def get_user(self, user_id: UUID) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserRead.model_validate(user)
