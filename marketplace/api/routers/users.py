# marketplace/api/routers/users.py
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.data.database import get_db
from marketplace.domain.schemas import UserCreate, UserRead
from marketplace.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def get_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


@router.post("", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, svc: UserService = Depends(get_service)):
    return svc.create_user(payload)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: UUID, svc: UserService = Depends(get_service)):
    return svc.get_user(user_id)
