from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from app.api.deps import get_caller_id, get_current_user
from app.db.session import get_db
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.user import UserProfile, UserUpdateRequest

router = APIRouter(prefix="/users", tags=["users"])


def to_profile(user: User) -> UserProfile:
    return UserProfile(
        id=user.id,
        external_id=user.external_id,
        name=user.name,
        email=user.email,
        job_role=user.job_role,
        last_login=user.last_login,
        created_at=user.created_at,
    )


@router.get("/me", response_model=UserProfile)
def get_me(
    caller_id: str = Depends(get_caller_id),
    x_user_name: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
    db: Session = Depends(get_db),
):
    user = UserRepository(db).get_or_create(caller_id, name=x_user_name or "", email=x_user_email or "")
    return to_profile(user)


@router.patch("/me", response_model=UserProfile)
def update_me(
    body: UserUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    updated = UserRepository(db).update_profile(
        user,
        name=body.name,
        email=body.email,
        job_role=body.job_role,
    )
    return to_profile(updated)
