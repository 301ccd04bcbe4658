from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageError
from app.db.base import utcnow
from app.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> User | None:
        return self.db.get(User, user_id)

    def get_by_external_id(self, external_id: str) -> User | None:
        stmt = select(User).where(User.external_id == external_id)
        return self.db.scalars(stmt).first()

    def get_or_create(self, external_id: str, name: str = "", email: str = "") -> User:
        user = self.get_by_external_id(external_id)
        if user:
            user.last_login = utcnow()
            self._commit(user)
            return user

        user = User(external_id=external_id, name=name, email=email, last_login=utcnow())
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Created by a concurrent first request.
            self.db.rollback()
            existing = self.get_by_external_id(external_id)
            if existing is None:
                raise StorageError("Failed to create user")
            return existing
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Failed to create user", details=str(exc)) from exc
        self.db.refresh(user)
        return user

    def update_profile(
        self,
        user: User,
        name: str | None = None,
        email: str | None = None,
        job_role: str | None = None,
    ) -> User:
        if name is not None:
            user.name = name
        if email is not None:
            user.email = email
        if job_role is not None:
            user.job_role = job_role
        self._commit(user)
        return user

    def _commit(self, user: User):
        self.db.add(user)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Failed to save user", details=str(exc)) from exc
        self.db.refresh(user)
