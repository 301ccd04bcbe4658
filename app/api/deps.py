from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, UnauthorizedError
from app.db.session import get_db
from app.models.user import User
from app.repositories.interview_session_repository import InterviewSessionRepository
from app.repositories.question_repository import QuestionRepository
from app.repositories.user_repository import UserRepository
from app.services.feedback_provider import FeedbackProvider
from app.services.interview_service import InterviewService
from app.services.openai_service import OpenAIService


def get_caller_id(x_user_id: str | None = Header(default=None)) -> str:
    """External uid of the caller, resolved by the upstream identity gateway."""
    if not x_user_id or not x_user_id.strip():
        raise UnauthorizedError("Unauthorized")
    return x_user_id.strip()


def get_current_user(caller_id: str = Depends(get_caller_id), db: Session = Depends(get_db)) -> User:
    user = UserRepository(db).get_by_external_id(caller_id)
    if not user:
        raise NotFoundError("User not found. Please create your profile first.")
    return user


def get_feedback_provider() -> FeedbackProvider:
    return OpenAIService()


def get_interview_service(
    db: Session = Depends(get_db),
    feedback_provider: FeedbackProvider = Depends(get_feedback_provider),
) -> InterviewService:
    return InterviewService(
        questions=QuestionRepository(db),
        sessions=InterviewSessionRepository(db),
        users=UserRepository(db),
        feedback_provider=feedback_provider,
    )
