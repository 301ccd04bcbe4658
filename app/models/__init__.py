from app.models.interview_session import AnsweredQuestion, InterviewSession
from app.models.question import Question
from app.models.user import User

__all__ = [
    "AnsweredQuestion",
    "InterviewSession",
    "Question",
    "User",
]
