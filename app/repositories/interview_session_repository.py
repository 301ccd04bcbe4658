from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import ConflictError, StorageError
from app.models.interview_session import STATUS_COMPLETED, AnsweredQuestion, InterviewSession
from app.schemas.feedback import ComprehensiveFeedback


class InterviewSessionRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        user_id: str,
        job_role: str,
        job_level: str,
        interview_type: str,
        total_questions: int,
        started_at: datetime,
    ) -> InterviewSession:
        session = InterviewSession(
            user_id=user_id,
            job_role=job_role,
            job_level=job_level,
            interview_type=interview_type,
            total_questions=total_questions,
            started_at=started_at,
            improvements=[],
        )
        self.db.add(session)
        self._commit("Failed to create interview session")
        self.db.refresh(session)
        return session

    def get(self, session_id: str) -> InterviewSession | None:
        try:
            return self.db.get(InterviewSession, session_id, populate_existing=True)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to load interview session", details=str(exc)) from exc

    def list_answers(self, session_id: str) -> List[AnsweredQuestion]:
        stmt = (
            select(AnsweredQuestion)
            .where(AnsweredQuestion.session_id == session_id)
            .order_by(AnsweredQuestion.sequence.asc())
        )
        try:
            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise StorageError("Failed to load answered questions", details=str(exc)) from exc

    def list_by_user(self, user_id: str) -> List[InterviewSession]:
        stmt = (
            select(InterviewSession)
            .where(InterviewSession.user_id == user_id)
            .order_by(InterviewSession.started_at.desc())
        )
        try:
            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise StorageError("Failed to load interview sessions", details=str(exc)) from exc

    def append_answer(self, session: InterviewSession, answered: AnsweredQuestion) -> AnsweredQuestion:
        answered.session_id = session.id
        session.answered_count = session.answered_count + 1
        self.db.add(answered)
        self.db.add(session)
        self._commit("Failed to save answer", conflict_message="Question has already been answered")
        return answered

    def complete(
        self,
        session: InterviewSession,
        answered: AnsweredQuestion,
        duration: int,
        completed_at: datetime,
        feedback: ComprehensiveFeedback,
    ) -> InterviewSession:
        if session.is_completed:
            raise ConflictError("Interview session already completed")
        answered.session_id = session.id
        session.answered_count = session.answered_count + 1
        session.status = STATUS_COMPLETED
        session.completed_at = completed_at
        session.duration = duration
        session.overall_score = feedback.overall_score
        session.overall_feedback = feedback.overall_feedback
        session.improvements = list(feedback.improvements)
        session.comprehensive_feedback = feedback.model_dump()
        self.db.add(answered)
        self.db.add(session)
        self._commit("Failed to complete interview session", conflict_message="Interview session was modified concurrently")
        return session

    def _commit(self, message: str, conflict_message: str | None = None):
        try:
            self.db.commit()
        except (IntegrityError, StaleDataError) as exc:
            self.db.rollback()
            if conflict_message is None:
                raise StorageError(message, details=str(exc)) from exc
            raise ConflictError(conflict_message, details=str(exc)) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(message, details=str(exc)) from exc
