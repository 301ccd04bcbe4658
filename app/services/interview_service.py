import logging
from datetime import datetime
from typing import Any, Callable, List, Optional

from app.core.cache import CatalogQuestion
from app.core.errors import ConfigurationError, ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.core.locks import SessionLockRegistry, session_locks
from app.db.base import utcnow
from app.models.interview_session import AnsweredQuestion, InterviewSession
from app.repositories.interview_session_repository import InterviewSessionRepository
from app.repositories.question_repository import QuestionRepository
from app.repositories.user_repository import UserRepository
from app.schemas.feedback import (
    AnsweredQuestionInput,
    AnswerFeedback,
    AnswerFeedbackRequest,
    ComprehensiveFeedback,
    ComprehensiveFeedbackRequest,
)
from app.schemas.interview import (
    AnsweredQuestionItem,
    InterviewListItem,
    InterviewResultsResponse,
    StartInterviewResponse,
    SubmitAnswerResponse,
)
from app.schemas.question import QuestionByIndexResponse, QuestionItem
from app.services.feedback_provider import FeedbackProvider

logger = logging.getLogger(__name__)


def to_question_item(question: CatalogQuestion) -> QuestionItem:
    return QuestionItem(id=question.id, text=question.text, question_type=question.question_type)


def to_answered_item(answered: AnsweredQuestion) -> AnsweredQuestionItem:
    return AnsweredQuestionItem(
        question_id=answered.question_id,
        question_number=answered.sequence + 1,
        question_text=answered.question_text,
        question_type=answered.question_type,
        answer_text=answered.answer_text,
        feedback=AnswerFeedback.model_validate(answered.feedback),
        answered_at=answered.answered_at,
    )


def to_answered_input(answered: AnsweredQuestion) -> AnsweredQuestionInput:
    return AnsweredQuestionInput(
        question_number=answered.sequence + 1,
        question=answered.question_text,
        question_type=answered.question_type,
        answer=answered.answer_text,
        feedback=AnswerFeedback.model_validate(answered.feedback),
    )


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class InterviewService:
    def __init__(
        self,
        questions: QuestionRepository,
        sessions: InterviewSessionRepository,
        users: UserRepository,
        feedback_provider: FeedbackProvider,
        locks: SessionLockRegistry = session_locks,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.questions = questions
        self.sessions = sessions
        self.users = users
        self.feedback_provider = feedback_provider
        self.locks = locks
        self.clock = clock

    def start_interview(self, user_id: str, job_level: str, interview_type: str) -> StartInterviewResponse:
        if _is_blank(job_level):
            raise ValidationError("Missing required field: jobLevel")
        if _is_blank(interview_type):
            raise ValidationError("Missing required field: interviewType")

        user = self.users.get(user_id)
        if not user:
            raise NotFoundError("User not found")
        if not user.job_role:
            raise ConfigurationError("User job role not found. Please complete your profile.")

        catalog = self.questions.list_all()
        if not catalog:
            raise NotFoundError("No interview questions available")

        session = self.sessions.create(
            user_id=user.id,
            job_role=user.job_role,
            job_level=job_level.strip(),
            interview_type=interview_type.strip(),
            total_questions=len(catalog),
            started_at=self.clock(),
        )
        logger.info("Started interview session %s for user %s (%d questions)", session.id, user.id, len(catalog))

        return StartInterviewResponse(
            session_id=session.id,
            current_question=to_question_item(catalog[0]),
            question_number=1,
            total_questions=len(catalog),
            job_role=user.job_role,
        )

    def submit_answer(
        self,
        session_id: str,
        question_id: str,
        answer_text: str,
        current_question_index: int,
        requesting_user_id: str,
    ) -> SubmitAnswerResponse:
        if _is_blank(session_id):
            raise ValidationError("Missing required field: sessionId")
        if _is_blank(question_id):
            raise ValidationError("Missing required field: questionId")
        if _is_blank(answer_text):
            raise ValidationError("Missing required field: answerText")
        if current_question_index is None:
            raise ValidationError("Missing required field: currentQuestionIndex")
        if not _is_index(current_question_index):
            raise ValidationError("currentQuestionIndex must be a non-negative integer")

        session = self._get_owned_session(session_id, requesting_user_id)

        with self.locks.hold(session.id):
            catalog = self.questions.list_all()
            session, question = self._validate_submission(
                session.id, question_id, current_question_index, catalog, requesting_user_id
            )

            feedback = self.feedback_provider.score_answer(
                AnswerFeedbackRequest(
                    question=question.text,
                    answer=answer_text,
                    job_role=session.job_role,
                    job_level=session.job_level,
                    interview_type=session.interview_type,
                    question_type=question.question_type,
                )
            )

            next_index = current_question_index + 1
            if next_index < session.total_questions:
                session = self._record_answer(
                    session, question, answer_text, current_question_index, feedback, catalog, requesting_user_id
                )
                logger.info("Session %s answered question %d/%d", session.id, next_index, session.total_questions)
                return SubmitAnswerResponse(
                    completed=False,
                    session_id=session.id,
                    total_questions=session.total_questions,
                    current_question_feedback=feedback,
                    next_question=to_question_item(catalog[next_index]),
                    question_number=next_index + 1,
                    current_question_index=next_index,
                )

            pending = self._build_answer(question, answer_text, current_question_index, feedback)
            comprehensive = self.feedback_provider.score_comprehensive(
                ComprehensiveFeedbackRequest(
                    job_role=session.job_role,
                    job_level=session.job_level,
                    interview_type=session.interview_type,
                    questions=[to_answered_input(item) for item in self.sessions.list_answers(session.id) + [pending]],
                )
            )
            session = self._record_answer(
                session,
                question,
                answer_text,
                current_question_index,
                feedback,
                catalog,
                requesting_user_id,
                comprehensive=comprehensive,
            )
            logger.info("Session %s completed in %ds", session.id, session.duration)

            return SubmitAnswerResponse(
                completed=True,
                session_id=session.id,
                total_questions=session.total_questions,
                current_question_feedback=feedback,
                comprehensive_feedback=comprehensive,
                all_answers=[to_answered_item(item) for item in self.sessions.list_answers(session.id)],
            )

    def get_results(self, session_id: str, requesting_user_id: str) -> InterviewResultsResponse:
        if _is_blank(session_id):
            raise ValidationError("Missing required field: sessionId")

        session = self._get_owned_session(session_id, requesting_user_id)
        comprehensive = None
        if session.comprehensive_feedback:
            comprehensive = ComprehensiveFeedback.model_validate(session.comprehensive_feedback)

        return InterviewResultsResponse(
            session_id=session.id,
            status=session.status,
            job_role=session.job_role,
            job_level=session.job_level,
            interview_type=session.interview_type,
            total_questions=session.total_questions,
            started_at=session.started_at,
            completed_at=session.completed_at,
            duration=session.duration,
            overall_score=session.overall_score,
            overall_feedback=session.overall_feedback,
            improvements=list(session.improvements or []),
            comprehensive_feedback=comprehensive,
            questions=[to_answered_item(item) for item in self.sessions.list_answers(session.id)],
        )

    def get_question_by_index(self, index: Any) -> QuestionByIndexResponse:
        if index is None:
            raise ValidationError("Missing required field: questionIndex")
        if isinstance(index, str) and index.strip().isdecimal():
            index = int(index.strip())
        if not _is_index(index):
            raise ValidationError("Invalid questionIndex")

        catalog = self.questions.list_all()
        if index >= len(catalog):
            raise NotFoundError("Question not found")

        return QuestionByIndexResponse(
            question=to_question_item(catalog[index]),
            question_number=index + 1,
            total_questions=len(catalog),
            question_index=index,
        )

    def list_sessions(self, user_id: str) -> List[InterviewListItem]:
        return [
            InterviewListItem(
                session_id=session.id,
                status=session.status,
                job_role=session.job_role,
                job_level=session.job_level,
                interview_type=session.interview_type,
                total_questions=session.total_questions,
                answered_count=session.answered_count,
                overall_score=session.overall_score,
                started_at=session.started_at,
            )
            for session in self.sessions.list_by_user(user_id)
        ]

    def _get_owned_session(self, session_id: str, requesting_user_id: str) -> InterviewSession:
        session = self.sessions.get(session_id)
        if not session:
            raise NotFoundError("Interview session not found")
        if session.user_id != requesting_user_id:
            raise ForbiddenError("Forbidden: You do not have access to this interview")
        return session

    def _validate_submission(
        self,
        session_id: str,
        question_id: str,
        index: int,
        catalog: List[CatalogQuestion],
        requesting_user_id: str,
    ) -> tuple[InterviewSession, CatalogQuestion]:
        session = self._get_owned_session(session_id, requesting_user_id)
        if session.is_completed:
            raise ValidationError("Interview session already completed")

        question = self._find_question(catalog, question_id)
        if not question:
            raise NotFoundError("Question not found")

        if index >= len(catalog) or index >= session.total_questions or catalog[index].id != question_id:
            raise ValidationError("Question index does not match the question being answered")

        answered = self.sessions.list_answers(session.id)
        if any(item.question_id == question_id for item in answered):
            raise ConflictError("Question has already been answered")
        if index != len(answered):
            raise ValidationError(f"Questions must be answered in order; expected question {len(answered) + 1}")

        return session, question

    def _record_answer(
        self,
        session: InterviewSession,
        question: CatalogQuestion,
        answer_text: str,
        index: int,
        feedback: AnswerFeedback,
        catalog: List[CatalogQuestion],
        requesting_user_id: str,
        comprehensive: Optional[ComprehensiveFeedback] = None,
    ) -> InterviewSession:
        try:
            return self._save(session, self._build_answer(question, answer_text, index, feedback), comprehensive)
        except ConflictError:
            logger.warning("Conflict saving answer to session %s; re-validating", session.id)
            session, question = self._validate_submission(session.id, question.id, index, catalog, requesting_user_id)
            return self._save(session, self._build_answer(question, answer_text, index, feedback), comprehensive)

    def _save(
        self,
        session: InterviewSession,
        answered: AnsweredQuestion,
        comprehensive: Optional[ComprehensiveFeedback],
    ) -> InterviewSession:
        if comprehensive is None:
            self.sessions.append_answer(session, answered)
            return session

        duration = max(0, int((answered.answered_at - session.started_at).total_seconds()))
        return self.sessions.complete(
            session,
            answered,
            duration=duration,
            completed_at=answered.answered_at,
            feedback=comprehensive,
        )

    def _build_answer(
        self,
        question: CatalogQuestion,
        answer_text: str,
        index: int,
        feedback: AnswerFeedback,
    ) -> AnsweredQuestion:
        return AnsweredQuestion(
            question_id=question.id,
            sequence=index,
            question_text=question.text,
            question_type=question.question_type,
            answer_text=answer_text,
            feedback=feedback.model_dump(),
            answered_at=self.clock(),
        )

    @staticmethod
    def _find_question(catalog: List[CatalogQuestion], question_id: str) -> Optional[CatalogQuestion]:
        for question in catalog:
            if question.id == question_id:
                return question
        return None
