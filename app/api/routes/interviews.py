from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_interview_service
from app.models.user import User
from app.schemas.interview import (
    InterviewListItem,
    InterviewResultsResponse,
    StartInterviewRequest,
    StartInterviewResponse,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
)
from app.schemas.question import QuestionByIndexResponse
from app.services.interview_service import InterviewService

router = APIRouter(prefix="/interviews", tags=["interviews"])


@router.get("", response_model=list[InterviewListItem])
def list_interviews(
    user: User = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service),
):
    return service.list_sessions(user.id)


@router.post("/start", response_model=StartInterviewResponse)
def start_interview(
    body: StartInterviewRequest,
    user: User = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service),
):
    return service.start_interview(user.id, job_level=body.job_level, interview_type=body.interview_type)


# TODO: scope to the caller's active session once product decides whether this lookup stays public.
@router.get("/questions/{question_index}", response_model=QuestionByIndexResponse)
def get_question_by_index(
    question_index: str,
    user: User = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service),
):
    return service.get_question_by_index(question_index)


@router.post("/{session_id}/answers", response_model=SubmitAnswerResponse)
def submit_answer(
    session_id: str,
    body: SubmitAnswerRequest,
    user: User = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service),
):
    return service.submit_answer(
        session_id=session_id,
        question_id=body.question_id,
        answer_text=body.answer_text,
        current_question_index=body.current_question_index,
        requesting_user_id=user.id,
    )


@router.get("/{session_id}/results", response_model=InterviewResultsResponse)
def get_interview_results(
    session_id: str,
    user: User = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service),
):
    return service.get_results(session_id, requesting_user_id=user.id)
