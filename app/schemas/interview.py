from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.feedback import AnswerFeedback, ComprehensiveFeedback
from app.schemas.question import QuestionItem


class StartInterviewRequest(BaseModel):
    job_level: str = Field(min_length=1)
    interview_type: str = Field(min_length=1)


class StartInterviewResponse(BaseModel):
    session_id: str
    current_question: QuestionItem
    question_number: int
    total_questions: int
    job_role: str


class SubmitAnswerRequest(BaseModel):
    question_id: str = Field(min_length=1)
    answer_text: str = Field(min_length=1)
    current_question_index: int = Field(ge=0)


class AnsweredQuestionItem(BaseModel):
    question_id: str
    question_number: int
    question_text: str
    question_type: str
    answer_text: str
    feedback: AnswerFeedback
    answered_at: datetime


class SubmitAnswerResponse(BaseModel):
    completed: bool
    session_id: str
    total_questions: int
    current_question_feedback: AnswerFeedback
    next_question: Optional[QuestionItem] = None
    question_number: Optional[int] = None
    current_question_index: Optional[int] = None
    comprehensive_feedback: Optional[ComprehensiveFeedback] = None
    all_answers: Optional[List[AnsweredQuestionItem]] = None


class InterviewResultsResponse(BaseModel):
    session_id: str
    status: str
    job_role: str
    job_level: str
    interview_type: str
    total_questions: int
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration: Optional[int] = None
    overall_score: Optional[float] = None
    overall_feedback: Optional[str] = None
    improvements: List[str] = Field(default_factory=list)
    comprehensive_feedback: Optional[ComprehensiveFeedback] = None
    questions: List[AnsweredQuestionItem] = Field(default_factory=list)


class InterviewListItem(BaseModel):
    session_id: str
    status: str
    job_role: str
    job_level: str
    interview_type: str
    total_questions: int
    answered_count: int
    overall_score: Optional[float] = None
    started_at: datetime
