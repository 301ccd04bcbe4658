from typing import List

from pydantic import BaseModel, Field


class AnswerFeedback(BaseModel):
    score: int = Field(ge=0, le=100, description="Answer score between 0 and 100")
    feedback: str = Field(default="", description="Feedback on the answer")
    strengths: List[str] = Field(default_factory=list, description="Strengths of the answer")
    improvements: List[str] = Field(default_factory=list, description="Areas for improvement")
    tips: List[str] = Field(default_factory=list, description="Tips for the candidate")


class AnswerFeedbackRequest(BaseModel):
    question: str
    answer: str
    job_role: str
    job_level: str
    interview_type: str
    question_type: str


class AnsweredQuestionInput(BaseModel):
    question_number: int = Field(ge=1)
    question: str
    question_type: str
    answer: str
    feedback: AnswerFeedback


class ComprehensiveFeedbackRequest(BaseModel):
    job_role: str
    job_level: str
    interview_type: str
    questions: List[AnsweredQuestionInput] = Field(min_length=1)


class PerQuestionFeedback(BaseModel):
    question_number: int = Field(ge=1)
    question: str
    feedback: str = ""
    score: int = Field(ge=0, le=100)


class ComprehensiveFeedback(BaseModel):
    overall_score: int = Field(ge=0, le=100, description="Interview score between 0 and 100")
    overall_feedback: str = ""
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    areas_to_improve: List[str] = Field(default_factory=list)
    per_question_feedback: List[PerQuestionFeedback] = Field(default_factory=list)
