from pydantic import BaseModel


class QuestionItem(BaseModel):
    id: str
    text: str
    question_type: str


class QuestionByIndexResponse(BaseModel):
    question: QuestionItem
    question_number: int
    total_questions: int
    question_index: int
