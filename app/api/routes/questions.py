from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_caller_id
from app.core.errors import NotFoundError
from app.db.session import get_db
from app.repositories.question_repository import QuestionRepository
from app.schemas.question import QuestionItem
from app.services.interview_service import to_question_item

router = APIRouter(prefix="/questions", tags=["questions"], dependencies=[Depends(get_caller_id)])


@router.get("", response_model=list[QuestionItem])
def list_questions(db: Session = Depends(get_db)):
    return [to_question_item(question) for question in QuestionRepository(db).list_all()]


@router.get("/{question_id}", response_model=QuestionItem)
def get_question(question_id: str, db: Session = Depends(get_db)):
    question = QuestionRepository(db).get(question_id)
    if not question:
        raise NotFoundError("Question not found")
    return to_question_item(question)
