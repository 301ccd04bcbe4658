from typing import Iterable, List

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.cache import CatalogQuestion, QuestionCatalogCache, catalog_cache
from app.core.errors import StorageError
from app.models.question import Question


class QuestionRepository:
    def __init__(self, db: Session, cache: QuestionCatalogCache = catalog_cache):
        self.db = db
        self.cache = cache

    def list_all(self) -> List[CatalogQuestion]:
        questions = self.cache.get_catalog()
        if questions is not None:
            return questions

        stmt = select(Question).order_by(Question.position.asc())
        try:
            rows = list(self.db.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise StorageError("Failed to load questions", details=str(exc)) from exc

        questions = [self.to_catalog_question(row) for row in rows]
        if questions:
            self.cache.set_catalog(questions)
        return questions

    def get(self, question_id: str) -> CatalogQuestion | None:
        for question in self.list_all():
            if question.id == question_id:
                return question
        return None

    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(Question)) or 0

    def seed(self, entries: Iterable[tuple[str, str]]) -> int:
        """Append ``(text, question_type)`` entries after the current last position."""
        last = self.db.scalar(select(func.max(Question.position)))
        position = -1 if last is None else last
        created = 0
        for text, question_type in entries:
            position += 1
            self.db.add(Question(position=position, text=text, question_type=question_type))
            created += 1
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Failed to seed questions", details=str(exc)) from exc
        self.cache.clear()
        return created

    @staticmethod
    def to_catalog_question(question: Question) -> CatalogQuestion:
        return CatalogQuestion(
            id=question.id,
            position=question.position,
            text=question.text,
            question_type=question.question_type,
        )
