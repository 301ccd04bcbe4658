from typing import Protocol

from app.schemas.feedback import (
    AnswerFeedback,
    AnswerFeedbackRequest,
    ComprehensiveFeedback,
    ComprehensiveFeedbackRequest,
)


class FeedbackProvider(Protocol):
    def score_answer(self, request: AnswerFeedbackRequest) -> AnswerFeedback: ...

    def score_comprehensive(self, request: ComprehensiveFeedbackRequest) -> ComprehensiveFeedback: ...
