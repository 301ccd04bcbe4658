from datetime import datetime, timedelta

from app.core.errors import ProviderError
from app.schemas.feedback import AnswerFeedback, ComprehensiveFeedback, PerQuestionFeedback

TWO_QUESTIONS = [
    ("Tell me about a time you had a conflict with a team member.", "Behavioural"),
    ("How would you optimize a slow SQL query?", "Technical"),
]


class FakeFeedbackProvider:
    def __init__(self):
        self.answer_requests = []
        self.comprehensive_requests = []
        self.fail_answer = False
        self.fail_comprehensive = False

    def score_answer(self, request):
        if self.fail_answer:
            raise ProviderError("Feedback service is unavailable")
        self.answer_requests.append(request)
        return AnswerFeedback(
            score=70 + len(self.answer_requests),
            feedback=f"Feedback for: {request.answer}",
            strengths=["clear"],
            improvements=["add metrics"],
            tips=["use STAR"],
        )

    def score_comprehensive(self, request):
        if self.fail_comprehensive:
            raise ProviderError("Feedback service is unavailable")
        self.comprehensive_requests.append(request)
        return ComprehensiveFeedback(
            overall_score=80,
            overall_feedback="Solid interview overall.",
            strengths=["communication"],
            improvements=["be more concise"],
            areas_to_improve=["system design depth"],
            per_question_feedback=[
                PerQuestionFeedback(
                    question_number=item.question_number,
                    question=item.question,
                    feedback=item.feedback.feedback,
                    score=item.feedback.score,
                )
                for item in request.questions
            ],
        )


class FakeClock:
    def __init__(self, start=datetime(2024, 1, 1, 9, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)
