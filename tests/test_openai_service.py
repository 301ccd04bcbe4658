import json
from types import SimpleNamespace

import httpx
import openai
import pytest

from app.core.errors import ConfigurationError, ProviderError
from app.schemas.feedback import (
    AnsweredQuestionInput,
    AnswerFeedback,
    AnswerFeedbackRequest,
    ComprehensiveFeedbackRequest,
)
from app.services import openai_service
from app.services.openai_service import OpenAIService


class StubCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(content=None, error=None):
    completions = StubCompletions(content=content, error=error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


ANSWER_REQUEST = AnswerFeedbackRequest(
    question="How would you optimize a slow SQL query?",
    answer="Add an index and check the plan.",
    job_role="Backend Developer",
    job_level="Junior",
    interview_type="Technical",
    question_type="Technical",
)

ANSWER_JSON = {
    "score": 72,
    "feedback": "Good start.",
    "strengths": ["mentions indexes"],
    "improvements": ["discuss EXPLAIN output"],
    "tips": ["quantify the speedup"],
}


def test_score_answer_parses_json():
    client, completions = _client(json.dumps(ANSWER_JSON))

    feedback = OpenAIService(client=client).score_answer(ANSWER_REQUEST)

    assert feedback.score == 72
    assert feedback.strengths == ["mentions indexes"]
    prompt = completions.calls[0]["messages"][1]["content"]
    assert "Backend Developer" in prompt
    assert ANSWER_REQUEST.question in prompt


def test_score_answer_strips_code_fences():
    client, _ = _client("```json\n" + json.dumps(ANSWER_JSON) + "\n```")

    assert OpenAIService(client=client).score_answer(ANSWER_REQUEST).feedback == "Good start."


@pytest.mark.parametrize(
    "content",
    [
        None,
        "",
        "not json",
        json.dumps({"score": 250, "feedback": "too high"}),
        json.dumps({"feedback": "no score"}),
    ],
)
def test_malformed_answer_feedback_is_provider_error(content):
    client, _ = _client(content)

    with pytest.raises(ProviderError):
        OpenAIService(client=client).score_answer(ANSWER_REQUEST)


def test_api_errors_are_provider_errors():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    client, _ = _client(error=openai.APITimeoutError(request=request))

    with pytest.raises(ProviderError) as excinfo:
        OpenAIService(client=client).score_answer(ANSWER_REQUEST)

    assert excinfo.value.message == "Feedback service is unavailable"


def test_score_comprehensive_parses_json():
    payload = {
        "overall_score": 77,
        "overall_feedback": "Consistent answers.",
        "strengths": ["clarity"],
        "improvements": ["depth"],
        "areas_to_improve": ["indexes"],
        "per_question_feedback": [
            {"question_number": 1, "question": "Q", "feedback": "fine", "score": 72},
        ],
    }
    client, completions = _client(json.dumps(payload))
    request = ComprehensiveFeedbackRequest(
        job_role="Backend Developer",
        job_level="Junior",
        interview_type="Technical",
        questions=[
            AnsweredQuestionInput(
                question_number=1,
                question=ANSWER_REQUEST.question,
                question_type="Technical",
                answer=ANSWER_REQUEST.answer,
                feedback=AnswerFeedback(**ANSWER_JSON),
            )
        ],
    )

    feedback = OpenAIService(client=client).score_comprehensive(request)

    assert feedback.overall_score == 77
    assert feedback.per_question_feedback[0].score == 72
    assert "Question 1 (Technical)" in completions.calls[0]["messages"][1]["content"]


def test_missing_api_key_is_configuration_error(monkeypatch):
    monkeypatch.setattr(openai_service.settings, "openai_api_key", None)

    with pytest.raises(ConfigurationError):
        OpenAIService().score_answer(ANSWER_REQUEST)
