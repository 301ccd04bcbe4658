import json
import logging
from typing import Type, TypeVar

from openai import OpenAI, OpenAIError
from pydantic import BaseModel, ValidationError as SchemaValidationError

from app.core.config import settings
from app.core.errors import ConfigurationError, ProviderError
from app.schemas.feedback import (
    AnswerFeedback,
    AnswerFeedbackRequest,
    ComprehensiveFeedback,
    ComprehensiveFeedbackRequest,
)

logger = logging.getLogger(__name__)

FeedbackModel = TypeVar("FeedbackModel", bound=BaseModel)


class OpenAIService:
    def __init__(self, client: OpenAI | None = None):
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not settings.openai_api_key:
                raise ConfigurationError("OPENAI_API_KEY is not configured. Set it in deployment environment variables.")
            self._client = OpenAI(
                api_key=settings.openai_api_key,
                timeout=settings.openai_timeout_seconds,
                max_retries=settings.openai_max_retries,
            )
        return self._client

    def score_answer(self, request: AnswerFeedbackRequest) -> AnswerFeedback:
        prompt = (
            "You are an experienced interviewer reviewing one answer from a practice interview.\n"
            f"Job Role: {request.job_role}\n"
            f"Job Level: {request.job_level}\n"
            f"Interview Type: {request.interview_type}\n"
            f"Question Type: {request.question_type}\n"
            f"Question: {request.question}\n"
            f"Answer: {request.answer}\n\n"
            "Rules:\n"
            "1) Score the answer from 0 to 100, calibrated to the job level.\n"
            "2) Keep feedback to two or three sentences.\n"
            "3) List concrete strengths, improvements and tips.\n"
            "Return JSON only in this format: "
            "{\"score\": 0, \"feedback\": \"...\", \"strengths\": [\"...\"], "
            "\"improvements\": [\"...\"], \"tips\": [\"...\"]}."
        )
        return self._complete_json(prompt, AnswerFeedback, temperature=0.3)

    def score_comprehensive(self, request: ComprehensiveFeedbackRequest) -> ComprehensiveFeedback:
        transcript = "\n\n".join(
            f"Question {item.question_number} ({item.question_type}): {item.question}\n"
            f"Answer: {item.answer}\n"
            f"Per-answer score: {item.feedback.score}"
            for item in request.questions
        )
        prompt = (
            "You are an experienced interviewer writing the final review of a practice interview.\n"
            f"Job Role: {request.job_role}\n"
            f"Job Level: {request.job_level}\n"
            f"Interview Type: {request.interview_type}\n\n"
            f"{transcript}\n\n"
            "Rules:\n"
            "1) Give an overall score from 0 to 100.\n"
            "2) Summarise overall performance in one short paragraph.\n"
            "3) Include one per_question_feedback entry for every question above, using its question_number.\n"
            "Return JSON only in this format: "
            "{\"overall_score\": 0, \"overall_feedback\": \"...\", \"strengths\": [\"...\"], "
            "\"improvements\": [\"...\"], \"areas_to_improve\": [\"...\"], "
            "\"per_question_feedback\": [{\"question_number\": 1, \"question\": \"...\", \"feedback\": \"...\", \"score\": 0}]}."
        )
        return self._complete_json(prompt, ComprehensiveFeedback, temperature=0.3)

    def _complete_json(self, prompt: str, model: Type[FeedbackModel], temperature: float) -> FeedbackModel:
        try:
            response = self.client.chat.completions.create(
                model=settings.openai_model,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": "You return valid JSON only."},
                    {"role": "user", "content": prompt},
                ],
            )
        except OpenAIError as exc:
            logger.error("Feedback request failed: %s", exc)
            raise ProviderError("Feedback service is unavailable", details=str(exc)) from exc

        raw = response.choices[0].message.content or ""
        cleaned = self._strip_json_fences(raw)
        if not cleaned:
            raise ProviderError("Feedback service returned an empty response")

        try:
            return model.model_validate(json.loads(cleaned))
        except (json.JSONDecodeError, SchemaValidationError) as exc:
            logger.error("Feedback service returned malformed %s: %s", model.__name__, exc)
            raise ProviderError("Feedback service returned malformed feedback", details=raw) from exc

    @staticmethod
    def _strip_json_fences(text: str) -> str:
        stripped = text.strip()
        if stripped.startswith("```"):
            lines = stripped.splitlines()
            if len(lines) >= 3 and lines[-1].strip() == "```":
                return "\n".join(lines[1:-1]).strip()
        return stripped
