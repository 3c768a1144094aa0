"""
AI collaborators for the interview lifecycle.

InterviewAssistant wraps one ChatClient and provides:
- generate_questions: the question set for a new interview
- evaluate_answer: a 0-10 score plus feedback for one answer
- summarize: strengths / improvement areas / recommendation for a finished interview

The model only grades and writes prose. All score rollups happen in
app.services.scoring.
"""

import json
import logging
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError
from app.core.config import Settings
from app.core.exceptions import UpstreamProviderError
from app.schemas.interview import InterviewSummary
from app.services.llm_clients import ChatClient, build_chat_client, parse_json_block
from app.services.scoring import AnsweredQuestion

logger = logging.getLogger(__name__)


class QuestionSetEnvelope(BaseModel):
    questions: List[str]


class AnswerEvaluation(BaseModel):
    score: float = Field(..., ge=0, le=10)
    feedback: str = ""


TECHNICAL_TEMPLATES = [
    "Walk me through a recent project where you worked as a {role}. What was your specific contribution?",
    "What are the core tools and technologies you rely on as a {role}, and why those?",
    "Describe the hardest technical problem you have solved as a {role}. How did you approach it?",
    "How do you make sure your work as a {role} is reliable and well tested?",
    "How do you keep your skills as a {role} up to date with changes in the field?",
    "Explain a design decision you made as a {role} that you would do differently today.",
]

BEHAVIORAL_TEMPLATES = [
    "Tell me about a time you disagreed with a teammate. How did you resolve it?",
    "Describe a situation where you had to deliver under a tight deadline. What did you prioritize?",
]


def default_questions(job_role: str, count: int = 5, technical_count: int = 4) -> List[str]:
    """
    Built-in role-templated question set, used when the provider cannot
    generate one. The first `technical_count` are technical, the rest behavioral.
    """
    role = (job_role or "").strip() or "candidate"
    technical_count = min(technical_count, count)
    technical = [t.format(role=role) for t in TECHNICAL_TEMPLATES][:technical_count]
    behavioral = BEHAVIORAL_TEMPLATES[:count - len(technical)]
    return technical + behavioral


class InterviewAssistant:
    """Question generation, answer scoring and summaries over one provider."""

    def __init__(self, client: Optional[ChatClient], question_count: int = 5, technical_count: int = 4):
        self.client = client
        self.question_count = question_count
        self.technical_count = technical_count

    @property
    def provider_name(self) -> str:
        return self.client.provider_name if self.client else "none"

    def _ask(self, system_prompt: str, user_prompt: str) -> dict:
        if self.client is None:
            raise UpstreamProviderError("No AI provider is configured")
        return parse_json_block(self.client.complete(system_prompt, user_prompt, json_mode=True))

    def generate_questions(self, job_role: str, resume_text: str = "", skillset: Optional[List[str]] = None) -> List[str]:
        """
        Raises:
            UpstreamProviderError: Provider failure or an unusable question set
        """
        behavioral_count = self.question_count - self.technical_count
        skills_line = ", ".join(skillset) if skillset else "Not specified"
        prompt = f"""Generate exactly {self.question_count} interview questions for a {job_role} position.

Order matters:
- The first {self.technical_count} questions must be technical and specific to the role and the candidate's background.
- The last {behavioral_count} question(s) must be behavioral.

Key skills to probe: {skills_line}

CANDIDATE RESUME:
{resume_text[:6000] if resume_text else "Not provided"}

Output strictly valid JSON:
{{
    "questions": ["question 1", "question 2"]
}}
"""
        data = self._ask("You are an experienced technical interviewer.", prompt)
        try:
            envelope = QuestionSetEnvelope.model_validate(data)
        except PydanticValidationError as e:
            raise UpstreamProviderError(f"Invalid question set from {self.provider_name}: {e}")

        questions = [q.strip() for q in envelope.questions if q and q.strip()]
        if len(questions) < self.question_count:
            raise UpstreamProviderError(
                f"{self.provider_name} returned {len(questions)} questions, expected {self.question_count}"
            )
        return questions[:self.question_count]

    def evaluate_answer(self, question: str, answer: str, job_role: str) -> AnswerEvaluation:
        """
        Score one answer on a 0-10 scale.

        Raises:
            UpstreamProviderError: Provider failure or an unusable evaluation
        """
        prompt = f"""Evaluate this interview answer for a {job_role} position.

QUESTION:
{question}

ANSWER:
{answer}

GRADING SCALE:
- 0-2: No answer, off-topic or incorrect.
- 3-5: Partially correct, vague or missing key points.
- 6-8: Correct and clear with relevant examples.
- 9-10: Exceptional depth, precision and insight.

Output strictly valid JSON:
{{
    "score": (number 0-10),
    "feedback": "2-3 sentences of constructive feedback"
}}
"""
        data = self._ask("You are a fair, rigorous interview evaluator.", prompt)
        try:
            return AnswerEvaluation.model_validate(data)
        except PydanticValidationError as e:
            raise UpstreamProviderError(f"Invalid answer evaluation from {self.provider_name}: {e}")

    def summarize(self, job_role: str, answered: List[AnsweredQuestion]) -> InterviewSummary:
        """
        Raises:
            UpstreamProviderError: Provider failure or an unusable summary
        """
        transcript = [
            {"question": a.question, "answer": a.answer, "score": a.score, "feedback": a.feedback}
            for a in answered
        ]
        prompt = f"""Summarize this completed interview for a {job_role} position.

INTERVIEW TRANSCRIPT (scores are 0-10):
{json.dumps(transcript, indent=2)}

Output strictly valid JSON:
{{
    "strengths": ["specific strength 1", "specific strength 2"],
    "improvementAreas": ["specific gap 1", "specific gap 2"],
    "recommendation": "One sentence hiring recommendation"
}}
"""
        data = self._ask("You are an expert hiring manager writing an interview debrief.", prompt)
        try:
            return InterviewSummary.model_validate(data)
        except PydanticValidationError as e:
            raise UpstreamProviderError(f"Invalid interview summary from {self.provider_name}: {e}")


def build_interview_assistant(settings: Settings, provider: Optional[str] = None) -> InterviewAssistant:
    """Assistant for `provider`, or the default provider from settings."""
    provider = provider or settings.DEFAULT_AI_PROVIDER
    client = build_chat_client(provider, settings)
    if client is None:
        logger.warning(f"No API key configured for {provider}, interview AI calls will fail")
    return InterviewAssistant(
        client,
        question_count=settings.INTERVIEW_QUESTION_COUNT,
        technical_count=settings.TECHNICAL_QUESTION_COUNT,
    )
