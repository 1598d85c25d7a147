"""
AI Generation Service - interview questions and cover letters.

PURPOSE:
AI is used ONLY as a text generator:
1. Interview MCQs for a tech stack (text -> JSON array -> validated questions)
2. Cover letters for a candidate/job pair (text -> cleaned, bounded letter)

Each request makes ONE backend call and re-parses its own response.
Nothing is cached or stored.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from app.core.config import get_settings
from app.core.errors import InvalidInput
from app.schemas.schemas import JobDescriptionDetails, MCQQuestion, UserDetails
from app.services.ai_output_parser import reconcile_cover_letter, reconcile_questions
from app.services.llm_client import LLMClient, get_llm_client

logger = logging.getLogger(__name__)


# ============================================================
# PROMPTS
# ============================================================

QUESTION_PROMPT_TEMPLATE = """You are an expert technical interviewer. Generate exactly {count} multiple choice questions for the following technologies: {tech_stack}.

Rules:
1. Each question must have exactly 4 options
2. The "answer" field must be the EXACT TEXT of one of the options (not A/B/C/D, but the full option text)
3. Questions should be beginner to intermediate level
4. Return ONLY valid JSON (no markdown, no explanations, no code blocks)

Example format:
[
  {{
    "question": "What is the primary purpose of React hooks?",
    "options": ["To manage state in functional components", "To create class components", "To style components", "To handle routing"],
    "answer": "To manage state in functional components"
  }},
  {{
    "question": "Which method is used to update state in React?",
    "options": ["setState()", "updateState()", "changeState()", "modifyState()"],
    "answer": "setState()"
  }}
]

Generate exactly {count} questions following this exact format. Return ONLY the JSON array."""

COVER_LETTER_PROMPT_TEMPLATE = """You are an expert career coach. Write a professional, personalized cover letter.

CANDIDATE:
{candidate}

JOB:
{job}

Rules:
1. Address the letter to the hiring team at {company_name}
2. Connect the candidate's skills and experience to the job requirements
3. Keep it between 250 and 400 words, in 3 to 5 paragraphs
4. Sign off with the candidate's name: {name}
5. Do NOT use placeholders such as [Your Name], [Date] or [Company Address]
6. Return ONLY the cover letter text (no markdown, no explanations)"""


def _join(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v).strip() for v in value if str(v).strip())
    return str(value).strip()


def _details_block(pairs: List[tuple]) -> str:
    """Render "- Label: value" lines, skipping empty values."""
    lines = []
    for label, value in pairs:
        if value is None:
            continue
        text = _join(value)
        if text:
            lines.append(f"- {label}: {text}")
    return "\n".join(lines)


def build_question_prompt(tech_stack: List[str], count: int) -> str:
    return QUESTION_PROMPT_TEMPLATE.format(
        count=count,
        tech_stack=", ".join(tech.strip() for tech in tech_stack),
    )


def build_cover_letter_prompt(user: UserDetails, job: JobDescriptionDetails) -> str:
    candidate = _details_block([
        ("Name", user.name),
        ("Email", user.email),
        ("Phone", user.phone),
        ("Experience", user.experience),
        ("Skills", user.skills),
        ("LinkedIn", user.linkedin_url),
        ("GitHub", user.github_url),
    ])
    job_block = _details_block([
        ("Title", job.title),
        ("Company", job.company_name),
        ("Location", job.location),
        ("Job type", job.job_type),
        ("Required skills", job.required_skills),
        ("Description", job.description),
    ])
    return COVER_LETTER_PROMPT_TEMPLATE.format(
        candidate=candidate,
        job=job_block,
        company_name=job.company_name,
        name=user.name,
    )


# ============================================================
# INTERVIEW QUESTION SERVICE
# ============================================================

def validate_tech_stack(tech_stack: Any) -> List[str]:
    """Reject anything but a non-empty list of non-empty strings."""
    if not isinstance(tech_stack, list) or len(tech_stack) == 0:
        raise InvalidInput("Tech stack must be a non-empty array")

    if any(not isinstance(tech, str) or tech.strip() == "" for tech in tech_stack):
        raise InvalidInput("All tech stack items must be non-empty strings")

    return tech_stack


class QuestionGenerationService:
    """
    Interview question workflow:
    1. Validate tech stack
    2. Build prompt
    3. One backend call (60s by default)
    4. Extract -> normalize -> validate
    """

    def __init__(self, ai_client: Optional[LLMClient] = None):
        self.ai_client: LLMClient = ai_client or get_llm_client()
        self.settings = get_settings()

    def generate(self, tech_stack: List[str]) -> List[MCQQuestion]:
        """
        Generate validated MCQs for the given technologies.

        Returns:
            At least `questions_minimum` questions, each with 4 options
            and an answer that is one of them.
        """
        tech_stack = validate_tech_stack(tech_stack)
        prompt = build_question_prompt(tech_stack, self.settings.questions_requested)

        logger.info("Generating interview questions for %s", ", ".join(tech_stack))
        raw_output = self.ai_client.generate(
            prompt, timeout=self.settings.question_timeout_seconds
        )

        return reconcile_questions(raw_output)


# ============================================================
# COVER LETTER SERVICE
# ============================================================

class CoverLetterGenerationService:
    """
    Cover letter workflow:
    1. Build prompt from candidate and job details
    2. One backend call (90s by default)
    3. Clean markdown/placeholders -> validate length
    """

    def __init__(self, ai_client: Optional[LLMClient] = None):
        self.ai_client: LLMClient = ai_client or get_llm_client()
        self.settings = get_settings()

    def generate(self, user_details: UserDetails, job_description: JobDescriptionDetails) -> dict:
        """
        Generate a cover letter.

        Returns:
            {"cover_letter": "...", "generated_at": datetime}
        """
        prompt = build_cover_letter_prompt(user_details, job_description)

        logger.info(
            "Generating cover letter for %s -> %s at %s",
            user_details.name, job_description.title, job_description.company_name,
        )
        raw_output = self.ai_client.generate(
            prompt, timeout=self.settings.cover_letter_timeout_seconds
        )

        return {
            "cover_letter": reconcile_cover_letter(raw_output),
            "generated_at": datetime.now(timezone.utc),
        }


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

def get_question_generator() -> QuestionGenerationService:
    """Get question generation service instance."""
    return QuestionGenerationService()


def get_cover_letter_generator() -> CoverLetterGenerationService:
    """Get cover letter generation service instance."""
    return CoverLetterGenerationService()
