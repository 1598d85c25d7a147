"""
AI Output Parsing - turns raw model text into validated data.

QUESTION PIPELINE:
1. Extract   - strip markdown fences, find the JSON array, decode it
2. Normalize - reconcile each free-text answer with one of its options
3. Validate  - enforce the MCQ shape, fail fast on the first bad record

COVER LETTER PIPELINE:
1. Clean     - strip fences, markdown markers and [Placeholder] tokens
2. Validate  - enforce length bounds

Everything here is pure: no I/O apart from logging diagnostics.
"""

import json
import logging
import re
from typing import Any, Callable, List, Optional, Sequence, Tuple

from app.core.config import get_settings
from app.core.errors import (
    AnswerMismatch,
    ContentTooLong,
    ContentTooShort,
    EmptyResult,
    InsufficientResults,
    InvalidRecord,
    MalformedAIResponse,
)
from app.schemas.schemas import MCQQuestion

logger = logging.getLogger(__name__)

# ```json, ```python, bare ``` - a tag only counts when whitespace follows it
CODE_FENCE_PATTERN = re.compile(r"```(?:[A-Za-z0-9_+-]+(?=\s))?\s*")
JSON_ARRAY_PATTERN = re.compile(r"\[\s*\{.*\}\s*\]", re.DOTALL)
OPTION_PREFIX_PATTERN = re.compile(r"^[A-D][).\-:\s]+", re.IGNORECASE)

# Template tokens: Title Case words in brackets, not a markdown link
PLACEHOLDER_PATTERN = re.compile(r"\[[A-Z][\w'&/.,-]*(?: [A-Z0-9][\w'&/.,-]*)*\](?!\()")
PLACEHOLDER_RESIDUE_PATTERN = re.compile(r"\[[^\]\n]+\]|\{\{[^}]*\}\}|<[^<>\n]+>")
MARKDOWN_HEADING_PATTERN = re.compile(r"^#{1,6}\s*", re.MULTILINE)
MARKDOWN_BOLD_PATTERN = re.compile(r"\*\*(.+?)\*\*", re.DOTALL)


# ============================================================
# EXTRACTION
# ============================================================

def strip_code_fences(text: str) -> str:
    """Remove every fenced-code marker and trim."""
    return CODE_FENCE_PATTERN.sub("", text).strip()


def find_json_array(text: str) -> Optional[Any]:
    """
    Locate and decode the array-of-objects literal embedded in model text.

    Returns the decoded value, or None when nothing decodes. The value is
    not guaranteed to be a list if the text held some other JSON document.
    """
    clean_text = strip_code_fences(text)

    match = JSON_ARRAY_PATTERN.search(clean_text)
    if match:
        clean_text = match.group(0)

    try:
        return json.loads(clean_text)
    except (ValueError, RecursionError):
        return None


def extract_question_candidates(raw_output: str) -> List[Any]:
    """
    Extract the candidate question records from raw model output.

    Raises:
        MalformedAIResponse: no JSON array could be recovered
    """
    parsed = find_json_array(raw_output)

    if not isinstance(parsed, list):
        logger.error("Could not extract a JSON array from AI response. Raw output:\n%s", raw_output)
        raise MalformedAIResponse()

    return parsed


# ============================================================
# NORMALIZATION
# ============================================================

def _strip_option_prefix(text: str) -> str:
    """'A) Paris' -> 'Paris', 'b. London' -> 'London'"""
    return OPTION_PREFIX_PATTERN.sub("", text).strip()


def _exact_match(option: str, answer: str) -> bool:
    return option == answer


def _case_insensitive_match(option: str, answer: str) -> bool:
    return option.lower() == answer.lower()


def _prefix_or_substring_match(option: str, answer: str) -> bool:
    bare_answer = _strip_option_prefix(answer).lower()
    if _strip_option_prefix(option).lower() == bare_answer:
        return True
    return bare_answer in option.lower()


# Tried in order, first stage with a hit wins
ANSWER_MATCHERS: Tuple[Callable[[str, str], bool], ...] = (
    _exact_match,
    _case_insensitive_match,
    _prefix_or_substring_match,
)


def _clean_option(option: Any) -> Any:
    if isinstance(option, str):
        return option.strip()
    if isinstance(option, (int, float)) and not isinstance(option, bool):
        return str(option).strip()
    return option


def _clean_answer(answer: Any) -> str:
    if answer is None:
        return ""
    return str(answer).strip()


def match_answer_to_option(options: Sequence[Any], answer: str) -> Optional[str]:
    """
    Find the option the answer refers to.

    Stages run exact -> case-insensitive -> prefix/substring, each scanning
    options in their original order. Non-string options never match.
    """
    text_options = [opt for opt in options if isinstance(opt, str)]
    for matcher in ANSWER_MATCHERS:
        for option in text_options:
            if matcher(option, answer):
                return option
    return None


def normalize_question(record: Any, index: int = 0) -> Any:
    """
    Reconcile one candidate record.

    Records that are not mappings with a list of options are returned
    unchanged so that validation reports them.
    """
    if not isinstance(record, dict) or not isinstance(record.get("options"), list):
        return record

    options = [_clean_option(opt) for opt in record["options"]]
    answer = _clean_answer(record.get("answer"))
    question = record.get("question")
    if isinstance(question, str):
        question = question.strip()

    matched = match_answer_to_option(options, answer)
    if matched is None:
        logger.warning(
            "Question %d: could not normalize answer %r to match options %r",
            index + 1, answer, options,
        )
        matched = answer

    return {"question": question, "options": options, "answer": matched}


def normalize_questions(records: Sequence[Any]) -> List[Any]:
    """Normalize every candidate record, keeping order."""
    return [normalize_question(record, i) for i, record in enumerate(records)]


# ============================================================
# VALIDATION
# ============================================================

def _is_non_empty_text(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def validate_question(record: Any, index: int) -> MCQQuestion:
    """
    Validate one normalized record and build the immutable question.
    `index` is zero-based; messages use the 1-based position.
    """
    position = index + 1

    if not isinstance(record, dict):
        raise InvalidRecord(f"Question {position}: Invalid question format")

    if not _is_non_empty_text(record.get("question")):
        raise InvalidRecord(f"Question {position}: Invalid or missing question text")

    options = record.get("options")
    if not isinstance(options, list) or len(options) != 4:
        raise InvalidRecord(f"Question {position}: Must have exactly 4 options")

    if not all(_is_non_empty_text(opt) for opt in options):
        raise InvalidRecord(f"Question {position}: All options must be non-empty strings")

    if len({opt.strip() for opt in options}) != len(options):
        raise InvalidRecord(f"Question {position}: Options must be unique")

    answer = record.get("answer")
    if not _is_non_empty_text(answer):
        raise InvalidRecord(f"Question {position}: Invalid or missing answer")

    if answer not in options:
        logger.error(
            "Question %d validation failed. Question: %r Options: %r Answer: %r",
            position, record.get("question"), options, answer,
        )
        raise AnswerMismatch(
            f"Question {position}: Answer must be one of the options. "
            "This might be an AI formatting issue. Please try again."
        )

    return MCQQuestion(
        question=record["question"].strip(),
        options=tuple(opt.strip() for opt in options),
        answer=answer.strip(),
    )


def validate_questions(
    records: Sequence[Any],
    expected: Optional[int] = None,
    minimum: Optional[int] = None,
) -> List[MCQQuestion]:
    """
    Validate a normalized batch. The first failure aborts the whole batch.

    Raises:
        EmptyResult: nothing to validate
        InvalidRecord / AnswerMismatch: a record breaks the MCQ shape
        InsufficientResults: fewer than `minimum` questions
    """
    settings = get_settings()
    expected = settings.questions_requested if expected is None else expected
    minimum = settings.questions_minimum if minimum is None else minimum

    if len(records) == 0:
        raise EmptyResult()

    questions = [validate_question(record, i) for i, record in enumerate(records)]

    if len(questions) < minimum:
        raise InsufficientResults(expected=expected, actual=len(questions))

    logger.info("Successfully validated %d questions", len(questions))
    return questions


def reconcile_questions(raw_output: str) -> List[MCQQuestion]:
    """Run extraction, normalization and validation over raw model output."""
    candidates = extract_question_candidates(raw_output)
    logger.info("Parsed %d questions, normalizing...", len(candidates))
    return validate_questions(normalize_questions(candidates))


# ============================================================
# COVER LETTER
# ============================================================

def clean_cover_letter(raw_output: str) -> str:
    """
    Strip markdown and template placeholders from a generated cover letter.

    "[Your Name]", "[Date]", "[Company Address]" and similar bracketed
    tokens are dropped; lines left holding only punctuation go with them.
    """
    text = strip_code_fences(raw_output)
    text = MARKDOWN_HEADING_PATTERN.sub("", text)
    text = MARKDOWN_BOLD_PATTERN.sub(r"\1", text)
    text = PLACEHOLDER_PATTERN.sub("", text)

    lines = []
    for line in text.splitlines():
        line = re.sub(r"[ \t]+([,.;:!?])", r"\1", line)
        line = re.sub(r"[ \t]{2,}", " ", line).strip()
        if line and not re.search(r"\w", line):
            line = ""
        lines.append(line)

    text = "\n".join(lines)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def validate_cover_letter(text: str, min_length: Optional[int] = None, max_length: Optional[int] = None) -> str:
    """
    Enforce the cover letter length bounds.

    Raises:
        ContentTooShort: shorter than `min_length` after trimming
        ContentTooLong: longer than `max_length`
    """
    settings = get_settings()
    min_length = settings.cover_letter_min_length if min_length is None else min_length
    max_length = settings.cover_letter_max_length if max_length is None else max_length

    text = (text or "").strip()

    if len(text) < min_length:
        raise ContentTooShort()

    if len(text) > max_length:
        raise ContentTooLong()

    residue = PLACEHOLDER_RESIDUE_PATTERN.findall(text)
    if residue:
        logger.warning("Cover letter still contains placeholder-like text: %r", residue)

    return text


def reconcile_cover_letter(raw_output: str) -> str:
    """Clean and validate a raw cover letter."""
    return validate_cover_letter(clean_cover_letter(raw_output))
