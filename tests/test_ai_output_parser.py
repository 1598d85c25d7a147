"""
Tests for app/services/ai_output_parser.py

Extraction, answer reconciliation, validation and cover letter cleanup.
"""

import json
import logging

import pytest

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
from app.services.ai_output_parser import (
    clean_cover_letter,
    extract_question_candidates,
    find_json_array,
    match_answer_to_option,
    normalize_question,
    normalize_questions,
    reconcile_cover_letter,
    reconcile_questions,
    strip_code_fences,
    validate_cover_letter,
    validate_question,
    validate_questions,
)
from tests.conftest import fenced, make_cover_letter, make_question, make_questions


# =============================================================================
# EXTRACTION
# =============================================================================


class TestExtraction:

    def test_strip_code_fences(self):
        assert strip_code_fences("```json\n[1]\n```") == "[1]"
        assert strip_code_fences("```JSON\n[1]\n```") == "[1]"
        assert strip_code_fences("```\n[1]\n```") == "[1]"

    def test_recovers_fenced_array_with_prose(self):
        payload = make_questions(3)
        assert extract_question_candidates(fenced(payload)) == payload

    def test_recovers_bare_array(self):
        payload = make_questions(2)
        assert extract_question_candidates(json.dumps(payload)) == payload

    def test_recovers_array_after_bracketed_prose(self):
        payload = make_questions(2)
        raw = f"Here they are [as requested]:\n{json.dumps(payload)}\nThanks [1]."
        assert extract_question_candidates(raw) == payload

    def test_find_json_array_returns_none_for_garbage(self):
        assert find_json_array("I cannot help with that.") is None

    def test_single_object_is_rejected(self):
        with pytest.raises(MalformedAIResponse):
            extract_question_candidates('```json\n{"question": "Q?"}\n```')

    def test_broken_json_is_rejected_and_logged(self, caplog):
        raw = '```json\n[{"question": "Q?", "options": [}]\n```'
        with caplog.at_level(logging.ERROR, logger="app.services.ai_output_parser"):
            with pytest.raises(MalformedAIResponse) as exc_info:
                extract_question_candidates(raw)

        assert exc_info.value.status_code == 400
        assert raw in caplog.text

    def test_deeply_nested_json_is_rejected(self):
        raw = '[{"a": ' + "[" * 100000 + "]" * 100000 + "}]"
        assert find_json_array(raw) is None
        with pytest.raises(MalformedAIResponse):
            extract_question_candidates(raw)


# =============================================================================
# NORMALIZATION
# =============================================================================


class TestNormalization:

    def test_exact_match_wins_over_case_insensitive(self):
        assert match_answer_to_option(["PARIS", "paris"], "paris") == "paris"

    def test_case_insensitive_takes_first_in_order(self):
        # "Paris" is the first case-insensitive hit; "paris-ish" only matches by substring
        assert match_answer_to_option(["Paris", "paris-ish", "PARIS"], "paris") == "Paris"

    def test_case_insensitive_wins_over_substring(self):
        assert match_answer_to_option(["paris-ish", "PARIS"], "paris") == "PARIS"

    def test_letter_answer_maps_to_prefixed_option(self):
        record = {"question": "Capital of France?", "options": ["A) Paris", "B) London"], "answer": "A"}
        assert normalize_question(record)["answer"] == "A) Paris"

    def test_prefixed_answer_maps_to_plain_option(self):
        assert match_answer_to_option(["London", "Paris", "Rome", "Berlin"], "b. paris") == "Paris"

    def test_answer_replaced_with_exact_option_text(self):
        record = {
            "question": "  Which hook manages state?  ",
            "options": [" useEffect ", "useState", "useMemo", "useRef"],
            "answer": "USESTATE ",
        }
        assert normalize_question(record) == {
            "question": "Which hook manages state?",
            "options": ["useEffect", "useState", "useMemo", "useRef"],
            "answer": "useState",
        }

    def test_numeric_options_and_answer_are_coerced(self):
        record = {"question": "2 + 2?", "options": [1, 2, 3, 4], "answer": 4}
        normalized = normalize_question(record)
        assert normalized["options"] == ["1", "2", "3", "4"]
        assert normalized["answer"] == "4"

    def test_empty_answer_falls_to_first_option(self):
        # An empty bare answer is contained in every option
        assert match_answer_to_option(["A) Paris", "B) London"], "") == "A) Paris"
        record = {"question": "Q?", "options": ["a", "b", "c", "d"]}
        assert normalize_question(record)["answer"] == "a"

    def test_bare_letter_with_punctuation_falls_to_first_option(self):
        record = {"question": "Capital of France?", "options": ["A) Paris", "B) London"], "answer": "A)"}
        assert normalize_question(record)["answer"] == "A) Paris"

    def test_missing_answer_does_not_reject_batch(self):
        records = make_questions(10)
        del records[3]["answer"]
        questions = reconcile_questions(fenced(records))
        assert len(questions) == 10
        assert questions[3].answer == "Option 4-A"

    def test_unmatched_answer_kept_and_warned(self, caplog):
        record = {"question": "Q?", "options": ["a", "b", "c", "d"], "answer": "zebra"}
        with caplog.at_level(logging.WARNING, logger="app.services.ai_output_parser"):
            assert normalize_question(record, index=2)["answer"] == "zebra"
        assert "Question 3" in caplog.text

    def test_records_without_option_list_pass_through(self):
        records = [{"question": "Q?", "options": "a, b"}, "not a record"]
        assert normalize_questions(records) == records


# =============================================================================
# VALIDATION
# =============================================================================


class TestValidation:

    def test_valid_record_builds_immutable_question(self):
        question = validate_question(make_question(1), 0)
        assert isinstance(question, MCQQuestion)
        assert question.answer in question.options
        with pytest.raises(Exception):
            question.answer = "something else"

    @pytest.mark.parametrize("options", [["a", "b", "c"], ["a", "b", "c", "d", "e"]])
    def test_wrong_option_count_rejected(self, options):
        record = {"question": "Q?", "options": options, "answer": "a"}
        with pytest.raises(InvalidRecord, match="Question 1: Must have exactly 4 options"):
            validate_question(record, 0)

    def test_blank_question_rejected(self):
        record = dict(make_question(1), question="   ")
        with pytest.raises(InvalidRecord, match="question text"):
            validate_question(record, 0)

    def test_blank_option_rejected(self):
        record = dict(make_question(1), options=["a", " ", "c", "d"], answer="a")
        with pytest.raises(InvalidRecord, match="non-empty strings"):
            validate_question(record, 0)

    def test_duplicate_options_rejected(self):
        record = dict(make_question(1), options=["a", "b", "a", "d"], answer="a")
        with pytest.raises(InvalidRecord, match="unique"):
            validate_question(record, 0)

    def test_missing_answer_rejected(self):
        record = dict(make_question(1), answer="")
        with pytest.raises(InvalidRecord, match="answer"):
            validate_question(record, 0)

    def test_non_mapping_rejected(self):
        with pytest.raises(InvalidRecord, match="Question 4"):
            validate_question("just text", 3)

    def test_answer_not_in_options(self):
        record = dict(make_question(1), answer="Nope")
        with pytest.raises(AnswerMismatch, match="Question 2: Answer must be one of the options"):
            validate_question(record, 1)

    def test_empty_batch(self):
        with pytest.raises(EmptyResult):
            validate_questions([])

    def test_four_valid_records_below_floor(self):
        with pytest.raises(InsufficientResults) as exc_info:
            validate_questions(make_questions(4))

        assert exc_info.value.expected == 10
        assert exc_info.value.actual == 4
        assert "Expected 10, got 4" in exc_info.value.message

    def test_five_valid_records_accepted(self):
        assert len(validate_questions(make_questions(5))) == 5

    def test_first_failure_aborts_batch(self):
        records = make_questions(10)
        records[1]["answer"] = "wrong"
        records[2]["options"] = ["only", "three", "options"]

        with pytest.raises(AnswerMismatch, match="Question 2"):
            validate_questions(records)

    def test_one_bad_record_rejects_whole_batch(self):
        records = make_questions(10)
        records[9]["options"] = records[9]["options"][:3]
        with pytest.raises(InvalidRecord, match="Question 10"):
            reconcile_questions(fenced(records))


class TestReconcileQuestions:

    def test_full_batch_from_fenced_output(self):
        questions = reconcile_questions(fenced(make_questions(10)))
        assert len(questions) == 10
        assert all(q.answer in q.options for q in questions)

    def test_letter_answers_reconciled_end_to_end(self):
        records = []
        for n in range(1, 6):
            records.append({
                "question": f"Q{n}?",
                "options": [f"A) one {n}", f"B) two {n}", f"C) three {n}", f"D) four {n}"],
                "answer": "C",
            })
        questions = reconcile_questions(fenced(records))
        assert [q.answer for q in questions] == [f"C) three {n}" for n in range(1, 6)]


# =============================================================================
# COVER LETTER
# =============================================================================


class TestCoverLetter:

    def test_placeholders_removed_and_length_bounded(self):
        letter = reconcile_cover_letter(make_cover_letter(300))

        assert "[Your Name]" not in letter
        assert "[Date]" not in letter
        assert 100 <= len(letter) <= 5000
        assert letter.startswith("Dear Hiring Manager,")
        assert letter.endswith("Sincerely,")

    def test_markdown_stripped(self):
        raw = "```\n# Cover Letter\n\nDear team at **Acme**,\n\nI am **very** keen.\n```"
        assert clean_cover_letter(raw) == "Cover Letter\n\nDear team at Acme,\n\nI am very keen."

    def test_underscored_identifiers_survive(self):
        raw = "I refactored __init__ and __main__ modules across the codebase."
        assert clean_cover_letter(raw) == raw

    def test_links_and_lowercase_brackets_survive(self):
        raw = "See my work at [my portfolio](https://x.dev) and my C++ [advanced] skills."
        assert clean_cover_letter(raw) == raw

    def test_title_case_link_text_survives(self):
        raw = "Read [My Blog](https://x.dev) for more."
        assert clean_cover_letter(raw) == raw

    def test_dangling_punctuation_from_placeholders(self):
        raw = "[City], [State] [Zip]\n\nDear [Hiring Manager Name],\n\nHello."
        assert clean_cover_letter(raw) == "Dear,\n\nHello."

    def test_too_short(self):
        with pytest.raises(ContentTooShort):
            validate_cover_letter("   Dear team, hire me.   ")

    def test_placeholder_only_output_is_too_short(self):
        with pytest.raises(ContentTooShort):
            reconcile_cover_letter("[Your Name]\n[Date]\n[Company Address]")

    def test_too_long(self):
        with pytest.raises(ContentTooLong):
            validate_cover_letter("x" * 5001)

    def test_bounds_are_inclusive(self):
        assert len(validate_cover_letter("x" * 100)) == 100
        assert len(validate_cover_letter("x" * 5000)) == 5000

    def test_residue_is_only_a_warning(self, caplog):
        text = "Dear {{hiring_manager}}, " + "I would love to join your team. " * 5
        with caplog.at_level(logging.WARNING, logger="app.services.ai_output_parser"):
            assert validate_cover_letter(text) == text.strip()
        assert "placeholder" in caplog.text
