"""Tests for application draft validation."""

from __future__ import annotations

import pytest

from lib.application_validation import (
    collect_validation_errors,
    ensure_application_valid,
    is_application_valid,
)
from lib.errors import ValidationError


def _question(**overrides):
    question = {
        "question": "Why join?",
        "type": "SHORT_ANSWER",
        "required": True,
        "answer_choices": [],
    }
    question.update(overrides)
    return question


def test_valid_application_passes() -> None:
    assert is_application_valid("Club X", "desc", [_question()])


def test_empty_question_list_is_valid() -> None:
    assert is_application_valid("Club X", "desc", [])


@pytest.mark.parametrize(
    "name, description",
    [("", "desc"), ("   ", "desc"), ("Club X", ""), ("Club X", "\n\t"), (None, "desc")],
)
def test_blank_name_or_description_fails(name, description) -> None:
    assert not is_application_valid(name, description, [_question()])
    assert not is_application_valid(name, description, [])


def test_missing_required_flag_fails() -> None:
    question = _question()
    del question["required"]

    assert not is_application_valid("Club X", "desc", [question])
    assert not is_application_valid("Club X", "desc", [_question(required=None)])


def test_required_false_counts_as_set() -> None:
    assert is_application_valid("Club X", "desc", [_question(required=False)])


def test_empty_prompt_fails() -> None:
    assert not is_application_valid("Club X", "desc", [_question(question="")])


def test_missing_type_fails() -> None:
    assert not is_application_valid("Club X", "desc", [_question(type=None)])
    assert not is_application_valid("Club X", "desc", [_question(type="ESSAY")])


def test_empty_answer_choice_fails_even_for_free_text() -> None:
    question = _question(answer_choices=["Yes", "", "No"])

    assert not is_application_valid("Club X", "desc", [question])


def test_choice_question_needs_choices() -> None:
    assert not is_application_valid("Club X", "desc", [_question(type="MULTIPLE_CHOICE")])
    assert is_application_valid(
        "Club X", "desc", [_question(type="MULTIPLE_SELECT", answer_choices=["Chess", "Go"])]
    )


def test_one_bad_question_fails_the_whole_application() -> None:
    questions = [_question(), _question(), _question(question="")]

    assert not is_application_valid("Club X", "desc", questions)


def test_collect_validation_errors_reports_each_rule() -> None:
    errors = collect_validation_errors("", "desc", [_question(), _question(type=None, required=None)])

    assert errors == [
        "Enter an application name.",
        "Question 2 needs an answer type.",
        "Question 2 must be marked as required or optional.",
    ]


def test_ensure_application_valid_raises_with_messages() -> None:
    with pytest.raises(ValidationError) as excinfo:
        ensure_application_valid("Club X", "", [])

    assert excinfo.value.errors == ["Enter an application description."]
