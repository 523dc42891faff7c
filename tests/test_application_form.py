"""Tests for respondent answer checks."""

from __future__ import annotations

from datetime import date

from lib.application_form import answer_key, collect_missing_required_answers, deadline_passed

APPLICATION = {
    "questions": [
        {"id": "q1", "question": "Name", "type": "SHORT_ANSWER", "required": True},
        {"id": "q2", "question": "Level", "type": "MULTIPLE_CHOICE", "required": True, "answer_choices": ["Beginner", "Expert"]},
        {"id": "q3", "question": "Days", "type": "MULTIPLE_SELECT", "required": True, "answer_choices": ["Mon", "Tue"]},
        {"id": "q4", "question": "Anything else?", "type": "PARAGRAPH", "required": False},
    ]
}


def test_all_required_answers_present() -> None:
    answers = {"q1": "Ada", "q2": "Expert", "q3": ["Mon"]}

    assert collect_missing_required_answers(APPLICATION, answers) == []


def test_missing_answers_are_reported_in_order() -> None:
    answers = {"q1": "   ", "q2": "Grandmaster", "q3": []}

    assert collect_missing_required_answers(APPLICATION, answers) == ["Name", "Level", "Days"]


def test_answer_key_falls_back_to_position() -> None:
    assert answer_key({"id": "abc"}, 3) == "abc"
    assert answer_key({"id": None}, 3) == "question_3"


def test_deadline_closes_the_day_after() -> None:
    application = {"deadline": "2030-01-01"}

    assert not deadline_passed(application, today=date(2029, 12, 31))
    assert not deadline_passed(application, today=date(2030, 1, 1))
    assert deadline_passed(application, today=date(2030, 1, 2))
    assert not deadline_passed({"deadline": None}, today=date(2030, 1, 2))
    assert not deadline_passed({"deadline": "soon"}, today=date(2030, 1, 2))
