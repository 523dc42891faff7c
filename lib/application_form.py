"""Render an application for respondents and check their answers."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Mapping, Optional

import streamlit as st

from lib.question_types import (
    MULTIPLE_CHOICE,
    MULTIPLE_SELECT,
    PARAGRAPH,
    SHORT_ANSWER,
    UNSELECTED_LABEL,
)


def answer_key(question: Mapping[str, Any], index: int) -> str:
    """Return the key an answer to ``question`` is stored under."""

    identifier = question.get("id")
    return str(identifier) if identifier else f"question_{index}"


def _choices(question: Mapping[str, Any]) -> List[str]:
    return [choice for choice in question.get("answer_choices") or [] if isinstance(choice, str) and choice]


def _has_answer(question: Mapping[str, Any], value: Any) -> bool:
    """Check whether ``value`` is a usable answer for ``question``."""

    question_type = question.get("type")
    if question_type == MULTIPLE_CHOICE:
        return isinstance(value, str) and value in _choices(question)
    if question_type == MULTIPLE_SELECT:
        return isinstance(value, list) and bool(value)
    if question_type in {SHORT_ANSWER, PARAGRAPH}:
        return isinstance(value, str) and value.strip() != ""
    return value is not None


def deadline_passed(application: Mapping[str, Any], today: Optional[date] = None) -> bool:
    """Return ``True`` when the application's deadline is before ``today``.

    The deadline day itself still accepts answers. Applications without a
    readable deadline never close.
    """

    deadline = application.get("deadline")
    if not isinstance(deadline, str) or not deadline:
        return False
    try:
        closes = date.fromisoformat(deadline[:10])
    except ValueError:
        return False
    return closes < (today or date.today())


def collect_missing_required_answers(
    application: Mapping[str, Any], answers: Mapping[str, Any]
) -> List[str]:
    """Return the prompts of required questions that have no answer."""

    missing: List[str] = []
    for index, question in enumerate(application.get("questions") or []):
        if not isinstance(question, Mapping) or not question.get("required"):
            continue
        if not _has_answer(question, answers.get(answer_key(question, index))):
            missing.append(question.get("question") or f"Question {index + 1}")
    return missing


def render_application_form(
    application: Mapping[str, Any],
    answers: Dict[str, Any],
    *,
    readonly: bool = False,
    key_prefix: str = "apply",
) -> Dict[str, Any]:
    """Render every question of ``application`` and record input into ``answers``."""

    name = application.get("name") or "Untitled application"
    st.markdown(f"### {name}")
    description = application.get("description")
    if description:
        st.write(description)

    questions = application.get("questions") or []
    if not questions:
        st.info("This application has no questions yet.")
        return answers

    total = len(questions)
    for index, question in enumerate(questions):
        _render_question(question, answers, index=index, total=total, readonly=readonly, key_prefix=key_prefix)
    return answers


def _render_question(
    question: Mapping[str, Any],
    answers: Dict[str, Any],
    *,
    index: int,
    total: int,
    readonly: bool,
    key_prefix: str,
) -> None:
    key = answer_key(question, index)
    widget_key = f"{key_prefix}_{key}"
    question_type = question.get("type")
    prompt = question.get("question") or f"Question {index + 1}"
    required = bool(question.get("required"))
    current: Optional[Any] = answers.get(key)

    st.caption(f"Question {index + 1} of {total}")
    label = f"{prompt} *" if required else prompt

    if question_type == SHORT_ANSWER:
        answers[key] = st.text_input(label, value=current or "", key=widget_key, disabled=readonly)
    elif question_type == PARAGRAPH:
        answers[key] = st.text_area(label, value=current or "", key=widget_key, disabled=readonly)
    elif question_type == MULTIPLE_CHOICE:
        options = _choices(question)
        if not options:
            st.warning(f"'{prompt}' has no answer choices configured.")
            return
        choices = [UNSELECTED_LABEL, *options]
        selection = st.radio(
            label,
            choices,
            index=choices.index(current) if current in options else 0,
            key=widget_key,
            disabled=readonly,
        )
        if selection == UNSELECTED_LABEL:
            answers.pop(key, None)
        else:
            answers[key] = selection
    elif question_type == MULTIPLE_SELECT:
        options = _choices(question)
        if not options:
            st.warning(f"'{prompt}' has no answer choices configured.")
            return
        default = [value for value in current or [] if value in options]
        answers[key] = st.multiselect(label, options=options, default=default, key=widget_key, disabled=readonly)
    else:
        st.warning(f"'{prompt}' does not have an answer type yet.")


__all__ = ["answer_key", "collect_missing_required_answers", "deadline_passed", "render_application_form"]
