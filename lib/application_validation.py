"""Validation rules an application draft must pass before it is saved or published."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

from lib.errors import ValidationError
from lib.question_types import QUESTION_TYPES, is_choice_type


def _is_blank(value: Optional[str]) -> bool:
    return not isinstance(value, str) or value.strip() == ""


def _question_errors(position: int, question: Mapping[str, Any]) -> List[str]:
    """Return the rule violations for a single question."""

    label = f"Question {position + 1}"
    errors: List[str] = []

    text = question.get("question")
    if not isinstance(text, str) or text == "":
        errors.append(f"{label} needs a prompt.")

    question_type = question.get("type")
    if question_type is None:
        errors.append(f"{label} needs an answer type.")
    elif question_type not in QUESTION_TYPES:
        errors.append(f"{label} has unknown answer type '{question_type}'.")

    if question.get("required") is None:
        errors.append(f"{label} must be marked as required or optional.")

    choices = question.get("answer_choices") or []
    # Empty choices are rejected for every kind, including ones that ignore choices.
    if any(choice == "" for choice in choices):
        errors.append(f"{label} has an empty answer choice.")
    if is_choice_type(question_type) and not choices:
        errors.append(f"{label} needs at least one answer choice.")

    return errors


def collect_validation_errors(
    name: Optional[str],
    description: Optional[str],
    questions: Sequence[Mapping[str, Any]],
) -> List[str]:
    """Return a message for every rule the draft breaks."""

    errors: List[str] = []
    if _is_blank(name):
        errors.append("Enter an application name.")
    if _is_blank(description):
        errors.append("Enter an application description.")
    for position, question in enumerate(questions):
        errors.extend(_question_errors(position, question))
    return errors


def is_application_valid(
    name: Optional[str],
    description: Optional[str],
    questions: Sequence[Mapping[str, Any]],
) -> bool:
    """Return ``True`` only when the name, description and every question are valid."""

    return not collect_validation_errors(name, description, questions)


def ensure_application_valid(
    name: Optional[str],
    description: Optional[str],
    questions: Sequence[Mapping[str, Any]],
) -> None:
    """Raise :class:`ValidationError` listing every broken rule."""

    errors = collect_validation_errors(name, description, questions)
    if errors:
        raise ValidationError(errors)


__all__ = ["collect_validation_errors", "ensure_application_valid", "is_application_valid"]
