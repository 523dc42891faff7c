"""Copy-on-write operations on the ordered list of application questions.

Every helper returns a new list and leaves its input, including the question
dicts inside it, untouched. The editor page replaces its stored draft with the
returned list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

from lib.errors import UnknownQuestionFieldError

Question = Dict[str, Any]


def _check_index(questions: Sequence[Mapping[str, Any]], index: int, name: str = "index") -> None:
    """Raise ``IndexError`` unless ``index`` addresses an existing question."""

    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError(f"{name} must be an integer, got {type(index).__name__}")
    if not 0 <= index < len(questions):
        raise IndexError(f"{name} {index} out of range for {len(questions)} question(s)")


def _copy_questions(questions: Sequence[Mapping[str, Any]]) -> List[Question]:
    return [dict(question) for question in questions]


@dataclass(frozen=True)
class SetQuestionText:
    """Replace the prompt text of a question."""

    value: str
    field = "question"

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError("question text must be a string")


@dataclass(frozen=True)
class SetQuestionType:
    """Replace the answer kind of a question."""

    value: str
    field = "type"

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError("question type must be a string")


@dataclass(frozen=True)
class SetRequired:
    """Replace the required flag of a question."""

    value: bool
    field = "required"

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise TypeError("required must be a boolean")


@dataclass(frozen=True)
class SetAnswerChoices:
    """Replace the ordered answer choices of a question."""

    value: Tuple[str, ...]
    field = "answer_choices"

    def __post_init__(self) -> None:
        if isinstance(self.value, str) or not all(isinstance(item, str) for item in self.value):
            raise TypeError("answer choices must be a sequence of strings")
        object.__setattr__(self, "value", tuple(self.value))


QuestionUpdate = Union[SetQuestionText, SetQuestionType, SetRequired, SetAnswerChoices]

QUESTION_UPDATES = {
    update.field: update
    for update in (SetQuestionText, SetQuestionType, SetRequired, SetAnswerChoices)
}


def apply_question_update(
    questions: Sequence[Mapping[str, Any]], index: int, update: QuestionUpdate
) -> List[Question]:
    """Return a new list with ``update`` applied to the question at ``index``."""

    if not isinstance(update, tuple(QUESTION_UPDATES.values())):
        raise UnknownQuestionFieldError(f"Unsupported question update: {update!r}")
    _check_index(questions, index)

    value: Any = list(update.value) if isinstance(update, SetAnswerChoices) else update.value
    updated = list(questions)
    updated[index] = {**questions[index], update.field: value}
    return updated


def set_question_field(
    questions: Sequence[Mapping[str, Any]], index: int, field_name: str, value: Any
) -> List[Question]:
    """Replace ``field_name`` of the question at ``index`` with ``value``."""

    update_type = QUESTION_UPDATES.get(field_name)
    if update_type is None:
        raise UnknownQuestionFieldError(
            f"'{field_name}' is not an editable question field. "
            f"Choose one of: {', '.join(sorted(QUESTION_UPDATES))}."
        )
    return apply_question_update(questions, index, update_type(value))


def move_question(
    questions: Sequence[Mapping[str, Any]], source_index: int, dest_index: int
) -> List[Question]:
    """Move the question at ``source_index`` so it ends up at ``dest_index``.

    The item is removed first and then inserted into the shortened list, so the
    relative order of every other question is preserved.
    """

    _check_index(questions, source_index, "source_index")
    _check_index(questions, dest_index, "dest_index")

    reordered = list(questions)
    item = reordered.pop(source_index)
    reordered.insert(dest_index, item)
    return reordered


def delete_question(questions: Sequence[Mapping[str, Any]], index: int) -> List[Question]:
    """Return a new list without the question at ``index``.

    ``order_number`` values are left as they are; see ``renumber_questions``.
    """

    _check_index(questions, index)
    return [question for position, question in enumerate(questions) if position != index]


def blank_question() -> Question:
    """Return a question with nothing filled in yet."""

    return {
        "id": None,
        "question": "",
        "type": None,
        "required": None,
        "answer_choices": [],
    }


def append_blank_question(questions: Sequence[Mapping[str, Any]]) -> List[Question]:
    """Return a new list ending with a blank question."""

    return [*questions, blank_question()]


def renumber_questions(questions: Sequence[Mapping[str, Any]]) -> List[Question]:
    """Return copies whose ``order_number`` matches their list position."""

    renumbered = _copy_questions(questions)
    for position, question in enumerate(renumbered):
        question["order_number"] = position
    return renumbered


def _choices(question: Mapping[str, Any]) -> List[str]:
    choices = question.get("answer_choices")
    return list(choices) if isinstance(choices, (list, tuple)) else []


def add_answer_choice(questions: Sequence[Mapping[str, Any]], index: int) -> List[Question]:
    """Append an empty answer choice to the question at ``index``."""

    _check_index(questions, index)
    choices = _choices(questions[index])
    choices.append("")
    return apply_question_update(questions, index, SetAnswerChoices(tuple(choices)))


def set_answer_choice(
    questions: Sequence[Mapping[str, Any]], index: int, choice_index: int, value: str
) -> List[Question]:
    """Replace one answer choice of the question at ``index``."""

    _check_index(questions, index)
    choices = _choices(questions[index])
    _check_index(choices, choice_index, "choice_index")
    choices[choice_index] = value
    return apply_question_update(questions, index, SetAnswerChoices(tuple(choices)))


def remove_answer_choice(
    questions: Sequence[Mapping[str, Any]], index: int, choice_index: int
) -> List[Question]:
    """Remove one answer choice from the question at ``index``."""

    _check_index(questions, index)
    choices = _choices(questions[index])
    _check_index(choices, choice_index, "choice_index")
    del choices[choice_index]
    return apply_question_update(questions, index, SetAnswerChoices(tuple(choices)))


__all__ = [
    "QUESTION_UPDATES",
    "QuestionUpdate",
    "SetAnswerChoices",
    "SetQuestionText",
    "SetQuestionType",
    "SetRequired",
    "add_answer_choice",
    "append_blank_question",
    "apply_question_update",
    "blank_question",
    "delete_question",
    "move_question",
    "remove_answer_choice",
    "renumber_questions",
    "set_answer_choice",
    "set_question_field",
]
