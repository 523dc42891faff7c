"""Question kinds, labels, and session keys shared by the editor and the form."""

from __future__ import annotations

from typing import Dict, FrozenSet, List

SHORT_ANSWER = "SHORT_ANSWER"
PARAGRAPH = "PARAGRAPH"
MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
MULTIPLE_SELECT = "MULTIPLE_SELECT"

QUESTION_TYPES: List[str] = [SHORT_ANSWER, PARAGRAPH, MULTIPLE_CHOICE, MULTIPLE_SELECT]
QUESTION_TYPE_LABELS: Dict[str, str] = {
    SHORT_ANSWER: "Short answer",
    PARAGRAPH: "Paragraph",
    MULTIPLE_CHOICE: "Multiple choice",
    MULTIPLE_SELECT: "Multiple select",
}
CHOICE_QUESTION_TYPES: FrozenSet[str] = frozenset({MULTIPLE_CHOICE, MULTIPLE_SELECT})

DRAFT_STATUS = "draft"
PUBLISHED_STATUS = "published"

ALL_FIELDS_MESSAGE = "Please make sure that all fields are filled out!"
UNSELECTED_LABEL = "— Select an option —"

EDITOR_SELECTED_STATE_KEY = "editor_selected_application"
APPLY_SELECTED_STATE_KEY = "apply_selected_application"
AUTH_USER_STATE_KEY = "auth_user"


def is_choice_type(question_type: object) -> bool:
    """Return ``True`` when ``question_type`` needs a fixed set of answer choices."""

    return question_type in CHOICE_QUESTION_TYPES


def question_type_label(question_type: object) -> str:
    """Return a human-friendly label for ``question_type``."""

    if not isinstance(question_type, str) or not question_type:
        return "—"
    return QUESTION_TYPE_LABELS.get(question_type, question_type)
