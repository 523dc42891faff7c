"""Library helpers for the club applications manager."""

from .application_validation import (  # noqa: F401
    collect_validation_errors,
    ensure_application_valid,
    is_application_valid,
)
from .question_editor import (  # noqa: F401
    delete_question,
    move_question,
    set_question_field,
)
