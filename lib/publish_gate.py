"""Preview and confirmation flow that guards publishing an application."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, List, Mapping, MutableMapping, Optional, Sequence

from lib.application_validation import is_application_valid
from lib.errors import GateStateError

logger = logging.getLogger(__name__)

IDLE = "idle"
PREVIEW_OPEN = "preview_open"
CONFIRM_OPEN = "confirm_open"
ERROR_SHOWN = "error_shown"
GATE_STATES = (IDLE, PREVIEW_OPEN, CONFIRM_OPEN, ERROR_SHOWN)

DEFAULT_GATE_KEY = "publish_gate_state"


@dataclass(frozen=True)
class PublishConfirmation:
    """Values captured by the publish confirmation dialog."""

    deadline: Optional[date]
    acknowledged: bool = False

    def problems(self, today: Optional[date] = None) -> List[str]:
        """Return reasons the confirmation cannot be accepted yet."""

        problems: List[str] = []
        if self.deadline is None:
            problems.append("Choose an application deadline.")
        elif today is not None and self.deadline < today:
            problems.append("The deadline cannot be in the past.")
        if not self.acknowledged:
            problems.append("Confirm that published applications cannot be unpublished.")
        return problems

    def to_dict(self) -> dict:
        return {
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "acknowledged": self.acknowledged,
        }


PublishCallback = Callable[[str, str, PublishConfirmation, List[dict]], Any]
Validator = Callable[[str, str, Sequence[Mapping[str, Any]]], bool]


class PublishGate:
    """Two-step preview then confirm gate in front of ``publish``.

    The current state lives in ``state`` under ``key`` so that it survives
    Streamlit reruns when ``state`` is ``st.session_state``.
    """

    def __init__(
        self,
        state: MutableMapping[str, Any],
        key: str = DEFAULT_GATE_KEY,
        *,
        validator: Validator = is_application_valid,
    ) -> None:
        self._state = state
        self._key = key
        self._validator = validator
        if self._state.get(self._key) not in GATE_STATES:
            self._state[self._key] = IDLE

    @property
    def state(self) -> str:
        return self._state.get(self._key, IDLE)

    def _transition(self, allowed_from: Sequence[str], target: str, action: str) -> None:
        current = self.state
        if current not in allowed_from:
            raise GateStateError(f"Cannot {action} while the publish gate is '{current}'.")
        self._state[self._key] = target

    def open_preview(self) -> None:
        self._transition((IDLE,), PREVIEW_OPEN, "open the preview")

    def request_publish(self) -> None:
        self._transition((IDLE, PREVIEW_OPEN), CONFIRM_OPEN, "request publishing")

    def dismiss_error(self) -> None:
        self._transition((ERROR_SHOWN,), IDLE, "dismiss the error")

    def cancel(self) -> None:
        """Close whichever dialog is open without side effects."""

        self._state[self._key] = IDLE

    def confirm(
        self,
        name: str,
        description: str,
        confirmation: PublishConfirmation,
        questions: Sequence[Mapping[str, Any]],
        publish: PublishCallback,
    ) -> bool:
        """Validate the draft and, if it passes, hand it to ``publish``.

        Returns ``False`` and moves to the error state when validation fails.
        Exceptions raised by ``publish`` propagate and leave the confirmation
        dialog open.
        """

        if self.state != CONFIRM_OPEN:
            raise GateStateError(f"Cannot publish while the publish gate is '{self.state}'.")

        if not self._validator(name, description, questions):
            logger.info("Publish blocked: application draft failed validation")
            self._state[self._key] = ERROR_SHOWN
            return False

        publish(name, description, confirmation, [dict(question) for question in questions])
        self._state[self._key] = IDLE
        return True


__all__ = [
    "CONFIRM_OPEN",
    "ERROR_SHOWN",
    "IDLE",
    "PREVIEW_OPEN",
    "PublishConfirmation",
    "PublishGate",
]
