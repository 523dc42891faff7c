"""Tests for the preview and confirm publish flow."""

from __future__ import annotations

from datetime import date

import pytest

from lib.errors import GateStateError
from lib.publish_gate import (
    CONFIRM_OPEN,
    ERROR_SHOWN,
    IDLE,
    PREVIEW_OPEN,
    PublishConfirmation,
    PublishGate,
)

VALID_QUESTIONS = [{"question": "Why join?", "type": "SHORT_ANSWER", "required": True, "answer_choices": []}]
CONFIRMATION = PublishConfirmation(deadline=date(2030, 1, 1), acknowledged=True)


class Recorder:
    def __init__(self) -> None:
        self.calls = []

    def __call__(self, name, description, confirmation, questions):
        self.calls.append((name, description, confirmation, questions))


def test_gate_starts_idle_and_stores_state_in_mapping() -> None:
    state = {}
    gate = PublishGate(state)

    assert gate.state == IDLE
    gate.open_preview()
    assert state["publish_gate_state"] == PREVIEW_OPEN


def test_preview_then_publish_calls_callback_once() -> None:
    gate = PublishGate({})
    publish = Recorder()

    gate.open_preview()
    gate.request_publish()
    assert gate.state == CONFIRM_OPEN

    assert gate.confirm("Club X", "desc", CONFIRMATION, VALID_QUESTIONS, publish) is True
    assert publish.calls == [("Club X", "desc", CONFIRMATION, VALID_QUESTIONS)]
    assert gate.state == IDLE


def test_publish_can_be_requested_without_preview() -> None:
    gate = PublishGate({})

    gate.request_publish()

    assert gate.state == CONFIRM_OPEN


def test_invalid_draft_shows_error_without_publishing() -> None:
    gate = PublishGate({})
    publish = Recorder()
    gate.request_publish()

    assert gate.confirm("", "desc", CONFIRMATION, VALID_QUESTIONS, publish) is False
    assert publish.calls == []
    assert gate.state == ERROR_SHOWN

    gate.dismiss_error()
    assert gate.state == IDLE


def test_cancel_returns_to_idle_from_any_state() -> None:
    gate = PublishGate({})
    publish = Recorder()

    gate.open_preview()
    gate.cancel()
    assert gate.state == IDLE

    gate.request_publish()
    gate.cancel()
    assert gate.state == IDLE
    assert publish.calls == []


def test_confirm_outside_confirmation_dialog_is_rejected() -> None:
    gate = PublishGate({})

    with pytest.raises(GateStateError):
        gate.confirm("Club X", "desc", CONFIRMATION, VALID_QUESTIONS, Recorder())


def test_preview_cannot_open_while_confirming() -> None:
    gate = PublishGate({})
    gate.request_publish()

    with pytest.raises(GateStateError):
        gate.open_preview()


def test_failing_callback_keeps_confirmation_open() -> None:
    gate = PublishGate({})
    gate.request_publish()

    def publish(*_args):
        raise OSError("disk full")

    with pytest.raises(OSError):
        gate.confirm("Club X", "desc", CONFIRMATION, VALID_QUESTIONS, publish)
    assert gate.state == CONFIRM_OPEN


def test_unknown_stored_state_resets_to_idle() -> None:
    gate = PublishGate({"publish_gate_state": "published"})

    assert gate.state == IDLE


def test_confirmation_problems() -> None:
    assert PublishConfirmation(deadline=None).problems() == [
        "Choose an application deadline.",
        "Confirm that published applications cannot be unpublished.",
    ]
    assert PublishConfirmation(deadline=date(2020, 1, 1), acknowledged=True).problems(
        today=date(2024, 1, 1)
    ) == ["The deadline cannot be in the past."]
    assert CONFIRMATION.problems(today=date(2024, 1, 1)) == []
    assert CONFIRMATION.to_dict() == {"deadline": "2030-01-01", "acknowledged": True}
