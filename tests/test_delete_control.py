"""Tests for the delete confirmation control."""

from __future__ import annotations

from lib.delete_control import DeleteConfirmation


def test_confirming_runs_callback_once() -> None:
    calls = []
    control = DeleteConfirmation({}, "question_1", lambda: calls.append("deleted"))

    on_confirm = control.request()
    assert control.is_open

    assert on_confirm() is True
    assert calls == ["deleted"]
    assert not control.is_open

    assert on_confirm() is False
    assert calls == ["deleted"]


def test_dismissing_does_nothing() -> None:
    calls = []
    state = {"unrelated": 1}
    control = DeleteConfirmation(state, "event", lambda: calls.append("deleted"))

    control.request()
    control.dismiss()

    assert calls == []
    assert state == {"unrelated": 1}
    assert control.confirm() is False


def test_controls_with_different_keys_are_independent() -> None:
    state = {}
    first = DeleteConfirmation(state, "a", lambda: None)
    second = DeleteConfirmation(state, "b", lambda: None)

    first.request()

    assert first.is_open
    assert not second.is_open
