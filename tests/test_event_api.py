"""Tests for the admin-gated event endpoints."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import pytest

from lib.access import ANONYMOUS, AdminRoster, Caller
from lib.errors import AuthorizationError, InvalidInputError, NotFoundError
from lib.event_api import EventRouter
from lib.event_store import EventStore

ADMIN = Caller("alice")
OUTSIDER = Caller("mallory")


@pytest.fixture()
def router(tmp_path: Path) -> EventRouter:
    roster = AdminRoster({"chess": ["alice"], "robotics": ["bob"]})
    return EventRouter(EventStore(tmp_path), roster)


def _event_input(**overrides):
    payload = {
        "project_id": "chess",
        "name": "Spring open",
        "date": datetime(2025, 4, 12, 10, 0),
        "description": "Rapid tournament",
        "in_person": True,
        "location": "Student union",
    }
    payload.update(overrides)
    return payload


def test_created_event_is_listed(router: EventRouter) -> None:
    created = router.create_event(ADMIN, _event_input())

    events = router.get_events_by_project_id(ADMIN, {"project_id": "chess"})

    assert created in events
    assert created.id
    assert created.project_id == "chess"


def test_events_are_scoped_to_project(router: EventRouter) -> None:
    router.create_event(ADMIN, _event_input())
    router.create_event(Caller("bob"), _event_input(project_id="robotics", name="Build night"))

    names = [event.name for event in router.get_events_by_project_id(ADMIN, {"project_id": "chess"})]

    assert names == ["Spring open"]


def test_update_replaces_fields_by_id(router: EventRouter) -> None:
    created = router.create_event(ADMIN, _event_input())

    updated = router.update_event_by_id(
        ADMIN,
        _event_input(id=created.id, name="Spring open (moved)", in_person=False, location="", date="2025-04-19T10:00:00"),
    )

    assert updated.id == created.id
    assert updated.name == "Spring open (moved)"
    assert updated.in_person is False
    assert updated.date == datetime(2025, 4, 19, 10, 0)
    assert router.get_events_by_project_id(ADMIN, {"project_id": "chess"}) == [updated]


def test_delete_returns_removed_event(router: EventRouter) -> None:
    created = router.create_event(ADMIN, _event_input())

    deleted = router.delete_event_by_id(ADMIN, {"id": created.id, "project_id": "chess"})

    assert deleted == created
    assert router.get_events_by_project_id(ADMIN, {"project_id": "chess"}) == []


def test_delete_unknown_id_leaves_events_untouched(router: EventRouter) -> None:
    created = router.create_event(ADMIN, _event_input())

    with pytest.raises(NotFoundError):
        router.delete_event_by_id(ADMIN, {"id": "missing", "project_id": "chess"})

    assert router.get_events_by_project_id(ADMIN, {"project_id": "chess"}) == [created]


def test_update_unknown_id_raises_not_found(router: EventRouter) -> None:
    with pytest.raises(NotFoundError):
        router.update_event_by_id(ADMIN, _event_input(id="missing"))


@pytest.mark.parametrize("caller", [OUTSIDER, ANONYMOUS, Caller("bob")])
def test_non_admin_calls_are_rejected_without_changes(router: EventRouter, caller: Caller) -> None:
    created = router.create_event(ADMIN, _event_input())

    with pytest.raises(AuthorizationError):
        router.get_events_by_project_id(caller, {"project_id": "chess"})
    with pytest.raises(AuthorizationError):
        router.create_event(caller, _event_input(name="Sneaky"))
    with pytest.raises(AuthorizationError):
        router.update_event_by_id(caller, _event_input(id=created.id, name="Sneaky"))
    with pytest.raises(AuthorizationError):
        router.delete_event_by_id(caller, {"id": created.id, "project_id": "chess"})

    assert router.get_events_by_project_id(ADMIN, {"project_id": "chess"}) == [created]


def test_authorization_runs_before_store_access(router: EventRouter, monkeypatch) -> None:
    def fail(*_args, **_kwargs):
        raise AssertionError("store should not be touched")

    monkeypatch.setattr(router.store, "_read", fail)

    with pytest.raises(AuthorizationError):
        router.delete_event_by_id(OUTSIDER, {"id": "anything", "project_id": "chess"})


def test_missing_fields_are_rejected(router: EventRouter) -> None:
    payload = _event_input()
    del payload["location"]

    with pytest.raises(InvalidInputError):
        router.create_event(ADMIN, payload)


def test_wrong_field_types_are_rejected(router: EventRouter) -> None:
    with pytest.raises(InvalidInputError):
        router.create_event(ADMIN, _event_input(in_person="yes"))
    with pytest.raises(InvalidInputError):
        router.create_event(ADMIN, _event_input(date="next tuesday"))


def test_plain_dates_become_midnight(router: EventRouter) -> None:
    created = router.create_event(ADMIN, _event_input(date=date(2025, 5, 1)))

    assert created.date == datetime(2025, 5, 1, 0, 0)


def test_admin_cannot_touch_another_projects_event(router: EventRouter) -> None:
    build_night = router.create_event(Caller("bob"), _event_input(project_id="robotics", name="Build night"))

    with pytest.raises(NotFoundError):
        router.update_event_by_id(ADMIN, _event_input(id=build_night.id, name="Hijacked"))
    with pytest.raises(NotFoundError):
        router.delete_event_by_id(ADMIN, {"id": build_night.id, "project_id": "chess"})

    assert router.get_events_by_project_id(Caller("bob"), {"project_id": "robotics"}) == [build_night]


def test_non_mapping_input_is_rejected(router: EventRouter) -> None:
    with pytest.raises(InvalidInputError):
        router.get_events_by_project_id(ADMIN, ["chess"])
    with pytest.raises(InvalidInputError):
        router.get_events_by_project_id(ADMIN, {"project_id": 7})


def test_events_survive_a_reload(router: EventRouter, tmp_path: Path) -> None:
    created = router.create_event(ADMIN, _event_input(date="2025-04-12T10:00:00Z"))

    reloaded = EventStore(tmp_path).get(created.id)

    assert reloaded == created
    assert reloaded.date.tzinfo is not None
