"""Admin-gated create/read/update/delete operations for project events.

Every operation takes the :class:`~lib.access.Caller` first and a raw input
mapping second. Input is checked before the admin check, and the admin check
runs before the store is touched, so a rejected request never reads or writes
event data.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Dict, List, Mapping, Type, TypeVar

from pydantic import BaseModel, StrictBool, StrictStr, ValidationError, field_validator

from lib.access import AdminRoster, Caller
from lib.errors import InvalidInputError, NotFoundError
from lib.event_store import Event, EventStore

EVENT_FIELDS = ("name", "date", "description", "in_person", "location")


class ProjectInput(BaseModel):
    project_id: StrictStr


class CreateEventInput(ProjectInput):
    name: StrictStr
    date: datetime
    description: StrictStr
    in_person: StrictBool
    location: StrictStr

    @field_validator("date", mode="before")
    @classmethod
    def _date_at_midnight(cls, value: Any) -> Any:
        # A bare calendar date means the start of that day.
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time())
        return value


class UpdateEventInput(CreateEventInput):
    id: StrictStr


class DeleteEventInput(ProjectInput):
    id: StrictStr


InputModel = TypeVar("InputModel", bound=ProjectInput)


def parse_input(raw: Any, model: Type[InputModel]) -> InputModel:
    """Validate ``raw`` against ``model``, raising :class:`InvalidInputError` on failure."""

    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'input'}: {error['msg']}" for error in exc.errors()
        )
        raise InvalidInputError(problems) from exc


class EventRouter:
    """The four event endpoints, each gated on project admin rights."""

    def __init__(self, store: EventStore, roster: AdminRoster) -> None:
        self.store = store
        self.roster = roster

    def _authorize(self, caller: Caller, raw: Mapping[str, Any], model: Type[InputModel]) -> InputModel:
        params = parse_input(raw, model)
        self.roster.require_admin(caller, params.project_id)
        return params

    def _owned_event(self, event_id: str, project_id: str) -> Event:
        """Return the event only if it belongs to ``project_id``."""

        event = self.store.get(event_id)
        if event.project_id != project_id:
            raise NotFoundError(f"Event '{event_id}' does not exist in project '{project_id}'.")
        return event

    def get_events_by_project_id(self, caller: Caller, raw: Mapping[str, Any]) -> List[Event]:
        params = self._authorize(caller, raw, ProjectInput)
        return self.store.list_for_project(params.project_id)

    def create_event(self, caller: Caller, raw: Mapping[str, Any]) -> Event:
        params = self._authorize(caller, raw, CreateEventInput)
        return self.store.create(**params.model_dump())

    def update_event_by_id(self, caller: Caller, raw: Mapping[str, Any]) -> Event:
        params = self._authorize(caller, raw, UpdateEventInput)
        self._owned_event(params.id, params.project_id)
        fields: Dict[str, Any] = params.model_dump(include=set(EVENT_FIELDS))
        return self.store.update(params.id, **fields)

    def delete_event_by_id(self, caller: Caller, raw: Mapping[str, Any]) -> Event:
        params = self._authorize(caller, raw, DeleteEventInput)
        self._owned_event(params.id, params.project_id)
        return self.store.delete(params.id)


__all__ = [
    "CreateEventInput",
    "DeleteEventInput",
    "EventRouter",
    "ProjectInput",
    "UpdateEventInput",
    "parse_input",
]
