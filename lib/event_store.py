"""JSON file storage for project events."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import List

from pydantic import BaseModel

from lib.errors import NotFoundError

logger = logging.getLogger(__name__)

EVENTS_FILENAME = "events.json"


class Event(BaseModel):
    """An event organised by a project."""

    id: str
    project_id: str
    name: str
    date: datetime
    description: str = ""
    in_person: bool = False
    location: str = ""


class EventStore:
    """Keeps every event in a single JSON document under ``root/events``."""

    def __init__(self, root: Path) -> None:
        self.path = Path(root) / "events" / EVENTS_FILENAME

    def _read(self) -> List[Event]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        entries = payload.get("events", []) if isinstance(payload, dict) else []
        return [Event.model_validate(entry) for entry in entries if isinstance(entry, dict)]

    def _write(self, events: List[Event]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump({"events": [event.model_dump(mode="json") for event in events]}, handle, indent=2)
            handle.write("\n")

    def list_for_project(self, project_id: str) -> List[Event]:
        return [event for event in self._read() if event.project_id == project_id]

    def get(self, event_id: str) -> Event:
        for event in self._read():
            if event.id == event_id:
                return event
        raise NotFoundError(f"Event '{event_id}' does not exist.")

    def create(
        self,
        *,
        project_id: str,
        name: str,
        date: datetime,
        description: str,
        in_person: bool,
        location: str,
    ) -> Event:
        events = self._read()
        event = Event(
            id=uuid.uuid4().hex,
            project_id=project_id,
            name=name,
            date=date,
            description=description,
            in_person=in_person,
            location=location,
        )
        events.append(event)
        self._write(events)
        logger.info("Created event %s for project %s", event.id, project_id)
        return event

    def update(
        self,
        event_id: str,
        *,
        name: str,
        date: datetime,
        description: str,
        in_person: bool,
        location: str,
    ) -> Event:
        """Replace every editable field of the event identified by ``event_id``."""

        events = self._read()
        for position, existing in enumerate(events):
            if existing.id != event_id:
                continue
            updated = existing.model_copy(
                update={
                    "name": name,
                    "date": date,
                    "description": description,
                    "in_person": in_person,
                    "location": location,
                }
            )
            events[position] = updated
            self._write(events)
            logger.info("Updated event %s", event_id)
            return updated
        raise NotFoundError(f"Event '{event_id}' does not exist.")

    def delete(self, event_id: str) -> Event:
        events = self._read()
        remaining = [event for event in events if event.id != event_id]
        if len(remaining) == len(events):
            raise NotFoundError(f"Event '{event_id}' does not exist.")
        removed = next(event for event in events if event.id == event_id)
        self._write(remaining)
        logger.info("Deleted event %s", event_id)
        return removed


__all__ = ["Event", "EventStore"]
