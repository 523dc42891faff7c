"""Local JSON storage for club applications and their questions."""

from __future__ import annotations

import json
import logging
import shutil
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from lib.errors import NotFoundError
from lib.question_editor import renumber_questions
from lib.question_types import DRAFT_STATUS, PUBLISHED_STATUS

logger = logging.getLogger(__name__)

APPLICATION_FILENAME = "application.json"
APPLICATIONS_DIRNAME = "applications"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _ensure_mapping(value: Any) -> Dict[str, Any]:
    """Return ``value`` if it is a mapping, otherwise an empty dict."""

    return dict(value) if isinstance(value, Mapping) else {}


def _ensure_list(value: Any) -> List[Any]:
    """Return ``value`` if it is a list, otherwise an empty list."""

    return list(value) if isinstance(value, list) else []


def normalise_question(payload: Any) -> Dict[str, Any]:
    """Return a question dict with every key the editor expects."""

    question = _ensure_mapping(payload)
    question.setdefault("id", None)
    question["question"] = str(question.get("question") or "")
    question.setdefault("type", None)
    question.setdefault("required", None)
    question["answer_choices"] = [str(choice) for choice in _ensure_list(question.get("answer_choices"))]
    return question


def normalise_application(application_id: str, payload: Any) -> Dict[str, Any]:
    """Convert a raw payload into the application structure."""

    entry = _ensure_mapping(payload)
    entry["id"] = str(entry.get("id") or application_id)
    entry["club_id"] = str(entry.get("club_id") or "")
    entry["name"] = str(entry.get("name") or "")
    entry["description"] = str(entry.get("description") or "")
    entry["status"] = entry.get("status") if entry.get("status") in {DRAFT_STATUS, PUBLISHED_STATUS} else DRAFT_STATUS
    entry.setdefault("deadline", None)
    entry.setdefault("published_at", None)
    questions = [normalise_question(question) for question in _ensure_list(entry.get("questions"))]
    if all(isinstance(question.get("order_number"), int) for question in questions):
        questions.sort(key=lambda question: question["order_number"])
    entry["questions"] = questions
    return entry


def resolve_remote_application_path(base_path: str, application_id: str) -> str:
    """Return the remote path for ``application_id`` using ``base_path`` template."""

    if "{application_id}" in base_path:
        return base_path.format(application_id=application_id)
    if base_path.endswith(".json"):
        return base_path
    return f"{base_path.rstrip('/')}/{application_id}/{APPLICATION_FILENAME}"


def _prepare_questions(questions: Sequence[Mapping[str, Any]], timestamp: str) -> List[Dict[str, Any]]:
    """Renumber questions and stamp ids and timestamps owned by storage."""

    prepared = renumber_questions(questions)
    for question in prepared:
        if not question.get("id"):
            question["id"] = uuid.uuid4().hex
            question["created_at"] = timestamp
        question.setdefault("created_at", timestamp)
        question["updated_at"] = timestamp
    return prepared


class ApplicationStore:
    """Stores each application as ``<root>/applications/<id>/application.json``."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root) / APPLICATIONS_DIRNAME

    def path_for(self, application_id: str) -> Path:
        return self.root / application_id / APPLICATION_FILENAME

    def list_applications(self) -> List[Dict[str, Any]]:
        """Return every stored application, newest update first."""

        applications: List[Dict[str, Any]] = []
        if not self.root.exists():
            return applications
        for entry in sorted(self.root.iterdir()):
            path = entry / APPLICATION_FILENAME
            if not entry.is_dir() or not path.exists():
                continue
            try:
                applications.append(self._read(entry.name, path))
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Skipping unreadable application %s: %s", path, exc)
        applications.sort(key=lambda item: str(item.get("updated_at") or ""), reverse=True)
        return applications

    def list_applications_for_club(self, club_id: str) -> List[Dict[str, Any]]:
        return [item for item in self.list_applications() if item.get("club_id") == club_id]

    def _read(self, application_id: str, path: Path) -> Dict[str, Any]:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        return normalise_application(application_id, payload)

    def write(self, application: Dict[str, Any]) -> Dict[str, Any]:
        path = self.path_for(application["id"])
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(application, handle, indent=2)
            handle.write("\n")
        return application

    def load(self, application_id: str) -> Dict[str, Any]:
        path = self.path_for(application_id)
        if not path.exists():
            raise NotFoundError(f"Application '{application_id}' does not exist.")
        return self._read(application_id, path)

    def create(self, club_id: str, name: str = "", description: str = "") -> Dict[str, Any]:
        """Create an empty draft application for ``club_id``."""

        timestamp = _now()
        application = normalise_application(
            uuid.uuid4().hex,
            {
                "club_id": club_id,
                "name": name,
                "description": description,
                "status": DRAFT_STATUS,
                "questions": [],
                "created_at": timestamp,
                "updated_at": timestamp,
            },
        )
        logger.info("Created application %s for club %s", application["id"], club_id)
        return self.write(application)

    def prepare_draft(
        self,
        application_id: str,
        name: str,
        description: str,
        questions: Sequence[Mapping[str, Any]],
    ) -> Dict[str, Any]:
        """Return the stored application updated with the draft, without writing it."""

        application = self.load(application_id)
        timestamp = _now()
        application["name"] = name.strip()
        application["description"] = description.strip()
        application["questions"] = _prepare_questions(questions, timestamp)
        application["updated_at"] = timestamp
        return application

    def prepare_published(
        self,
        application_id: str,
        name: str,
        description: str,
        confirmation: Mapping[str, Any],
        questions: Sequence[Mapping[str, Any]],
    ) -> Dict[str, Any]:
        """Like ``prepare_draft`` but marked as published with the confirmed deadline."""

        application = self.prepare_draft(application_id, name, description, questions)
        application["status"] = PUBLISHED_STATUS
        application["deadline"] = confirmation.get("deadline")
        application["published_at"] = application["updated_at"]
        return application

    def save_draft(
        self,
        application_id: str,
        name: str,
        description: str,
        questions: Sequence[Mapping[str, Any]],
    ) -> Dict[str, Any]:
        """Persist the draft fields and questions of ``application_id``."""

        application = self.prepare_draft(application_id, name, description, questions)
        logger.info("Saved application %s (%d questions)", application_id, len(application["questions"]))
        return self.write(application)

    def publish(
        self,
        application_id: str,
        name: str,
        description: str,
        confirmation: Mapping[str, Any],
        questions: Sequence[Mapping[str, Any]],
    ) -> Dict[str, Any]:
        """Persist the draft and mark the application as published."""

        application = self.prepare_published(application_id, name, description, confirmation, questions)
        logger.info("Published application %s", application_id)
        return self.write(application)

    def delete(self, application_id: str) -> Dict[str, Any]:
        application = self.load(application_id)
        shutil.rmtree(self.path_for(application_id).parent)
        logger.info("Deleted application %s", application_id)
        return application


def published_applications(applications: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Return the published applications from ``applications``."""

    return [dict(item) for item in applications if item.get("status") == PUBLISHED_STATUS]


def find_application(applications: Sequence[Mapping[str, Any]], application_id: Optional[str]) -> Optional[Dict[str, Any]]:
    return next((dict(item) for item in applications if item.get("id") == application_id), None)


__all__ = [
    "ApplicationStore",
    "find_application",
    "normalise_application",
    "normalise_question",
    "published_applications",
    "resolve_remote_application_path",
]
