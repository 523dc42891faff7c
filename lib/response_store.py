"""Utilities for storing member responses to published applications."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

RESPONSES_DIRNAME = "responses"


def responses_directory(root: Path, application_id: str) -> Path:
    return Path(root) / RESPONSES_DIRNAME / application_id


def save_response(
    root: Path,
    application_id: str,
    answers: Mapping[str, Any],
    *,
    submitted_by: Optional[str] = None,
) -> Dict[str, Any]:
    """Write a new response file and return the stored payload."""

    try:
        serialisable_answers = json.loads(json.dumps(dict(answers)))
    except TypeError as exc:
        raise ValueError(f"Answers are not serialisable: {exc}") from exc

    payload = {
        "id": uuid.uuid4().hex,
        "application_id": application_id,
        "submitted_by": submitted_by,
        "submitted_at": datetime.now(timezone.utc).isoformat(),
        "answers": serialisable_answers,
    }
    directory = responses_directory(root, application_id)
    directory.mkdir(parents=True, exist_ok=True)
    with (directory / f"{payload['id']}.json").open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)
        handle.write("\n")
    logger.info("Stored response %s for application %s", payload["id"], application_id)
    return payload


def load_responses(root: Path, application_id: str) -> List[Dict[str, Any]]:
    """Return stored responses for ``application_id``, newest first."""

    directory = responses_directory(root, application_id)
    if not directory.exists():
        return []

    responses: List[Dict[str, Any]] = []
    for candidate in sorted(directory.glob("*.json")):
        try:
            with candidate.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Skipping unreadable response %s: %s", candidate, exc)
            continue
        if isinstance(payload, dict):
            payload.setdefault("id", candidate.stem)
            responses.append(payload)
    responses.sort(key=lambda item: str(item.get("submitted_at") or ""), reverse=True)
    return responses


def delete_response_files(
    response_id: str,
    directory: Path,
    *,
    skip_paths: Sequence[Path] | None = None,
) -> Tuple[List[Path], List[Path]]:
    """Delete files in ``directory`` belonging to ``response_id``.

    Returns
    -------
    Tuple[List[Path], List[Path]]
        The paths that were removed and the ones that could not be deleted
        because of an ``OSError``.
    """

    normalized_id = str(response_id or "").strip()
    if not normalized_id or not directory.exists():
        return [], []

    skipped = {Path(item).resolve() for item in skip_paths or ()}
    removed: List[Path] = []
    failed: List[Path] = []

    for candidate in directory.glob("*.json"):
        if candidate.resolve() in skipped:
            continue
        matches = candidate.stem == normalized_id
        if not matches:
            try:
                with candidate.open("r", encoding="utf-8") as handle:
                    payload = json.load(handle)
            except (OSError, json.JSONDecodeError):
                continue
            matches = str(payload.get("id") or "").strip() == normalized_id
        if not matches:
            continue

        try:
            candidate.unlink()
        except OSError as exc:
            logger.warning("Could not delete response file %s: %s", candidate, exc)
            failed.append(candidate)
        else:
            removed.append(candidate)

    return removed, failed


__all__ = ["delete_response_files", "load_responses", "responses_directory", "save_response"]
