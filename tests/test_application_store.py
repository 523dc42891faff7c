"""Tests for local application storage."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from lib.application_store import (
    ApplicationStore,
    find_application,
    normalise_application,
    published_applications,
    resolve_remote_application_path,
)
from lib.errors import NotFoundError
from lib.question_editor import move_question


def _questions():
    return [
        {"id": None, "question": "Why join?", "type": "PARAGRAPH", "required": True, "answer_choices": []},
        {
            "id": None,
            "question": "Favourite opening?",
            "type": "MULTIPLE_CHOICE",
            "required": False,
            "answer_choices": ["Sicilian", "Queen's Gambit"],
        },
    ]


def test_create_then_load_round_trips(tmp_path: Path) -> None:
    store = ApplicationStore(tmp_path)

    created = store.create("chess", name="Chess club")

    assert store.path_for(created["id"]).exists()
    loaded = store.load(created["id"])
    assert loaded["name"] == "Chess club"
    assert loaded["status"] == "draft"
    assert loaded["questions"] == []


def test_load_missing_application_raises(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError):
        ApplicationStore(tmp_path).load("nope")


def test_save_draft_renumbers_and_assigns_ids(tmp_path: Path) -> None:
    store = ApplicationStore(tmp_path)
    created = store.create("chess")

    saved = store.save_draft(created["id"], " Chess club ", "Play chess", move_question(_questions(), 1, 0))

    assert saved["name"] == "Chess club"
    assert [question["order_number"] for question in saved["questions"]] == [0, 1]
    assert saved["questions"][0]["question"] == "Favourite opening?"
    assert all(question["id"] for question in saved["questions"])
    assert all(question["created_at"] and question["updated_at"] for question in saved["questions"])
    assert store.load(created["id"])["questions"] == saved["questions"]


def test_saving_again_keeps_question_identity(tmp_path: Path) -> None:
    store = ApplicationStore(tmp_path)
    created = store.create("chess")
    first = store.save_draft(created["id"], "Chess", "desc", _questions())

    second = store.save_draft(created["id"], "Chess", "desc", first["questions"])

    assert [question["id"] for question in second["questions"]] == [question["id"] for question in first["questions"]]
    assert [question["created_at"] for question in second["questions"]] == [
        question["created_at"] for question in first["questions"]
    ]


def test_publish_marks_status_and_deadline(tmp_path: Path) -> None:
    store = ApplicationStore(tmp_path)
    created = store.create("chess")

    published = store.publish(created["id"], "Chess", "desc", {"deadline": "2030-01-01"}, _questions())

    assert published["status"] == "published"
    assert published["deadline"] == "2030-01-01"
    assert published["published_at"] == published["updated_at"]
    assert published_applications(store.list_applications()) == [store.load(created["id"])]


def test_list_skips_unreadable_files(tmp_path: Path) -> None:
    store = ApplicationStore(tmp_path)
    created = store.create("chess")
    broken = tmp_path / "applications" / "broken"
    broken.mkdir(parents=True)
    (broken / "application.json").write_text("{not json", encoding="utf-8")

    applications = store.list_applications()

    assert [item["id"] for item in applications] == [created["id"]]
    assert store.list_applications_for_club("robotics") == []


def test_delete_removes_directory(tmp_path: Path) -> None:
    store = ApplicationStore(tmp_path)
    created = store.create("chess")

    store.delete(created["id"])

    assert not store.path_for(created["id"]).parent.exists()
    assert find_application(store.list_applications(), created["id"]) is None


def test_normalise_orders_questions_by_order_number(tmp_path: Path) -> None:
    payload = {
        "questions": [
            {"question": "Second", "order_number": 1},
            {"question": "First", "order_number": 0},
        ],
        "status": "archived",
    }

    entry = normalise_application("abc", payload)

    assert entry["id"] == "abc"
    assert entry["status"] == "draft"
    assert [question["question"] for question in entry["questions"]] == ["First", "Second"]
    assert entry["questions"][0]["required"] is None


def test_resolve_remote_application_path() -> None:
    assert resolve_remote_application_path("apps/{application_id}.json", "x1") == "apps/x1.json"
    assert resolve_remote_application_path("single.json", "x1") == "single.json"
    assert resolve_remote_application_path("apps/", "x1") == "apps/x1/application.json"


def test_written_file_is_plain_json(tmp_path: Path) -> None:
    store = ApplicationStore(tmp_path)
    created = store.create("chess", name="Chess")

    with store.path_for(created["id"]).open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    assert payload["club_id"] == "chess"
