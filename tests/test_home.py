"""Tests for the home page summary table."""

from __future__ import annotations

import Home


def test_application_rows_summarise_each_application() -> None:
    applications = [
        {
            "id": "a1",
            "name": "Chess club",
            "club_id": "chess",
            "status": "published",
            "questions": [{}, {}],
            "deadline": "2030-01-01",
            "updated_at": "2025-03-01T12:30:45.123456+00:00",
        },
        {"id": "a2", "name": "", "club_id": "", "status": "draft", "questions": []},
    ]

    rows = Home.application_rows(applications, {"a1": 4})

    assert rows[0] == {
        "Name": "Chess club",
        "Club": "chess",
        "Status": "Published",
        "Questions": 2,
        "Responses": 4,
        "Deadline": "2030-01-01",
        "Updated": "2025-03-01 12:30:45",
    }
    assert rows[1]["Name"] == "Untitled application"
    assert rows[1]["Responses"] == 0
    assert rows[1]["Updated"] == "—"
