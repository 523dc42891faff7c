"""Streamlit home screen listing club applications."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

import pandas as pd
import streamlit as st

from lib.application_store import ApplicationStore
from lib.config import configure_logging, data_root
from lib.question_types import DRAFT_STATUS, PUBLISHED_STATUS
from lib.response_store import load_responses
from lib.session import logout_button
from lib.ui_theme import apply_app_theme, page_header

TABLE_COLUMNS = ("Name", "Club", "Status", "Questions", "Responses", "Deadline", "Updated")


@st.cache_data(show_spinner=False, ttl=30)
def load_applications() -> List[Dict[str, Any]]:
    """Load every stored application from local storage."""

    return ApplicationStore(data_root()).list_applications()


def application_rows(applications: Iterable[Dict[str, Any]], response_counts: Dict[str, int]) -> List[Dict[str, Any]]:
    """Return one table row per application."""

    rows: List[Dict[str, Any]] = []
    for application in applications:
        rows.append(
            {
                "Name": application.get("name") or "Untitled application",
                "Club": application.get("club_id") or "—",
                "Status": application.get("status", DRAFT_STATUS).title(),
                "Questions": len(application.get("questions") or []),
                "Responses": response_counts.get(application.get("id", ""), 0),
                "Deadline": application.get("deadline") or "—",
                "Updated": str(application.get("updated_at") or "—")[:19].replace("T", " "),
            }
        )
    return rows


def main() -> None:
    """Render the home screen."""

    configure_logging()
    apply_app_theme(page_title="Club applications", page_icon="🏛️")
    logout_button()
    page_header(
        "Club applications",
        "Build application forms, collect responses, and plan events.",
        icon="🏛️",
    )

    applications = load_applications()
    root = data_root()
    response_counts = {item["id"]: len(load_responses(root, item["id"])) for item in applications}
    published = [item for item in applications if item.get("status") == PUBLISHED_STATUS]

    col1, col2, col3 = st.columns(3)
    col1.metric("Applications", len(applications) or "0")
    col2.metric("Published", len(published) or "0")
    col3.metric("Responses", sum(response_counts.values()) or "0")

    if not applications:
        st.info("No applications yet. Open the editor to create the first one.")
    else:
        st.dataframe(
            pd.DataFrame(application_rows(applications, response_counts), columns=list(TABLE_COLUMNS)),
            hide_index=True,
            width="stretch",
        )

    st.page_link("pages/01_Application_Editor.py", label="Application editor", icon="📝")
    st.page_link("pages/02_Apply.py", label="Apply", icon="🙋")
    st.page_link("pages/03_Events.py", label="Events", icon="📅")


if __name__ == "__main__":
    main()
