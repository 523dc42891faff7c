"""Admin page for managing the events of a project."""

from __future__ import annotations

import logging
import sys
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Dict, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pandas as pd
import streamlit as st

from lib.access import Caller
from lib.config import configure_logging, data_root
from lib.delete_control import render_delete_control
from lib.errors import AuthorizationError, ClubAppError, InvalidInputError, NotFoundError
from lib.event_api import EventRouter
from lib.event_store import Event, EventStore
from lib.session import admin_roster, logout_button, require_login, rerun_app
from lib.ui_theme import apply_app_theme, page_header, section_card

logger = logging.getLogger(__name__)

SELECTED_PROJECT_STATE_KEY = "events_selected_project"


def get_router() -> EventRouter:
    return EventRouter(EventStore(data_root()), admin_roster())


def call_endpoint(operation: str, endpoint: Any, caller: Caller, payload: Dict[str, Any]) -> Optional[Any]:
    """Run one endpoint call, reporting failures to the user."""

    try:
        return endpoint(caller, payload)
    except AuthorizationError as exc:
        st.error(str(exc))
    except NotFoundError as exc:
        st.error(f"{exc} It may have been deleted already.")
    except InvalidInputError as exc:
        st.error(f"Invalid event details: {exc}")
    except (OSError, ClubAppError) as exc:
        logger.exception("Event operation '%s' failed", operation)
        st.error(f"Could not {operation}: {exc}")
    return None


def events_table(events: list) -> pd.DataFrame:
    rows = [
        {
            "Name": event.name,
            "Date": event.date.strftime("%Y-%m-%d %H:%M"),
            "In person": "Yes" if event.in_person else "No",
            "Location": event.location or "—",
            "Description": event.description,
        }
        for event in sorted(events, key=lambda item: item.date)
    ]
    return pd.DataFrame(rows, columns=["Name", "Date", "In person", "Location", "Description"])


def render_event_form(form_key: str, event: Optional[Event] = None) -> Optional[Dict[str, Any]]:
    """Render the event fields and return them when the form is submitted."""

    with st.form(form_key, clear_on_submit=event is None):
        name = st.text_input("Name", value=event.name if event else "")
        date_col, time_col = st.columns(2)
        event_date = date_col.date_input("Date", value=event.date.date() if event else date.today())
        event_time = time_col.time_input("Time", value=event.date.time() if event else time(18, 0))
        description = st.text_area("Description", value=event.description if event else "")
        in_person = st.checkbox("In person", value=event.in_person if event else True)
        location = st.text_input("Location", value=event.location if event else "")
        submitted = st.form_submit_button("Save event" if event else "Create event", type="primary")

    if not submitted:
        return None
    if not name.strip():
        st.error("Event name is required.")
        return None
    return {
        "name": name.strip(),
        "date": datetime.combine(event_date, event_time),
        "description": description,
        "in_person": in_person,
        "location": location,
    }


def main() -> None:
    configure_logging()
    apply_app_theme(page_title="Events", page_icon="📅")
    caller = require_login()
    logout_button()
    page_header("Events", "Plan and update the events of your projects.", icon="📅")

    router = get_router()
    projects = router.roster.scopes_for(caller)
    if not projects:
        st.error("You are not an admin of any project.")
        return
    project_id = st.selectbox("Project", projects, key=SELECTED_PROJECT_STATE_KEY)

    events = call_endpoint(
        "load events", router.get_events_by_project_id, caller, {"project_id": project_id}
    )
    if events is None:
        return

    with section_card("Upcoming events", f"{len(events)} event(s) for {project_id}."):
        if events:
            st.dataframe(events_table(events), hide_index=True, width="stretch")
        else:
            st.info("No events yet.")

    for event in events:
        with st.expander(f"{event.name} · {event.date:%Y-%m-%d}"):
            values = render_event_form(f"edit_event_{event.id}", event)
            if values is not None:
                updated = call_endpoint(
                    "update the event",
                    router.update_event_by_id,
                    caller,
                    {"id": event.id, "project_id": project_id, **values},
                )
                if updated is not None:
                    st.success("Event updated.")
                    rerun_app()
            outcome: list = []
            deleted = render_delete_control(
                f"delete_event_{event.id}",
                f"Delete '{event.name}'? This cannot be undone.",
                lambda event_id=event.id: outcome.append(
                    call_endpoint(
                        "delete the event",
                        router.delete_event_by_id,
                        caller,
                        {"id": event_id, "project_id": project_id},
                    )
                ),
            )
            if deleted and outcome and outcome[0] is not None:
                st.success("Event deleted.")
                rerun_app()

    with section_card("Create event"):
        values = render_event_form("create_event")
        if values is not None:
            created = call_endpoint(
                "create the event", router.create_event, caller, {"project_id": project_id, **values}
            )
            if created is not None:
                st.success(f"Created '{created.name}'.")
                rerun_app()


if __name__ == "__main__":
    main()
