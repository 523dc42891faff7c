"""Member page for filling out a published club application."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import streamlit as st

from lib.application_form import collect_missing_required_answers, deadline_passed, render_application_form
from lib.application_store import ApplicationStore, find_application, published_applications
from lib.config import configure_logging, data_root
from lib.question_types import APPLY_SELECTED_STATE_KEY
from lib.response_store import save_response
from lib.session import current_caller, logout_button
from lib.ui_theme import apply_app_theme, page_header

logger = logging.getLogger(__name__)

ANSWERS_STATE_KEY = "apply_answers"


def submit_response(application: Dict[str, Any], answers: Dict[str, Any]) -> bool:
    """Check the deadline and required answers, then store the response.

    Returns ``True`` on success.
    """

    if deadline_passed(application):
        st.error("This application is closed. The deadline has passed.")
        return False

    missing = collect_missing_required_answers(application, answers)
    if missing:
        st.error("Please answer every required question before submitting.")
        for prompt in missing:
            st.caption(f"• {prompt}")
        return False

    try:
        save_response(data_root(), application["id"], answers, submitted_by=current_caller().username)
    except (OSError, ValueError) as exc:
        logger.exception("Storing a response to %s failed", application["id"])
        st.error(f"Could not submit your application: {exc}")
        return False
    return True


def main() -> None:
    configure_logging()
    apply_app_theme(page_title="Apply", page_icon="🙋")
    logout_button()
    page_header("Apply", "Fill out an open club application.", icon="🙋")

    applications = published_applications(ApplicationStore(data_root()).list_applications())
    if not applications:
        st.info("No applications are open right now.")
        return

    ids = [item["id"] for item in applications]
    labels = {item["id"]: item.get("name") or "Untitled application" for item in applications}
    selected_id = st.session_state.get(APPLY_SELECTED_STATE_KEY)
    selected_id = st.selectbox(
        "Application",
        ids,
        index=ids.index(selected_id) if selected_id in ids else 0,
        format_func=lambda value: labels.get(value, value),
    )
    st.session_state[APPLY_SELECTED_STATE_KEY] = selected_id
    application = find_application(applications, selected_id)

    closed = deadline_passed(application)
    if application.get("deadline"):
        st.caption(f"Deadline: {application['deadline']}")
    if closed:
        st.warning("This application is closed. The deadline has passed.")

    answers_state: Dict[str, Dict[str, Any]] = st.session_state.setdefault(ANSWERS_STATE_KEY, {})
    answers = answers_state.setdefault(selected_id, {})
    render_application_form(application, answers, readonly=closed, key_prefix=f"apply_{selected_id}")

    if st.button("Submit application", type="primary", disabled=closed):
        if submit_response(application, answers):
            answers_state.pop(selected_id, None)
            st.success("Application submitted. Good luck!")


if __name__ == "__main__":
    main()
