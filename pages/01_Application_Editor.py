"""Admin page for composing, reordering, saving and publishing club applications."""

from __future__ import annotations

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import pandas as pd
import requests
import streamlit as st

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from lib.application_form import render_application_form
from lib.application_store import ApplicationStore, find_application, resolve_remote_application_path
from lib.application_validation import collect_validation_errors, ensure_application_valid
from lib.config import configure_logging, data_root, get_github_config
from lib.delete_control import render_delete_control
from lib.errors import ClubAppError, NotFoundError, ValidationError
from lib.github_backend import GitHubBackend
from lib.publish_gate import (
    CONFIRM_OPEN,
    ERROR_SHOWN,
    IDLE,
    PREVIEW_OPEN,
    PublishConfirmation,
    PublishGate,
)
from lib.question_editor import (
    add_answer_choice,
    append_blank_question,
    delete_question,
    move_question,
    remove_answer_choice,
    set_answer_choice,
    set_question_field,
)
from lib.question_types import (
    ALL_FIELDS_MESSAGE,
    EDITOR_SELECTED_STATE_KEY,
    QUESTION_TYPES,
    is_choice_type,
    question_type_label,
)
from lib.response_store import delete_response_files, load_responses, responses_directory
from lib.session import admin_roster, logout_button, require_login, rerun_app
from lib.ui_theme import apply_app_theme, page_header, section_card, status_badge

logger = logging.getLogger(__name__)

DRAFT_QUESTIONS_STATE_KEY = "editor_questions_draft"
DRAFT_APPLICATION_STATE_KEY = "editor_draft_application_id"
DRAFT_REVISION_STATE_KEY = "editor_draft_revision"
VALIDATION_ERRORS_STATE_KEY = "editor_validation_errors"
REMOTE_SHA_STATE_KEY = "editor_remote_sha"
SELECTED_CLUB_STATE_KEY = "editor_selected_club"
REQUIRED_OPTIONS: List[Optional[bool]] = [None, True, False]
REQUIRED_LABELS = {None: "— Select —", True: "Required", False: "Optional"}


def get_store() -> ApplicationStore:
    return ApplicationStore(data_root())


def get_draft_questions() -> List[Dict[str, Any]]:
    questions = st.session_state.get(DRAFT_QUESTIONS_STATE_KEY)
    return list(questions) if isinstance(questions, list) else []


def set_draft_questions(questions: Sequence[Mapping[str, Any]], *, structural: bool = False) -> None:
    """Replace the whole draft list.

    ``structural`` changes (add, move, delete) rebuild the question widgets so
    their keys line up with the new positions.
    """

    st.session_state[DRAFT_QUESTIONS_STATE_KEY] = [dict(question) for question in questions]
    if structural:
        st.session_state[DRAFT_REVISION_STATE_KEY] = st.session_state.get(DRAFT_REVISION_STATE_KEY, 0) + 1


def load_draft(application: Mapping[str, Any]) -> None:
    """Start editing ``application`` unless it is already the active draft."""

    if st.session_state.get(DRAFT_APPLICATION_STATE_KEY) == application["id"]:
        return
    st.session_state[DRAFT_APPLICATION_STATE_KEY] = application["id"]
    set_draft_questions(application.get("questions", []), structural=True)
    st.session_state.pop(VALIDATION_ERRORS_STATE_KEY, None)
    st.session_state[REMOTE_SHA_STATE_KEY] = _fetch_remote_sha(application["id"])
    PublishGate(st.session_state).cancel()


def _remote_backend(application_id: str) -> Optional[GitHubBackend]:
    config = get_github_config()
    if config is None:
        return None
    return GitHubBackend.from_config(config, resolve_remote_application_path(config["path"], application_id))


def _fetch_remote_sha(application_id: str) -> Optional[str]:
    backend = _remote_backend(application_id)
    if backend is None:
        return None
    try:
        return backend.get_file_sha()
    except requests.RequestException as exc:
        logger.warning("Could not read remote metadata for %s: %s", application_id, exc)
        st.error(f"Could not load application metadata from GitHub: {exc}")
        return None


def _mirror_to_github(application: Mapping[str, Any], message: str, *, check_stale: bool) -> None:
    """Write ``application`` to the configured repository, if any."""

    backend = _remote_backend(application["id"])
    if backend is None:
        return

    latest_sha = backend.get_file_sha()
    stored_sha = st.session_state.get(REMOTE_SHA_STATE_KEY)
    if check_stale and stored_sha is not None and stored_sha != latest_sha:
        st.session_state[REMOTE_SHA_STATE_KEY] = latest_sha
        raise ClubAppError("Application changed upstream. Refresh and retry.")

    response = backend.write_json(dict(application), message=message, sha=latest_sha)
    published_sha = response.get("content", {}).get("sha") if isinstance(response, dict) else None
    st.session_state[REMOTE_SHA_STATE_KEY] = published_sha or latest_sha


def show_validation_errors(errors: Sequence[str]) -> None:
    st.error(ALL_FIELDS_MESSAGE)
    for error in errors:
        st.caption(f"• {error}")


def handle_save(application_id: str, name: str, description: str, questions: Sequence[Mapping[str, Any]]) -> bool:
    """Validate the draft and store it. Returns ``True`` when it was saved."""

    try:
        ensure_application_valid(name, description, questions)
    except ValidationError as exc:
        st.session_state[VALIDATION_ERRORS_STATE_KEY] = exc.errors
        show_validation_errors(exc.errors)
        return False
    st.session_state.pop(VALIDATION_ERRORS_STATE_KEY, None)

    try:
        saved = get_store().save_draft(application_id, name, description, questions)
    except (OSError, NotFoundError) as exc:
        logger.exception("Saving application %s failed", application_id)
        st.error(f"Could not save application: {exc}")
        return False

    try:
        _mirror_to_github(saved, f"chore: save application draft {application_id}", check_stale=False)
    except (requests.RequestException, ClubAppError) as exc:
        logger.exception("Mirroring application %s failed", application_id)
        st.error(f"Saved locally, but could not write to GitHub: {exc}")

    set_draft_questions(saved["questions"], structural=True)
    st.success("Application saved.")
    return True


def handle_delete_application(application_id: str) -> bool:
    """Delete the application locally and from the mirror. Returns ``True`` when it is gone."""

    try:
        get_store().delete(application_id)
    except (OSError, NotFoundError) as exc:
        logger.exception("Deleting application %s failed", application_id)
        st.error(f"Could not delete application: {exc}")
        return False

    backend = _remote_backend(application_id)
    if backend is not None:
        try:
            backend.delete_file(f"chore: delete application {application_id}")
        except requests.RequestException as exc:
            logger.exception("Deleting mirrored application %s failed", application_id)
            st.error(f"Deleted locally, but could not delete from GitHub: {exc}")

    for key in (
        DRAFT_APPLICATION_STATE_KEY,
        DRAFT_QUESTIONS_STATE_KEY,
        EDITOR_SELECTED_STATE_KEY,
        REMOTE_SHA_STATE_KEY,
        VALIDATION_ERRORS_STATE_KEY,
    ):
        st.session_state.pop(key, None)
    return True


def make_publish_callback(application_id: str) -> Callable[[str, str, PublishConfirmation, List[dict]], Dict[str, Any]]:
    """Return the persistence callback the publish gate invokes."""

    def publish(
        name: str,
        description: str,
        confirmation: PublishConfirmation,
        questions: List[dict],
    ) -> Dict[str, Any]:
        store = get_store()
        published = store.prepare_published(application_id, name, description, confirmation.to_dict(), questions)
        _mirror_to_github(published, f"chore: publish application {application_id}", check_stale=True)
        store.write(published)
        logger.info("Published application %s", application_id)
        set_draft_questions(published["questions"], structural=True)
        return published

    return publish


def _render_move_controls(index: int, total: int, revision: int, column: Any) -> None:
    up_clicked = column.button("▲", key=f"move_up_{revision}_{index}", disabled=index == 0, help="Move question up")
    down_clicked = column.button(
        "▼", key=f"move_down_{revision}_{index}", disabled=index == total - 1, help="Move question down"
    )
    if up_clicked:
        set_draft_questions(move_question(get_draft_questions(), index, index - 1), structural=True)
        rerun_app()
    if down_clicked:
        set_draft_questions(move_question(get_draft_questions(), index, index + 1), structural=True)
        rerun_app()


def _apply_field(index: int, field_name: str, value: Any) -> None:
    questions = get_draft_questions()
    if questions[index].get(field_name) == value:
        return
    updated = set_question_field(questions, index, field_name, value)
    if field_name == "type" and not is_choice_type(value) and updated[index].get("answer_choices"):
        updated = set_question_field(updated, index, "answer_choices", [])
    set_draft_questions(updated)


def render_answer_choices_editor(question: Mapping[str, Any], index: int, revision: int) -> None:
    """Edit the ordered answer choices of a choice-type question."""

    choices = list(question.get("answer_choices") or [])
    st.caption("Answer choices")
    for choice_index, choice in enumerate(choices):
        text_col, remove_col = st.columns([6, 1])
        value = text_col.text_input(
            f"Choice {choice_index + 1}",
            value=choice,
            key=f"choice_{revision}_{index}_{choice_index}",
            label_visibility="collapsed",
            placeholder=f"Choice {choice_index + 1}",
        )
        if value != choice:
            set_draft_questions(set_answer_choice(get_draft_questions(), index, choice_index, value))
        if remove_col.button("✕", key=f"remove_choice_{revision}_{index}_{choice_index}", help="Remove choice"):
            set_draft_questions(remove_answer_choice(get_draft_questions(), index, choice_index), structural=True)
            rerun_app()
    if st.button("Add choice", key=f"add_choice_{revision}_{index}"):
        set_draft_questions(add_answer_choice(get_draft_questions(), index), structural=True)
        rerun_app()


def render_question_card(question: Mapping[str, Any], index: int, total: int, revision: int) -> None:
    with st.container(border=True):
        number_col, prompt_col, move_col, delete_col = st.columns([0.5, 6, 0.8, 0.8])
        number_col.markdown(f"**{index + 1}**")
        prompt = prompt_col.text_input(
            "Question",
            value=question.get("question") or "",
            key=f"prompt_{revision}_{index}",
            placeholder="Enter a question",
        )
        _apply_field(index, "question", prompt)
        _render_move_controls(index, total, revision, move_col)
        with delete_col:
            deleted = render_delete_control(
                f"delete_question_{revision}_{index}",
                "Are you sure you want to delete this question?",
                lambda: set_draft_questions(delete_question(get_draft_questions(), index), structural=True),
            )
        if deleted:
            st.warning("Question removed. Save or publish to persist changes.")
            rerun_app()

        type_col, required_col, position_col = st.columns([3, 2, 2])
        type_options: List[Optional[str]] = [None, *QUESTION_TYPES]
        current_type = question.get("type")
        selected_type = type_col.selectbox(
            "Answer type",
            type_options,
            index=type_options.index(current_type) if current_type in type_options else 0,
            format_func=lambda value: "— Select —" if value is None else question_type_label(value),
            key=f"type_{revision}_{index}",
        )
        if selected_type is not None:
            _apply_field(index, "type", selected_type)

        current_required = question.get("required")
        selected_required = required_col.selectbox(
            "Response",
            REQUIRED_OPTIONS,
            index=REQUIRED_OPTIONS.index(current_required) if current_required in REQUIRED_OPTIONS else 0,
            format_func=lambda value: REQUIRED_LABELS[value],
            key=f"required_{revision}_{index}",
        )
        if selected_required is not None:
            _apply_field(index, "required", selected_required)

        positions = list(range(total))
        target = position_col.selectbox(
            "Position",
            positions,
            index=index,
            format_func=lambda value: f"#{value + 1}",
            key=f"position_{revision}_{index}",
        )
        if target != index:
            set_draft_questions(move_question(get_draft_questions(), index, target), structural=True)
            rerun_app()

        if is_choice_type(selected_type):
            render_answer_choices_editor(get_draft_questions()[index], index, revision)


def render_questions_editor() -> None:
    questions = get_draft_questions()
    revision = st.session_state.get(DRAFT_REVISION_STATE_KEY, 0)

    with section_card("Questions", "Reorder, edit and remove the questions applicants will answer."):
        if not questions:
            st.info("No questions yet. Use Create Question to add one.")
        for index, question in enumerate(questions):
            render_question_card(question, index, len(questions), revision)

        if st.button("➕ Create Question", key=f"create_question_{revision}"):
            set_draft_questions(append_blank_question(get_draft_questions()), structural=True)
            rerun_app()


def render_publish_flow(application: Mapping[str, Any], name: str, description: str) -> None:
    """Draw whichever preview, confirmation or error dialog the gate has open."""

    gate = PublishGate(st.session_state)
    questions = get_draft_questions()

    if gate.state == PREVIEW_OPEN:
        with st.container(border=True):
            st.markdown("#### Preview")
            render_application_form(
                {**application, "name": name, "description": description, "questions": questions},
                {},
                readonly=True,
                key_prefix=f"preview_{application['id']}",
            )
            close_col, publish_col = st.columns(2)
            if close_col.button("Close preview"):
                gate.cancel()
                rerun_app()
            if publish_col.button("Continue to publish", type="primary"):
                gate.request_publish()
                rerun_app()

    elif gate.state == CONFIRM_OPEN:
        with st.form("publish_confirmation"):
            st.markdown("#### Publish application")
            st.caption("Publishing makes the application visible to every member.")
            deadline = st.date_input("Application deadline", value=None, min_value=date.today())
            acknowledged = st.checkbox("I understand that published applications cannot be unpublished.")
            confirm_col, cancel_col = st.columns(2)
            confirmed = confirm_col.form_submit_button("Publish", type="primary")
            cancelled = cancel_col.form_submit_button("Cancel")

        if cancelled:
            gate.cancel()
            rerun_app()
        if confirmed:
            confirmation = PublishConfirmation(deadline=deadline, acknowledged=acknowledged)
            problems = confirmation.problems(today=date.today())
            if problems:
                for problem in problems:
                    st.error(problem)
                return
            try:
                published = gate.confirm(
                    name, description, confirmation, questions, make_publish_callback(application["id"])
                )
            except (OSError, requests.RequestException, ClubAppError) as exc:
                logger.exception("Publishing application %s failed", application["id"])
                st.error(f"Could not publish application: {exc}")
                return
            if published:
                st.success("Application published.")
            else:
                st.session_state[VALIDATION_ERRORS_STATE_KEY] = collect_validation_errors(
                    name, description, questions
                )
                rerun_app()

    elif gate.state == ERROR_SHOWN:
        with st.container(border=True):
            show_validation_errors(st.session_state.get(VALIDATION_ERRORS_STATE_KEY, []))
            if st.button("OK"):
                gate.dismiss_error()
                rerun_app()


def render_responses(application: Mapping[str, Any]) -> None:
    root = data_root()
    responses = load_responses(root, application["id"])
    with st.expander(f"Responses ({len(responses)})"):
        if not responses:
            st.info("No responses submitted yet.")
            return
        rows = [
            {
                "Response ID": item.get("id"),
                "Submitted by": item.get("submitted_by") or "—",
                "Submitted at": item.get("submitted_at") or "—",
            }
            for item in responses
        ]
        st.dataframe(pd.DataFrame(rows), hide_index=True, width="stretch")
        for item in responses:
            response_id = str(item.get("id"))
            label_col, delete_col = st.columns([6, 1])
            label_col.write(f"`{response_id}` · {item.get('submitted_by') or 'anonymous'}")
            with delete_col:
                deleted = render_delete_control(
                    f"delete_response_{response_id}",
                    "Delete this response permanently?",
                    lambda response_id=response_id: delete_response_files(
                        response_id, responses_directory(root, application["id"])
                    ),
                )
            if deleted:
                st.success("Response deleted.")
                rerun_app()


def _select_application(store: ApplicationStore, club_id: str) -> Optional[Dict[str, Any]]:
    applications = store.list_applications_for_club(club_id)
    if st.button("New application", key=f"new_application_{club_id}"):
        try:
            created = store.create(club_id)
        except OSError as exc:
            logger.exception("Creating an application for %s failed", club_id)
            st.error(f"Could not create application: {exc}")
        else:
            st.session_state[EDITOR_SELECTED_STATE_KEY] = created["id"]
            rerun_app()

    if not applications:
        st.info("This club has no applications yet.")
        return None

    ids = [item["id"] for item in applications]
    selected_id = st.session_state.get(EDITOR_SELECTED_STATE_KEY)
    if selected_id not in ids:
        selected_id = ids[0]
    labels = {item["id"]: item.get("name") or "Untitled application" for item in applications}
    selected_id = st.selectbox(
        "Application",
        ids,
        index=ids.index(selected_id),
        format_func=lambda value: labels.get(value, value),
    )
    st.session_state[EDITOR_SELECTED_STATE_KEY] = selected_id
    return find_application(applications, selected_id)


def main() -> None:
    """Render the application editor page."""

    configure_logging()
    apply_app_theme(page_title="Application editor", page_icon="📝")
    caller = require_login()
    logout_button()
    page_header("Application editor", "Compose the questions applicants will answer.", icon="📝")

    roster = admin_roster()
    clubs = roster.scopes_for(caller)
    if not clubs:
        st.error("You are not an admin of any club.")
        return

    club_id = st.selectbox("Club", clubs, key=SELECTED_CLUB_STATE_KEY)
    store = get_store()
    application = _select_application(store, club_id)
    if application is None:
        return
    load_draft(application)

    badge_col, delete_col = st.columns([6, 1])
    badge_col.markdown(status_badge(application.get("status", "")), unsafe_allow_html=True)
    outcome: List[bool] = []
    with delete_col:
        deleted = render_delete_control(
            f"delete_application_{application['id']}",
            "Delete this application and its questions? This cannot be undone.",
            lambda: outcome.append(handle_delete_application(application["id"])),
        )
    if deleted and all(outcome):
        st.success("Application deleted.")
        rerun_app()

    name = st.text_input(
        "Application Name",
        value=application.get("name", ""),
        key=f"name_{application['id']}",
        placeholder="Enter Application Name",
    )
    description = st.text_area(
        "Application Description",
        value=application.get("description", ""),
        key=f"description_{application['id']}",
        placeholder="Enter an application description",
        height=120,
    )

    render_questions_editor()

    gate = PublishGate(st.session_state)
    save_col, preview_col, publish_col = st.columns(3)
    if save_col.button("Save", type="primary"):
        handle_save(application["id"], name, description, get_draft_questions())
    if preview_col.button("Preview", disabled=gate.state != IDLE):
        gate.open_preview()
        rerun_app()
    if publish_col.button("Publish", disabled=gate.state not in {IDLE, PREVIEW_OPEN}):
        gate.request_publish()
        rerun_app()

    render_publish_flow(application, name, description)
    render_responses(application)


if __name__ == "__main__":
    main()
