"""Streamlit session helpers: login gate and the current caller."""

from __future__ import annotations

import logging

import streamlit as st

from lib.access import ANONYMOUS, AdminRoster, Caller, verify_password
from lib.config import admin_roster_config, user_password_hashes
from lib.question_types import AUTH_USER_STATE_KEY

logger = logging.getLogger(__name__)


def current_caller() -> Caller:
    """Return the caller for this browser session."""

    username = st.session_state.get(AUTH_USER_STATE_KEY)
    if isinstance(username, str) and username:
        return Caller(username)
    return ANONYMOUS


def admin_roster() -> AdminRoster:
    return AdminRoster(admin_roster_config())


def require_login() -> Caller:
    """Stop the page until the visitor signs in with a configured account."""

    caller = current_caller()
    if caller.is_authenticated:
        return caller

    password_hashes = user_password_hashes()
    if not password_hashes:
        st.error("No user accounts are configured.")
        st.stop()

    with st.form("login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", type="primary")

    if not submitted:
        st.stop()

    if verify_password(username.strip(), password, password_hashes):
        st.session_state[AUTH_USER_STATE_KEY] = username.strip()
        logger.info("User %s signed in", username.strip())
        return Caller(username.strip())

    logger.warning("Failed sign-in attempt for %s", username.strip() or "<blank>")
    st.error("Incorrect username or password.")
    st.stop()
    return ANONYMOUS


def rerun_app() -> None:
    """Trigger a Streamlit rerun using the available API."""

    if hasattr(st, "rerun"):
        st.rerun()
    elif hasattr(st, "experimental_rerun"):
        st.experimental_rerun()


def logout_button() -> None:
    caller = current_caller()
    if not caller.is_authenticated:
        return
    st.sidebar.caption(f"Signed in as **{caller.username}**")
    if st.sidebar.button("Sign out"):
        st.session_state.pop(AUTH_USER_STATE_KEY, None)
        rerun_app()
