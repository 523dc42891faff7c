"""Runtime configuration read from Streamlit secrets, plus logging setup."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional

import streamlit as st

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_GITHUB_PATH = "applications/{application_id}/application.json"
DEFAULT_API_URL = "https://api.github.com"

_logging_configured = False


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging once per process."""

    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)
    _logging_configured = True


def _secret(name: str, default: Any = None) -> Any:
    """Return the secret stored under ``name`` or ``default``.

    A missing ``secrets.toml`` is treated as an empty configuration.
    """

    try:
        return st.secrets.get(name, default)  # type: ignore[arg-type]
    except FileNotFoundError:
        return default


def _secrets_dict(name: str) -> Dict[str, Any]:
    """Return a mapping stored under ``name`` in Streamlit secrets."""

    value = _secret(name, {})
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def data_root() -> Path:
    """Return the directory local JSON storage lives under."""

    configured = _secret("data_root")
    if isinstance(configured, str) and configured.strip():
        return Path(configured.strip())
    return Path(".")


def get_github_config() -> Optional[Dict[str, Any]]:
    """Return GitHub mirror configuration if available."""

    secrets = _secrets_dict("github")
    token = secrets.get("token")
    repo = secrets.get("repo")
    path = secrets.get("path", DEFAULT_GITHUB_PATH)
    branch = secrets.get("branch", "main")
    api_url = secrets.get("api_url", DEFAULT_API_URL)

    if not (token and repo and path):
        token = _secret("github_token", token)
        repo = _secret("github_repo", repo)
        path = _secret("github_file_path", path)
        branch = _secret("github_branch", branch)
        api_url = _secret("github_api_url", api_url)

    if token and repo and path:
        return {
            "token": token,
            "repo": repo,
            "path": path,
            "branch": branch,
            "api_url": api_url,
        }
    return None


def user_password_hashes() -> Dict[str, str]:
    """Return ``username -> sha256 hex digest`` from the ``users`` table."""

    return {str(user): str(digest) for user, digest in _secrets_dict("users").items()}


def admin_roster_config() -> Dict[str, List[str]]:
    """Return ``scope id -> admin usernames`` from the ``admins`` table."""

    roster: Dict[str, List[str]] = {}
    for scope_id, members in _secrets_dict("admins").items():
        if isinstance(members, str):
            members = [members]
        if not isinstance(members, (list, tuple)):
            continue
        roster[str(scope_id)] = [str(member) for member in members if str(member).strip()]
    return roster
