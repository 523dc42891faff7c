"""Yes/no confirmation in front of a destructive callback."""

from __future__ import annotations

from typing import Any, Callable, MutableMapping

import streamlit as st

from lib.session import rerun_app

DELETE_STATE_PREFIX = "delete_confirmation"


class DeleteConfirmation:
    """Open/closed flag for one delete dialog plus the callback it guards."""

    def __init__(
        self,
        state: MutableMapping[str, Any],
        key: str,
        handle_delete: Callable[[], Any],
    ) -> None:
        self._state = state
        self._flag_key = f"{DELETE_STATE_PREFIX}::{key}"
        self._handle_delete = handle_delete

    @property
    def is_open(self) -> bool:
        return bool(self._state.get(self._flag_key))

    def request(self) -> Callable[[], bool]:
        """Open the dialog and return the function that confirms it."""

        self._state[self._flag_key] = True
        return self.confirm

    def confirm(self) -> bool:
        """Run the delete callback if the dialog is open, then close it."""

        if not self.is_open:
            return False
        self._state.pop(self._flag_key, None)
        self._handle_delete()
        return True

    def dismiss(self) -> None:
        self._state.pop(self._flag_key, None)


def render_delete_control(
    key: str,
    dialog_description: str,
    handle_delete: Callable[[], Any],
    *,
    container: Any = None,
) -> bool:
    """Render a trash button that asks for confirmation before ``handle_delete``.

    Returns ``True`` on the run where the delete was confirmed.
    """

    target = container if container is not None else st
    control = DeleteConfirmation(st.session_state, key, handle_delete)

    if not control.is_open:
        if target.button("🗑️", key=f"{key}_trash", help="Delete"):
            control.request()
            rerun_app()
        return False

    panel = target.container(border=True)
    panel.markdown("**Confirm Delete**")
    panel.caption(dialog_description)
    confirm_col, cancel_col = panel.columns(2)
    if confirm_col.button("Confirm", key=f"{key}_confirm", type="primary"):
        return control.confirm()
    if cancel_col.button("Cancel", key=f"{key}_cancel"):
        control.dismiss()
        rerun_app()
    return False


__all__ = ["DeleteConfirmation", "render_delete_control"]
