"""Streamlit entrypoint delegating to the Home page."""

from importlib import import_module

import streamlit as st

from lib.config import configure_logging


def main() -> None:
    """Render the Home page when the app entrypoint is loaded."""

    configure_logging()
    try:
        home_module = import_module("Home")
    except ModuleNotFoundError:
        st.error("Home page module not found.")
        return

    home_module.main()


if __name__ == "__main__":
    main()
