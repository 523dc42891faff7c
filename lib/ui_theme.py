"""Shared look and feel for the club application pages."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional

import streamlit as st


_THEME_CSS = """
<style>
:root {
    --club-primary: #1D4ED8;
    --club-secondary: #7C3AED;
    --club-surface: rgba(255, 255, 255, 0.94);
    --club-border: rgba(29, 78, 216, 0.18);
    --club-shadow: 0 16px 36px rgba(15, 23, 42, 0.08);
    --club-text: #111827;
    --club-muted: #4B5563;
}

html, body {
    font-family: "Inter", "Segoe UI", system-ui, -apple-system, sans-serif;
    color: var(--club-text);
}

[data-testid="stAppViewContainer"] {
    background: linear-gradient(135deg, #EFF6FF 0%, #F5F3FF 45%, #FFFFFF 100%);
}

.block-container {
    padding-top: 2rem;
    padding-bottom: 4rem;
}

.club-header {
    display: flex;
    align-items: center;
    gap: 1.25rem;
    padding: 1.5rem 2rem;
    background: linear-gradient(90deg, var(--club-primary), var(--club-secondary));
    border-radius: 1.5rem;
    box-shadow: var(--club-shadow);
    margin-bottom: 1.75rem;
    color: #FFFFFF;
}

.club-header__icon {
    font-size: 2.5rem;
    line-height: 1;
}

.club-header__title {
    margin: 0;
    font-size: 2rem;
    font-weight: 800;
    letter-spacing: 0.02em;
    text-transform: uppercase;
    color: #FFFFFF;
}

.club-header__subtitle {
    margin: 0.25rem 0 0 0;
    color: rgba(255, 255, 255, 0.85);
}

.club-section-card {
    padding: 1.25rem 1.5rem;
    border-radius: 1.25rem;
    border: 1px solid var(--club-border);
    background: var(--club-surface);
    box-shadow: var(--club-shadow);
    margin-bottom: 1.25rem;
}

.club-section-card > h3 {
    margin-top: 0;
    font-size: 1.15rem;
}

.club-section-card__description {
    margin-top: -0.35rem;
    color: var(--club-muted);
}

.club-status {
    display: inline-block;
    padding: 0.15rem 0.6rem;
    border-radius: 999px;
    font-size: 0.8rem;
    font-weight: 600;
    text-transform: uppercase;
}

.club-status--draft {
    background: #FEF3C7;
    color: #92400E;
}

.club-status--published {
    background: #D1FAE5;
    color: #065F46;
}
</style>
"""


def apply_app_theme(page_title: str, page_icon: Optional[str] = None) -> None:
    """Set up consistent page configuration and inject the shared CSS theme."""

    st.set_page_config(
        page_title=page_title,
        page_icon=page_icon,
        layout="wide",
        initial_sidebar_state="expanded",
    )
    st.markdown(_THEME_CSS, unsafe_allow_html=True)


def page_header(title: str, subtitle: Optional[str] = None, icon: Optional[str] = None) -> None:
    """Render the gradient page header."""

    icon_markup = f"<span class='club-header__icon'>{icon}</span>" if icon else ""
    subtitle_markup = f"<p class='club-header__subtitle'>{subtitle}</p>" if subtitle else ""
    st.markdown(
        f"""
        <div class="club-header">
            {icon_markup}
            <div>
                <h1 class="club-header__title">{title}</h1>
                {subtitle_markup}
            </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def status_badge(status: str) -> str:
    """Return HTML for a draft/published badge."""

    modifier = "published" if status == "published" else "draft"
    return f"<span class='club-status club-status--{modifier}'>{modifier}</span>"


@contextmanager
def section_card(
    title: Optional[str] = None,
    description: Optional[str] = None,
) -> Iterator[Any]:
    """Render a styled container with optional title and description."""

    container = st.container()
    container.markdown("<div class='club-section-card'>", unsafe_allow_html=True)
    if title:
        container.markdown(f"<h3>{title}</h3>", unsafe_allow_html=True)
    if description:
        container.markdown(
            f"<p class='club-section-card__description'>{description}</p>",
            unsafe_allow_html=True,
        )
    try:
        yield container
    finally:
        container.markdown("</div>", unsafe_allow_html=True)
