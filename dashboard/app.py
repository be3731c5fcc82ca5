from __future__ import annotations

import streamlit as st
from loguru import logger

from alphadash import APP_VERSION
from alphadash.core.exceptions import ConfigError
from alphadash.data.provider import DatasetProvider
from alphadash.logging_utils import setup_logging
from alphadash.settings import get_settings
from dashboard.state.session import (
    get_session_state,
    has_provider,
    set_provider,
    set_settings,
)
from dashboard.views import analytics, overview, strategy

PAGE_MAP = {
    "Overview": overview.render,
    "Strategy": strategy.render,
    "Analytics": analytics.render,
}


def main() -> None:
    st.set_page_config(page_title="Alpha Dashboard", layout="wide")
    setup_logging()
    settings = get_settings()
    set_settings(settings)
    if not has_provider():
        try:
            set_provider(DatasetProvider.from_settings(settings))
        except ConfigError as exc:
            st.error(f"Configuration error: {exc}")
            logger.error("dashboard failed fast: {}", exc)
            return

    _ = get_session_state()
    st.sidebar.title("Navigation")
    st.sidebar.caption(
        f"Source: {settings.data.source}\n\nVersion: {APP_VERSION}"
    )
    page_name = st.sidebar.radio("Go to", list(PAGE_MAP.keys()), key="nav")
    PAGE_MAP[page_name]()


if __name__ == "__main__":
    main()
