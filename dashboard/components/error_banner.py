from __future__ import annotations

import streamlit as st

from alphadash.core.exceptions import (
    AlphaDashError,
    ConfigError,
    DataValidationError,
    DatasetNotFoundError,
)

ERROR_MESSAGES = {
    ConfigError: "Data source is not configured. Check DATA_SOURCE and its settings.",
    DatasetNotFoundError: "Dataset file not found. Check DATA_CSV_FILE / DATA_JSON_FILE.",
    DataValidationError: "Dataset is malformed. Check the CSV columns and model JSON.",
}


def render_error(error: AlphaDashError) -> None:
    hint = next(
        (msg for kind, msg in ERROR_MESSAGES.items() if isinstance(error, kind)),
        "Failed to load the dataset. Retry shortly.",
    )
    st.error(f"{hint}\nDetails: {error}")
