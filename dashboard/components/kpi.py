from __future__ import annotations

import streamlit as st

POSITIVE = "normal"


def render_kpi(
    label: str,
    value: str,
    delta: str | None = None,
    *,
    help: str | None = None,
    delta_color: str = POSITIVE,
) -> None:
    st.metric(label, value, delta, help=help, delta_color=delta_color)
