from __future__ import annotations

from typing import Optional, Sequence

import altair as alt
import pandas as pd
import streamlit as st


def render_line_chart(
    title: str,
    frame: pd.DataFrame,
    *,
    x: str,
    y: str,
    color: Optional[str] = None,
    y_title: Optional[str] = None,
    rule_at: Optional[pd.Timestamp] = None,
    markers: Optional[pd.DataFrame] = None,
) -> None:
    """Long-format line chart with optional vertical rule and point markers."""
    st.subheader(title)
    if frame.empty:
        st.info("No data available")
        return

    encoding = {
        "x": alt.X(f"{x}:T", title="Date"),
        "y": alt.Y(f"{y}:Q", title=y_title or y, scale=alt.Scale(zero=False)),
        "tooltip": [
            alt.Tooltip(f"{x}:T", title="Date"),
            alt.Tooltip(f"{y}:Q", title=y_title or y, format=",.4f"),
        ],
    }
    if color:
        encoding["color"] = alt.Color(f"{color}:N", title=None)
        encoding["tooltip"].append(alt.Tooltip(f"{color}:N"))
    layers = [alt.Chart(frame).mark_line(strokeWidth=2).encode(**encoding)]

    if markers is not None and not markers.empty:
        layers.append(
            alt.Chart(markers)
            .mark_point(filled=True, size=90)
            .encode(
                x=f"{x}:T",
                y=f"{y}:Q",
                shape=alt.Shape(
                    "marker:N",
                    scale=alt.Scale(
                        domain=["BUY", "SELL"], range=["triangle-up", "triangle-down"]
                    ),
                    title=None,
                ),
                fill=alt.Color(
                    "marker:N",
                    scale=alt.Scale(domain=["BUY", "SELL"], range=["#00ff00", "#ff0000"]),
                    legend=None,
                ),
            )
        )
    if rule_at is not None:
        rule = pd.DataFrame({x: [rule_at], "label": ["OOS Start"]})
        layers.append(
            alt.Chart(rule).mark_rule(strokeDash=[6, 4], color="#aaaaaa").encode(x=f"{x}:T")
        )

    st.altair_chart(alt.layer(*layers).interactive(), use_container_width=True)


def render_heatmap(title: str, matrix: pd.DataFrame) -> None:
    st.subheader(title)
    if matrix.empty:
        st.info("Select at least one numeric feature")
        return
    long = (
        matrix.rename_axis("row")
        .reset_index()
        .melt(id_vars="row", var_name="col", value_name="corr")
    )
    order: Sequence[str] = list(matrix.columns)
    base = alt.Chart(long).encode(
        x=alt.X("col:N", sort=order, title=None),
        y=alt.Y("row:N", sort=order, title=None),
    )
    cells = base.mark_rect().encode(
        color=alt.Color(
            "corr:Q", scale=alt.Scale(scheme="redblue", domain=[-1, 1]), title="Corr"
        ),
        tooltip=["row", "col", alt.Tooltip("corr:Q", format=".2f")],
    )
    text = base.mark_text(fontSize=10).encode(text=alt.Text("corr:Q", format=".2f"))
    st.altair_chart(cells + text, use_container_width=True)
