from __future__ import annotations

import pandas as pd
import streamlit as st

from alphadash.analytics.features import feature_correlation_matrix, normalize_0_100
from alphadash.core.exceptions import AlphaDashError
from alphadash.data.provider import DATE_COLUMN
from dashboard.components.charts import render_heatmap, render_line_chart
from dashboard.components.error_banner import render_error
from dashboard.state.session import get_dataset, get_session_state


def _model_info_block(info) -> None:
    st.subheader("📊 Model Information")
    st.markdown(
        "\n".join(
            [
                f"- **Model Type:** {info.model_type.upper() or 'n/a'}",
                f"- **Training Window:** {info.train_window or 'n/a'} weeks",
                f"- **Horizon:** {info.horizon or 'n/a'} weeks",
                f"- **Features:** {len(info.features_used)}",
                f"- **Alpha:** {info.model_params.get('alpha', 'n/a')}",
                f"- **OOS Cutoff:** {info.oos_cutoff_date:%Y-%m-%d}",
            ]
        )
    )


def render() -> None:
    st.title("Analytics")
    try:
        dataset = get_dataset()
    except AlphaDashError as err:
        render_error(err)
        return

    info = dataset.model_info
    frame = dataset.frame
    features = [f for f in info.features_used if f in frame.columns]
    _model_info_block(info)

    st.subheader("📈 Feature Time Series Comparison")
    if len(features) >= 1:
        cols = st.columns(2)
        first = cols[0].selectbox("Feature 1", features, index=0)
        second = cols[1].selectbox("Feature 2", features, index=min(1, len(features) - 1))
        st.caption("Both features are normalized to a 0-100 scale for visual comparison")
        compare = pd.concat(
            [
                pd.DataFrame(
                    {
                        "date": frame[DATE_COLUMN],
                        "value": normalize_0_100(frame[name]),
                        "feature": name,
                    }
                )
                for name in dict.fromkeys([first, second])
            ],
            ignore_index=True,
        )
        render_line_chart(
            "Feature Comparison Over Time",
            compare,
            x="date",
            y="value",
            color="feature",
            y_title="Normalized Value (0-100)",
        )
    else:
        st.info("The model metadata lists no features present in the dataset.")

    state = get_session_state()
    if not state.selected_features:
        state.selected_features = features[:5]
    state.selected_features = st.multiselect(
        "Select features for the correlation matrix",
        options=features,
        default=[f for f in state.selected_features if f in features],
    )
    render_heatmap(
        "🔗 Feature Correlations",
        feature_correlation_matrix(frame, state.selected_features),
    )
