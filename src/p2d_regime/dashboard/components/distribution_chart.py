"""
P2D REGIME - Distribution Chart Component

Stacked bars: scenario count per strength tier, split by bias.
"""

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

BIAS_COLORS = {"BULLISH": "#22c55e", "BEARISH": "#ef4444", "NEUTRAL": "#94a3b8"}
STRENGTH_ORDER = ["VERY STRONG", "STRONG", "MODERATE", "WEAK", "CONFLICTED"]


def render_distribution_chart(frame: pd.DataFrame) -> None:
    """Render bias x strength distribution for the given rows."""
    fig = go.Figure()

    for bias, color in BIAS_COLORS.items():
        subset = frame[frame["bias"] == bias]
        if subset.empty:
            continue
        counts = subset["bias_strength"].value_counts()
        fig.add_trace(
            go.Bar(
                x=STRENGTH_ORDER,
                y=[int(counts.get(s, 0)) for s in STRENGTH_ORDER],
                name=bias,
                marker=dict(color=color),
            )
        )

    fig.update_layout(
        barmode="stack",
        xaxis_title="Strength",
        yaxis_title="Scenarios",
        height=300,
        margin=dict(l=0, r=0, t=30, b=0),
        showlegend=True,
    )

    st.plotly_chart(fig, use_container_width=True)
