"""
P2D REGIME - Score Gauge Component

Semicircular gauge: bullish share of the combined score.
"""

import plotly.graph_objects as go
import streamlit as st

BIAS_COLORS = {
    "BULLISH": "#22c55e",
    "BEARISH": "#ef4444",
    "NEUTRAL": "#94a3b8",
}


def render_score_gauge(bullish: int, bearish: int, bias: str, strength: str) -> None:
    """Render bull/bear balance gauge. 50 = balanced."""
    total = bullish + bearish
    value = 50.0 if total == 0 else bullish / total * 100.0
    color = BIAS_COLORS.get(bias, "#6b7280")

    fig = go.Figure(
        go.Indicator(
            mode="gauge",
            value=value,
            title={"text": f"Bull {bullish} / Bear {bearish}", "font": {"size": 14}},
            gauge={
                "axis": {"range": [0, 100], "visible": False},
                "bar": {"color": "rgba(0,0,0,0)"},
                "bgcolor": "#f3f4f6",
                "steps": [
                    {"range": [0, 45], "color": "#ef4444"},
                    {"range": [45, 55], "color": "#94a3b8"},
                    {"range": [55, 100], "color": "#22c55e"},
                ],
                "threshold": {
                    "line": {"color": "#1f2937", "width": 4},
                    "thickness": 0.8,
                    "value": value,
                },
            },
        )
    )

    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        height=200,
        margin=dict(l=20, r=20, t=50, b=10),
    )

    st.plotly_chart(fig, use_container_width=True)

    st.markdown(
        f"<h4 style='text-align:center; color:{color};'>{bias}</h4>"
        f"<p style='text-align:center; color:#6b7280;'>Strength: {strength}</p>",
        unsafe_allow_html=True,
    )
