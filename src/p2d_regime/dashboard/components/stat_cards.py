"""
P2D REGIME - Stat Cards Component

Displays the six summary counts in a row.
"""

import streamlit as st

from p2d_regime.pipeline.table import TableStats

CARD_COLORS = {
    "Total Scenarios": "#6366f1",
    "Bullish": "#22c55e",
    "Bearish": "#ef4444",
    "Neutral": "#94a3b8",
    "Tradeable": "#8b5cf6",
    "Conflicts": "#f97316",
}


def render_stat_cards(stats: TableStats) -> None:
    """Render summary count cards."""
    values = [
        ("Total Scenarios", stats.total),
        ("Bullish", stats.bullish),
        ("Bearish", stats.bearish),
        ("Neutral", stats.neutral),
        ("Tradeable", stats.tradeable),
        ("Conflicts", stats.conflicted),
    ]
    cols = st.columns(len(values))

    for i, (name, count) in enumerate(values):
        with cols[i]:
            color = CARD_COLORS.get(name, "#6b7280")
            st.markdown(
                f"""
                <div style="
                    background: linear-gradient(135deg, {color}20, {color}10);
                    border-left: 4px solid {color};
                    padding: 1rem; border-radius: 0.5rem;
                ">
                    <div style="font-size:0.75rem; color:#6b7280;">{name}</div>
                    <div style="color:{color}; font-size:1.6rem; font-weight:bold;">{count}</div>
                </div>
                """,
                unsafe_allow_html=True,
            )
