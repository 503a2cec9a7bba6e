"""
P2D REGIME Streamlit Dashboard.

Run with: streamlit run src/p2d_regime/dashboard/app.py
"""

import sys
from pathlib import Path

# Ensure p2d_regime is importable when run via `streamlit run`
_SRC_DIR = str(Path(__file__).resolve().parents[2])
if _SRC_DIR not in sys.path:
    sys.path.insert(0, _SRC_DIR)

import streamlit as st

from p2d_regime.dashboard.components.distribution_chart import render_distribution_chart
from p2d_regime.dashboard.components.findings_panel import render_findings_panel
from p2d_regime.dashboard.components.score_gauge import render_score_gauge
from p2d_regime.dashboard.components.stat_cards import render_stat_cards
from p2d_regime.explain.renderer import render_row
from p2d_regime.pipeline.table import ReferenceTable, SortKey

BIAS_OPTIONS = ["all", "bullish", "bearish", "neutral"]
STRENGTH_OPTIONS = ["all", "very strong", "strong", "moderate", "weak"]
SORT_LABELS = {
    SortKey.SCORE: "Score Difference",
    SortKey.BULLISH: "Bullish Score",
    SortKey.BEARISH: "Bearish Score",
}
ACTION_ICONS = {
    "LOOK FOR LONG": "🟢",
    "LOOK FOR SHORT": "🔴",
    "DO NOT TRADE": "🟠",
}


@st.cache_resource
def load_table() -> ReferenceTable:
    """Build once per process. Rows are immutable, so sharing is safe."""
    table = ReferenceTable()
    table.rows()
    return table


def main() -> None:
    st.set_page_config(
        page_title="P2D REGIME",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    st.title("P2D Regime Analyzer")
    st.markdown("**Volume Rising Scenario Explorer · GBPUSD 1H**")

    table = load_table()

    # Sidebar
    with st.sidebar:
        st.header("Filters")
        bias = st.radio("Bias", BIAS_OPTIONS, format_func=str.upper, horizontal=True)
        strength = st.radio("Strength", STRENGTH_OPTIONS, format_func=str.upper)
        sort_by = st.selectbox("Sort by", list(SORT_LABELS), format_func=SORT_LABELS.get)
        max_rows = st.slider("Rows shown", min_value=10, max_value=648, value=50, step=10)

        st.divider()

        st.markdown(
            """
            **Scoring:**
            - Band 1: weight 3 (primary bias)
            - Band 2: weight 2 (confirmation)
            - ST vs P3D VWAP: weight 3 (momentum)
            - Containment: +1 to both sides
            - Price position: weight 1-2

            Any conflict blocks trading.
            """
        )

    # Row 1: Stats
    render_stat_cards(table.stats())

    rows = table.query(bias=bias, strength=strength, sort_by=sort_by)

    # Row 2: Distribution of the current selection
    st.markdown("### Bias by Strength")
    if rows:
        render_distribution_chart(table.to_frame(rows))

    st.caption(f"Showing {len(rows)} of {table.stats().total} scenarios")

    # Row 3: Scenario list
    for row in rows[:max_rows]:
        record = render_row(row)
        icon = ACTION_ICONS.get(record["trade_action"], "⚪")
        header = (
            f"#{record['id']} · {record['bias']} · {record['bias_strength']} · "
            f"{icon} {record['trade_action']}"
        )
        with st.expander(header):
            col1, col2, col3 = st.columns([1, 1, 2])
            with col1:
                st.markdown("**Indicator States**")
                st.markdown(
                    f"- {record['band1_label']}\n"
                    f"- {record['band2_label']}\n"
                    f"- ST {record['trend']}\n"
                    f"- {record['containment']}\n"
                    f"- {record['price_position_label']}"
                )
                st.markdown(f"**Entry:** {record['entry_type']}")
            with col2:
                render_score_gauge(
                    record["bullish_score"],
                    record["bearish_score"],
                    record["bias"],
                    record["bias_strength"],
                )
            with col3:
                render_findings_panel(record["signals"], record["warnings"], record["conflicts"])


if __name__ == "__main__":
    main()
