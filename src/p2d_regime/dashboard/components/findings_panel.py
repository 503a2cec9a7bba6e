"""
P2D REGIME - Findings Panel Component

Displays rendered signals, warnings and conflicts for one scenario.
"""

import streamlit as st


def render_findings_panel(signals: list[str], warnings: list[str], conflicts: list[str]) -> None:
    """Render the three finding lists."""
    st.markdown("**Signals**")
    for signal in signals:
        st.markdown(f"- {signal}")

    if warnings:
        st.markdown("**Warnings**")
        for warning in warnings:
            st.markdown(f"- {warning}")

    if conflicts:
        st.markdown("**Conflicts**")
        for conflict in conflicts:
            st.error(conflict)
