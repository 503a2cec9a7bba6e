"""
P2D REGIME - Explanation Renderer

Turns structured findings and axis states into display strings.
This is the only module that holds user-facing text.
"""

from __future__ import annotations

from p2d_regime.types import (
    AnalyzedScenario,
    BandPosition,
    Finding,
    FindingKind,
    PricePosition,
    Rule,
    Severity,
)

RULE_LABELS = {
    Rule.BAND1: "Band 1",
    Rule.BAND2: "Band 2",
    Rule.TREND: "Momentum",
    Rule.CONTAINMENT: "Structure",
    Rule.PRICE: "Price",
}

MESSAGES = {
    # Band 1
    "BAND1_HIGH": "Primary bullish bias (HIGH BAND 1)",
    "BAND1_LOW": "Primary bearish bias (LOW BAND 1)",
    "BAND1_NEUTRAL": "Neutral zone - no clear bias",
    # Band 2
    "BAND2_HIGH": "Bullish confirmation (HIGH BAND 2)",
    "BAND2_LOW": "Bearish confirmation (LOW BAND 2)",
    "BAND2_NEUTRAL": "Neutral confirmation",
    # SuperTrend vs P3D VWAP
    "TREND_ABOVE": "Strong bullish momentum (ST ABOVE P3D)",
    "TREND_BELOW": "Strong bearish momentum (ST BELOW P3D)",
    "TREND_WITHIN": "Ranging momentum (ST WITHIN P3D)",
    # Containment
    "CONTAINMENT_CLOSE_IN_VWAP": "Compression (CLOSE IN VWAP) - Breakout pending",
    "CONTAINMENT_VWAP_IN_CLOSE": "Expansion phase (VWAP IN CLOSE) - Trending",
    "CONTAINMENT_SEPARATED": "Clear separation - Strong trend expected",
    "CONTAINMENT_OVERLAP": "Partial overlap - Transitional",
    # Price position
    "PRICE_ABOVE_BOTH": "Above ST & VWAP - Bullish positioning",
    "PRICE_BELOW_BOTH": "Below ST & VWAP - Bearish positioning",
    "PRICE_ABOVE_TREND_BELOW_REF": "Above ST but below VWAP - Mixed signal",
    "PRICE_BELOW_TREND_ABOVE_REF": "Below ST but above VWAP - Mixed signal",
    "PRICE_PULLBACK_TO_TREND_FLOOR": "Pullback to ST support zone",
    "PRICE_REJECTION_FROM_TREND_CEILING": "Rejection from ST resistance zone",
    # Conflicts
    "CONFLICT_BAND1_BULL_TREND_BELOW": "Band 1 bullish but ST below P3D VWAP",
    "CONFLICT_BAND1_BEAR_TREND_ABOVE": "Band 1 bearish but ST above P3D VWAP",
    "CONFLICT_BAND1_BAND2": "Band 1/2 conflict: Different bias levels",
}

PRICE_LABELS = {
    PricePosition.ABOVE_BOTH: "Above ST Avg & VWAP",
    PricePosition.ABOVE_TREND_BELOW_REF: "Above ST Avg, Below VWAP",
    PricePosition.BELOW_TREND_ABOVE_REF: "Below ST Avg, Above VWAP",
    PricePosition.BELOW_BOTH: "Below Both ST Avg & VWAP",
    PricePosition.PULLBACK_TO_TREND_FLOOR: "Between ST Min & Avg",
    PricePosition.REJECTION_FROM_TREND_CEILING: "Between ST Max & Avg",
}


def render_finding(finding: Finding) -> str:
    """
    Render one finding.

    Signals and warnings are prefixed with their rule label,
    MAJOR conflicts with "MAJOR:". Minor conflicts carry no prefix.
    """
    message = MESSAGES[finding.code]
    if finding.kind == FindingKind.CONFLICT:
        if finding.severity == Severity.MAJOR:
            return f"MAJOR: {message}"
        return message
    return f"{RULE_LABELS[finding.rule]}: {message}"


def band_label(position: BandPosition, band: int) -> str:
    """e.g. band_label(BandPosition.HIGH, 1) -> 'HIGH BAND 1'."""
    if position == BandPosition.NEUTRAL:
        return f"NEUTRAL {band}"
    return f"{position.name} BAND {band}"


def price_label(position: PricePosition) -> str:
    return PRICE_LABELS[position]


def render_row(row: AnalyzedScenario) -> dict:
    """
    Flatten an analyzed scenario into a display record.

    Same keys as AnalyzedScenario.to_dict(), with findings rendered to text
    and the band / price axes given their display labels.
    """
    record = row.to_dict()
    a = row.analysis
    s = row.scenario
    record.update(
        {
            "band1_label": band_label(s.band1, 1),
            "band2_label": band_label(s.band2, 2),
            "price_position_label": price_label(s.price_position),
            "signals": [render_finding(f) for f in a.signals],
            "warnings": [render_finding(f) for f in a.warnings],
            "conflicts": [render_finding(f) for f in a.conflicts],
        }
    )
    return record
