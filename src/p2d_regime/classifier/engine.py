"""
P2D REGIME - Deterministic Scenario Analyzer

Rule blocks (evaluated in order, order only affects finding order):
1. Band 1 position       - primary bias        (weight 3)
2. Band 2 position       - confirmation        (weight 2)
3. SuperTrend vs P3D     - momentum            (weight 3)
4. Band containment      - structure           (weight 1, added to BOTH sides)
5. Price position        - only when volume just turned rising (weight 1-2)

Conflicts are detected after scoring and never change scores.
They only gate the trade recommendation.

No state. No I/O. Each scenario is independent.
"""

from __future__ import annotations

from p2d_regime.config import RegimeConfig, RuleWeights, StrengthThresholds
from p2d_regime.errors import InvalidScenario
from p2d_regime.types import (
    AnalysisResult,
    BandPosition,
    Bias,
    Containment,
    EntryType,
    Finding,
    FindingKind,
    PricePosition,
    Rule,
    Scenario,
    Severity,
    Strength,
    TradeAction,
    TrendPosition,
)

_SIGNAL = FindingKind.SIGNAL
_WARNING = FindingKind.WARNING

_PULLBACK_LONG = (PricePosition.PULLBACK_TO_TREND_FLOOR, PricePosition.ABOVE_TREND_BELOW_REF)
_PULLBACK_SHORT = (PricePosition.REJECTION_FROM_TREND_CEILING, PricePosition.BELOW_TREND_ABOVE_REF)


def analyze(scenario: Scenario, config: RegimeConfig | None = None) -> AnalysisResult:
    """
    Score and classify a single scenario.

    Args:
        scenario: Scenario with every axis inside its enumerated domain.
        config: Weights and strength thresholds (default: RegimeConfig()).

    Returns:
        AnalysisResult with scores, bias, strength, findings and recommendation.

    Raises:
        InvalidScenario: if any axis value is outside its domain.
    """
    config = config or RegimeConfig()
    validate_scenario(scenario)

    bullish, bearish, findings = score_scenario(scenario, config.weights)
    conflicts = detect_conflicts(scenario)
    bias, strength = classify_bias(bullish, bearish, config.strength)
    trade_action, entry_type = recommend_trade(scenario, bias, strength, conflicts)

    return AnalysisResult(
        bullish_score=bullish,
        bearish_score=bearish,
        bias=bias,
        strength=strength,
        signals=tuple(f for f in findings if f.kind == _SIGNAL),
        warnings=tuple(f for f in findings if f.kind == _WARNING),
        conflicts=conflicts,
        trade_action=trade_action,
        entry_type=entry_type,
    )


def validate_scenario(scenario: Scenario) -> None:
    """Fail fast on out-of-domain axis values."""
    checks = [
        ("containment", scenario.containment, Containment),
        ("trend", scenario.trend, TrendPosition),
        ("band1", scenario.band1, BandPosition),
        ("band2", scenario.band2, BandPosition),
        ("price_position", scenario.price_position, PricePosition),
    ]
    for name, value, axis in checks:
        if not isinstance(value, axis):
            raise InvalidScenario(
                f"scenario {scenario.id}: {name}={value!r} is not a {axis.__name__}"
            )
    if not isinstance(scenario.volume_just_turned, bool):
        raise InvalidScenario(
            f"scenario {scenario.id}: volume_just_turned={scenario.volume_just_turned!r} is not a bool"
        )


def score_scenario(
    scenario: Scenario, weights: RuleWeights
) -> tuple[int, int, list[Finding]]:
    """
    Run the five rule blocks.

    Returns:
        (bullish_score, bearish_score, findings in rule order)
    """
    bullish = 0
    bearish = 0
    findings: list[Finding] = []

    # --- Band 1: primary bias ---
    if scenario.band1 == BandPosition.HIGH:
        bullish += weights.band1
        findings.append(Finding(Rule.BAND1, "BAND1_HIGH", _SIGNAL))
    elif scenario.band1 == BandPosition.LOW:
        bearish += weights.band1
        findings.append(Finding(Rule.BAND1, "BAND1_LOW", _SIGNAL))
    elif scenario.band1 == BandPosition.NEUTRAL:
        findings.append(Finding(Rule.BAND1, "BAND1_NEUTRAL", _WARNING))
    else:
        raise InvalidScenario(f"unhandled band1 {scenario.band1!r}")

    # --- Band 2: confirmation ---
    if scenario.band2 == BandPosition.HIGH:
        bullish += weights.band2
        findings.append(Finding(Rule.BAND2, "BAND2_HIGH", _SIGNAL))
    elif scenario.band2 == BandPosition.LOW:
        bearish += weights.band2
        findings.append(Finding(Rule.BAND2, "BAND2_LOW", _SIGNAL))
    elif scenario.band2 == BandPosition.NEUTRAL:
        findings.append(Finding(Rule.BAND2, "BAND2_NEUTRAL", _WARNING))
    else:
        raise InvalidScenario(f"unhandled band2 {scenario.band2!r}")

    # --- SuperTrend vs P3D VWAP: momentum ---
    if scenario.trend == TrendPosition.ABOVE:
        bullish += weights.trend
        findings.append(Finding(Rule.TREND, "TREND_ABOVE", _SIGNAL))
    elif scenario.trend == TrendPosition.BELOW:
        bearish += weights.trend
        findings.append(Finding(Rule.TREND, "TREND_BELOW", _SIGNAL))
    elif scenario.trend == TrendPosition.WITHIN:
        findings.append(Finding(Rule.TREND, "TREND_WITHIN", _WARNING))
    else:
        raise InvalidScenario(f"unhandled trend {scenario.trend!r}")

    # --- Containment: structure, symmetric ---
    if scenario.containment == Containment.CLOSE_IN_VWAP:
        findings.append(Finding(Rule.CONTAINMENT, "CONTAINMENT_CLOSE_IN_VWAP", _WARNING))
    elif scenario.containment == Containment.VWAP_IN_CLOSE:
        bullish += weights.containment
        bearish += weights.containment
        findings.append(Finding(Rule.CONTAINMENT, "CONTAINMENT_VWAP_IN_CLOSE", _SIGNAL))
    elif scenario.containment == Containment.SEPARATED:
        bullish += weights.containment
        bearish += weights.containment
        findings.append(Finding(Rule.CONTAINMENT, "CONTAINMENT_SEPARATED", _SIGNAL))
    elif scenario.containment == Containment.OVERLAP:
        findings.append(Finding(Rule.CONTAINMENT, "CONTAINMENT_OVERLAP", _WARNING))
    else:
        raise InvalidScenario(f"unhandled containment {scenario.containment!r}")

    # --- Price position: only meaningful on the volume turn bar ---
    if scenario.volume_just_turned:
        price = scenario.price_position
        if price == PricePosition.ABOVE_BOTH:
            bullish += weights.price_aligned
            findings.append(Finding(Rule.PRICE, "PRICE_ABOVE_BOTH", _SIGNAL))
        elif price == PricePosition.BELOW_BOTH:
            bearish += weights.price_aligned
            findings.append(Finding(Rule.PRICE, "PRICE_BELOW_BOTH", _SIGNAL))
        elif price == PricePosition.ABOVE_TREND_BELOW_REF:
            bullish += weights.price_partial
            findings.append(Finding(Rule.PRICE, "PRICE_ABOVE_TREND_BELOW_REF", _WARNING))
        elif price == PricePosition.BELOW_TREND_ABOVE_REF:
            bearish += weights.price_partial
            findings.append(Finding(Rule.PRICE, "PRICE_BELOW_TREND_ABOVE_REF", _WARNING))
        elif price == PricePosition.PULLBACK_TO_TREND_FLOOR:
            bullish += weights.price_partial
            findings.append(Finding(Rule.PRICE, "PRICE_PULLBACK_TO_TREND_FLOOR", _SIGNAL))
        elif price == PricePosition.REJECTION_FROM_TREND_CEILING:
            bearish += weights.price_partial
            findings.append(Finding(Rule.PRICE, "PRICE_REJECTION_FROM_TREND_CEILING", _SIGNAL))
        else:
            raise InvalidScenario(f"unhandled price position {price!r}")

    return bullish, bearish, findings


def detect_conflicts(scenario: Scenario) -> tuple[Finding, ...]:
    """Band 1 vs trend (MAJOR) and Band 1 vs Band 2 (MINOR) disagreements."""
    conflicts: list[Finding] = []
    band1, band2, trend = scenario.band1, scenario.band2, scenario.trend

    if band1 == BandPosition.HIGH and trend == TrendPosition.BELOW:
        conflicts.append(
            Finding(Rule.BAND1_VS_TREND, "CONFLICT_BAND1_BULL_TREND_BELOW", FindingKind.CONFLICT, Severity.MAJOR)
        )
    if band1 == BandPosition.LOW and trend == TrendPosition.ABOVE:
        conflicts.append(
            Finding(Rule.BAND1_VS_TREND, "CONFLICT_BAND1_BEAR_TREND_ABOVE", FindingKind.CONFLICT, Severity.MAJOR)
        )
    if {band1, band2} == {BandPosition.HIGH, BandPosition.LOW}:
        conflicts.append(
            Finding(Rule.BAND1_VS_BAND2, "CONFLICT_BAND1_BAND2", FindingKind.CONFLICT, Severity.MINOR)
        )

    return tuple(conflicts)


def classify_bias(
    bullish: int, bearish: int, thresholds: StrengthThresholds
) -> tuple[Bias, Strength]:
    """
    Bias from the score comparison, strength from the absolute difference.

    Equal scores are NEUTRAL / CONFLICTED regardless of thresholds.
    """
    if bullish > bearish:
        bias = Bias.BULLISH
    elif bearish > bullish:
        bias = Bias.BEARISH
    else:
        return Bias.NEUTRAL, Strength.CONFLICTED

    diff = abs(bullish - bearish)
    if diff >= thresholds.very_strong:
        return bias, Strength.VERY_STRONG
    if diff >= thresholds.strong:
        return bias, Strength.STRONG
    if diff >= thresholds.moderate:
        return bias, Strength.MODERATE
    return bias, Strength.WEAK


def recommend_trade(
    scenario: Scenario,
    bias: Bias,
    strength: Strength,
    conflicts: tuple[Finding, ...],
) -> tuple[TradeAction, EntryType]:
    """First matching rule wins; any conflict blocks trading."""
    strong = strength in (Strength.STRONG, Strength.VERY_STRONG)

    # Rule 1: Any conflict -> DO NOT TRADE
    if conflicts:
        return TradeAction.DO_NOT_TRADE, EntryType.CONFLICTING

    # Rule 2: Strong bullish -> LOOK FOR LONG
    if bias == Bias.BULLISH and strong:
        if scenario.price_position in _PULLBACK_LONG:
            return TradeAction.LOOK_FOR_LONG, EntryType.PULLBACK_SUPPORT
        if scenario.containment == Containment.CLOSE_IN_VWAP:
            return TradeAction.LOOK_FOR_LONG, EntryType.BREAKOUT_ABOVE_VWAP
        return TradeAction.LOOK_FOR_LONG, EntryType.BREAKOUT_CONTINUATION

    # Rule 3: Strong bearish -> LOOK FOR SHORT
    if bias == Bias.BEARISH and strong:
        if scenario.price_position in _PULLBACK_SHORT:
            return TradeAction.LOOK_FOR_SHORT, EntryType.PULLBACK_RESISTANCE
        if scenario.containment == Containment.CLOSE_IN_VWAP:
            return TradeAction.LOOK_FOR_SHORT, EntryType.BREAKOUT_BELOW_VWAP
        return TradeAction.LOOK_FOR_SHORT, EntryType.BREAKOUT_CONTINUATION

    # Rules 4-5: Moderate -> CAUTIOUS
    if strength == Strength.MODERATE:
        if bias == Bias.BULLISH:
            return TradeAction.CAUTIOUS_LONG, EntryType.CONSERVATIVE
        if bias == Bias.BEARISH:
            return TradeAction.CAUTIOUS_SHORT, EntryType.CONSERVATIVE

    # Rule 6: Otherwise WAIT
    return TradeAction.WAIT, EntryType.INSUFFICIENT
