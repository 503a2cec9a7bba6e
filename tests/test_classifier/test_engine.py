"""Tests for the deterministic scenario analyzer."""

from dataclasses import replace

import pytest

from p2d_regime.classifier.engine import (
    analyze,
    classify_bias,
    detect_conflicts,
    score_scenario,
)
from p2d_regime.config import RegimeConfig, RuleWeights, StrengthThresholds
from p2d_regime.errors import InvalidScenario
from p2d_regime.types import (
    BandPosition,
    Bias,
    Containment,
    EntryType,
    FindingKind,
    PricePosition,
    Severity,
    Strength,
    TradeAction,
    TrendPosition,
)

HIGH, LOW, NEUTRAL = BandPosition.HIGH, BandPosition.LOW, BandPosition.NEUTRAL


class TestWorkedExamples:
    def test_full_bullish_alignment(self, make_scenario):
        result = analyze(
            make_scenario(
                containment=Containment.SEPARATED,
                trend=TrendPosition.ABOVE,
                band1=HIGH,
                band2=HIGH,
                price=PricePosition.ABOVE_BOTH,
            )
        )
        assert result.bullish_score == 11
        assert result.bearish_score == 1
        assert result.bias == Bias.BULLISH
        assert result.strength == Strength.VERY_STRONG
        assert result.conflicts == ()
        assert result.trade_action == TradeAction.LOOK_FOR_LONG
        assert result.entry_type == EntryType.BREAKOUT_CONTINUATION
        assert result.entry_type.value == "Breakout entry on continuation"

    def test_band1_vs_trend_conflict_blocks_trade(self, make_scenario):
        result = analyze(
            make_scenario(
                containment=Containment.OVERLAP,
                trend=TrendPosition.BELOW,
                band1=HIGH,
                band2=NEUTRAL,
                price=PricePosition.BELOW_BOTH,
            )
        )
        assert result.bullish_score == 3
        assert result.bearish_score == 5
        assert result.bias == Bias.BEARISH
        assert [c.severity for c in result.conflicts] == [Severity.MAJOR]
        assert result.trade_action == TradeAction.DO_NOT_TRADE
        assert result.entry_type == EntryType.CONFLICTING

    def test_neutral_bands_with_mixed_price_waits(self, make_scenario):
        result = analyze(
            make_scenario(
                containment=Containment.CLOSE_IN_VWAP,
                trend=TrendPosition.WITHIN,
                price=PricePosition.ABOVE_TREND_BELOW_REF,
            )
        )
        assert result.bullish_score == 1
        assert result.bearish_score == 0
        assert result.strength == Strength.WEAK
        assert result.trade_action == TradeAction.WAIT
        assert result.entry_type == EntryType.INSUFFICIENT

    def test_equal_scores_are_neutral_conflicted(self, make_scenario):
        result = analyze(make_scenario(band2=HIGH, price=PricePosition.BELOW_BOTH))
        assert result.bullish_score == result.bearish_score == 2
        assert result.bias == Bias.NEUTRAL
        assert result.strength == Strength.CONFLICTED
        assert result.trade_action == TradeAction.WAIT


class TestRuleBlocks:
    @pytest.fixture
    def weights(self):
        return RuleWeights()

    def test_band_weights(self, make_scenario, weights):
        assert score_scenario(make_scenario(band1=HIGH, price=PricePosition.ABOVE_BOTH), weights)[:2] == (5, 0)
        assert score_scenario(make_scenario(band1=LOW, price=PricePosition.ABOVE_BOTH), weights)[:2] == (2, 3)
        assert score_scenario(make_scenario(band2=HIGH, price=PricePosition.ABOVE_BOTH), weights)[:2] == (4, 0)
        assert score_scenario(make_scenario(band2=LOW, price=PricePosition.ABOVE_BOTH), weights)[:2] == (2, 2)

    def test_trend_weights(self, make_scenario, weights):
        assert score_scenario(make_scenario(trend=TrendPosition.ABOVE, price=PricePosition.BELOW_BOTH), weights)[:2] == (3, 2)
        assert score_scenario(make_scenario(trend=TrendPosition.BELOW, price=PricePosition.BELOW_BOTH), weights)[:2] == (0, 5)

    @pytest.mark.parametrize(
        "containment,expected",
        [
            (Containment.CLOSE_IN_VWAP, (2, 0)),
            (Containment.VWAP_IN_CLOSE, (3, 1)),
            (Containment.SEPARATED, (3, 1)),
            (Containment.OVERLAP, (2, 0)),
        ],
    )
    def test_containment_is_symmetric(self, make_scenario, weights, containment, expected):
        s = make_scenario(containment=containment, price=PricePosition.ABOVE_BOTH)
        assert score_scenario(s, weights)[:2] == expected

    @pytest.mark.parametrize(
        "price,expected,kind",
        [
            (PricePosition.ABOVE_BOTH, (2, 0), FindingKind.SIGNAL),
            (PricePosition.BELOW_BOTH, (0, 2), FindingKind.SIGNAL),
            (PricePosition.ABOVE_TREND_BELOW_REF, (1, 0), FindingKind.WARNING),
            (PricePosition.BELOW_TREND_ABOVE_REF, (0, 1), FindingKind.WARNING),
            (PricePosition.PULLBACK_TO_TREND_FLOOR, (1, 0), FindingKind.SIGNAL),
            (PricePosition.REJECTION_FROM_TREND_CEILING, (0, 1), FindingKind.SIGNAL),
        ],
    )
    def test_price_position(self, make_scenario, weights, price, expected, kind):
        bullish, bearish, findings = score_scenario(make_scenario(price=price), weights)
        assert (bullish, bearish) == expected
        assert findings[-1].kind == kind
        assert findings[-1].code.startswith("PRICE_")

    def test_price_ignored_when_volume_not_just_turned(self, make_scenario, weights):
        s = make_scenario(price=PricePosition.ABOVE_BOTH, volume_just_turned=False)
        bullish, bearish, findings = score_scenario(s, weights)
        assert (bullish, bearish) == (0, 0)
        assert not any(f.code.startswith("PRICE_") for f in findings)

    def test_finding_order_follows_rule_order(self, make_scenario):
        result = analyze(
            make_scenario(
                containment=Containment.SEPARATED,
                trend=TrendPosition.ABOVE,
                band1=HIGH,
                band2=HIGH,
                price=PricePosition.ABOVE_BOTH,
            )
        )
        assert [f.code for f in result.signals] == [
            "BAND1_HIGH",
            "BAND2_HIGH",
            "TREND_ABOVE",
            "CONTAINMENT_SEPARATED",
            "PRICE_ABOVE_BOTH",
        ]
        assert result.warnings == ()

    def test_all_neutral_warnings(self, make_scenario):
        result = analyze(
            make_scenario(
                containment=Containment.OVERLAP,
                price=PricePosition.BELOW_TREND_ABOVE_REF,
            )
        )
        assert [f.code for f in result.warnings] == [
            "BAND1_NEUTRAL",
            "BAND2_NEUTRAL",
            "TREND_WITHIN",
            "CONTAINMENT_OVERLAP",
            "PRICE_BELOW_TREND_ABOVE_REF",
        ]
        assert result.signals == ()

    def test_custom_weights(self, make_scenario):
        cfg = RegimeConfig(weights=RuleWeights(containment=0))
        result = analyze(make_scenario(containment=Containment.SEPARATED, price=PricePosition.ABOVE_BOTH), cfg)
        assert (result.bullish_score, result.bearish_score) == (2, 0)


class TestConflicts:
    def test_band1_high_trend_below_is_major(self, make_scenario):
        conflicts = detect_conflicts(make_scenario(band1=HIGH, trend=TrendPosition.BELOW))
        assert [c.code for c in conflicts] == ["CONFLICT_BAND1_BULL_TREND_BELOW"]
        assert conflicts[0].severity == Severity.MAJOR

    def test_band1_low_trend_above_is_major(self, make_scenario):
        conflicts = detect_conflicts(make_scenario(band1=LOW, trend=TrendPosition.ABOVE))
        assert [c.code for c in conflicts] == ["CONFLICT_BAND1_BEAR_TREND_ABOVE"]

    def test_band_disagreement_is_minor(self, make_scenario):
        for b1, b2 in ((HIGH, LOW), (LOW, HIGH)):
            conflicts = detect_conflicts(make_scenario(band1=b1, band2=b2))
            assert [c.severity for c in conflicts] == [Severity.MINOR]

    def test_neutral_band_does_not_conflict(self, make_scenario):
        assert detect_conflicts(make_scenario(band1=NEUTRAL, band2=LOW, trend=TrendPosition.ABOVE)) == ()

    def test_both_conflicts_major_first(self, make_scenario):
        conflicts = detect_conflicts(make_scenario(band1=HIGH, band2=LOW, trend=TrendPosition.BELOW))
        assert [c.severity for c in conflicts] == [Severity.MAJOR, Severity.MINOR]
        assert all(c.kind == FindingKind.CONFLICT for c in conflicts)

    def test_minor_conflict_blocks_very_strong_bias(self, make_scenario):
        result = analyze(
            make_scenario(
                containment=Containment.SEPARATED,
                trend=TrendPosition.ABOVE,
                band1=HIGH,
                band2=LOW,
                price=PricePosition.ABOVE_BOTH,
            )
        )
        assert (result.bullish_score, result.bearish_score) == (9, 3)
        assert result.strength == Strength.VERY_STRONG
        assert result.trade_action == TradeAction.DO_NOT_TRADE


class TestClassifyBias:
    @pytest.fixture
    def thresholds(self):
        return StrengthThresholds()

    @pytest.mark.parametrize(
        "bullish,bearish,bias,strength",
        [
            (11, 1, Bias.BULLISH, Strength.VERY_STRONG),
            (6, 0, Bias.BULLISH, Strength.VERY_STRONG),
            (5, 0, Bias.BULLISH, Strength.STRONG),
            (4, 0, Bias.BULLISH, Strength.STRONG),
            (3, 0, Bias.BULLISH, Strength.MODERATE),
            (2, 0, Bias.BULLISH, Strength.MODERATE),
            (1, 0, Bias.BULLISH, Strength.WEAK),
            (0, 1, Bias.BEARISH, Strength.WEAK),
            (1, 7, Bias.BEARISH, Strength.VERY_STRONG),
            (0, 0, Bias.NEUTRAL, Strength.CONFLICTED),
            (5, 5, Bias.NEUTRAL, Strength.CONFLICTED),
        ],
    )
    def test_tiers(self, thresholds, bullish, bearish, bias, strength):
        assert classify_bias(bullish, bearish, thresholds) == (bias, strength)


class TestTradeRecommendation:
    def test_long_pullback_to_support(self, make_scenario):
        result = analyze(
            make_scenario(
                containment=Containment.SEPARATED,
                trend=TrendPosition.ABOVE,
                band1=HIGH,
                band2=HIGH,
                price=PricePosition.PULLBACK_TO_TREND_FLOOR,
            )
        )
        assert result.trade_action == TradeAction.LOOK_FOR_LONG
        assert result.entry_type == EntryType.PULLBACK_SUPPORT

    def test_long_pullback_beats_compression(self, make_scenario):
        result = analyze(
            make_scenario(
                containment=Containment.CLOSE_IN_VWAP,
                trend=TrendPosition.ABOVE,
                band1=HIGH,
                band2=HIGH,
                price=PricePosition.ABOVE_TREND_BELOW_REF,
            )
        )
        assert result.entry_type == EntryType.PULLBACK_SUPPORT

    def test_long_compression_waits_for_breakout(self, make_scenario):
        result = analyze(
            make_scenario(
                containment=Containment.CLOSE_IN_VWAP,
                trend=TrendPosition.ABOVE,
                band1=HIGH,
                band2=HIGH,
                price=PricePosition.ABOVE_BOTH,
            )
        )
        assert (result.bullish_score, result.bearish_score) == (10, 0)
        assert result.entry_type == EntryType.BREAKOUT_ABOVE_VWAP

    def test_strong_long(self, make_scenario):
        result = analyze(
            make_scenario(
                trend=TrendPosition.ABOVE,
                band1=HIGH,
                price=PricePosition.BELOW_TREND_ABOVE_REF,
            )
        )
        assert (result.bullish_score, result.bearish_score) == (6, 1)
        assert result.strength == Strength.STRONG
        assert result.trade_action == TradeAction.LOOK_FOR_LONG
        assert result.entry_type == EntryType.BREAKOUT_CONTINUATION

    @pytest.mark.parametrize(
        "containment,price,entry",
        [
            (Containment.SEPARATED, PricePosition.REJECTION_FROM_TREND_CEILING, EntryType.PULLBACK_RESISTANCE),
            (Containment.CLOSE_IN_VWAP, PricePosition.BELOW_TREND_ABOVE_REF, EntryType.PULLBACK_RESISTANCE),
            (Containment.CLOSE_IN_VWAP, PricePosition.BELOW_BOTH, EntryType.BREAKOUT_BELOW_VWAP),
            (Containment.SEPARATED, PricePosition.BELOW_BOTH, EntryType.BREAKOUT_CONTINUATION),
        ],
    )
    def test_short_entries(self, make_scenario, containment, price, entry):
        result = analyze(
            make_scenario(
                containment=containment,
                trend=TrendPosition.BELOW,
                band1=LOW,
                band2=LOW,
                price=price,
            )
        )
        assert result.bias == Bias.BEARISH
        assert result.trade_action == TradeAction.LOOK_FOR_SHORT
        assert result.entry_type == entry

    def test_cautious_long(self, make_scenario):
        result = analyze(make_scenario(band2=HIGH, price=PricePosition.ABOVE_TREND_BELOW_REF))
        assert result.strength == Strength.MODERATE
        assert result.trade_action == TradeAction.CAUTIOUS_LONG
        assert result.entry_type == EntryType.CONSERVATIVE

    def test_cautious_short(self, make_scenario):
        result = analyze(make_scenario(band2=LOW, price=PricePosition.BELOW_TREND_ABOVE_REF))
        assert result.trade_action == TradeAction.CAUTIOUS_SHORT
        assert result.entry_type == EntryType.CONSERVATIVE

    def test_weak_waits(self, make_scenario):
        result = analyze(make_scenario(price=PricePosition.PULLBACK_TO_TREND_FLOOR))
        assert result.strength == Strength.WEAK
        assert result.trade_action == TradeAction.WAIT


class TestProperties:
    """Invariants over the full 648-scenario space."""

    @pytest.fixture
    def results(self, scenarios):
        return [(s, analyze(s)) for s in scenarios]

    def test_scores_bounded(self, results):
        for _, r in results:
            assert 0 <= r.bullish_score <= 11
            assert 0 <= r.bearish_score <= 11

    def test_neutral_iff_equal_iff_conflicted(self, results):
        for _, r in results:
            equal = r.bullish_score == r.bearish_score
            assert equal == (r.bias == Bias.NEUTRAL)
            assert equal == (r.strength == Strength.CONFLICTED)

    def test_scores_match_independent_tally(self, results):
        """Scores come only from the five rule blocks; conflicts add nothing."""
        band1 = {HIGH: (3, 0), LOW: (0, 3), NEUTRAL: (0, 0)}
        band2 = {HIGH: (2, 0), LOW: (0, 2), NEUTRAL: (0, 0)}
        trend = {TrendPosition.ABOVE: (3, 0), TrendPosition.BELOW: (0, 3), TrendPosition.WITHIN: (0, 0)}
        containment = {
            Containment.CLOSE_IN_VWAP: (0, 0),
            Containment.VWAP_IN_CLOSE: (1, 1),
            Containment.SEPARATED: (1, 1),
            Containment.OVERLAP: (0, 0),
        }
        price = {
            PricePosition.ABOVE_BOTH: (2, 0),
            PricePosition.BELOW_BOTH: (0, 2),
            PricePosition.ABOVE_TREND_BELOW_REF: (1, 0),
            PricePosition.BELOW_TREND_ABOVE_REF: (0, 1),
            PricePosition.PULLBACK_TO_TREND_FLOOR: (1, 0),
            PricePosition.REJECTION_FROM_TREND_CEILING: (0, 1),
        }
        for s, r in results:
            parts = [
                band1[s.band1],
                band2[s.band2],
                trend[s.trend],
                containment[s.containment],
                price[s.price_position],
            ]
            assert r.bullish_score == sum(p[0] for p in parts)
            assert r.bearish_score == sum(p[1] for p in parts)

    def test_conflicts_always_block_trading(self, results):
        for _, r in results:
            if r.conflicts:
                assert r.trade_action == TradeAction.DO_NOT_TRADE
                assert r.entry_type == EntryType.CONFLICTING
            else:
                assert r.trade_action != TradeAction.DO_NOT_TRADE

    def test_conflict_count(self, results):
        assert sum(1 for _, r in results if r.conflicts) == 240

    def test_long_only_when_bullish(self, results):
        for _, r in results:
            if r.trade_action in (TradeAction.LOOK_FOR_LONG, TradeAction.CAUTIOUS_LONG):
                assert r.bias == Bias.BULLISH
            if r.trade_action in (TradeAction.LOOK_FOR_SHORT, TradeAction.CAUTIOUS_SHORT):
                assert r.bias == Bias.BEARISH

    def test_deterministic(self, scenarios):
        for s in scenarios:
            assert analyze(s) == analyze(s)


class TestInvalidScenario:
    def test_raw_band_value_rejected(self, make_scenario):
        with pytest.raises(InvalidScenario, match="band1"):
            analyze(replace(make_scenario(), band1=2))

    def test_string_containment_rejected(self, make_scenario):
        with pytest.raises(InvalidScenario, match="containment"):
            analyze(replace(make_scenario(), containment="SEPARATED"))

    def test_wrong_axis_enum_rejected(self, make_scenario):
        with pytest.raises(InvalidScenario, match="price_position"):
            analyze(replace(make_scenario(), price_position=TrendPosition.ABOVE))

    def test_is_a_value_error(self):
        assert issubclass(InvalidScenario, ValueError)
