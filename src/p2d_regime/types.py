"""
P2D REGIME - Core Type Definitions

All dataclasses and enums used across the system.
No logic, only data structures.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum


# --- Indicator axes ---


class Containment(Enum):
    """Close band vs VWAP band containment. OVERLAP when no flag is set."""

    CLOSE_IN_VWAP = "CLOSE IN VWAP"
    VWAP_IN_CLOSE = "VWAP IN CLOSE"
    SEPARATED = "SEPARATED"
    OVERLAP = "OVERLAP"


class TrendPosition(Enum):
    """SuperTrend position relative to the P3D VWAP band."""

    ABOVE = "ABOVE P3D VWAP"
    BELOW = "BELOW P3D VWAP"
    WITHIN = "WITHIN P3D VWAP"


class BandPosition(Enum):
    """pdClose band position. Values are the raw indicator readings."""

    HIGH = 2
    LOW = -2
    NEUTRAL = 0


class PricePosition(Enum):
    """Close price position at the bar where volume just turned rising."""

    ABOVE_BOTH = "above_both"
    ABOVE_TREND_BELOW_REF = "above_st_below_vwap"
    BELOW_TREND_ABOVE_REF = "below_st_above_vwap"
    BELOW_BOTH = "below_both"
    PULLBACK_TO_TREND_FLOOR = "between_st"
    REJECTION_FROM_TREND_CEILING = "between_st_down"


# --- Classification outputs ---


class Bias(Enum):
    """Directional bias."""

    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class Strength(Enum):
    """Bias strength tier. CONFLICTED is reserved for NEUTRAL bias."""

    VERY_STRONG = "VERY STRONG"
    STRONG = "STRONG"
    MODERATE = "MODERATE"
    WEAK = "WEAK"
    CONFLICTED = "CONFLICTED"


class TradeAction(Enum):
    """Trade recommendation."""

    LOOK_FOR_LONG = "LOOK FOR LONG"
    LOOK_FOR_SHORT = "LOOK FOR SHORT"
    CAUTIOUS_LONG = "CAUTIOUS LONG"
    CAUTIOUS_SHORT = "CAUTIOUS SHORT"
    WAIT = "WAIT"
    DO_NOT_TRADE = "DO NOT TRADE"


class EntryType(Enum):
    """Suggested entry style attached to a trade action."""

    CONFLICTING = "Conflicting signals"
    PULLBACK_SUPPORT = "Pullback entry to trend support"
    PULLBACK_RESISTANCE = "Pullback entry to trend resistance"
    BREAKOUT_ABOVE_VWAP = "Wait for breakout above VWAP band"
    BREAKOUT_BELOW_VWAP = "Wait for breakout below VWAP band"
    BREAKOUT_CONTINUATION = "Breakout entry on continuation"
    CONSERVATIVE = "Conservative position, tight stops"
    INSUFFICIENT = "Insufficient alignment for entry"


# --- Findings ---


class Rule(Enum):
    """Rule blocks and conflict checks that emit findings."""

    BAND1 = "BAND1"
    BAND2 = "BAND2"
    TREND = "TREND"
    CONTAINMENT = "CONTAINMENT"
    PRICE = "PRICE"
    BAND1_VS_TREND = "BAND1_VS_TREND"
    BAND1_VS_BAND2 = "BAND1_VS_BAND2"


class FindingKind(Enum):
    SIGNAL = "SIGNAL"
    WARNING = "WARNING"
    CONFLICT = "CONFLICT"


class Severity(Enum):
    INFO = "INFO"
    MINOR = "MINOR"
    MAJOR = "MAJOR"


@dataclass(frozen=True)
class Finding:
    """Structured signal, warning or conflict. Rendered to text by explain.renderer."""

    rule: Rule
    code: str  # e.g. "BAND1_HIGH", stable key for message lookup
    kind: FindingKind
    severity: Severity = Severity.INFO


# --- Records ---


@dataclass(frozen=True)
class Scenario:
    """One combination of indicator states. Immutable."""

    id: int
    containment: Containment
    trend: TrendPosition
    band1: BandPosition
    band2: BandPosition
    price_position: PricePosition
    volume_rising: bool = True
    volume_just_turned: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "containment": self.containment.value,
            "trend": self.trend.value,
            "band1": self.band1.value,
            "band2": self.band2.value,
            "price_position": self.price_position.value,
            "volume_rising": self.volume_rising,
            "volume_just_turned": self.volume_just_turned,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Scores and classification derived from a Scenario."""

    bullish_score: int
    bearish_score: int
    bias: Bias
    strength: Strength
    signals: tuple[Finding, ...]
    warnings: tuple[Finding, ...]
    conflicts: tuple[Finding, ...]
    trade_action: TradeAction
    entry_type: EntryType

    @property
    def score_diff(self) -> int:
        return abs(self.bullish_score - self.bearish_score)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    @property
    def is_tradeable(self) -> bool:
        return self.trade_action in (TradeAction.LOOK_FOR_LONG, TradeAction.LOOK_FOR_SHORT)


@dataclass(frozen=True)
class AnalyzedScenario:
    """A scenario with its analysis attached."""

    scenario: Scenario
    analysis: AnalysisResult

    @property
    def id(self) -> int:
        return self.scenario.id

    def to_dict(self) -> dict:
        """Serialize to output JSON format. Findings are emitted as codes."""
        a = self.analysis
        return {
            **self.scenario.to_dict(),
            "bullish_score": a.bullish_score,
            "bearish_score": a.bearish_score,
            "score_diff": a.score_diff,
            "bias": a.bias.value,
            "bias_strength": a.strength.value,
            "signals": [f.code for f in a.signals],
            "warnings": [f.code for f in a.warnings],
            "conflicts": [f.code for f in a.conflicts],
            "trade_action": a.trade_action.value,
            "entry_type": a.entry_type.value,
        }

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=2)
