"""
P2D REGIME - Configuration & Weights

Single source of truth for all rule weights and strength thresholds.
All values are named, documented, and centralized.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RuleWeights:
    """Score added per rule block."""

    band1: int = 3  # Primary bias
    band2: int = 2  # Confirmation
    trend: int = 3  # SuperTrend vs P3D VWAP momentum
    containment: int = 1  # Added to BOTH sides on expansion / separation
    price_aligned: int = 2  # Price above (below) both ST avg and VWAP
    price_partial: int = 1  # Mixed or pullback / rejection positioning


@dataclass(frozen=True)
class StrengthThresholds:
    """Minimum |bullish - bearish| per strength tier."""

    very_strong: int = 6
    strong: int = 4
    moderate: int = 2


@dataclass(frozen=True)
class GeneratorConfig:
    """Scenario enumeration settings."""

    # Volume-just-turned states to enumerate (outermost axis).
    # Default keeps the canonical 648-scenario slice.
    volume_turn_states: tuple[bool, ...] = (True,)


@dataclass(frozen=True)
class RegimeConfig:
    """Master configuration for P2D REGIME."""

    weights: RuleWeights = RuleWeights()
    strength: StrengthThresholds = StrengthThresholds()
    generator: GeneratorConfig = GeneratorConfig()
