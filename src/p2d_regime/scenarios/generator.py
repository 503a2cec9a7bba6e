"""
P2D REGIME - Scenario Generator

Enumerates the full Cartesian product of indicator axes.

Iteration order is a contract: ids are assigned in nested order
containment -> trend -> band1 -> band2 -> price position, so the same
axis definitions always reproduce the same ids.
"""

from __future__ import annotations

from itertools import product

from p2d_regime.config import GeneratorConfig
from p2d_regime.types import (
    BandPosition,
    Containment,
    PricePosition,
    Scenario,
    TrendPosition,
)

# Axis order (outer -> inner). Enum iteration follows definition order.
AXES = (Containment, TrendPosition, BandPosition, BandPosition, PricePosition)


def scenario_count(config: GeneratorConfig | None = None) -> int:
    """Number of scenarios generate_scenarios() will produce."""
    config = config or GeneratorConfig()
    total = len(config.volume_turn_states)
    for axis in AXES:
        total *= len(axis)
    return total


def generate_scenarios(config: GeneratorConfig | None = None) -> list[Scenario]:
    """
    Generate every indicator-state combination.

    Args:
        config: Generator configuration. The volume-just-turned axis, when
            widened, is the outermost loop so the default slice keeps ids 0..647.

    Returns:
        Scenarios ordered by id, starting at 0.
    """
    config = config or GeneratorConfig()
    scenarios: list[Scenario] = []

    for volume_just_turned in config.volume_turn_states:
        for containment, trend, band1, band2, price in product(*AXES):
            scenarios.append(
                Scenario(
                    id=len(scenarios),
                    containment=containment,
                    trend=trend,
                    band1=band1,
                    band2=band2,
                    price_position=price,
                    volume_rising=True,
                    volume_just_turned=volume_just_turned,
                )
            )

    return scenarios
