"""Shared fixtures for P2D REGIME tests."""

import sys
from pathlib import Path

import pytest

# Ensure p2d_regime is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from p2d_regime.config import RegimeConfig
from p2d_regime.scenarios.generator import generate_scenarios
from p2d_regime.types import (
    BandPosition,
    Containment,
    PricePosition,
    Scenario,
    TrendPosition,
)


@pytest.fixture
def config() -> RegimeConfig:
    return RegimeConfig()


@pytest.fixture
def scenarios() -> list[Scenario]:
    return generate_scenarios()


@pytest.fixture
def make_scenario():
    """Build a Scenario with controllable axes. Defaults are all-neutral."""

    def _make(
        containment=Containment.OVERLAP,
        trend=TrendPosition.WITHIN,
        band1=BandPosition.NEUTRAL,
        band2=BandPosition.NEUTRAL,
        price=PricePosition.ABOVE_BOTH,
        volume_just_turned=True,
    ) -> Scenario:
        return Scenario(
            id=0,
            containment=containment,
            trend=trend,
            band1=band1,
            band2=band2,
            price_position=price,
            volume_rising=True,
            volume_just_turned=volume_just_turned,
        )

    return _make


@pytest.fixture
def flag_record() -> dict:
    """Flat record in the flag-triple format: SEPARATED, ST above, HIGH/HIGH, above both."""
    return {
        "id": 7,
        "vol_rising": 1,
        "vol_just_turned": True,
        "close_in_vwap": 0,
        "vwap_in_close": 0,
        "separated": 1,
        "st_above": 1,
        "st_below": 0,
        "st_within": 0,
        "band1_value": 2,
        "band2_value": 2,
        "price_position_code": "above_both",
    }
