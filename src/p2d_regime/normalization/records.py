"""
P2D REGIME - Flag Record Normalization

Converts flat indicator records (mutually exclusive 0/1 flag triples,
raw band values, price position code) into typed Scenarios.
Malformed records raise InvalidScenario. No defaults are guessed.
"""

from __future__ import annotations

from typing import Any, Mapping

from p2d_regime.errors import InvalidScenario
from p2d_regime.types import (
    BandPosition,
    Containment,
    PricePosition,
    Scenario,
    TrendPosition,
)

_CONTAINMENT_FLAGS = {
    "close_in_vwap": Containment.CLOSE_IN_VWAP,
    "vwap_in_close": Containment.VWAP_IN_CLOSE,
    "separated": Containment.SEPARATED,
}

_TREND_FLAGS = {
    "st_above": TrendPosition.ABOVE,
    "st_below": TrendPosition.BELOW,
    "st_within": TrendPosition.WITHIN,
}


def scenario_from_record(record: Mapping[str, Any], scenario_id: int | None = None) -> Scenario:
    """
    Parse a flat record into a Scenario.

    Expected keys:
        close_in_vwap, vwap_in_close, separated: 0/1 (at most one set; none = OVERLAP)
        st_above, st_below, st_within: 0/1 (exactly one set)
        band1_value, band2_value: -2, 0 or 2
        price_position_code: e.g. "above_both", "between_st"
        id (optional, overridden by scenario_id)
        vol_rising, vol_just_turned (optional, default true)

    Raises:
        InvalidScenario: on missing keys or out-of-domain values.
    """
    sid = scenario_id if scenario_id is not None else record.get("id", 0)

    containment = _one_hot(record, _CONTAINMENT_FLAGS, allow_none=True, sid=sid)
    if containment is None:
        containment = Containment.OVERLAP

    trend = _one_hot(record, _TREND_FLAGS, allow_none=False, sid=sid)

    return Scenario(
        id=sid,
        containment=containment,
        trend=trend,
        band1=_band(record, "band1_value", sid),
        band2=_band(record, "band2_value", sid),
        price_position=_price(record, sid),
        volume_rising=_optional_flag(record, "vol_rising", sid),
        volume_just_turned=_optional_flag(record, "vol_just_turned", sid),
    )


def _flag(record: Mapping[str, Any], key: str, sid: Any) -> bool:
    if key not in record:
        raise InvalidScenario(f"record {sid}: missing flag '{key}'")
    value = record[key]
    # bool is an int subclass, so True/False pass through here
    if value not in (0, 1):
        raise InvalidScenario(f"record {sid}: flag '{key}' must be 0 or 1, got {value!r}")
    return bool(value)


def _optional_flag(record: Mapping[str, Any], key: str, sid: Any) -> bool:
    """Absent means true; present values get the same 0/1 check as required flags."""
    if key not in record:
        return True
    return _flag(record, key, sid)


def _one_hot(record, flags: dict, allow_none: bool, sid: Any):
    active = [state for key, state in flags.items() if _flag(record, key, sid)]
    if len(active) > 1:
        names = ", ".join(s.name for s in active)
        raise InvalidScenario(f"record {sid}: mutually exclusive flags set together ({names})")
    if not active:
        if allow_none:
            return None
        raise InvalidScenario(f"record {sid}: none of {', '.join(flags)} is set")
    return active[0]


def _band(record: Mapping[str, Any], key: str, sid: Any) -> BandPosition:
    if key not in record:
        raise InvalidScenario(f"record {sid}: missing '{key}'")
    value = record[key]
    if isinstance(value, bool):
        raise InvalidScenario(f"record {sid}: '{key}' must be -2, 0 or 2, got {value!r}")
    try:
        return BandPosition(value)
    except ValueError:
        raise InvalidScenario(f"record {sid}: '{key}' must be -2, 0 or 2, got {value!r}") from None


def _price(record: Mapping[str, Any], sid: Any) -> PricePosition:
    if "price_position_code" not in record:
        raise InvalidScenario(f"record {sid}: missing 'price_position_code'")
    code = record["price_position_code"]
    try:
        return PricePosition(code)
    except ValueError:
        raise InvalidScenario(f"record {sid}: unknown price position code {code!r}") from None
