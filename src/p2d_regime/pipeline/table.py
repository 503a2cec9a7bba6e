"""
P2D REGIME - Reference Table Orchestration

Flow: generate -> analyze -> cache -> (query | stats | frame | export)

The table is built once per ReferenceTable and never mutated.
Queries are read-only projections over the cached rows.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import pandas as pd

from p2d_regime.classifier.engine import analyze
from p2d_regime.config import RegimeConfig
from p2d_regime.explain.renderer import render_row
from p2d_regime.scenarios.generator import generate_scenarios
from p2d_regime.types import AnalyzedScenario, Bias, Strength

logger = logging.getLogger(__name__)


class SortKey(Enum):
    """Descending sort orders offered to consumers."""

    SCORE = "score"  # |bullish - bearish|
    BULLISH = "bullish"
    BEARISH = "bearish"


_SORT_FIELDS = {
    SortKey.SCORE: lambda row: row.analysis.score_diff,
    SortKey.BULLISH: lambda row: row.analysis.bullish_score,
    SortKey.BEARISH: lambda row: row.analysis.bearish_score,
}


@dataclass(frozen=True)
class TableStats:
    """Summary counts over the full table."""

    total: int
    bullish: int
    bearish: int
    neutral: int
    tradeable: int
    conflicted: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "bullish": self.bullish,
            "bearish": self.bearish,
            "neutral": self.neutral,
            "tradeable": self.tradeable,
            "conflicted": self.conflicted,
        }


def coerce_enum(enum_cls, value):
    """
    Accept an enum member, its value, or its name.

    Strings are matched case-insensitively with spaces and underscores
    treated alike, so "very strong", "VERY_STRONG" and Strength.VERY_STRONG
    are equivalent. Unknown values raise ValueError.
    """
    if value is None or isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        wanted = value.strip().upper().replace(" ", "_")
        for member in enum_cls:
            if member.name == wanted or str(member.value).upper().replace(" ", "_") == wanted:
                return member
    return enum_cls(value)


def resolve_query(
    bias=None, strength=None, sort_by=None
) -> tuple[Bias | None, Strength | None, SortKey | None]:
    """
    Coerce filter and sort inputs to enums.

    "all" disables a filter and "none" disables sorting. Unknown values raise ValueError.
    """
    bias = None if _is_all(bias) else coerce_enum(Bias, bias)
    strength = None if _is_all(strength) else coerce_enum(Strength, strength)
    if isinstance(sort_by, str) and sort_by.strip().lower() == "none":
        sort_by = None
    return bias, strength, coerce_enum(SortKey, sort_by)


class ReferenceTable:
    """
    P2D REGIME scenario reference table.

    Orchestrates: generate -> analyze, then serves read-only projections.
    """

    def __init__(self, config: RegimeConfig | None = None) -> None:
        self.config = config or RegimeConfig()
        self._rows: tuple[AnalyzedScenario, ...] | None = None

    def rows(self) -> list[AnalyzedScenario]:
        """All analyzed scenarios in id order. Built on first access."""
        if self._rows is None:
            self._rows = self._build()
        return list(self._rows)

    def _build(self) -> tuple[AnalyzedScenario, ...]:
        scenarios = generate_scenarios(self.config.generator)
        rows = tuple(AnalyzedScenario(s, analyze(s, self.config)) for s in scenarios)
        logger.info(f"P2D reference table built: {len(rows)} scenarios")
        return rows

    def get(self, scenario_id: int) -> AnalyzedScenario:
        """Look up a row by id. Raises KeyError for unknown ids."""
        rows = self.rows()
        if not 0 <= scenario_id < len(rows):
            raise KeyError(scenario_id)
        return rows[scenario_id]

    def query(
        self,
        bias: Bias | str | None = None,
        strength: Strength | str | None = None,
        sort_by: SortKey | str | None = None,
    ) -> list[AnalyzedScenario]:
        """
        Filter and sort the table.

        Args:
            bias: Keep only rows with this bias (None or "all": no filter).
            strength: Keep only rows with this strength tier.
            sort_by: Descending sort key; ties keep id order. None keeps id order.

        Returns:
            New list; the cached rows are untouched.
        """
        bias, strength, sort_by = resolve_query(bias, strength, sort_by)

        selected = [
            row
            for row in self.rows()
            if (bias is None or row.analysis.bias == bias)
            and (strength is None or row.analysis.strength == strength)
        ]

        if sort_by is not None:
            selected = sorted(selected, key=_SORT_FIELDS[sort_by], reverse=True)

        logger.debug(
            f"query bias={bias} strength={strength} sort_by={sort_by}: {len(selected)} rows"
        )
        return selected

    def stats(self) -> TableStats:
        """Counts by bias, tradeable recommendations and conflicted rows."""
        rows = self.rows()
        return TableStats(
            total=len(rows),
            bullish=sum(1 for r in rows if r.analysis.bias == Bias.BULLISH),
            bearish=sum(1 for r in rows if r.analysis.bias == Bias.BEARISH),
            neutral=sum(1 for r in rows if r.analysis.bias == Bias.NEUTRAL),
            tradeable=sum(1 for r in rows if r.analysis.is_tradeable),
            conflicted=sum(1 for r in rows if r.analysis.has_conflicts),
        )

    def to_frame(self, rows: list[AnalyzedScenario] | None = None) -> pd.DataFrame:
        """
        Tabular view with rendered findings.

        List columns (signals, warnings, conflicts) are JSON-encoded strings
        so the frame round-trips through Parquet.
        """
        records = []
        for row in self.rows() if rows is None else rows:
            record = render_row(row)
            for col in ("signals", "warnings", "conflicts"):
                record[col] = json.dumps(record[col])
            records.append(record)
        return pd.DataFrame(records)

    def export(self, output_dir: Path) -> Path:
        """Write the full table to JSON and Parquet. Returns the JSON path."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        json_file = output_dir / "p2d_scenarios.json"
        payload = {
            "stats": self.stats().to_dict(),
            "scenarios": [render_row(row) for row in self.rows()],
        }
        json_file.write_text(json.dumps(payload, indent=2))

        parquet_file = output_dir / "p2d_scenarios.parquet"
        self.to_frame().to_parquet(parquet_file, index=False)

        logger.info(f"Saved to {json_file} and {parquet_file}")
        return json_file


def _is_all(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() == "all")
