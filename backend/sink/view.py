"""
View Configuration
Declarative settings applied once when the table is mounted:
plugin, row pivots, visible columns, per-column aggregates.
"""

import json
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .schema import RECORD_SCHEMA, Schema

AGGREGATES = ("avg", "sum", "min", "max", "count", "distinct count", "last")


class ViewConfig(BaseModel):
    """
    How the table groups and plots records.

    Defaults: line chart over time, one row per distinct timestamp,
    ratio plotted against both bounds and the alert marker.
    """
    model_config = ConfigDict(frozen=True)

    plugin: str = "y_line"
    row_pivots: List[str] = Field(default_factory=lambda: ["timestamp"])
    columns: List[str] = Field(
        default_factory=lambda: ["ratio", "lower_bound", "upper_bound", "trigger_alert"]
    )
    aggregates: Dict[str, str] = Field(
        default_factory=lambda: {
            "price_a": "avg",
            "price_b": "avg",
            "upper_bound": "avg",
            "lower_bound": "avg",
            "trigger_alert": "avg",
            "ratio": "avg",
            "timestamp": "distinct count",
        }
    )

    def validate_against(self, schema: Schema = RECORD_SCHEMA) -> None:
        """Raise ValueError if the view references unknown columns or aggregates"""
        referenced = list(self.row_pivots) + list(self.columns) + list(self.aggregates)
        unknown = sorted({c for c in referenced if c not in schema})
        if unknown:
            raise ValueError(f"View references columns not in schema: {unknown}")
        bad = {c: a for c, a in self.aggregates.items() if a not in AGGREGATES}
        if bad:
            raise ValueError(f"Unknown aggregates: {bad}")

    def to_attributes(self) -> Dict[str, str]:
        """Viewer element attributes (JSON-encoded where the widget expects it)"""
        return {
            "view": self.plugin,
            "row-pivots": json.dumps(self.row_pivots),
            "columns": json.dumps(self.columns),
            "aggregates": json.dumps(self.aggregates),
        }


DEFAULT_VIEW = ViewConfig()
