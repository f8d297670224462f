"""
Pivot Table
In-memory reference implementation of the aggregation sink.

Rows are appended in single-row batches; the view groups them by the
pivot column(s) and applies the configured aggregate per column.

Usage:
    table = PivotTable(limit=10000)
    table.update([record.to_row()])
    rows = table.view()
"""

from collections import deque
from typing import Any, Deque, Dict, List, Mapping, Optional, Protocol

import pandas as pd

from .schema import RECORD_SCHEMA, ColumnType, Schema, validate_row
from .view import DEFAULT_VIEW, ViewConfig


class RecordSink(Protocol):
    """Anything that accepts a batch of schema-shaped rows."""

    def update(self, rows: List[Dict[str, Any]]) -> None: ...


# Applied to present values only; a NaN that was sent propagates
_PANDAS_AGG = {
    "avg": lambda s: s.mean(skipna=False),
    "sum": lambda s: s.sum(skipna=False),
    "min": lambda s: s.min(skipna=False),
    "max": lambda s: s.max(skipna=False),
    "count": "size",
    "distinct count": "nunique",
    "last": lambda s: s.iloc[-1],
}


def _clean(value: Any) -> Any:
    """pandas scalar → plain python; NaT → None, NaN kept"""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if hasattr(value, "item"):
        value = value.item()
    return value


class PivotTable:
    """
    Columnar, pivotable table fed one record per tick.

    - Schema checked on every update (all-or-nothing per batch)
    - Optional row limit, oldest rows evicted first
    - Missing values (None) stay missing: aggregates skip them
    - NaN values that were sent propagate through avg/sum/min/max
    """

    def __init__(
        self,
        schema: Optional[Schema] = None,
        view: Optional[ViewConfig] = None,
        limit: Optional[int] = None
    ):
        self.schema: Schema = dict(schema or RECORD_SCHEMA)
        self.config = view or DEFAULT_VIEW
        self.config.validate_against(self.schema)
        self.limit = limit or None
        self._rows: Deque[Dict[str, Any]] = deque(maxlen=self.limit)
        self._updates = 0

    def update(self, rows: List[Mapping[str, Any]]) -> None:
        for row in rows:
            validate_row(row, self.schema)
        for row in rows:
            self._rows.append(dict(row))
        self._updates += 1

    def size(self) -> int:
        return len(self._rows)

    def clear(self) -> None:
        self._rows.clear()
        self._updates = 0

    def to_dataframe(self) -> pd.DataFrame:
        """
        Raw rows as a typed DataFrame (float64 / datetime64).

        Both None and NaN read as NaN here; presence_mask() tells them apart.
        """
        df = pd.DataFrame(list(self._rows), columns=list(self.schema))
        for name, col_type in self.schema.items():
            if col_type == ColumnType.FLOAT:
                df[name] = pd.to_numeric(df[name], errors="coerce").astype("float64")
            else:
                df[name] = pd.to_datetime(df[name])
        return df

    def presence_mask(self) -> pd.DataFrame:
        """True where a row carried a value, False where it was None"""
        return pd.DataFrame(
            [{name: row[name] is not None for name in self.schema} for row in self._rows],
            columns=list(self.schema),
            dtype=bool,
        )

    def aggregate(self) -> List[Dict[str, Any]]:
        """
        One row per distinct pivot value, sorted by pivot.

        Each output row carries `row_path` (the pivot values) and every
        aggregated column. A column with no value in a group is None.
        """
        if not self._rows:
            return []

        df = self.to_dataframe()
        present = self.presence_mask()
        pivots = list(self.config.row_pivots)
        # Group on copies so pivot columns can still be aggregated themselves
        keys = [f"__pivot_{i}" for i in range(len(pivots))]
        df = df.assign(**{k: df[p] for k, p in zip(keys, pivots)})
        groups = df.groupby(keys, sort=True).size().index

        columns = {}
        for column, agg in self.config.aggregates.items():
            subset = df[present[column]]
            values = subset.groupby(keys, sort=True)[column].agg(_PANDAS_AGG[agg])
            columns[column] = (values.reindex(groups), groups.isin(values.index))

        # Per-column access keeps each column's dtype (iterrows would upcast)
        out = []
        for pos, index in enumerate(groups):
            path = index if isinstance(index, tuple) else (index,)
            row = {"row_path": [_clean(v) for v in path]}
            for column, (values, has_value) in columns.items():
                row[column] = _clean(values.iloc[pos]) if has_value[pos] else None
            out.append(row)
        return out

    def view(self) -> List[Dict[str, Any]]:
        """Aggregated rows projected to the visible columns"""
        visible = self.config.columns
        return [
            {"row_path": row["row_path"], **{c: row.get(c) for c in visible}}
            for row in self.aggregate()
        ]

    def stats(self) -> dict:
        return {
            "rows": len(self._rows),
            "updates": self._updates,
            "limit": self.limit,
            "groups": len(self.aggregate()),
        }
