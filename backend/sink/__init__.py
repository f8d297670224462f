"""
Sink Module
Aggregation sink contract plus an in-memory reference table.

Structure:
    sink/
    ├── schema.py    → RECORD_SCHEMA, ColumnType, validate_row
    ├── view.py      → ViewConfig (pivot, columns, aggregates)
    └── table.py     → RecordSink protocol, PivotTable
"""

from .schema import ColumnType, RECORD_SCHEMA, schema_to_dict, validate_row
from .view import ViewConfig, DEFAULT_VIEW, AGGREGATES
from .table import RecordSink, PivotTable

__all__ = [
    "ColumnType",
    "RECORD_SCHEMA",
    "schema_to_dict",
    "validate_row",
    "ViewConfig",
    "DEFAULT_VIEW",
    "AGGREGATES",
    "RecordSink",
    "PivotTable",
]
