"""
Sink Schema
Column name → column type, as declared to the pivot table.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping

from core.exceptions import SchemaMismatchError


class ColumnType(str, Enum):
    """Column types understood by the table"""
    FLOAT = "float"
    DATETIME = "date"


Schema = Dict[str, ColumnType]


RECORD_SCHEMA: Schema = {
    "price_a": ColumnType.FLOAT,
    "price_b": ColumnType.FLOAT,
    "ratio": ColumnType.FLOAT,
    "timestamp": ColumnType.DATETIME,
    "upper_bound": ColumnType.FLOAT,
    "lower_bound": ColumnType.FLOAT,
    "trigger_alert": ColumnType.FLOAT,
}


def schema_to_dict(schema: Schema) -> Dict[str, str]:
    return {name: col_type.value for name, col_type in schema.items()}


def validate_row(row: Mapping[str, Any], schema: Schema = RECORD_SCHEMA) -> None:
    """
    Check one row against the schema.

    Float columns take int/float or None ("no value").
    Date columns require a datetime.

    Raises:
        SchemaMismatchError: missing/extra columns or wrong value types
    """
    if not isinstance(row, Mapping):
        raise SchemaMismatchError(f"Row must be a mapping, got {type(row).__name__}")

    missing = set(schema) - set(row)
    extra = set(row) - set(schema)
    if missing or extra:
        raise SchemaMismatchError(
            f"Row columns do not match schema (missing={sorted(missing)}, extra={sorted(extra)})"
        )

    for name, col_type in schema.items():
        value = row[name]
        if col_type == ColumnType.FLOAT:
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise SchemaMismatchError(f"{name}: expected float, got {type(value).__name__}")
        elif col_type == ColumnType.DATETIME:
            if not isinstance(value, datetime):
                raise SchemaMismatchError(f"{name}: expected datetime, got {type(value).__name__}")
