"""Tests for the sink schema, view configuration and pivot table."""

import json
import math
from datetime import datetime, timedelta

import pytest

from analytics import generate_row
from core import SchemaMismatchError
from sink import DEFAULT_VIEW, RECORD_SCHEMA, ColumnType, PivotTable, ViewConfig, validate_row

from conftest import make_pair

T0 = datetime(2019, 2, 11, 22, 6, 30)


def row(ratio=1.0, ts=T0, trigger_alert=None, price_a=1.0, price_b=1.0):
    return {
        "price_a": price_a,
        "price_b": price_b,
        "ratio": ratio,
        "timestamp": ts,
        "upper_bound": 1.05,
        "lower_bound": 0.95,
        "trigger_alert": trigger_alert,
    }


class TestSchema:
    """Test schema declaration and row validation."""

    def test_record_schema(self):
        assert set(RECORD_SCHEMA) == {
            "price_a", "price_b", "ratio", "timestamp",
            "upper_bound", "lower_bound", "trigger_alert",
        }
        assert RECORD_SCHEMA["timestamp"] == ColumnType.DATETIME
        assert all(
            t == ColumnType.FLOAT for name, t in RECORD_SCHEMA.items() if name != "timestamp"
        )

    def test_record_rows_match_schema(self):
        validate_row(generate_row(make_pair(1, 1, 1, 1)).to_row())
        validate_row(generate_row(make_pair(1, 1, 0, 0)).to_row())

    def test_missing_column(self):
        bad = row()
        del bad["trigger_alert"]
        with pytest.raises(SchemaMismatchError):
            validate_row(bad)

    def test_extra_column(self):
        with pytest.raises(SchemaMismatchError):
            validate_row({**row(), "stock": "ABC"})

    @pytest.mark.parametrize("column,value", [
        ("ratio", "1.0"),
        ("ratio", True),
        ("timestamp", "2019-02-11"),
        ("timestamp", None),
    ])
    def test_wrong_types(self, column, value):
        with pytest.raises(SchemaMismatchError):
            validate_row({**row(), column: value})


class TestViewConfig:
    """Test the declarative view configuration."""

    def test_defaults(self):
        assert DEFAULT_VIEW.plugin == "y_line"
        assert DEFAULT_VIEW.row_pivots == ["timestamp"]
        assert DEFAULT_VIEW.columns == ["ratio", "lower_bound", "upper_bound", "trigger_alert"]
        assert DEFAULT_VIEW.aggregates["timestamp"] == "distinct count"
        assert all(
            agg == "avg" for col, agg in DEFAULT_VIEW.aggregates.items() if col != "timestamp"
        )
        assert set(DEFAULT_VIEW.aggregates) == set(RECORD_SCHEMA)

    def test_attributes(self):
        attrs = DEFAULT_VIEW.to_attributes()
        assert attrs["view"] == "y_line"
        assert json.loads(attrs["row-pivots"]) == ["timestamp"]
        assert json.loads(attrs["columns"]) == DEFAULT_VIEW.columns
        assert json.loads(attrs["aggregates"]) == DEFAULT_VIEW.aggregates

    def test_unknown_column(self):
        with pytest.raises(ValueError):
            ViewConfig(columns=["ratio", "spread"]).validate_against(RECORD_SCHEMA)

    def test_unknown_aggregate(self):
        with pytest.raises(ValueError):
            ViewConfig(aggregates={"ratio": "median"}).validate_against(RECORD_SCHEMA)

    def test_table_rejects_bad_view(self):
        with pytest.raises(ValueError):
            PivotTable(view=ViewConfig(row_pivots=["stock"]))


class TestPivotTable:
    """Test incremental updates and aggregation."""

    def test_empty(self):
        table = PivotTable()
        assert table.size() == 0
        assert table.view() == []
        assert table.aggregate() == []

    def test_single_row_batches(self):
        table = PivotTable()
        for i in range(3):
            table.update([row(ratio=1.0 + i / 100, ts=T0 + timedelta(seconds=i))])

        assert table.size() == 3
        view = table.view()
        assert [r["row_path"] for r in view] == [[T0 + timedelta(seconds=i)] for i in range(3)]
        assert view[2]["ratio"] == pytest.approx(1.02)

    def test_same_timestamp_merged_with_mean(self):
        table = PivotTable()
        table.update([row(ratio=1.0, price_a=10.0)])
        table.update([row(ratio=1.02, price_a=20.0)])

        [merged] = table.aggregate()
        assert merged["row_path"] == [T0]
        assert merged["ratio"] == pytest.approx(1.01)
        assert merged["price_a"] == pytest.approx(15.0)
        assert merged["upper_bound"] == pytest.approx(1.05)
        assert merged["timestamp"] == 1

    def test_absent_alert_not_counted_as_zero(self):
        table = PivotTable()
        table.update([row(ratio=2.0, trigger_alert=2.0)])
        table.update([row(ratio=1.0)])

        [merged] = table.view()
        assert merged["trigger_alert"] == pytest.approx(2.0)
        assert merged["ratio"] == pytest.approx(1.5)

    def test_group_without_alerts_is_none(self):
        table = PivotTable()
        table.update([row(ratio=1.0)])
        table.update([row(ratio=1.01)])

        [merged] = table.view()
        assert merged["trigger_alert"] is None

    def test_view_projects_visible_columns(self):
        table = PivotTable()
        table.update([row()])

        [view_row] = table.view()
        assert set(view_row) == {"row_path", "ratio", "lower_bound", "upper_bound", "trigger_alert"}

    def test_non_finite_values_tolerated(self):
        table = PivotTable()
        table.update([row(ratio=float("inf"), trigger_alert=float("inf"), price_b=0.0)])
        table.update([row(ratio=float("nan"), price_a=0.0, price_b=0.0, ts=T0 + timedelta(seconds=1))])

        first, second = table.view()
        assert math.isinf(first["ratio"])
        assert math.isinf(first["trigger_alert"])
        assert math.isnan(second["ratio"])
        assert second["trigger_alert"] is None

    def test_nan_propagates_through_merge(self):
        table = PivotTable()
        table.update([row(ratio=float("nan"), price_a=0.0, price_b=0.0)])
        table.update([row(ratio=1.0)])

        [merged] = table.aggregate()
        assert math.isnan(merged["ratio"])
        assert merged["trigger_alert"] is None
        assert merged["price_a"] == pytest.approx(0.5)
        assert merged["timestamp"] == 1

    def test_inf_and_nan_alerts_merge(self):
        table = PivotTable()
        table.update([row(ratio=float("inf"), trigger_alert=float("inf"))])
        table.update([row(ratio=float("nan"), trigger_alert=float("nan"))])

        [merged] = table.view()
        assert math.isnan(merged["ratio"])
        assert math.isnan(merged["trigger_alert"])

    def test_presence_mask_separates_none_from_nan(self):
        table = PivotTable()
        table.update([row(ratio=float("nan"), trigger_alert=None)])

        df = table.to_dataframe()
        mask = table.presence_mask()
        assert df["ratio"].isna().all() and df["trigger_alert"].isna().all()
        assert bool(mask.loc[0, "ratio"]) is True
        assert bool(mask.loc[0, "trigger_alert"]) is False

    def test_batch_is_all_or_nothing(self):
        table = PivotTable()
        with pytest.raises(SchemaMismatchError):
            table.update([row(), {**row(), "ratio": "bad"}])
        assert table.size() == 0

    def test_limit_evicts_oldest(self):
        table = PivotTable(limit=2)
        for i in range(4):
            table.update([row(ts=T0 + timedelta(seconds=i))])

        assert table.size() == 2
        assert [r["row_path"][0] for r in table.view()] == [T0 + timedelta(seconds=2), T0 + timedelta(seconds=3)]

    def test_clear_and_stats(self):
        table = PivotTable()
        table.update([row()])
        table.update([row(ts=T0 + timedelta(seconds=1))])

        stats = table.stats()
        assert stats["rows"] == 2
        assert stats["updates"] == 2
        assert stats["groups"] == 2

        table.clear()
        assert table.size() == 0
        assert table.stats()["updates"] == 0

    def test_dataframe_types(self):
        table = PivotTable()
        table.update([row(trigger_alert=None)])
        df = table.to_dataframe()

        assert str(df["ratio"].dtype) == "float64"
        assert str(df["trigger_alert"].dtype) == "float64"
        assert df["trigger_alert"].isna().all()
        assert str(df["timestamp"].dtype).startswith("datetime64")

    def test_records_from_reducer(self):
        table = PivotTable()
        for pair in (make_pair(101, 99, 50, 50), make_pair(100, 100, 100, 100)):
            table.update([generate_row(pair).to_row()])

        [merged] = table.view()
        assert merged["ratio"] == pytest.approx(1.5)
        assert merged["trigger_alert"] == pytest.approx(2.0)
