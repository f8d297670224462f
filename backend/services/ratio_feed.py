"""
Ratio Feed Service
Quote pairs in, one table row per pair out.

Usage:
    from services import get_ratio_feed

    feed = get_ratio_feed()
    record = feed.process([quote_abc, quote_def])
    # Row is already in the table, breach monitor already evaluated
"""

from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from alerts import BreachMonitor
from analytics import generate_row
from core import AnalyticalRecord, InvalidInputError, RatioBounds
from sink import PivotTable, RecordSink
from utils.logger import logger

OnRecordCallback = Callable[[AnalyticalRecord], None]


class RatioFeed:
    """
    Drives reducer → sink for every quote pair, in arrival order.

    The sink only ever sees non-decreasing timestamps: a pair that
    reduces to an older timestamp than the last submitted record is
    skipped and counted as out of order.
    """

    def __init__(
        self,
        sink: RecordSink,
        bounds: Optional[RatioBounds] = None,
        monitor: Optional[BreachMonitor] = None
    ):
        self.sink = sink
        self.bounds = bounds or RatioBounds()
        self.monitor = monitor or BreachMonitor()
        self._on_record: List[OnRecordCallback] = []
        self._last_record: Optional[AnalyticalRecord] = None
        self._stats = self._fresh_stats()

    @staticmethod
    def _fresh_stats() -> Dict[str, Any]:
        return {
            "pairs_received": 0,
            "records_submitted": 0,
            "alerts": 0,
            "invalid": 0,
            "out_of_order": 0,
            "non_finite": 0,
            "start_time": datetime.now(),
        }

    @property
    def last_record(self) -> Optional[AnalyticalRecord]:
        return self._last_record

    def process(self, quotes: Sequence[Any]) -> Optional[AnalyticalRecord]:
        """
        Reduce one pair and submit it.

        Returns:
            The submitted record, or None if it was out of order

        Raises:
            InvalidInputError: pair could not be reduced (nothing submitted)
        """
        self._stats["pairs_received"] += 1

        try:
            record = generate_row(quotes, self.bounds)
        except InvalidInputError as e:
            self._stats["invalid"] += 1
            logger.warning(f"Skipping invalid quote pair: {e}")
            raise

        last = self._last_record
        if last is not None and record.timestamp < last.timestamp:
            self._stats["out_of_order"] += 1
            logger.warning(
                f"Out-of-order record at {record.timestamp.isoformat()} "
                f"(last {last.timestamp.isoformat()}), not submitted"
            )
            return None

        self.sink.update([record.to_row()])
        self._last_record = record
        self._stats["records_submitted"] += 1

        if not record.is_finite:
            self._stats["non_finite"] += 1
            logger.warning(f"Non-finite ratio {record.ratio!r} at {record.timestamp.isoformat()}")
        if record.is_alert:
            self._stats["alerts"] += 1

        self.monitor.evaluate(record)

        for callback in self._on_record:
            try:
                callback(record)
            except Exception as e:
                logger.exception(f"Record callback failed: {e}")

        return record

    def process_many(self, pairs: Iterable[Sequence[Any]]) -> List[AnalyticalRecord]:
        """Process pairs in order, skipping invalid or out-of-order ones."""
        records = []
        for pair in pairs:
            try:
                record = self.process(pair)
            except InvalidInputError:
                continue
            if record is not None:
                records.append(record)
        return records

    def on_record(self, callback: OnRecordCallback) -> None:
        self._on_record.append(callback)

    def reset(self) -> None:
        self._last_record = None
        self._stats = self._fresh_stats()

    def stats(self) -> Dict[str, Any]:
        uptime = (datetime.now() - self._stats["start_time"]).total_seconds()
        last = self._last_record
        return {
            **{k: v for k, v in self._stats.items() if k != "start_time"},
            "uptime_seconds": round(uptime, 2),
            "last_timestamp": last.timestamp.isoformat() if last else None,
            "upper_bound": self.bounds.upper_bound,
            "lower_bound": self.bounds.lower_bound,
        }


_feed: Optional[RatioFeed] = None


def get_ratio_feed() -> RatioFeed:
    global _feed
    if _feed is None:
        from config import ALERT_HISTORY_SIZE, TABLE_ROW_LIMIT

        _feed = RatioFeed(
            sink=PivotTable(limit=TABLE_ROW_LIMIT),
            bounds=RatioBounds.default(),
            monitor=BreachMonitor(history_size=ALERT_HISTORY_SIZE),
        )
        logger.info(
            f"Ratio feed ready (bounds {_feed.bounds.lower_bound}–{_feed.bounds.upper_bound}, "
            f"row limit {TABLE_ROW_LIMIT or 'none'})"
        )
    return _feed
