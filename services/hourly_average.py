"""Hourly-average view of a station over the trailing calendar month."""

from __future__ import annotations

import calendar
import logging
import time
from datetime import date, datetime, timezone
from functools import lru_cache
from typing import Optional, Tuple, Union

from app.schemas import HourlyAverageResponse
from datastore.mock_dynamodb import MockDynamoDBTable, build_default_table
from services.aggregator import HourlyAggregator
from services.assembler import assemble
from services.errors import ValidationError
from services.local_time import build_default_resolver
from services.pager import RangeQueryPager, window_keys

logger = logging.getLogger(__name__)


def one_month_before(day: date) -> date:
    """Same day of the previous month, clamped to that month's length."""
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def trailing_month(today: date) -> Tuple[date, date]:
    return one_month_before(today), today


def parse_station_id(raw: Union[str, int, None]) -> int:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValidationError("Missing stationId parameter", parameter="stationId")
    if isinstance(raw, bool):
        raise ValidationError("stationId must be an integer", parameter="stationId")
    try:
        station_id = int(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            f"stationId must be an integer, got {raw!r}", parameter="stationId"
        ) from exc
    if station_id < 0:
        raise ValidationError("stationId must not be negative", parameter="stationId")
    return station_id


class HourlyAverageService:
    """Fetches a station's trailing month and aggregates it by local hour."""

    def __init__(
        self,
        table: MockDynamoDBTable,
        aggregator: HourlyAggregator,
        page_size: Optional[int] = None,
    ) -> None:
        self.table = table
        self.aggregator = aggregator
        self.pager = RangeQueryPager(table, page_size=page_size)

    def get_hourly_average(
        self,
        station_id: Union[str, int, None],
        today: Optional[date] = None,
    ) -> HourlyAverageResponse:
        station = parse_station_id(station_id)
        current_day = today or datetime.now(timezone.utc).date()
        start, end = trailing_month(current_day)
        start_time = time.perf_counter()

        logger.info(
            "Computing hourly averages",
            extra={"station_id": station},
        )
        start_key, end_key = window_keys(station, start, end)
        records = self.pager.fetch_window(station, start_key, end_key)
        aggregation = self.aggregator.aggregate(records)
        response = assemble(station, start, end, aggregation)

        logger.info(
            "Computed hourly averages",
            extra={
                "station_id": station,
                "record_count": aggregation.record_count,
                "skipped_count": aggregation.skipped,
                "sensor_count": len(response.sensor_data),
                "elapsed_ms": int((time.perf_counter() - start_time) * 1000),
            },
        )
        return response


@lru_cache
def build_default_service() -> HourlyAverageService:
    """Factory that wires the service with the default table and resolver."""
    table = build_default_table()
    aggregator = HourlyAggregator(build_default_resolver())
    return HourlyAverageService(table=table, aggregator=aggregator)
