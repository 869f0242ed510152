"""Exhaustive key-range retrieval from the partitioned traffic table."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Tuple

from datastore.mock_dynamodb import MockDynamoDBTable
from models.records import SensorRecord
from services.errors import StoreQueryError

logger = logging.getLogger(__name__)


def window_keys(station_id: int, start: date, end: date) -> Tuple[str, str]:
    """Sort-key bounds covering every reading from ``start`` through the end of ``end``."""
    start_key = f"{station_id}#{start.isoformat()}"
    end_key = f"{station_id}#{end.isoformat()}T23:59:59.999"
    return start_key, end_key


class RangeQueryPager:
    """Follows continuation keys until the store reports no further pages."""

    def __init__(self, table: MockDynamoDBTable, page_size: Optional[int] = None) -> None:
        self.table = table
        self.page_size = page_size

    def fetch_window(self, station_id: int, start_key: str, end_key: str) -> list[SensorRecord]:
        records: list[SensorRecord] = []
        continuation: Optional[str] = None
        page_number = 0

        try:
            while True:
                page_number += 1
                page = self.table.query(
                    partition_key=station_id,
                    key_range=(start_key, end_key),
                    limit=self.page_size,
                    exclusive_start_key=continuation,
                )
                records.extend(SensorRecord.from_item(item) for item in page.items)
                logger.debug(
                    "Fetched page",
                    extra={
                        "station_id": station_id,
                        "page": page_number,
                        "page_size": len(page.items),
                    },
                )
                continuation = page.last_evaluated_key
                if continuation is None:
                    break
        except Exception as exc:
            logger.error(
                "Range query failed",
                extra={
                    "station_id": station_id,
                    "start_key": start_key,
                    "end_key": end_key,
                    "page": page_number,
                    "reason": str(exc),
                },
            )
            raise StoreQueryError(
                f"Query for station {station_id} failed on page {page_number}: {exc}"
            ) from exc

        logger.info(
            "Fetched station window",
            extra={
                "station_id": station_id,
                "start_key": start_key,
                "end_key": end_key,
                "page": page_number,
                "record_count": len(records),
            },
        )
        return records
