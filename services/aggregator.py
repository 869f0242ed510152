"""Hourly aggregation of sensor records by local hour of day."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Set

from models.records import SensorRecord
from services.classifier import SensorCategory, classify
from services.local_time import LocalHourResolver

HOURS_PER_DAY = 24

logger = logging.getLogger(__name__)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round half away from zero, unlike the banker's rounding of ``round``."""
    exponent = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP))


@dataclass
class HourBucket:
    sum: float = 0.0
    count: int = 0

    def add(self, value: float) -> None:
        self.sum += value
        self.count += 1

    def average(self, ndigits: int = 1) -> float:
        if self.count == 0:
            return 0
        return round_half_up(self.sum / self.count, ndigits)


def _is_usable(value: Optional[float]) -> bool:
    # missing, zero and non-finite readings contribute to no bucket
    return value is not None and value != 0 and math.isfinite(value)


def _empty_day() -> List[HourBucket]:
    return [HourBucket() for _ in range(HOURS_PER_DAY)]


@dataclass
class HourlyAggregation:
    """Request-scoped buckets produced by :class:`HourlyAggregator`."""

    per_sensor: Dict[str, List[HourBucket]] = field(default_factory=dict)
    units: Dict[str, str] = field(default_factory=dict)
    categorized: Set[str] = field(default_factory=set)
    traffic_count: List[HourBucket] = field(default_factory=_empty_day)
    avg_speed: List[HourBucket] = field(default_factory=_empty_day)
    record_count: int = 0
    skipped: int = 0

    def sensor_series(self, name: str) -> List[float]:
        return [bucket.average(1) for bucket in self.per_sensor[name]]

    def traffic_count_series(self) -> List[int]:
        return [int(bucket.average(0)) for bucket in self.traffic_count]

    def avg_speed_series(self) -> List[float]:
        return [bucket.average(1) for bucket in self.avg_speed]


class HourlyAggregator:
    """Groups records by sensor name and local hour, and by sensor category."""

    def __init__(self, resolver: LocalHourResolver) -> None:
        self.resolver = resolver

    def aggregate(self, records: Iterable[SensorRecord]) -> HourlyAggregation:
        result = HourlyAggregation()

        for record in records:
            result.record_count += 1
            name = record.sensor_name
            if name not in result.per_sensor:
                result.per_sensor[name] = _empty_day()
                result.units[name] = record.unit

            category = classify(record)
            if category is not SensorCategory.other:
                result.categorized.add(name)

            if not _is_usable(record.value):
                result.skipped += 1
                continue

            hour = self._resolve_hour(record)
            if hour is None:
                result.skipped += 1
                continue

            result.per_sensor[name][hour].add(record.value)
            if category is SensorCategory.traffic_count:
                result.traffic_count[hour].add(record.value)
            elif category is SensorCategory.average_speed:
                result.avg_speed[hour].add(record.value)

        return result

    def _resolve_hour(self, record: SensorRecord) -> Optional[int]:
        try:
            return self.resolver.local_hour(record.timestamp)
        except ValueError:
            logger.warning(
                "Skipping record with unparseable timestamp",
                extra={
                    "station_id": record.station_id,
                    "timestamp": record.timestamp,
                    "reason": "invalid timestamp",
                },
            )
            return None
