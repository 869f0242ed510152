"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(slots=True)
class SensorRecord:
    """A single measurement emitted by one sensor of a measuring station."""

    station_id: int
    sensor_name: str
    unit: str
    value: Optional[float]
    measured_time: str
    time_window_start: Optional[str] = None
    time_window_end: Optional[str] = None
    sensor_id: Optional[int] = None
    short_name: Optional[str] = None

    @property
    def composite_key(self) -> str:
        return f"{self.station_id}#{self.measured_time}#{self.sensor_name}"

    @property
    def timestamp(self) -> str:
        """Start of the aggregation window when known, else the measurement time."""
        return self.time_window_start or self.measured_time

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "SensorRecord":
        """Build a record from a stored item using the table's attribute names."""
        raw_value = item.get("value")
        return cls(
            station_id=int(item["stationId"]),
            sensor_name=str(item["name"]),
            unit=str(item.get("unit") or ""),
            value=None if raw_value is None else float(raw_value),
            measured_time=str(item["measuredTime"]),
            time_window_start=item.get("timeWindowStart") or None,
            time_window_end=item.get("timeWindowEnd") or None,
            sensor_id=item.get("id"),
            short_name=item.get("shortName"),
        )

    def to_item(self) -> Dict[str, Any]:
        item: Dict[str, Any] = {
            "stationId": self.station_id,
            "compositeKey": self.composite_key,
            "name": self.sensor_name,
            "unit": self.unit,
            "value": self.value,
            "measuredTime": self.measured_time,
        }
        optional = {
            "timeWindowStart": self.time_window_start,
            "timeWindowEnd": self.time_window_end,
            "id": self.sensor_id,
            "shortName": self.short_name,
        }
        item.update({key: value for key, value in optional.items() if value is not None})
        return item
