"""Semantic classification of sensor readings by name and unit."""

from __future__ import annotations

from enum import Enum

from models.records import SensorRecord

TRAFFIC_COUNT_MARKER = "OHITUKSET"
TRAFFIC_COUNT_UNIT = "kpl/h"
AVERAGE_SPEED_MARKER = "KESKINOPEUS"
AVERAGE_SPEED_UNIT = "km/h"


class SensorCategory(str, Enum):
    traffic_count = "traffic_count"
    average_speed = "average_speed"
    other = "other"


def classify_sensor(name: str, unit: str) -> SensorCategory:
    # Name is a substring match, unit must match exactly. Both case-sensitive.
    if TRAFFIC_COUNT_MARKER in name and unit == TRAFFIC_COUNT_UNIT:
        return SensorCategory.traffic_count
    if AVERAGE_SPEED_MARKER in name and unit == AVERAGE_SPEED_UNIT:
        return SensorCategory.average_speed
    return SensorCategory.other


def classify(record: SensorRecord) -> SensorCategory:
    return classify_sensor(record.sensor_name, record.unit)
