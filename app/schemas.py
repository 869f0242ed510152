"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import date
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ApiModel(BaseModel):
    """Base model serializing to the camelCase attribute names of the API."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Period(ApiModel):
    """Calendar dates bounding the aggregation window, both inclusive."""

    start: date
    end: date


class HourlyAverage(ApiModel):
    """Overall traffic-count and speed averages for one local hour."""

    hour: int = Field(..., ge=0, le=23)
    traffic_count: int = Field(0, alias="trafficCount")
    avg_speed: float = Field(0, alias="avgSpeed")


class HourlyValue(ApiModel):
    hour: int = Field(..., ge=0, le=23)
    value: float = 0


class SensorSeries(ApiModel):
    """Hourly averages for a single sensor name."""

    name: str
    unit: str
    hourly_data: List[HourlyValue] = Field(..., alias="hourlyData")


class HourlyAverageResponse(ApiModel):
    """Aggregated hourly view of one station over the trailing month."""

    station_id: int = Field(..., alias="stationId")
    period: Period
    hourly_averages: List[HourlyAverage] = Field(..., alias="hourlyAverages")
    sensor_data: List[SensorSeries] = Field(default_factory=list, alias="sensorData")


class ErrorResponse(BaseModel):
    """Structured failure separating a stable message from the error kind."""

    message: str
    error: str
