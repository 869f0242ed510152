"""Shape aggregation buckets into the hourly-average response contract."""

from __future__ import annotations

from datetime import date

from app.schemas import (
    HourlyAverage,
    HourlyAverageResponse,
    HourlyValue,
    Period,
    SensorSeries,
)
from services.aggregator import HourlyAggregation


def assemble(
    station_id: int,
    period_start: date,
    period_end: date,
    aggregation: HourlyAggregation,
) -> HourlyAverageResponse:
    traffic = aggregation.traffic_count_series()
    speed = aggregation.avg_speed_series()
    hourly_averages = [
        HourlyAverage(hour=hour, traffic_count=traffic[hour], avg_speed=speed[hour])
        for hour in range(len(traffic))
    ]

    # per_sensor preserves first-seen order of sensor names
    sensor_data = [
        SensorSeries(
            name=name,
            unit=aggregation.units[name],
            hourly_data=[
                HourlyValue(hour=hour, value=value)
                for hour, value in enumerate(aggregation.sensor_series(name))
            ],
        )
        for name in aggregation.per_sensor
        if name in aggregation.categorized
    ]

    return HourlyAverageResponse(
        station_id=station_id,
        period=Period(start=period_start, end=period_end),
        hourly_averages=hourly_averages,
        sensor_data=sensor_data,
    )
