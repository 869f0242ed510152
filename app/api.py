"""HTTP route definitions for the service."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas import ErrorResponse, HourlyAverageResponse
from services.errors import ConfigurationError, StoreQueryError, ValidationError
from services.hourly_average import HourlyAverageService, build_default_service

router = APIRouter()

logger = logging.getLogger(__name__)

_FAILURE_MESSAGE = "Failed to get hourly average data"


def get_service() -> HourlyAverageService:
    try:
        return build_default_service()
    except ConfigurationError as exc:
        logger.error("Service is misconfigured", extra={"reason": str(exc)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ErrorResponse(
                message=_FAILURE_MESSAGE, error=f"{exc.kind}: {exc}"
            ).model_dump(),
        ) from exc


@router.get(
    "/traffic/station/{station_id}/hourly-average",
    response_model=HourlyAverageResponse,
    summary="Hourly traffic-count and speed averages over the last month.",
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def get_hourly_average(
    station_id: str,
    service: HourlyAverageService = Depends(get_service),
) -> HourlyAverageResponse:
    try:
        return service.get_hourly_average(station_id)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ErrorResponse(message=str(exc), error=exc.kind).model_dump(),
        ) from exc
    except (ConfigurationError, StoreQueryError) as exc:
        logger.error(
            "Error getting hourly average data",
            extra={"station_id": station_id, "reason": str(exc)},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ErrorResponse(
                message=_FAILURE_MESSAGE, error=f"{exc.kind}: {exc}"
            ).model_dump(),
        ) from exc
    except Exception as exc:
        logger.exception(
            "Unexpected error getting hourly average data",
            extra={"station_id": station_id, "reason": str(exc)},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ErrorResponse(
                message=_FAILURE_MESSAGE, error=f"{type(exc).__name__}: {exc}"
            ).model_dump(),
        ) from exc


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
