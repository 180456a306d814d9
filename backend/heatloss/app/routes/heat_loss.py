import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Query, Request

from heatloss.app.schemas import ValidationResponse
from heatloss.domain.core.uvalues import reference_tables
from heatloss.services.heat_loss_service import HeatLossService

logger = logging.getLogger(__name__)
router = APIRouter()


def get_service(request: Request) -> HeatLossService:
    return request.app.state.heat_loss_service


@router.post("/calculate")
async def calculate_heat_loss(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    strict: Optional[bool] = Query(None, description="Reject the request on any validation message"),
):
    """
    Calculate room-by-room heat loss with provenance for a building.
    Errors are handled by the structured error handler.
    """
    report = get_service(request).calculate(payload, strict=strict)
    logger.info(f"Calculated {report.room_count} room(s), total {report.total_heat_load:.0f}W")
    return report.to_json()


@router.post("/validate", response_model=ValidationResponse)
async def validate_heat_loss(request: Request, payload: Dict[str, Any] = Body(...)):
    """Advisory validation only, never calculates"""
    messages = get_service(request).validate(payload)
    return ValidationResponse(messages=messages, valid=not messages)


@router.get("/uvalues")
async def get_uvalues():
    """U-value reference tables keyed by construction tag"""
    return reference_tables()
