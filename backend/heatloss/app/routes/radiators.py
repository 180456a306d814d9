import logging

from fastapi import APIRouter

from heatloss.app.schemas import RadiatorSelectRequest, RadiatorSelectResponse
from heatloss.domain.radiators.catalog import SAMPLE_CATALOG
from heatloss.domain.radiators.selector import get_alternative_radiators, select_radiator

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/catalog")
async def get_catalog():
    return {"radiators": [radiator.to_json() for radiator in SAMPLE_CATALOG]}


@router.post("/select", response_model=RadiatorSelectResponse)
async def select_room_radiator(request: RadiatorSelectRequest):
    """Best radiator for a room plus ranked alternatives"""
    catalog = request.catalog if request.catalog is not None else SAMPLE_CATALOG

    selection = select_radiator(request.required_output, request.room, request.flow_temperature, catalog)
    excluded = list(request.exclude_ids)
    if selection is not None:
        excluded.append(selection.radiator.id)

    alternatives = get_alternative_radiators(
        request.required_output,
        request.room,
        request.flow_temperature,
        catalog,
        exclude_ids=excluded,
        limit=request.alternatives,
    )

    if selection is None:
        logger.info(f"No radiator fits room {request.room.id} for {request.required_output:.0f}W")

    return RadiatorSelectResponse(
        selection=selection.to_json() if selection is not None else None,
        alternatives=[alt.to_json() for alt in alternatives],
    )
