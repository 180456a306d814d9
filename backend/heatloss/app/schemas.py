"""
Request and response models for the heat loss API
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from heatloss.domain.models.inputs import FlowTemperature, Room
from heatloss.domain.radiators.catalog import Radiator


class ValidationResponse(BaseModel):
    """Advisory validation result"""
    messages: List[str] = Field(default_factory=list, description="Human-readable issues, empty when none found")
    valid: bool = Field(..., description="True when no issues were found")


class RadiatorSelectRequest(BaseModel):
    room: Room
    required_output: float = Field(..., description="Required heat output in watts, safety margin included")
    flow_temperature: FlowTemperature = FlowTemperature.HIGH
    catalog: Optional[List[Radiator]] = Field(None, description="Radiators to choose from, built-in sample range when omitted")
    exclude_ids: List[str] = Field(default_factory=list, description="Radiators left out of the alternatives")
    alternatives: int = Field(5, ge=0, le=20, description="Maximum number of alternatives returned")


class RadiatorSelectResponse(BaseModel):
    selection: Optional[dict] = None
    alternatives: List[dict] = Field(default_factory=list)
