"""
U-Value Library for UK Building Construction Types
Reference tables for walls, roofs, floors, glazing and doors, plus the
room-type target temperatures and regional design conditions used as
defaults by the heat loss calculation.

Based on BR 443 (Conventions for U-value calculations) and typical UK
construction by era.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict

from heatloss.domain.models.inputs import (
    FloorConstruction,
    GlazingType,
    RoofConstruction,
    RoomType,
    WallConstruction,
)
from heatloss.services.error_types import UnknownConstructionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UValueData:
    """Thermal transmittance of a construction"""
    u_value: float  # W/m²K
    description: str

    def to_json(self) -> Dict[str, Any]:
        return {"u_value": self.u_value, "description": self.description}


@dataclass(frozen=True)
class RegionClimate:
    outside_design_temp: float  # °C
    wind_speed: float  # m/s
    description: str


WALL_CONSTRUCTIONS: Dict[WallConstruction, UValueData] = {
    WallConstruction.SOLID_BRICK_UNINSULATED: UValueData(2.1, "Solid brick (215mm), no insulation, pre-1920s"),
    WallConstruction.SOLID_BRICK_INTERNAL_INSULATION: UValueData(0.45, "Solid brick with 50mm internal insulation"),
    WallConstruction.CAVITY_UNINSULATED: UValueData(1.6, "Cavity wall, no fill, 1920s-1980s"),
    WallConstruction.CAVITY_PARTIAL_FILL: UValueData(0.6, "Cavity wall, partial fill insulation"),
    WallConstruction.CAVITY_FULL_FILL: UValueData(0.35, "Cavity wall, full fill insulation"),
    WallConstruction.MODERN_INSULATED: UValueData(0.18, "Modern cavity with 100mm+ insulation (post-2006)"),
    WallConstruction.TIMBER_FRAME: UValueData(0.25, "Timber frame with insulation"),
}

ROOF_CONSTRUCTIONS: Dict[RoofConstruction, UValueData] = {
    RoofConstruction.UNINSULATED: UValueData(2.3, "Pitched roof, no insulation"),
    RoofConstruction.LOFT_INSULATION_100MM: UValueData(0.4, "Pitched roof with 100mm loft insulation"),
    RoofConstruction.LOFT_INSULATION_270MM: UValueData(0.16, "Pitched roof with 270mm loft insulation (current regulations)"),
    RoofConstruction.WARM_ROOF: UValueData(0.18, "Warm roof construction with insulation above rafters"),
    RoofConstruction.FLAT_ROOF_INSULATED: UValueData(0.25, "Flat roof with insulation"),
}

FLOOR_CONSTRUCTIONS: Dict[FloorConstruction, UValueData] = {
    FloorConstruction.SOLID_UNINSULATED: UValueData(0.7, "Solid concrete floor, no insulation"),
    FloorConstruction.SOLID_INSULATED: UValueData(0.25, "Solid floor with insulation (post-2002)"),
    FloorConstruction.SUSPENDED_TIMBER_UNINSULATED: UValueData(0.9, "Suspended timber floor, no insulation"),
    FloorConstruction.SUSPENDED_TIMBER_INSULATED: UValueData(0.25, "Suspended timber floor with insulation"),
    FloorConstruction.BEAM_BLOCK: UValueData(0.22, "Beam and block floor with insulation"),
}

GLAZING_TYPES: Dict[GlazingType, UValueData] = {
    GlazingType.SINGLE: UValueData(4.8, "Single glazed"),
    GlazingType.DOUBLE: UValueData(2.8, "Standard double glazed"),
    GlazingType.DOUBLE_LOW_E: UValueData(1.8, "Double glazed with low-E coating"),
    GlazingType.TRIPLE: UValueData(1.2, "Triple glazed"),
}

# Doors always carry their own U-value; this table is reference data for data entry
DOOR_U_VALUES: Dict[str, UValueData] = {
    "solid_timber": UValueData(3.0, "Solid timber door"),
    "semi_glazed": UValueData(3.5, "Door with partial glazing"),
    "insulated": UValueData(2.0, "Insulated door"),
    "upvc": UValueData(1.8, "uPVC door with double glazing"),
}

# Design internal temperatures by room type (°C)
DEFAULT_TARGET_TEMPERATURES: Dict[RoomType, float] = {
    RoomType.LIVING_ROOM: 21,
    RoomType.DINING_ROOM: 21,
    RoomType.KITCHEN: 18,
    RoomType.BEDROOM: 18,
    RoomType.BATHROOM: 22,
    RoomType.HALLWAY: 18,
    RoomType.STUDY: 20,
    RoomType.UTILITY: 16,
    RoomType.CONSERVATORY: 18,
    RoomType.GARAGE: 10,
    RoomType.OTHER: 18,
}
FALLBACK_TARGET_TEMPERATURE = 18.0

# Thermal bridging Y-values (W/m²K), applied to gross external wall area
THERMAL_BRIDGING = {
    "default": 0.15,  # Typical for mixed construction
    "good_design": 0.08,
    "poor_construction": 0.25,  # Older buildings with significant bridging
    "passivhaus": 0.03,
}

# Air changes per hour by building age/quality
AIR_CHANGE_RATES = {
    "modern_airtight": 0.5,  # Post-2010 with good airtightness
    "modern_standard": 1.0,  # Post-2000 standard build
    "older_renovated": 1.5,
    "older_poor": 2.5,
    "victorian": 3.0,
}

UK_CLIMATE_REGIONS: Dict[str, RegionClimate] = {
    "South East": RegionClimate(-2, 4.5, "Mildest region"),
    "South West": RegionClimate(-1, 5.0, "Mild, coastal influence"),
    "East Anglia": RegionClimate(-3, 5.5, "Cold winters, exposed"),
    "Midlands": RegionClimate(-3, 4.0, "Continental climate"),
    "North West": RegionClimate(-3, 5.5, "Maritime climate"),
    "North East": RegionClimate(-4, 5.0, "Cold winters"),
    "Yorkshire": RegionClimate(-4, 5.5, "Cold, exposed"),
    "Wales": RegionClimate(-2, 6.0, "Maritime, windy"),
    "Scotland": RegionClimate(-5, 6.5, "Cold winters, exposed"),
    "Northern Ireland": RegionClimate(-3, 5.5, "Maritime climate"),
}
UK_DEFAULT_CLIMATE = RegionClimate(-3, 4.5, "UK design default")


def _lookup(table: Dict[Any, UValueData], enum_cls: type, tag: Any, kind: str) -> float:
    try:
        return table[enum_cls(tag)].u_value
    except (KeyError, ValueError):
        raise UnknownConstructionError(kind, tag) from None


def get_wall_u_value(construction: WallConstruction) -> float:
    return _lookup(WALL_CONSTRUCTIONS, WallConstruction, construction, "wall construction")


def get_roof_u_value(construction: RoofConstruction) -> float:
    return _lookup(ROOF_CONSTRUCTIONS, RoofConstruction, construction, "roof construction")


def get_floor_u_value(construction: FloorConstruction) -> float:
    return _lookup(FLOOR_CONSTRUCTIONS, FloorConstruction, construction, "floor construction")


def get_glazing_u_value(glazing_type: GlazingType) -> float:
    return _lookup(GLAZING_TYPES, GlazingType, glazing_type, "glazing type")


def get_target_temperature(room_type: RoomType) -> float:
    """Design temperature for a room type, 18°C for anything unlisted"""
    try:
        return DEFAULT_TARGET_TEMPERATURES[RoomType(room_type)]
    except ValueError:
        return FALLBACK_TARGET_TEMPERATURE


def get_region_climate(region: str) -> RegionClimate:
    climate = UK_CLIMATE_REGIONS.get(region)
    if climate is None:
        logger.debug(f"No design data for region {region!r}, using UK default")
        return UK_DEFAULT_CLIMATE
    return climate


def get_outside_design_temp(region: str) -> float:
    return get_region_climate(region).outside_design_temp


def reference_tables() -> Dict[str, Dict[str, Any]]:
    """All U-value tables keyed by construction tag, for display"""
    return {
        "walls": {k.value: v.to_json() for k, v in WALL_CONSTRUCTIONS.items()},
        "roofs": {k.value: v.to_json() for k, v in ROOF_CONSTRUCTIONS.items()},
        "floors": {k.value: v.to_json() for k, v in FLOOR_CONSTRUCTIONS.items()},
        "glazing": {k.value: v.to_json() for k, v in GLAZING_TYPES.items()},
        "doors": {k: v.to_json() for k, v in DOOR_U_VALUES.items()},
    }
