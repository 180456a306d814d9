"""
Input records for room heat loss calculations

Pydantic models for the room geometry, building fabric, climate and design
conditions supplied by the calling application. Records are frozen: the
calculation core reads them but never mutates them.

Range checks are deliberately absent here. Out-of-range values (zero area,
warm design temperatures, ...) must reach the advisory validator as data.
The one structural rule enforced at construction time is the door U-value,
which has no fallback in the calculation.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RoomType(str, Enum):
    LIVING_ROOM = "living_room"
    DINING_ROOM = "dining_room"
    KITCHEN = "kitchen"
    BEDROOM = "bedroom"
    BATHROOM = "bathroom"
    HALLWAY = "hallway"
    STUDY = "study"
    UTILITY = "utility"
    CONSERVATORY = "conservatory"
    GARAGE = "garage"
    OTHER = "other"


class WallConstruction(str, Enum):
    SOLID_BRICK_UNINSULATED = "solid_brick_uninsulated"
    SOLID_BRICK_INTERNAL_INSULATION = "solid_brick_internal_insulation"
    CAVITY_UNINSULATED = "cavity_uninsulated"
    CAVITY_PARTIAL_FILL = "cavity_partial_fill"
    CAVITY_FULL_FILL = "cavity_full_fill"
    MODERN_INSULATED = "modern_insulated"
    TIMBER_FRAME = "timber_frame"


class RoofConstruction(str, Enum):
    UNINSULATED = "uninsulated"
    LOFT_INSULATION_100MM = "loft_insulation_100mm"
    LOFT_INSULATION_270MM = "loft_insulation_270mm"
    WARM_ROOF = "warm_roof"
    FLAT_ROOF_INSULATED = "flat_roof_insulated"


class FloorConstruction(str, Enum):
    SOLID_UNINSULATED = "solid_uninsulated"
    SOLID_INSULATED = "solid_insulated"
    SUSPENDED_TIMBER_UNINSULATED = "suspended_timber_uninsulated"
    SUSPENDED_TIMBER_INSULATED = "suspended_timber_insulated"
    BEAM_BLOCK = "beam_block"


class GlazingType(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"
    DOUBLE_LOW_E = "double_low_e"
    TRIPLE = "triple"


class FlowTemperature(str, Enum):
    """Flow/return temperature of the heating system (°C)"""
    HIGH = "70/50"
    MEDIUM = "60/40"
    LOW = "50/30"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=False)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class Wall(_Record):
    """Wall bounding a room. Only external walls lose heat."""
    id: str
    length: float = Field(..., description="Wall length in metres")
    height: float = Field(..., description="Wall height in metres")
    is_external: bool = False
    u_value: Optional[float] = Field(None, description="W/m²K, overrides building and construction defaults")

    @property
    def gross_area(self) -> float:
        return self.length * self.height


class Window(_Record):
    id: str
    wall_id: str = Field(..., description="Wall the window sits on")
    width: float
    height: float
    glazing_type: GlazingType = GlazingType.DOUBLE
    u_value: Optional[float] = Field(None, description="W/m²K, overrides the glazing type default")
    position: Optional[float] = Field(None, description="Metres from wall start to window centre")

    @property
    def area(self) -> float:
        return self.width * self.height


class Door(_Record):
    id: str
    wall_id: str = Field(..., description="Wall the door sits on")
    width: float
    height: float
    is_external: bool = False
    u_value: float = Field(..., description="W/m²K, mandatory: there is no construction fallback for doors")
    position: Optional[float] = Field(None, description="Metres from wall start to door centre")

    @property
    def area(self) -> float:
        return self.width * self.height


class Room(_Record):
    id: str
    name: str
    type: RoomType = RoomType.OTHER
    area: float = Field(..., description="Floor area in m²")
    volume: float = Field(..., description="Room volume in m³")
    ceiling_height: float = Field(2.4, description="Metres, 2.4 is the typical UK residential height")
    perimeter: float = 0.0
    target_temperature: Optional[float] = Field(None, description="°C, overrides the room type default")
    walls: List[Wall] = Field(default_factory=list)
    windows: List[Window] = Field(default_factory=list)
    doors: List[Door] = Field(default_factory=list)

    @property
    def external_walls(self) -> List[Wall]:
        return [wall for wall in self.walls if wall.is_external]

    def windows_on(self, wall_id: str) -> List[Window]:
        return [w for w in self.windows if w.wall_id == wall_id]

    def doors_on(self, wall_id: str) -> List[Door]:
        return [d for d in self.doors if d.wall_id == wall_id]


class BuildingData(_Record):
    """Fabric and airtightness data shared by every room in the building"""
    air_changes_per_hour: float = Field(1.0, description="ACH, 1.0 is the post-2000 standard build default")
    wall_construction: Optional[WallConstruction] = None
    wall_u_value: Optional[float] = None
    roof_construction: Optional[RoofConstruction] = None
    roof_u_value: Optional[float] = None
    floor_construction: Optional[FloorConstruction] = None
    floor_u_value: Optional[float] = None
    construction_year: Optional[int] = None


class ClimateData(_Record):
    outside_design_temp: float = Field(..., description="°C, typically -3 for the UK")
    postcode: str = ""
    region: str = ""
    wind_speed: float = Field(4.5, description="m/s")
    altitude: float = Field(50.0, description="metres")

    @classmethod
    def for_region(cls, region: str, postcode: str = "", altitude: float = 50.0) -> "ClimateData":
        """Build climate data from the UK regional design table"""
        from heatloss.domain.core.uvalues import get_region_climate
        climate = get_region_climate(region)
        return cls(
            outside_design_temp=climate.outside_design_temp,
            wind_speed=climate.wind_speed,
            postcode=postcode,
            region=region,
            altitude=altitude,
        )


class DesignConditions(_Record):
    safety_margin: float = Field(15.0, description="Percentage added to the total loss")
    thermal_bridging: float = Field(0.15, description="Y-value in W/m²K")
    infiltration_rate: Optional[float] = Field(None, description="ACH recorded for audit, the calculation uses the building value")
    flow_temperature: FlowTemperature = FlowTemperature.HIGH
    # Per-project overrides; room types not listed use the target temperature lookup
    target_temperatures: Dict[RoomType, float] = Field(default_factory=dict)


class HeatLossInputs(_Record):
    """Everything needed to calculate and validate a single room"""
    room: Room
    building: BuildingData = Field(default_factory=BuildingData)
    climate: ClimateData
    design_conditions: DesignConditions = Field(default_factory=DesignConditions)


class BuildingHeatLossInputs(_Record):
    """All rooms of a building sharing one set of fabric, climate and design data"""
    rooms: List[Room]
    building: BuildingData = Field(default_factory=BuildingData)
    climate: ClimateData
    design_conditions: DesignConditions = Field(default_factory=DesignConditions)

    def room_inputs(self) -> List[HeatLossInputs]:
        return [
            HeatLossInputs(
                room=room,
                building=self.building,
                climate=self.climate,
                design_conditions=self.design_conditions,
            )
            for room in self.rooms
        ]
