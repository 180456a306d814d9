"""
Radiator catalogue records

Panel radiator outputs are quoted per flow/return temperature; lower flow
temperatures (heat pumps) need physically larger emitters for the same load.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import Field

from heatloss.domain.models.inputs import FlowTemperature, _Record


class RadiatorType(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"
    K1 = "K1"  # single panel, single convector
    K2 = "K2"  # double panel, double convector
    K3 = "K3"
    VERTICAL = "vertical"
    COLUMN = "column"


class RadiatorConnection(str, Enum):
    TBOE = "TBOE"  # top bottom opposite end
    BBOE = "BBOE"  # bottom bottom opposite end
    TB_CENTER = "TBCenter"
    BB_CENTER = "BBCenter"


class ValveType(str, Enum):
    TRV = "TRV"
    LOCKSHIELD = "lockshield"
    SMART_TRV = "smart_TRV"


class Radiator(_Record):
    id: str
    manufacturer: str
    model: str
    type: RadiatorType
    height: float = Field(..., description="mm")
    width: float = Field(..., description="mm")
    depth: float = Field(..., description="mm")
    output: Dict[FlowTemperature, float] = Field(..., description="Watts at each flow/return temperature")
    connection_type: RadiatorConnection = RadiatorConnection.BBOE
    price: Optional[float] = Field(None, description="GBP")

    def output_at(self, flow_temperature: FlowTemperature) -> float:
        """Rated output in watts, 0 when not quoted for that flow temperature"""
        return self.output.get(FlowTemperature(flow_temperature), 0.0)

    @property
    def width_m(self) -> float:
        return self.width / 1000

    @property
    def face_area(self) -> float:
        """Front face area in m²"""
        return (self.width * self.height) / 1_000_000


def _panel(rad_id, model, rad_type, height, width, depth, high, medium, low, price,
           manufacturer="Stelrad", connection=RadiatorConnection.BBOE):
    return Radiator(
        id=rad_id,
        manufacturer=manufacturer,
        model=model,
        type=rad_type,
        height=height,
        width=width,
        depth=depth,
        output={
            FlowTemperature.HIGH: high,
            FlowTemperature.MEDIUM: medium,
            FlowTemperature.LOW: low,
        },
        connection_type=connection,
        price=price,
    )


# Representative UK panel range, used when no supplier catalogue is loaded
SAMPLE_CATALOG: List[Radiator] = [
    _panel("p1-450x600", "Compact P1 450x600", RadiatorType.SINGLE, 450, 600, 50, 330, 220, 140, 35.0),
    _panel("k1-600x600", "Compact K1 600x600", RadiatorType.K1, 600, 600, 60, 580, 390, 245, 45.0),
    _panel("k1-600x1000", "Compact K1 600x1000", RadiatorType.K1, 600, 1000, 60, 965, 650, 410, 65.0),
    _panel("k2-600x800", "Compact K2 600x800", RadiatorType.K2, 600, 800, 100, 1240, 830, 525, 70.0),
    _panel("k2-600x1200", "Compact K2 600x1200", RadiatorType.K2, 600, 1200, 100, 1860, 1245, 790, 95.0),
    _panel("k2-600x1600", "Compact K2 600x1600", RadiatorType.K2, 600, 1600, 100, 2480, 1660, 1050, 130.0),
    _panel("k3-600x1200", "Compact K3 600x1200", RadiatorType.K3, 600, 1200, 160, 2640, 1770, 1120, 160.0),
    _panel("v-1800x500", "Vertical 1800x500", RadiatorType.VERTICAL, 1800, 500, 100, 1370, 920, 580, 250.0,
           manufacturer="Myson", connection=RadiatorConnection.BB_CENTER),
    _panel("col-600x1000", "Column 3 600x1000", RadiatorType.COLUMN, 600, 1000, 100, 1500, 1000, 640, 320.0,
           manufacturer="Zehnder", connection=RadiatorConnection.TBOE),
]


def get_radiator(radiator_id: str, catalog: Optional[List[Radiator]] = None) -> Optional[Radiator]:
    for radiator in catalog if catalog is not None else SAMPLE_CATALOG:
        if radiator.id == radiator_id:
            return radiator
    return None
