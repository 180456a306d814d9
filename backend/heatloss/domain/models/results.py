"""
Heat loss calculation results
Itemised per-room breakdown, created fresh for every calculation
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Tuple


class CeilingLossStatus(Enum):
    """
    Ceiling/roof loss is not calculated yet: it needs floor level detection
    to know which rooms sit under the roof. A PENDING ceiling reports 0 W but
    is not a genuinely zero-loss ceiling.
    """
    PENDING_FLOOR_LEVEL_DETECTION = "pending_floor_level_detection"


@dataclass(frozen=True)
class ElementLoss:
    """Fabric loss through one wall, window or door (Q = U × A × ΔT)"""
    element_id: str
    area: float  # m²
    u_value: float  # W/m²K
    delta_t: float  # °C
    loss: float  # W

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.element_id,
            "area": self.area,
            "u_value": self.u_value,
            "delta_t": self.delta_t,
            "loss": self.loss,
        }


class WallLoss(ElementLoss):
    pass


class WindowLoss(ElementLoss):
    pass


class DoorLoss(ElementLoss):
    pass


@dataclass(frozen=True)
class HeatLossBreakdown:
    walls: Tuple[WallLoss, ...] = ()
    windows: Tuple[WindowLoss, ...] = ()
    doors: Tuple[DoorLoss, ...] = ()
    floor: float = 0.0
    ceiling: float = 0.0
    ceiling_status: CeilingLossStatus = CeilingLossStatus.PENDING_FLOOR_LEVEL_DETECTION
    thermal_bridging: float = 0.0
    infiltration: float = 0.0

    @property
    def walls_total(self) -> float:
        return sum(w.loss for w in self.walls)

    @property
    def windows_total(self) -> float:
        return sum(w.loss for w in self.windows)

    @property
    def doors_total(self) -> float:
        return sum(d.loss for d in self.doors)

    @property
    def fabric_total(self) -> float:
        return (
            self.walls_total + self.windows_total + self.doors_total
            + self.floor + self.ceiling + self.thermal_bridging
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "walls": [w.to_json() for w in self.walls],
            "windows": [w.to_json() for w in self.windows],
            "doors": [d.to_json() for d in self.doors],
            "floor": self.floor,
            "ceiling": self.ceiling,
            "ceiling_status": self.ceiling_status.value,
            "thermal_bridging": self.thermal_bridging,
            "infiltration": self.infiltration,
        }


@dataclass(frozen=True)
class HeatLossResult:
    """Heat loss for a single room, all values in watts"""
    room_id: str
    fabric_loss: float
    ventilation_loss: float
    total_loss: float
    breakdown: HeatLossBreakdown
    required_output: float  # total loss plus safety margin
    calculated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    overridden: bool = False

    def to_json(self) -> Dict[str, Any]:
        return {
            "room_id": self.room_id,
            "fabric_loss": round(self.fabric_loss, 2),
            "ventilation_loss": round(self.ventilation_loss, 2),
            "total_loss": round(self.total_loss, 2),
            "required_output": round(self.required_output, 2),
            "breakdown": self.breakdown.to_json(),
            "calculated_at": self.calculated_at.isoformat(),
            "overridden": self.overridden,
        }
