"""
Sanity thresholds shared by input validation, result analysis and provenance

UK residential rooms typically lose 40-120 W/m² at design conditions, with
fabric accounting for 60-80% of the total.
"""

from dataclasses import dataclass
from typing import Optional

from heatloss.domain.models.inputs import Room
from heatloss.domain.models.results import HeatLossResult

# Result heuristics
LOSS_PER_M2_LOW = 30.0
LOSS_PER_M2_HIGH = 150.0
TYPICAL_LOSS_PER_M2_MIN = 40.0
TYPICAL_LOSS_PER_M2_MAX = 120.0
FABRIC_RATIO_LOW = 0.4
FABRIC_RATIO_HIGH = 0.9
TARGET_TEMP_UNUSUAL = 25.0

# Input validation limits
ACH_MIN = 0.1
ACH_MAX = 10.0
OUTSIDE_DESIGN_TEMP_MAX = 10.0
SAFETY_MARGIN_MIN = 0.0
SAFETY_MARGIN_MAX = 50.0
TARGET_TEMP_MAX = 30.0


@dataclass(frozen=True)
class ResultMetrics:
    # None when the ratio is undefined (zero area or zero total loss)
    loss_per_m2: Optional[float]
    fabric_ratio: Optional[float]

    @property
    def loss_per_m2_low(self) -> bool:
        return self.loss_per_m2 is not None and self.loss_per_m2 < LOSS_PER_M2_LOW

    @property
    def loss_per_m2_high(self) -> bool:
        return self.loss_per_m2 is not None and self.loss_per_m2 > LOSS_PER_M2_HIGH

    @property
    def fabric_ratio_low(self) -> bool:
        return self.fabric_ratio is not None and self.fabric_ratio < FABRIC_RATIO_LOW

    @property
    def fabric_ratio_high(self) -> bool:
        return self.fabric_ratio is not None and self.fabric_ratio > FABRIC_RATIO_HIGH


def result_metrics(result: HeatLossResult, room: Room) -> ResultMetrics:
    loss_per_m2 = result.total_loss / room.area if room.area else None
    fabric_ratio = result.fabric_loss / result.total_loss if result.total_loss else None
    return ResultMetrics(loss_per_m2=loss_per_m2, fabric_ratio=fabric_ratio)
