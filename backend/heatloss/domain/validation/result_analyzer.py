"""
Heat loss result analysis
Sanity heuristics over a computed room result. Advisory only.
"""

import logging
from typing import List

from heatloss.domain.core.thresholds import result_metrics
from heatloss.domain.models.inputs import Room
from heatloss.domain.models.results import HeatLossResult

logger = logging.getLogger(__name__)


def analyze_heat_loss_result(result: HeatLossResult, room: Room) -> List[str]:
    """
    Analyze heat loss result for potential issues.

    Below 30 W/m² suggests very good insulation or missing elements; above
    150 W/m² suggests poor insulation or a data entry error. Fabric loss is
    normally 60-80% of the total.

    Returns:
        Warnings for suspicious values, empty if the result looks typical
    """
    warnings = []
    metrics = result_metrics(result, room)

    if metrics.loss_per_m2_low:
        warnings.append(f"Very low heat loss ({metrics.loss_per_m2:.1f} W/m²) - check insulation values")

    if metrics.loss_per_m2_high:
        warnings.append(f"Very high heat loss ({metrics.loss_per_m2:.1f} W/m²) - check U-values and room data")

    if metrics.fabric_ratio_low:
        warnings.append("Ventilation loss unusually high compared to fabric loss - check air change rate")

    if metrics.fabric_ratio_high:
        warnings.append("Fabric loss is unusually high compared to ventilation - check air change rate")

    if warnings:
        logger.debug(f"Room {room.id}: {len(warnings)} result warning(s)")

    return warnings
