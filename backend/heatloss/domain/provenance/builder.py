"""
Provenance Builder for Heat Loss Calculations

Reconstructs the audit trail behind a room result: the exact inputs used,
what was assumed for lack of data, which policy defaults applied, and which
results look suspicious. Overrides are left empty; only the application
records them, through record_override().

Temperatures are resolved through the same function as the calculator, so
the ΔT in the snapshot is the ΔT that produced the result.
"""

import dataclasses
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from heatloss.domain.core import thresholds
from heatloss.domain.core.lookups import LookupProviders
from heatloss.domain.core.temperatures import design_delta_t
from heatloss.domain.models.inputs import BuildingData, ClimateData, DesignConditions, Room
from heatloss.domain.models.provenance import (
    Assumption,
    AssumptionAlternative,
    AssumptionCodes,
    AssumptionImpact,
    CalculationProvenance,
    CalculationReason,
    CalculationWarning,
    DefaultApplied,
    DefaultSource,
    Override,
    WarningCategory,
    WarningCodes,
    WarningSeverity,
)
from heatloss.domain.models.results import HeatLossResult

logger = logging.getLogger(__name__)

# Bump METHOD_VERSION whenever a calculation formula changes, so stored
# provenance can be read against the formulas that produced it
METHOD = "EN12831-simplified"
METHOD_VERSION = "2026.01"

# Common default magnitudes. Matching one of these is read as "assumed".
DEFAULT_ACH = 1.0
DEFAULT_CEILING_HEIGHT = 2.4
DEFAULT_THERMAL_BRIDGING = 0.15


def build_heat_loss_provenance(
    room: Room,
    building: BuildingData,
    climate: ClimateData,
    design_conditions: DesignConditions,
    result: HeatLossResult,
    reason: CalculationReason = CalculationReason.INITIAL_CALCULATION,
    providers: Optional[LookupProviders] = None,
    calculated_by: Optional[str] = None,
) -> CalculationProvenance:
    """
    Build complete provenance for a heat loss calculation.

    Args:
        room, building, climate, design_conditions: The inputs given to the calculator
        result: The calculator's output for those inputs
        reason: Why this calculation ran
        providers: The lookups the calculator used

    Returns:
        CalculationProvenance with an empty overrides list
    """
    target_temp, delta_t = design_delta_t(room, climate, design_conditions, providers)

    provenance = CalculationProvenance(
        method=METHOD,
        method_version=METHOD_VERSION,
        inputs_snapshot=_inputs_snapshot(room, building, climate, design_conditions, target_temp, delta_t),
        assumptions=tuple(_assumptions(room, building, design_conditions)),
        defaults_applied=tuple(_defaults(room, climate, design_conditions, target_temp)),
        overrides=(),
        warnings=tuple(_warnings(result, room, target_temp)),
        reason=CalculationReason(reason),
        calculated_by=calculated_by,
    )

    logger.debug(
        f"Provenance for room {room.id}: {len(provenance.assumptions)} assumption(s), "
        f"{len(provenance.defaults_applied)} default(s), {len(provenance.warnings)} warning(s)"
    )
    return provenance


def record_override(
    provenance: CalculationProvenance,
    field: str,
    original_value: Any,
    overridden_value: Any,
    reason: Optional[str] = None,
    user_id: Optional[str] = None,
) -> CalculationProvenance:
    """
    Return a copy of the provenance with a manual override appended.
    The original record is left untouched.
    """
    override = Override(
        field=field,
        original_value=original_value,
        overridden_value=overridden_value,
        timestamp=datetime.now(timezone.utc),
        reason=reason,
        user_id=user_id,
    )
    return dataclasses.replace(
        provenance,
        overrides=provenance.overrides + (override,),
        reason=CalculationReason.USER_OVERRIDE,
    )


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def _inputs_snapshot(
    room: Room,
    building: BuildingData,
    climate: ClimateData,
    design_conditions: DesignConditions,
    target_temp: float,
    delta_t: float,
) -> Dict[str, Any]:
    """Capture exact values used in the calculation"""
    snapshot = {
        # Room geometry
        "room_id": room.id,
        "room_name": room.name,
        "room_type": _enum_value(room.type),
        "area": room.area,
        "volume": room.volume,
        "ceiling_height": room.ceiling_height,
        "perimeter": room.perimeter,
        "external_wall_count": len(room.external_walls),
        "window_count": len(room.windows),
        "external_door_count": sum(1 for d in room.doors if d.is_external),

        # Temperatures
        "target_temp": target_temp,
        "outside_design_temp": climate.outside_design_temp,
        "delta_t": delta_t,

        # Fabric
        "wall_u_value": building.wall_u_value,
        "roof_u_value": building.roof_u_value,
        "floor_u_value": building.floor_u_value,
        "wall_construction": _enum_value(building.wall_construction),
        "roof_construction": _enum_value(building.roof_construction),
        "floor_construction": _enum_value(building.floor_construction),

        # Ventilation
        "air_changes_per_hour": building.air_changes_per_hour,
        "infiltration_rate": design_conditions.infiltration_rate,

        # Design conditions
        "thermal_bridging": design_conditions.thermal_bridging,
        "safety_margin": design_conditions.safety_margin,
        "flow_temperature": _enum_value(design_conditions.flow_temperature),

        # Climate
        "postcode": climate.postcode,
        "region": climate.region,
        "wind_speed": climate.wind_speed,
        "altitude": climate.altitude,

        "construction_year": building.construction_year,
    }
    snapshot.update(_element_snapshot(room))
    return snapshot


def _element_snapshot(room: Room) -> Dict[str, Any]:
    """Flat per-element geometry and U-values, keyed "walls.<id>.<field>" etc."""
    values = {}
    for wall in room.walls:
        prefix = f"walls.{wall.id}"
        values[f"{prefix}.length"] = wall.length
        values[f"{prefix}.height"] = wall.height
        values[f"{prefix}.is_external"] = wall.is_external
        values[f"{prefix}.u_value"] = wall.u_value
    for window in room.windows:
        prefix = f"windows.{window.id}"
        values[f"{prefix}.wall_id"] = window.wall_id
        values[f"{prefix}.width"] = window.width
        values[f"{prefix}.height"] = window.height
        values[f"{prefix}.glazing_type"] = _enum_value(window.glazing_type)
        values[f"{prefix}.u_value"] = window.u_value
    for door in room.doors:
        prefix = f"doors.{door.id}"
        values[f"{prefix}.wall_id"] = door.wall_id
        values[f"{prefix}.width"] = door.width
        values[f"{prefix}.height"] = door.height
        values[f"{prefix}.is_external"] = door.is_external
        values[f"{prefix}.u_value"] = door.u_value
    return values


def _detection(record, field_name: str) -> str:
    return "sentinel_match" if field_name in record.model_fields_set else "defaulted"


def _assumptions(
    room: Room,
    building: BuildingData,
    design_conditions: DesignConditions,
) -> List[Assumption]:
    """Identify what was assumed because we didn't have data"""
    assumptions = []

    ach = building.air_changes_per_hour
    if ach is None or ach == DEFAULT_ACH:
        assumptions.append(Assumption(
            code=AssumptionCodes.ACH_UNKNOWN,
            field="air_changes_per_hour",
            description="Air change rate assumed as 1.0 ACH (no airtightness test performed)",
            impact=AssumptionImpact.MEDIUM,
            value=DEFAULT_ACH if ach is None else ach,
            alternatives=(
                AssumptionAlternative(0.5, "Modern airtight (0.5 ACH)"),
                AssumptionAlternative(1.5, "Older renovated (1.5 ACH)"),
                AssumptionAlternative(2.5, "Older drafty (2.5 ACH)"),
            ),
            detection=_detection(building, "air_changes_per_hour"),
        ))

    if building.wall_u_value is None and building.wall_construction is not None:
        construction = _enum_value(building.wall_construction)
        assumptions.append(Assumption(
            code=AssumptionCodes.WALL_CONSTRUCTION_INFERRED,
            field="wall_construction",
            description=f'Wall construction assumed as "{construction}" based on property age/type',
            impact=AssumptionImpact.HIGH,
            value=construction,
            detection="missing_value",
        ))

    ceiling_height = room.ceiling_height
    if ceiling_height is None or ceiling_height == DEFAULT_CEILING_HEIGHT:
        assumptions.append(Assumption(
            code=AssumptionCodes.CEILING_HEIGHT_ASSUMED,
            field="ceiling_height",
            description="Ceiling height assumed as 2.4m (typical UK residential)",
            impact=AssumptionImpact.LOW,
            value=DEFAULT_CEILING_HEIGHT if ceiling_height is None else ceiling_height,
            detection=_detection(room, "ceiling_height"),
        ))

    if design_conditions.thermal_bridging == DEFAULT_THERMAL_BRIDGING:
        assumptions.append(Assumption(
            code=AssumptionCodes.THERMAL_BRIDGING_TYPICAL,
            field="thermal_bridging",
            description="Thermal bridging Y-value assumed as 0.15 W/m²K (typical mixed construction)",
            impact=AssumptionImpact.LOW,
            value=DEFAULT_THERMAL_BRIDGING,
            alternatives=(
                AssumptionAlternative(0.08, "Well-designed details"),
                AssumptionAlternative(0.25, "Older building, significant bridging"),
            ),
            detection=_detection(design_conditions, "thermal_bridging"),
        ))

    windows_without_u = [w for w in room.windows if w.u_value is None]
    if windows_without_u:
        assumptions.append(Assumption(
            code=AssumptionCodes.WINDOW_UVALUE_ASSUMED,
            field="windows.u_value",
            description=f"{len(windows_without_u)} window(s) have assumed U-values based on glazing type",
            impact=AssumptionImpact.MEDIUM,
            value="various",
            detection="missing_value",
        ))

    return assumptions


def _defaults(
    room: Room,
    climate: ClimateData,
    design_conditions: DesignConditions,
    target_temp: float,
) -> List[DefaultApplied]:
    """Track policy defaults (standard practice, not guesswork)"""
    defaults = []

    if room.target_temperature is None:
        room_type = _enum_value(room.type)
        defaults.append(DefaultApplied(
            field="target_temperature",
            value=target_temp,
            source=DefaultSource.ROOM_TYPE_DEFAULT,
            description=f"Target temperature for {room_type}: {target_temp:g}°C (industry standard)",
        ))

    if climate.postcode:
        defaults.append(DefaultApplied(
            field="outside_design_temp",
            value=climate.outside_design_temp,
            source=DefaultSource.POSTCODE_LOOKUP,
            description=f"Design external temperature from {climate.region or climate.postcode}: "
                        f"{climate.outside_design_temp:g}°C",
        ))

    if design_conditions.safety_margin:
        defaults.append(DefaultApplied(
            field="safety_margin",
            value=design_conditions.safety_margin,
            source=DefaultSource.INDUSTRY_STANDARD,
            description=f"Safety margin: {design_conditions.safety_margin:g}% (typical for UK installations)",
        ))

    return defaults


def _warnings(result: HeatLossResult, room: Room, target_temp: float) -> List[CalculationWarning]:
    """Flag results that fall outside typical UK ranges"""
    warnings = []
    metrics = thresholds.result_metrics(result, room)
    typical = {
        "typical_min": thresholds.TYPICAL_LOSS_PER_M2_MIN,
        "typical_max": thresholds.TYPICAL_LOSS_PER_M2_MAX,
    }

    if metrics.loss_per_m2_high:
        warnings.append(CalculationWarning(
            code=WarningCodes.HEAT_LOSS_PER_M2_HIGH,
            severity=WarningSeverity.WARNING,
            category=WarningCategory.CALCULATION,
            message=f"Very high heat loss: {metrics.loss_per_m2:.1f} W/m² (typical: 40-120 W/m²)",
            suggested_fix="Check U-values, air change rate, and temperature difference",
            affected_fields=("wall_u_value", "air_changes_per_hour", "target_temperature"),
            context={"loss_per_m2": metrics.loss_per_m2, **typical},
        ))

    if metrics.loss_per_m2_low:
        warnings.append(CalculationWarning(
            code=WarningCodes.HEAT_LOSS_PER_M2_LOW,
            severity=WarningSeverity.WARNING,
            category=WarningCategory.CALCULATION,
            message=f"Very low heat loss: {metrics.loss_per_m2:.1f} W/m² (typical: 40-120 W/m²)",
            suggested_fix="Verify insulation values and temperature settings",
            affected_fields=("wall_u_value", "target_temperature"),
            context={"loss_per_m2": metrics.loss_per_m2, **typical},
        ))

    if metrics.fabric_ratio_low:
        warnings.append(CalculationWarning(
            code=WarningCodes.FABRIC_RATIO_LOW,
            severity=WarningSeverity.WARNING,
            category=WarningCategory.CALCULATION,
            message="Ventilation loss unusually high compared to fabric loss",
            suggested_fix="Check air change rate - may be set too high",
            affected_fields=("air_changes_per_hour",),
            context={"fabric_ratio": metrics.fabric_ratio, "ventilation_ratio": 1 - metrics.fabric_ratio},
        ))

    if metrics.fabric_ratio_high:
        warnings.append(CalculationWarning(
            code=WarningCodes.FABRIC_RATIO_HIGH,
            severity=WarningSeverity.INFO,
            category=WarningCategory.CALCULATION,
            message="Fabric loss very high compared to ventilation",
            suggested_fix="This may indicate very good airtightness or underestimated ventilation loss",
            affected_fields=("air_changes_per_hour",),
            context={"fabric_ratio": metrics.fabric_ratio, "ventilation_ratio": 1 - metrics.fabric_ratio},
        ))

    if target_temp > thresholds.TARGET_TEMP_UNUSUAL:
        warnings.append(CalculationWarning(
            code=WarningCodes.TARGET_TEMP_UNUSUAL,
            severity=WarningSeverity.WARNING,
            category=WarningCategory.DATA_QUALITY,
            message=f"Target temperature {target_temp:g}°C seems unusually high",
            suggested_fix="Verify temperature setting is correct",
            affected_fields=("target_temperature",),
            context={"target_temperature": target_temp},
        ))

    return warnings
