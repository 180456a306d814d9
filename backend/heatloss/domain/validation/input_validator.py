"""
Heat Loss Input Validation

Advisory checks on calculation inputs to catch "garbage in/garbage out"
before numbers reach a customer:
- Room geometry must be positive
- Air change rate, design temperatures and safety margin within sane ranges
- Every door carries a U-value (no fallback exists for doors)
- Every U-value the calculation needs can be resolved

The validator never blocks a calculation. It returns human-readable
messages; an empty list means no issues were found. Whether to stop on a
non-empty list is the caller's decision.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from heatloss.domain.core import thresholds
from heatloss.domain.core.lookups import LookupProviders
from heatloss.domain.core.temperatures import resolve_target_temperature
from heatloss.domain.models.inputs import BuildingHeatLossInputs, HeatLossInputs
from heatloss.domain.validation.payload import iter_room_payloads, prepare_payload, room_label

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    """Validation issue severity levels"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationIssue:
    """Represents a validation issue found in calculation inputs"""
    field: str
    severity: ValidationSeverity
    message: str
    suggested_fix: Optional[str] = None

    def to_json(self):
        return {
            "field": self.field,
            "severity": self.severity.value,
            "message": self.message,
            "suggested_fix": self.suggested_fix,
        }


class HeatLossInputValidator:
    """
    Soft structural and semantic checks on a single-room calculation request.
    """

    def __init__(self, providers: Optional[LookupProviders] = None):
        self.providers = providers

    def validate(self, inputs: HeatLossInputs) -> List[ValidationIssue]:
        issues = []
        issues.extend(self._validate_room_geometry(inputs))
        issues.extend(self._validate_ventilation(inputs))
        issues.extend(self._validate_climate(inputs))
        issues.extend(self._validate_design_conditions(inputs))
        issues.extend(self._validate_target_temperature(inputs))
        issues.extend(self._validate_doors(inputs))
        issues.extend(self._validate_fabric_sources(inputs))

        if issues:
            logger.debug(f"Room {inputs.room.id}: {len(issues)} validation issue(s)")
        return issues

    def _validate_room_geometry(self, inputs: HeatLossInputs) -> List[ValidationIssue]:
        issues = []
        room = inputs.room

        if not room.area > 0:
            issues.append(ValidationIssue(
                field='room.area',
                severity=ValidationSeverity.ERROR,
                message=f"Room {room.name}: Area must be greater than 0",
                suggested_fix="Re-measure the floor area"
            ))

        if not room.volume > 0:
            issues.append(ValidationIssue(
                field='room.volume',
                severity=ValidationSeverity.ERROR,
                message=f"Room {room.name}: Volume must be greater than 0",
                suggested_fix="Volume is floor area × ceiling height"
            ))

        if not room.ceiling_height > 0:
            issues.append(ValidationIssue(
                field='room.ceiling_height',
                severity=ValidationSeverity.ERROR,
                message=f"Room {room.name}: Ceiling height must be greater than 0",
                suggested_fix="Typical UK residential ceiling height is 2.4m"
            ))

        return issues

    def _validate_ventilation(self, inputs: HeatLossInputs) -> List[ValidationIssue]:
        ach = inputs.building.air_changes_per_hour
        if thresholds.ACH_MIN <= ach <= thresholds.ACH_MAX:
            return []
        return [ValidationIssue(
            field='building.air_changes_per_hour',
            severity=ValidationSeverity.WARNING,
            message=f"Air changes per hour must be between {thresholds.ACH_MIN:g} and {thresholds.ACH_MAX:g}",
            suggested_fix="Use 0.5 for modern airtight homes up to 3.0 for Victorian properties"
        )]

    def _validate_climate(self, inputs: HeatLossInputs) -> List[ValidationIssue]:
        if inputs.climate.outside_design_temp <= thresholds.OUTSIDE_DESIGN_TEMP_MAX:
            return []
        return [ValidationIssue(
            field='climate.outside_design_temp',
            severity=ValidationSeverity.WARNING,
            message="Outside design temperature seems too high (should be negative for UK)",
            suggested_fix="Use the regional design temperature, typically -1°C to -5°C"
        )]

    def _validate_design_conditions(self, inputs: HeatLossInputs) -> List[ValidationIssue]:
        margin = inputs.design_conditions.safety_margin
        if thresholds.SAFETY_MARGIN_MIN <= margin <= thresholds.SAFETY_MARGIN_MAX:
            return []
        return [ValidationIssue(
            field='design_conditions.safety_margin',
            severity=ValidationSeverity.WARNING,
            message=f"Safety margin should be between {thresholds.SAFETY_MARGIN_MIN:g}% and {thresholds.SAFETY_MARGIN_MAX:g}%",
            suggested_fix="10-20% is typical for UK installations"
        )]

    def _validate_target_temperature(self, inputs: HeatLossInputs) -> List[ValidationIssue]:
        target_temp = resolve_target_temperature(inputs.room, inputs.design_conditions, self.providers)
        if target_temp <= thresholds.TARGET_TEMP_MAX:
            return []
        return [ValidationIssue(
            field='room.target_temperature',
            severity=ValidationSeverity.WARNING,
            message=f"Room {inputs.room.name}: Target temperature {target_temp:g}°C seems too high",
            suggested_fix="Check the room override against the room type default"
        )]

    def _validate_doors(self, inputs: HeatLossInputs) -> List[ValidationIssue]:
        issues = []
        room = inputs.room

        for door in room.doors:
            if door.u_value is None:
                issues.append(_missing_door_u_value(room.name, door.id))
            elif door.is_external and not (math.isfinite(door.u_value) and door.u_value > 0):
                issues.append(ValidationIssue(
                    field=f'room.doors.{door.id}.u_value',
                    severity=ValidationSeverity.ERROR,
                    message=f"Room {room.name}: Door {door.id} U-value must be a positive number",
                    suggested_fix="Typical door U-values range from 1.8 (uPVC) to 3.5 (semi-glazed)"
                ))

        return issues

    def _validate_fabric_sources(self, inputs: HeatLossInputs) -> List[ValidationIssue]:
        issues = []
        room, building = inputs.room, inputs.building

        if building.wall_u_value is None and building.wall_construction is None:
            for wall in room.external_walls:
                if wall.u_value is None:
                    issues.append(ValidationIssue(
                        field=f'room.walls.{wall.id}.u_value',
                        severity=ValidationSeverity.ERROR,
                        message=f"Room {room.name}: Wall {wall.id} has no U-value and the building has no wall construction",
                        suggested_fix="Set the wall U-value, the building wall U-value or the wall construction"
                    ))

        if building.floor_u_value is None and building.floor_construction is None:
            issues.append(ValidationIssue(
                field='building.floor_construction',
                severity=ValidationSeverity.ERROR,
                message="Floor U-value cannot be resolved: set floor U-value or floor construction",
                suggested_fix="Select the floor construction type"
            ))

        return issues


def _missing_door_u_value(room_name: str, door_id: Any) -> ValidationIssue:
    return ValidationIssue(
        field=f'room.doors.{door_id}.u_value',
        severity=ValidationSeverity.ERROR,
        message=f"Room {room_name}: Door {door_id} is missing a U-value (required)",
        suggested_fix="Enter the door U-value, e.g. 3.0 for solid timber or 1.8 for uPVC"
    )


def validate_heat_loss_inputs(
    inputs: HeatLossInputs,
    providers: Optional[LookupProviders] = None,
) -> List[str]:
    """
    Validate heat loss calculation inputs.

    Returns:
        Human-readable messages, empty if no issues were found
    """
    return [issue.message for issue in HeatLossInputValidator(providers).validate(inputs)]


def validate_payload_issues(
    payload: Mapping[str, Any],
    providers: Optional[LookupProviders] = None,
) -> List[ValidationIssue]:
    """
    Validate a raw single-room ("room") or building ("rooms") payload.
    Never raises, whatever the mapping holds.
    """
    issues = []

    # Doors are checked on the raw data: a door without a U-value can't be parsed
    for room in iter_room_payloads(payload):
        doors = room.get("doors")
        if not isinstance(doors, list):
            continue
        for door in doors:
            if isinstance(door, Mapping) and door.get("u_value") is None:
                issues.append(_missing_door_u_value(room_label(room), door.get("id", "unnamed")))

    prepared, _ = prepare_payload(payload, providers)
    model_cls = HeatLossInputs if "room" in prepared and "rooms" not in prepared else BuildingHeatLossInputs

    try:
        parsed = model_cls.model_validate(prepared)
    except ValidationError as e:
        for error in e.errors():
            loc = tuple(error.get("loc", ()))
            if len(loc) >= 2 and loc[-1] == "u_value" and "doors" in loc:
                continue  # reported above
            issues.append(ValidationIssue(
                field=".".join(str(part) for part in loc),
                severity=ValidationSeverity.ERROR,
                message=f"{'.'.join(str(part) for part in loc) or 'payload'}: {error.get('msg')}",
            ))
        return issues

    room_inputs = [parsed] if isinstance(parsed, HeatLossInputs) else parsed.room_inputs()
    validator = HeatLossInputValidator(providers)
    seen = set()
    for inputs in room_inputs:
        for issue in validator.validate(inputs):
            # Building-wide messages repeat for every room
            if issue.message not in seen:
                seen.add(issue.message)
                issues.append(issue)

    return issues


def validate_heat_loss_payload(
    payload: Mapping[str, Any],
    providers: Optional[LookupProviders] = None,
) -> List[str]:
    """Advisory messages for a raw payload, empty if no issues were found"""
    return [issue.message for issue in validate_payload_issues(payload, providers)]
