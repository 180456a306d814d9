"""
Heat Loss Service - building payload to audited room results

Pipeline for one request:
1. Advisory validation of the raw payload (blocking only in strict mode)
2. Parse into input records, filling climate data from the region lookup
3. Room calculations, fanned out when max_workers > 1
4. Result analysis, provenance and confidence per room
5. Total heat load
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from heatloss.domain.calculations.room_heat_loss import (
    calculate_building_heat_loss,
    calculate_total_heat_load,
)
from heatloss.domain.core.lookups import LookupProviders
from heatloss.domain.models.inputs import BuildingHeatLossInputs, Room
from heatloss.domain.models.provenance import (
    CalculationProvenance,
    CalculationReason,
    ConfidenceSummary,
)
from heatloss.domain.models.results import HeatLossResult
from heatloss.domain.provenance.builder import build_heat_loss_provenance
from heatloss.domain.provenance.confidence import compute_confidence
from heatloss.domain.validation.input_validator import validate_heat_loss_payload
from heatloss.domain.validation.payload import prepare_payload
from heatloss.domain.validation.result_analyzer import analyze_heat_loss_result
from heatloss.services.error_types import (
    InputValidationError,
    MissingRequiredFieldError,
    UnknownConstructionError,
    log_error_with_context,
)
from heatloss.utils.logging_utils import log_data_quality, log_operation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoomHeatLossReport:
    room: Room
    result: HeatLossResult
    provenance: CalculationProvenance
    warnings: Tuple[str, ...]
    confidence: ConfidenceSummary

    def to_json(self) -> Dict[str, Any]:
        return {
            "room_id": self.room.id,
            "room_name": self.room.name,
            "result": self.result.to_json(),
            "provenance": self.provenance.to_json(),
            "warnings": list(self.warnings),
            "confidence": self.confidence.to_json(),
        }


@dataclass(frozen=True)
class BuildingHeatLossReport:
    rooms: Tuple[RoomHeatLossReport, ...]
    total_heat_load: float  # W, safety margin included
    validation_messages: Tuple[str, ...] = ()
    filled_fields: Tuple[str, ...] = ()

    @property
    def room_count(self) -> int:
        return len(self.rooms)

    @property
    def results(self) -> List[HeatLossResult]:
        return [report.result for report in self.rooms]

    def room(self, room_id: str) -> Optional[RoomHeatLossReport]:
        for report in self.rooms:
            if report.room.id == room_id:
                return report
        return None

    def to_json(self) -> Dict[str, Any]:
        return {
            "rooms": [report.to_json() for report in self.rooms],
            "total_heat_load": round(self.total_heat_load, 2),
            "room_count": self.room_count,
            "validation_messages": list(self.validation_messages),
            "filled_fields": list(self.filled_fields),
        }


class HeatLossService:
    """
    Orchestrates validation, calculation and provenance for a building.

    Advisory validation messages never stop a calculation unless strict mode
    is requested; they are returned on the report instead.
    """

    def __init__(
        self,
        providers: Optional[LookupProviders] = None,
        max_workers: int = 1,
        strict_validation: bool = False,
    ):
        self.providers = providers
        self.max_workers = max_workers
        self.strict_validation = strict_validation

    def validate(self, payload: Mapping[str, Any]) -> List[str]:
        return validate_heat_loss_payload(_normalise_payload(payload), self.providers)

    def parse(self, payload: Mapping[str, Any]) -> Tuple[BuildingHeatLossInputs, List[str]]:
        """
        Parse a raw payload into input records.

        Raises:
            MissingRequiredFieldError: A door has no U-value
            InputValidationError: Anything else that does not parse
        """
        prepared, filled = prepare_payload(_normalise_payload(payload), self.providers)
        try:
            return BuildingHeatLossInputs.model_validate(prepared), filled
        except ValidationError as e:
            errors = e.errors()
            for error in errors:
                door_id = _missing_door_id(prepared, tuple(error.get("loc", ())))
                if door_id is not None:
                    raise MissingRequiredFieldError("u_value", door_id, f"Door {door_id} is missing a U-value (required)") from e
            messages = [
                f"{'.'.join(str(part) for part in error.get('loc', ())) or 'payload'}: {error.get('msg')}"
                for error in errors
            ]
            raise InputValidationError("Invalid heat loss payload", messages) from e

    def calculate(
        self,
        payload: Mapping[str, Any],
        strict: Optional[bool] = None,
        reason: CalculationReason = CalculationReason.INITIAL_CALCULATION,
        calculated_by: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BuildingHeatLossReport:
        """
        Calculate heat loss for every room of a building payload.

        Args:
            payload: Mapping with rooms (or a single room), building, climate
                and design_conditions
            strict: Raise InputValidationError on any validation message.
                Defaults to the service setting.
            reason: Why the calculation runs, recorded in provenance
            calculated_by: User recorded in provenance
            cancel_event: Set to stop scheduling further rooms

        Returns:
            BuildingHeatLossReport with per-room results and provenance
        """
        if not isinstance(payload, Mapping):
            raise InputValidationError("Heat loss payload must be a JSON object")

        strict = self.strict_validation if strict is None else strict
        rooms = _normalise_payload(payload).get("rooms")
        room_count = len(rooms) if isinstance(rooms, (list, tuple)) else 0

        with log_operation("building_heat_loss", {"rooms": room_count, "strict": strict}, logger):
            messages = self.validate(payload)
            if messages:
                if strict:
                    error = InputValidationError(
                        f"Input validation failed with {len(messages)} issue(s)", messages
                    )
                    log_error_with_context(error, {"stage": "validation"})
                    raise error
                logger.warning(f"Calculating with {len(messages)} validation message(s): {messages}")

            inputs, filled = self.parse(payload)

            try:
                results = calculate_building_heat_loss(
                    inputs.rooms,
                    inputs.building,
                    inputs.climate,
                    inputs.design_conditions,
                    providers=self.providers,
                    max_workers=self.max_workers,
                    cancel_event=cancel_event,
                )
            except UnknownConstructionError as e:
                raise InputValidationError(str(e), [str(e)], {"kind": e.kind, "tag": str(e.tag)}) from e

            reports = tuple(
                self._room_report(room, result, inputs, reason, calculated_by)
                for room, result in zip(inputs.rooms, results)
            )
            total = calculate_total_heat_load(results)

            if reports:
                average_score = sum(r.confidence.score for r in reports) / len(reports)
                log_data_quality("building_heat_loss", average_score / 100, messages, logger)
            logger.info(f"Total heat load {total:.0f}W across {len(reports)} room(s)")

        return BuildingHeatLossReport(
            rooms=reports,
            total_heat_load=total,
            validation_messages=tuple(messages),
            filled_fields=tuple(filled),
        )

    def _room_report(
        self,
        room: Room,
        result: HeatLossResult,
        inputs: BuildingHeatLossInputs,
        reason: CalculationReason,
        calculated_by: Optional[str],
    ) -> RoomHeatLossReport:
        provenance = build_heat_loss_provenance(
            room,
            inputs.building,
            inputs.climate,
            inputs.design_conditions,
            result,
            reason=reason,
            providers=self.providers,
            calculated_by=calculated_by,
        )
        return RoomHeatLossReport(
            room=room,
            result=result,
            provenance=provenance,
            warnings=tuple(analyze_heat_loss_result(result, room)),
            confidence=compute_confidence(provenance),
        )


def _normalise_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Single-room payloads ("room") become one-room buildings"""
    data = dict(payload)
    if "rooms" not in data and data.get("room") is not None:
        data["rooms"] = [data.pop("room")]
    return data


def _missing_door_id(prepared: Mapping[str, Any], loc: Tuple) -> Optional[str]:
    # loc of a missing door U-value: ("rooms", i, "doors", j, "u_value")
    if len(loc) != 5 or loc[0] != "rooms" or loc[2] != "doors" or loc[4] != "u_value":
        return None
    try:
        door = prepared["rooms"][loc[1]]["doors"][loc[3]]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(door, Mapping) or door.get("u_value") is not None:
        return None
    return str(door.get("id", f"door {loc[3]}"))
