"""
Room Heat Loss Calculator
Simplified EN 12831 steady-state heat balance, room by room

Q_total   = Q_fabric + Q_ventilation
Q_fabric  = Σ(U × A × ΔT) for walls, windows, doors, floor and ceiling
            + Y × A_external_walls × ΔT (thermal bridging)
Q_vent    = 0.33 × n × V × ΔT
Q_required = Q_total × (1 + safety margin / 100)

Pure and deterministic: no I/O, no shared mutable state. Rooms are
independent, so a building is a map over its rooms followed by a sum.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from heatloss.domain.core.lookups import LookupProviders, resolve_providers
from heatloss.domain.core.temperatures import design_delta_t
from heatloss.domain.models.inputs import (
    BuildingData,
    ClimateData,
    DesignConditions,
    HeatLossInputs,
    Room,
)
from heatloss.domain.models.results import (
    CeilingLossStatus,
    DoorLoss,
    HeatLossBreakdown,
    HeatLossResult,
    WallLoss,
    WindowLoss,
)
from heatloss.services.error_types import CalculationCancelledError, MissingRequiredFieldError

logger = logging.getLogger(__name__)

# Volumetric heat capacity of air, W·h/(m³·K)
AIR_HEAT_CAPACITY = 0.33

# Ground sits warmer than outside air; floors see half the air ΔT
GROUND_DELTA_T_FACTOR = 0.5


class RoomHeatLossCalculator:
    """
    Heat loss for a single room.

    Only external walls and external doors lose heat. Every window in the
    room is counted whatever wall it sits on.
    """

    def __init__(self, providers: Optional[LookupProviders] = None):
        self.providers = resolve_providers(providers)

    def calculate(
        self,
        room: Room,
        building: BuildingData,
        climate: ClimateData,
        design_conditions: DesignConditions,
    ) -> HeatLossResult:
        target_temp, delta_t = design_delta_t(room, climate, design_conditions, self.providers)

        walls = self._wall_losses(room, building, delta_t)
        windows = self._window_losses(room, delta_t)
        doors = self._door_losses(room, delta_t)
        floor = self._floor_loss(room, building, delta_t)
        ceiling, ceiling_status = self._ceiling_loss()
        bridging = self._thermal_bridging(room, design_conditions, delta_t)

        fabric_loss = (
            sum(w.loss for w in walls)
            + sum(w.loss for w in windows)
            + sum(d.loss for d in doors)
            + floor
            + ceiling
            + bridging
        )

        infiltration = AIR_HEAT_CAPACITY * building.air_changes_per_hour * room.volume * delta_t

        total_loss = fabric_loss + infiltration
        required_output = total_loss * (1 + design_conditions.safety_margin / 100)

        breakdown = HeatLossBreakdown(
            walls=tuple(walls),
            windows=tuple(windows),
            doors=tuple(doors),
            floor=floor,
            ceiling=ceiling,
            ceiling_status=ceiling_status,
            thermal_bridging=bridging,
            infiltration=infiltration,
        )

        logger.debug(
            f"Room {room.id} ({room.name}): target {target_temp}°C, ΔT {delta_t}, "
            f"fabric {fabric_loss:.0f} W, ventilation {infiltration:.0f} W, "
            f"required {required_output:.0f} W"
        )

        return HeatLossResult(
            room_id=room.id,
            fabric_loss=fabric_loss,
            ventilation_loss=infiltration,
            total_loss=total_loss,
            breakdown=breakdown,
            required_output=required_output,
        )

    def wall_u_value(self, wall, building: BuildingData) -> float:
        """Wall override, then building override, then construction lookup"""
        if wall.u_value is not None:
            return wall.u_value
        if building.wall_u_value is not None:
            return building.wall_u_value
        return self.providers.wall_u_value(building.wall_construction)

    def window_u_value(self, window) -> float:
        if window.u_value is not None:
            return window.u_value
        return self.providers.glazing_u_value(window.glazing_type)

    def floor_u_value(self, building: BuildingData) -> float:
        if building.floor_u_value is not None:
            return building.floor_u_value
        return self.providers.floor_u_value(building.floor_construction)

    def _wall_losses(self, room: Room, building: BuildingData, delta_t: float) -> List[WallLoss]:
        losses = []

        for wall in room.external_walls:
            u_value = self.wall_u_value(wall, building)

            window_area = sum(w.area for w in room.windows_on(wall.id))
            door_area = sum(d.area for d in room.doors_on(wall.id))
            net_area = wall.gross_area - window_area - door_area

            if net_area <= 0:
                # Openings cover the whole wall
                continue

            losses.append(WallLoss(
                element_id=wall.id,
                area=net_area,
                u_value=u_value,
                delta_t=delta_t,
                loss=u_value * net_area * delta_t,
            ))

        return losses

    def _window_losses(self, room: Room, delta_t: float) -> List[WindowLoss]:
        losses = []

        for window in room.windows:
            u_value = self.window_u_value(window)
            losses.append(WindowLoss(
                element_id=window.id,
                area=window.area,
                u_value=u_value,
                delta_t=delta_t,
                loss=u_value * window.area * delta_t,
            ))

        return losses

    def _door_losses(self, room: Room, delta_t: float) -> List[DoorLoss]:
        losses = []

        for door in room.doors:
            if not door.is_external:
                continue

            # Records built with model_construct() skip field validation
            if door.u_value is None:
                raise MissingRequiredFieldError("u_value", door.id)

            losses.append(DoorLoss(
                element_id=door.id,
                area=door.area,
                u_value=door.u_value,
                delta_t=delta_t,
                loss=door.u_value * door.area * delta_t,
            ))

        return losses

    def _floor_loss(self, room: Room, building: BuildingData, delta_t: float) -> float:
        u_value = self.floor_u_value(building)
        return u_value * room.area * (delta_t * GROUND_DELTA_T_FACTOR)

    def _ceiling_loss(self):
        # TODO: calculate roof loss for top-floor rooms once rooms carry their floor level
        return 0.0, CeilingLossStatus.PENDING_FLOOR_LEVEL_DETECTION

    def _thermal_bridging(self, room: Room, design_conditions: DesignConditions, delta_t: float) -> float:
        # Gross area: openings do not reduce junction length
        external_wall_area = sum(wall.gross_area for wall in room.external_walls)
        return design_conditions.thermal_bridging * external_wall_area * delta_t


def calculate_room_heat_loss(
    room: Room,
    building: BuildingData,
    climate: ClimateData,
    design_conditions: DesignConditions,
    providers: Optional[LookupProviders] = None,
) -> HeatLossResult:
    """
    Calculate heat loss for a single room.

    Args:
        room: Room geometry with walls, windows and doors
        building: Fabric and airtightness data
        climate: Outside design conditions
        design_conditions: Safety margin, thermal bridging, target temperatures
        providers: Reference data lookups (built-in UK tables when None)

    Returns:
        HeatLossResult with itemised breakdown
    """
    return RoomHeatLossCalculator(providers).calculate(room, building, climate, design_conditions)


def calculate_inputs(inputs: HeatLossInputs, providers: Optional[LookupProviders] = None) -> HeatLossResult:
    return calculate_room_heat_loss(
        inputs.room, inputs.building, inputs.climate, inputs.design_conditions, providers
    )


def calculate_building_heat_loss(
    rooms: Sequence[Room],
    building: BuildingData,
    climate: ClimateData,
    design_conditions: DesignConditions,
    providers: Optional[LookupProviders] = None,
    max_workers: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[HeatLossResult]:
    """
    Calculate every room of a building independently.

    Results keep the order of ``rooms``. With ``max_workers`` above one the
    rooms are fanned out over a thread pool. Setting ``cancel_event`` stops
    further rooms from being scheduled and raises CalculationCancelledError.
    """
    calculator = RoomHeatLossCalculator(providers)

    if not max_workers or max_workers <= 1 or len(rooms) <= 1:
        results = []
        for room in rooms:
            _raise_if_cancelled(cancel_event, len(results), len(rooms))
            results.append(calculator.calculate(room, building, climate, design_conditions))
        return results

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="HeatLoss") as executor:
        futures = []
        for room in rooms:
            if cancel_event is not None and cancel_event.is_set():
                for future in futures:
                    future.cancel()
            _raise_if_cancelled(cancel_event, len(futures), len(rooms))
            futures.append(executor.submit(
                calculator.calculate, room, building, climate, design_conditions
            ))
        return [future.result() for future in futures]


def _raise_if_cancelled(cancel_event: Optional[threading.Event], scheduled: int, total: int):
    if cancel_event is not None and cancel_event.is_set():
        logger.info(f"Building calculation cancelled after {scheduled}/{total} rooms")
        raise CalculationCancelledError(
            "Building heat loss calculation cancelled",
            {"rooms_scheduled": scheduled, "rooms_total": total},
        )


def calculate_total_heat_load(results: Sequence[HeatLossResult]) -> float:
    """Total required output of the building (W), safety margin included"""
    return sum(result.required_output for result in results)
