"""
Radiator Selection

Picks and positions a radiator for a room from a catalogue:
1. Keep radiators whose rated output at the flow temperature covers the load
2. Try each radiator on each wall, under a window first, else in the
   largest clear span between openings
3. Score every fitting combination and keep the best

Openings without a recorded position are taken to be centred on their wall.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from heatloss.domain.models.inputs import FlowTemperature, Room, Wall
from heatloss.domain.models.results import HeatLossResult
from heatloss.domain.radiators.catalog import Radiator, RadiatorConnection, RadiatorType, ValveType
from heatloss.utils.logging_utils import timed_operation

logger = logging.getLogger(__name__)

WALL_CLEARANCE = 0.1  # metres either side of the radiator
HEIGHT_ABOVE_FLOOR = 100  # mm


@dataclass(frozen=True)
class PipeworkConfig:
    flow_position: float  # metres along the wall
    return_position: float
    connection_type: RadiatorConnection
    valve_type: ValveType = ValveType.TRV

    def to_json(self):
        return {
            "flow_position": round(self.flow_position, 3),
            "return_position": round(self.return_position, 3),
            "connection_type": self.connection_type.value,
            "valve_type": self.valve_type.value,
        }


@dataclass(frozen=True)
class RadiatorPlacement:
    radiator_id: str
    room_id: str
    wall_id: str
    position: float  # metres from wall start to radiator centre
    pipework: PipeworkConfig
    under_window: bool = False
    height_above_floor: int = HEIGHT_ABOVE_FLOOR
    rotation: int = 0  # degrees

    def to_json(self):
        return {
            "radiator_id": self.radiator_id,
            "room_id": self.room_id,
            "wall_id": self.wall_id,
            "position": round(self.position, 3),
            "under_window": self.under_window,
            "height_above_floor": self.height_above_floor,
            "rotation": self.rotation,
            "pipework": self.pipework.to_json(),
        }


@dataclass(frozen=True)
class RadiatorSelection:
    radiator: Radiator
    placement: RadiatorPlacement
    output_at_flow_temp: float  # W
    score: float

    def to_json(self):
        return {
            "radiator": self.radiator.to_json(),
            "placement": self.placement.to_json(),
            "output_at_flow_temp": self.output_at_flow_temp,
            "score": self.score,
        }


@dataclass(frozen=True)
class _Span:
    start: float
    end: float

    @property
    def length(self) -> float:
        return self.end - self.start


def select_radiator(
    required_output: float,
    room: Room,
    flow_temperature: FlowTemperature,
    catalog: Sequence[Radiator],
) -> Optional[RadiatorSelection]:
    """
    Find the best radiator for a room.

    Args:
        required_output: Required heat output in watts
        room: Room geometry including walls, windows and doors
        flow_temperature: Flow/return temperature of the system
        catalog: Available radiators

    Returns:
        Best selection with its placement, or None if nothing suitable fits
    """
    suitable = _suitable_radiators(required_output, flow_temperature, catalog)
    if not suitable:
        logger.debug(f"Room {room.id}: no radiator delivers {required_output:.0f}W at {FlowTemperature(flow_temperature).value}")
        return None

    best = None
    for radiator in suitable:
        for wall in room.walls:
            placement = _try_place_radiator(radiator, wall, room)
            if placement is None:
                continue
            score = score_radiator_placement(radiator, wall, room, required_output, flow_temperature)
            if best is None or score > best.score:
                best = RadiatorSelection(
                    radiator=radiator,
                    placement=placement,
                    output_at_flow_temp=radiator.output_at(flow_temperature),
                    score=score,
                )

    if best is None:
        logger.debug(f"Room {room.id}: {len(suitable)} radiator(s) meet the load but none fit on a wall")
    return best


@timed_operation("select_radiators_for_building")
def select_radiators_for_building(
    results: Iterable[HeatLossResult],
    rooms: Sequence[Room],
    flow_temperature: FlowTemperature,
    catalog: Sequence[Radiator],
) -> Dict[str, RadiatorSelection]:
    """Select radiators for all rooms. Rooms without a fitting radiator are left out."""
    rooms_by_id = {room.id: room for room in rooms}
    selections = {}

    for result in results:
        room = rooms_by_id.get(result.room_id)
        if room is None:
            continue
        selection = select_radiator(result.required_output, room, flow_temperature, catalog)
        if selection is not None:
            selections[room.id] = selection

    logger.info(f"Selected radiators for {len(selections)}/{len(rooms_by_id)} room(s)")
    return selections


def can_radiator_fit_on_wall(radiator: Radiator, wall: Wall, room: Room) -> bool:
    return _try_place_radiator(radiator, wall, room) is not None


def get_alternative_radiators(
    required_output: float,
    room: Room,
    flow_temperature: FlowTemperature,
    catalog: Sequence[Radiator],
    exclude_ids: Iterable[str] = (),
    limit: int = 5,
) -> List[RadiatorSelection]:
    """
    Alternatives when the first choice doesn't suit, best first.
    Each radiator appears once, on the first wall it fits.
    """
    excluded = set(exclude_ids)
    alternatives = []

    for radiator in _suitable_radiators(required_output, flow_temperature, catalog):
        if radiator.id in excluded:
            continue
        for wall in room.walls:
            placement = _try_place_radiator(radiator, wall, room)
            if placement is not None:
                alternatives.append(RadiatorSelection(
                    radiator=radiator,
                    placement=placement,
                    output_at_flow_temp=radiator.output_at(flow_temperature),
                    score=score_radiator_placement(radiator, wall, room, required_output, flow_temperature),
                ))
                break

    alternatives.sort(key=lambda s: s.score, reverse=True)
    return alternatives[:limit]


def score_radiator_placement(
    radiator: Radiator,
    wall: Wall,
    room: Room,
    required_output: float,
    flow_temperature: FlowTemperature,
) -> float:
    """Higher score = better option"""
    score = 100.0

    # Slightly over the requirement is ideal, heavily oversized is wasteful
    output = radiator.output_at(flow_temperature)
    output_ratio = output / required_output if required_output > 0 else float("inf")
    if 1.0 <= output_ratio <= 1.15:
        score += 30
    elif 1.15 < output_ratio <= 1.3:
        score += 20
    elif output_ratio > 1.3:
        score += 5
    else:
        score -= 50

    # External walls distribute heat better
    if wall.is_external:
        score += 20

    # Under a window counters downdraughts and condensation
    if room.windows_on(wall.id):
        score += 25

    if radiator.type in (RadiatorType.K2, RadiatorType.DOUBLE):
        score += 15
    elif radiator.type == RadiatorType.K1:
        score += 10
    elif radiator.type == RadiatorType.SINGLE:
        score += 5

    if room.area > 0:
        size_ratio = radiator.face_area / room.area
        if size_ratio < 0.05:
            score += 10
        elif size_ratio > 0.15:
            score -= 10

    # Minor factor
    if radiator.price and output > 0 and radiator.price / output < 0.05:
        score += 5

    return score


def _suitable_radiators(
    required_output: float,
    flow_temperature: FlowTemperature,
    catalog: Sequence[Radiator],
) -> List[Radiator]:
    return [
        rad for rad in catalog
        if rad.output_at(flow_temperature) > 0 and rad.output_at(flow_temperature) >= required_output
    ]


def _opening_extent(position: Optional[float], width: float, wall: Wall) -> Tuple[float, float]:
    centre = position if position is not None else wall.length / 2
    return centre - width / 2, centre + width / 2


def _try_place_radiator(radiator: Radiator, wall: Wall, room: Room) -> Optional[RadiatorPlacement]:
    rad_width = radiator.width_m
    required_space = rad_width + 2 * WALL_CLEARANCE
    if wall.length < required_space:
        return None

    windows = room.windows_on(wall.id)
    openings = [(w.id, _opening_extent(w.position, w.width, wall)) for w in windows]
    openings += [(d.id, _opening_extent(d.position, d.width, wall)) for d in room.doors_on(wall.id)]
    openings.sort(key=lambda item: item[1][0])

    position = None
    under_window = False

    for window in windows:
        centre = window.position if window.position is not None else wall.length / 2
        rad_start, rad_end = centre - rad_width / 2, centre + rad_width / 2
        if rad_start < WALL_CLEARANCE or rad_end > wall.length - WALL_CLEARANCE:
            continue
        # The window it sits under is not an obstruction; others keep the clearance
        conflicts = any(
            not (rad_end + WALL_CLEARANCE <= start or rad_start - WALL_CLEARANCE >= end)
            for opening_id, (start, end) in openings
            if opening_id != window.id
        )
        if not conflicts:
            position = centre
            under_window = True
            break

    if position is None:
        for span in _clear_spans(wall, [extent for _, extent in openings]):
            if span.length >= required_space:
                position = span.start + span.length / 2
                break

    if position is None:
        return None

    return RadiatorPlacement(
        radiator_id=radiator.id,
        room_id=room.id,
        wall_id=wall.id,
        position=position,
        under_window=under_window,
        pipework=PipeworkConfig(
            flow_position=position - rad_width / 4,
            return_position=position + rad_width / 4,
            connection_type=radiator.connection_type,
        ),
    )


def _clear_spans(wall: Wall, obstructions: List[Tuple[float, float]]) -> List[_Span]:
    """Clear stretches of wall between openings, largest first"""
    spans = []
    current = 0.0

    for start, end in sorted(obstructions):
        if start > current:
            spans.append(_Span(current, start))
        current = max(current, end)

    if current < wall.length:
        spans.append(_Span(current, wall.length))

    spans.sort(key=lambda s: s.length, reverse=True)
    return spans
