"""
Raw payload preparation

The enclosing service accepts plain JSON mappings. Before they are parsed
into input records, climate data given only as a region gets its outside
design temperature from the region lookup.
"""

import copy
import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from heatloss.domain.core.lookups import LookupProviders, resolve_providers

logger = logging.getLogger(__name__)


def prepare_payload(
    payload: Mapping[str, Any],
    providers: Optional[LookupProviders] = None,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Returns a copy of the payload with lookups applied, and the list of
    fields that were filled in.
    """
    prepared = copy.deepcopy(dict(payload))
    filled = []

    climate = prepared.get("climate")
    if (isinstance(climate, dict) and climate.get("outside_design_temp") is None
            and isinstance(climate.get("region"), str) and climate["region"]):
        climate["outside_design_temp"] = resolve_providers(providers).outside_design_temp(climate["region"])
        filled.append("climate.outside_design_temp")
        logger.debug(f"Outside design temperature from region {climate['region']}: "
                     f"{climate['outside_design_temp']}°C")

    return prepared, filled


def iter_room_payloads(payload: Mapping[str, Any]) -> Iterator[Mapping[str, Any]]:
    """Rooms of a building payload ("rooms") or of a single-room payload ("room")"""
    rooms = payload.get("rooms")
    if rooms is None and payload.get("room") is not None:
        rooms = [payload["room"]]
    if not isinstance(rooms, (list, tuple)):
        return
    for room in rooms:
        if isinstance(room, Mapping):
            yield room


def room_label(room: Mapping[str, Any]) -> str:
    return str(room.get("name") or room.get("id") or "unnamed")
