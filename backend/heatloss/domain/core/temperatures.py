"""
Design temperature resolution

Single source of truth for the indoor target temperature and the design
temperature difference. The calculator, validator and provenance builder all
resolve temperatures here, so the audit trail always describes the ΔT that
produced the numbers.
"""

from typing import Optional, Tuple

from heatloss.domain.core.lookups import LookupProviders, resolve_providers
from heatloss.domain.models.inputs import ClimateData, DesignConditions, Room


def resolve_target_temperature(
    room: Room,
    design_conditions: Optional[DesignConditions] = None,
    providers: Optional[LookupProviders] = None,
) -> float:
    """
    Room override, then the design conditions table, then the room type lookup.
    Explicit zero overrides are honoured.
    """
    if room.target_temperature is not None:
        return room.target_temperature

    if design_conditions is not None:
        table_value = design_conditions.target_temperatures.get(room.type)
        if table_value is not None:
            return table_value

    return resolve_providers(providers).target_temperature(room.type)


def design_delta_t(
    room: Room,
    climate: ClimateData,
    design_conditions: Optional[DesignConditions] = None,
    providers: Optional[LookupProviders] = None,
) -> Tuple[float, float]:
    """
    Returns (target temperature, ΔT). ΔT may be negative; that is flagged by
    the validator and analyser, never rejected here.
    """
    target_temp = resolve_target_temperature(room, design_conditions, providers)
    return target_temp, target_temp - climate.outside_design_temp
