"""
Lookup providers injected into the calculation core

The surrounding application owns the reference data. The core only sees
pure functions mapping construction/glazing tags to U-values, room types to
target temperatures, and regions to outside design temperatures.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from heatloss.domain.core import uvalues


@dataclass(frozen=True)
class LookupProviders:
    wall_u_value: Callable[..., float]
    roof_u_value: Callable[..., float]
    floor_u_value: Callable[..., float]
    glazing_u_value: Callable[..., float]
    target_temperature: Callable[..., float]
    outside_design_temp: Callable[[str], float]


_DEFAULT_PROVIDERS = LookupProviders(
    wall_u_value=uvalues.get_wall_u_value,
    roof_u_value=uvalues.get_roof_u_value,
    floor_u_value=uvalues.get_floor_u_value,
    glazing_u_value=uvalues.get_glazing_u_value,
    target_temperature=uvalues.get_target_temperature,
    outside_design_temp=uvalues.get_outside_design_temp,
)


def default_providers() -> LookupProviders:
    """Providers backed by the built-in UK reference tables"""
    return _DEFAULT_PROVIDERS


def resolve_providers(providers: Optional[LookupProviders]) -> LookupProviders:
    return providers if providers is not None else _DEFAULT_PROVIDERS
