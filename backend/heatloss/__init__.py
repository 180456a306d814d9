"""
Room-by-room heat loss calculation (simplified EN 12831) with provenance
"""

__version__ = "0.1.0"

from heatloss.domain.calculations.room_heat_loss import (  # noqa: E402
    calculate_building_heat_loss,
    calculate_room_heat_loss,
    calculate_total_heat_load,
)
from heatloss.domain.provenance.builder import build_heat_loss_provenance, record_override  # noqa: E402
from heatloss.domain.provenance.confidence import compute_confidence  # noqa: E402
from heatloss.domain.validation.input_validator import (  # noqa: E402
    validate_heat_loss_inputs,
    validate_heat_loss_payload,
)
from heatloss.domain.validation.result_analyzer import analyze_heat_loss_result  # noqa: E402

__all__ = [
    "__version__",
    "analyze_heat_loss_result",
    "build_heat_loss_provenance",
    "calculate_building_heat_loss",
    "calculate_room_heat_loss",
    "calculate_total_heat_load",
    "compute_confidence",
    "record_override",
    "validate_heat_loss_inputs",
    "validate_heat_loss_payload",
]
