"""
Calculation Provenance - Audit Trail for Heat Loss Calculations

Every calculation result is paired with provenance so surveyors can:
- See exactly which inputs were used
- Tell measured data from assumptions and policy defaults
- Regenerate the result after correcting inputs
- Explain the numbers to customers and reviewers
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class CalculationReason(str, Enum):
    INITIAL_CALCULATION = "initial_calculation"
    USER_OVERRIDE = "user_override"
    RECALC_AFTER_EDIT = "recalc_after_edit"
    METHODOLOGY_UPDATE = "methodology_update"
    DATA_CORRECTION = "data_correction"


class AssumptionImpact(str, Enum):
    LOW = "low"  # <5% effect on result
    MEDIUM = "medium"  # 5-15% effect
    HIGH = "high"  # >15% effect


class DefaultSource(str, Enum):
    POSTCODE_LOOKUP = "postcode_lookup"
    ROOM_TYPE_DEFAULT = "room_type_default"
    ERA_TYPICAL = "era_typical"
    COMPANY_POLICY = "company_policy"
    INDUSTRY_STANDARD = "industry_standard"


class WarningSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class WarningCategory(str, Enum):
    DATA_QUALITY = "data_quality"
    CALCULATION = "calculation"
    COMPLIANCE = "compliance"
    PERFORMANCE = "performance"


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AssumptionCodes:
    ACH_UNKNOWN = "ACH_UNKNOWN"
    WALL_CONSTRUCTION_INFERRED = "WALL_CONSTRUCTION_INFERRED"
    WINDOW_UVALUE_ASSUMED = "WINDOW_UVALUE_ASSUMED"
    CEILING_HEIGHT_ASSUMED = "CEILING_HEIGHT_ASSUMED"
    THERMAL_BRIDGING_TYPICAL = "THERMAL_BRIDGING_TYPICAL"


class WarningCodes:
    HEAT_LOSS_PER_M2_HIGH = "HEAT_LOSS_PER_M2_HIGH"
    HEAT_LOSS_PER_M2_LOW = "HEAT_LOSS_PER_M2_LOW"
    FABRIC_RATIO_HIGH = "FABRIC_RATIO_HIGH"
    FABRIC_RATIO_LOW = "FABRIC_RATIO_LOW"
    TARGET_TEMP_UNUSUAL = "TARGET_TEMP_UNUSUAL"


@dataclass(frozen=True)
class AssumptionAlternative:
    value: Any
    label: str


@dataclass(frozen=True)
class Assumption:
    """Something we guessed because we didn't have data"""
    code: str
    field: str
    description: str
    impact: AssumptionImpact
    value: Any
    alternatives: Tuple[AssumptionAlternative, ...] = ()
    # "defaulted" when the input record never set the field,
    # "sentinel_match" when the value merely equals the common default,
    # "missing_value" when an explicit value was absent and a lookup stood in
    detection: str = "sentinel_match"

    def to_json(self) -> Dict[str, Any]:
        data = {
            "code": self.code,
            "field": self.field,
            "description": self.description,
            "impact": self.impact.value,
            "value": self.value,
            "detection": self.detection,
        }
        if self.alternatives:
            data["alternatives"] = [{"value": a.value, "label": a.label} for a in self.alternatives]
        return data


@dataclass(frozen=True)
class DefaultApplied:
    """A value used because it is standard practice (policy, not guesswork)"""
    field: str
    value: Any
    source: DefaultSource
    description: str

    def to_json(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "value": self.value,
            "source": self.source.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class Override:
    """A user explicitly changed a calculated or assumed value"""
    field: str
    original_value: Any
    overridden_value: Any
    timestamp: datetime
    reason: Optional[str] = None
    user_id: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "original_value": self.original_value,
            "overridden_value": self.overridden_value,
            "timestamp": self.timestamp.isoformat(),
            "reason": self.reason,
            "user_id": self.user_id,
        }


@dataclass(frozen=True)
class CalculationWarning:
    """Potential issue with inputs or results, for warning banners"""
    code: str
    severity: WarningSeverity
    category: WarningCategory
    message: str
    suggested_fix: Optional[str] = None
    affected_fields: Tuple[str, ...] = ()
    context: Dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "severity": self.severity.value,
            "category": self.category.value,
            "message": self.message,
            "suggested_fix": self.suggested_fix,
            "affected_fields": list(self.affected_fields),
            "context": dict(self.context),
        }


@dataclass(frozen=True)
class CalculationProvenance:
    method: str
    method_version: str
    inputs_snapshot: Dict[str, Any]
    assumptions: Tuple[Assumption, ...] = ()
    defaults_applied: Tuple[DefaultApplied, ...] = ()
    overrides: Tuple[Override, ...] = ()
    warnings: Tuple[CalculationWarning, ...] = ()
    calculated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    reason: CalculationReason = CalculationReason.INITIAL_CALCULATION
    calculated_by: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "method_version": self.method_version,
            "inputs_snapshot": dict(self.inputs_snapshot),
            "assumptions": [a.to_json() for a in self.assumptions],
            "defaults_applied": [d.to_json() for d in self.defaults_applied],
            "overrides": [o.to_json() for o in self.overrides],
            "warnings": [w.to_json() for w in self.warnings],
            "calculated_at": self.calculated_at.isoformat(),
            "reason": self.reason.value,
            "calculated_by": self.calculated_by,
        }


@dataclass(frozen=True)
class ConfidenceSummary:
    """Coarse confidence rollup computed from provenance, for UI indicators"""
    overall: ConfidenceLevel
    geometry: ConfidenceLevel
    fabric: ConfidenceLevel
    ventilation: ConfidenceLevel
    emitters: ConfidenceLevel
    score: int

    def to_json(self) -> Dict[str, Any]:
        return {
            "overall": self.overall.value,
            "geometry": self.geometry.value,
            "fabric": self.fabric.value,
            "ventilation": self.ventilation.value,
            "emitters": self.emitters.value,
            "score": self.score,
        }
