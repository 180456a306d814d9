"""
Confidence roll-up from calculation provenance
More assumptions and warnings mean lower confidence.
"""

from heatloss.domain.models.provenance import (
    AssumptionImpact,
    CalculationProvenance,
    ConfidenceLevel,
    ConfidenceSummary,
    WarningSeverity,
)

# Score deductions per item
HIGH_IMPACT_PENALTY = 20
MEDIUM_IMPACT_PENALTY = 10
ERROR_PENALTY = 30
WARNING_PENALTY = 5

HIGH_CONFIDENCE_SCORE = 80
MEDIUM_CONFIDENCE_SCORE = 50


def confidence_level(score: int) -> ConfidenceLevel:
    if score >= HIGH_CONFIDENCE_SCORE:
        return ConfidenceLevel.HIGH
    if score >= MEDIUM_CONFIDENCE_SCORE:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def compute_confidence(provenance: CalculationProvenance) -> ConfidenceSummary:
    """
    Score starts at 100 and drops for high/medium impact assumptions and for
    error/warning severity warnings. Floored at 0.
    """
    high = sum(1 for a in provenance.assumptions if a.impact == AssumptionImpact.HIGH)
    medium = sum(1 for a in provenance.assumptions if a.impact == AssumptionImpact.MEDIUM)
    errors = sum(1 for w in provenance.warnings if w.severity == WarningSeverity.ERROR)
    warnings = sum(1 for w in provenance.warnings if w.severity == WarningSeverity.WARNING)

    score = 100
    score -= high * HIGH_IMPACT_PENALTY
    score -= medium * MEDIUM_IMPACT_PENALTY
    score -= errors * ERROR_PENALTY
    score -= warnings * WARNING_PENALTY
    score = max(score, 0)

    overall = confidence_level(score)

    # TODO: derive per-category levels from the fields each assumption affects
    return ConfidenceSummary(
        overall=overall,
        geometry=overall,
        fabric=overall,
        ventilation=overall,
        emitters=overall,
        score=score,
    )
