"""
Tests for the confidence roll-up
"""

import pytest

from heatloss.domain.calculations.room_heat_loss import calculate_room_heat_loss
from heatloss.domain.models.provenance import (
    Assumption,
    AssumptionImpact,
    CalculationProvenance,
    CalculationWarning,
    ConfidenceLevel,
    WarningCategory,
    WarningSeverity,
)
from heatloss.domain.provenance.builder import build_heat_loss_provenance
from heatloss.domain.provenance.confidence import compute_confidence


def assumption(impact):
    return Assumption(code="TEST", field="field", description="test", impact=impact, value=1.0)


def warning(severity):
    return CalculationWarning(code="TEST", severity=severity, category=WarningCategory.CALCULATION, message="test")


def provenance(assumptions=(), warnings=()):
    return CalculationProvenance(
        method="EN12831-simplified",
        method_version="2026.01",
        inputs_snapshot={},
        assumptions=tuple(assumptions),
        warnings=tuple(warnings),
    )


class TestComputeConfidence:

    def test_clean_provenance(self):
        summary = compute_confidence(provenance())

        assert summary.score == 100
        assert summary.overall is ConfidenceLevel.HIGH

    @pytest.mark.parametrize("assumptions,warnings,score,level", [
        ([AssumptionImpact.LOW] * 3, [], 100, ConfidenceLevel.HIGH),
        ([AssumptionImpact.MEDIUM, AssumptionImpact.MEDIUM], [], 80, ConfidenceLevel.HIGH),
        ([AssumptionImpact.HIGH, AssumptionImpact.MEDIUM], [], 70, ConfidenceLevel.MEDIUM),
        ([], [WarningSeverity.WARNING, WarningSeverity.INFO], 95, ConfidenceLevel.HIGH),
        ([AssumptionImpact.HIGH], [WarningSeverity.ERROR], 50, ConfidenceLevel.MEDIUM),
        ([AssumptionImpact.HIGH, AssumptionImpact.HIGH], [WarningSeverity.ERROR], 30, ConfidenceLevel.LOW),
        ([AssumptionImpact.HIGH] * 4, [WarningSeverity.ERROR] * 2, 0, ConfidenceLevel.LOW),
    ])
    def test_scoring(self, assumptions, warnings, score, level):
        summary = compute_confidence(provenance(
            [assumption(a) for a in assumptions],
            [warning(w) for w in warnings],
        ))

        assert summary.score == score
        assert summary.overall is level

    def test_categories_follow_overall(self):
        summary = compute_confidence(provenance([assumption(AssumptionImpact.HIGH)] * 2))

        assert summary.overall is ConfidenceLevel.MEDIUM
        assert {summary.geometry, summary.fabric, summary.ventilation, summary.emitters} == {ConfidenceLevel.MEDIUM}

    def test_from_calculation(self, lounge, building, climate, design_conditions):
        result = calculate_room_heat_loss(lounge, building, climate, design_conditions)
        summary = compute_confidence(
            build_heat_loss_provenance(lounge, building, climate, design_conditions, result)
        )

        # ACH (medium) plus low-impact ceiling height and bridging
        assert summary.score == 90
        assert summary.to_json()["overall"] == "high"
