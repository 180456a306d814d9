"""
Tests for calculation provenance and override recording
"""

import pytest

from heatloss.domain.calculations.room_heat_loss import calculate_room_heat_loss
from heatloss.domain.core.temperatures import design_delta_t
from heatloss.domain.models.inputs import (
    BuildingData,
    ClimateData,
    DesignConditions,
    Door,
    Room,
    RoomType,
    Wall,
    WallConstruction,
    Window,
)
from heatloss.domain.models.provenance import (
    AssumptionCodes,
    AssumptionImpact,
    CalculationReason,
    DefaultSource,
    WarningCategory,
    WarningCodes,
    WarningSeverity,
)
from heatloss.domain.provenance.builder import (
    METHOD,
    METHOD_VERSION,
    build_heat_loss_provenance,
    record_override,
)


def build(room, building, climate, design_conditions, **kwargs):
    result = calculate_room_heat_loss(room, building, climate, design_conditions)
    return result, build_heat_loss_provenance(room, building, climate, design_conditions, result, **kwargs)


def assumption_codes(provenance):
    return [a.code for a in provenance.assumptions]


class TestDeltaTConsistency:

    @pytest.mark.parametrize("room", [
        Room(id="r1", name="Lounge", type=RoomType.LIVING_ROOM, area=20.0, volume=50.0, target_temperature=23.5),
        Room(id="r2", name="Bathroom", type=RoomType.BATHROOM, area=5.0, volume=12.0),
        Room(id="r3", name="Garage", type=RoomType.GARAGE, area=15.0, volume=36.0, target_temperature=0.0),
    ])
    @pytest.mark.parametrize("design_conditions", [
        DesignConditions(),
        DesignConditions(target_temperatures={RoomType.BATHROOM: 24.0, RoomType.LIVING_ROOM: 19.0}),
    ])
    def test_snapshot_delta_t_matches_calculation(self, room, design_conditions, building, climate):
        room = room.model_copy(update={
            "walls": [Wall(id="w1", length=3.0, height=2.4, is_external=True, u_value=1.0)],
        })
        result, provenance = build(room, building, climate, design_conditions)

        target_temp, delta_t = design_delta_t(room, climate, design_conditions)
        assert provenance.inputs_snapshot["delta_t"] == delta_t
        assert provenance.inputs_snapshot["target_temp"] == target_temp
        assert result.breakdown.walls[0].delta_t == provenance.inputs_snapshot["delta_t"]


class TestProvenanceRecord:

    def test_method_and_reason(self, lounge, building, climate, design_conditions):
        _, provenance = build(lounge, building, climate, design_conditions)

        assert provenance.method == METHOD == "EN12831-simplified"
        assert provenance.method_version == METHOD_VERSION
        assert provenance.reason is CalculationReason.INITIAL_CALCULATION
        assert provenance.calculated_at.tzinfo is not None

    def test_reason_and_user_are_recorded(self, lounge, building, climate, design_conditions):
        _, provenance = build(
            lounge, building, climate, design_conditions,
            reason=CalculationReason.RECALC_AFTER_EDIT, calculated_by="surveyor-7",
        )

        assert provenance.reason is CalculationReason.RECALC_AFTER_EDIT
        assert provenance.calculated_by == "surveyor-7"

    def test_overrides_are_empty(self, lounge, building, climate, design_conditions):
        _, provenance = build(lounge, building, climate, design_conditions)
        assert provenance.overrides == ()

    def test_inputs_snapshot(self, lounge, building, climate, design_conditions):
        _, provenance = build(lounge, building, climate, design_conditions)
        snapshot = provenance.inputs_snapshot

        assert snapshot["room_id"] == "lounge"
        assert snapshot["room_type"] == "living_room"
        assert snapshot["area"] == 20.0
        assert snapshot["volume"] == 50.0
        assert snapshot["outside_design_temp"] == -3.0
        assert snapshot["delta_t"] == 24.0
        assert snapshot["floor_u_value"] == 0.25
        assert snapshot["air_changes_per_hour"] == 1.0
        assert snapshot["thermal_bridging"] == 0.15
        assert snapshot["flow_temperature"] == "70/50"
        assert snapshot["external_wall_count"] == 1
        assert snapshot["walls.w1.length"] == 4.0
        assert snapshot["walls.w1.height"] == 2.5
        assert snapshot["walls.w1.u_value"] == 1.5
        assert snapshot["walls.w1.is_external"] is True

    @staticmethod
    def _fabric_room(wall_u, window_u, door_u):
        return Room(
            id="bed1", name="Bedroom", type=RoomType.BEDROOM, area=10.0, volume=24.0,
            walls=[Wall(id="w1", length=4.0, height=2.4, is_external=True, u_value=wall_u)],
            windows=[Window(id="win1", wall_id="w1", width=1.2, height=1.0, u_value=window_u)],
            doors=[Door(id="d1", wall_id="w1", width=0.9, height=2.0, is_external=True, u_value=door_u)],
        )

    def test_element_values_in_snapshot(self, building, climate, design_conditions):
        _, provenance = build(self._fabric_room(0.3, 1.2, 1.8), building, climate, design_conditions)
        snapshot = provenance.inputs_snapshot

        assert snapshot["windows.win1.wall_id"] == "w1"
        assert snapshot["windows.win1.glazing_type"] == "double"
        assert snapshot["windows.win1.u_value"] == 1.2
        assert snapshot["doors.d1.width"] == 0.9
        assert snapshot["doors.d1.u_value"] == 1.8

    def test_changed_u_values_change_snapshot(self, building, climate, design_conditions):
        good, good_provenance = build(self._fabric_room(0.3, 1.2, 1.8), building, climate, design_conditions)
        poor, poor_provenance = build(self._fabric_room(2.1, 4.8, 3.5), building, climate, design_conditions)

        assert poor.total_loss > good.total_loss
        assert good_provenance.inputs_snapshot != poor_provenance.inputs_snapshot
        assert poor_provenance.inputs_snapshot["walls.w1.u_value"] == 2.1

    def test_to_json(self, lounge, building, climate, design_conditions):
        _, provenance = build(lounge, building, climate, design_conditions)
        data = provenance.to_json()

        assert data["reason"] == "initial_calculation"
        assert data["overrides"] == []
        assert {a["code"] for a in data["assumptions"]} == set(assumption_codes(provenance))
        assert isinstance(data["calculated_at"], str)


class TestAssumptions:

    def test_default_air_change_rate(self, lounge, climate, design_conditions):
        """ACH left at the 1.0 default is an assumption with medium impact"""
        _, provenance = build(lounge, BuildingData(floor_u_value=0.25), climate, design_conditions)

        ach = next(a for a in provenance.assumptions if a.code == AssumptionCodes.ACH_UNKNOWN)
        assert ach.impact is AssumptionImpact.MEDIUM
        assert ach.value == 1.0
        assert ach.detection == "defaulted"
        assert [alt.value for alt in ach.alternatives] == [0.5, 1.5, 2.5]

    def test_explicit_sentinel_air_change_rate(self, lounge, building, climate, design_conditions):
        _, provenance = build(lounge, building, climate, design_conditions)

        ach = next(a for a in provenance.assumptions if a.code == AssumptionCodes.ACH_UNKNOWN)
        assert ach.impact is AssumptionImpact.MEDIUM
        assert ach.detection == "sentinel_match"

    def test_measured_air_change_rate_is_not_assumed(self, lounge, climate, design_conditions):
        building = BuildingData(air_changes_per_hour=0.6, floor_u_value=0.25)
        _, provenance = build(lounge, building, climate, design_conditions)

        assert AssumptionCodes.ACH_UNKNOWN not in assumption_codes(provenance)

    def test_wall_construction_inferred(self, lounge, climate, design_conditions):
        building = BuildingData(
            air_changes_per_hour=0.6,
            wall_construction=WallConstruction.SOLID_BRICK_UNINSULATED,
            floor_u_value=0.25,
        )
        _, provenance = build(lounge, building, climate, design_conditions)

        wall = next(a for a in provenance.assumptions if a.code == AssumptionCodes.WALL_CONSTRUCTION_INFERRED)
        assert wall.impact is AssumptionImpact.HIGH
        assert wall.value == "solid_brick_uninsulated"

    def test_building_wall_u_value_is_not_inferred(self, lounge, climate, design_conditions):
        building = BuildingData(
            wall_construction=WallConstruction.CAVITY_FULL_FILL,
            wall_u_value=0.3,
            floor_u_value=0.25,
        )
        _, provenance = build(lounge, building, climate, design_conditions)

        assert AssumptionCodes.WALL_CONSTRUCTION_INFERRED not in assumption_codes(provenance)

    def test_ceiling_height_and_bridging(self, lounge, building, climate, design_conditions):
        _, provenance = build(lounge, building, climate, design_conditions)
        impacts = {a.code: a.impact for a in provenance.assumptions}

        assert impacts[AssumptionCodes.CEILING_HEIGHT_ASSUMED] is AssumptionImpact.LOW
        assert impacts[AssumptionCodes.THERMAL_BRIDGING_TYPICAL] is AssumptionImpact.LOW

    def test_measured_ceiling_and_bridging(self, climate):
        room = Room(id="r1", name="Lounge", area=20.0, volume=52.0, ceiling_height=2.6, target_temperature=21.0)
        design = DesignConditions(thermal_bridging=0.08)
        _, provenance = build(room, BuildingData(air_changes_per_hour=0.6, floor_u_value=0.25), climate, design)

        assert provenance.assumptions == ()

    def test_windows_without_u_value(self, lounge, building, climate, design_conditions):
        room = lounge.model_copy(update={"windows": [
            Window(id="win1", wall_id="w1", width=1.2, height=1.0),
            Window(id="win2", wall_id="w1", width=0.6, height=1.0),
            Window(id="win3", wall_id="w1", width=0.6, height=1.0, u_value=1.4),
        ]})
        _, provenance = build(room, building, climate, design_conditions)

        windows = next(a for a in provenance.assumptions if a.code == AssumptionCodes.WINDOW_UVALUE_ASSUMED)
        assert windows.impact is AssumptionImpact.MEDIUM
        assert windows.value == "various"
        assert windows.description.startswith("2 window(s)")


class TestDefaultsApplied:

    def test_room_type_target_temperature(self, building, climate, design_conditions):
        room = Room(id="r1", name="Bed", type=RoomType.BEDROOM, area=12.0, volume=28.8)
        _, provenance = build(room, building, climate, design_conditions)

        target = next(d for d in provenance.defaults_applied if d.field == "target_temperature")
        assert target.source is DefaultSource.ROOM_TYPE_DEFAULT
        assert target.value == 18

    def test_overridden_target_is_not_a_default(self, lounge, building, climate, design_conditions):
        _, provenance = build(lounge, building, climate, design_conditions)
        assert "target_temperature" not in [d.field for d in provenance.defaults_applied]

    def test_outside_temperature_from_postcode(self, lounge, building, design_conditions):
        climate = ClimateData.for_region("Scotland", postcode="EH1 1YZ")
        _, provenance = build(lounge, building, climate, design_conditions)

        outside = next(d for d in provenance.defaults_applied if d.field == "outside_design_temp")
        assert outside.source is DefaultSource.POSTCODE_LOOKUP
        assert outside.value == -5

    def test_safety_margin(self, lounge, building, climate):
        _, provenance = build(lounge, building, climate, DesignConditions(safety_margin=10.0))
        margin = next(d for d in provenance.defaults_applied if d.field == "safety_margin")

        assert margin.source is DefaultSource.INDUSTRY_STANDARD
        assert margin.value == 10.0

    def test_zero_safety_margin_is_not_recorded(self, lounge, building, climate):
        _, provenance = build(lounge, building, climate, DesignConditions(safety_margin=0.0))
        assert "safety_margin" not in [d.field for d in provenance.defaults_applied]


class TestWarnings:

    def test_typical_room_has_no_warnings(self, lounge, building, climate, design_conditions):
        _, provenance = build(lounge, building, climate, design_conditions)
        assert provenance.warnings == ()

    def test_ventilation_dominated(self, climate):
        """Fabric ratio 0.35 flags ventilation loss as unusually high"""
        ventilation = 0.33 * 2.0 * 50.0 * 20.0
        floor_u = (ventilation * 0.35 / 0.65) / (20.0 * 10.0)
        room = Room(id="r1", name="Kitchen", area=20.0, volume=50.0, target_temperature=20.0)
        building = BuildingData(air_changes_per_hour=2.0, floor_u_value=floor_u)

        result, provenance = build(room, building, ClimateData(outside_design_temp=0.0), DesignConditions())

        assert result.fabric_loss / result.total_loss == pytest.approx(0.35)
        warning = next(w for w in provenance.warnings if w.code == WarningCodes.FABRIC_RATIO_LOW)
        assert "Ventilation loss unusually high" in warning.message
        assert warning.severity is WarningSeverity.WARNING
        assert warning.affected_fields == ("air_changes_per_hour",)
        assert warning.context["fabric_ratio"] == pytest.approx(0.35)

    def test_high_loss_per_m2(self, climate, design_conditions):
        room = Room(
            id="r1", name="Porch", area=2.0, volume=5.0, target_temperature=21.0,
            walls=[Wall(id="w1", length=4.0, height=2.5, is_external=True, u_value=2.1)],
        )
        _, provenance = build(room, BuildingData(floor_u_value=0.7), climate, design_conditions)

        warning = next(w for w in provenance.warnings if w.code == WarningCodes.HEAT_LOSS_PER_M2_HIGH)
        assert warning.category is WarningCategory.CALCULATION
        assert warning.context["typical_max"] == 120.0

    def test_unusual_target_temperature(self, building, climate, design_conditions):
        room = Room(id="r1", name="Nursery", area=10.0, volume=24.0, target_temperature=26.0,
                    walls=[Wall(id="w1", length=3.0, height=2.4, is_external=True, u_value=1.0)])
        _, provenance = build(room, building, climate, design_conditions)

        warning = next(w for w in provenance.warnings if w.code == WarningCodes.TARGET_TEMP_UNUSUAL)
        assert warning.category is WarningCategory.DATA_QUALITY
        assert warning.context == {"target_temperature": 26.0}

    def test_zero_area_room_does_not_raise(self, building, climate, design_conditions):
        room = Room(id="r1", name="Void", area=0.0, volume=0.0)
        _, provenance = build(room, building, climate, design_conditions)

        assert WarningCodes.HEAT_LOSS_PER_M2_LOW not in [w.code for w in provenance.warnings]


class TestRecordOverride:

    def test_returns_new_provenance(self, lounge, building, climate, design_conditions):
        _, provenance = build(lounge, building, climate, design_conditions)

        updated = record_override(provenance, "air_changes_per_hour", 1.0, 0.6,
                                  reason="Blower door test", user_id="surveyor-7")

        assert provenance.overrides == ()
        assert provenance.reason is CalculationReason.INITIAL_CALCULATION
        assert updated.reason is CalculationReason.USER_OVERRIDE
        assert len(updated.overrides) == 1

        override = updated.overrides[0]
        assert override.field == "air_changes_per_hour"
        assert override.original_value == 1.0
        assert override.overridden_value == 0.6
        assert override.user_id == "surveyor-7"
        assert override.timestamp.tzinfo is not None

    def test_overrides_accumulate(self, lounge, building, climate, design_conditions):
        _, provenance = build(lounge, building, climate, design_conditions)

        updated = record_override(provenance, "thermal_bridging", 0.15, 0.08)
        updated = record_override(updated, "ceiling_height", 2.4, 2.7)

        assert [o.field for o in updated.overrides] == ["thermal_bridging", "ceiling_height"]
        assert updated.inputs_snapshot == provenance.inputs_snapshot
        assert updated.to_json()["overrides"][1]["overridden_value"] == 2.7
