"""Tests for engine.grounding.design: stage functions and the full assessment."""

from __future__ import annotations

import logging
import math

import pytest

from engine.grounding.conductor_sizing import thermal_coefficient_kf
from engine.grounding.design import (
    FaultCurrent,
    GridGeometry,
    RodSet,
    SoilProfile,
    assess_design,
    design_apparent_resistivity,
    design_conductor_sizing,
    design_mesh_voltages,
    design_permissible_voltages,
    design_resistance,
)
from engine.grounding.grid_resistance import simplified_resistance_deep
from engine.grounding.permissible_voltage import VoltageDuration
from engine.grounding.soil_model import apparent_resistivity, equivalent_radius


class TestSoilStage:
    def test_homogeneous(self, substation_design):
        assert design_apparent_resistivity(substation_design) == 100.0

    def test_two_layer(self, substation_design):
        soil = SoilProfile(model="two_layer", rho1=100.0, rho2=400.0, layer_depth=3.0)
        design = substation_design.with_changes(soil=soil)
        expected = apparent_resistivity(100.0, 400.0, 3.0, equivalent_radius(2000.0))
        assert design_apparent_resistivity(design) == pytest.approx(expected)

    def test_incomplete_two_layer(self, substation_design):
        design = substation_design.with_changes(soil=SoilProfile(model="two_layer", rho1=100.0))
        assert design_apparent_resistivity(design) is None

    def test_invalid_rho1(self, substation_design):
        design = substation_design.with_changes(soil=SoilProfile(rho1=0.0))
        assert design_apparent_resistivity(design) is None


class TestResistanceStage:
    def test_simplified(self, substation_design):
        result = design_resistance(substation_design, 100.0)
        assert result.method == "simplified"
        assert result.resistance == simplified_resistance_deep(100.0, 2000.0, 890.0, 0.5)
        assert result.schwarz is None

    def test_detailed_without_rods_is_r1(self, substation_design):
        design = substation_design.with_changes(resistance_method="detailed")
        result = design_resistance(design, 100.0)
        assert result.method == "detailed"
        assert result.resistance == result.schwarz.r1

    def test_detailed_with_rods(self, substation_design, corner_rods):
        design = substation_design.with_changes(resistance_method="detailed", rods=corner_rods)
        result = design_resistance(design, 100.0)
        assert 0 < result.resistance < result.schwarz.r1

    def test_out_of_range_rods_ignored(self, substation_design):
        rods = RodSet(positions=((20, 20), (0, 0), (0, 0)))
        assert rods.valid_positions(11, 9) == ((0, 0),)
        design = substation_design.with_changes(resistance_method="detailed", rods=rods)
        single = substation_design.with_changes(
            resistance_method="detailed", rods=RodSet(positions=((5, 5),))
        )
        assert design_resistance(design, 100.0).resistance == design_resistance(single, 100.0).resistance

    def test_invalid_inputs(self, substation_design):
        assert design_resistance(substation_design, 0.0) is None
        flat = substation_design.with_changes(
            geometry=GridGeometry(50.0, 40.0, 11, 9, 0.0, 0.008)
        )
        assert design_resistance(flat, 100.0) is None


class TestPermissibleStage:
    def test_with_surface_layer(self, substation_design):
        result = design_permissible_voltages(substation_design, 100.0)
        assert result.touch == pytest.approx(4150 * 0.157 / math.sqrt(0.5))
        assert result.step == pytest.approx(13600 * 0.157 / math.sqrt(0.5))
        assert result.duration == VoltageDuration.SHORT

    def test_without_surface_layer(self, substation_design):
        design = substation_design.with_changes(surface_layer=None)
        result = design_permissible_voltages(design, 100.0)
        assert result.touch == pytest.approx(1150 * 0.157 / math.sqrt(0.5))

    def test_long_duration(self, substation_design):
        design = substation_design.with_changes(fault=FaultCurrent(10.0, 60.0, 5.0))
        result = design_permissible_voltages(design, 100.0)
        assert result.duration == VoltageDuration.LONG
        assert result.touch == pytest.approx(0.006 * 4150)

    def test_invalid_duration(self, substation_design):
        design = substation_design.with_changes(fault=FaultCurrent(10.0, 60.0, 0.0))
        assert design_permissible_voltages(design, 100.0) is None


class TestMeshStage:
    def test_factors(self, substation_design):
        mesh = design_mesh_voltages(substation_design, 100.0)
        assert mesh.n == pytest.approx(890 / 90)
        assert mesh.spacing == pytest.approx(5.0)
        assert mesh.ki == mesh.ki_base == pytest.approx(0.656 + 0.172 * 890 / 90)

    def test_voltages(self, substation_design):
        mesh = design_mesh_voltages(substation_design, 100.0)
        assert mesh.touch == pytest.approx(100 * 6000 * mesh.km * mesh.ki / 890)
        assert mesh.step == pytest.approx(100 * 6000 * mesh.ks * mesh.ki / 890)
        assert mesh.touch == pytest.approx(1340, rel=0.01)

    def test_perimeter_rods_force_unit_ki(self, substation_design):
        mesh = design_mesh_voltages(substation_design.with_changes(has_perimeter_rods=True), 100.0)
        assert mesh.ki == 1.0
        assert mesh.ki_base > 1.0


class TestConductorStage:
    def test_sized_on_mesh_current(self, substation_design):
        result = design_conductor_sizing(substation_design)
        kf = thermal_coefficient_kf(0.00381, 1.777, 3.422, 850, 40.0)
        assert result.section_mm2 == pytest.approx(6.0 * kf * math.sqrt(0.5))
        assert result.section_mm2 == pytest.approx(16.2, abs=0.1)

    def test_sized_on_total_current(self, substation_design):
        mesh_based = design_conductor_sizing(substation_design)
        total = design_conductor_sizing(substation_design.with_changes(use_total_current_for_sizing=True))
        assert total.section_mm2 == pytest.approx(mesh_based.section_mm2 * 10 / 6)

    def test_unknown_ids(self, substation_design):
        assert design_conductor_sizing(substation_design.with_changes(material_id="gold")) is None
        assert design_conductor_sizing(substation_design.with_changes(connection_id="tape")) is None


class TestAssessDesign:
    def test_reference_design_unsafe(self, substation_design):
        result = assess_design(substation_design)
        assert result.gpr == pytest.approx(result.resistance.resistance * 6000)
        assert result.gpr == pytest.approx(6531, rel=1e-3)
        assert not result.gpr_safe
        assert not result.touch_safe
        assert result.step_safe
        assert not result.safe

    def test_low_current_safe_by_gpr(self, substation_design):
        design = substation_design.with_changes(fault=FaultCurrent(1.0, 10.0, 0.5))
        result = assess_design(design)
        assert result.gpr == pytest.approx(108.855, rel=1e-3)
        assert result.gpr_safe
        assert result.safe

    def test_presumed_touch_voltage_included(self, substation_design):
        result = assess_design(substation_design)
        assert 230 < result.presumed_touch_voltage < 330

    def test_incomplete_soil_falls_back_to_rho1(self, substation_design):
        design = substation_design.with_changes(soil=SoilProfile(model="two_layer", rho1=100.0))
        result = assess_design(design)
        assert result.apparent_resistivity is None
        assert result.resistance.resistance == pytest.approx(assess_design(substation_design).resistance.resistance)

    def test_zero_current_has_no_gpr(self, substation_design):
        result = assess_design(substation_design.with_changes(fault=FaultCurrent(0.0, 60.0, 0.5)))
        assert result.gpr is None
        assert not result.gpr_safe
        assert result.touch_safe

    def test_invalid_duration_is_unsafe(self, substation_design):
        result = assess_design(substation_design.with_changes(fault=FaultCurrent(10.0, 60.0, -1.0)))
        assert result.permissible is None
        assert result.presumed_touch_voltage is None
        assert not result.safe

    def test_with_changes_leaves_original(self, substation_design):
        changed = substation_design.with_changes(body_weight=50)
        assert substation_design.body_weight == 70
        assert changed.body_weight == 50
        assert changed.geometry is substation_design.geometry

    def test_logs_verdict(self, substation_design, caplog):
        with caplog.at_level(logging.INFO, logger="engine.grounding.design"):
            assess_design(substation_design)
        assert any("Grounding assessment" in r.getMessage() and "unsafe" in r.getMessage() for r in caplog.records)
