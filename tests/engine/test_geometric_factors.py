"""Tests for engine.grounding.geometric_factors: Ki, Km, Ks and mesh voltages."""

from __future__ import annotations

import math

import pytest

from engine.grounding.geometric_factors import (
    average_spacing,
    effective_conductor_count,
    irregularity_factor,
    mesh_step_voltage,
    mesh_touch_voltage,
    step_geometry_factor,
    touch_geometry_factor,
)


class TestGridDerivations:
    def test_effective_conductor_count(self):
        # Lc = 890 m, half perimeter = 90 m
        assert effective_conductor_count(50.0, 40.0, 11, 9) == pytest.approx(890 / 90)

    def test_effective_conductor_count_degenerate(self):
        assert effective_conductor_count(0.0, 40.0, 11, 9) == 1.0
        assert effective_conductor_count(50.0, 40.0, 0, 9) == 1.0

    def test_average_spacing(self):
        assert average_spacing(50.0, 40.0, 11, 9) == pytest.approx(5.0)
        assert average_spacing(60.0, 20.0, 4, 3) == pytest.approx((20.0 + 10.0) / 2)

    def test_average_spacing_needs_two_conductors(self):
        assert average_spacing(50.0, 40.0, 1, 9) == 0.0
        assert average_spacing(50.0, 40.0, 11, 1) == 0.0


class TestIrregularityFactor:
    def test_linear(self):
        assert irregularity_factor(0) == pytest.approx(0.656)
        assert irregularity_factor(10) == pytest.approx(0.656 + 1.72)


class TestTouchGeometryFactor:
    def test_reference_value_with_perimeter_rods(self):
        km = touch_geometry_factor(5.0, 0.5, 0.01, 10.0, has_perimeter_rods=True)
        ln1 = math.log(25 / (16 * 0.5 * 0.01) + 36 / (8 * 5 * 0.01) - 0.5 / (4 * 0.01))
        ln2 = math.log(8 / (math.pi * 19))
        expected = (ln1 + ln2 / math.sqrt(1.5)) / (2 * math.pi)
        assert km == pytest.approx(expected, rel=1e-12)
        assert km == pytest.approx(0.6884, abs=1e-3)

    def test_missing_perimeter_rods_raise_km(self):
        with_rods = touch_geometry_factor(5.0, 0.5, 0.01, 10.0, has_perimeter_rods=True)
        without = touch_geometry_factor(5.0, 0.5, 0.01, 10.0, has_perimeter_rods=False)
        assert without > with_rods
        assert without == pytest.approx(0.8061, abs=1e-3)

    def test_defaults_to_perimeter_rods(self):
        assert touch_geometry_factor(5.0, 0.5, 0.01, 10.0) == touch_geometry_factor(
            5.0, 0.5, 0.01, 10.0, True
        )

    @pytest.mark.parametrize("args", [(0, 0.5, 0.01, 10), (5, 0, 0.01, 10), (5, 0.5, 0, 10), (5, 0.5, 0.01, 0)])
    def test_non_positive_inputs(self, args):
        assert touch_geometry_factor(*args) == 0.0

    @pytest.mark.parametrize("n", [0.3, 0.5])
    @pytest.mark.parametrize("has_perimeter_rods", [True, False])
    def test_fewer_than_half_a_conductor(self, n, has_perimeter_rods):
        assert touch_geometry_factor(5.0, 0.5, 0.01, n, has_perimeter_rods) == 0.0

    def test_just_above_half_a_conductor_is_finite(self):
        assert math.isfinite(touch_geometry_factor(5.0, 0.5, 0.01, 0.51))


class TestStepGeometryFactor:
    def test_reference_value(self):
        ks = step_geometry_factor(5.0, 0.5, 10.0)
        expected = (1 / math.pi) * (1 / 1.0 + 1 / 5.5 + (1 / 5.0) * (1 - 0.5 ** 8))
        assert ks == pytest.approx(expected, rel=1e-12)
        assert ks == pytest.approx(0.4396, abs=1e-4)

    def test_non_positive_inputs(self):
        assert step_geometry_factor(0.0, 0.5, 10.0) == 0.0
        assert step_geometry_factor(5.0, -0.5, 10.0) == 0.0
        assert step_geometry_factor(5.0, 0.5, 0.0) == 0.0


class TestMeshVoltages:
    def test_touch(self):
        assert mesh_touch_voltage(100.0, 1000.0, 0.5, 2.0, 500.0) == pytest.approx(200.0)

    def test_step(self):
        assert mesh_step_voltage(100.0, 1000.0, 0.25, 2.0, 500.0) == pytest.approx(100.0)

    def test_zero_length(self):
        assert mesh_touch_voltage(100.0, 1000.0, 0.5, 2.0, 0.0) == 0.0
        assert mesh_step_voltage(100.0, 1000.0, 0.5, 2.0, -1.0) == 0.0

    def test_scales_with_current(self):
        v1 = mesh_touch_voltage(100.0, 1000.0, 0.7, 2.3, 890.0)
        v2 = mesh_touch_voltage(100.0, 2000.0, 0.7, 2.3, 890.0)
        assert v2 == pytest.approx(2 * v1)
