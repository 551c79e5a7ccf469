"""Shared test fixtures for GroundGrid engine and API tests."""

from __future__ import annotations

import pytest

from engine.grounding.conductor_sizing import conductor_diameter_from_section
from engine.grounding.design import (
    FaultCurrent,
    GridGeometry,
    GroundingDesign,
    RodSet,
    SoilProfile,
    SurfaceLayer,
)


# ======================================================================
# Geometry fixtures
# ======================================================================

@pytest.fixture
def substation_geometry() -> GridGeometry:
    """50 m × 40 m mesh, 11 × 9 conductors of 50 mm², buried at 0.5 m."""
    return GridGeometry(
        lx=50.0,
        ly=40.0,
        nx=11,
        ny=9,
        depth=0.5,
        conductor_diameter=conductor_diameter_from_section(50.0),
    )


@pytest.fixture
def corner_rods() -> RodSet:
    """2.4 m rods of 12.7 mm at the four corners of the 11 × 9 mesh."""
    return RodSet(positions=((0, 0), (10, 0), (0, 8), (10, 8)), length=2.4, diameter=0.0127)


# ======================================================================
# Design fixtures
# ======================================================================

@pytest.fixture
def substation_design(substation_geometry) -> GroundingDesign:
    """Homogeneous 100 Ohm*m soil, 10 kA fault (60 % to the grid) for 0.5 s,
    with a 0.1 m crushed-stone layer of 3000 Ohm*m."""
    return GroundingDesign(
        soil=SoilProfile(model="homogeneous", rho1=100.0),
        geometry=substation_geometry,
        fault=FaultCurrent(symmetrical_ka=10.0, division_pct=60.0, duration_s=0.5),
        surface_layer=SurfaceLayer(resistivity=3000.0, thickness=0.1),
        body_weight=70,
        ambient_temp=40.0,
        material_id="copper_hard",
        connection_id="exothermic",
    )


@pytest.fixture
def design_payload() -> dict:
    """API request body matching :func:`substation_design`."""
    return {
        "soil": {"model": "homogeneous", "rho1": 100.0},
        "geometry": {
            "lx_m": 50.0,
            "ly_m": 40.0,
            "nx": 11,
            "ny": 9,
            "depth_m": 0.5,
            "conductor_section_mm2": 50.0,
        },
        "fault": {"symmetrical_ka": 10.0, "division_pct": 60.0, "duration_s": 0.5},
        "surface_layer": {"resistivity": 3000.0, "thickness_m": 0.1},
        "body_weight": 70,
        "ambient_temp": 40.0,
        "material_id": "copper_hard",
        "connection_id": "exothermic",
    }
