"""Grounding grid design state and calculation pipeline.

A :class:`GroundingDesign` bundles every input of a substation grounding
study.  Each ``design_*`` stage is a pure function of the design (plus the
apparent resistivity where needed) and :func:`assess_design` chains them
into the final safety verdict:

    soil -> apparent resistivity -> grid resistance -> GPR
                                 -> permissible voltages --+
    geometry -> Ki, Km, Ks -> mesh voltages ---------------+-> safe?

Inputs are recomputed from scratch on every change; nothing is cached.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass, field
from typing import Literal

from engine.grounding.conductor_sizing import ConductorSizing, size_conductor
from engine.grounding.geometric_factors import (
    average_spacing,
    effective_conductor_count,
    irregularity_factor,
    mesh_step_voltage,
    mesh_touch_voltage,
    step_geometry_factor,
    touch_geometry_factor,
)
from engine.grounding.grid_resistance import (
    RodBank,
    SchwarzResult,
    schwarz_resistance,
    simplified_resistance,
)
from engine.grounding.materials import find_connection, find_material
from engine.grounding.permissible_voltage import (
    PermissibleVoltages,
    TouchCurveArea,
    derating_factor,
    permissible_voltages,
    presumed_touch_voltage,
)
from engine.grounding.soil_model import (
    DEFAULT_CONVERGENCE,
    SeriesConvergence,
    apparent_resistivity,
    equivalent_radius,
)

logger = logging.getLogger(__name__)

DEFAULT_ROD_LENGTH_M = 2.4
DEFAULT_ROD_DIAMETER_M = 0.0127


# ======================================================================
# Design inputs
# ======================================================================

@dataclass(frozen=True)
class SoilProfile:
    """Soil resistivity model (Ohm*m, m)."""
    model: Literal["homogeneous", "two_layer"] = "homogeneous"
    rho1: float = 100.0
    rho2: float | None = None
    layer_depth: float | None = None

    @property
    def is_valid(self) -> bool:
        if self.rho1 <= 0:
            return False
        if self.model == "two_layer":
            return (
                self.rho2 is not None and self.rho2 > 0
                and self.layer_depth is not None and self.layer_depth > 0
            )
        return True


@dataclass(frozen=True)
class GridGeometry:
    """Rectangular mesh: *nx* conductors run along Y, *ny* along X."""
    lx: float
    ly: float
    nx: int
    ny: int
    depth: float
    conductor_diameter: float  # m

    @property
    def area(self) -> float:
        return self.lx * self.ly

    @property
    def total_conductor_length(self) -> float:
        return self.nx * self.ly + self.ny * self.lx

    @property
    def perimeter(self) -> float:
        return 2 * (self.lx + self.ly)

    @property
    def spacing_x(self) -> float:
        return self.lx / (self.nx - 1) if self.nx > 1 else 0.0

    @property
    def spacing_y(self) -> float:
        return self.ly / (self.ny - 1) if self.ny > 1 else 0.0


@dataclass(frozen=True)
class RodSet:
    """Vertical rods placed at grid nodes (i, j)."""
    positions: tuple[tuple[int, int], ...] = ()
    length: float = DEFAULT_ROD_LENGTH_M
    diameter: float = DEFAULT_ROD_DIAMETER_M

    def valid_positions(self, nx: int, ny: int) -> tuple[tuple[int, int], ...]:
        """Distinct positions inside [0, nx) × [0, ny), in input order."""
        seen: list[tuple[int, int]] = []
        for i, j in self.positions:
            if 0 <= i < nx and 0 <= j < ny and (i, j) not in seen:
                seen.append((i, j))
        return tuple(seen)


@dataclass(frozen=True)
class FaultCurrent:
    symmetrical_ka: float
    division_pct: float
    duration_s: float

    @property
    def mesh_current_ka(self) -> float:
        """Share of the fault current flowing through the grid (kA)."""
        return self.symmetrical_ka * (self.division_pct / 100)


@dataclass(frozen=True)
class SurfaceLayer:
    resistivity: float  # Ohm*m
    thickness: float    # m


@dataclass(frozen=True)
class GroundingDesign:
    """Complete, immutable input set of a grounding study."""
    soil: SoilProfile
    geometry: GridGeometry
    fault: FaultCurrent
    rods: RodSet = field(default_factory=RodSet)
    surface_layer: SurfaceLayer | None = None
    body_weight: int = 70
    ambient_temp: float = 40.0
    material_id: str = "copper_hard"
    connection_id: str = "exothermic"
    resistance_method: Literal["simplified", "detailed"] = "simplified"
    has_perimeter_rods: bool = False
    use_total_current_for_sizing: bool = False
    touch_curve_area: TouchCurveArea = TouchCurveArea.INTERNAL

    def with_changes(self, **changes) -> GroundingDesign:
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)


# ======================================================================
# Stage results
# ======================================================================

@dataclass(frozen=True)
class ResistanceResult:
    method: str
    resistance: float
    schwarz: SchwarzResult | None = None


@dataclass(frozen=True)
class MeshVoltages:
    """Geometric factors and resulting mesh voltages (V)."""
    n: float
    spacing: float
    ki_base: float
    ki: float
    km: float
    ks: float
    touch: float
    step: float


@dataclass(frozen=True)
class DesignAssessment:
    """Outcome of a full grounding study."""
    apparent_resistivity: float | None
    resistance: ResistanceResult | None
    permissible: PermissibleVoltages | None
    mesh: MeshVoltages
    conductor: ConductorSizing | None
    gpr: float | None
    presumed_touch_voltage: float | None
    gpr_safe: bool
    touch_safe: bool
    step_safe: bool

    @property
    def safe(self) -> bool:
        return self.gpr_safe or (self.touch_safe and self.step_safe)


# ======================================================================
# Stages
# ======================================================================

def design_apparent_resistivity(
    design: GroundingDesign,
    convergence: SeriesConvergence = DEFAULT_CONVERGENCE,
) -> float | None:
    """Apparent resistivity, or None when the soil data is incomplete."""
    soil = design.soil
    if not soil.is_valid:
        return None
    if soil.model == "homogeneous":
        return soil.rho1

    r = equivalent_radius(design.geometry.area)
    return apparent_resistivity(soil.rho1, soil.rho2, soil.layer_depth, r, convergence)


def design_resistance(design: GroundingDesign, rho: float) -> ResistanceResult | None:
    """Grid resistance by the design's selected method."""
    geo = design.geometry
    area = geo.area
    lt = geo.total_conductor_length
    if area <= 0 or lt <= 0 or rho <= 0 or geo.depth <= 0:
        return None

    if design.resistance_method == "detailed":
        if geo.conductor_diameter <= 0 or geo.lx <= 0 or geo.ly <= 0:
            return None
        rods = RodBank(
            count=len(design.rods.valid_positions(geo.nx, geo.ny)),
            length=design.rods.length if design.rods.length > 0 else DEFAULT_ROD_LENGTH_M,
            diameter=design.rods.diameter if design.rods.diameter > 0 else DEFAULT_ROD_DIAMETER_M,
        )
        schwarz = schwarz_resistance(
            rho, area, geo.lx, geo.ly, lt, geo.depth, geo.conductor_diameter, rods
        )
        return ResistanceResult(method="detailed", resistance=schwarz.resistance, schwarz=schwarz)

    return ResistanceResult(
        method="simplified",
        resistance=simplified_resistance(rho, area, lt, geo.depth),
    )


def design_permissible_voltages(
    design: GroundingDesign, rho: float
) -> PermissibleVoltages | None:
    """Tolerable touch/step voltages, derated by the surface layer if any."""
    t = design.fault.duration_s
    if not math.isfinite(t) or t <= 0:
        return None

    rho_s = rho
    cs = 1.0
    layer = design.surface_layer
    if layer is not None:
        rho_s = layer.resistivity
        cs = derating_factor(rho, rho_s, layer.thickness)

    return permissible_voltages(t, cs, rho_s, design.body_weight)


def design_mesh_voltages(design: GroundingDesign, rho: float) -> MeshVoltages:
    """Geometric factors and mesh touch/step voltages."""
    geo = design.geometry
    n = effective_conductor_count(geo.lx, geo.ly, geo.nx, geo.ny)
    spacing = average_spacing(geo.lx, geo.ly, geo.nx, geo.ny)

    ki_base = irregularity_factor(n)
    ki = 1.0 if design.has_perimeter_rods else ki_base
    km = touch_geometry_factor(spacing, geo.depth, geo.conductor_diameter, n, design.has_perimeter_rods)
    ks = step_geometry_factor(spacing, geo.depth, n)

    im = design.fault.mesh_current_ka * 1000
    lt = geo.total_conductor_length

    return MeshVoltages(
        n=n,
        spacing=spacing,
        ki_base=ki_base,
        ki=ki,
        km=km,
        ks=ks,
        touch=mesh_touch_voltage(rho, im, km, ki, lt),
        step=mesh_step_voltage(rho, im, ks, ki, lt),
    )


def design_conductor_sizing(design: GroundingDesign) -> ConductorSizing | None:
    """Minimum conductor section, or None for unknown catalog ids."""
    material = find_material(design.material_id)
    connection = find_connection(design.connection_id)
    if material is None or connection is None:
        return None

    current_ka = (
        design.fault.symmetrical_ka
        if design.use_total_current_for_sizing
        else design.fault.mesh_current_ka
    )
    return size_conductor(
        material, connection, current_ka, design.fault.duration_s, design.ambient_temp
    )


def assess_design(
    design: GroundingDesign,
    convergence: SeriesConvergence = DEFAULT_CONVERGENCE,
) -> DesignAssessment:
    """Run every stage and decide whether the grid is safe.

    The grid passes when its ground potential rise stays below the
    tolerable touch voltage, or when both mesh voltages stay below their
    limits.
    """
    rho = design_apparent_resistivity(design, convergence)
    rho_eff = rho if rho is not None else design.soil.rho1

    resistance = design_resistance(design, rho_eff)
    permissible = design_permissible_voltages(design, rho_eff)
    mesh = design_mesh_voltages(design, rho_eff)
    conductor = design_conductor_sizing(design)

    im_ka = design.fault.mesh_current_ka
    gpr = None
    if resistance is not None and resistance.resistance > 0 and im_ka > 0:
        gpr = resistance.resistance * im_ka * 1000

    gpr_safe = gpr is not None and permissible is not None and gpr < permissible.touch
    touch_safe = permissible is not None and mesh.touch < permissible.touch
    step_safe = permissible is not None and mesh.step < permissible.step

    assessment = DesignAssessment(
        apparent_resistivity=rho,
        resistance=resistance,
        permissible=permissible,
        mesh=mesh,
        conductor=conductor,
        gpr=gpr,
        presumed_touch_voltage=presumed_touch_voltage(
            design.fault.duration_s, design.touch_curve_area
        ),
        gpr_safe=gpr_safe,
        touch_safe=touch_safe,
        step_safe=step_safe,
    )

    logger.info(
        "Grounding assessment: rho_a=%s R=%s GPR=%s Em=%.1f Es=%.1f -> %s",
        f"{rho:.2f}" if rho is not None else "n/a",
        f"{resistance.resistance:.3f}" if resistance is not None else "n/a",
        f"{gpr:.0f}" if gpr is not None else "n/a",
        mesh.touch,
        mesh.step,
        "safe" if assessment.safe else "unsafe",
    )
    return assessment
