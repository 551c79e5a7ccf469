from typing import Literal

from pydantic import BaseModel, Field

from engine.grounding.conductor_sizing import conductor_diameter_from_section
from engine.grounding.design import (
    FaultCurrent,
    GridGeometry,
    GroundingDesign,
    RodSet,
    SoilProfile,
    SurfaceLayer,
)
from engine.grounding.permissible_voltage import TouchCurveArea


class SoilProfileIn(BaseModel):
    model: str = Field(default="homogeneous", pattern="^(homogeneous|two_layer)$")
    rho1: float = Field(gt=0)  # Ohm*m
    rho2: float | None = Field(default=None, gt=0)
    layer_depth_m: float | None = Field(default=None, gt=0)


class GridGeometryIn(BaseModel):
    lx_m: float = Field(gt=0)
    ly_m: float = Field(gt=0)
    nx: int = Field(ge=2, le=500)
    ny: int = Field(ge=2, le=500)
    depth_m: float = Field(gt=0)
    conductor_section_mm2: float = Field(default=50.0, gt=0)


class RodPosition(BaseModel):
    i: int = Field(ge=0)
    j: int = Field(ge=0)


class RodsIn(BaseModel):
    positions: list[RodPosition] = Field(default_factory=list)
    length_m: float = Field(default=2.4, gt=0)
    diameter_mm: float = Field(default=12.7, gt=0)

    def to_rod_set(self) -> RodSet:
        return RodSet(
            positions=tuple((p.i, p.j) for p in self.positions),
            length=self.length_m,
            diameter=self.diameter_mm / 1000,
        )


class FaultIn(BaseModel):
    symmetrical_ka: float = Field(gt=0)
    division_pct: float = Field(default=100.0, ge=0, le=100)
    duration_s: float = Field(gt=0)


class SurfaceLayerIn(BaseModel):
    resistivity: float = Field(gt=0)  # Ohm*m
    thickness_m: float = Field(ge=0)


class GroundingDesignRequest(BaseModel):
    soil: SoilProfileIn
    geometry: GridGeometryIn
    fault: FaultIn
    rods: RodsIn = Field(default_factory=RodsIn)
    surface_layer: SurfaceLayerIn | None = None
    body_weight: Literal[50, 70] = 70
    ambient_temp: float = 40.0
    material_id: str = "copper_hard"
    connection_id: str = "exothermic"
    resistance_method: str = Field(default="simplified", pattern="^(simplified|detailed)$")
    has_perimeter_rods: bool = False
    use_total_current_for_sizing: bool = False
    touch_curve_area: str = Field(default="internal", pattern="^(internal|external|interna|externa)$")

    def to_design(self) -> GroundingDesign:
        geo = self.geometry
        layer = None
        if self.surface_layer is not None:
            layer = SurfaceLayer(
                resistivity=self.surface_layer.resistivity,
                thickness=self.surface_layer.thickness_m,
            )
        return GroundingDesign(
            soil=SoilProfile(
                model=self.soil.model,  # type: ignore[arg-type]
                rho1=self.soil.rho1,
                rho2=self.soil.rho2,
                layer_depth=self.soil.layer_depth_m,
            ),
            geometry=GridGeometry(
                lx=geo.lx_m,
                ly=geo.ly_m,
                nx=geo.nx,
                ny=geo.ny,
                depth=geo.depth_m,
                conductor_diameter=conductor_diameter_from_section(geo.conductor_section_mm2),
            ),
            fault=FaultCurrent(
                symmetrical_ka=self.fault.symmetrical_ka,
                division_pct=self.fault.division_pct,
                duration_s=self.fault.duration_s,
            ),
            rods=self.rods.to_rod_set(),
            surface_layer=layer,
            body_weight=self.body_weight,
            ambient_temp=self.ambient_temp,
            material_id=self.material_id,
            connection_id=self.connection_id,
            resistance_method=self.resistance_method,  # type: ignore[arg-type]
            has_perimeter_rods=self.has_perimeter_rods,
            use_total_current_for_sizing=self.use_total_current_for_sizing,
            touch_curve_area=TouchCurveArea(self.touch_curve_area),
        )


class ResistanceOut(BaseModel):
    method: str
    resistance_ohm: float
    k1: float | None = None
    k2: float | None = None
    r1: float | None = None
    r2: float | None = None
    r12: float | None = None


class PermissibleOut(BaseModel):
    touch_v: float
    step_v: float
    duration: str  # "short" or "long"


class MeshVoltagesOut(BaseModel):
    n: float
    spacing_m: float
    ki_base: float
    ki: float
    km: float
    ks: float
    touch_v: float
    step_v: float


class ConductorOut(BaseModel):
    section_mm2: float
    kf: float
    max_temp: float


class DesignAssessmentResponse(BaseModel):
    apparent_resistivity: float | None
    resistance: ResistanceOut | None
    permissible: PermissibleOut | None
    mesh: MeshVoltagesOut
    conductor: ConductorOut | None
    gpr_v: float | None
    presumed_touch_voltage_v: float | None
    gpr_safe: bool
    touch_safe: bool
    step_safe: bool
    safe: bool


class PotentialFieldRequest(BaseModel):
    lx_m: float = Field(gt=0)
    ly_m: float = Field(gt=0)
    nx: int = Field(ge=2, le=500)
    ny: int = Field(ge=2, le=500)
    depth_m: float = Field(gt=0)
    rods: RodsIn = Field(default_factory=RodsIn)


class PotentialFieldResponse(BaseModel):
    view: str  # potential, touch or step
    resolution: int
    width_m: float
    height_m: float
    offset_m: float
    matrix: list[list[float]]
