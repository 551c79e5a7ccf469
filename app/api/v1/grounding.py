"""Grounding grid design endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from app.config import settings
from app.core.logging import log_calculation
from app.schemas.grounding import (
    ConductorOut,
    DesignAssessmentResponse,
    GroundingDesignRequest,
    MeshVoltagesOut,
    PermissibleOut,
    PotentialFieldRequest,
    PotentialFieldResponse,
    ResistanceOut,
)
from engine.grounding.design import assess_design
from engine.grounding.materials import find_connection, find_material
from engine.grounding.permissible_voltage import TouchCurveArea, presumed_touch_voltage
from engine.grounding.potential_field import (
    potential_field,
    source_count,
    step_visualization,
    touch_visualization,
)

router = APIRouter()


@router.post(
    "/assessment",
    response_model=DesignAssessmentResponse,
    summary="Assess a grounding grid",
    description="Compute apparent resistivity, grid resistance, permissible and mesh "
    "touch/step voltages, minimum conductor section and the overall safety verdict.",
)
async def assess_grounding_design(body: GroundingDesignRequest):
    if find_material(body.material_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conductor material not found")
    if find_connection(body.connection_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Connection type not found")

    design = body.to_design()
    with log_calculation("assessment", method=design.resistance_method) as fields:
        result = assess_design(design, settings.series_convergence)
        fields.update(gpr_v=result.gpr, safe=result.safe)

    resistance = None
    if result.resistance is not None:
        schwarz = result.resistance.schwarz
        resistance = ResistanceOut(
            method=result.resistance.method,
            resistance_ohm=result.resistance.resistance,
            k1=schwarz.k1 if schwarz else None,
            k2=schwarz.k2 if schwarz else None,
            r1=schwarz.r1 if schwarz else None,
            r2=schwarz.r2 if schwarz else None,
            r12=schwarz.r12 if schwarz else None,
        )

    permissible = None
    if result.permissible is not None:
        permissible = PermissibleOut(
            touch_v=result.permissible.touch,
            step_v=result.permissible.step,
            duration=result.permissible.duration.value,
        )

    conductor = None
    if result.conductor is not None:
        conductor = ConductorOut(
            section_mm2=result.conductor.section_mm2,
            kf=result.conductor.kf,
            max_temp=result.conductor.max_temp,
        )

    mesh = result.mesh
    return DesignAssessmentResponse(
        apparent_resistivity=result.apparent_resistivity,
        resistance=resistance,
        permissible=permissible,
        mesh=MeshVoltagesOut(
            n=mesh.n,
            spacing_m=mesh.spacing,
            ki_base=mesh.ki_base,
            ki=mesh.ki,
            km=mesh.km,
            ks=mesh.ks,
            touch_v=mesh.touch,
            step_v=mesh.step,
        ),
        conductor=conductor,
        gpr_v=result.gpr,
        presumed_touch_voltage_v=result.presumed_touch_voltage,
        gpr_safe=result.gpr_safe,
        touch_safe=result.touch_safe,
        step_safe=result.step_safe,
        safe=result.safe,
    )


@router.post(
    "/potential-field",
    response_model=PotentialFieldResponse,
    summary="Surface potential heatmap",
    description="Normalized surface potential, touch or step matrix for heatmap rendering.",
)
async def grounding_potential_field(
    body: PotentialFieldRequest,
    view: str = Query(default="potential", pattern="^(potential|touch|step)$"),
    resolution: int | None = Query(default=None, ge=2),
):
    if resolution is None:
        resolution = settings.potential_field_default_resolution
    if resolution > settings.potential_field_max_resolution:
        raise HTTPException(
            status_code=422,
            detail=f"Resolution must not exceed {settings.potential_field_max_resolution}",
        )

    rods = [(p.i, p.j) for p in body.rods.positions]
    sources = source_count(body.lx_m, body.ly_m, body.nx, body.ny, body.depth_m, rods)
    if sources > settings.potential_field_max_sources:
        raise HTTPException(
            status_code=422,
            detail=f"Grid needs {sources} point sources, limit is {settings.potential_field_max_sources}",
        )

    with log_calculation("potential_field", view=view, resolution=resolution, sources=sources):
        field = potential_field(
            body.lx_m,
            body.ly_m,
            body.nx,
            body.ny,
            body.depth_m,
            rods=rods,
            rod_length=body.rods.length_m,
            resolution=resolution,
            offset=settings.potential_field_offset_m,
        )
        matrix = field.matrix
        if view == "touch":
            matrix = touch_visualization(matrix)
        elif view == "step":
            matrix = step_visualization(matrix)

    return PotentialFieldResponse(
        view=view,
        resolution=resolution,
        width_m=field.width,
        height_m=field.height,
        offset_m=field.offset,
        matrix=matrix.tolist(),
    )


@router.get(
    "/presumed-touch-voltage",
    summary="Presumed touch voltage limit",
    description="Touch voltage limit versus fault duration from the NBR 14039 curves.",
)
async def get_presumed_touch_voltage(
    duration_s: float = Query(gt=0),
    area: str = Query(default="internal", pattern="^(internal|external|interna|externa)$"),
):
    return {
        "duration_s": duration_s,
        "area": TouchCurveArea(area).value,
        "voltage_v": presumed_touch_voltage(duration_s, area),
    }
