from fastapi import APIRouter

from engine.grounding.materials import get_connection_catalog, get_material_catalog

router = APIRouter()


@router.get(
    "/materials",
    summary="List conductor materials",
    description="Return the built-in grounding conductor material catalog with thermal constants.",
)
async def list_materials():
    return get_material_catalog()


@router.get(
    "/connections",
    summary="List connection types",
    description="Return the built-in joint types with their maximum withstand temperature.",
)
async def list_connections():
    return get_connection_catalog()
