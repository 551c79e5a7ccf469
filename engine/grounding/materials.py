"""Grounding conductor materials and connection types.

Material constants follow IEEE Std 80 Table 1:
  - alpha20: thermal coefficient of resistivity at 20°C (1/°C)
  - melting_temp: fusing temperature (°C)
  - rho20: resistivity at 20°C (μΩ·cm)
  - tcap: thermal capacity per unit volume (J/(cm³·°C))

Connection types carry the maximum temperature the joint withstands.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ConductorMaterial:
    """Thermal properties of a grounding conductor material."""
    id: str
    name: str
    alpha20: float
    melting_temp: float
    rho20: float
    tcap: float


@dataclass(frozen=True)
class ConnectionType:
    """Joint technology and its temperature limit."""
    id: str
    name: str
    max_temp: float


CONDUCTOR_MATERIALS: tuple[ConductorMaterial, ...] = (
    ConductorMaterial("copper_soft", "Copper, annealed soft-drawn", 0.00393, 1083, 1.724, 3.422),
    ConductorMaterial("copper_hard", "Copper, commercial hard-drawn", 0.00381, 1084, 1.777, 3.422),
    ConductorMaterial("copper_clad_steel_40", "Copper-clad steel wire 40%", 0.00378, 1084, 4.397, 3.846),
    ConductorMaterial("copper_clad_steel_30", "Copper-clad steel wire 30%", 0.00378, 1084, 5.862, 3.846),
    ConductorMaterial("copper_clad_steel_rod", "Copper-clad steel rod 20%", 0.00378, 1084, 8.62, 3.846),
    ConductorMaterial("aluminum_wire", "Aluminium, EC grade", 0.00403, 657, 2.862, 2.556),
    ConductorMaterial("aluminum_alloy_5005", "Aluminium alloy 5005", 0.00353, 660, 3.222, 2.598),
    ConductorMaterial("aluminum_alloy_6201", "Aluminium alloy 6201", 0.00347, 660, 3.284, 2.598),
    ConductorMaterial("steel_aluminum", "Aluminium-clad steel wire", 0.00360, 660, 8.480, 2.670),
    ConductorMaterial("steel_1020", "Steel 1020", 0.00160, 1510, 15.90, 3.28),
    ConductorMaterial("zinc_coated_steel", "Zinc-coated steel rod", 0.00320, 419, 20.1, 3.931),
    ConductorMaterial("stainless_steel_304", "Stainless steel 304", 0.00130, 1400, 72.0, 4.032),
)

CONNECTION_TYPES: tuple[ConnectionType, ...] = (
    ConnectionType("mechanical", "Mechanical (bolted or pressure type)", 250),
    ConnectionType("oxyacetylene", "Brazed (oxyacetylene)", 450),
    ConnectionType("exothermic", "Exothermic weld", 850),
    ConnectionType("compression_hydraulic", "Compression (hydraulic)", 850),
)


def find_material(material_id: str) -> ConductorMaterial | None:
    """Find a conductor material by id."""
    for m in CONDUCTOR_MATERIALS:
        if m.id == material_id:
            return m
    return None


def find_connection(connection_id: str) -> ConnectionType | None:
    """Find a connection type by id."""
    for c in CONNECTION_TYPES:
        if c.id == connection_id:
            return c
    return None


def get_material_catalog() -> list[dict]:
    """Return the material catalog as list of dicts for API response."""
    return [
        {
            "id": m.id,
            "name": m.name,
            "alpha20": m.alpha20,
            "melting_temp": m.melting_temp,
            "rho20": m.rho20,
            "tcap": m.tcap,
        }
        for m in CONDUCTOR_MATERIALS
    ]


def get_connection_catalog() -> list[dict]:
    """Return the connection catalog as list of dicts for API response."""
    return [
        {"id": c.id, "name": c.name, "max_temp": c.max_temp}
        for c in CONNECTION_TYPES
    ]
