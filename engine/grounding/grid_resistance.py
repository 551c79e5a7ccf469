"""Grounding grid resistance.

Three interchangeable methods:

* Method A (burial depth up to 0.25 m):
  ``R = rho_a / (4 r) + rho_a / Lt``
* Method B (burial depth between 0.25 m and 2.5 m):
  ``R = rho_a [1/Lt + 1/sqrt(20 A) (1 + 1 / (1 + h sqrt(20/A)))]``
* Method C (IEEE Std 80 Schwarz equations), combining grid conductors
  (R1), vertical rods (R2) and their mutual resistance (R12):
  ``Rg = (R1 R2 - R12^2) / (R1 + R2 - 2 R12)``
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from engine.grounding.interpolation import ControlPoint, interpolate_control_points
from engine.grounding.soil_model import equivalent_radius

SHALLOW_DEPTH_LIMIT_M = 0.25

# Schwarz coefficient curves (IEEE 80 Fig. 25, linearised), indexed by the
# normalised depth h/sqrt(A).  Values: (k1 slope, k1 intercept, k2 slope,
# k2 intercept) as functions of the length-to-width ratio.
SCHWARZ_CURVES: tuple[ControlPoint, ...] = (
    ControlPoint(0.0, (-0.04, 1.41, 0.15, 5.50), "A"),
    ControlPoint(0.1, (-0.05, 1.20, 0.10, 4.68), "B"),
    ControlPoint(1 / 6, (-0.05, 1.13, -0.05, 4.40), "C"),
)


@dataclass(frozen=True)
class RodBank:
    """Vertical rods as seen by the Schwarz equations."""
    count: int
    length: float    # m, each rod
    diameter: float  # m


@dataclass(frozen=True)
class SchwarzResult:
    """Combined grid + rod resistance and its intermediate terms (Ohm)."""
    resistance: float
    k1: float
    k2: float
    r1: float = 0.0
    r2: float = 0.0
    r12: float = 0.0


def simplified_resistance_shallow(rho_a: float, area: float, lt: float) -> float:
    """Method A resistance (Ohm) for grids buried up to 0.25 m."""
    if rho_a <= 0 or area <= 0 or lt <= 0:
        return 0.0
    r = equivalent_radius(area)
    return rho_a / (4 * r) + rho_a / lt


def simplified_resistance_deep(rho_a: float, area: float, lt: float, depth: float) -> float:
    """Method B resistance (Ohm) for grids buried between 0.25 m and 2.5 m."""
    if rho_a <= 0 or area <= 0 or lt <= 0 or depth <= 0:
        return 0.0
    term1 = 1 / lt
    term2 = (1 / math.sqrt(20 * area)) * (1 + 1 / (1 + depth * math.sqrt(20 / area)))
    return rho_a * (term1 + term2)


def simplified_resistance(rho_a: float, area: float, lt: float, depth: float) -> float:
    """Pick Method A or B from the burial depth."""
    if depth <= SHALLOW_DEPTH_LIMIT_M:
        return simplified_resistance_shallow(rho_a, area, lt)
    return simplified_resistance_deep(rho_a, area, lt, depth)


def schwarz_coefficients(depth: float, area: float, lx: float, ly: float) -> tuple[float, float]:
    """Return (k1, k2) for the grid's normalised depth and aspect ratio."""
    if area <= 0:
        return 0.0, 0.0

    length = max(lx, ly)
    width = min(lx, ly)
    lw_ratio = length / width if width > 0 else 1.0

    k1_m, k1_b, k2_m, k2_b = interpolate_control_points(
        SCHWARZ_CURVES, depth / math.sqrt(area)
    )
    return k1_m * lw_ratio + k1_b, k2_m * lw_ratio + k2_b


def schwarz_resistance(
    rho: float,
    area: float,
    lx: float,
    ly: float,
    lc: float,
    depth: float,
    conductor_diameter: float,
    rods: RodBank | None = None,
) -> SchwarzResult:
    """Detailed grid resistance by the Schwarz equations.

    Args:
        rho: soil resistivity (Ohm*m)
        area: grid area (m²)
        lx, ly: grid sides (m)
        lc: total length of grid conductors, rods excluded (m)
        depth: burial depth (m)
        conductor_diameter: grid conductor diameter (m)
        rods: vertical rods, or None for a grid without rods
    """
    if rho <= 0 or area <= 0 or lc <= 0 or depth <= 0 or conductor_diameter <= 0:
        return SchwarzResult(resistance=0.0, k1=0.0, k2=0.0)

    k1, k2 = schwarz_coefficients(depth, area, lx, ly)
    sqrt_area = math.sqrt(area)

    a_prime = math.sqrt((conductor_diameter / 2) * 2 * depth)
    r1 = (rho / (math.pi * lc)) * (
        math.log(2 * lc / a_prime) + k1 * lc / sqrt_area - k2
    )

    if rods is None or rods.count <= 0 or rods.length <= 0 or rods.diameter <= 0:
        return SchwarzResult(resistance=r1, k1=k1, k2=k2, r1=r1)

    nr = rods.count
    lr = rods.length
    b = rods.diameter / 2

    r2 = (rho / (2 * math.pi * nr * lr)) * (
        math.log(4 * lr / b) - 1 + (2 * k1 * lr / sqrt_area) * (math.sqrt(nr) - 1) ** 2
    )
    r12 = (rho / (math.pi * lc)) * (
        math.log(2 * lc / lr) + k1 * lc / sqrt_area - k2 + 1
    )

    denominator = r1 + r2 - 2 * r12
    rg = r1
    if denominator != 0:
        rg = (r1 * r2 - r12 * r12) / denominator

    return SchwarzResult(resistance=rg, k1=k1, k2=k2, r1=r1, r2=r2, r12=r12)
