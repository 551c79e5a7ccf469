"""Geometric correction factors and mesh voltages.

  Ki = 0.656 + 0.172 n
  Km = 1/(2π) [ln(D²/(16hd) + (D+2h)²/(8Dd) − h/(4d)) + Kii/Kh ln(8/(π(2n−1)))]
  Ks = 1/π [1/(2h) + 1/(D+h) + (1/D)(1 − 0.5^(n−2))]
  Em = ρ Im Km Ki / Lt,  Es = ρ Im Ks Ki / Lt
"""

from __future__ import annotations

import math


def effective_conductor_count(lx: float, ly: float, nx: int, ny: int) -> float:
    """Effective number of parallel conductors n = Lc / (Lp / 2)."""
    if lx <= 0 or ly <= 0 or nx <= 0 or ny <= 0:
        return 1.0
    lc = nx * ly + ny * lx
    lp = 2 * (lx + ly)
    return lc / (lp / 2)


def average_spacing(lx: float, ly: float, nx: int, ny: int) -> float:
    """Mean spacing D (m) between parallel conductors."""
    if nx <= 1 or ny <= 1:
        return 0.0
    return (lx / (nx - 1) + ly / (ny - 1)) / 2


def irregularity_factor(n: float) -> float:
    return 0.656 + 0.172 * n


def touch_geometry_factor(
    spacing: float,
    depth: float,
    diameter: float,
    n: float,
    has_perimeter_rods: bool = True,
) -> float:
    """Mesh (touch) geometric factor Km.

    Args:
        spacing: conductor spacing D (m)
        depth: burial depth h (m)
        diameter: conductor diameter d (m)
        n: effective number of parallel conductors
        has_perimeter_rods: rods along the perimeter (Kii = 1)
    """
    if spacing <= 0 or depth <= 0 or diameter <= 0 or n <= 0:
        return 0.0
    # ln(8 / (π(2n − 1))) needs n > 1/2
    if 2 * n - 1 <= 0:
        return 0.0

    kii = 1.0 if has_perimeter_rods else 1 / (2 * n) ** (2 / n)
    kh = math.sqrt(1 + depth)

    ln1 = math.log(
        spacing ** 2 / (16 * depth * diameter)
        + (spacing + 2 * depth) ** 2 / (8 * spacing * diameter)
        - depth / (4 * diameter)
    )
    ln2 = math.log(8 / (math.pi * (2 * n - 1)))

    return (1 / (2 * math.pi)) * (ln1 + (kii / kh) * ln2)


def step_geometry_factor(spacing: float, depth: float, n: float) -> float:
    """Step geometric factor Ks, valid for 0.25 m < h < 2.25 m."""
    if spacing <= 0 or depth <= 0 or n <= 0:
        return 0.0
    return (1 / math.pi) * (
        1 / (2 * depth) + 1 / (spacing + depth) + (1 / spacing) * (1 - 0.5 ** (n - 2))
    )


def mesh_touch_voltage(rho: float, im: float, km: float, ki: float, lt: float) -> float:
    """Mesh touch voltage Em (V); *im* in amperes."""
    if lt <= 0:
        return 0.0
    return (rho * im * km * ki) / lt


def mesh_step_voltage(rho: float, im: float, ks: float, ki: float, lt: float) -> float:
    """Mesh step voltage Es (V); *im* in amperes."""
    if lt <= 0:
        return 0.0
    return (rho * im * ks * ki) / lt
