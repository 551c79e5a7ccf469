"""Minimum grounding conductor cross-section (Onderdonk equation).

    Ko = 1/alpha20 - 20
    Kf = sqrt( alpha20 * rho20 * 10^4 / (TCAP * ln((Ko + Tm) / (Ko + Ta))) )
    S  = If * Kf * sqrt(t)

with If in kA, rho20 in μΩ·cm, TCAP in J/(cm³·°C) and S in mm².  The unit
scaling is kept exactly as published.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from engine.grounding.materials import ConductorMaterial, ConnectionType


@dataclass(frozen=True)
class ConductorSizing:
    """Minimum section for a material/connection pair."""
    section_mm2: float
    kf: float
    max_temp: float


def thermal_coefficient_kf(
    alpha20: float,
    rho20: float,
    tcap: float,
    tm: float,
    ta: float,
) -> float:
    """Material constant Kf; 0 for invalid input or tm <= ta."""
    if alpha20 <= 0 or rho20 <= 0 or tcap <= 0 or tm <= ta:
        return 0.0

    ko = (1 / alpha20) - 20
    numerator = alpha20 * rho20 * 10_000
    denominator = tcap * math.log((ko + tm) / (ko + ta))
    if denominator <= 0:
        return 0.0
    return math.sqrt(numerator / denominator)


def minimum_conductor_section(
    fault_current: float,
    t: float,
    alpha20: float,
    rho20: float,
    tcap: float,
    tm: float,
    ta: float,
) -> float:
    """Minimum section (mm²) for *fault_current* kA lasting *t* seconds."""
    if fault_current <= 0 or t <= 0:
        return 0.0
    kf = thermal_coefficient_kf(alpha20, rho20, tcap, tm, ta)
    return fault_current * kf * math.sqrt(t)


def size_conductor(
    material: ConductorMaterial,
    connection: ConnectionType,
    fault_current_ka: float,
    t: float,
    ta: float,
) -> ConductorSizing:
    """Size a conductor limited by whichever of joint or metal fails first."""
    tm = min(connection.max_temp, material.melting_temp)
    if t <= 0 or fault_current_ka <= 0 or ta >= connection.max_temp:
        return ConductorSizing(section_mm2=0.0, kf=0.0, max_temp=tm)

    kf = thermal_coefficient_kf(material.alpha20, material.rho20, material.tcap, tm, ta)
    section = minimum_conductor_section(
        fault_current_ka, t, material.alpha20, material.rho20, material.tcap, tm, ta
    )
    return ConductorSizing(section_mm2=section, kf=kf, max_temp=tm)


def conductor_diameter_from_section(section_mm2: float) -> float:
    """Diameter (m) of a solid round conductor of the given section."""
    if section_mm2 <= 0:
        return 0.0
    return 2 * math.sqrt(section_mm2 / math.pi) / 1000
