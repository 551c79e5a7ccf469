"""Substation grounding grid engine.

Submodules
----------
soil_model
    Apparent resistivity of one- or two-layer soil (image-charge series).
grid_resistance
    Simplified (methods A/B) and Schwarz grid + rod resistance.
geometric_factors
    Ki, Km, Ks and mesh touch/step voltages.
permissible_voltage
    Tolerable body current, surface layer derating, touch/step limits.
conductor_sizing
    Onderdonk minimum conductor section.
potential_field
    Point-source surface potential for heatmaps.
design
    Immutable design state and the assessment pipeline.
"""

from engine.grounding.conductor_sizing import minimum_conductor_section, thermal_coefficient_kf
from engine.grounding.design import (
    DesignAssessment,
    FaultCurrent,
    GridGeometry,
    GroundingDesign,
    RodSet,
    SoilProfile,
    SurfaceLayer,
    assess_design,
)
from engine.grounding.grid_resistance import schwarz_resistance, simplified_resistance
from engine.grounding.permissible_voltage import permissible_voltages, presumed_touch_voltage
from engine.grounding.potential_field import (
    potential_field,
    step_visualization,
    touch_visualization,
)
from engine.grounding.soil_model import SeriesConvergence, apparent_resistivity

__all__ = [
    "apparent_resistivity",
    "assess_design",
    "DesignAssessment",
    "FaultCurrent",
    "GridGeometry",
    "GroundingDesign",
    "minimum_conductor_section",
    "permissible_voltages",
    "potential_field",
    "presumed_touch_voltage",
    "RodSet",
    "schwarz_resistance",
    "SeriesConvergence",
    "simplified_resistance",
    "SoilProfile",
    "step_visualization",
    "SurfaceLayer",
    "thermal_coefficient_kf",
    "touch_visualization",
]
