"""Maximum tolerable touch and step voltages.

Short faults (t <= 3 s) use the Dalziel body current Ib = k / sqrt(t), with
k = 0.116 for a 50 kg body and 0.157 for 70 kg:

    V_touch = (1000 + 1.5 Cs rho_s) k / sqrt(t)
    V_step  = (1000 + 6 Cs rho_s) k / sqrt(t)

Longer faults use a fixed body current of 6 mA.  The surface layer derating
factor Cs follows the IEEE 80 approximation (Eq. 27).

Also provides the presumed touch-voltage limit curves (NBR 14039) versus
fault duration for installations inside and outside buildings.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from engine.grounding.interpolation import ControlPoint, interpolate_control_points

LONG_DURATION_THRESHOLD_S = 3.0
LONG_DURATION_BODY_CURRENT_A = 0.006

BODY_CONSTANT_50KG = 0.116
BODY_CONSTANT_70KG = 0.157

BODY_RESISTANCE_OHM = 1000.0
TOUCH_FOOT_COEFFICIENT = 1.5
STEP_FOOT_COEFFICIENT = 6.0


class VoltageDuration(str, Enum):
    SHORT = "short"
    LONG = "long"


class TouchCurveArea(str, Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"

    @classmethod
    def _missing_(cls, value):
        # Case-insensitive, also accepting the NBR 14039 labels
        aliases = {
            "internal": cls.INTERNAL,
            "interna": cls.INTERNAL,
            "external": cls.EXTERNAL,
            "externa": cls.EXTERNAL,
        }
        if isinstance(value, str):
            return aliases.get(value.lower())
        return None


@dataclass(frozen=True)
class BodyCurrent:
    """Tolerable body current; ``ib`` is None when not computable."""
    ib: float | None
    duration: VoltageDuration


@dataclass(frozen=True)
class PermissibleVoltages:
    """Maximum tolerable touch and step voltages (V)."""
    touch: float
    step: float
    duration: VoltageDuration


# (duration s, voltage V)
PRESUMED_TOUCH_CURVES: dict[TouchCurveArea, tuple[ControlPoint, ...]] = {
    TouchCurveArea.INTERNAL: (
        ControlPoint(0.01, (1000.0,)),
        ControlPoint(0.03, (700.0,)),
        ControlPoint(0.1, (480.0,)),
        ControlPoint(0.3, (330.0,)),
        ControlPoint(1.0, (230.0,)),
        ControlPoint(3.0, (170.0,)),
        ControlPoint(10.0, (120.0,)),
    ),
    TouchCurveArea.EXTERNAL: (
        ControlPoint(0.01, (800.0,)),
        ControlPoint(0.03, (550.0,)),
        ControlPoint(0.1, (380.0,)),
        ControlPoint(0.3, (260.0,)),
        ControlPoint(1.0, (180.0,)),
        ControlPoint(3.0, (130.0,)),
        ControlPoint(10.0, (90.0,)),
    ),
}

PRESUMED_CURVE_MIN_T = 0.01
PRESUMED_CURVE_MAX_T = 10.0


def body_constant(body_weight: int) -> float:
    """Dalziel constant k for the assumed body mass (kg)."""
    return BODY_CONSTANT_50KG if body_weight == 50 else BODY_CONSTANT_70KG


def tolerable_body_current(t: float, body_weight: int) -> BodyCurrent:
    """Tolerable body current (A) for a fault lasting *t* seconds."""
    if not math.isfinite(t) or t <= 0:
        return BodyCurrent(ib=None, duration=VoltageDuration.SHORT)

    if t <= LONG_DURATION_THRESHOLD_S:
        return BodyCurrent(
            ib=body_constant(body_weight) / math.sqrt(t),
            duration=VoltageDuration.SHORT,
        )
    return BodyCurrent(ib=LONG_DURATION_BODY_CURRENT_A, duration=VoltageDuration.LONG)


def reflection_factor(rho: float, rho_s: float) -> float:
    """Reflection factor K between the soil and the surface layer."""
    if rho + rho_s == 0:
        return 0.0
    return (rho - rho_s) / (rho + rho_s)


def derating_factor(rho: float, rho_s: float, hs: float) -> float:
    """Surface layer derating factor Cs.

    Args:
        rho: resistivity of the soil below the surface layer (Ohm*m)
        rho_s: surface layer resistivity (Ohm*m)
        hs: surface layer thickness (m)
    """
    if hs <= 0 or rho_s <= 0:
        return 1.0
    if abs(rho - rho_s) < 0.001:
        return 1.0
    return 1 - (0.09 * (1 - rho / rho_s)) / (2 * hs + 0.09)


def max_touch_voltage(t: float, cs: float, rho_s: float, body_weight: int) -> float:
    if t <= 0:
        return 0.0
    return (BODY_RESISTANCE_OHM + TOUCH_FOOT_COEFFICIENT * cs * rho_s) * (
        body_constant(body_weight) / math.sqrt(t)
    )


def max_step_voltage(t: float, cs: float, rho_s: float, body_weight: int) -> float:
    if t <= 0:
        return 0.0
    return (BODY_RESISTANCE_OHM + STEP_FOOT_COEFFICIENT * cs * rho_s) * (
        body_constant(body_weight) / math.sqrt(t)
    )


def permissible_voltages(
    t: float, cs: float, rho_s: float, body_weight: int
) -> PermissibleVoltages:
    """Touch and step limits, switching to the fixed 6 mA body current above 3 s."""
    if t <= 0:
        return PermissibleVoltages(touch=0.0, step=0.0, duration=VoltageDuration.SHORT)

    if t <= LONG_DURATION_THRESHOLD_S:
        return PermissibleVoltages(
            touch=max_touch_voltage(t, cs, rho_s, body_weight),
            step=max_step_voltage(t, cs, rho_s, body_weight),
            duration=VoltageDuration.SHORT,
        )

    base_touch = BODY_RESISTANCE_OHM + TOUCH_FOOT_COEFFICIENT * cs * rho_s
    base_step = BODY_RESISTANCE_OHM + STEP_FOOT_COEFFICIENT * cs * rho_s
    return PermissibleVoltages(
        touch=LONG_DURATION_BODY_CURRENT_A * base_touch,
        step=LONG_DURATION_BODY_CURRENT_A * base_step,
        duration=VoltageDuration.LONG,
    )


def presumed_touch_voltage(t: float, area: TouchCurveArea | str) -> float | None:
    """Presumed touch-voltage limit (V) for a fault of *t* seconds.

    *t* is clamped to the tabulated range [0.01, 10] s and looked up by
    log-log interpolation.  Returns None for non-finite or non-positive *t*
    and for an unknown *area* label.
    """
    if not math.isfinite(t) or t <= 0:
        return None
    clamped = min(max(t, PRESUMED_CURVE_MIN_T), PRESUMED_CURVE_MAX_T)
    try:
        curve_area = TouchCurveArea(area)
    except ValueError:
        return None
    (voltage,) = interpolate_control_points(
        PRESUMED_TOUCH_CURVES[curve_area], clamped, log_scale=True
    )
    return voltage
