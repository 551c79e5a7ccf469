"""Piecewise interpolation over named control points.

Reference curves of the grounding standard are tabulated as a handful of
points.  This module keeps them as ordered :class:`ControlPoint` lists and
provides one lookup routine with clamping at both ends, either linear or in
log-log space.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class ControlPoint:
    """A tabulated abscissa with one or more ordinates."""
    x: float
    values: tuple[float, ...]
    label: str = ""


def interpolate_control_points(
    points: Sequence[ControlPoint],
    x: float,
    log_scale: bool = False,
) -> tuple[float, ...]:
    """Interpolate every ordinate of *points* at *x*.

    Parameters
    ----------
    points : sequence of ControlPoint
        Control points sorted by ascending ``x``.  All points must carry
        the same number of values.
    x : float
        Query abscissa.
    log_scale : bool, optional
        Interpolate ``log10(value)`` against ``log10(x)`` instead of
        linearly.  Requires strictly positive abscissae and values.

    Returns
    -------
    tuple of float
        Interpolated values.  Outside the tabulated range the values of
        the nearest end point are returned unchanged.  An empty point list
        gives an empty tuple.
    """
    if not points:
        return ()
    if x <= points[0].x:
        return points[0].values
    if x >= points[-1].x:
        return points[-1].values

    for lower, upper in zip(points, points[1:]):
        if lower.x <= x <= upper.x:
            if log_scale:
                ratio = (math.log10(x) - math.log10(lower.x)) / (
                    math.log10(upper.x) - math.log10(lower.x)
                )
                return tuple(
                    10 ** (math.log10(v0) + (math.log10(v1) - math.log10(v0)) * ratio)
                    for v0, v1 in zip(lower.values, upper.values)
                )
            ratio = (x - lower.x) / (upper.x - lower.x)
            return tuple(
                v0 + (v1 - v0) * ratio
                for v0, v1 in zip(lower.values, upper.values)
            )

    # Unsorted input: no bracket found.
    return tuple(0.0 for _ in points[0].values)
