"""Apparent soil resistivity from one- or two-layer soil data.

The two-layer soil is reduced to an equivalent homogeneous resistivity seen
by a disc electrode of the grid's equivalent radius, using the image-charge
series (Burgsdorf-Yakobs):

    N = 1 + 2 * sum_{n>=1} k^n / sqrt(1 + (2n / alpha)^2)
    rho_a = N * rho_1

with ``k`` the reflection coefficient between the layers and
``alpha = r / h1``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeriesConvergence:
    """Stopping rule for the image-charge series.

    Attributes:
        tolerance: stop once a term's magnitude falls to this value
        max_iterations: hard cap on the term index, guards |k| -> 1
    """
    tolerance: float = 1e-6
    max_iterations: int = 10_000


DEFAULT_CONVERGENCE = SeriesConvergence()


def equivalent_radius(area: float) -> float:
    """Radius (m) of the disc with the same area as the grid."""
    if area <= 0:
        return 0.0
    return math.sqrt(area / math.pi)


def reflection_coefficient(rho1: float, rho2: float) -> float:
    """Reflection coefficient k = (rho2 - rho1) / (rho2 + rho1)."""
    if rho1 + rho2 == 0:
        return 0.0
    return (rho2 - rho1) / (rho2 + rho1)


def image_series_factor(
    k: float,
    alpha: float,
    convergence: SeriesConvergence = DEFAULT_CONVERGENCE,
) -> float:
    """Evaluate the image series factor N for reflection *k* and ratio *alpha*.

    The last computed term is always accumulated, including the one that
    falls under the tolerance.
    """
    if alpha == 0:
        return 1.0

    total = 0.0
    term = 0.0
    for n in range(1, convergence.max_iterations):
        term = k ** n / math.sqrt(1 + (2 * n / alpha) ** 2)
        total += term
        if abs(term) <= convergence.tolerance:
            break
    else:
        logger.debug(
            "Image series hit the iteration cap (k=%.6f, alpha=%.6f, last term=%.3g)",
            k, alpha, term,
        )

    return 1 + 2 * total


def apparent_resistivity(
    rho1: float,
    rho2: float | None,
    h1: float | None,
    r: float,
    convergence: SeriesConvergence = DEFAULT_CONVERGENCE,
) -> float:
    """Apparent resistivity (Ohm*m) seen by a grid of equivalent radius *r*.

    Args:
        rho1: upper layer resistivity (Ohm*m)
        rho2: lower layer resistivity (Ohm*m), None for homogeneous soil
        h1: upper layer depth (m)
        r: grid equivalent radius (m)
        convergence: series stopping rule
    """
    if not rho2 or rho2 == rho1 or not h1 or h1 <= 0:
        return rho1

    alpha = r / h1
    k = reflection_coefficient(rho1, rho2)
    return image_series_factor(k, alpha, convergence) * rho1
