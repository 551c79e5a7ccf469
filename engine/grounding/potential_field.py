"""Approximate surface potential field for heatmap rendering.

Grid conductors and rods are discretized into point sources and the surface
potential is the superposition of ``weight / distance`` over all sources,
normalized to [0, 1].  This is a visualization aid only; the absolute
values carry no engineering meaning.

Cost is O(R² · S) for an R×R output grid and S sources.  Distant sources
are never pruned since the 1/r decay is long-range and shapes the whole
field.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

SOURCE_SPACING_M = 1.5
MIN_SEGMENTS_PER_CONDUCTOR = 5
POINTS_PER_ROD = 3
CONDUCTOR_WEIGHT = 1.0
ROD_WEIGHT = 1.5


@dataclass(frozen=True)
class PointSources:
    """Discretized sources, one entry per point."""
    x: NDArray[np.float64]
    y: NDArray[np.float64]
    z: NDArray[np.float64]
    weight: NDArray[np.float64]

    @property
    def count(self) -> int:
        return int(self.x.size)


@dataclass(frozen=True)
class PotentialField:
    """Normalized surface potential over the grid footprint plus margin.

    ``matrix[r, c]`` is the cell at x = -offset + c/(R-1)·width and
    y = -offset + r/(R-1)·height.
    """
    matrix: NDArray[np.float64]
    width: float
    height: float
    offset: float


def _segment_count(length: float) -> int:
    return max(MIN_SEGMENTS_PER_CONDUCTOR, math.floor(length / SOURCE_SPACING_M))


def _conductor_points(length: float) -> NDArray[np.float64]:
    segments = _segment_count(length)
    return np.arange(segments + 1, dtype=np.float64) / segments * length


def discretize_sources(
    lx: float,
    ly: float,
    nx: int,
    ny: int,
    depth: float,
    rods: Iterable[tuple[int, int]] = (),
    rod_length: float = 0.0,
) -> PointSources:
    """Place point sources along the grid conductors and rods.

    Parameters
    ----------
    lx, ly : float
        Grid sides (m).
    nx, ny : int
        Conductor counts: *nx* conductors run along Y, *ny* along X.
    depth : float
        Burial depth (m); conductor sources sit at z = -depth.
    rods : iterable of (i, j)
        Grid node indices carrying a vertical rod.  Indices outside
        [0, nx) × [0, ny) are ignored.
    rod_length : float
        Length of every rod (m).
    """
    empty = np.empty(0, dtype=np.float64)
    if lx <= 0 or ly <= 0 or nx < 2 or ny < 2 or depth <= 0:
        return PointSources(x=empty, y=empty, z=empty, weight=empty)

    step_x = lx / (nx - 1)
    step_y = ly / (ny - 1)

    xs: list[NDArray[np.float64]] = []
    ys: list[NDArray[np.float64]] = []
    zs: list[NDArray[np.float64]] = []
    ws: list[NDArray[np.float64]] = []

    # Conductors along X
    along_x = _conductor_points(lx)
    for j in range(ny):
        xs.append(along_x)
        ys.append(np.full_like(along_x, j * step_y))

    # Conductors along Y
    along_y = _conductor_points(ly)
    for i in range(nx):
        xs.append(np.full_like(along_y, i * step_x))
        ys.append(along_y)

    n_conductor = sum(a.size for a in xs)
    zs.append(np.full(n_conductor, -depth))
    ws.append(np.full(n_conductor, CONDUCTOR_WEIGHT))

    rod_fractions = np.arange(1, POINTS_PER_ROD + 1, dtype=np.float64) / POINTS_PER_ROD
    for i, j in rods:
        if not (0 <= i < nx and 0 <= j < ny):
            logger.debug("Skipping rod outside the grid at node (%d, %d)", i, j)
            continue
        xs.append(np.full(POINTS_PER_ROD, i * step_x))
        ys.append(np.full(POINTS_PER_ROD, j * step_y))
        zs.append(-depth - rod_fractions * rod_length)
        ws.append(np.full(POINTS_PER_ROD, ROD_WEIGHT))

    return PointSources(
        x=np.concatenate(xs),
        y=np.concatenate(ys),
        z=np.concatenate(zs),
        weight=np.concatenate(ws),
    )


def source_count(
    lx: float,
    ly: float,
    nx: int,
    ny: int,
    depth: float,
    rods: Iterable[tuple[int, int]] = (),
) -> int:
    """Number of sources :func:`discretize_sources` would place, without allocating them."""
    if lx <= 0 or ly <= 0 or nx < 2 or ny < 2 or depth <= 0:
        return 0
    conductor_points = ny * (_segment_count(lx) + 1) + nx * (_segment_count(ly) + 1)
    rod_count = sum(1 for i, j in rods if 0 <= i < nx and 0 <= j < ny)
    return conductor_points + POINTS_PER_ROD * rod_count


def potential_field(
    lx: float,
    ly: float,
    nx: int,
    ny: int,
    depth: float,
    rods: Iterable[tuple[int, int]] = (),
    rod_length: float = 0.0,
    resolution: int = 60,
    offset: float = 1.5,
) -> PotentialField:
    """Compute the normalized surface potential on a resolution × resolution grid.

    Degenerate geometry yields an all-zero matrix.
    """
    resolution = max(int(resolution), 2)
    width = lx + 2 * offset
    height = ly + 2 * offset
    matrix = np.zeros((resolution, resolution), dtype=np.float64)

    sources = discretize_sources(lx, ly, nx, ny, depth, rods, rod_length)
    if sources.count == 0:
        return PotentialField(matrix=matrix, width=width, height=height, offset=offset)

    fractions = np.arange(resolution, dtype=np.float64) / (resolution - 1)
    px = -offset + fractions * width
    py = -offset + fractions * height

    # Row by row keeps memory at O(R·S).
    dx2 = (px[:, np.newaxis] - sources.x[np.newaxis, :]) ** 2
    dz2 = sources.z[np.newaxis, :] ** 2
    for r in range(resolution):
        dy2 = (py[r] - sources.y[np.newaxis, :]) ** 2
        matrix[r, :] = np.sum(sources.weight / np.sqrt(dx2 + dy2 + dz2), axis=1)

    max_potential = float(matrix.max())
    if max_potential > 0:
        matrix /= max_potential

    logger.debug(
        "Potential field %dx%d from %d sources", resolution, resolution, sources.count
    )
    return PotentialField(matrix=matrix, width=width, height=height, offset=offset)


def touch_visualization(potential_matrix: NDArray[np.floating]) -> NDArray[np.float64]:
    """Normalized touch voltage: ground potential rise minus surface potential.

    Close to a conductor the surface sits near the grid potential, so the
    touch voltage there is low.
    """
    return 1.0 - np.asarray(potential_matrix, dtype=np.float64)


def step_visualization(potential_matrix: NDArray[np.floating]) -> NDArray[np.float64]:
    """Normalized step voltage as the local gradient magnitude.

    Forward differences to the right and downward neighbours; the last
    column and row compare against themselves (zero difference).
    """
    v = np.asarray(potential_matrix, dtype=np.float64)
    dx = np.zeros_like(v)
    dy = np.zeros_like(v)
    dx[:, :-1] = np.abs(v[:, :-1] - v[:, 1:])
    dy[:-1, :] = np.abs(v[:-1, :] - v[1:, :])
    grad = np.sqrt(dx * dx + dy * dy)

    max_step = float(grad.max()) if grad.size else 0.0
    if max_step > 0:
        grad /= max_step
    return grad
