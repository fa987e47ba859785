"""Marching squares contour extraction.

For a threshold ``t`` a sample is *inside* when ``value >= t``. Each band is
the region of the grid that is inside, returned as polygons (outer ring plus
holes) in grid-index coordinates: ``x`` is the fractional column in
``[0, cols-1]`` and ``y`` the fractional row in ``[0, rows-1]``.

The grid is padded with one ring of outside cells, so contours reaching the
grid edge are closed by running along the boundary samples. Crossings
between two real samples are linearly interpolated; crossings into the
padding sit exactly on the boundary sample.

Winding: every segment keeps the inside region on its right-hand side in
y-down screen coordinates. Outer rings therefore have positive shoelace
area and holes negative area.

Saddle cells (two diagonal corners inside) are always resolved by keeping
the inside corners apart, i.e. the outside region connects through the cell
centre.
"""
import logging
import math
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np
from matplotlib.path import Path

from .errors import EmptyGeometry

logger = logging.getLogger(__name__)

# Corner offsets in clockwise screen order: TL, TR, BR, BL.
# Edge k joins corner k and corner k+1: top, right, bottom, left.
CORNERS = ((0, 0), (1, 0), (1, 1), (0, 1))


def _case_segments(case: int) -> Tuple[Tuple[int, int], ...]:
    """Return ``(leave_edge, enter_edge)`` pairs for a 4-bit cell case."""
    inside = [(case >> k) & 1 for k in range(4)]
    pairs = []
    for enter in range(4):
        if inside[enter] or not inside[(enter + 1) % 4]:
            continue
        corner = (enter + 1) % 4
        while inside[(corner + 1) % 4]:
            corner = (corner + 1) % 4
        pairs.append((corner, enter))
    return tuple(pairs)


SEGMENTS = tuple(_case_segments(case) for case in range(16))


@dataclass(frozen=True, eq=False)
class Band:
    """Polygons sharing one threshold value.

    Attributes
    ----------
    value : float
        The threshold.
    polygons : tuple of tuple of numpy.ndarray
        Each polygon is ``(outer, *holes)``, each ring an ``(n, 2)`` array
        of ``(x, y)`` points without a repeated closing point.
    """

    value: float
    polygons: Tuple[Tuple[np.ndarray, ...], ...] = ()

    @property
    def is_empty(self) -> bool:
        return len(self.polygons) == 0

    @property
    def rings(self) -> List[np.ndarray]:
        return [ring for polygon in self.polygons for ring in polygon]


def ring_area(ring: np.ndarray) -> float:
    """Signed shoelace area of a ring."""
    x, y = ring[:, 0], ring[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def drop_repeats(ring: np.ndarray) -> np.ndarray:
    """Drop points equal to their predecessor, cyclically."""
    if len(ring) < 2:
        return ring
    keep = np.any(ring != np.roll(ring, 1, axis=0), axis=1)
    return ring[keep]


class _Tracer:
    """Traces the rings of one threshold over one grid."""

    def __init__(self, values: np.ndarray, threshold: float):
        self.values = values
        self.threshold = threshold
        self.rows, self.cols = values.shape
        self.points = {}

    def _is_real(self, x, y):
        return 0 <= x < self.cols and 0 <= y < self.rows

    def crossing(self, x0, y0, x1, y1):
        """Crossing point on the edge between two corners.

        Edges are keyed by their doubled midpoint, unique on the lattice.
        """
        key = (x0 + x1, y0 + y1)
        if key in self.points:
            return key
        real0, real1 = self._is_real(x0, y0), self._is_real(x1, y1)
        if real0 and real1:
            v0 = self.values[y0, x0]
            v1 = self.values[y1, x1]
            frac = (self.threshold - v0) / (v1 - v0)
            point = (x0 + frac * (x1 - x0), y0 + frac * (y1 - y0))
        elif real0:
            point = (float(x0), float(y0))
        else:
            point = (float(x1), float(y1))
        self.points[key] = point
        return key

    def cases(self) -> np.ndarray:
        inside = np.zeros((self.rows + 2, self.cols + 2), dtype=np.uint8)
        inside[1:-1, 1:-1] = self.values >= self.threshold
        return (inside[:-1, :-1]
                | inside[:-1, 1:] << 1
                | inside[1:, 1:] << 2
                | inside[1:, :-1] << 3)

    def rings(self) -> List[np.ndarray]:
        cases = self.cases()
        successor = {}
        rows_idx, cols_idx = np.nonzero((cases != 0) & (cases != 15))
        for j, i in zip(rows_idx.tolist(), cols_idx.tolist()):
            x, y = i - 1, j - 1
            for leave, enter in SEGMENTS[cases[j, i]]:
                start = self._edge(x, y, leave)
                end = self._edge(x, y, enter)
                successor[start] = end

        rings = []
        while successor:
            start, key = successor.popitem()
            keys = [start]
            while key != start:
                keys.append(key)
                key = successor.pop(key)
            rings.append(np.array([self.points[k] for k in keys], dtype=np.float64))
        return rings

    def _edge(self, x, y, edge):
        dx0, dy0 = CORNERS[edge]
        dx1, dy1 = CORNERS[(edge + 1) % 4]
        return self.crossing(x + dx0, y + dy0, x + dx1, y + dy1)


def _contains(outer: np.ndarray, hole: np.ndarray) -> bool:
    inside = Path(outer).contains_points(hole)
    return inside.mean() > 0.5


def assemble_polygons(rings: Sequence[np.ndarray]) -> List[Tuple[np.ndarray, ...]]:
    """Group rings into ``(outer, *holes)`` polygons by winding and nesting.

    Zero-area rings are discarded. Each hole is attached to the smallest
    outer ring containing it.
    """
    outers, holes = [], []
    for ring in rings:
        ring = drop_repeats(ring)
        if len(ring) < 3:
            continue
        area = ring_area(ring)
        if area > 0:
            outers.append((area, ring))
        elif area < 0:
            holes.append(ring)

    order = sorted(range(len(outers)), key=lambda k: outers[k][0])
    children = {k: [] for k in range(len(outers))}
    for hole in holes:
        for k in order:
            if _contains(outers[k][1], hole):
                children[k].append(hole)
                break
        else:
            logger.warning("Dropping hole of %d points with no enclosing ring",
                           len(hole))
    return [(outers[k][1], *children[k]) for k in range(len(outers))]


def extract_band(field, threshold, strict=False) -> Band:
    """Contour one threshold. Returns an empty band when nothing crosses it.

    With ``strict=True`` an empty result raises ``EmptyGeometry`` instead.
    """
    band = _trace_band(field, threshold)
    if strict and band.is_empty:
        raise EmptyGeometry(f"No contour crosses threshold {threshold!r}")
    return band


def _trace_band(field, threshold) -> Band:
    try:
        threshold = float(threshold)
    except (TypeError, ValueError):
        logger.warning("Skipping malformed threshold %r", threshold)
        return Band(float("nan"))
    if not math.isfinite(threshold):
        logger.warning("Skipping non-finite threshold %r", threshold)
        return Band(threshold)

    values = field.values
    inside = values >= threshold
    if inside.all() or not inside.any():
        return Band(threshold)

    rings = _Tracer(values, threshold).rings()
    return Band(threshold, tuple(assemble_polygons(rings)))


def extract(field, thresholds: Sequence[float], num_workers=None) -> List[Band]:
    """Contour a field at every threshold.

    Parameters
    ----------
    field : seasnap.grid.GridField
        Field to contour.
    thresholds : sequence of float
        Iso-values, in any order.
    num_workers : int, optional
        When greater than 1, bands are computed in a process pool.

    Returns
    -------
    list of Band
        One band per threshold, in threshold order.
    """
    thresholds = list(thresholds)
    if num_workers and num_workers > 1 and len(thresholds) > 1:
        return _extract_parallel(field, thresholds, num_workers)

    bands = []
    for threshold in thresholds:
        try:
            bands.append(extract_band(field, threshold))
        except Exception as err:
            logger.warning("Contouring failed at %r: %s", threshold, err)
            bands.append(Band(threshold))
    return bands


def _extract_parallel(field, thresholds, num_workers) -> List[Band]:
    bands = [None] * len(thresholds)
    with ProcessPoolExecutor(max_workers=num_workers) as executor:
        futures = {
            executor.submit(extract_band, field, threshold): idx
            for idx, threshold in enumerate(thresholds)
        }
        for future in as_completed(futures):
            idx = futures[future]
            try:
                bands[idx] = future.result()
            except Exception as err:
                logger.warning("Contouring failed at %r: %s", thresholds[idx], err)
                bands[idx] = Band(thresholds[idx])
    return bands
