"""Mapping of grid-space contours to geographic coordinates.

Grid points map affinely into the field's bounding box, with longitude
increasing with column and latitude decreasing with row (row 0 is the
northernmost row)::

    lon = min_lon + x / cols * (max_lon - min_lon)
    lat = max_lat - y / rows * (max_lat - min_lat)

Longitudes beyond 180 (grids in the 0..360 convention) are wrapped by
subtracting 360. Latitudes are never wrapped: the source grids are regular
lat/lon grids whose bounding box is validated to lie within [-90, 90].

Rings touching the antimeridian are stitched. Edges jumping more than 180
degrees of longitude cross it and are cut there first, which puts a seam
point on both sides at the crossing latitude. Seam points whose latitude is
seen on only one side of the seam are nudged ``SEAM_EPSILON`` degrees away
from it; seam points seen on both sides mark where a ring was cut, and the
cut pieces are rejoined across the seam.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np
from matplotlib.path import Path

from .contours import drop_repeats, ring_area
from .errors import MappingDegenerate
from .grid import BBox

logger = logging.getLogger(__name__)

SEAM_EPSILON = 0.0005
SEAM_TOLERANCE = 1e-9

WEST_SIDE = 1
EAST_SIDE = 2
BOTH_SIDES = WEST_SIDE | EAST_SIDE

WORLD_RING = np.array([[-180.0, -90.0], [180.0, -90.0],
                       [180.0, 90.0], [-180.0, 90.0]])


@dataclass(frozen=True, eq=False)
class GeoPolygon:
    """Polygon in ``(lon, lat)`` degrees.

    Attributes
    ----------
    rings : tuple of numpy.ndarray
        Outer ring first, then holes. Rings are not explicitly closed.
    sphere : bool
        True for the stand-in produced when stitching collapses a band.
    """

    rings: Tuple[np.ndarray, ...]
    sphere: bool = False


SPHERE = GeoPolygon(rings=(WORLD_RING,), sphere=True)


def to_lonlat(points: np.ndarray, bbox, grid_shape) -> np.ndarray:
    """Affinely map ``(x, y)`` grid points to ``(lon, lat)`` and wrap longitude."""
    bbox = BBox.parse(bbox)
    rows, cols = grid_shape
    points = np.asarray(points, dtype=np.float64)
    lon = bbox.min_lon + points[:, 0] / cols * bbox.lon_range
    lat = bbox.max_lat - points[:, 1] / rows * bbox.lat_range
    lon = np.where(lon > 180, lon - 360, lon)
    return np.column_stack([lon, lat])


def to_grid(lonlat: np.ndarray, bbox, grid_shape) -> np.ndarray:
    """Inverse of the affine part of ``to_lonlat``.

    Longitudes west of ``min_lon`` are unwrapped by adding 360 first, so
    points wrapped from the 0..360 convention come back to their column.
    """
    bbox = BBox.parse(bbox)
    rows, cols = grid_shape
    lonlat = np.asarray(lonlat, dtype=np.float64)
    lon = lonlat[:, 0]
    lon = np.where(lon < bbox.min_lon, lon + 360, lon)
    x = np.zeros_like(lon) if bbox.lon_range == 0 else (
        (lon - bbox.min_lon) / bbox.lon_range * cols)
    y = np.zeros_like(lon) if bbox.lat_range == 0 else (
        (bbox.max_lat - lonlat[:, 1]) / bbox.lat_range * rows)
    return np.column_stack([x, y])


def _snap_to_seam(ring: np.ndarray) -> np.ndarray:
    ring = ring.copy()
    near = np.abs(np.abs(ring[:, 0]) - 180) <= SEAM_TOLERANCE
    ring[near, 0] = np.sign(ring[near, 0]) * 180
    return ring


def cut_at_seam(ring: np.ndarray) -> np.ndarray:
    """Insert seam points where an edge crosses the antimeridian.

    An edge whose longitude jumps by more than 180 degrees crosses the seam.
    It gets a pair of points at the interpolated crossing latitude, one at
    each of -180 and 180, so the ring visits the seam from both sides.
    """
    out = []
    n = len(ring)
    for k in range(n):
        lon0, lat0 = ring[k]
        lon1, lat1 = ring[(k + 1) % n]
        out.append((lon0, lat0))
        jump = lon1 - lon0
        if abs(jump) <= 180 or (abs(lon0) == 180 and abs(lon1) == 180):
            continue
        if jump < 0:
            near, far, lon1 = 180.0, -180.0, lon1 + 360
        else:
            near, far, lon1 = -180.0, 180.0, lon1 - 360
        lat = lat0 + (near - lon0) / (lon1 - lon0) * (lat1 - lat0)
        out.extend([(near, lat), (far, lat)])
    return drop_repeats(np.array(out, dtype=np.float64))


def shared_latitudes(rings: Sequence[np.ndarray]) -> Dict[float, int]:
    """Record on which sides of the seam each seam latitude occurs."""
    shared = {}
    for ring in rings:
        for lon, lat in ring:
            if lon == -180:
                shared[lat] = shared.get(lat, 0) | WEST_SIDE
            elif lon == 180:
                shared[lat] = shared.get(lat, 0) | EAST_SIDE
    return shared


def offset_unshared(ring: np.ndarray, shared: Dict[float, int]) -> np.ndarray:
    """Nudge seam points not seen on both sides off the seam."""
    ring = ring.copy()
    for k, (lon, lat) in enumerate(ring):
        if abs(lon) == 180 and shared.get(lat) != BOTH_SIDES:
            ring[k, 0] = np.sign(lon) * (180 - SEAM_EPSILON)
    return ring


def _seam_side(lon):
    if lon == -180:
        return WEST_SIDE
    if lon == 180:
        return EAST_SIDE
    return 0


def _split_on_seam(ring: np.ndarray) -> List[np.ndarray]:
    """Cut a ring at edges lying on the seam. Returns [] if nothing is cut."""
    n = len(ring)
    cuts = [k for k in range(n)
            if _seam_side(ring[k, 0])
            and _seam_side(ring[k, 0]) == _seam_side(ring[(k + 1) % n, 0])]
    if not cuts:
        return []
    chains = []
    for idx, cut in enumerate(cuts):
        stop = cuts[(idx + 1) % len(cuts)]
        start = (cut + 1) % n
        length = (stop - start) % n + 1
        chains.append(ring[[(start + i) % n for i in range(length)]])
    return chains


def stitch(rings: Sequence[np.ndarray]) -> List[np.ndarray]:
    """Rejoin rings that were cut along the antimeridian.

    Edges running along the seam are removed and the resulting chains are
    connected across it: a chain ending at ``(180, lat)`` continues with the
    chain starting at ``(-180, lat)`` and vice versa. A chain without such a
    partner is reconnected to the chain that followed it in its own ring,
    which restores the original seam edge. The same happens to a chain
    whose only partner is itself: it runs once around the globe and keeps
    its seam edges. Degenerate results (fewer than three distinct points)
    are dropped.
    """
    whole, chains, own_next = [], [], []
    for ring in rings:
        pieces = _split_on_seam(ring)
        if not pieces:
            whole.append(ring)
            continue
        base = len(chains)
        chains.extend(pieces)
        own_next.extend(base + (k + 1) % len(pieces) for k in range(len(pieces)))

    starts = {}
    for idx, chain in enumerate(chains):
        starts.setdefault((chain[0, 0], chain[0, 1]), []).append(idx)

    def partner(idx, first, unused):
        lon, lat = chains[idx][-1]
        candidates = starts.get((-lon, lat), [])
        for cand in candidates:
            if cand in unused:
                return cand
        if first in candidates and idx != first:
            return None
        return own_next[idx] if own_next[idx] in unused else None

    stitched = []
    unused = set(range(len(chains)))
    while unused:
        first = min(unused)
        unused.discard(first)
        parts = [chains[first]]
        idx = first
        while True:
            nxt = partner(idx, first, unused)
            if nxt is None:
                break
            unused.discard(nxt)
            parts.append(chains[nxt])
            idx = nxt
        stitched.append(np.concatenate(parts))

    out = []
    for ring in whole + stitched:
        keep = np.any(ring != np.roll(ring, 1, axis=0), axis=1)
        ring = ring[keep]
        if len(np.unique(ring, axis=0)) >= 3:
            out.append(ring)
    return out


def _unwrap(ring: np.ndarray) -> np.ndarray:
    flat = ring.copy()
    flat[:, 0] = np.unwrap(ring[:, 0], period=360)
    return flat


def _regroup(rings: List[np.ndarray]) -> List[GeoPolygon]:
    """Group stitched rings into polygons, outer rings counter-clockwise.

    Winding and containment are evaluated on longitudes unwrapped across
    the seam; the returned rings keep their wrapped longitudes.
    """
    outers, holes = [], []
    for ring in rings:
        flat = _unwrap(ring)
        area = ring_area(flat)
        if area > 0:
            outers.append((area, ring, Path(flat)))
        elif area < 0:
            holes.append((ring, flat))
    outers.sort(key=lambda item: item[0])

    children = [[] for _ in outers]
    for ring, flat in holes:
        for k, (_, _, path) in enumerate(outers):
            if any(path.contains_points(flat + np.array([shift, 0.0])).mean() > 0.5
                   for shift in (0.0, 360.0, -360.0)):
                children[k].append(ring)
                break
        else:
            logger.warning("Dropping stitched hole with no enclosing ring")
    return [GeoPolygon(rings=(outer, *kids))
            for (_, outer, _), kids in zip(outers, children)]


def to_geographic(polygons, bbox, grid_shape, strict=False) -> List[GeoPolygon]:
    """Map one band's grid-space polygons to geographic polygons.

    Parameters
    ----------
    polygons : sequence of tuple of numpy.ndarray
        ``(outer, *holes)`` polygons in grid-index space, as produced by
        ``seasnap.contours``.
    bbox : sequence of float
        ``(min_lon, min_lat, max_lon, max_lat)`` of the field.
    grid_shape : tuple of int
        ``(rows, cols)`` of the field.
    strict : bool, optional
        Raise ``MappingDegenerate`` instead of returning the sphere polygon
        when stitching leaves nothing.

    Returns
    -------
    list of GeoPolygon
        Rings are counter-clockwise for outer boundaries and clockwise for
        holes, with longitudes in [-180, 180]. Winding of rings crossing
        the seam is taken with their longitudes unwrapped.
    """
    mapped = [[cut_at_seam(_snap_to_seam(to_lonlat(ring, bbox, grid_shape))[::-1])
               for ring in polygon] for polygon in polygons]
    if not mapped:
        return []

    all_rings = [ring for polygon in mapped for ring in polygon]
    shared = shared_latitudes(all_rings)
    if not shared:
        return [GeoPolygon(rings=tuple(polygon)) for polygon in mapped]

    mapped = [[offset_unshared(ring, shared) for ring in polygon]
              for polygon in mapped]
    if not any(v == BOTH_SIDES for v in shared.values()):
        return [GeoPolygon(rings=tuple(polygon)) for polygon in mapped]

    logger.debug("Stitching %d rings across the antimeridian", len(all_rings))
    rings = stitch([ring for polygon in mapped for ring in polygon])
    if not rings:
        if strict:
            raise MappingDegenerate("Antimeridian stitching left no geometry")
        logger.info("Antimeridian stitching left no geometry, using the sphere")
        return [SPHERE]
    regrouped = _regroup(rings)
    if not regrouped:
        if strict:
            raise MappingDegenerate("Antimeridian stitching left no outer ring")
        return [SPHERE]
    return regrouped
