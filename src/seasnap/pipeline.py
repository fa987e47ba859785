"""One rendering request: plan, contour, map, classify and write.

Every stage returns a new value; the field is never modified.
"""
import logging
import pathlib
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from . import config, contours, geomapper, thresholds
from .classify import ClassifiedBand, classify
from .errors import InvalidConfig
from .grid import GridField
from .utils import vprint
from .writers import geojson, png, svg

logger = logging.getLogger(__name__)

OUTPUT_KINDS = ("svg", "png", "geojson")
EXTENSIONS = {"svg": "svg", "png": "png", "geojson": "json"}


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Classified contours of one field."""

    field: GridField
    thresholds: Tuple[float, ...]
    domain: Tuple[float, float]
    bands: Tuple[ClassifiedBand, ...]

    def svg(self) -> str:
        return svg.to_svg(self.bands, self.field.width, self.field.height)

    def png(self, scale: float = 1) -> bytes:
        return png.to_png(self.bands, self.field.width, self.field.height, scale=scale)

    def geojson(self) -> dict:
        return geojson.feature_collection(self.bands, self.field.variable,
                                          self.field.units)


def snapshot(field: GridField, steps: Optional[int] = None,
             min_threshold: Optional[float] = None,
             max_threshold: Optional[float] = None,
             cmap: Optional[str] = None,
             num_workers: Optional[int] = None) -> Snapshot:
    """Contour and classify a field.

    Grids spanning 360 degrees of longitude are contoured with their first
    column repeated at the end, so bands crossing the wrap column are
    stitched across the antimeridian instead of being cut open.

    Unset options fall back to the ``steps``, ``min_threshold``,
    ``max_threshold``, ``cmap`` and ``num_workers`` settings.

    Raises
    ------
    InvalidConfig
        On a bad step count or threshold range, before any contouring.
    """
    settings = config.settings
    steps = steps if steps is not None else settings.get("steps", config.DEFAULT_STEPS)
    if min_threshold is None:
        min_threshold = settings.get("min_threshold")
    if max_threshold is None:
        max_threshold = settings.get("max_threshold")
    num_workers = num_workers if num_workers is not None else settings.get("num_workers")

    levels = thresholds.plan(field, steps, min_threshold, max_threshold)
    vmin, vmax = thresholds.plan_range(field, min_threshold, max_threshold)
    vprint(f"min: {vmin}, max: {vmax}, steps: {len(levels)}")

    source = field.periodic() if field.is_periodic else field
    bands = contours.extract(source, levels, num_workers=num_workers)
    geometries = [geomapper.to_geographic(band.polygons, field.bbox, field.shape)
                  for band in bands]
    domain = (vmax, vmin)
    classified = classify(bands, geometries, domain, cmap=cmap)
    logger.debug("%s: %d bands, %d polygons", field.variable, len(classified),
                 sum(len(band.polygons) for band in classified))
    return Snapshot(field=field, thresholds=tuple(levels), domain=domain,
                    bands=tuple(classified))


def default_output_path(variable: str, kind: str) -> pathlib.Path:
    """``./<variable>.<ext>`` with filename-unsafe characters replaced."""
    name = re.sub(r"[/\\:]", "_", variable) or "field"
    return pathlib.Path(".") / f"{name}.{EXTENSIONS[kind]}"


def validate_outputs(outputs: Iterable[str]) -> List[str]:
    outputs = [kind.lower() for kind in outputs]
    unknown = sorted(set(outputs) - set(OUTPUT_KINDS))
    if unknown:
        raise InvalidConfig(f"Unknown output kinds: {', '.join(unknown)}")
    return [kind for kind in OUTPUT_KINDS if kind in outputs]


def write_outputs(snap: Snapshot, outputs: Optional[Iterable[str]] = None,
                  svg_path=None, png_path=None, geojson_path=None,
                  png_scale: Optional[float] = None) -> Dict[str, pathlib.Path]:
    """Write the requested outputs of a snapshot.

    Parameters
    ----------
    snap : Snapshot
        Classified contours.
    outputs : iterable of str, optional
        Any of ``svg``, ``png`` and ``geojson``. Defaults to the
        ``outputs`` setting, or ``png`` only.
    svg_path, png_path, geojson_path : str or pathlib.Path, optional
        Output files; default to ``./<variable>.<ext>``.
    png_scale : float, optional
        Pixels per grid cell for the PNG, by default the ``png_scale``
        setting or 1.

    Returns
    -------
    dict
        Output kind to the path written.
    """
    if outputs is None:
        outputs = config.settings.get("outputs", config.DEFAULT_OUTPUTS)
    kinds = validate_outputs(outputs)
    if png_scale is None:
        png_scale = config.settings.get("png_scale", 1)
    paths = {"svg": svg_path, "png": png_path, "geojson": geojson_path}

    written = {}
    for kind in kinds:
        fn = pathlib.Path(paths[kind] or default_output_path(snap.field.variable, kind))
        fn.parent.mkdir(parents=True, exist_ok=True)
        if kind == "svg":
            vprint("Writing to SVG file...")
            fn.write_text(snap.svg())
        elif kind == "png":
            vprint("Rendering contours to image...")
            fn.write_bytes(snap.png(scale=png_scale))
        else:
            vprint("Writing to GeoJSON file...")
            fn.write_text(geojson.dumps(snap.bands, snap.field.variable,
                                        snap.field.units))
        logger.info("Wrote %s output to %s", kind, fn)
        written[kind] = fn
    return written
