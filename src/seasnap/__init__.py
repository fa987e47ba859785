"""Contour snapshots of gridded forecast and radar fields.

Typical use::

    import seasnap

    field = seasnap.GridField.from_record(record)
    snap = seasnap.snapshot(field, steps=20)
    seasnap.write_outputs(snap, ["svg", "geojson"])
"""

from . import config
from .errors import (SeasnapError, InvalidConfig, OutOfRange, EmptyGeometry,
                     MappingDegenerate, MessageNotFound)
from .grid import GridField, BBox, SENTINEL
from .thresholds import plan
from .contours import Band, extract
from .geomapper import GeoPolygon, to_geographic
from .classify import RGBA, ClassifiedBand, color_for
from .pipeline import Snapshot, snapshot, write_outputs


def render(record, outputs=None, **kw):
    """Contour a decoded message record and write the requested outputs.

    Parameters
    ----------
    record : mapping
        ``{values, rows, cols, bbox, variable, units}`` message record.
    outputs : iterable of str, optional
        Any of ``svg``, ``png`` and ``geojson``.
    **kw
        ``steps``, ``min_threshold``, ``max_threshold``, ``cmap`` and
        ``num_workers`` go to ``snapshot``; the output path options go to
        ``write_outputs``.

    Returns
    -------
    dict
        Output kind to the path written.
    """
    snap_keys = ("steps", "min_threshold", "max_threshold", "cmap", "num_workers")
    snap_kw = {key: kw.pop(key) for key in snap_keys if key in kw}
    snap = snapshot(GridField.from_record(record), **snap_kw)
    return write_outputs(snap, outputs, **kw)
