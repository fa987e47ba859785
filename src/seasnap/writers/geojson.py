"""GeoJSON output of contour bands.

Each band becomes one ``Feature`` with a ``MultiPolygon`` geometry and
``value``, ``color``, ``variable`` and ``units`` properties. Ring
coordinates are explicitly closed as GeoJSON requires.
"""
import json
from typing import List

import numpy as np


def ring_coordinates(ring: np.ndarray) -> List[List[float]]:
    coords = [[float(lon), float(lat)] for lon, lat in ring]
    if coords and coords[0] != coords[-1]:
        coords.append(list(coords[0]))
    return coords


def feature(band, variable: str = "", units: str = "") -> dict:
    """Build the ``Feature`` of one classified band."""
    return {
        "type": "Feature",
        "properties": {
            "value": float(band.value),
            "color": band.color.hex,
            "variable": variable,
            "units": units,
        },
        "geometry": {
            "type": "MultiPolygon",
            "coordinates": [[ring_coordinates(ring) for ring in polygon.rings]
                            for polygon in band.geometry],
        },
    }


def feature_collection(bands, variable: str = "", units: str = "") -> dict:
    """Combine the features of all bands into one ``FeatureCollection``."""
    return {
        "type": "FeatureCollection",
        "features": [feature(band, variable, units) for band in bands],
    }


def dumps(bands, variable: str = "", units: str = "") -> str:
    """Serialize bands to compact GeoJSON text."""
    return json.dumps(feature_collection(bands, variable, units),
                      separators=(",", ":"))
