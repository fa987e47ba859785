"""Value-to-color classification.

Colors come from a continuous diverging matplotlib colormap (``RdBu`` by
default) over the domain ``(max, min)``: the high end of the data maps to
the start of the colormap (red) and the low end to its finish (blue).
"""
from dataclasses import dataclass
from typing import List, NamedTuple, Sequence, Tuple

import matplotlib
from matplotlib.colors import to_hex

from . import config


class RGBA(NamedTuple):
    """8-bit RGBA color."""

    r: int
    g: int
    b: int
    a: int = 255

    @property
    def hex(self) -> str:
        return to_hex((self.r / 255, self.g / 255, self.b / 255))

    @property
    def opacity(self) -> float:
        return self.a / 255


def normalize(value: float, domain: Tuple[float, float]) -> float:
    """Position of ``value`` along ``domain``, clipped to [0, 1].

    A degenerate domain maps everything to 0.
    """
    d0, d1 = domain
    if d1 == d0:
        return 0.0
    t = (value - d0) / (d1 - d0)
    return min(max(t, 0.0), 1.0)


def color_for(value: float, domain: Tuple[float, float], cmap: str = None) -> RGBA:
    """Return the color of ``value`` on a continuous scale over ``domain``.

    Parameters
    ----------
    value : float
        Value to classify.
    domain : tuple of float
        ``(max, min)`` of the data; the first entry maps to the start of
        the colormap.
    cmap : str, optional
        Matplotlib colormap name. Defaults to the ``cmap`` setting, or
        ``RdBu``.

    Returns
    -------
    RGBA
    """
    cmap = cmap or config.settings.get("cmap", config.DEFAULT_CMAP)
    colormap = matplotlib.colormaps[cmap]
    rgba = colormap(normalize(value, domain), bytes=True)
    return RGBA(*(int(c) for c in rgba))


@dataclass(frozen=True, eq=False)
class ClassifiedBand:
    """A band with its display color, in grid and geographic space."""

    value: float
    color: RGBA
    polygons: tuple
    geometry: tuple

    @property
    def is_empty(self) -> bool:
        return len(self.polygons) == 0


def classify(bands: Sequence, geometries: Sequence, domain: Tuple[float, float],
             cmap: str = None) -> List[ClassifiedBand]:
    """Pair each band with its color and geographic polygons."""
    return [ClassifiedBand(value=band.value,
                           color=color_for(band.value, domain, cmap=cmap),
                           polygons=tuple(band.polygons),
                           geometry=tuple(geometry))
            for band, geometry in zip(bands, geometries)]
