"""SVG output of contour bands in grid space.

Each polygon becomes one ``<path>`` whose data uses the SVG path
mini-language (``M``/``L``/``Z`` per ring, outer ring first) and whose fill
is the band color. The document's viewBox is ``0 0 width height``.
"""
from typing import Sequence

import numpy as np
from jinja2 import Template

SVG_TEMPLATE = Template("""\
<svg style="width: 100%; height: auto; display: block;" \
viewBox="0 0 {{ width }} {{ height }}" width="{{ width }}" height="{{ height }}" \
xmlns="http://www.w3.org/2000/svg">
{%- for path in paths %}
  <path d="{{ path.d }}" fill="{{ path.fill }}"{% if path.opacity < 1 %} fill-opacity="{{ path.opacity }}"{% endif %} />
{%- endfor %}
</svg>
""")


def fmt(value: float) -> str:
    """Format a coordinate with at most 4 decimals and no trailing zeros."""
    text = np.format_float_positional(round(float(value), 4), trim="-")
    return "0" if text == "-0" else text


def ring_path(ring: np.ndarray) -> str:
    moves = [f"{fmt(x)},{fmt(y)}" for x, y in ring]
    return "M" + "L".join(moves) + "Z"


def path_data(polygon: Sequence[np.ndarray]) -> str:
    """SVG path data for one polygon: outer ring, then holes."""
    return "".join(ring_path(ring) for ring in polygon if len(ring))


def to_svg(bands, width: int, height: int) -> str:
    """Render classified bands to an SVG document.

    Parameters
    ----------
    bands : sequence of seasnap.classify.ClassifiedBand
        Bands in painting order.
    width, height : int
        Document size; usually the grid's ``cols`` and ``rows``.

    Returns
    -------
    str
        The SVG text.
    """
    paths = [dict(d=path_data(polygon), fill=band.color.hex,
                  opacity=round(band.color.opacity, 4))
             for band in bands
             for polygon in band.polygons]
    return SVG_TEMPLATE.render(width=width, height=height, paths=paths)
