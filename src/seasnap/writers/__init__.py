"""Serializers for classified contour bands.

This package contains modules that turn classified bands into SVG
documents, PNG images and GeoJSON feature collections.
"""

from .svg import path_data, to_svg
from .geojson import feature, feature_collection
from .png import to_png
