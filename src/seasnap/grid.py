"""Gridded scalar fields.

A ``GridField`` holds the decoded samples of one message on a regular
lat/lon grid. Row 0 is the northernmost row and column 0 the westernmost
column, matching the bounding box convention used by the GeoMapper.
"""
import logging
from dataclasses import dataclass
from typing import Mapping, NamedTuple, Optional, Tuple

import numpy as np

from .errors import InvalidConfig, OutOfRange

logger = logging.getLogger(__name__)

# Below any real threshold, so missing data never closes high-value contours.
SENTINEL = -9999999.0


class BBox(NamedTuple):
    """Geographic bounding box in degrees."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def parse(cls, bbox) -> "BBox":
        """Validate a 4-sequence ``(min_lon, min_lat, max_lon, max_lat)``.

        Longitudes may use either the -180..180 or the 0..360 convention.

        Raises
        ------
        InvalidConfig
            If the box is not four finite numbers with ordered, in-range
            bounds.
        """
        try:
            values = [float(v) for v in bbox]
        except (TypeError, ValueError) as err:
            raise InvalidConfig(f"Malformed bbox: {bbox!r}") from err
        if len(values) != 4:
            raise InvalidConfig(f"bbox needs 4 values, got {len(values)}")
        if not all(np.isfinite(values)):
            raise InvalidConfig(f"bbox has non-finite values: {values}")
        box = cls(*values)
        if not -90 <= box.min_lat <= box.max_lat <= 90:
            raise InvalidConfig(f"bbox latitudes out of order or range: {values}")
        if not -180 <= box.min_lon <= box.max_lon <= 360:
            raise InvalidConfig(f"bbox longitudes out of order or range: {values}")
        return box

    @property
    def lon_range(self) -> float:
        return self.max_lon - self.min_lon

    @property
    def lat_range(self) -> float:
        return self.max_lat - self.min_lat


@dataclass(frozen=True, eq=False)
class GridField:
    """Immutable scalar field sampled on a rectangular grid.

    Parameters
    ----------
    values : array-like
        ``rows * cols`` samples in row-major order, or a 2D array of
        shape ``(rows, cols)``.
    rows, cols : int
        Grid shape.
    bbox : sequence of float
        ``(min_lon, min_lat, max_lon, max_lat)``.
    variable : str, optional
        Variable key of the source message.
    units : str, optional
        Units of the samples.
    missing_value : float, optional
        Source-format missing value, replaced by ``SENTINEL`` along with
        NaN and infinities.

    Raises
    ------
    InvalidConfig
        If the shape does not match the number of samples or the bbox is
        malformed.
    """

    values: np.ndarray
    rows: int
    cols: int
    bbox: BBox
    variable: str = ""
    units: str = ""
    missing_value: Optional[float] = None

    def __post_init__(self):
        rows, cols = int(self.rows), int(self.cols)
        if rows < 1 or cols < 1:
            raise InvalidConfig(f"Grid shape must be positive, got {rows}x{cols}")
        data = np.array(self.values, dtype=np.float64).ravel()
        if data.size != rows * cols:
            raise InvalidConfig(
                f"Expected rows*cols = {rows * cols} values, got {data.size}")

        missing = ~np.isfinite(data)
        if self.missing_value is not None:
            missing |= data == float(self.missing_value)
        if missing.any():
            logger.debug("Replacing %d missing samples in %s",
                         int(missing.sum()), self.variable or "field")
            data[missing] = SENTINEL
        data = data.reshape(rows, cols)
        data.setflags(write=False)

        object.__setattr__(self, "values", data)
        object.__setattr__(self, "rows", rows)
        object.__setattr__(self, "cols", cols)
        object.__setattr__(self, "bbox", BBox.parse(self.bbox))

    @classmethod
    def from_record(cls, record: Mapping) -> "GridField":
        """Build a field from a decoded message record.

        The record carries ``values``, ``rows``, ``cols`` and ``bbox``, and
        optionally ``variable``, ``units`` and ``missing_value``.
        """
        try:
            return cls(
                values=record["values"],
                rows=record["rows"],
                cols=record["cols"],
                bbox=record["bbox"],
                variable=record.get("variable", ""),
                units=record.get("units", ""),
                missing_value=record.get("missing_value"),
            )
        except KeyError as err:
            raise InvalidConfig(f"Record is missing {err.args[0]!r}") from err

    @classmethod
    def from_dataarray(cls, da, variable=None) -> "GridField":
        """Build a field from an xarray DataArray with 1D lat/lon coordinates.

        Latitudes are flipped to descending order so that row 0 is the
        northernmost row. Longitudes are sorted ascending.

        Parameters
        ----------
        da : xarray.DataArray
            2D array (after squeezing) with ``latitude``/``longitude`` or
            ``lat``/``lon`` coordinates.
        variable : str, optional
            Overrides ``da.name`` as the variable key.
        """
        da = da.squeeze(drop=True)
        lat_name = "latitude" if "latitude" in da.coords else "lat"
        lon_name = "longitude" if "longitude" in da.coords else "lon"
        if lat_name not in da.coords or lon_name not in da.coords:
            raise InvalidConfig("DataArray needs latitude and longitude coordinates")
        da = da.transpose(lat_name, lon_name)
        da = da.sortby(lat_name, ascending=False).sortby(lon_name)

        lats = np.asarray(da[lat_name].values, dtype=np.float64)
        lons = np.asarray(da[lon_name].values, dtype=np.float64)
        bbox = (lons.min(), lats.min(), lons.max(), lats.max())
        return cls(
            values=np.asarray(da.values),
            rows=lats.size,
            cols=lons.size,
            bbox=bbox,
            variable=variable or (da.name or ""),
            units=da.attrs.get("units", ""),
            missing_value=da.attrs.get("missing_value"),
        )

    @property
    def is_periodic(self) -> bool:
        """True when the columns cover the full circle of longitude."""
        return bool(np.isclose(self.bbox.lon_range, 360.0))

    def periodic(self) -> "GridField":
        """Return the field with column 0 repeated after the last column.

        Contours of the result can reach ``x == cols``, where the grid wraps
        around. Map them with this field's ``shape`` and ``bbox``, not the
        result's.
        """
        values = np.concatenate([self.values, self.values[:, :1]], axis=1)
        return GridField(values=values, rows=self.rows, cols=self.cols + 1,
                         bbox=self.bbox, variable=self.variable, units=self.units)

    @property
    def width(self) -> int:
        return self.cols

    @property
    def height(self) -> int:
        return self.rows

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    def value_at(self, row: int, col: int) -> float:
        """Return the sample at ``(row, col)``.

        Raises
        ------
        OutOfRange
            If either index lies outside the grid. Negative indices are
            not wrapped.
        """
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise OutOfRange(
                f"({row}, {col}) outside grid of shape {self.rows}x{self.cols}")
        return float(self.values[row, col])

    def valid_mask(self) -> np.ndarray:
        """Boolean mask of samples that are real data."""
        return self.values != SENTINEL

    def extent(self) -> Tuple[float, float]:
        """Return ``(min, max)`` over real samples, or NaNs if there are none."""
        valid = self.values[self.valid_mask()]
        if valid.size == 0:
            return (float("nan"), float("nan"))
        return (float(valid.min()), float(valid.max()))
