"""Decoded message records.

A record is the output of a GRIB decoder, reduced to what contouring
needs::

    {"values": [...], "rows": 2, "cols": 3,
     "bbox": [min_lon, min_lat, max_lon, max_lat],
     "variable": "HTSGW", "units": "m"}

Files ending in ``.json`` hold either one record or
``{"messages": {key: record, ...}}``. Any other file is opened with
xarray, and each data variable with latitude/longitude dimensions becomes
one message keyed by its name.
"""
import json
import logging
import pathlib
from typing import Dict, List

import xarray as xr

from ..errors import InvalidConfig, MessageNotFound
from ..grid import GridField

logger = logging.getLogger(__name__)

LAT_NAMES = ("latitude", "lat")
LON_NAMES = ("longitude", "lon")


def _json_messages(fn: pathlib.Path) -> Dict[str, GridField]:
    with open(fn, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise InvalidConfig(f"{fn} does not hold a message record")
    if "messages" in data:
        records = data["messages"]
    else:
        records = {data.get("variable") or fn.stem: data}
    messages = {}
    for key, record in records.items():
        record = dict(record)
        record.setdefault("variable", key)
        messages[key] = GridField.from_record(record)
    return messages


def _has_latlon(da) -> bool:
    return (any(name in da.coords for name in LAT_NAMES)
            and any(name in da.coords for name in LON_NAMES))


def _dataset_messages(fn: pathlib.Path) -> Dict[str, GridField]:
    messages = {}
    with xr.open_dataset(fn) as ds:
        for name, da in ds.data_vars.items():
            if not _has_latlon(da):
                logger.debug("Skipping %s without lat/lon coordinates", name)
                continue
            if da.squeeze(drop=True).ndim != 2:
                logger.debug("Skipping %s with dims %s", name, da.dims)
                continue
            messages[str(name)] = GridField.from_dataarray(da.load(), variable=str(name))
    return messages


def open_messages(path) -> Dict[str, GridField]:
    """Load all messages in a file.

    Parameters
    ----------
    path : str or pathlib.Path
        JSON record file or xarray-readable file (e.g. NetCDF).

    Returns
    -------
    dict
        Variable key to ``GridField``.
    """
    fn = pathlib.Path(path)
    if fn.suffix.lower() == ".json":
        return _json_messages(fn)
    return _dataset_messages(fn)


def available_messages(path) -> List[str]:
    """Return the variable keys available in a file."""
    return list(open_messages(path))


def get_message(path, key: str) -> GridField:
    """Return the message with variable key ``key``.

    Raises
    ------
    MessageNotFound
        If the file has no message with that key.
    """
    messages = open_messages(path)
    try:
        return messages[key]
    except KeyError:
        raise MessageNotFound(key) from None
