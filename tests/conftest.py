"""Shared pytest fixtures for seasnap tests."""

import json
import tempfile
from pathlib import Path

import numpy as np
import pytest

from seasnap.grid import GridField


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def wave_record():
    """Provide a decoded wave-height record with a single smooth peak."""
    rows, cols = 6, 8
    yy, xx = np.mgrid[0:rows, 0:cols]
    values = 10 * np.exp(-((xx - 3.5) ** 2 + (yy - 2.5) ** 2) / 4)
    return {
        "values": values.ravel().tolist(),
        "rows": rows,
        "cols": cols,
        "bbox": [-70.0, -45.0, -10.0, -10.0],
        "variable": "HTSGW",
        "units": "m",
    }


@pytest.fixture
def wave_field(wave_record):
    """Provide the wave record as a GridField."""
    return GridField.from_record(wave_record)


@pytest.fixture
def corner_field():
    """Provide the 2x2 field [[0, 0], [0, 10]]."""
    return GridField(values=[0, 0, 0, 10], rows=2, cols=2, bbox=[0, 0, 2, 2])


@pytest.fixture
def record_file(temp_dir, wave_record):
    """Provide a JSON file holding two messages."""
    swell = dict(wave_record, variable="SWPER", units="s")
    fn = temp_dir / "messages.json"
    with open(fn, "w") as f:
        json.dump({"messages": {"HTSGW": wave_record, "SWPER": swell}}, f)
    return fn
