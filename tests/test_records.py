"""Tests for the seasnap.data_sources.records module."""

import json
from unittest.mock import MagicMock, patch

import numpy as np
import pytest
import xarray as xr

from seasnap.data_sources import available_messages, get_message, open_messages
from seasnap.errors import InvalidConfig, MessageNotFound
from seasnap.grid import GridField


class TestJsonRecords:
    """Tests for JSON record files."""

    def test_messages_file(self, record_file):
        """A messages file exposes every record by key."""
        assert available_messages(record_file) == ["HTSGW", "SWPER"]
        field = get_message(record_file, "SWPER")
        assert isinstance(field, GridField)
        assert field.units == "s"
        assert field.shape == (6, 8)

    def test_single_record(self, temp_dir, wave_record):
        """A single record is keyed by its variable."""
        fn = temp_dir / "wave.json"
        fn.write_text(json.dumps(wave_record))
        assert available_messages(fn) == ["HTSGW"]

    def test_single_record_without_variable(self, temp_dir, wave_record):
        """Without a variable the file stem becomes the key and variable."""
        record = dict(wave_record)
        del record["variable"]
        fn = temp_dir / "waves.json"
        fn.write_text(json.dumps(record))
        assert get_message(fn, "waves").variable == "waves"

    def test_missing_message(self, record_file):
        """Unknown keys raise MessageNotFound."""
        with pytest.raises(MessageNotFound):
            get_message(record_file, "PRMSL")

    def test_message_not_found_is_key_error(self, record_file):
        """MessageNotFound can be caught as KeyError."""
        with pytest.raises(KeyError):
            get_message(record_file, "PRMSL")

    def test_not_a_record(self, temp_dir):
        """A JSON file without a record object is rejected."""
        fn = temp_dir / "list.json"
        fn.write_text("[1, 2, 3]")
        with pytest.raises(InvalidConfig):
            open_messages(fn)

    def test_incomplete_record(self, temp_dir):
        """Records missing required keys are rejected."""
        fn = temp_dir / "bad.json"
        fn.write_text(json.dumps({"variable": "X", "values": [1, 2]}))
        with pytest.raises(InvalidConfig):
            open_messages(fn)


class TestDatasetRecords:
    """Tests for xarray-readable files."""

    @pytest.fixture
    def dataset(self):
        lat = np.array([-10.0, 0.0, 10.0])
        lon = np.array([0.0, 10.0, 20.0, 30.0])
        return xr.Dataset(
            {
                "sst": (("lat", "lon"), np.arange(12, dtype=float).reshape(3, 4),
                        {"units": "K"}),
                "station": (("n",), np.arange(5, dtype=float)),
            },
            coords={"lat": lat, "lon": lon},
        )

    def test_open_dataset(self, dataset):
        """Gridded variables become messages, others are skipped."""
        with patch("seasnap.data_sources.records.xr.open_dataset") as mock_open:
            mock_open.return_value = dataset
            messages = open_messages("forecast.nc")
        mock_open.assert_called_once()
        assert list(messages) == ["sst"]
        field = messages["sst"]
        assert field.shape == (3, 4)
        assert field.units == "K"
        assert field.value_at(0, 0) == 8.0

    def test_missing_variable(self, dataset):
        """Unknown variables raise MessageNotFound."""
        with patch("seasnap.data_sources.records.xr.open_dataset",
                   MagicMock(return_value=dataset)):
            with pytest.raises(MessageNotFound):
                get_message("forecast.nc", "wind")
