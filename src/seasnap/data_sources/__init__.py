"""Access to decoded message records.

This package contains modules that load already-decoded gridded messages
(JSON records or xarray-readable files) into ``GridField`` objects.
"""

from .records import open_messages, available_messages, get_message
