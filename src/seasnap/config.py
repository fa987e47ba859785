"""Configuration management for seasnap.

This module handles loading and managing configuration settings using
Dynaconf. Settings are loaded from multiple locations in order of
increasing priority:

1. Global settings (/etc/seasnap/)
2. User settings (~/.config/seasnap/)
3. Current directory settings (./)
4. Environment variable specified file (SEASNAP_SETTINGS_FILE_FOR_DYNACONF)

Recognized keys, all optional and read with ``settings.get``:

``steps``, ``min_threshold``, ``max_threshold``
    Threshold planning in ``pipeline.snapshot``; ``steps`` defaults to
    ``DEFAULT_STEPS`` and the bounds to the field extent.
``num_workers``
    Process count for ``contours.extract`` via ``pipeline.snapshot``.
``cmap``
    Matplotlib colormap name for ``classify.color_for``, ``DEFAULT_CMAP``
    if unset.
``outputs``, ``png_scale``
    Output kinds and PNG pixels per grid cell in
    ``pipeline.write_outputs``.
``verbose``
    Progress printing in ``utils.vprint``; set by the CLI's
    ``--verbose/--quiet``.

Attributes
----------
USER_DIR : pathlib.Path
    Path to user configuration directory.
GLOB_DIR : pathlib.Path
    Path to global configuration directory.
CURR_DIR : pathlib.Path
    Path to current working directory.
settings : Dynaconf
    The Dynaconf settings object with loaded configuration.
"""
import os
import pathlib

from dynaconf import Dynaconf

USER_DIR = pathlib.Path("~/.config/seasnap").expanduser()
GLOB_DIR = pathlib.Path("/etc/seasnap/")
CURR_DIR = pathlib.Path("./").absolute()
settings_files = [
    GLOB_DIR / "settings.toml",
    GLOB_DIR / ".secrets.toml",
    USER_DIR / "settings.toml",
    USER_DIR / ".secrets.toml",
    CURR_DIR / "settings.toml",
    CURR_DIR / ".secrets.toml"
    ]
extra_file = os.getenv("SEASNAP_SETTINGS_FILE_FOR_DYNACONF")
if extra_file:
    settings_files.append(pathlib.Path(extra_file).absolute())

DEFAULT_STEPS = 20
DEFAULT_OUTPUTS = ("png",)
DEFAULT_CMAP = "RdBu"

settings = Dynaconf(
    merge_enabled=True,
    envvar_prefix="SEASNAP",
    settings_files=settings_files,
    environments=True,
    load_dotenv=True,
)


def change_env(new_env):
    """Change the active Dynaconf environment.

    Parameters
    ----------
    new_env : str
        The environment name to switch to (e.g., 'development', 'production').
    """
    settings.setenv(new_env)
    settings.reload()
