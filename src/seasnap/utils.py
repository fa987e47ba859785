"""Small helpers shared across seasnap modules."""
from . import config


def vprint(text, level=0):
    """Print text if verbose mode is enabled.

    Parameters
    ----------
    text : str
        Text to print.
    level : int, optional
        Minimum verbosity needed for the message to show, by default 0.
    """
    verbose = config.settings.get("verbose", False)
    if verbose is True:
        verbose = 1
    if verbose and int(verbose) > level:
        print(text)
