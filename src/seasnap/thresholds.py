"""Threshold selection for contouring.

Thresholds are spaced evenly from the lower bound, ``min + i/steps *
(max - min)`` for ``i`` in ``[0, steps)``, so the upper bound itself is
never a threshold.
"""
import logging
import math
from numbers import Integral
from typing import Optional, Tuple

from .errors import InvalidConfig

logger = logging.getLogger(__name__)


def plan_range(field, min_threshold: Optional[float] = None,
               max_threshold: Optional[float] = None) -> Tuple[float, float]:
    """Resolve the ``(min, max)`` range used for thresholds and coloring.

    Each bound falls back to the field's extent only when its override is
    missing; with both overrides the field is not inspected at all.

    Raises
    ------
    InvalidConfig
        If a resolved bound is not finite, e.g. for an all-missing field.
    """
    if min_threshold is None or max_threshold is None:
        field_min, field_max = field.extent()
    vmin = float(min_threshold) if min_threshold is not None else field_min
    vmax = float(max_threshold) if max_threshold is not None else field_max
    if not (math.isfinite(vmin) and math.isfinite(vmax)):
        raise InvalidConfig(f"Threshold range is not finite: ({vmin}, {vmax})")
    if vmax < vmin:
        logger.info("Inverted threshold range (%s, %s), thresholds descend",
                    vmin, vmax)
    return vmin, vmax


def validate_steps(steps) -> int:
    """Return ``steps`` as an int, raising ``InvalidConfig`` unless >= 1."""
    if isinstance(steps, bool) or not isinstance(steps, Integral):
        raise InvalidConfig(f"steps must be an integer, got {steps!r}")
    if steps <= 0:
        raise InvalidConfig(f"steps must be positive, got {steps}")
    return int(steps)


def plan(field, steps: int = 20, min_threshold: Optional[float] = None,
         max_threshold: Optional[float] = None) -> Tuple[float, ...]:
    """Derive the ordered iso-values to contour.

    Parameters
    ----------
    field : seasnap.grid.GridField
        Field whose extent supplies missing bounds.
    steps : int, optional
        Number of thresholds, by default 20.
    min_threshold : float, optional
        Overrides the field minimum.
    max_threshold : float, optional
        Overrides the field maximum.

    Returns
    -------
    tuple of float
        ``steps`` thresholds. Increasing for a normal range, all equal to
        ``min`` for a flat one and decreasing if ``max < min``.

    Raises
    ------
    InvalidConfig
        If ``steps`` is not a positive integer or the range is not finite.
    """
    steps = validate_steps(steps)
    vmin, vmax = plan_range(field, min_threshold, max_threshold)
    span = vmax - vmin
    return tuple(vmin + i / steps * span for i in range(steps))
