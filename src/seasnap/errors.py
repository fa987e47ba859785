"""Exception types raised by seasnap."""


class SeasnapError(Exception):
    """Base class for all seasnap errors."""


class InvalidConfig(SeasnapError, ValueError):
    """Rejected configuration: step count, bbox, grid shape or outputs."""


class OutOfRange(SeasnapError, IndexError):
    """Grid index access beyond the field's bounds."""


class EmptyGeometry(SeasnapError):
    """A threshold with no contour crossing the field.

    Only raised by ``contours.extract_band(..., strict=True)``; the
    pipeline keeps empty bands as valid results.
    """


class MappingDegenerate(SeasnapError):
    """Antimeridian stitching collapsed a non-empty band to nothing.

    Only raised by ``geomapper.to_geographic(..., strict=True)``; by
    default the band is replaced with the full-sphere polygon.
    """


class MessageNotFound(SeasnapError, KeyError):
    """Requested variable key is absent from the decoded message set."""
