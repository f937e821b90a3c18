"""Exceptions raised by the layout engine."""


class LayoutError(Exception):
    """Base class for layout engine errors."""


class InvalidIdentifierError(LayoutError, ValueError):
    """Unknown symbolic identifier (face, edge, corner, axis, view, model)."""


class InvalidEdgeError(InvalidIdentifierError):
    """No edge connects the requested pair of faces."""


class DegenerateVectorError(LayoutError, ValueError):
    """A zero-length vector was given where a direction is required."""
