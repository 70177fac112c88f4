from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised for out-of-range inputs such as a padding of 50% or more."""


class DegenerateGeometryError(ValueError):
    """Raised when the frustum planes leave no unique camera position."""
