"""Error types raised by the outcome tally and its renderers."""

from __future__ import annotations


class TallyError(ValueError):
    """Base class for invalid tally inputs."""


class InvalidDimension(TallyError):
    """Matrix, vector or table shapes do not agree."""


class InvalidArgument(TallyError):
    """A scalar or categorical argument is out of its allowed range."""
