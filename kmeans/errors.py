"""Exceptions raised by the clustering engine."""


class KMeansError(Exception):
    """Base class for every error raised by this package."""


class InvalidConfiguration(KMeansError, ValueError):
    """Raised when a configuration cannot describe a valid run."""


class DimensionMismatch(KMeansError, ValueError):
    """Raised when points (or centroids) do not share the same dimensionality."""

    def __init__(self, message: str, expected: int = None, actual: int = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
