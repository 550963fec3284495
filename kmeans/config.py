"""
Run configuration for the clustering engine.

A ``Configuration`` is immutable and is shared by every epoch of a run.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Tuple

import numpy as np

from .distance import as_points
from .errors import InvalidConfiguration

# Defaults used by the reference example configurations
DEFAULT_MAX_EPOCHS = 1000
DEFAULT_THRESHOLD = 1e-4

Bound = Tuple[float, float]


def _is_int(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _normalize_bounds(bounds: Sequence[Sequence[float]]) -> Tuple[Bound, ...]:
    normalized = []
    for dim, bound in enumerate(bounds):
        try:
            low, high = bound
            low, high = float(low), float(high)
        except (TypeError, ValueError):
            raise InvalidConfiguration(
                f"bound for dimension {dim} must be a (low, high) pair, got {bound!r}"
            )
        normalized.append((low, high))
    return tuple(normalized)


@dataclass(frozen=True)
class Configuration:
    """
    Immutable description of one clustering run.

    Args:
        k_clusters: Number of clusters
        max_epochs: Hard iteration cap (a run stops once the epoch exceeds it)
        threshold: Convergence tolerance on centroid movement
        bounds: One (low, high) pair per dimension, used to draw initial centroids
    """

    k_clusters: int
    bounds: Tuple[Bound, ...]
    max_epochs: int = DEFAULT_MAX_EPOCHS
    threshold: float = DEFAULT_THRESHOLD

    def __post_init__(self):
        if self.bounds is None:
            raise InvalidConfiguration("bounds are required")
        object.__setattr__(self, "bounds", _normalize_bounds(self.bounds))

    @property
    def dimensions(self) -> int:
        return len(self.bounds)

    def validate(self) -> "Configuration":
        """Raise ``InvalidConfiguration`` unless the configuration is usable."""
        if not _is_int(self.k_clusters) or self.k_clusters <= 0:
            raise InvalidConfiguration(
                f"k_clusters must be a positive integer, got {self.k_clusters!r}"
            )
        if not _is_int(self.max_epochs) or self.max_epochs <= 0:
            raise InvalidConfiguration(
                f"max_epochs must be a positive integer, got {self.max_epochs!r}"
            )
        if (
            not isinstance(self.threshold, numbers.Real)
            or math.isnan(self.threshold)
            or self.threshold < 0
        ):
            raise InvalidConfiguration(
                f"threshold must be a non-negative number, got {self.threshold!r}"
            )
        if not self.bounds:
            raise InvalidConfiguration("bounds must cover at least one dimension")
        for dim, (low, high) in enumerate(self.bounds):
            if not (math.isfinite(low) and math.isfinite(high)):
                raise InvalidConfiguration(f"bound for dimension {dim} is not finite")
            if low > high:
                raise InvalidConfiguration(
                    f"bound for dimension {dim} has low > high ({low} > {high})"
                )
        return self

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Configuration":
        """Build a configuration from a plain mapping (e.g. parsed JSON)."""
        # Accept both k_clusters and k-clusters spellings
        normalized = {str(key).replace("-", "_"): value for key, value in data.items()}
        missing = [key for key in ("k_clusters", "bounds") if key not in normalized]
        if missing:
            raise InvalidConfiguration(f"missing configuration keys: {', '.join(missing)}")
        return cls(
            k_clusters=normalized["k_clusters"],
            bounds=normalized["bounds"],
            max_epochs=normalized.get("max_epochs", DEFAULT_MAX_EPOCHS),
            threshold=normalized.get("threshold", DEFAULT_THRESHOLD),
        )

    @classmethod
    def from_points(
        cls,
        points: np.ndarray,
        k_clusters: int,
        max_epochs: int = DEFAULT_MAX_EPOCHS,
        threshold: float = DEFAULT_THRESHOLD,
        bounds: Optional[Sequence[Sequence[float]]] = None,
    ) -> "Configuration":
        """Configuration whose bounds span the data, per dimension."""
        if bounds is None:
            points = as_points(points)
            if points.ndim != 2 or points.shape[0] == 0:
                raise InvalidConfiguration("cannot derive bounds from an empty dataset")
            bounds = list(zip(points.min(axis=0).tolist(), points.max(axis=0).tolist()))
        return cls(
            k_clusters=k_clusters,
            bounds=bounds,
            max_epochs=max_epochs,
            threshold=threshold,
        )

    def to_dict(self) -> dict:
        return {
            "k_clusters": self.k_clusters,
            "max_epochs": self.max_epochs,
            "threshold": self.threshold,
            "bounds": [list(bound) for bound in self.bounds],
        }
