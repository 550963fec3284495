"""
Clustering state threaded through the epochs of a run.

Each epoch derives a new ``ClusteringState`` from the previous one, so two
successive states can always be compared side by side.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from .config import Bound, Configuration
from .distance import pairwise_distances
from .errors import DimensionMismatch

RandomLike = Union[None, int, np.random.Generator]


def as_generator(rng: RandomLike):
    """Turn a seed (or ``None``) into a numpy Generator; pass generators through."""
    if rng is None or isinstance(rng, (int, np.integer)):
        return np.random.default_rng(rng)
    return rng


def empty_group(dim: int) -> np.ndarray:
    return np.empty((0, dim), dtype=np.float64)


@dataclass(frozen=True)
class ClusteringState:
    """
    Snapshot of a run after a given number of epochs.

    ``centroids[i]`` and ``groups[i]`` always describe the same cluster ``i``.
    A centroid is ``None`` when it is undefined.
    """

    config: Configuration
    centroids: Tuple[Optional[np.ndarray], ...]
    groups: Tuple[np.ndarray, ...]
    current_epoch: int = 0
    empty_clusters: Tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self):
        k = self.config.k_clusters
        if len(self.centroids) != k or len(self.groups) != k:
            raise DimensionMismatch(
                f"expected {k} centroids and groups, got "
                f"{len(self.centroids)} and {len(self.groups)}",
                expected=k,
            )

    @property
    def max_epochs(self) -> int:
        return self.config.max_epochs

    @property
    def threshold(self) -> float:
        return self.config.threshold

    @property
    def dimensions(self) -> int:
        return self.config.dimensions

    def with_empty_groups(self) -> "ClusteringState":
        """Same centroids and epoch, every group emptied."""
        groups = tuple(empty_group(self.dimensions) for _ in self.groups)
        return replace(self, groups=groups)

    def group_sizes(self) -> Tuple[int, ...]:
        return tuple(len(group) for group in self.groups)

    def labels_for(self, points: np.ndarray) -> np.ndarray:
        """Index of the nearest centroid for each point (lowest index on ties)."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, self.dimensions)
        if len(points) == 0:
            return np.empty(0, dtype=np.int64)
        return np.argmin(pairwise_distances(points, self.centroids), axis=1)

    def inertia(self) -> float:
        """Within-cluster sum of squared distances to each group's centroid."""
        total = 0.0
        for centroid, group in zip(self.centroids, self.groups):
            if centroid is None or len(group) == 0:
                continue
            total += float(np.sum((group - centroid) ** 2))
        return total


def generate_centroid(bounds: Sequence[Bound], rng: RandomLike = None) -> np.ndarray:
    """
    Draw one centroid uniformly inside the bounds.

    Each coordinate is a continuous draw from [low, high); a dimension with
    low == high always yields that constant.
    """
    rng = as_generator(rng)
    lows = np.array([low for low, _ in bounds], dtype=np.float64)
    highs = np.array([high for _, high in bounds], dtype=np.float64)
    centroid = np.asarray(rng.uniform(lows, highs), dtype=np.float64).reshape(len(bounds))
    # Guard the degenerate dimensions against rounding
    return np.where(lows == highs, lows, centroid)


def initial_state(config: Configuration, rng: RandomLike = None) -> ClusteringState:
    """k independent random centroids, k empty groups, epoch 0."""
    rng = as_generator(rng)
    centroids = tuple(
        generate_centroid(config.bounds, rng) for _ in range(config.k_clusters)
    )
    groups = tuple(empty_group(config.dimensions) for _ in range(config.k_clusters))
    return ClusteringState(config=config, centroids=centroids, groups=groups)
