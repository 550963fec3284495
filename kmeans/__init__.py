"""
K-means clustering (Lloyd's algorithm) for points of any dimensionality.
"""

from .config import Configuration, DEFAULT_MAX_EPOCHS, DEFAULT_THRESHOLD
from .distance import distance, pairwise_distances
from .errors import DimensionMismatch, InvalidConfiguration, KMeansError
from .kmeans import (
    KMeans,
    assign_points,
    classify_point,
    converged,
    mean_point,
    run,
    update_centroids,
)
from .state import ClusteringState, generate_centroid, initial_state
from .version import __version__

__all__ = [
    "KMeans",
    "Configuration",
    "ClusteringState",
    "DEFAULT_MAX_EPOCHS",
    "DEFAULT_THRESHOLD",
    "KMeansError",
    "InvalidConfiguration",
    "DimensionMismatch",
    "distance",
    "pairwise_distances",
    "generate_centroid",
    "initial_state",
    "classify_point",
    "assign_points",
    "mean_point",
    "update_centroids",
    "converged",
    "run",
]
