"""
K-means clustering engine (Lloyd's algorithm).

Works in any number of dimensions. One run alternates two steps until the
centroids stop moving or the epoch cap is exceeded:

- assignment: every point joins the group of its nearest centroid
- update: every centroid moves to the mean of its group
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence

import numpy as np

from .config import DEFAULT_MAX_EPOCHS, DEFAULT_THRESHOLD, Configuration
from .distance import as_points, distance, pairwise_distances
from .errors import DimensionMismatch
from .state import ClusteringState, RandomLike, as_generator, initial_state

logger = logging.getLogger(__name__)


def classify_point(state: ClusteringState, point) -> ClusteringState:
    """
    Add ``point`` to the group of its nearest centroid.

    Ties go to the lowest cluster index. Undefined centroids are never chosen
    while a defined one exists.
    """
    row = as_points([point], state.dimensions)
    index = int(np.argmin(pairwise_distances(row, state.centroids)[0]))
    groups = list(state.groups)
    groups[index] = np.vstack([groups[index], row])
    return replace(state, groups=tuple(groups))


def assign_points(state: ClusteringState, points: np.ndarray) -> ClusteringState:
    """
    Partition ``points`` over the current centroids.

    Equivalent to folding ``classify_point`` over every point in order, but
    done in one pass against the same centroid snapshot. Existing group
    members are kept, so callers start from ``state.with_empty_groups()``.
    """
    points = as_points(points, state.dimensions)
    if len(points) == 0:
        return state

    labels = np.argmin(pairwise_distances(points, state.centroids), axis=1)
    groups = tuple(
        np.vstack([group, points[labels == index]])
        for index, group in enumerate(state.groups)
    )
    return replace(state, groups=groups)


def mean_point(group) -> Optional[np.ndarray]:
    """Coordinate-wise mean of the group, or ``None`` if the group is empty."""
    group = np.asarray(group, dtype=np.float64)
    if group.size == 0:
        return None
    return group.reshape(len(group), -1).mean(axis=0)


def update_centroids(state: ClusteringState) -> ClusteringState:
    """
    Move every centroid to the mean of its group and advance the epoch.

    A cluster whose group is empty keeps its previous centroid; its index is
    recorded in ``empty_clusters``. Groups are left as they are.
    """
    centroids = []
    empty = []
    for index, (previous, group) in enumerate(zip(state.centroids, state.groups)):
        mean = mean_point(group)
        if mean is None:
            empty.append(index)
            mean = previous
        centroids.append(mean)

    if empty:
        logger.warning(
            "Epoch %d: %d empty cluster(s) %s kept their previous centroid",
            state.current_epoch + 1,
            len(empty),
            empty,
        )

    return replace(
        state,
        centroids=tuple(centroids),
        current_epoch=state.current_epoch + 1,
        empty_clusters=tuple(empty),
    )


def converged(previous: ClusteringState, current: ClusteringState) -> bool:
    """
    True once the epoch cap is exceeded, or when every centroid moved by
    strictly less than the threshold. A centroid that did not move at all
    counts as converged even with a zero threshold; an undefined centroid on
    either side counts as not converged.
    """
    if current.current_epoch > current.max_epochs:
        return True

    if len(previous.centroids) != len(current.centroids):
        raise DimensionMismatch(
            "cannot compare states with different numbers of centroids",
            expected=len(previous.centroids),
            actual=len(current.centroids),
        )

    for before, after in zip(previous.centroids, current.centroids):
        if before is None or after is None:
            return False
        moved = distance(after, before)
        if moved != 0.0 and not moved < current.threshold:
            return False
    return True


def run(
    config: Configuration, points: Sequence, rng: RandomLike = None
) -> ClusteringState:
    """
    Cluster ``points`` according to ``config``.

    Args:
        config: Run configuration; validated before anything else happens
        points: Sequence (or (n, d) array) of points with d == len(config.bounds)
        rng: Seed or numpy Generator used for the initial centroids

    Returns:
        The terminal state: final centroids, final groups and epoch count

    Raises:
        InvalidConfiguration: if the configuration is unusable
        DimensionMismatch: if any point does not have d coordinates
    """
    config.validate()
    points = as_points(points, config.dimensions)
    if len(points) == 0:
        logger.warning("No points to cluster; every group will stay empty")

    state = initial_state(config, rng)
    logger.debug(
        "Clustering %d points in %d dimensions into %d clusters",
        len(points),
        config.dimensions,
        config.k_clusters,
    )

    while True:
        with_points = assign_points(state.with_empty_groups(), points)
        with_new_centroids = update_centroids(with_points)

        if converged(state, with_new_centroids):
            break

        logger.debug(
            "Epoch %d, group sizes %s",
            with_new_centroids.current_epoch,
            with_new_centroids.group_sizes(),
        )
        state = with_new_centroids

    if with_new_centroids.current_epoch > config.max_epochs:
        logger.info("Stopped at the epoch cap (%d epochs)", with_new_centroids.current_epoch)
    else:
        logger.info("Converged after %d epochs", with_new_centroids.current_epoch)
    return with_new_centroids


class KMeans:
    """
    Estimator-style wrapper around :func:`run`.

    Features:
    - Random initialization inside per-dimension bounds
    - Bounds derived from the data when none are given
    - Stops when centroid movement drops below ``tol`` or after ``max_iters``
    """

    def __init__(
        self,
        n_clusters: int,
        max_iters: int = DEFAULT_MAX_EPOCHS,
        tol: float = DEFAULT_THRESHOLD,
        bounds: Optional[Sequence[Sequence[float]]] = None,
        random_state: RandomLike = None,
        verbose: bool = False,
    ):
        """
        Initialize K-means clustering.

        Args:
            n_clusters: Number of clusters
            max_iters: Maximum number of epochs
            tol: Tolerance for convergence
            bounds: (low, high) per dimension for the initial centroids;
                defaults to the range of the data passed to ``fit``
            random_state: Random seed (or numpy Generator) for reproducibility
            verbose: Whether to log progress information
        """
        self.n_clusters = n_clusters
        self.max_iters = max_iters
        self.tol = tol
        self.bounds = bounds
        self.random_state = random_state
        self.verbose = verbose

        # Results
        self.cluster_centers_ = None
        self.labels_ = None
        self.inertia_ = None
        self.n_iter_ = None
        self.state_ = None

    def fit(self, X) -> "KMeans":
        """
        Fit K-means clustering to the data.

        Args:
            X: Input data of shape (n_samples, n_features)

        Returns:
            self
        """
        dim = len(self.bounds) if self.bounds is not None else None
        X = as_points(X, dim)

        config = Configuration.from_points(
            X,
            k_clusters=self.n_clusters,
            max_epochs=self.max_iters,
            threshold=self.tol,
            bounds=self.bounds,
        )

        if self.verbose:
            _enable_progress_logging()
            logger.info(
                "Fitting K-means with %d clusters on %d samples...", self.n_clusters, X.shape[0]
            )

        state = run(config, X, as_generator(self.random_state))

        # Labels, sizes and inertia all come from the final centroids
        self.state_ = state
        self.cluster_centers_ = np.vstack(state.centroids)
        self.labels_ = state.labels_for(X)
        self.inertia_ = float(np.sum((X - self.cluster_centers_[self.labels_]) ** 2))
        self.n_iter_ = state.current_epoch

        if self.verbose:
            logger.info("Final inertia: %.2f", self.inertia_)

        return self

    def predict(self, X) -> np.ndarray:
        """
        Predict cluster labels for new data.

        Args:
            X: Input data of shape (n_samples, n_features)

        Returns:
            Cluster labels
        """
        if self.state_ is None:
            raise ValueError("Model must be fitted before prediction")
        X = as_points(X, self.state_.dimensions)
        return self.state_.labels_for(X)

    def fit_predict(self, X) -> np.ndarray:
        return self.fit(X).labels_

    def get_cluster_info(self) -> dict:
        """Get information about the clustering results."""
        if self.state_ is None:
            raise ValueError("Model must be fitted first")

        cluster_sizes = np.bincount(self.labels_, minlength=self.n_clusters)

        return {
            'n_clusters': self.n_clusters,
            'inertia': self.inertia_,
            'n_iterations': self.n_iter_,
            'cluster_sizes': dict(enumerate(cluster_sizes.tolist())),
            'empty_clusters': [i for i, size in enumerate(cluster_sizes.tolist()) if size == 0],
            'avg_cluster_size': float(np.mean(cluster_sizes)),
            'std_cluster_size': float(np.std(cluster_sizes)),
            'min_cluster_size': int(np.min(cluster_sizes)),
            'max_cluster_size': int(np.max(cluster_sizes)),
        }


def _enable_progress_logging():
    """Send this package's INFO records to stderr without touching the root logger."""
    package_logger = logging.getLogger(__package__)
    package_logger.setLevel(logging.INFO)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        package_logger.addHandler(handler)
