"""Euclidean distance in any number of dimensions."""

from typing import Optional, Sequence

import numpy as np

from .errors import DimensionMismatch


def distance(a, b) -> float:
    """
    Euclidean distance between two points of equal dimensionality.

    Args:
        a: First point, a sequence of d coordinates
        b: Second point, a sequence of d coordinates

    Returns:
        sqrt(sum_i (a_i - b_i)^2)

    Raises:
        DimensionMismatch: if the points have different lengths
    """
    a = np.asarray(a, dtype=np.float64).ravel()
    b = np.asarray(b, dtype=np.float64).ravel()
    if a.shape != b.shape:
        raise DimensionMismatch(
            f"cannot measure distance between a {a.size}-d and a {b.size}-d point",
            expected=a.size,
            actual=b.size,
        )
    diff = a - b
    return float(np.sqrt(np.sum(diff * diff)))


def pairwise_distances(
    points: np.ndarray, centroids: Sequence[Optional[np.ndarray]]
) -> np.ndarray:
    """
    Distances from every point to every centroid.

    Args:
        points: Array of shape (n_points, d)
        centroids: k centroids of length d; ``None`` marks an undefined centroid

    Returns:
        Array of shape (n_points, k). Columns of undefined centroids are ``inf``.
    """
    points = np.asarray(points, dtype=np.float64)
    n_points, dim = points.shape
    result = np.full((n_points, len(centroids)), np.inf)

    for index, centroid in enumerate(centroids):
        if centroid is None:
            continue
        centroid = np.asarray(centroid, dtype=np.float64)
        if centroid.shape != (dim,):
            raise DimensionMismatch(
                f"centroid {index} has {centroid.size} coordinates, points have {dim}",
                expected=dim,
                actual=centroid.size,
            )
        # Same formula as distance() so ties resolve identically
        diff = points - centroid
        result[:, index] = np.sqrt(np.sum(diff * diff, axis=1))

    return result


def as_points(points, dim: Optional[int] = None) -> np.ndarray:
    """
    Validate a dataset once: every point must have ``dim`` coordinates.

    When ``dim`` is None it is taken from the first point. Returns an
    (n, dim) float array; n may be 0.

    Raises:
        DimensionMismatch: if any point has a different number of coordinates
    """
    if isinstance(points, np.ndarray) and points.ndim == 2:
        if dim is None:
            dim = points.shape[1]
        if points.shape[1] != dim and points.shape[0] > 0:
            raise DimensionMismatch(
                f"points have {points.shape[1]} coordinates, expected {dim}",
                expected=dim,
                actual=points.shape[1],
            )
        return points.astype(np.float64, copy=False).reshape(-1, dim)

    rows = []
    for index, point in enumerate(points):
        row = np.asarray(point, dtype=np.float64).ravel()
        if dim is None:
            dim = row.size
        if row.size != dim:
            raise DimensionMismatch(
                f"point {index} has {row.size} coordinates, expected {dim}",
                expected=dim,
                actual=row.size,
            )
        rows.append(row)
    if not rows:
        return np.empty((0, dim or 0), dtype=np.float64)
    return np.vstack(rows)
