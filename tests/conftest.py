import numpy as np
import pytest

from kmeans import Configuration

SQUARES_2D = [[0, 0], [0, 1], [1, 0], [1, 1],
              [10, 10], [10, 11], [11, 10], [11, 11]]

BLOBS_3D = [[0, 0, 0], [0, 1, 0], [1, 0, 1], [1, 1, 0],
            [10, 10, 10], [10, 11, 10], [11, 10, 11], [11, 11, 11]]


class ScriptedRng:
    """Stands in for a numpy Generator: ``uniform`` returns preset centroids in order."""

    def __init__(self, centroids):
        self._centroids = [np.asarray(c, dtype=np.float64) for c in centroids]
        self.calls = 0

    def uniform(self, low, high):
        centroid = self._centroids[self.calls]
        self.calls += 1
        return centroid


@pytest.fixture
def config_2d():
    return Configuration(k_clusters=2, max_epochs=1000, threshold=0.0001,
                         bounds=[[0, 15], [0, 15]])


@pytest.fixture
def config_3d():
    return Configuration(k_clusters=2, max_epochs=1000, threshold=0.0001,
                         bounds=[[0, 15], [0, 15], [0, 15]])


def as_point_set(group):
    """Group rows as a sorted list of tuples, for order-free comparisons."""
    return sorted(tuple(row) for row in np.asarray(group).tolist())
