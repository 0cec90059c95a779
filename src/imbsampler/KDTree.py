# KDTree.py
import numpy as np
from scipy.spatial.distance import cdist
from sklearn.neighbors import KDTree as SKLearnKDTree

from .exceptions import EmptyIndex, InvalidParameter


class KDTree:
    """
    Spatial index answering k-nearest and k-farthest queries under the
    Euclidean metric.

    Nearest queries are answered by a scikit-learn KD-tree. Farthest queries
    cannot be pruned by a KD-tree, so they are answered by a full distance
    scan sorted in descending order.

    A point stored in the index is returned by its own query (at distance 0);
    callers that need to skip it must filter the returned indices themselves.

    Parameters:
        points (array-like): Points to index, shape (n_samples, n_features)
        labels (array-like): Label of every point
        which (str): "nearest" or "farthest"
        leaf_size (int): Leaf size of the underlying KD-tree
    """
    MODES = ("nearest", "farthest")

    def __init__(self, points, labels, which="nearest", leaf_size=40):
        if which not in self.MODES:
            raise InvalidParameter("which", which, self.MODES)
        self.which = which
        self.points = np.asarray(points, dtype=float)
        self.labels = np.asarray(labels)
        self._tree = None
        if len(self.points) > 0 and which == "nearest":
            self._tree = SKLearnKDTree(self.points, leaf_size=leaf_size)

    def __len__(self):
        return len(self.points)

    def n_neighbours(self, point, k):
        """
        Find the k nearest (or farthest) indexed points of ``point``.

        Returns:
            tuple: (distances, labels, indices), ascending by distance for
            "nearest" and descending for "farthest". Holds min(k, len(self))
            entries.
        """
        if len(self.points) == 0:
            raise EmptyIndex("Cannot query an empty spatial index")
        if k < 1:
            raise InvalidParameter("k", k)

        k = min(int(k), len(self.points))
        point = np.asarray(point, dtype=float).reshape(1, -1)

        if self.which == "nearest":
            distances, indices = self._tree.query(point, k=k)
            distances, indices = distances[0], indices[0]
        else:
            all_distances = cdist(point, self.points)[0]
            indices = np.argsort(-all_distances, kind="stable")[:k]
            distances = all_distances[indices]

        return distances, self.labels[indices], indices
