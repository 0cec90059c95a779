# ENN.py
import warnings

import numpy as np

from .ImbalanceSampler import ImbalanceSampler
from .KDTree import KDTree
from .NeighbourRules import mode, nn_rule
from .exceptions import InvalidParameter


def edited_indices(X, y, k, metric, minority_class, map_fn=None):
    """
    Positions of the rows kept by the Edited Nearest Neighbour rule.

    Rows of ``minority_class`` are always kept. Every other row is classified
    by its k nearest neighbours among the non-minority rows (itself excluded)
    and kept only when the vote agrees with its own label.
    """
    map_fn = map_fn or (lambda func, items: [func(item) for item in items])
    y = np.asarray(y)
    minority = np.where(y == minority_class)[0]
    majority = np.where(y != minority_class)[0]
    if len(majority) < 2:
        return np.sort(np.concatenate([minority, majority]))

    if k > len(majority) - 1:
        warnings.warn(
            f"Majority pool size ({len(majority) - 1}) < k ({k}). "
            f"Voting with the whole pool.")

    pool = X[majority]
    pool_labels = y[majority]
    tree = KDTree(pool, pool_labels) if metric == "euclidean" else None

    def predict(i):
        if tree is not None:
            _, labels, indices = tree.n_neighbours(pool[i], k + 1)
            return mode(labels[indices != i][:k])
        return nn_rule(pool, pool[i], pool_labels, k, metric, exclude=i)[0]

    predictions = map_fn(predict, range(len(majority)))
    kept = [majority[i] for i, label in enumerate(predictions) if label == pool_labels[i]]
    return np.sort(np.concatenate([minority, np.asarray(kept, dtype=int)]))


class ENN(ImbalanceSampler):
    """
    Edited Nearest Neighbour (ENN) undersampling.

    Removes the majority instances whose label disagrees with the majority
    vote of their k nearest majority neighbours. Minority (untouchable)
    instances are never removed.

    Source:
      Wilson, D. L. (1972). Asymptotic properties of nearest neighbor rules
      using edited data. IEEE Transactions on Systems, Man, and Cybernetics, (3), 408-421.

    License: MIT License
    """
    def __init__(self, k=3, n_jobs=None, random_state=None, dist="euclidean",
                 categorical_indices=None, normalize=False, random_data=False, verbose=False):
        super().__init__(random_state=random_state, dist=dist, categorical_indices=categorical_indices,
                         normalize=normalize, random_data=random_data, verbose=verbose)
        self.k = k
        self.n_jobs = n_jobs

    def _fit_resample(self, X, y, rng):
        if self.k < 1:
            raise InvalidParameter("k", self.k)
        selected = edited_indices(X, y, self.k, self.metric_, self.untouchable_class_, self._parallel_map)
        return X[selected], y[selected], selected
