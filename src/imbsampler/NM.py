# NM.py
import warnings

import numpy as np

from .ImbalanceSampler import ImbalanceSampler
from .KDTree import KDTree
from .NeighbourRules import nn_rule
from .exceptions import InvalidParameter


class NM(ImbalanceSampler):
    """
    NearMiss (NM) undersampling.

    Keeps every minority instance plus floor(n_minority * ratio) majority
    instances chosen by one of three heuristics:

      1. majority instances with the smallest mean distance to their 3
         nearest minority instances;
      2. majority instances with the smallest mean distance to their 3
         farthest minority instances;
      3. the n_neighbours nearest majority instances of every minority
         instance, deduplicated and shuffled.

    Source:
      Zhang, J., & Mani, I. (2003). kNN approach to unbalanced data distributions:
      a case study involving information extraction. In Proceedings of the ICML'2003
      Workshop on Learning from Imbalanced Datasets.

    License: MIT License
    """
    VERSIONS = (1, 2, 3)

    def __init__(self, version=1, n_neighbours=3, ratio=1.0, random_state=None, dist="euclidean",
                 categorical_indices=None, normalize=False, random_data=False, verbose=False):
        super().__init__(random_state=random_state, dist=dist, categorical_indices=categorical_indices,
                         normalize=normalize, random_data=random_data, verbose=verbose)
        self.version = version
        self.n_neighbours = n_neighbours
        self.ratio = ratio

    def __mean_distances(self, X, majority, minority, y, which):
        if self.metric_ == "euclidean":
            tree = KDTree(X[minority], y[minority], which=which)
            return [np.mean(tree.n_neighbours(X[i], 3)[0]) for i in majority]
        return [np.mean(nn_rule(X[minority], X[i], y[minority], 3, self.metric_, which)[2])
                for i in majority]

    def __near_majority(self, X, majority, minority, y, rng):
        if self.metric_ == "euclidean":
            tree = KDTree(X[majority], y[majority])
            neighbours = [tree.n_neighbours(X[i], self.n_neighbours)[2] for i in minority]
        else:
            neighbours = [nn_rule(X[majority], X[i], y[majority], self.n_neighbours, self.metric_)[1]
                          for i in minority]

        selected = []
        seen = set()
        for indices in neighbours:
            for j in majority[indices]:
                if j not in seen:
                    seen.add(j)
                    selected.append(j)
        selected = np.asarray(selected, dtype=int)
        rng.shuffle(selected)
        return selected

    def _fit_resample(self, X, y, rng):
        if self.version not in self.VERSIONS:
            raise InvalidParameter("version", self.version, self.VERSIONS)
        if self.n_neighbours < 1:
            raise InvalidParameter("n_neighbours", self.n_neighbours)

        minority = np.where(y == self.untouchable_class_)[0]
        majority = np.where(y != self.untouchable_class_)[0]

        if self.version == 3 and self.n_neighbours > len(majority):
            warnings.warn(
                f"Majority class count ({len(majority)}) < n_neighbours ({self.n_neighbours}). "
                f"Using every majority instance.")

        if self.version == 3:
            selected = self.__near_majority(X, majority, minority, y, rng)
        else:
            which = "nearest" if self.version == 1 else "farthest"
            distances = self.__mean_distances(X, majority, minority, y, which)
            selected = majority[np.argsort(distances, kind="stable")]

        n_keep = int(np.floor(len(minority) * self.ratio))
        final = np.concatenate([minority, selected[:n_keep]]).astype(int)
        return X[final], y[final], final
