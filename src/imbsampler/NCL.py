# NCL.py
import numpy as np

from .ENN import edited_indices
from .ImbalanceSampler import ImbalanceSampler
from .KDTree import KDTree
from .NeighbourRules import mode, nn_rule
from .exceptions import InvalidParameter
from .utils import class_counter, untouchable_class


class NCL(ImbalanceSampler):
    """
    Neighbourhood Cleaning Rule (NCL) undersampling.

    Removes two sets of majority instances:
      A1: the majority instances an ENN pass over the majority classes would
          edit out (only when there are at least three classes);
      A2: the neighbours of misclassified minority instances, provided they
          belong to a class with more than ``len(data) * threshold`` instances.

    Source:
      Laurikkala, J. (2001). Improving identification of difficult small classes by
      balancing class distribution. In Conference on Artificial Intelligence in
      Medicine in Europe (pp. 63-66). Springer.

    License: MIT License
    """
    def __init__(self, k=3, threshold=0.5, n_jobs=None, random_state=None, dist="euclidean",
                 categorical_indices=None, normalize=False, random_data=False, verbose=False):
        super().__init__(random_state=random_state, dist=dist, categorical_indices=categorical_indices,
                         normalize=normalize, random_data=random_data, verbose=verbose)
        self.k = k
        self.threshold = threshold
        self.n_jobs = n_jobs

    def __edited_majority(self, X, y, majority):
        if len(np.unique(y)) < 3:
            return np.empty(0, dtype=int)
        majority_y = y[majority]
        kept = edited_indices(X[majority], majority_y, self.k, self.metric_,
                              untouchable_class(class_counter(majority_y)), self._parallel_map)
        return np.setdiff1d(majority, majority[kept])

    def __cleaned_neighbours(self, X, y, minority):
        ratio = len(y) * self.threshold
        tree = KDTree(X, y) if self.metric_ == "euclidean" else None

        def select_neighbours(i):
            if tree is not None:
                _, labels, indices = tree.n_neighbours(X[i], self.k + 1)
                keep = indices != i
                indices = indices[keep][:self.k]
                label = mode(labels[keep][:self.k])
            else:
                label, indices, _ = nn_rule(X, X[i], y, self.k, self.metric_, exclude=i)

            if label == y[i]:
                return []
            return [n for n in indices
                    if y[n] != self.untouchable_class_ and self.counter_[y[n]] > ratio]

        selected = [n for neighbours in self._parallel_map(select_neighbours, minority) for n in neighbours]
        return np.unique(np.asarray(selected, dtype=int))

    def _fit_resample(self, X, y, rng):
        if self.k < 1:
            raise InvalidParameter("k", self.k)

        minority = np.where(y == self.untouchable_class_)[0]
        majority = np.where(y != self.untouchable_class_)[0]

        index_a1 = self.__edited_majority(X, y, majority)
        index_a2 = self.__cleaned_neighbours(X, y, minority)

        removed = np.union1d(index_a1, index_a2)
        final = np.setdiff1d(np.arange(len(y)), removed)
        return X[final], y[final], final
