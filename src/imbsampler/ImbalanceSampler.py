# ImbalanceSampler.py
import time

import numpy as np
from joblib import Parallel, delayed
from sklearn.base import BaseEstimator
from sklearn.utils import check_random_state
from sklearn.utils.validation import check_X_y

from .Dataset import Dataset
from .Metrics import HVDM, get_distance
from .exceptions import DegenerateInput
from .utils import class_counter, print_summary, untouchable_class, zero_one_normalization


class ImbalanceSampler(BaseEstimator):
    """
    Base class of the resampling algorithms.

    ``fit_resample`` validates the data, detects the untouchable (minority)
    class, optionally normalizes and shuffles the working copy of the data and
    hands it to ``_fit_resample``. Subclasses return either the positions of
    the rows they keep (selection) or a new set of rows (synthesis).

    Parameters:
        random_state (int): Seed of the run. None seeds from the wall clock.
        dist (str): "euclidean" or "hvdm"
        categorical_indices (list): Indices of nominal attributes (used by HVDM)
        normalize (bool): Min-max scale the features to [0, 1] before processing
        random_data (bool): Shuffle the instances before processing
        verbose (bool): Print a before/after summary of the run
    """
    def __init__(self, random_state=None, dist="euclidean", categorical_indices=None,
                 normalize=False, random_data=False, verbose=False):
        self.random_state = random_state
        self.dist = dist
        self.categorical_indices = categorical_indices
        self.normalize = normalize
        self.random_data = random_data
        self.verbose = verbose

    def _fit_resample(self, X, y, rng):
        raise NotImplementedError("Subclasses should implement the _fit_resample method!")

    def _check_random_state(self):
        if self.random_state is None:
            self.seed_ = int(time.time() * 1000) % (2 ** 32)
        else:
            self.seed_ = self.random_state
        return check_random_state(self.seed_)

    def _build_metric(self, X, y, categorical_indices):
        if get_distance(self.dist) == "hvdm":
            return HVDM(categorical_indices=categorical_indices).fit(X, y)
        return "euclidean"

    def _parallel_map(self, func, items):
        """Apply ``func`` to ``items`` in order, fanning out when n_jobs is set."""
        n_jobs = getattr(self, "n_jobs", None)
        if n_jobs is None or n_jobs == 1:
            return [func(item) for item in items]
        return Parallel(n_jobs=n_jobs, prefer="threads")(delayed(func)(item) for item in items)

    def _run(self, X, y, categorical_indices):
        X, y = check_X_y(X, y, dtype=float)
        start = time.time()
        get_distance(self.dist)

        self.counter_ = class_counter(y)
        if len(self.counter_) < 2:
            raise DegenerateInput("The dataset must have at least two classes.")
        self.untouchable_class_ = untouchable_class(self.counter_)
        self.n_features_in_ = X.shape[1]
        rng = self._check_random_state()

        X_work = X.copy()
        self.scaler_ = None
        if self.normalize:
            X_work, self.scaler_ = zero_one_normalization(X_work)

        order = rng.permutation(len(y)) if self.random_data else np.arange(len(y))
        X_work, y_work = X_work[order], y[order]
        self.metric_ = self._build_metric(X_work, y_work, categorical_indices or [])

        X_res, y_res, selected = self._fit_resample(X_work, y_work, rng)

        if selected is None:
            self.sample_indices_ = None
        else:
            self.sample_indices_ = np.sort(order[np.asarray(selected, dtype=int)])
            X_res, y_res = X[self.sample_indices_], y[self.sample_indices_]

        if self.verbose:
            print_summary(y, y_res, self.untouchable_class_, time.time() - start)
        return X_res, y_res

    def fit_resample(self, X, y):
        """
        Resample the dataset.

        Returns:
            tuple: (X_resampled, y_resampled)
        """
        return self._run(X, y, self.categorical_indices)

    def resample(self, dataset):
        """Resample a Dataset, keeping its nominal mask, into a new Dataset."""
        categorical = dataset.categorical_indices or self.categorical_indices
        X_res, y_res = self._run(dataset.X, dataset.y, categorical)
        return Dataset(X_res, y_res, nominal=dataset.nominal, index=self.sample_indices_)
