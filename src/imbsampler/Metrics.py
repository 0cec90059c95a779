# Metrics.py
import numpy as np

from .exceptions import InvalidParameter

DISTANCES = ("euclidean", "hvdm")


def euclidean(a, b):
    """Euclidean distance between two feature vectors of the same length."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    return float(np.sqrt(np.sum((a - b) ** 2)))


def euclidean_pairwise(query, pool):
    pool = np.asarray(pool, dtype=float)
    if len(pool) == 0:
        return np.empty(0)
    return np.sqrt(np.sum((pool - np.asarray(query, dtype=float)) ** 2, axis=1))


def get_distance(dist):
    """Validate a distance name and return its canonical (lower-case) form."""
    name = str(dist).lower() if isinstance(dist, str) else dist
    if name not in DISTANCES:
        raise InvalidParameter("dist", dist, DISTANCES)
    return name


class HVDM:
    """
    Heterogeneous Value Difference Metric (HVDM) for mixed data types.

    Continuous attributes contribute |a - b| / (4 * std), or 0 when the
    attribute is constant. Nominal attributes contribute 0 when the values
    match and 1 otherwise; with ``use_vdm=True`` a mismatch contributes the
    value difference of the class-conditional probabilities instead.
    The per-attribute contributions are aggregated with the Euclidean norm.

    Parameters:
        categorical_indices (list): Indices of categorical features
        numeric_indices (list): Indices of numeric features. Defaults to every
            index not listed as categorical.
        use_vdm (bool): Weight nominal mismatches by class-conditional
            probability differences.
    """
    def __init__(self, categorical_indices=None, numeric_indices=None, use_vdm=False):
        self.categorical_indices = list(categorical_indices or [])
        self.numeric_indices = numeric_indices
        self.use_vdm = use_vdm

    def fit(self, X, y):
        """
        Precompute statistics needed for distance calculation.

        Parameters:
            X (array-like): Training data
            y (array-like): Target values
        """
        X = np.asarray(X, dtype=float)
        y = np.asarray(y)
        self.n_features_ = X.shape[1]
        if self.numeric_indices is None:
            self.numeric_ = [j for j in range(self.n_features_) if j not in self.categorical_indices]
        else:
            self.numeric_ = list(self.numeric_indices)
        self.categorical_ = list(self.categorical_indices)

        self.classes_ = np.unique(y)
        self.std_ = np.std(X[:, self.numeric_], axis=0) if self.numeric_ else np.empty(0)
        self.value_counts_ = {}
        self.value_class_counts_ = {}
        self.categorical_probs_ = {}

        for j in self.categorical_:
            col = X[:, j]
            unique_vals, counts = np.unique(col, return_counts=True)
            self.value_counts_[j] = dict(zip(unique_vals, counts))
            self.value_class_counts_[j] = {
                val: {c: np.sum(y[col == val] == c) for c in self.classes_} for val in unique_vals}
            # P(class | value) feeds the VDM term
            self.categorical_probs_[j] = {
                val: np.array([class_counts[c] for c in self.classes_]) / self.value_counts_[j][val]
                for val, class_counts in self.value_class_counts_[j].items()}
        return self

    def _numeric_terms(self, query, pool):
        diff = np.abs(pool[:, self.numeric_] - query[self.numeric_])
        scale = 4.0 * self.std_
        return np.divide(diff, scale, out=np.zeros_like(diff), where=scale > 0)

    def _categorical_term(self, j, val1, val2):
        if val1 == val2:
            return 0.0
        if not self.use_vdm:
            return 1.0
        probs_dict = self.categorical_probs_.get(j, {})
        if val1 not in probs_dict or val2 not in probs_dict:
            return 1.0
        return float(np.sqrt(np.sum((probs_dict[val1] - probs_dict[val2]) ** 2)))

    def pairwise(self, query, pool):
        """Distances from ``query`` to every row of ``pool``."""
        query = np.asarray(query, dtype=float)
        pool = np.atleast_2d(np.asarray(pool, dtype=float))
        if pool.shape[0] == 0:
            return np.empty(0)

        total_sq = np.zeros(pool.shape[0])
        if self.numeric_:
            total_sq += np.sum(self._numeric_terms(query, pool) ** 2, axis=1)

        for j in self.categorical_:
            if self.use_vdm:
                terms = np.array([self._categorical_term(j, query[j], v) for v in pool[:, j]])
            else:
                terms = (pool[:, j] != query[j]).astype(float)
            total_sq += terms ** 2

        return np.sqrt(total_sq)

    def distance(self, a, b):
        """
        Compute HVDM between two instances.

        Parameters:
            a (array-like): First instance
            b (array-like): Second instance

        Returns:
            float: HVDM distance
        """
        return float(self.pairwise(a, np.atleast_2d(b))[0])

    def __call__(self, a, b):
        return self.distance(a, b)
