# NeighbourRules.py
from collections import Counter

import numpy as np

from .Metrics import HVDM, euclidean, euclidean_pairwise
from .exceptions import InsufficientNeighbours, InvalidParameter


def mode(labels):
    """
    Most frequent label. Ties go to the label that first reaches the
    maximum count while scanning ``labels`` in order.
    """
    labels = list(labels)
    if not labels:
        raise InsufficientNeighbours("Cannot vote with zero neighbours")
    max_count = max(Counter(labels).values())

    seen = Counter()
    for label in labels:
        seen[label] += 1
        if seen[label] == max_count:
            return label


def pairwise_distances(query, pool, metric="euclidean"):
    """Distances from ``query`` to every row of ``pool`` under ``metric``."""
    if isinstance(metric, HVDM):
        return metric.pairwise(query, pool)
    if metric == "euclidean" or metric is euclidean:
        return euclidean_pairwise(query, pool)
    if callable(metric):
        return np.array([metric(query, row) for row in pool], dtype=float)
    raise InvalidParameter("metric", metric)


def nn_rule(pool, query, labels, k, metric="euclidean", which="nearest", exclude=None):
    """
    Predict the label of ``query`` by majority vote among its k nearest (or
    farthest) rows of ``pool``.

    Parameters:
        pool (array-like): Candidate neighbours
        query (array-like): Point to classify
        labels (array-like): Label of every pool row
        k (int): Number of neighbours to vote
        metric: Fitted HVDM, "euclidean" or a callable (a, b) -> float
        which (str): "nearest" or "farthest"
        exclude (int): Pool index left out of the search, normally the query
            itself when it belongs to the pool

    Returns:
        tuple: (predicted label, neighbour indices, neighbour distances)
    """
    if which not in ("nearest", "farthest"):
        raise InvalidParameter("which", which, ("nearest", "farthest"))
    pool = np.asarray(pool, dtype=float)
    labels = np.asarray(labels)

    candidates = np.arange(len(pool))
    if exclude is not None:
        candidates = candidates[candidates != exclude]
    if len(candidates) == 0:
        raise InsufficientNeighbours("The neighbour pool is empty")

    distances = pairwise_distances(query, pool[candidates], metric)
    order = np.argsort(distances if which == "nearest" else -distances, kind="stable")[:k]
    indices = candidates[order]

    return mode(labels[indices]), indices, distances[order]


def nearest_distinct_same_class(element, pool):
    """
    Nearest row of ``pool`` lying at a non-zero Euclidean distance from
    ``element``. When every row coincides with ``element`` it is returned
    unchanged.
    """
    pool = np.asarray(pool, dtype=float)
    distances = euclidean_pairwise(element, pool)
    distinct = np.where(distances > 0)[0]
    if len(distinct) == 0:
        return np.asarray(element, dtype=float)
    return pool[distinct[np.argmin(distances[distinct])]]
