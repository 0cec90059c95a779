# FitnessOracle.py
import warnings

import numpy as np
from imblearn.metrics import geometric_mean_score
from sklearn.base import clone
from sklearn.metrics import accuracy_score, roc_auc_score
from sklearn.tree import DecisionTreeClassifier

from .exceptions import DegenerateTrainingSet, InvalidParameter


def leaf_ids(model, X):
    """
    Leaf reached by every row of ``X`` in a fitted tree-structured model.
    Any estimator exposing scikit-learn's ``apply`` method qualifies.
    """
    if not hasattr(model, "apply"):
        raise InvalidParameter("estimator", type(model).__name__)
    return np.asarray(model.apply(np.asarray(X, dtype=float)))


class FitnessOracle:
    """
    Scores a candidate training set by the predictive performance of a
    classifier trained on it.

    Parameters:
        estimator (object): Classifier to train (default: DecisionTreeClassifier)
        metric (str): Score returned by ``fitness``: "auc", "accuracy" or "gmean"
        random_state (int): Seed given to the estimator when it accepts one
    """
    METRICS = ("auc", "accuracy", "gmean")

    def __init__(self, estimator=None, metric="auc", random_state=None):
        if metric not in self.METRICS:
            raise InvalidParameter("metric", metric, self.METRICS)
        self.estimator = estimator if estimator is not None else DecisionTreeClassifier()
        self.metric = metric
        self.random_state = random_state

    def train(self, X, y):
        if len(np.unique(y)) < 2:
            raise DegenerateTrainingSet("The training set must have at least two classes.")
        model = clone(self.estimator)
        if self.random_state is not None and "random_state" in model.get_params():
            model.set_params(random_state=self.random_state)
        model.fit(np.asarray(X, dtype=float), np.asarray(y))
        return model

    def __area_under_roc(self, model, X, y):
        labels, counts = np.unique(y, return_counts=True)
        proba = model.predict_proba(X)
        columns = {c: i for i, c in enumerate(model.classes_)}
        # weighted one-vs-rest average
        total = 0.0
        for label, count in zip(labels, counts):
            score = proba[:, columns[label]] if label in columns else np.zeros(len(y))
            total += count * roc_auc_score(y == label, score)
        return total / len(y)

    def evaluate(self, model, X, y):
        """
        Evaluate a trained model.

        Returns:
            dict: accuracy, auc (equal to accuracy when y holds a single
            class) and gmean
        """
        X = np.asarray(X, dtype=float)
        y = np.asarray(y)
        y_pred = model.predict(X)
        accuracy = accuracy_score(y, y_pred)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            gmean = geometric_mean_score(y, y_pred)
        auc = accuracy if len(np.unique(y)) < 2 else self.__area_under_roc(model, X, y)
        return {"accuracy": accuracy, "auc": auc, "gmean": gmean}

    def fitness(self, train_X, train_y, test_X, test_y):
        model = self.train(train_X, train_y)
        return self.evaluate(model, test_X, test_y)[self.metric]

    def accuracy(self, train_X, train_y, test_X, test_y):
        model = self.train(train_X, train_y)
        return accuracy_score(np.asarray(test_y), model.predict(np.asarray(test_X, dtype=float)))
