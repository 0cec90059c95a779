import numpy as np
import pytest


@pytest.fixture
def four_class_data():
    """
    Class A around (0.5, 0.5), class B around (10.5, 10.5) plus one B
    instance lying inside the A cluster, class D around (20, 0) and a two
    instance minority class C far from everything else.
    """
    a = [[0, 0], [0, 1], [1, 0], [1, 1], [0.5, 0.5], [0.2, 0.8], [0.8, 0.2]]
    b = [[10, 10], [10, 11], [11, 10], [11, 11], [10.5, 10.5]]
    noise = [[0.6, 0.4]]
    d = [[20, 0], [20, 1], [21, 0], [21, 1], [20.5, 0.5]]
    c = [[30, 30], [30, 31]]
    X = np.array(a + b + noise + d + c, dtype=float)
    y = np.array(["A"] * 7 + ["B"] * 5 + ["B"] + ["D"] * 5 + ["C"] * 2)
    return X, y, 12


@pytest.fixture
def line_data():
    """Ten majority instances on the x axis and two minority instances near the origin."""
    majority = [[float(x), 0.0] for x in range(1, 11)]
    minority = [[0.0, 0.0], [0.0, 0.5]]
    X = np.array(majority + minority)
    y = np.array([0] * 10 + [1] * 2)
    return X, y


@pytest.fixture
def random_data():
    rng = np.random.RandomState(7)
    X = rng.rand(60, 3)
    y = np.array([0] * 35 + [1] * 17 + [2] * 8)
    return X, y


@pytest.fixture
def blobs():
    """Two overlapping clouds in [0, 1]^2 with a 30:8 class ratio."""
    rng = np.random.RandomState(3)
    majority = np.clip(rng.normal(0.35, 0.12, size=(30, 2)), 0, 1)
    minority = np.clip(rng.normal(0.65, 0.12, size=(8, 2)), 0, 1)
    X = np.vstack([majority, minority])
    y = np.array([0] * 30 + [1] * 8)
    return X, y
