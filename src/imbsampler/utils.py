# utils.py
from collections import Counter

import numpy as np
from sklearn.preprocessing import MinMaxScaler


def class_counter(y):
    """Number of instances of every class, in order of first appearance."""
    return Counter(list(y))


def untouchable_class(counter):
    """
    Class with the fewest instances. Ties go to the class encountered first.
    """
    return min(counter, key=counter.get)


def imbalanced_ratio(counter, minority_class):
    """
    Ratio between the size of the biggest class and the size of
    ``minority_class``. Returns nan when the minority class is absent.
    """
    if not counter or counter.get(minority_class, 0) == 0:
        return float("nan")
    return max(counter.values()) / counter[minority_class]


def zero_one_normalization(X):
    """
    Min-max scale every attribute into [0, 1].

    Returns:
        tuple: (scaled copy of X, fitted MinMaxScaler)
    """
    scaler = MinMaxScaler(feature_range=(0, 1))
    return scaler.fit_transform(np.asarray(X, dtype=float)), scaler


def format_elapsed(seconds):
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(int(minutes), 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:06.3f}"


def print_summary(original_y, new_y, minority_class, elapsed):
    """Print the before/after summary of a resampling run."""
    original_counter = class_counter(original_y)
    new_counter = class_counter(new_y)
    original_size = len(original_y)
    new_size = len(new_y)
    reduction = 100 - (new_size / original_size) * 100 if original_size else 0.0
    print(f"ORIGINAL SIZE: {original_size}")
    print(f"NEW DATA SIZE: {new_size}")
    print(f"REDUCTION PERCENTAGE: {reduction:.4f}")
    print(f"ORIGINAL IMBALANCED RATIO: {imbalanced_ratio(original_counter, minority_class):.4f}")
    print(f"NEW IMBALANCED RATIO: {imbalanced_ratio(new_counter, minority_class):.4f}")
    print(f"TOTAL ELAPSED TIME: {format_elapsed(elapsed)}")
