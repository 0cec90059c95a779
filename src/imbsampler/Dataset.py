# Dataset.py
import numpy as np
import pandas as pd

from .exceptions import DegenerateInput
from .utils import class_counter, untouchable_class


class Dataset:
    """
    Labelled dataset handed to and returned by the resampling algorithms.

    Parameters:
        X (array-like): Feature matrix, shape (n_samples, n_features)
        y (array-like): Class label of every row
        nominal (array-like): Boolean mask flagging nominal attributes.
            Defaults to every attribute being continuous.
        index (array-like): Position of every row in the dataset it was
            selected from, or None when the rows were synthesized.
    """
    def __init__(self, X, y, nominal=None, index=None):
        X = np.asarray(X, dtype=float)
        y = np.asarray(y)
        if X.ndim != 2:
            raise DegenerateInput(f"X must be a 2-D feature matrix, got {X.ndim} dimension(s)")
        if len(X) != len(y):
            raise DegenerateInput(f"X has {len(X)} rows but y has {len(y)} labels")
        if nominal is None:
            nominal = np.zeros(X.shape[1], dtype=bool)
        nominal = np.asarray(nominal, dtype=bool)
        if len(nominal) != X.shape[1]:
            raise DegenerateInput(f"nominal mask has {len(nominal)} entries for {X.shape[1]} attributes")

        self.X = X
        self.y = y
        self.nominal = nominal
        self.index = None if index is None else np.asarray(index, dtype=int)

    @classmethod
    def from_frame(cls, frame, target):
        """
        Build a Dataset from a pandas DataFrame. Object, category and bool
        columns become nominal attributes stored as integer category codes.
        """
        features = frame.drop(columns=[target])
        nominal = []
        columns = []
        for name in features.columns:
            col = features[name]
            if (pd.api.types.is_object_dtype(col) or isinstance(col.dtype, pd.CategoricalDtype)
                    or pd.api.types.is_bool_dtype(col)):
                columns.append(col.astype("category").cat.codes.astype(float))
                nominal.append(True)
            else:
                columns.append(col.astype(float))
                nominal.append(False)
        X = pd.concat(columns, axis=1).to_numpy() if columns else np.empty((len(frame), 0))
        return cls(X, frame[target].to_numpy(), nominal=nominal)

    @property
    def categorical_indices(self):
        return list(np.where(self.nominal)[0])

    def class_counts(self):
        return class_counter(self.y)

    def untouchable_class(self):
        return untouchable_class(self.class_counts())

    def __len__(self):
        return len(self.y)

    def __repr__(self):
        return f"Dataset(n_samples={len(self)}, n_features={self.X.shape[1]}, classes={dict(self.class_counts())})"
