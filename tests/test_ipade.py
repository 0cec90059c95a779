"""
Tests for the IPADE instance generation algorithm.
"""
import numpy as np
import pytest
from sklearn.neighbors import KNeighborsClassifier

from imbsampler import IPADE
from imbsampler.DifferentialEvolution import DifferentialEvolution
from imbsampler.FitnessOracle import FitnessOracle
from imbsampler.IPADE import MAX_FORCED_ITERATIONS, MAX_STAGNATION, ClassState
from imbsampler.exceptions import DegenerateInput, InvalidParameter


class TestIPADE:
    def test_generates_prototypes(self, blobs):
        X, y = blobs
        ipade = IPADE(iterations=3, random_state=7)
        X_res, y_res = ipade.fit_resample(X, y)
        assert X_res.shape[1] == X.shape[1]
        assert len(X_res) == len(y_res)
        assert set(y_res) == {0, 1}
        assert np.all(X_res >= 0) and np.all(X_res <= 1)
        assert ipade.sample_indices_ is None
        assert 0.0 <= ipade.fitness_ <= 1.0

    def test_every_class_converges(self, blobs):
        X, y = blobs
        ipade = IPADE(iterations=3, random_state=7)
        ipade.fit_resample(X, y)
        assert set(ipade.class_states_) == {0, 1}
        assert all(isinstance(s, ClassState) and s.marked for s in ipade.class_states_.values())

    def test_same_seed_same_output(self, blobs):
        X, y = blobs
        first = IPADE(iterations=3, strategy=2, random_state=11).fit_resample(X, y)
        second = IPADE(iterations=3, strategy=2, random_state=11).fit_resample(X, y)
        assert first[0].tobytes() == second[0].tobytes()
        assert np.array_equal(first[1], second[1])

    @pytest.mark.parametrize("strategy", [1, 2, 3, 4])
    def test_strategies(self, blobs, strategy):
        X, y = blobs
        X_res, y_res = IPADE(iterations=2, strategy=strategy, random_state=3).fit_resample(X, y)
        assert set(y_res) == {0, 1}
        assert np.all(X_res >= 0) and np.all(X_res <= 1)

    def test_invalid_strategy(self, blobs):
        X, y = blobs
        with pytest.raises(InvalidParameter) as excinfo:
            IPADE(strategy=5).fit_resample(X, y)
        assert excinfo.value.name == "strategy"

    def test_invalid_iterations(self, blobs):
        X, y = blobs
        with pytest.raises(InvalidParameter):
            IPADE(iterations=0).fit_resample(X, y)

    def test_farthest_minority_choice(self, blobs):
        X, y = blobs
        X_res, y_res = IPADE(iterations=2, random_choice=False, random_state=5).fit_resample(X, y)
        assert set(y_res) == {0, 1}

    def test_normalized_output_is_mapped_back(self, blobs):
        X, y = blobs
        X_scaled = X * 100 + 50
        X_res, _ = IPADE(iterations=2, normalize=True, random_state=5).fit_resample(X_scaled, y)
        assert np.all(X_res >= X_scaled.min(axis=0) - 1e-9)
        assert np.all(X_res <= X_scaled.max(axis=0) + 1e-9)

    @pytest.mark.parametrize("metric", ["accuracy", "gmean"])
    def test_metrics(self, blobs, metric):
        X, y = blobs
        ipade = IPADE(iterations=2, metric=metric, random_state=2)
        ipade.fit_resample(X, y)
        assert 0.0 <= ipade.fitness_ <= 1.0

    def test_string_labels_and_shuffled_data(self, blobs):
        X, y = blobs
        labels = np.where(y == 1, "fraud", "normal")
        _, y_res = IPADE(iterations=2, random_data=True, random_state=8).fit_resample(X, labels)
        assert set(y_res) == {"fraud", "normal"}

    def test_non_tree_estimator(self, blobs):
        X, y = blobs
        ipade = IPADE(iterations=2, estimator=KNeighborsClassifier(n_neighbors=1), random_state=4)
        _, y_res = ipade.fit_resample(X, y)
        assert set(y_res) == {0, 1}

    def test_single_class(self, blobs):
        X, _ = blobs
        with pytest.raises(DegenerateInput):
            IPADE().fit_resample(X, np.zeros(len(X)))

    def test_verbose_summary(self, blobs, capsys):
        X, y = blobs
        IPADE(iterations=2, verbose=True, random_state=1).fit_resample(X, y)
        out = capsys.readouterr().out
        assert "ORIGINAL SIZE: 38" in out
        assert "NEW IMBALANCED RATIO" in out


@pytest.fixture
def stalled_search(monkeypatch):
    """
    Hold the population fitness constant so no challenger ever improves, and
    record the target class of every optimization step together with the
    size of every population handed to the differential evolution.
    """
    record = {"targets": [], "sizes": []}

    monkeypatch.setattr(FitnessOracle, "fitness", lambda self, train_X, train_y, test_X, test_y: 0.5)

    run = DifferentialEvolution.run

    def recording_run(self, population, labels, data, classes):
        record["sizes"].append(len(population))
        return run(self, population, labels, data, classes)

    monkeypatch.setattr(DifferentialEvolution, "run", recording_run)

    target_class = IPADE._IPADE__target_class

    def recording_target_class(self, *args):
        target = target_class(self, *args)
        record["targets"].append(target)
        return target

    monkeypatch.setattr(IPADE, "_IPADE__target_class", recording_target_class)
    return record


class TestConvergence:
    @pytest.mark.parametrize("weakest", [0, 1])
    def test_weakest_class_is_targeted_first(self, blobs, monkeypatch, stalled_search, weakest):
        X, y = blobs
        monkeypatch.setattr(FitnessOracle, "accuracy",
                            lambda self, train_X, train_y, test_X, test_y: 0.2 if test_y[0] == weakest else 0.8)
        IPADE(iterations=2, random_state=7).fit_resample(X, y)
        attempts = MAX_FORCED_ITERATIONS + MAX_STAGNATION
        if weakest == 0:
            assert stalled_search["targets"] == [0] + [1] * attempts
        else:
            assert stalled_search["targets"] == [1] * attempts + [0]

    def test_minority_is_forced_then_stagnates(self, blobs, monkeypatch, stalled_search):
        X, y = blobs
        monkeypatch.setattr(FitnessOracle, "accuracy",
                            lambda self, train_X, train_y, test_X, test_y: 0.2 if test_y[0] == 0 else 0.8)
        ipade = IPADE(iterations=2, random_state=7)
        X_res, _ = ipade.fit_resample(X, y)

        majority, minority = ipade.class_states_[0], ipade.class_states_[1]
        assert (majority.marked, majority.stagnation, majority.optimized_iteration) == (True, 0, 0)
        assert (minority.marked, minority.stagnation, minority.optimized_iteration) == \
            (True, MAX_STAGNATION, MAX_FORCED_ITERATIONS)

        sizes = stalled_search["sizes"]
        initial = sizes[0]
        assert sizes[1] == initial + 1
        assert sizes[2:2 + MAX_FORCED_ITERATIONS] == list(range(initial + 1, initial + MAX_FORCED_ITERATIONS + 1))
        assert sizes[2 + MAX_FORCED_ITERATIONS:] == [initial + MAX_FORCED_ITERATIONS + 1] * MAX_STAGNATION
        assert len(X_res) == initial + MAX_FORCED_ITERATIONS


class TestFarthest:
    def test_skips_instances_already_in_population(self):
        X = np.array([[0.5, 0.5], [1.0, 1.0], [0.2, 0.3]])
        population = np.array([[0.0, 0.0], [0.0, 0.1], [1.0, 1.0]])
        # row 1 has the largest summed distance but is already a prototype
        assert IPADE()._IPADE__farthest(np.array([1, 2, 0]), X, population) == 0

    def test_falls_back_to_first_candidate(self):
        X = np.array([[0.0, 0.0], [1.0, 1.0]])
        population = np.array([[1.0, 1.0], [0.0, 0.0]])
        assert IPADE()._IPADE__farthest(np.array([1, 0]), X, population) == 1
