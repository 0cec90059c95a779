# IPADE.py
from dataclasses import dataclass

import numpy as np
from sklearn.tree import DecisionTreeClassifier

from .DifferentialEvolution import DifferentialEvolution, MutationStrategy
from .FitnessOracle import FitnessOracle, leaf_ids
from .ImbalanceSampler import ImbalanceSampler
from .Metrics import euclidean_pairwise
from .exceptions import InvalidParameter

MAX_FORCED_ITERATIONS = 10
MAX_STAGNATION = 10


@dataclass
class ClassState:
    """Convergence bookkeeping of one class during an IPADE run."""
    marked: bool = False
    stagnation: int = 0
    optimized_iteration: int = 0
    fitness: float = 0.0


class IPADE(ImbalanceSampler):
    """
    Iterative Instance Adjustment for Imbalanced Domains (IPADE-ID).

    Builds a small set of prototypes and optimizes their positions with
    differential evolution. The initial prototypes are the centroid-nearest
    instances of the leaves of a decision tree grown on the whole dataset.
    Afterwards, the class with the worst accuracy receives a new prototype
    and the population is evolved again, until no class improves any more.
    The minority (untouchable) class gets up to 10 forced iterations and is
    only given up after 10 attempts without improvement.

    Prototypes are clipped to [0, 1] on every mutation, so the features must
    already lie in [0, 1] unless ``normalize=True`` is set, in which case the
    prototypes are mapped back to the input scale.

    Source:
      López, V., Triguero, I., Carmona, C. J., García, S., & Herrera, F. (2014).
      Addressing imbalanced classification with instance generation techniques:
      IPADE-ID. Neurocomputing, 126, 15-28.

    Parameters:
        iterations (int): Iterations of every differential evolution run
        strategy (int): Mutation strategy of the differential evolution (1-4)
        random_choice (bool): Pick the new minority prototype at random. If
            False, the minority instance farthest from the population is used.
        estimator (object): Classifier used to score populations
            (default: DecisionTreeClassifier)
        metric (str): Fitness of a population: "auc", "accuracy" or "gmean"

    License: MIT License
    """
    def __init__(self, iterations=100, strategy=1, random_choice=True, estimator=None, metric="auc",
                 random_state=None, normalize=False, random_data=False, verbose=False):
        super().__init__(random_state=random_state, normalize=normalize,
                         random_data=random_data, verbose=verbose)
        self.iterations = iterations
        self.strategy = strategy
        self.random_choice = random_choice
        self.estimator = estimator
        self.metric = metric

    def __initial_prototypes(self, X, y, oracle, rng):
        model = oracle.train(X, y)
        if not hasattr(model, "apply"):
            model = FitnessOracle(DecisionTreeClassifier(), random_state=oracle.random_state).train(X, y)
        leaves = leaf_ids(model, X)

        selected = []
        for leaf in np.unique(leaves):
            cluster = np.where(leaves == leaf)[0]
            centroid = X[cluster].mean(axis=0)
            selected.append(cluster[np.argmin(euclidean_pairwise(centroid, X[cluster]))])

        selected_classes = set(y[selected])
        for target in self.classes_:
            if target not in selected_classes:
                same_class = rng.permutation(np.where(y == target)[0])
                selected.extend(same_class[:2])

        selected = np.asarray(selected, dtype=int)
        return X[selected], y[selected]

    def __farthest(self, candidates, X, population):
        best, best_distance = candidates[0], -1.0
        for z in candidates:
            distances = np.abs(population - X[z]).sum(axis=1)
            # instances already in the population are never picked
            if np.any(distances == 0):
                continue
            if distances.sum() > best_distance:
                best, best_distance = z, distances.sum()
        return best

    def __challenger(self, target, state, alternative, population, labels, X, y, rng):
        if target == self.untouchable_class_ and state.stagnation > 0 and alternative is not None:
            return alternative[0].copy(), alternative[1].copy()

        same_class = np.where(y == target)[0]
        if self.random_choice or target != self.untouchable_class_:
            chosen = same_class[rng.randint(len(same_class))]
        else:
            chosen = self.__farthest(same_class, X, population)

        return np.vstack([population, X[chosen]]), np.append(labels, y[chosen])

    def __target_class(self, states, population, labels, X, y, oracle):
        target, lowest = None, np.inf
        for c in self.classes_:
            state = states[c]
            if state.marked:
                continue
            same_class = np.where(y == c)[0]
            if len(same_class) < 2:
                state.marked = True
                continue
            state.fitness = oracle.accuracy(population, labels, X[same_class], y[same_class])
            if state.fitness < lowest:
                target, lowest = c, state.fitness
        return target

    def __optimize(self, population, labels, X, y, states, evolution, oracle, rng):
        alternative = None
        while not all(state.marked for state in states.values()):
            target = self.__target_class(states, population, labels, X, y, oracle)
            if target is None:
                break
            state = states[target]

            seed_population, seed_labels = self.__challenger(target, state, alternative,
                                                             population, labels, X, y, rng)
            tester, tester_labels, _ = evolution.run(seed_population, seed_labels, X, y)

            fitness = oracle.fitness(population, labels, X, y)
            trial_fitness = oracle.fitness(tester, tester_labels, X, y)

            if trial_fitness > fitness:
                state.optimized_iteration += 1
                state.stagnation = 0
                population, labels = tester, tester_labels
            elif target == self.untouchable_class_ and state.optimized_iteration < MAX_FORCED_ITERATIONS:
                state.optimized_iteration += 1
                population, labels = tester, tester_labels
            elif target == self.untouchable_class_:
                alternative = (tester, tester_labels)
                state.stagnation += 1
                if state.stagnation >= MAX_STAGNATION:
                    state.marked = True
            else:
                state.marked = True

        return population, labels

    def _fit_resample(self, X, y, rng):
        strategy = MutationStrategy.from_value(self.strategy)
        if self.iterations < 1:
            raise InvalidParameter("iterations", self.iterations)

        _, first_seen = np.unique(y, return_index=True)
        self.classes_ = y[np.sort(first_seen)]

        oracle = FitnessOracle(self.estimator, self.metric, random_state=rng.randint(np.iinfo(np.int32).max))
        evolution = DifferentialEvolution(oracle, iterations=self.iterations, strategy=strategy, random_state=rng)

        init_population, init_labels = self.__initial_prototypes(X, y, oracle, rng)
        population, labels, _ = evolution.run(init_population, init_labels, X, y)

        states = {c: ClassState() for c in self.classes_}
        population, labels = self.__optimize(population, labels, X, y, states, evolution, oracle, rng)

        self.class_states_ = states
        self.fitness_ = oracle.fitness(population, labels, X, y)
        if self.scaler_ is not None:
            population = self.scaler_.inverse_transform(population)
        return population, labels, None
