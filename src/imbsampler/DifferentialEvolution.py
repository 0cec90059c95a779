# DifferentialEvolution.py
from enum import Enum

import numpy as np
from sklearn.utils import check_random_state

from .NeighbourRules import nearest_distinct_same_class
from .exceptions import InvalidParameter

GOLDEN_RATIO = (1 + np.sqrt(5)) / 2


class MutationStrategy(Enum):
    """Mutation schemes of the differential evolution, numbered as in IPADE-ID."""
    RAND_ONE = 1
    CURRENT_TO_NEAREST = 2
    RAND_TO_CURRENT = 3
    RAND_TWO = 4

    @classmethod
    def from_value(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidParameter("strategy", value, [s.value for s in cls]) from None


class LocalSearch(Enum):
    GOLDEN_SECTION = "golden_section"
    HILL_CLIMBING = "hill_climbing"
    NONE = "none"

    @classmethod
    def select(cls, rand_j, tau):
        if rand_j < tau[0]:
            return cls.GOLDEN_SECTION
        if tau[0] <= rand_j < tau[1]:
            return cls.HILL_CLIMBING
        return cls.NONE


def _rand_one(current, donors, fi, same_class, rng):
    r1, r2, r3 = donors[0], donors[1], donors[2]
    return r1 + (r2 - r3) * fi


def _current_to_nearest(current, donors, fi, same_class, rng):
    r1, r2 = donors[0], donors[1]
    nearest = nearest_distinct_same_class(current, same_class)
    return current + (r1 - r2) * fi + (nearest - current) * fi


def _rand_to_current(current, donors, fi, same_class, rng):
    r1, r2, r3 = donors[0], donors[1], donors[2]
    r = rng.rand()
    return ((r2 - r3) + (r1 - current)) * fi * r


def _rand_two(current, donors, fi, same_class, rng):
    r2, r3, r4, r5 = donors[1], donors[2], donors[3], donors[4]
    return (r2 - r3) * fi + (r4 - r5) * fi


MUTATIONS = {
    MutationStrategy.RAND_ONE: _rand_one,
    MutationStrategy.CURRENT_TO_NEAREST: _current_to_nearest,
    MutationStrategy.RAND_TO_CURRENT: _rand_to_current,
    MutationStrategy.RAND_TWO: _rand_two,
}


class DifferentialEvolution:
    """
    Differential evolution over a set of prototypes.

    Every 10th iteration one of two local searches tunes the scaling factor
    of the configured mutation strategy (golden-section search or
    hill-climbing), chosen once per run from two random thresholds; the
    remaining probability leaves the population untouched. Every other
    iteration applies a crossover with a random scaling factor. A challenger
    population replaces the current one only if its fitness is strictly
    higher.

    Source:
      López, V., Triguero, I., Carmona, C. J., García, S., & Herrera, F. (2014).
      Addressing imbalanced classification with instance generation techniques:
      IPADE-ID. Neurocomputing, 126, 15-28.

    Parameters:
        oracle (FitnessOracle): Scores candidate populations
        iterations (int): Number of iterations
        strategy (int): Mutation strategy used by the local searches (1-4)
        random_state (int or RandomState): Source of every random draw
    """
    def __init__(self, oracle, iterations=100, strategy=1, random_state=None):
        self.oracle = oracle
        self.iterations = iterations
        self.strategy = strategy
        self.random_state = random_state
        self.rng = check_random_state(random_state)

    def _fitness(self, population, labels, data, classes):
        return self.oracle.fitness(population, labels, data, classes)

    def _donors(self, current, label, data, classes, needed):
        """
        Pick ``needed`` distinct same-class rows of ``data`` in random order.
        Missing donors are replaced by jittered copies of ``current``.
        """
        same_class = data[classes == label]
        pool = same_class
        if len(pool) < needed:
            jitter = [current + self.rng.uniform(-0.01 * j, 0.01 * j, size=len(current))
                      for j in range(1, needed - len(pool) + 1)]
            pool = np.vstack([pool] + jitter)
        order = self.rng.permutation(len(pool))[:needed]
        return pool[order], same_class

    def mutant(self, population, labels, data, classes, fi, strategy=1):
        """Mutate every individual of ``population`` with scaling factor ``fi``."""
        handler = MUTATIONS[MutationStrategy.from_value(strategy)]
        new_population = np.empty_like(population, dtype=float)
        for i, (current, label) in enumerate(zip(population, labels)):
            donors, same_class = self._donors(current, label, data, classes, 5)
            new_population[i] = np.clip(handler(current, donors, fi, same_class, self.rng), 0, 1)
        return new_population, np.array(labels, copy=True)

    def crossover(self, population, labels, data, classes):
        fi = self.rng.rand()
        new_population = np.empty_like(population, dtype=float)
        for i, (current, label) in enumerate(zip(population, labels)):
            (r1, r2, r3), _ = self._donors(current, label, data, classes, 3)
            r = self.rng.rand()
            new_population[i] = np.clip(current + (r2 - r3) * fi * r + (r1 - current) * r, 0, 1)
        return new_population, np.array(labels, copy=True)

    def _scaling_fitness(self, population, labels, data, classes, fi, strategy):
        new_population, new_labels = self.mutant(population, labels, data, classes, fi, strategy)
        return self._fitness(new_population, new_labels, data, classes)

    def golden_section_search(self, population, labels, data, classes, strategy, rounds=8):
        """
        Narrow the scaling factor bracket [0.1, 1.0] by the golden ratio and
        mutate with the better of the last two probed factors.
        """
        a, b = 0.1, 1.0
        fi1 = fi2 = 0.0
        fitness1 = fitness2 = 0.0
        for _ in range(rounds):
            fi1 = b - (b - a) / GOLDEN_RATIO
            fi2 = a + (b - a) / GOLDEN_RATIO
            fitness1 = self._scaling_fitness(population, labels, data, classes, fi1, strategy)
            fitness2 = self._scaling_fitness(population, labels, data, classes, fi2, strategy)
            if fitness1 > fitness2:
                b = fi2
            else:
                a = fi1

        scaling = fi1 if fitness1 > fitness2 else fi2
        return self.mutant(population, labels, data, classes, scaling, strategy)

    def hill_climbing(self, population, labels, data, classes, strategy, scaling_factor=0.5, rounds=20):
        """
        Move the scaling factor towards the best of {fi - h, fi, fi + h},
        halving h whenever fi itself wins, and mutate with the result.
        """
        h = 0.5
        fi = scaling_factor
        for _ in range(rounds):
            fitness1 = self._scaling_fitness(population, labels, data, classes, fi - h, strategy)
            fitness2 = self._scaling_fitness(population, labels, data, classes, fi, strategy)
            fitness3 = self._scaling_fitness(population, labels, data, classes, fi + h, strategy)

            if fitness1 >= fitness2 and fitness1 >= fitness3:
                fi = fi - h
            elif fitness2 >= fitness1 and fitness2 >= fitness3:
                h = h / 2
            else:
                fi = fi + h

        return self.mutant(population, labels, data, classes, fi, strategy)

    def run(self, population, labels, data, classes):
        """
        Evolve ``population`` against the working set (``data``, ``classes``).

        Returns:
            tuple: (population, labels, fitness) of the best population found
        """
        strategy = MutationStrategy.from_value(self.strategy)
        population = np.asarray(population, dtype=float).copy()
        labels = np.asarray(labels).copy()
        data = np.asarray(data, dtype=float)
        classes = np.asarray(classes)

        rand_j = self.rng.rand()
        tau = (self.rng.rand(), self.rng.rand())
        search = LocalSearch.select(rand_j, tau)

        fitness = self._fitness(population, labels, data, classes)
        for iteration in range(self.iterations):
            if iteration % 10 == 0:
                if search is LocalSearch.GOLDEN_SECTION:
                    trial = self.golden_section_search(population, labels, data, classes, strategy)
                elif search is LocalSearch.HILL_CLIMBING:
                    trial = self.hill_climbing(population, labels, data, classes, strategy)
                else:
                    continue
            else:
                trial = self.crossover(population, labels, data, classes)

            trial_fitness = self._fitness(trial[0], trial[1], data, classes)
            if trial_fitness > fitness:
                fitness = trial_fitness
                population, labels = trial

        return population, labels, fitness
